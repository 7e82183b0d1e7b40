from rest_framework import serializers
from core_backend.base import BaseModelSerializer
from .models import User


class StaffSerializer(BaseModelSerializer):
    """Read-only staff representation used by dashboards and nested references."""

    display_name = serializers.CharField(read_only=True)

    class Meta:
        model = User
        fields = ["id", "username", "first_name", "last_name", "display_name", "role", "is_active"]
        read_only_fields = fields
