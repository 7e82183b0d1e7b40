from rest_framework import serializers
from core_backend.base import TimestampedSerializer
from .models import Feedback


class FeedbackSerializer(TimestampedSerializer):
    class Meta:
        model = Feedback
        fields = [
            "id",
            "customer_name",
            "customer_email",
            "rating",
            "comment",
            "status",
            "reviewed_by",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class FeedbackSubmitSerializer(serializers.Serializer):
    customer_name = serializers.CharField(max_length=200)
    customer_email = serializers.EmailField(required=False, allow_blank=True, default="")
    rating = serializers.IntegerField()
    comment = serializers.CharField(required=False, allow_blank=True, default="")
