from rest_framework import serializers
from core_backend.base import TimestampedSerializer
from .models import Table


class TableSerializer(TimestampedSerializer):
    assigned_waiter_name = serializers.CharField(
        source="assigned_waiter.display_name", read_only=True, default=None
    )

    class Meta:
        model = Table
        fields = [
            "id",
            "number",
            "capacity",
            "status",
            "assigned_waiter",
            "assigned_waiter_name",
            "current_order",
            "location",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["status", "assigned_waiter", "current_order"]


class TableCreateSerializer(serializers.Serializer):
    number = serializers.IntegerField(min_value=1)
    capacity = serializers.IntegerField(min_value=1)
    location = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")
    status = serializers.ChoiceField(
        choices=[
            Table.TableStatus.AVAILABLE,
            Table.TableStatus.RESERVED,
            Table.TableStatus.MAINTENANCE,
        ],
        default=Table.TableStatus.AVAILABLE,
    )


class TableUpdateSerializer(serializers.Serializer):
    number = serializers.IntegerField(min_value=1, required=False)
    capacity = serializers.IntegerField(min_value=1, required=False)
    location = serializers.CharField(max_length=100, required=False, allow_blank=True)


class TableStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Table.TableStatus.choices)


class AssignWaiterSerializer(serializers.Serializer):
    waiter_id = serializers.IntegerField(allow_null=True)
