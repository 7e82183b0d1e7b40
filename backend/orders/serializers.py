from rest_framework import serializers
from core_backend.base import BaseModelSerializer, TimestampedSerializer
from .models import Order, OrderItem


class OrderItemSerializer(BaseModelSerializer):
    line_total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = OrderItem
        fields = ["id", "menu_item", "name", "quantity", "price_at_sale", "notes", "line_total"]
        read_only_fields = fields


class OrderSerializer(TimestampedSerializer):
    table_number = serializers.IntegerField(source="table_id", read_only=True)
    waiter_name = serializers.CharField(
        source="assigned_waiter.display_name", read_only=True, default=None
    )
    items = OrderItemSerializer(many=True, read_only=True)
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    estimated_ready_at = serializers.DateTimeField(read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "table_number",
            "status",
            "customer_name",
            "assigned_waiter",
            "waiter_name",
            "assigned_chef",
            "chef_name",
            "estimated_prep_minutes",
            "start_time",
            "estimated_ready_at",
            "items",
            "subtotal",
            "created_at",
            "updated_at",
            "ready_at",
            "served_at",
            "paid_at",
        ]
        read_only_fields = fields


# --- Request payloads ---

class OrderItemInputSerializer(serializers.Serializer):
    menu_item_id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1)
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class OrderCreateSerializer(serializers.Serializer):
    table_number = serializers.IntegerField(min_value=1)
    items = OrderItemInputSerializer(many=True, allow_empty=False)
    customer_name = serializers.CharField(max_length=200, required=False, allow_blank=True, default="")
    waiter_id = serializers.IntegerField(required=False, allow_null=True)


class AdvanceOrderSerializer(serializers.Serializer):
    """Generic transition request; the fields needed depend on `status`."""

    status = serializers.ChoiceField(choices=Order.OrderStatus.choices)
    chef_id = serializers.IntegerField(required=False)
    estimated_prep_minutes = serializers.IntegerField(required=False, min_value=1)
    confirmed = serializers.BooleanField(required=False, default=False)


class AcceptOrderSerializer(serializers.Serializer):
    estimated_prep_minutes = serializers.IntegerField(min_value=1)


class ServeOrderSerializer(serializers.Serializer):
    confirmed = serializers.BooleanField()
