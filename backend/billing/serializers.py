from rest_framework import serializers
from core_backend.base import BaseModelSerializer, TimestampedSerializer
from .models import Bill, BillItem


class BillItemSerializer(BaseModelSerializer):
    class Meta:
        model = BillItem
        fields = ["id", "menu_item_id", "name", "quantity", "unit_price", "line_total", "notes"]
        read_only_fields = fields


class BillSerializer(TimestampedSerializer):
    items = BillItemSerializer(many=True, read_only=True)

    class Meta:
        model = Bill
        fields = [
            "id",
            "order",
            "table_number",
            "customer_name",
            "waiter_name",
            "items",
            "subtotal",
            "tax_rate",
            "tax",
            "total",
            "payment_method",
            "payment_status",
            "created_at",
            "updated_at",
            "paid_at",
        ]
        read_only_fields = fields


class GenerateBillSerializer(serializers.Serializer):
    order_id = serializers.UUIDField()
    payment_method = serializers.ChoiceField(choices=Bill.PaymentMethod.choices, required=False)


class PayBillSerializer(serializers.Serializer):
    payment_method = serializers.ChoiceField(choices=Bill.PaymentMethod.choices)
