from rest_framework import serializers
from core_backend.base import TimestampedSerializer
from .models import MenuItem


class MenuItemSerializer(TimestampedSerializer):
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    ingredients = serializers.ListField(child=serializers.CharField(), required=False)
    allergens = serializers.ListField(child=serializers.CharField(), required=False)

    class Meta:
        model = MenuItem
        fields = [
            "id",
            "name",
            "description",
            "price",
            "category",
            "image_url",
            "ingredients",
            "allergens",
            "available",
            "created_at",
            "updated_at",
        ]


class MenuAvailabilitySerializer(serializers.Serializer):
    available = serializers.BooleanField()
