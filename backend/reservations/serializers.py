from rest_framework import serializers
from core_backend.base import TimestampedSerializer
from .models import Reservation


class ReservationSerializer(TimestampedSerializer):
    table_number = serializers.IntegerField(source="table_id", read_only=True)

    class Meta:
        model = Reservation
        fields = [
            "id",
            "customer_name",
            "customer_email",
            "customer_phone",
            "table_number",
            "date",
            "start_time",
            "end_time",
            "guests",
            "special_requests",
            "status",
            "created_at",
            "updated_at",
            "cancelled_at",
        ]
        read_only_fields = fields


class ReservationRequestSerializer(serializers.Serializer):
    """
    Booking request. Only types are checked here; business rules
    (end after start, capacity, overlap) live in ReservationService.
    """

    customer_name = serializers.CharField(max_length=200)
    customer_email = serializers.CharField(max_length=254)
    customer_phone = serializers.CharField(max_length=30, required=False, allow_blank=True, default="")
    table_number = serializers.IntegerField()
    date = serializers.DateField()
    start_time = serializers.TimeField()
    end_time = serializers.TimeField()
    guests = serializers.IntegerField()
    special_requests = serializers.CharField(required=False, allow_blank=True, default="")


class ReservationUpdateSerializer(serializers.Serializer):
    customer_name = serializers.CharField(max_length=200, required=False)
    customer_email = serializers.CharField(max_length=254, required=False)
    customer_phone = serializers.CharField(max_length=30, required=False, allow_blank=True)
    table_number = serializers.IntegerField(required=False)
    date = serializers.DateField(required=False)
    start_time = serializers.TimeField(required=False)
    end_time = serializers.TimeField(required=False)
    guests = serializers.IntegerField(required=False)
    special_requests = serializers.CharField(required=False, allow_blank=True)
