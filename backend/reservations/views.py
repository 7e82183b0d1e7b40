from rest_framework import status
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from core_backend.base import BaseViewSet
from users.permissions import IsManager, IsWaiterOrManager
from .filters import ReservationFilter
from .models import Reservation
from .serializers import (
    ReservationRequestSerializer,
    ReservationSerializer,
    ReservationUpdateSerializer,
)
from .services import ReservationService


class ReservationViewSet(BaseViewSet):
    """
    Guests book tables without an account; staff read the book and
    managers confirm, cancel or edit entries.
    """

    queryset = Reservation.objects.all()
    serializer_class = ReservationSerializer
    filterset_class = ReservationFilter
    search_fields = ["customer_name", "customer_email"]
    ordering_fields = ["date", "start_time", "created_at"]
    ordering = ["date", "start_time"]
    http_method_names = ["get", "post", "put", "patch", "head", "options"]

    def get_permissions(self):
        if self.action == "create":
            return [AllowAny()]
        if self.action in ["list", "retrieve"]:
            return [IsWaiterOrManager()]
        return [IsManager()]

    def create(self, request, *args, **kwargs):
        serializer = ReservationRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        reservation = ReservationService.create_reservation(**serializer.validated_data)
        return Response(ReservationSerializer(reservation).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        serializer = ReservationUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        reservation = ReservationService.update_reservation(kwargs["pk"], **serializer.validated_data)
        return Response(ReservationSerializer(reservation).data)

    @action(detail=True, methods=["post"], url_path="confirm")
    def confirm(self, request, pk=None):
        reservation = ReservationService.confirm_reservation(pk)
        return Response(ReservationSerializer(reservation).data)

    @action(detail=True, methods=["post"], url_path="cancel")
    def cancel(self, request, pk=None):
        reservation = ReservationService.cancel_reservation(pk)
        return Response(ReservationSerializer(reservation).data)
