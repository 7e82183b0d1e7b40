import logging

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from core_backend.base import BaseViewSet
from core_backend.exceptions import NotFoundError, ValidationError
from users.models import User
from users.permissions import IsManager, IsWaiterOrManager
from .filters import TableFilter
from .models import Table
from .serializers import (
    AssignWaiterSerializer,
    TableCreateSerializer,
    TableSerializer,
    TableStatusSerializer,
    TableUpdateSerializer,
)
from .services import TableStatusService

logger = logging.getLogger(__name__)


class TableViewSet(BaseViewSet):
    """
    Floor plan endpoints.

    Status changes are exposed as actions so every write goes through
    TableStatusService.
    """

    queryset = Table.objects.select_related("assigned_waiter", "current_order")
    serializer_class = TableSerializer
    filterset_class = TableFilter
    search_fields = ["location"]
    ordering_fields = ["number", "capacity", "status"]
    ordering = ["number"]

    def get_permissions(self):
        if self.action == "available":
            return [AllowAny()]
        if self.action in ["list", "retrieve", "assist", "clear_assistance"]:
            return [IsWaiterOrManager()]
        return [IsManager()]

    def create(self, request, *args, **kwargs):
        serializer = TableCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        table = TableStatusService.create_table(**serializer.validated_data)
        return Response(TableSerializer(table).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        table = self.get_object()
        serializer = TableUpdateSerializer(data=request.data, partial=kwargs.get("partial", False))
        serializer.is_valid(raise_exception=True)
        table = TableStatusService.update_table(table.pk, **serializer.validated_data)
        return Response(TableSerializer(table).data)

    def destroy(self, request, *args, **kwargs):
        table = self.get_object()
        TableStatusService.delete_table(table.pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=["get"], url_path="available")
    def available(self, request):
        """Available tables, smallest first. ?min_capacity=4 narrows by party size."""
        min_capacity = request.query_params.get("min_capacity")
        if min_capacity is not None:
            try:
                min_capacity = int(min_capacity)
            except ValueError:
                raise ValidationError(
                    "min_capacity must be an integer",
                    errors={"min_capacity": ["must be an integer"]},
                )
        tables = TableStatusService.list_available(min_capacity)
        return Response(TableSerializer(tables, many=True).data)

    @action(detail=True, methods=["post"], url_path="status")
    def set_status(self, request, pk=None):
        table = self.get_object()
        serializer = TableStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        table = TableStatusService.set_status(table.pk, serializer.validated_data["status"])
        return Response(TableSerializer(table).data)

    @action(detail=True, methods=["post"], url_path="assign")
    def assign(self, request, pk=None):
        table = self.get_object()
        serializer = AssignWaiterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        waiter_id = serializer.validated_data["waiter_id"]
        waiter = None
        if waiter_id is not None:
            try:
                waiter = User.objects.get(pk=waiter_id, role=User.Role.WAITER, is_active=True)
            except User.DoesNotExist:
                raise NotFoundError("Waiter", waiter_id)

        table = TableStatusService.assign_waiter(table.pk, waiter)
        return Response(TableSerializer(table).data)

    @action(detail=True, methods=["post"], url_path="assist")
    def assist(self, request, pk=None):
        """Waiter flags the table as needing attention."""
        table = self.get_object()
        table = TableStatusService.mark_needs_assistance(table.pk, request.user)
        return Response(TableSerializer(table).data)

    @action(detail=True, methods=["post"], url_path="clear-assistance")
    def clear_assistance(self, request, pk=None):
        table = self.get_object()
        table = TableStatusService.clear_assistance(table.pk, request.user)
        return Response(TableSerializer(table).data)

    @action(detail=True, methods=["post"], url_path="release")
    def release(self, request, pk=None):
        table = self.get_object()
        table = TableStatusService.release(table.pk)
        return Response(TableSerializer(table).data)
