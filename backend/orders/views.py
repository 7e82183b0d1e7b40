import logging

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core_backend.base import BaseViewSet
from users.permissions import IsChef, IsWaiterOrManager
from .filters import OrderFilter
from .models import Order, OrderItem
from .serializers import (
    AcceptOrderSerializer,
    AdvanceOrderSerializer,
    OrderCreateSerializer,
    OrderItemSerializer,
    OrderSerializer,
    ServeOrderSerializer,
)
from .services import KitchenService, OrderLifecycleService, OrderService

logger = logging.getLogger(__name__)


class OrderViewSet(BaseViewSet):
    """
    Orders are opened by waiters, moved through the kitchen by chefs and
    served by waiters. Payment happens through the billing endpoints.
    """

    queryset = Order.objects.select_related(
        "assigned_waiter", "assigned_chef", "table"
    ).prefetch_related("items")
    serializer_class = OrderSerializer
    filterset_class = OrderFilter
    search_fields = ["customer_name"]
    ordering_fields = ["created_at", "status"]
    ordering = ["-created_at"]
    http_method_names = ["get", "post", "head", "options"]

    def get_permissions(self):
        if self.action in ["create", "serve"]:
            return [IsWaiterOrManager()]
        if self.action in ["accept", "complete", "kitchen_queue"]:
            return [IsChef()]
        return [IsAuthenticated()]

    def create(self, request, *args, **kwargs):
        serializer = OrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        if data.get("waiter_id") is not None:
            waiter = OrderService.resolve_waiter(data["waiter_id"])
        else:
            waiter = request.user if request.user.is_waiter else None

        order = OrderService.create_order(
            table_number=data["table_number"],
            items=data["items"],
            waiter=waiter,
            customer_name=data.get("customer_name", ""),
        )
        return Response(self._render(order), status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"], url_path="advance")
    def advance(self, request, pk=None):
        """
        Generic transition: {"status": "...", ...payload}.
        chef_id defaults to the calling user for kitchen transitions.
        """
        serializer = AdvanceOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        payload = dict(serializer.validated_data)
        new_status = payload.pop("status")

        if new_status in [Order.OrderStatus.PREPARING, Order.OrderStatus.READY]:
            if not IsChef().has_permission(request, self):
                raise PermissionDenied("Only kitchen staff can move orders through preparation.")
            payload.setdefault("chef_id", request.user.pk)
        elif new_status == Order.OrderStatus.SERVED:
            if not IsWaiterOrManager().has_permission(request, self):
                raise PermissionDenied("Only floor staff can serve orders.")

        order = OrderLifecycleService.advance(pk, new_status, payload)
        return Response(self._render(order))

    @action(detail=True, methods=["post"], url_path="accept")
    def accept(self, request, pk=None):
        serializer = AcceptOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = OrderLifecycleService.accept(
            pk, request.user, serializer.validated_data["estimated_prep_minutes"]
        )
        return Response(self._render(order))

    @action(detail=True, methods=["post"], url_path="complete")
    def complete(self, request, pk=None):
        order = OrderLifecycleService.complete(pk, request.user)
        return Response(self._render(order))

    @action(detail=True, methods=["post"], url_path="serve")
    def serve(self, request, pk=None):
        serializer = ServeOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = OrderLifecycleService.serve(pk, serializer.validated_data["confirmed"])
        return Response(self._render(order))

    @action(detail=False, methods=["get"], url_path="kitchen-queue")
    def kitchen_queue(self, request):
        """Pending, preparing and ready orders, oldest first."""
        orders = KitchenService.get_queue(request.query_params.get("status"))
        return Response(OrderSerializer(orders, many=True).data)

    def _render(self, order):
        order = self.get_queryset().get(pk=order.pk)
        return OrderSerializer(order, context={"request": self.request}).data


class OrderItemViewSet(viewsets.ReadOnlyModelViewSet):
    """Line items of one order: /orders/{order_pk}/items/"""

    serializer_class = OrderItemSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = None

    def get_queryset(self):
        return OrderItem.objects.filter(order_id=self.kwargs["order_pk"]).order_by("id")
