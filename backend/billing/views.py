from rest_framework import status
from rest_framework.decorators import action
from rest_framework.response import Response

from core_backend.base import ReadOnlyBaseViewSet
from orders.serializers import OrderSerializer
from tables.serializers import TableSerializer
from users.permissions import IsWaiterOrManager
from .filters import BillFilter
from .models import Bill
from .serializers import BillSerializer, GenerateBillSerializer, PayBillSerializer
from .services import BillingService


class BillViewSet(ReadOnlyBaseViewSet):
    """
    Bills are generated from served orders and paid once.

    POST /bills/generate/      {"order_id", "payment_method"?}
    POST /bills/{id}/pay/      {"payment_method"}
    """

    queryset = Bill.objects.prefetch_related("items")
    serializer_class = BillSerializer
    permission_classes = [IsWaiterOrManager]
    filterset_class = BillFilter
    ordering_fields = ["created_at", "total"]
    ordering = ["-created_at"]

    @action(detail=False, methods=["post"], url_path="generate")
    def generate(self, request):
        serializer = GenerateBillSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        bill = BillingService.generate_bill(
            serializer.validated_data["order_id"],
            serializer.validated_data.get("payment_method"),
        )
        bill = BillingService.get_bill(bill.pk)
        return Response(BillSerializer(bill).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"], url_path="pay")
    def pay(self, request, pk=None):
        """Settle the bill. Returns the paid bill, the paid order and the released table."""
        serializer = PayBillSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        bill = BillingService.finalize_payment(pk, serializer.validated_data["payment_method"])

        bill = BillingService.get_bill(bill.pk)
        order = bill.order
        return Response(
            {
                "bill": BillSerializer(bill).data,
                "order": OrderSerializer(order).data,
                "table": TableSerializer(order.table).data,
            }
        )
