from decimal import Decimal

from django.db.models import DecimalField, ExpressionWrapper, F, Sum
from django.utils import timezone

from billing.money import quantize
from orders.models import Order, OrderItem
from tables.models import Table


class WaiterStatsService:
    """Numbers shown on a waiter's dashboard."""

    @staticmethod
    def get_stats(waiter) -> dict:
        active_tables = Table.objects.filter(
            assigned_waiter=waiter, status__in=Table.SEATED_STATUSES
        ).count()

        pending_orders = Order.objects.filter(
            assigned_waiter=waiter,
            status__in=[Order.OrderStatus.PENDING, Order.OrderStatus.PREPARING],
        ).count()

        line_total = ExpressionWrapper(
            F("quantity") * F("price_at_sale"),
            output_field=DecimalField(max_digits=12, decimal_places=2),
        )
        today_revenue = OrderItem.objects.filter(
            order__assigned_waiter=waiter,
            order__created_at__date=timezone.localdate(),
        ).aggregate(total=Sum(line_total))["total"] or Decimal("0.00")

        total_tables_served = Order.objects.filter(
            assigned_waiter=waiter, status=Order.OrderStatus.PAID
        ).count()

        return {
            "waiter_id": waiter.pk,
            "active_tables": active_tables,
            "pending_orders": pending_orders,
            "today_revenue": str(quantize(today_revenue)),
            "total_tables_served": total_tables_served,
        }
