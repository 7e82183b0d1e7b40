from django.db.models import Prefetch
import logging

from orders.models import Order, OrderItem

logger = logging.getLogger(__name__)


class KitchenService:
    """Service for kitchen-related reads - the live queue and a chef's tickets."""

    @staticmethod
    def get_queue(status=None):
        """
        Orders the kitchen still has to deal with, oldest first.

        `status` optionally narrows to one of pending / preparing / ready.
        """
        qs = (
            Order.objects.in_kitchen()
            .select_related("assigned_chef", "assigned_waiter", "table")
            .prefetch_related(Prefetch("items", queryset=OrderItem.objects.order_by("id")))
            .order_by("created_at")
        )
        if status:
            qs = qs.filter(status=status)
        return qs

    @staticmethod
    def get_chef_orders(chef):
        """Orders a chef has accepted and not yet finished."""
        return KitchenService.get_queue(Order.OrderStatus.PREPARING).filter(assigned_chef=chef)
