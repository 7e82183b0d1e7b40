from django.db import transaction
from django.dispatch import Signal, receiver
import logging

logger = logging.getLogger(__name__)

# Sent after the unit of work that changed an order's status commits.
# kwargs: order, previous_status, new_status
order_status_changed = Signal()


def send_status_changed_on_commit(order, previous_status):
    new_status = order.status
    transaction.on_commit(
        lambda: order_status_changed.send(
            sender=order.__class__,
            order=order,
            previous_status=previous_status,
            new_status=new_status,
        )
    )


@receiver(order_status_changed)
def log_order_status_change(sender, order, previous_status, new_status, **kwargs):
    logger.info(
        f"Order {order.pk} on table {order.table_id}: {previous_status or 'new'} -> {new_status}"
    )
