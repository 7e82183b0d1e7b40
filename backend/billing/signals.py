from django.db import transaction
from django.dispatch import Signal, receiver
import logging

logger = logging.getLogger(__name__)

# Custom payment signals
# kwargs: bill, order, table
payment_completed = Signal()


def send_payment_completed_on_commit(bill, order, table):
    transaction.on_commit(
        lambda: payment_completed.send(sender=bill.__class__, bill=bill, order=order, table=table)
    )


@receiver(payment_completed)
def log_payment_completed(sender, bill, order, table, **kwargs):
    logger.info(
        f"Bill {bill.pk} paid by {bill.payment_method}: {bill.total} for order {order.pk}, "
        f"table {table.number} released"
    )
