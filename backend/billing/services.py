"""
Billing Finalizer.

generate_bill snapshots a served order into an immutable Bill.
finalize_payment settles a bill, marks its order paid and frees the table as
one unit of work. Rows are locked bill -> order -> table.
"""
import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.utils import timezone

from core_backend.exceptions import AlreadyPaid, InvalidTransition, NotFoundError, ValidationError
from core_backend.utils.transactions import atomic_with_retry
from orders.models import Order
from orders.services import OrderLifecycleService
from tables.services import TableStatusService
from .models import Bill, BillItem
from .money import compute_totals, get_tax_rate, line_total
from .signals import send_payment_completed_on_commit

logger = logging.getLogger(__name__)


class BillingService:

    @staticmethod
    def validate_payment_method(payment_method):
        if payment_method not in Bill.PaymentMethod.values:
            raise ValidationError(
                f"Unknown payment method '{payment_method}'",
                errors={"payment_method": [f"must be one of {', '.join(Bill.PaymentMethod.values)}"]},
            )

    @staticmethod
    def get_bill(bill_id) -> Bill:
        try:
            return Bill.objects.prefetch_related("items").get(pk=bill_id)
        except (Bill.DoesNotExist, ValueError, TypeError, DjangoValidationError):
            raise NotFoundError("Bill", bill_id)

    @staticmethod
    def _lock_bill(bill_id) -> Bill:
        try:
            return Bill.objects.select_for_update().get(pk=bill_id)
        except (Bill.DoesNotExist, ValueError, TypeError, DjangoValidationError):
            raise NotFoundError("Bill", bill_id)

    @staticmethod
    @atomic_with_retry
    def generate_bill(order_id, payment_method_hint=None) -> Bill:
        """
        Snapshot a served order into a pending bill. The order is not modified.

        Raises:
            NotFoundError: unknown order
            AlreadyPaid: the order has been settled
            InvalidTransition: the order has not been served yet
            ValidationError: the order has no items or the method hint is unknown
        """
        payment_method = payment_method_hint or Bill.PaymentMethod.CASH
        BillingService.validate_payment_method(payment_method)

        order = OrderLifecycleService.lock_order(order_id)

        if order.status == Order.OrderStatus.PAID:
            raise AlreadyPaid(order_id=order.pk)
        if order.status != Order.OrderStatus.SERVED:
            raise InvalidTransition(
                order.status,
                "billed",
                message=f"Order {order.pk} is {order.status}; it must be served before billing",
            )

        items = list(order.items.order_by("id"))
        if not items:
            raise ValidationError(
                f"Order {order.pk} has no items to bill",
                errors={"items": ["must not be empty"]},
            )

        tax_rate = get_tax_rate()
        subtotal, tax, total = compute_totals(
            [(item.price_at_sale, item.quantity) for item in items], tax_rate
        )

        bill = Bill.objects.create(
            order=order,
            table_number=order.table_id,
            customer_name=order.customer_name,
            waiter_name=order.assigned_waiter.display_name if order.assigned_waiter else "",
            subtotal=subtotal,
            tax_rate=tax_rate,
            tax=tax,
            total=total,
            payment_method=payment_method,
        )
        BillItem.objects.bulk_create(
            [
                BillItem(
                    bill=bill,
                    menu_item_id=item.menu_item_id,
                    name=item.name,
                    quantity=item.quantity,
                    unit_price=item.price_at_sale,
                    line_total=line_total(item.price_at_sale, item.quantity),
                    notes=item.notes,
                )
                for item in items
            ]
        )

        logger.info(
            f"Generated bill {bill.pk} for order {order.pk}: "
            f"subtotal={subtotal} tax={tax} total={total}"
        )
        return bill

    @staticmethod
    @atomic_with_retry
    def finalize_payment(bill_id, payment_method) -> Bill:
        """
        Settle a bill: bill -> paid, order -> paid, table -> available.

        All three writes commit together or not at all. A repeated call raises
        AlreadyPaid and leaves the table and order untouched.
        """
        BillingService.validate_payment_method(payment_method)

        bill = BillingService._lock_bill(bill_id)
        if bill.is_paid:
            logger.warning(f"Rejected duplicate payment for bill {bill.pk}")
            raise AlreadyPaid(bill_id=bill.pk)

        order = OrderLifecycleService.lock_order(bill.order_id)
        if order.status == Order.OrderStatus.PAID:
            logger.warning(f"Rejected payment of bill {bill.pk}: order {order.pk} already settled")
            raise AlreadyPaid(order_id=order.pk)
        if order.status != Order.OrderStatus.SERVED:
            raise InvalidTransition(order.status, Order.OrderStatus.PAID)

        table = TableStatusService.lock_by_number(order.table_id)

        bill.payment_method = payment_method
        bill.payment_status = Bill.PaymentStatus.PAID
        bill.paid_at = timezone.now()
        bill.save()

        OrderLifecycleService.mark_paid(order)
        table = TableStatusService.release(table.pk)

        send_payment_completed_on_commit(bill, order, table)
        logger.info(f"Bill {bill.pk} paid ({payment_method}); table {table.number} released")
        return bill
