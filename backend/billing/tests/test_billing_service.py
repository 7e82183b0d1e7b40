"""
Billing Finalizer tests.

Paying a bill marks the bill paid, the order paid and the table available
together, exactly once.
"""
import pytest
from decimal import Decimal

from core_backend.exceptions import AlreadyPaid, InvalidTransition, NotFoundError, ValidationError
from billing.models import Bill, BillItem
from billing.services import BillingService
from orders.models import Order, OrderItem
from orders.services import OrderLifecycleService
from tables.models import Table


@pytest.mark.django_db
class TestGenerateBill:

    def test_bill_snapshots_served_order(self, served_order, settings):
        settings.RESTAURANT_TAX_RATE = Decimal('0.10')

        bill = BillingService.generate_bill(served_order.pk)

        assert bill.payment_status == Bill.PaymentStatus.PENDING
        assert bill.table_number == 5
        assert bill.customer_name == 'Alice'
        assert bill.waiter_name == 'John Smith'
        assert bill.subtotal == Decimal('50.97')
        assert bill.tax == Decimal('5.10')
        assert bill.total == Decimal('56.07')
        assert [(i.name, i.quantity, i.line_total) for i in bill.items.all()] == [
            ('Caesar Salad', 2, Decimal('25.98')),
            ('Ribeye Steak', 1, Decimal('24.99')),
        ]

        served_order.refresh_from_db()
        assert served_order.status == Order.OrderStatus.SERVED

    @pytest.mark.parametrize('steps', [0, 1, 2])
    def test_unserved_order_cannot_be_billed(self, open_order, chef, steps):
        if steps >= 1:
            OrderLifecycleService.accept(open_order.pk, chef, 10)
        if steps >= 2:
            OrderLifecycleService.complete(open_order.pk, chef)

        with pytest.raises(InvalidTransition):
            BillingService.generate_bill(open_order.pk)

        assert not Bill.objects.exists()

    def test_paid_order_cannot_be_billed_again(self, served_order):
        bill = BillingService.generate_bill(served_order.pk)
        BillingService.finalize_payment(bill.pk, 'card')

        with pytest.raises(AlreadyPaid):
            BillingService.generate_bill(served_order.pk)

    def test_order_without_items(self, served_order):
        OrderItem.objects.filter(order=served_order).delete()

        with pytest.raises(ValidationError):
            BillingService.generate_bill(served_order.pk)

    def test_unknown_payment_method_hint(self, served_order):
        with pytest.raises(ValidationError):
            BillingService.generate_bill(served_order.pk, 'cheque')

    def test_unknown_order(self, db):
        with pytest.raises(NotFoundError):
            BillingService.generate_bill('00000000-0000-0000-0000-000000000000')


@pytest.mark.django_db
class TestFinalizePayment:

    def test_payment_frees_the_table(self, served_order, table_5):
        """
        CRITICAL: bill, order and table change together

        Business Impact: a paid table must be seatable again immediately
        """
        bill = BillingService.generate_bill(served_order.pk)

        paid = BillingService.finalize_payment(bill.pk, 'card')

        assert paid.payment_status == Bill.PaymentStatus.PAID
        assert paid.payment_method == Bill.PaymentMethod.CARD
        assert paid.paid_at is not None

        served_order.refresh_from_db()
        assert served_order.status == Order.OrderStatus.PAID
        assert served_order.paid_at is not None

        table_5.refresh_from_db()
        assert table_5.status == Table.TableStatus.AVAILABLE
        assert table_5.current_order is None
        assert table_5.assigned_waiter is None

    def test_second_payment_is_rejected(self, served_order, table_5, waiter):
        bill = BillingService.generate_bill(served_order.pk)
        BillingService.finalize_payment(bill.pk, 'cash')

        # Re-seat the table so a stray second payment would be visible.
        Table.objects.filter(pk=table_5.pk).update(
            status=Table.TableStatus.RESERVED, assigned_waiter=waiter
        )

        with pytest.raises(AlreadyPaid):
            BillingService.finalize_payment(bill.pk, 'cash')

        table_5.refresh_from_db()
        assert table_5.status == Table.TableStatus.RESERVED
        assert Bill.objects.filter(order=served_order, payment_status='paid').count() == 1

    def test_second_bill_for_paid_order_is_rejected(self, served_order):
        first = BillingService.generate_bill(served_order.pk)
        second = BillingService.generate_bill(served_order.pk)
        BillingService.finalize_payment(first.pk, 'cash')

        with pytest.raises(AlreadyPaid):
            BillingService.finalize_payment(second.pk, 'card')

        second.refresh_from_db()
        assert second.payment_status == Bill.PaymentStatus.PENDING

    def test_unknown_method_rejected_before_any_change(self, served_order):
        bill = BillingService.generate_bill(served_order.pk)

        with pytest.raises(ValidationError):
            BillingService.finalize_payment(bill.pk, 'iou')

        bill.refresh_from_db()
        assert bill.payment_status == Bill.PaymentStatus.PENDING

    def test_unknown_bill(self, db):
        with pytest.raises(NotFoundError):
            BillingService.finalize_payment('not-a-uuid', 'cash')

    def test_paid_orders_and_bills_correspond(self, served_order, table_6, waiter, lemonade, chef):
        """Every paid order has exactly one paid bill, and every paid bill a paid order"""
        from orders.services import OrderService

        other = OrderService.create_order(
            table_number=6, items=[{'menu_item_id': lemonade.pk, 'quantity': 4}], waiter=waiter
        )
        OrderLifecycleService.accept(other.pk, chef, 5)
        OrderLifecycleService.complete(other.pk, chef)
        OrderLifecycleService.serve(other.pk, confirmed=True)

        for order in (served_order, other):
            bill = BillingService.generate_bill(order.pk)
            BillingService.finalize_payment(bill.pk, 'digital')

        paid_orders = set(Order.objects.filter(status='paid').values_list('pk', flat=True))
        paid_bill_orders = list(Bill.objects.filter(payment_status='paid').values_list('order_id', flat=True))

        assert sorted(paid_bill_orders) == sorted(paid_orders)
        assert len(paid_bill_orders) == len(set(paid_bill_orders))

    def test_payment_signal_sent_after_commit(self, served_order, django_capture_on_commit_callbacks):
        from billing.signals import payment_completed

        received = []

        def record(sender, bill, order, table, **kwargs):
            received.append((bill.pk, order.status, table.status))

        payment_completed.connect(record)
        try:
            bill = BillingService.generate_bill(served_order.pk)
            with django_capture_on_commit_callbacks(execute=True):
                BillingService.finalize_payment(bill.pk, 'cash')
        finally:
            payment_completed.disconnect(record)

        assert received == [(bill.pk, 'paid', 'available')]


@pytest.mark.django_db
class TestBillImmutability:

    def test_paid_bill_cannot_be_edited(self, served_order):
        bill = BillingService.generate_bill(served_order.pk)
        BillingService.finalize_payment(bill.pk, 'cash')

        bill.refresh_from_db()
        bill.total = Decimal('1.00')
        with pytest.raises(AlreadyPaid):
            bill.save()

        with pytest.raises(AlreadyPaid):
            bill.delete()

    def test_paid_bill_items_cannot_be_added(self, served_order):
        bill = BillingService.generate_bill(served_order.pk)
        BillingService.finalize_payment(bill.pk, 'cash')
        bill.refresh_from_db()

        with pytest.raises(AlreadyPaid):
            BillItem.objects.create(
                bill=bill, name='Extra', quantity=1, unit_price=Decimal('1.00'), line_total=Decimal('1.00')
            )

    def test_pending_bill_can_be_discarded(self, served_order):
        bill = BillingService.generate_bill(served_order.pk)
        bill.delete()

        assert not Bill.objects.exists()
