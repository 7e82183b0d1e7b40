"""
Concurrent Access Tests

Race conditions between staff actions on the same rows:
- Two waiters opening an order on the same table
- Two chefs accepting the same order
- A bill paid twice at the same moment
- Two guests booking overlapping windows

These tests use threading to simulate simultaneous requests. On PostgreSQL the
row locks serialize them; on SQLite the database write lock does.
"""
import pytest
from datetime import date, time
from threading import Barrier, Thread

from core_backend.exceptions import AlreadyPaid, InvalidTransition, ReservationConflict, TableConflict

pytestmark = pytest.mark.concurrency


def run_concurrently(*callables):
    """
    Start every callable at the same instant on its own thread and connection.

    Returns (results, errors): the return values of callables that finished
    and the exceptions raised by the others.
    """
    results = []
    errors = []
    barrier = Barrier(len(callables))

    def worker(func):
        from django.db import connection as thread_connection
        try:
            barrier.wait()
            results.append(func())
        except Exception as e:
            errors.append(e)
        finally:
            thread_connection.close()

    threads = [Thread(target=worker, args=(func,)) for func in callables]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    return results, errors


@pytest.mark.django_db(transaction=True)
class TestConcurrentOrdering:

    def test_one_active_order_per_table(self, table_5, waiter, second_waiter, lemonade):
        """
        CRITICAL: Two waiters seat orders on the same free table at once.

        Expected: exactly one order is created, the other gets TableConflict.
        """
        from orders.models import Order
        from orders.services import OrderService
        from tables.models import Table

        def open_for(staff):
            return lambda: OrderService.create_order(
                table_number=5, items=[{'menu_item_id': lemonade.pk, 'quantity': 1}], waiter=staff
            )

        results, errors = run_concurrently(open_for(waiter), open_for(second_waiter))

        assert len(results) == 1, f"Expected 1 order, got {len(results)}. Errors: {errors}"
        assert len(errors) == 1
        assert isinstance(errors[0], TableConflict)

        table = Table.objects.get(number=5)
        assert table.current_order_id == results[0].pk
        assert Order.objects.filter(table=table).count() == 1

    def test_two_chefs_accept_same_order(self, open_order, chef, second_chef):
        from orders.models import Order
        from orders.services import OrderLifecycleService

        results, errors = run_concurrently(
            lambda: OrderLifecycleService.accept(open_order.pk, chef, 10),
            lambda: OrderLifecycleService.accept(open_order.pk, second_chef, 12),
        )

        assert len(results) == 1, f"Errors: {errors}"
        assert isinstance(errors[0], InvalidTransition)

        order = Order.objects.get(pk=open_order.pk)
        assert order.status == Order.OrderStatus.PREPARING
        assert order.assigned_chef_id == results[0].assigned_chef_id


@pytest.mark.django_db(transaction=True)
class TestConcurrentPayment:

    def test_bill_paid_once(self, served_order):
        """
        CRITICAL: Two terminals settle the same bill simultaneously.

        Expected: one payment succeeds, the other gets AlreadyPaid, and the
        order has exactly one paid bill.
        """
        from billing.models import Bill
        from billing.services import BillingService

        bill = BillingService.generate_bill(served_order.pk)

        results, errors = run_concurrently(
            lambda: BillingService.finalize_payment(bill.pk, 'cash'),
            lambda: BillingService.finalize_payment(bill.pk, 'card'),
        )

        assert len(results) == 1, f"Errors: {errors}"
        assert isinstance(errors[0], AlreadyPaid)
        assert Bill.objects.filter(order=served_order, payment_status='paid').count() == 1


@pytest.mark.django_db(transaction=True)
class TestConcurrentReservations:

    def test_overlapping_bookings(self, table_5):
        from reservations.models import Reservation
        from reservations.services import ReservationService

        def book(name, start, end):
            return lambda: ReservationService.create_reservation(
                customer_name=name,
                customer_email=f'{name.lower()}@example.com',
                table_number=5,
                date=date(2099, 6, 1),
                start_time=start,
                end_time=end,
                guests=2,
            )

        results, errors = run_concurrently(
            book('Ann', time(19, 0), time(21, 0)),
            book('Ben', time(20, 0), time(22, 0)),
        )

        assert len(results) == 1, f"Errors: {errors}"
        assert isinstance(errors[0], ReservationConflict)
        assert Reservation.objects.filter(table_id=5).count() == 1
