import pytest
from decimal import Decimal

from orders.models import Order
from orders.services import KitchenService, OrderLifecycleService, OrderService, WaiterStatsService


@pytest.mark.django_db
class TestKitchenQueue:

    def test_queue_oldest_first(self, open_order, table_6, second_waiter, lemonade):
        later = OrderService.create_order(
            table_number=6, items=[{'menu_item_id': lemonade.pk, 'quantity': 1}], waiter=second_waiter
        )

        queue = list(KitchenService.get_queue())

        assert [o.pk for o in queue] == [open_order.pk, later.pk]

    def test_served_orders_leave_the_queue(self, served_order):
        assert list(KitchenService.get_queue()) == []

    def test_queue_status_filter(self, open_order, chef):
        OrderLifecycleService.accept(open_order.pk, chef, 10)

        assert list(KitchenService.get_queue(Order.OrderStatus.PENDING)) == []
        assert [o.pk for o in KitchenService.get_queue(Order.OrderStatus.PREPARING)] == [open_order.pk]

    def test_chef_orders(self, open_order, chef, second_chef):
        OrderLifecycleService.accept(open_order.pk, chef, 10)

        assert [o.pk for o in KitchenService.get_chef_orders(chef)] == [open_order.pk]
        assert list(KitchenService.get_chef_orders(second_chef)) == []


@pytest.mark.django_db
class TestWaiterStats:

    def test_stats_with_open_order(self, open_order, waiter):
        stats = WaiterStatsService.get_stats(waiter)

        assert stats['waiter_id'] == waiter.pk
        assert stats['active_tables'] == 1
        assert stats['pending_orders'] == 1
        assert Decimal(stats['today_revenue']) == Decimal('50.97')
        assert stats['total_tables_served'] == 0

    def test_stats_after_payment(self, served_order, waiter):
        from billing.services import BillingService

        bill = BillingService.generate_bill(served_order.pk)
        BillingService.finalize_payment(bill.pk, 'cash')

        stats = WaiterStatsService.get_stats(waiter)

        assert stats['active_tables'] == 0
        assert stats['pending_orders'] == 0
        assert stats['total_tables_served'] == 1

    def test_stats_for_idle_waiter(self, open_order, second_waiter):
        stats = WaiterStatsService.get_stats(second_waiter)

        assert stats['active_tables'] == 0
        assert stats['today_revenue'] == '0.00'
