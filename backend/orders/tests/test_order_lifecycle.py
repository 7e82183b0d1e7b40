"""
Order Lifecycle Machine tests.

Status only moves forward, one step at a time, and `paid` is reachable
only through billing.
"""
import pytest

from core_backend.exceptions import InvalidTransition, NotFoundError, ValidationError
from orders.models import Order
from orders.services import OrderLifecycleService
from orders.signals import order_status_changed

LIFECYCLE = ['pending', 'preparing', 'ready', 'served', 'paid']


@pytest.mark.django_db
class TestAccept:

    def test_accept_records_chef_and_start_time(self, open_order, chef):
        order = OrderLifecycleService.accept(open_order.pk, chef, 20)

        assert order.status == Order.OrderStatus.PREPARING
        assert order.assigned_chef_id == chef.pk
        assert order.chef_name == 'Gordon Ramsay'
        assert order.estimated_prep_minutes == 20
        assert order.start_time is not None
        assert order.estimated_ready_at is not None

    @pytest.mark.parametrize('payload', [
        {'estimated_prep_minutes': 10},
        {'chef_id': 1},
        {'chef_id': 1, 'estimated_prep_minutes': 0},
        {'chef_id': 1, 'estimated_prep_minutes': -5},
    ])
    def test_accept_payload_validated(self, open_order, payload):
        with pytest.raises(ValidationError):
            OrderLifecycleService.advance(open_order.pk, 'preparing', payload)

        open_order.refresh_from_db()
        assert open_order.status == Order.OrderStatus.PENDING

    def test_accept_with_unknown_chef(self, open_order):
        with pytest.raises(NotFoundError):
            OrderLifecycleService.advance(
                open_order.pk, 'preparing', {'chef_id': 987654, 'estimated_prep_minutes': 10}
            )

    def test_waiter_is_not_a_chef(self, open_order, waiter):
        with pytest.raises(NotFoundError):
            OrderLifecycleService.accept(open_order.pk, waiter, 10)

    def test_second_accept_is_rejected(self, open_order, chef, second_chef):
        """Two chefs cannot both accept the same pending order"""
        OrderLifecycleService.accept(open_order.pk, chef, 10)

        with pytest.raises(InvalidTransition):
            OrderLifecycleService.accept(open_order.pk, second_chef, 5)

        open_order.refresh_from_db()
        assert open_order.assigned_chef_id == chef.pk


@pytest.mark.django_db
class TestProgression:

    def test_only_accepting_chef_can_complete(self, open_order, chef, second_chef):
        OrderLifecycleService.accept(open_order.pk, chef, 10)

        with pytest.raises(InvalidTransition):
            OrderLifecycleService.complete(open_order.pk, second_chef)

        order = OrderLifecycleService.complete(open_order.pk, chef)
        assert order.status == Order.OrderStatus.READY
        assert order.ready_at is not None

    def test_serving_requires_confirmation(self, open_order, chef):
        OrderLifecycleService.accept(open_order.pk, chef, 10)
        OrderLifecycleService.complete(open_order.pk, chef)

        with pytest.raises(ValidationError):
            OrderLifecycleService.serve(open_order.pk, confirmed=False)

        order = OrderLifecycleService.serve(open_order.pk, confirmed=True)
        assert order.status == Order.OrderStatus.SERVED

    @pytest.mark.parametrize('target, payload', [
        ('ready', {'chef_id': 1}),
        ('served', {'confirmed': True}),
        ('pending', {}),
    ])
    def test_skipping_or_repeating_is_invalid(self, open_order, target, payload):
        with pytest.raises(InvalidTransition):
            OrderLifecycleService.advance(open_order.pk, target, payload)

        open_order.refresh_from_db()
        assert open_order.status == Order.OrderStatus.PENDING

    def test_paid_only_through_billing(self, served_order):
        with pytest.raises(InvalidTransition):
            OrderLifecycleService.advance(served_order.pk, 'paid')

        served_order.refresh_from_db()
        assert served_order.status == Order.OrderStatus.SERVED

    def test_no_regression_from_served(self, served_order, chef):
        for target, payload in [
            ('preparing', {'chef_id': chef.pk, 'estimated_prep_minutes': 5}),
            ('ready', {'chef_id': chef.pk}),
            ('served', {'confirmed': True}),
        ]:
            with pytest.raises(InvalidTransition):
                OrderLifecycleService.advance(served_order.pk, target, payload)

    def test_unknown_status_value(self, open_order):
        with pytest.raises(ValidationError):
            OrderLifecycleService.advance(open_order.pk, 'cooking')

    def test_unknown_order(self, db):
        with pytest.raises(NotFoundError):
            OrderLifecycleService.advance(
                '00000000-0000-0000-0000-000000000000', 'served', {'confirmed': True}
            )


@pytest.mark.django_db
class TestMonotonicity:

    def test_observed_statuses_are_a_prefix_of_the_lifecycle(
        self, open_order, chef, django_capture_on_commit_callbacks
    ):
        """
        Every status change event moves exactly one step forward, and the
        full sequence ends at paid.
        """
        from billing.services import BillingService

        observed = []

        def record(sender, order, previous_status, new_status, **kwargs):
            observed.append((previous_status, new_status))

        order_status_changed.connect(record)
        try:
            with django_capture_on_commit_callbacks(execute=True):
                OrderLifecycleService.accept(open_order.pk, chef, 10)
            with django_capture_on_commit_callbacks(execute=True):
                OrderLifecycleService.complete(open_order.pk, chef)
            with django_capture_on_commit_callbacks(execute=True):
                OrderLifecycleService.serve(open_order.pk, confirmed=True)
            with django_capture_on_commit_callbacks(execute=True):
                bill = BillingService.generate_bill(open_order.pk)
                BillingService.finalize_payment(bill.pk, 'cash')
        finally:
            order_status_changed.disconnect(record)

        statuses = [observed[0][0]] + [new for _, new in observed]
        assert statuses == LIFECYCLE
        for previous, new in observed:
            assert LIFECYCLE.index(new) == LIFECYCLE.index(previous) + 1

    def test_rejected_transition_sends_no_event(self, open_order, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks() as callbacks:
            with pytest.raises(InvalidTransition):
                OrderLifecycleService.advance(open_order.pk, 'served', {'confirmed': True})

        assert callbacks == []
