from django.core.exceptions import ValidationError as DjangoValidationError
from django.utils import timezone
import logging

from core_backend.exceptions import InvalidTransition, NotFoundError, ValidationError
from core_backend.utils.transactions import atomic_with_retry
from orders.models import Order
from orders.signals import send_status_changed_on_commit
from users.models import User

logger = logging.getLogger(__name__)


class OrderLifecycleService:
    """
    Order state machine: pending -> preparing -> ready -> served -> paid.

    Each transition locks the order row first, so two chefs racing to accept
    the same pending order are serialized and the loser sees InvalidTransition.
    """

    # Valid status transitions for order state machine
    VALID_STATUS_TRANSITIONS = {
        Order.OrderStatus.PENDING: [Order.OrderStatus.PREPARING],
        Order.OrderStatus.PREPARING: [Order.OrderStatus.READY],
        Order.OrderStatus.READY: [Order.OrderStatus.SERVED],
        Order.OrderStatus.SERVED: [Order.OrderStatus.PAID],
        Order.OrderStatus.PAID: [],
    }

    # Reached only through billing.BillingService.finalize_payment
    BILLING_ONLY_STATUSES = [Order.OrderStatus.PAID]

    @staticmethod
    def lock_order(order_id) -> Order:
        try:
            return Order.objects.select_for_update().get(pk=order_id)
        except (Order.DoesNotExist, ValueError, TypeError, DjangoValidationError):
            raise NotFoundError("Order", order_id)

    @staticmethod
    def validate_payload(new_status, payload):
        """Field-level checks for each transition, run before any lookup."""
        if new_status not in Order.OrderStatus.values:
            raise ValidationError(
                f"Unknown order status '{new_status}'",
                errors={"status": [f"must be one of {', '.join(Order.OrderStatus.values)}"]},
            )

        if new_status == Order.OrderStatus.PREPARING:
            errors = {}
            if payload.get("chef_id") is None:
                errors["chef_id"] = ["is required to accept an order"]
            minutes = payload.get("estimated_prep_minutes")
            if not isinstance(minutes, int) or isinstance(minutes, bool) or minutes <= 0:
                errors["estimated_prep_minutes"] = ["must be a positive integer"]
            if errors:
                raise ValidationError("Invalid accept request", errors=errors)

        elif new_status == Order.OrderStatus.READY:
            if payload.get("chef_id") is None:
                raise ValidationError(
                    "The chef completing the order must be identified",
                    errors={"chef_id": ["is required"]},
                )

        elif new_status == Order.OrderStatus.SERVED:
            if payload.get("confirmed") is not True:
                raise ValidationError(
                    "Serving an order must be explicitly confirmed",
                    errors={"confirmed": ["must be true"]},
                )

    @staticmethod
    def _check_transition(order: Order, new_status):
        allowed = OrderLifecycleService.VALID_STATUS_TRANSITIONS.get(order.status, [])
        if new_status not in allowed:
            logger.warning(
                f"Rejected order {order.pk} transition {order.status} -> {new_status}"
            )
            raise InvalidTransition(order.status, new_status)

    @staticmethod
    def _resolve_chef(chef_id) -> User:
        try:
            return User.objects.get(
                pk=chef_id, is_active=True, role__in=[User.Role.CHEF, User.Role.MANAGER]
            )
        except (User.DoesNotExist, ValueError, TypeError):
            raise NotFoundError("Chef", chef_id)

    @staticmethod
    @atomic_with_retry
    def advance(order_id, new_status, payload=None) -> Order:
        """
        Move an order one step forward.

        payload by target status:
            preparing: chef_id, estimated_prep_minutes (> 0)
            ready:     chef_id (must match the chef who accepted)
            served:    confirmed=True
        paid is refused here; it is applied when the order's bill is paid.
        """
        payload = payload or {}
        OrderLifecycleService.validate_payload(new_status, payload)

        order = OrderLifecycleService.lock_order(order_id)

        if new_status in OrderLifecycleService.BILLING_ONLY_STATUSES:
            raise InvalidTransition(
                order.status,
                new_status,
                message=f"Order {order.pk} is marked paid only by paying its bill",
            )
        OrderLifecycleService._check_transition(order, new_status)

        previous_status = order.status
        now = timezone.now()

        if new_status == Order.OrderStatus.PREPARING:
            chef = OrderLifecycleService._resolve_chef(payload["chef_id"])
            order.assigned_chef = chef
            order.chef_name = chef.display_name
            order.estimated_prep_minutes = payload["estimated_prep_minutes"]
            order.start_time = now

        elif new_status == Order.OrderStatus.READY:
            if str(order.assigned_chef_id) != str(payload["chef_id"]):
                raise InvalidTransition(
                    order.status,
                    new_status,
                    message=f"Order {order.pk} is being prepared by {order.chef_name or 'another chef'}",
                )
            order.ready_at = now

        elif new_status == Order.OrderStatus.SERVED:
            order.served_at = now

        order.status = new_status
        order.save()

        send_status_changed_on_commit(order, previous_status)
        logger.info(f"Order {order.pk} advanced {previous_status} -> {new_status}")
        return order

    # --- Convenience wrappers used by the HTTP layer ---

    @staticmethod
    def accept(order_id, chef, estimated_prep_minutes) -> Order:
        return OrderLifecycleService.advance(
            order_id,
            Order.OrderStatus.PREPARING,
            {"chef_id": chef.pk, "estimated_prep_minutes": estimated_prep_minutes},
        )

    @staticmethod
    def complete(order_id, chef) -> Order:
        return OrderLifecycleService.advance(
            order_id, Order.OrderStatus.READY, {"chef_id": chef.pk}
        )

    @staticmethod
    def serve(order_id, confirmed) -> Order:
        return OrderLifecycleService.advance(
            order_id, Order.OrderStatus.SERVED, {"confirmed": confirmed}
        )

    @staticmethod
    def mark_paid(order: Order) -> Order:
        """
        served -> paid. Called by billing with the order row already locked
        inside the payment unit of work.
        """
        OrderLifecycleService._check_transition(order, Order.OrderStatus.PAID)

        previous_status = order.status
        order.status = Order.OrderStatus.PAID
        order.paid_at = timezone.now()
        order.save(update_fields=["status", "paid_at", "updated_at"])

        send_status_changed_on_commit(order, previous_status)
        logger.info(f"Order {order.pk} paid")
        return order
