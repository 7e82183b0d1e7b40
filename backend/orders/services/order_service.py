from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction
import logging

from core_backend.exceptions import NotFoundError, TableConflict, ValidationError
from core_backend.utils.transactions import atomic_with_retry
from menu.services import MenuService
from orders.models import Order, OrderItem
from orders.signals import send_status_changed_on_commit
from tables.services import TableStatusService
from users.models import User

logger = logging.getLogger(__name__)


class OrderService:
    """Opening new orders. Status changes live in OrderLifecycleService."""

    @staticmethod
    def get_order(order_id) -> Order:
        try:
            return Order.objects.get(pk=order_id)
        except (Order.DoesNotExist, ValueError, TypeError, DjangoValidationError):
            raise NotFoundError("Order", order_id)

    @staticmethod
    def resolve_waiter(waiter_id):
        if waiter_id is None:
            return None
        try:
            return User.objects.get(pk=waiter_id, role=User.Role.WAITER, is_active=True)
        except (User.DoesNotExist, ValueError, TypeError):
            raise NotFoundError("Waiter", waiter_id)

    @staticmethod
    def validate_items(items):
        """
        Check the shape of requested line items before touching the database.

        Each item is a mapping with `menu_item_id`, `quantity` and optional `notes`.
        """
        if not items:
            raise ValidationError(
                "An order needs at least one item",
                errors={"items": ["must not be empty"]},
            )

        errors = {}
        for index, item in enumerate(items):
            if item.get("menu_item_id") is None:
                errors[f"items[{index}].menu_item_id"] = ["is required"]
            quantity = item.get("quantity")
            if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity <= 0:
                errors[f"items[{index}].quantity"] = ["must be a positive integer"]
        if errors:
            raise ValidationError("Invalid order items", errors=errors)

    @staticmethod
    @atomic_with_retry
    def create_order(table_number, items, waiter=None, customer_name="") -> Order:
        """
        Open an order on a table and mark the table occupied in one unit of work.

        Raises:
            ValidationError: empty/malformed items or an unavailable menu item
            NotFoundError: unknown table or menu item
            TableConflict: the table already holds an active order or cannot be seated
        """
        OrderService.validate_items(items)

        menu_items = MenuService.get_orderable_items(item["menu_item_id"] for item in items)

        table = TableStatusService.lock_by_number(table_number)
        TableStatusService.ensure_can_occupy(table, waiter)

        try:
            with transaction.atomic():
                order = Order.objects.create(
                    table=table,
                    assigned_waiter=waiter,
                    customer_name=customer_name or "",
                )
        except IntegrityError:
            # Another unit of work seated an order between our check and insert.
            active = TableStatusService.get_active_order(table)
            logger.warning(f"Active order constraint hit on table {table.number}")
            raise TableConflict(table.number, active.pk if active else None)

        OrderItem.objects.bulk_create(
            [
                OrderItem(
                    order=order,
                    menu_item=menu_items[item["menu_item_id"]],
                    name=menu_items[item["menu_item_id"]].name,
                    quantity=item["quantity"],
                    notes=item.get("notes") or "",
                    price_at_sale=menu_items[item["menu_item_id"]].price,
                )
                for item in items
            ]
        )

        TableStatusService.occupy_for_order(table.number, order, waiter)

        send_status_changed_on_commit(order, previous_status=None)
        logger.info(
            f"Order {order.pk} created on table {table.number} with {len(items)} item(s)"
        )
        return order
