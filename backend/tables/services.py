"""
Table Status Synchronizer.

Every write to Table.status, Table.assigned_waiter and Table.current_order
goes through TableStatusService. Callers that need several steps in one unit
of work (order creation, payment) call these methods from inside their own
transaction so the table row lock is held until commit.
"""
import logging

from django.db.models import ProtectedError

from core_backend.exceptions import (
    InvalidTransition,
    NotFoundError,
    TableConflict,
    ValidationError,
)
from core_backend.utils.transactions import atomic_with_retry
from orders.models import Order
from .models import Table

logger = logging.getLogger(__name__)


class TableStatusService:
    """
    Keeps table status consistent with the orders seated at the table.

    A table holds at most one active (non-paid) order, and a table in
    `occupied` or `need-assistance` always points at it.
    """

    # Statuses a manager may set directly. Seated statuses are only reached
    # through order creation and waiter requests.
    MANUAL_STATUSES = [
        Table.TableStatus.AVAILABLE,
        Table.TableStatus.RESERVED,
        Table.TableStatus.MAINTENANCE,
    ]

    # ---- locking helpers ----

    @staticmethod
    def lock_by_number(table_number) -> Table:
        try:
            return Table.objects.select_for_update().get(number=table_number)
        except (Table.DoesNotExist, ValueError, TypeError):
            raise NotFoundError("Table", table_number)

    @staticmethod
    def lock_by_id(table_id) -> Table:
        try:
            return Table.objects.select_for_update().get(pk=table_id)
        except (Table.DoesNotExist, ValueError, TypeError):
            raise NotFoundError("Table", table_id)

    @staticmethod
    def get_active_order(table: Table, exclude_order_id=None):
        qs = Order.objects.active().filter(table=table)
        if exclude_order_id is not None:
            qs = qs.exclude(pk=exclude_order_id)
        return qs.order_by("created_at").first()

    # ---- order-driven transitions ----

    @staticmethod
    def ensure_can_occupy(table: Table, waiter=None, exclude_order_id=None):
        """
        Raise TableConflict unless `table` can take a new order for `waiter`.

        The table must be locked by the caller.
        """
        if table.status == Table.TableStatus.MAINTENANCE:
            raise TableConflict(
                table.number, message=f"Table {table.number} is under maintenance"
            )

        active = TableStatusService.get_active_order(table, exclude_order_id=exclude_order_id)
        if active is not None:
            raise TableConflict(table.number, active.pk)

        if table.status == Table.TableStatus.AVAILABLE:
            return
        if waiter is not None and table.assigned_waiter_id == waiter.pk:
            return

        raise TableConflict(
            table.number,
            message=f"Table {table.number} is {table.status} and not assigned to this waiter",
        )

    @staticmethod
    @atomic_with_retry
    def occupy_for_order(table_number, order: Order, waiter=None) -> Table:
        """Seat `order` at the table and mark it occupied."""
        table = TableStatusService.lock_by_number(table_number)
        TableStatusService.ensure_can_occupy(table, waiter, exclude_order_id=order.pk)

        table.status = Table.TableStatus.OCCUPIED
        table.current_order = order
        if waiter is not None:
            table.assigned_waiter = waiter
        table.save(update_fields=["status", "current_order", "assigned_waiter", "updated_at"])

        logger.info(f"Table {table.number} occupied by order {order.pk}")
        return table

    @staticmethod
    @atomic_with_retry
    def mark_needs_assistance(table_id, waiter) -> Table:
        table = TableStatusService.lock_by_id(table_id)

        if table.assigned_waiter_id != getattr(waiter, "pk", None):
            raise ValidationError(
                f"Table {table.number} is not assigned to this waiter",
                errors={"waiter": ["not assigned to this table"]},
            )
        if table.status == Table.TableStatus.NEED_ASSISTANCE:
            return table
        if table.status != Table.TableStatus.OCCUPIED or table.current_order_id is None:
            raise InvalidTransition(table.status, Table.TableStatus.NEED_ASSISTANCE)

        table.status = Table.TableStatus.NEED_ASSISTANCE
        table.save(update_fields=["status", "updated_at"])
        logger.info(f"Table {table.number} needs assistance")
        return table

    @staticmethod
    @atomic_with_retry
    def clear_assistance(table_id, user) -> Table:
        table = TableStatusService.lock_by_id(table_id)

        if table.status != Table.TableStatus.NEED_ASSISTANCE:
            raise InvalidTransition(table.status, Table.TableStatus.OCCUPIED)
        if table.assigned_waiter_id != user.pk and not user.is_manager:
            raise ValidationError(
                f"Table {table.number} is not assigned to this waiter",
                errors={"waiter": ["not assigned to this table"]},
            )

        table.status = Table.TableStatus.OCCUPIED
        table.save(update_fields=["status", "updated_at"])
        logger.info(f"Table {table.number} assistance handled")
        return table

    @staticmethod
    @atomic_with_retry
    def release(table_id) -> Table:
        """
        Free a table once its order is paid.

        Refused while any unpaid order is still seated at the table.
        """
        table = TableStatusService.lock_by_id(table_id)

        active = TableStatusService.get_active_order(table)
        if active is not None:
            raise TableConflict(
                table.number,
                active.pk,
                message=f"Table {table.number} still has unpaid order {active.pk}",
            )

        table.status = Table.TableStatus.AVAILABLE
        table.current_order = None
        table.assigned_waiter = None
        table.save(update_fields=["status", "current_order", "assigned_waiter", "updated_at"])

        logger.info(f"Table {table.number} released")
        return table

    # ---- manager actions ----

    @staticmethod
    @atomic_with_retry
    def set_status(table_id, new_status) -> Table:
        if new_status not in TableStatusService.MANUAL_STATUSES:
            table = TableStatusService.lock_by_id(table_id)
            raise InvalidTransition(
                table.status,
                new_status,
                message=f"Status '{new_status}' is set by order activity, not manually",
            )

        if new_status == Table.TableStatus.AVAILABLE:
            return TableStatusService.release(table_id)

        table = TableStatusService.lock_by_id(table_id)
        active = TableStatusService.get_active_order(table)
        if active is not None:
            raise TableConflict(
                table.number,
                active.pk,
                message=f"Table {table.number} has active order {active.pk}",
            )

        table.status = new_status
        table.save(update_fields=["status", "updated_at"])
        logger.info(f"Table {table.number} set to {new_status}")
        return table

    @staticmethod
    @atomic_with_retry
    def assign_waiter(table_id, waiter) -> Table:
        table = TableStatusService.lock_by_id(table_id)
        if table.status == Table.TableStatus.MAINTENANCE:
            raise TableConflict(
                table.number, message=f"Table {table.number} is under maintenance"
            )

        table.assigned_waiter = waiter
        table.save(update_fields=["assigned_waiter", "updated_at"])
        logger.info(f"Table {table.number} assigned to {waiter.username if waiter else 'nobody'}")
        return table

    @staticmethod
    @atomic_with_retry
    def create_table(number, capacity, location="", status=Table.TableStatus.AVAILABLE) -> Table:
        if status not in TableStatusService.MANUAL_STATUSES:
            raise ValidationError(
                f"A new table cannot start as '{status}'",
                errors={"status": ["must be available, reserved or maintenance"]},
            )
        if Table.objects.filter(number=number).exists():
            raise ValidationError(
                f"Table {number} already exists",
                errors={"number": ["already in use"]},
            )
        table = Table.objects.create(number=number, capacity=capacity, location=location, status=status)
        logger.info(f"Created table {number} (capacity {capacity})")
        return table

    @staticmethod
    @atomic_with_retry
    def update_table(table_id, **changes) -> Table:
        table = TableStatusService.lock_by_id(table_id)

        new_number = changes.get("number")
        if new_number is not None and new_number != table.number:
            if Table.objects.filter(number=new_number).exists():
                raise ValidationError(
                    f"Table {new_number} already exists",
                    errors={"number": ["already in use"]},
                )
            if table.orders.exists() or table.reservations.exists():
                raise TableConflict(
                    table.number,
                    message=f"Table {table.number} has orders or reservations on record and cannot be renumbered",
                )
            table.number = new_number

        for field in ("capacity", "location"):
            if changes.get(field) is not None:
                setattr(table, field, changes[field])

        table.save()
        return table

    @staticmethod
    @atomic_with_retry
    def delete_table(table_id):
        table = TableStatusService.lock_by_id(table_id)

        active = TableStatusService.get_active_order(table)
        if active is not None:
            raise TableConflict(table.number, active.pk)

        number = table.number
        try:
            table.delete()
        except ProtectedError:
            raise TableConflict(
                number,
                message=(
                    f"Table {number} has orders or reservations on record and cannot be deleted. "
                    f"Set it to maintenance instead."
                ),
            )
        logger.info(f"Deleted table {number}")

    # ---- queries ----

    @staticmethod
    def list_available(min_capacity=None):
        qs = Table.objects.filter(status=Table.TableStatus.AVAILABLE)
        if min_capacity:
            qs = qs.filter(capacity__gte=min_capacity)
        return qs.order_by("capacity", "number")
