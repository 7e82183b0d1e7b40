import logging
from django.db import transaction
from django.db.models import ProtectedError

from core_backend.exceptions import NotFoundError, ValidationError
from .models import MenuItem

logger = logging.getLogger(__name__)


class MenuService:
    """Menu maintenance and the lookups order creation relies on."""

    @staticmethod
    def get_item(menu_item_id) -> MenuItem:
        try:
            return MenuItem.objects.get(pk=menu_item_id)
        except (MenuItem.DoesNotExist, ValueError, TypeError):
            raise NotFoundError("MenuItem", menu_item_id)

    @staticmethod
    def get_orderable_items(menu_item_ids) -> dict:
        """
        Resolve menu item ids for a new order.

        Returns {id: MenuItem}. Raises NotFoundError for an unknown id and
        ValidationError when an item is currently unavailable.
        """
        wanted = set(menu_item_ids)
        items = {item.pk: item for item in MenuItem.objects.filter(pk__in=wanted)}

        missing = wanted - set(items)
        if missing:
            raise NotFoundError("MenuItem", sorted(missing)[0])

        unavailable = [item for item in items.values() if not item.available]
        if unavailable:
            names = ", ".join(sorted(item.name for item in unavailable))
            raise ValidationError(
                f"Menu items currently unavailable: {names}",
                errors={"items": [f"'{item.name}' is unavailable" for item in unavailable]},
            )
        return items

    @staticmethod
    @transaction.atomic
    def set_availability(menu_item: MenuItem, available: bool) -> MenuItem:
        if menu_item.available != available:
            menu_item.available = available
            menu_item.save(update_fields=["available", "updated_at"])
            logger.info(f"Menu item {menu_item.pk} '{menu_item.name}' available={available}")
        return menu_item

    @staticmethod
    @transaction.atomic
    def delete_item(menu_item: MenuItem):
        try:
            menu_item.delete()
        except ProtectedError:
            raise ValidationError(
                f"'{menu_item.name}' appears on existing orders and cannot be deleted. "
                f"Mark it unavailable instead.",
                errors={"menu_item": ["referenced by order lines"]},
            )
        logger.info(f"Deleted menu item '{menu_item.name}'")
