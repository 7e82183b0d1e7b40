"""
Orders services package.

- OrderService: order creation (seats the order at its table)
- OrderLifecycleService: pending -> preparing -> ready -> served -> paid
- KitchenService: kitchen queue
- WaiterStatsService: per-waiter dashboard numbers
"""

from .order_service import OrderService
from .lifecycle_service import OrderLifecycleService
from .kitchen_service import KitchenService
from .stats_service import WaiterStatsService

__all__ = [
    'OrderService',
    'OrderLifecycleService',
    'KitchenService',
    'WaiterStatsService',
]
