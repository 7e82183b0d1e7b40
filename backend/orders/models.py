import uuid
from datetime import timedelta
from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


class OrderQuerySet(models.QuerySet):
    def active(self):
        """Orders that still hold their table (anything not paid)."""
        return self.exclude(status=Order.OrderStatus.PAID)

    def in_kitchen(self):
        return self.filter(
            status__in=[
                Order.OrderStatus.PENDING,
                Order.OrderStatus.PREPARING,
                Order.OrderStatus.READY,
            ]
        )


class Order(models.Model):
    """
    A tab opened against one table.

    Status only moves forward: pending -> preparing -> ready -> served -> paid.
    Transitions are applied by orders.services.OrderLifecycleService; the
    final move to paid happens only through billing.
    """

    class OrderStatus(models.TextChoices):
        PENDING = "pending", _("Pending")  # Waiting for a chef
        PREPARING = "preparing", _("Preparing")  # Accepted by a chef
        READY = "ready", _("Ready")  # Waiting to be served
        SERVED = "served", _("Served")  # At the table, can be billed
        PAID = "paid", _("Paid")  # Terminal

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    table = models.ForeignKey(
        "tables.Table",
        to_field="number",
        db_column="table_number",
        on_delete=models.PROTECT,
        related_name="orders",
        help_text=_("Table the order is seated at, referenced by table number."),
    )
    status = models.CharField(
        max_length=20, choices=OrderStatus.choices, default=OrderStatus.PENDING
    )
    customer_name = models.CharField(max_length=200, blank=True, default="")
    assigned_waiter = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="waited_orders",
    )

    # --- Kitchen Fields ---
    assigned_chef = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="cooked_orders",
        help_text=_("Chef who accepted the order. Only this chef may mark it ready."),
    )
    chef_name = models.CharField(max_length=150, blank=True, default="")
    estimated_prep_minutes = models.PositiveIntegerField(null=True, blank=True)
    start_time = models.DateTimeField(
        null=True, blank=True, help_text=_("When preparation started.")
    )

    # --- Timestamps ---
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    ready_at = models.DateTimeField(null=True, blank=True)
    served_at = models.DateTimeField(null=True, blank=True)
    paid_at = models.DateTimeField(null=True, blank=True)

    objects = OrderQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]
        verbose_name = _("Order")
        verbose_name_plural = _("Orders")
        indexes = [
            models.Index(fields=["status", "created_at"], name="order_status_created_idx"),
            models.Index(fields=["assigned_waiter", "status"], name="order_waiter_status_idx"),
        ]
        constraints = [
            # Backs the table/order bijection at the store level.
            models.UniqueConstraint(
                fields=["table"],
                condition=~models.Q(status="paid"),
                name="one_active_order_per_table",
            ),
            models.CheckConstraint(
                condition=models.Q(estimated_prep_minutes__isnull=True)
                | models.Q(estimated_prep_minutes__gt=0),
                name="order_prep_minutes_positive",
            ),
        ]

    def __str__(self):
        return f"Order {self.pk} (table {self.table_id}) - {self.status}"

    @property
    def is_active(self):
        return self.status != self.OrderStatus.PAID

    @property
    def subtotal(self):
        return sum((item.line_total for item in self.items.all()), Decimal("0.00"))

    @property
    def estimated_ready_at(self):
        if self.start_time is None or not self.estimated_prep_minutes:
            return None
        return self.start_time + timedelta(minutes=self.estimated_prep_minutes)


class OrderItem(models.Model):
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="items")
    menu_item = models.ForeignKey(
        "menu.MenuItem", on_delete=models.PROTECT, related_name="order_items"
    )
    name = models.CharField(
        max_length=200, help_text=_("Menu item name at the time of ordering.")
    )
    quantity = models.PositiveIntegerField(default=1)
    notes = models.TextField(blank=True, help_text=_("Guest notes, e.g. 'no onions'"))

    # Price snapshot
    price_at_sale = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        help_text=_("Price of the menu item at the time of sale."),
    )

    class Meta:
        verbose_name = _("Order Item")
        verbose_name_plural = _("Order Items")
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(condition=models.Q(quantity__gt=0), name="order_item_quantity_positive"),
        ]

    def __str__(self):
        return f"{self.quantity} of {self.name} in Order {self.order_id}"

    @property
    def line_total(self):
        return self.quantity * self.price_at_sale
