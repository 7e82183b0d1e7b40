from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


class Table(models.Model):
    """
    A physical seating unit, addressed by its human-facing number.

    status, assigned_waiter and current_order are written only by
    tables.services.TableStatusService.
    """

    class TableStatus(models.TextChoices):
        AVAILABLE = "available", _("Available")
        OCCUPIED = "occupied", _("Occupied")
        RESERVED = "reserved", _("Reserved")
        NEED_ASSISTANCE = "need-assistance", _("Needs Assistance")
        MAINTENANCE = "maintenance", _("Maintenance")

    # Statuses that require a live order reference.
    SEATED_STATUSES = [TableStatus.OCCUPIED, TableStatus.NEED_ASSISTANCE]

    number = models.PositiveIntegerField(unique=True, help_text=_("Number shown to guests and staff."))
    capacity = models.PositiveIntegerField(help_text=_("Maximum party size."))
    status = models.CharField(
        max_length=20, choices=TableStatus.choices, default=TableStatus.AVAILABLE
    )
    assigned_waiter = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="assigned_tables",
    )
    current_order = models.ForeignKey(
        "orders.Order",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        help_text=_("The active order seated at this table."),
    )
    location = models.CharField(max_length=100, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Table")
        verbose_name_plural = _("Tables")
        ordering = ["number"]
        indexes = [
            models.Index(fields=["status"], name="table_status_idx"),
            models.Index(fields=["assigned_waiter", "status"], name="table_waiter_status_idx"),
        ]
        constraints = [
            models.CheckConstraint(condition=models.Q(capacity__gte=1), name="table_capacity_positive"),
            models.CheckConstraint(
                condition=(
                    models.Q(status__in=["occupied", "need-assistance"], current_order__isnull=False)
                    | (
                        ~models.Q(status__in=["occupied", "need-assistance"])
                        & models.Q(current_order__isnull=True)
                    )
                ),
                name="table_current_order_matches_status",
            ),
        ]

    def __str__(self):
        return f"Table {self.number} ({self.status})"

    @property
    def is_seated(self):
        return self.status in self.SEATED_STATUSES
