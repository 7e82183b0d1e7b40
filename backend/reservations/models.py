import uuid

from django.db import models
from django.utils.translation import gettext_lazy as _


class Reservation(models.Model):
    """
    A booked [start_time, end_time) window on one table for one date.

    For a given table and date, non-cancelled reservations never overlap.
    Cancelled reservations are kept for history and ignored by conflict checks.
    """

    class ReservationStatus(models.TextChoices):
        PENDING = "pending", _("Pending")
        CONFIRMED = "confirmed", _("Confirmed")
        CANCELLED = "cancelled", _("Cancelled")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # --- Customer ---
    customer_name = models.CharField(max_length=200)
    customer_email = models.EmailField()
    customer_phone = models.CharField(max_length=30, blank=True, default="")

    # --- Booking ---
    table = models.ForeignKey(
        "tables.Table",
        to_field="number",
        db_column="table_number",
        on_delete=models.PROTECT,
        related_name="reservations",
    )
    date = models.DateField()
    start_time = models.TimeField()
    end_time = models.TimeField()
    guests = models.PositiveIntegerField(help_text=_("Party size; may not exceed table capacity."))
    special_requests = models.TextField(blank=True, default="")
    status = models.CharField(
        max_length=20, choices=ReservationStatus.choices, default=ReservationStatus.PENDING
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["date", "start_time"]
        verbose_name = _("Reservation")
        verbose_name_plural = _("Reservations")
        indexes = [
            models.Index(fields=["table", "date", "status"], name="resv_table_date_status_idx"),
            models.Index(fields=["date", "start_time"], name="resv_date_start_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_time__gt=models.F("start_time")),
                name="reservation_end_after_start",
            ),
            models.CheckConstraint(condition=models.Q(guests__gte=1), name="reservation_guests_positive"),
        ]

    def __str__(self):
        return (
            f"{self.customer_name} - table {self.table_id} on {self.date} "
            f"{self.start_time:%H:%M}-{self.end_time:%H:%M} ({self.status})"
        )

    @property
    def is_cancelled(self):
        return self.status == self.ReservationStatus.CANCELLED
