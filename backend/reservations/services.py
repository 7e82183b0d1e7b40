import logging
import uuid
from datetime import datetime

from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_email
from django.utils import timezone

from core_backend.exceptions import (
    InvalidTransition,
    NotFoundError,
    ReservationConflict,
    ValidationError,
)
from core_backend.utils.transactions import atomic_with_retry
from tables.models import Table
from .models import Reservation

logger = logging.getLogger(__name__)


class ReservationConflictResolver:
    """
    Overlap detection for table bookings.

    Intervals are half-open: [s1, e1) and [s2, e2) conflict iff
    s1 < e2 and s2 < e1, so back-to-back bookings are allowed.
    """

    @staticmethod
    def overlaps(start_a, end_a, start_b, end_b) -> bool:
        return start_a < end_b and start_b < end_a

    @staticmethod
    def check_conflict(table_number, date, start_time, end_time, exclude_id=None) -> list:
        """
        Non-cancelled reservations on the table and date that overlap the window.

        The caller validates start_time < end_time. An empty list means the
        booking is allowed.
        """
        if not Table.objects.filter(number=table_number).exists():
            raise NotFoundError("Table", table_number)

        qs = (
            Reservation.objects.filter(
                table_id=table_number,
                date=date,
                start_time__lt=end_time,
                end_time__gt=start_time,
            )
            .exclude(status=Reservation.ReservationStatus.CANCELLED)
            .order_by("start_time")
        )
        if exclude_id is not None:
            try:
                exclude_id = uuid.UUID(str(exclude_id))
            except ValueError:
                raise ValidationError(
                    f"Invalid reservation id '{exclude_id}'",
                    errors={"exclude_id": ["must be a valid reservation id"]},
                )
            qs = qs.exclude(pk=exclude_id)
        return list(qs)


class ReservationService:
    """Booking, confirming, cancelling and editing reservations."""

    REQUIRED_FIELDS = [
        "customer_name",
        "customer_email",
        "table_number",
        "date",
        "start_time",
        "end_time",
        "guests",
    ]

    @staticmethod
    def get_reservation(reservation_id) -> Reservation:
        try:
            return Reservation.objects.get(pk=reservation_id)
        except (Reservation.DoesNotExist, ValueError, TypeError, DjangoValidationError):
            raise NotFoundError("Reservation", reservation_id)

    @staticmethod
    def _lock_reservation(reservation_id) -> Reservation:
        try:
            return Reservation.objects.select_for_update().get(pk=reservation_id)
        except (Reservation.DoesNotExist, ValueError, TypeError, DjangoValidationError):
            raise NotFoundError("Reservation", reservation_id)

    @staticmethod
    def validate_fields(data: dict):
        """Shape checks that need no database access."""
        missing = [
            field
            for field in ReservationService.REQUIRED_FIELDS
            if data.get(field) is None or data.get(field) == ""
        ]
        if missing:
            raise ValidationError(
                f"Missing required fields: {', '.join(missing)}",
                errors={field: ["is required"] for field in missing},
            )

        if data["end_time"] <= data["start_time"]:
            raise ValidationError(
                "End time must be after start time",
                errors={"end_time": ["must be after start_time"]},
            )

        guests = data["guests"]
        if not isinstance(guests, int) or isinstance(guests, bool) or guests < 1:
            raise ValidationError(
                "Party size must be at least 1",
                errors={"guests": ["must be a positive integer"]},
            )

        try:
            validate_email(data["customer_email"])
        except DjangoValidationError:
            raise ValidationError(
                "Invalid email address",
                errors={"customer_email": ["enter a valid email address"]},
            )

    @staticmethod
    def _lock_table(table_number) -> Table:
        try:
            return Table.objects.select_for_update().get(number=table_number)
        except (Table.DoesNotExist, ValueError, TypeError):
            raise NotFoundError("Table", table_number)

    @staticmethod
    def _check_booking(table: Table, data: dict, exclude_id=None):
        """Capacity, not-in-the-past and overlap checks against a locked table."""
        if data["guests"] > table.capacity:
            raise ValidationError(
                f"Table {table.number} seats {table.capacity}; party of {data['guests']} is too large",
                errors={"guests": [f"must not exceed table capacity ({table.capacity})"]},
            )

        starts_at = timezone.make_aware(
            datetime.combine(data["date"], data["start_time"]),
            timezone.get_current_timezone(),
        )
        if starts_at < timezone.now():
            raise ValidationError(
                "Cannot book a reservation in the past",
                errors={"date": ["reservation start is in the past"]},
            )

        conflicts = ReservationConflictResolver.check_conflict(
            table.number, data["date"], data["start_time"], data["end_time"], exclude_id=exclude_id
        )
        if conflicts:
            logger.warning(
                f"Reservation conflict on table {table.number} {data['date']} "
                f"{data['start_time']:%H:%M}-{data['end_time']:%H:%M}: {len(conflicts)} overlapping"
            )
            raise ReservationConflict(table.number, data["date"], conflicts)

    @staticmethod
    @atomic_with_retry
    def create_reservation(**data) -> Reservation:
        """
        Book a table. The conflict check and the insert run under the table's
        row lock so two overlapping requests cannot both succeed.
        """
        ReservationService.validate_fields(data)

        table = ReservationService._lock_table(data["table_number"])
        ReservationService._check_booking(table, data)

        reservation = Reservation.objects.create(
            customer_name=data["customer_name"],
            customer_email=data["customer_email"],
            customer_phone=data.get("customer_phone") or "",
            table=table,
            date=data["date"],
            start_time=data["start_time"],
            end_time=data["end_time"],
            guests=data["guests"],
            special_requests=data.get("special_requests") or "",
        )
        logger.info(f"Reservation {reservation.pk} created: {reservation}")
        return reservation

    @staticmethod
    @atomic_with_retry
    def update_reservation(reservation_id, **changes) -> Reservation:
        """Edit a live reservation, re-checking conflicts without counting itself."""
        reservation = ReservationService._lock_reservation(reservation_id)
        if reservation.is_cancelled:
            raise InvalidTransition(
                reservation.status,
                "updated",
                message=f"Reservation {reservation.pk} is cancelled and cannot be changed",
            )

        data = {
            "customer_name": reservation.customer_name,
            "customer_email": reservation.customer_email,
            "customer_phone": reservation.customer_phone,
            "table_number": reservation.table_id,
            "date": reservation.date,
            "start_time": reservation.start_time,
            "end_time": reservation.end_time,
            "guests": reservation.guests,
            "special_requests": reservation.special_requests,
        }
        data.update({key: value for key, value in changes.items() if value is not None})
        ReservationService.validate_fields(data)

        table = ReservationService._lock_table(data["table_number"])
        ReservationService._check_booking(table, data, exclude_id=reservation.pk)

        reservation.customer_name = data["customer_name"]
        reservation.customer_email = data["customer_email"]
        reservation.customer_phone = data["customer_phone"] or ""
        reservation.table = table
        reservation.date = data["date"]
        reservation.start_time = data["start_time"]
        reservation.end_time = data["end_time"]
        reservation.guests = data["guests"]
        reservation.special_requests = data["special_requests"] or ""
        reservation.save()

        logger.info(f"Reservation {reservation.pk} updated: {reservation}")
        return reservation

    @staticmethod
    @atomic_with_retry
    def confirm_reservation(reservation_id) -> Reservation:
        reservation = ReservationService._lock_reservation(reservation_id)

        if reservation.is_cancelled:
            raise InvalidTransition(reservation.status, Reservation.ReservationStatus.CONFIRMED)
        if reservation.status == Reservation.ReservationStatus.CONFIRMED:
            return reservation

        reservation.status = Reservation.ReservationStatus.CONFIRMED
        reservation.save(update_fields=["status", "updated_at"])
        logger.info(f"Reservation {reservation.pk} confirmed")
        return reservation

    @staticmethod
    @atomic_with_retry
    def cancel_reservation(reservation_id) -> Reservation:
        reservation = ReservationService._lock_reservation(reservation_id)

        if reservation.is_cancelled:
            raise InvalidTransition(reservation.status, Reservation.ReservationStatus.CANCELLED)

        reservation.status = Reservation.ReservationStatus.CANCELLED
        reservation.cancelled_at = timezone.now()
        reservation.save(update_fields=["status", "cancelled_at", "updated_at"])
        logger.info(f"Reservation {reservation.pk} cancelled")
        return reservation

    @staticmethod
    def list_reservations(date=None, table_number=None, status=None):
        qs = Reservation.objects.all()
        if date is not None:
            qs = qs.filter(date=date)
        if table_number is not None:
            qs = qs.filter(table_id=table_number)
        if status is not None:
            qs = qs.filter(status=status)
        return qs.order_by("date", "start_time")
