"""
Error taxonomy shared by the reservation, order, table and billing services.

Services raise these before touching any row, so a failed operation never
leaves a partial mutation behind. The HTTP layer turns them into JSON error
responses through `restaurant_exception_handler`.
"""
import logging

from rest_framework import exceptions as drf_exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class RestaurantError(Exception):
    """Base exception for engine errors."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_code = "error"

    def __init__(self, message, details=None, code=None):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.code = code or self.default_code

    def as_dict(self):
        return {"error": self.message, "code": self.code, "details": self.details}


class NotFoundError(RestaurantError):
    """Raised when a referenced entity does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    default_code = "not_found"

    def __init__(self, entity, identifier, message=None):
        self.entity = entity
        self.identifier = identifier
        if message is None:
            message = f"{entity} '{identifier}' not found"
        super().__init__(message, details={"entity": entity, "id": str(identifier)})


class InvalidTransition(RestaurantError):
    """Raised when a lifecycle move is not allowed from the current status."""

    status_code = status.HTTP_409_CONFLICT
    default_code = "invalid_transition"

    def __init__(self, current_status, requested_status, message=None):
        self.current_status = current_status
        self.requested_status = requested_status
        if message is None:
            message = f"Cannot transition from '{current_status}' to '{requested_status}'"
        super().__init__(
            message,
            details={"current_status": current_status, "requested_status": requested_status},
        )


class TableConflict(RestaurantError):
    """Raised when a table is held by a different active order or otherwise unusable."""

    status_code = status.HTTP_409_CONFLICT
    default_code = "table_conflict"

    def __init__(self, table_number, current_order=None, message=None):
        self.table_number = table_number
        self.current_order = current_order
        if message is None:
            message = f"Table {table_number} is already occupied by order {current_order}"
        super().__init__(
            message,
            details={
                "table_number": table_number,
                "current_order": str(current_order) if current_order else None,
            },
        )


class ReservationConflict(RestaurantError):
    """Raised when a requested window overlaps existing reservations."""

    status_code = status.HTTP_409_CONFLICT
    default_code = "reservation_conflict"

    def __init__(self, table_number, reservation_date, conflicts, message=None):
        self.table_number = table_number
        self.reservation_date = reservation_date
        self.conflicts = list(conflicts)
        windows = [
            {
                "id": str(r.id),
                "start_time": r.start_time.strftime("%H:%M"),
                "end_time": r.end_time.strftime("%H:%M"),
                "status": r.status,
            }
            for r in self.conflicts
        ]
        if message is None:
            slots = ", ".join(f"{w['start_time']}-{w['end_time']}" for w in windows)
            message = (
                f"Table {table_number} is already reserved on {reservation_date} "
                f"for {slots}. Please choose a different time or table."
            )
        super().__init__(
            message,
            details={
                "table_number": table_number,
                "reservation_date": str(reservation_date),
                "conflicts": windows,
            },
        )


class AlreadyPaid(RestaurantError):
    """Raised on a repeated payment attempt for a settled bill or order."""

    status_code = status.HTTP_409_CONFLICT
    default_code = "already_paid"

    def __init__(self, bill_id=None, order_id=None, message=None):
        self.bill_id = bill_id
        self.order_id = order_id
        if message is None:
            if bill_id:
                message = f"Bill {bill_id} has already been paid"
            else:
                message = f"Order {order_id} has already been paid"
        super().__init__(
            message,
            details={
                "bill_id": str(bill_id) if bill_id else None,
                "order_id": str(order_id) if order_id else None,
            },
        )


class ValidationError(RestaurantError):
    """Raised for malformed input. `errors` maps field names to messages."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_code = "validation_error"

    def __init__(self, message, errors=None):
        self.errors = errors or {}
        super().__init__(message, details={"errors": self.errors})


def restaurant_exception_handler(exc, context):
    """
    DRF exception handler that renders RestaurantError subclasses.

    Serializer validation failures get the same envelope so clients see one
    error shape. Anything else falls through to the stock DRF handler.
    """
    request = context.get("request")
    path = request.path if request is not None else ""

    if isinstance(exc, RestaurantError):
        if exc.status_code >= 500:
            logger.error(f"{exc.__class__.__name__} on {path}: {exc.message}")
        else:
            logger.info(f"{exc.__class__.__name__} on {path}: {exc.message}")
        return Response(exc.as_dict(), status=exc.status_code)

    if isinstance(exc, drf_exceptions.ValidationError):
        error = ValidationError("Invalid request payload", errors=exc.detail)
        logger.info(f"Rejected payload on {path}: {exc.detail}")
        return Response(error.as_dict(), status=error.status_code)

    return exception_handler(exc, context)
