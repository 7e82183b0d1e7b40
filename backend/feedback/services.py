import logging
from django.db import transaction

from core_backend.exceptions import NotFoundError, ValidationError
from .models import Feedback

logger = logging.getLogger(__name__)


class FeedbackService:

    @staticmethod
    @transaction.atomic
    def submit(customer_name, rating, comment="", customer_email="") -> Feedback:
        if not customer_name:
            raise ValidationError("Name is required", errors={"customer_name": ["is required"]})
        if (
            not isinstance(rating, int)
            or isinstance(rating, bool)
            or not Feedback.MIN_RATING <= rating <= Feedback.MAX_RATING
        ):
            raise ValidationError(
                "Rating must be between 1 and 5",
                errors={"rating": ["must be an integer from 1 to 5"]},
            )

        feedback = Feedback.objects.create(
            customer_name=customer_name,
            customer_email=customer_email or "",
            rating=rating,
            comment=comment or "",
        )
        logger.info(f"Feedback {feedback.pk} received: {rating}/5")
        return feedback

    @staticmethod
    @transaction.atomic
    def mark_reviewed(feedback_id, reviewer) -> Feedback:
        try:
            feedback = Feedback.objects.select_for_update().get(pk=feedback_id)
        except (Feedback.DoesNotExist, ValueError, TypeError):
            raise NotFoundError("Feedback", feedback_id)

        if feedback.status != Feedback.FeedbackStatus.REVIEWED:
            feedback.status = Feedback.FeedbackStatus.REVIEWED
            feedback.reviewed_by = reviewer
            feedback.save(update_fields=["status", "reviewed_by", "updated_at"])
        return feedback
