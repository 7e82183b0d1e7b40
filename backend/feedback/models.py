from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _


class Feedback(models.Model):
    class FeedbackStatus(models.TextChoices):
        PENDING = "pending", _("Pending")
        REVIEWED = "reviewed", _("Reviewed")

    MIN_RATING = 1
    MAX_RATING = 5

    customer_name = models.CharField(max_length=200)
    customer_email = models.EmailField(blank=True, default="")
    rating = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(MIN_RATING), MaxValueValidator(MAX_RATING)],
        help_text=_("1 (poor) to 5 (excellent)."),
    )
    comment = models.TextField(blank=True, default="")
    status = models.CharField(
        max_length=20, choices=FeedbackStatus.choices, default=FeedbackStatus.PENDING
    )
    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="reviewed_feedback",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        verbose_name = _("Feedback")
        verbose_name_plural = _("Feedback")
        constraints = [
            models.CheckConstraint(
                condition=models.Q(rating__gte=1, rating__lte=5), name="feedback_rating_range"
            ),
        ]

    def __str__(self):
        return f"{self.customer_name}: {self.rating}/5 ({self.status})"
