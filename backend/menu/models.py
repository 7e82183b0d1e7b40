from decimal import Decimal
from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _


class MenuItem(models.Model):
    class Category(models.TextChoices):
        APPETIZER = "appetizer", _("Appetizer")
        MAIN = "main", _("Main")
        DESSERT = "dessert", _("Dessert")
        BEVERAGE = "beverage", _("Beverage")

    name = models.CharField(max_length=200, help_text=_("Name of the dish or drink."))
    description = models.TextField(blank=True)
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text=_("Current selling price. Order lines snapshot this at sale time."),
    )
    category = models.CharField(max_length=20, choices=Category.choices)
    image_url = models.CharField(max_length=500, blank=True, default="")
    ingredients = models.JSONField(default=list, blank=True)
    allergens = models.JSONField(default=list, blank=True)
    available = models.BooleanField(
        default=True, help_text=_("Unavailable items cannot be added to new orders.")
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Menu Item")
        verbose_name_plural = _("Menu Items")
        ordering = ["category", "name"]
        indexes = [
            models.Index(fields=["category", "available"], name="menu_cat_avail_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price__gte=0), name="menu_item_price_non_negative"
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.price})"
