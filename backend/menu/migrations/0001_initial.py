from decimal import Decimal
import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="MenuItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(help_text="Name of the dish or drink.", max_length=200)),
                ("description", models.TextField(blank=True)),
                (
                    "price",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Current selling price. Order lines snapshot this at sale time.",
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                (
                    "category",
                    models.CharField(
                        choices=[
                            ("appetizer", "Appetizer"),
                            ("main", "Main"),
                            ("dessert", "Dessert"),
                            ("beverage", "Beverage"),
                        ],
                        max_length=20,
                    ),
                ),
                ("image_url", models.CharField(blank=True, default="", max_length=500)),
                ("ingredients", models.JSONField(blank=True, default=list)),
                ("allergens", models.JSONField(blank=True, default=list)),
                (
                    "available",
                    models.BooleanField(default=True, help_text="Unavailable items cannot be added to new orders."),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Menu Item",
                "verbose_name_plural": "Menu Items",
                "ordering": ["category", "name"],
                "indexes": [models.Index(fields=["category", "available"], name="menu_cat_avail_idx")],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(price__gte=0), name="menu_item_price_non_negative")
                ],
            },
        ),
    ]
