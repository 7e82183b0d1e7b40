import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("menu", "0001_initial"),
        ("tables", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Order",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("preparing", "Preparing"),
                            ("ready", "Ready"),
                            ("served", "Served"),
                            ("paid", "Paid"),
                        ],
                        default="pending",
                        max_length=20,
                    ),
                ),
                ("customer_name", models.CharField(blank=True, default="", max_length=200)),
                ("chef_name", models.CharField(blank=True, default="", max_length=150)),
                ("estimated_prep_minutes", models.PositiveIntegerField(blank=True, null=True)),
                ("start_time", models.DateTimeField(blank=True, help_text="When preparation started.", null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("ready_at", models.DateTimeField(blank=True, null=True)),
                ("served_at", models.DateTimeField(blank=True, null=True)),
                ("paid_at", models.DateTimeField(blank=True, null=True)),
                (
                    "table",
                    models.ForeignKey(
                        db_column="table_number",
                        help_text="Table the order is seated at, referenced by table number.",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="orders",
                        to="tables.table",
                        to_field="number",
                    ),
                ),
                (
                    "assigned_waiter",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="waited_orders",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "assigned_chef",
                    models.ForeignKey(
                        blank=True,
                        help_text="Chef who accepted the order. Only this chef may mark it ready.",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="cooked_orders",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Order",
                "verbose_name_plural": "Orders",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["status", "created_at"], name="order_status_created_idx"),
                    models.Index(fields=["assigned_waiter", "status"], name="order_waiter_status_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("status", "paid"), _negated=True),
                        fields=("table",),
                        name="one_active_order_per_table",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("estimated_prep_minutes__isnull", True), ("estimated_prep_minutes__gt", 0), _connector="OR"),
                        name="order_prep_minutes_positive",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="OrderItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(help_text="Menu item name at the time of ordering.", max_length=200)),
                ("quantity", models.PositiveIntegerField(default=1)),
                ("notes", models.TextField(blank=True, help_text="Guest notes, e.g. 'no onions'")),
                ("price_at_sale", models.DecimalField(decimal_places=2, help_text="Price of the menu item at the time of sale.", max_digits=10)),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                        to="orders.order",
                    ),
                ),
                (
                    "menu_item",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="order_items",
                        to="menu.menuitem",
                    ),
                ),
            ],
            options={
                "verbose_name": "Order Item",
                "verbose_name_plural": "Order Items",
                "ordering": ["id"],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(quantity__gt=0), name="order_item_quantity_positive"),
                ],
            },
        ),
    ]
