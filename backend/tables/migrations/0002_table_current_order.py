import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("tables", "0001_initial"),
        ("orders", "0001_initial"),
    ]

    operations = [
        migrations.AddField(
            model_name="table",
            name="current_order",
            field=models.ForeignKey(
                blank=True,
                help_text="The active order seated at this table.",
                null=True,
                on_delete=django.db.models.deletion.SET_NULL,
                related_name="+",
                to="orders.order",
            ),
        ),
        migrations.AddConstraint(
            model_name="table",
            constraint=models.CheckConstraint(
                condition=(
                    models.Q(status__in=["occupied", "need-assistance"], current_order__isnull=False)
                    | (
                        ~models.Q(status__in=["occupied", "need-assistance"])
                        & models.Q(current_order__isnull=True)
                    )
                ),
                name="table_current_order_matches_status",
            ),
        ),
    ]
