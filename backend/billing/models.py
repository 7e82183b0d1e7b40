import uuid

from django.db import models
from django.utils.translation import gettext_lazy as _

from core_backend.exceptions import AlreadyPaid


class Bill(models.Model):
    """
    Financial snapshot of one order at generation time.

    Line items are copied into BillItem rows so later changes to the order or
    the menu never alter an issued bill. Once paid, a bill is immutable.
    """

    class PaymentMethod(models.TextChoices):
        CASH = "cash", _("Cash")
        CARD = "card", _("Card")
        DIGITAL = "digital", _("Digital Wallet")

    class PaymentStatus(models.TextChoices):
        PENDING = "pending", _("Pending")
        PAID = "paid", _("Paid")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.PROTECT,
        related_name="bills",
    )
    table_number = models.PositiveIntegerField(help_text=_("Table number at billing time."))
    customer_name = models.CharField(max_length=200, blank=True, default="")
    waiter_name = models.CharField(max_length=150, blank=True, default="")

    subtotal = models.DecimalField(max_digits=12, decimal_places=2)
    tax_rate = models.DecimalField(
        max_digits=5, decimal_places=4, help_text=_("Tax rate applied, e.g. 0.1000.")
    )
    tax = models.DecimalField(max_digits=12, decimal_places=2)
    total = models.DecimalField(
        max_digits=12, decimal_places=2, help_text=_("subtotal + tax, to the cent.")
    )

    payment_method = models.CharField(
        max_length=20, choices=PaymentMethod.choices, default=PaymentMethod.CASH
    )
    payment_status = models.CharField(
        max_length=20, choices=PaymentStatus.choices, default=PaymentStatus.PENDING
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    paid_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]
        verbose_name = _("Bill")
        verbose_name_plural = _("Bills")
        indexes = [
            models.Index(fields=["payment_status", "created_at"], name="bill_status_created_idx"),
            models.Index(fields=["table_number"], name="bill_table_idx"),
        ]
        constraints = [
            # An order is settled by exactly one bill.
            models.UniqueConstraint(
                fields=["order"],
                condition=models.Q(payment_status="paid"),
                name="one_paid_bill_per_order",
            ),
        ]

    def __str__(self):
        return f"Bill {self.pk} (table {self.table_number}) - {self.total} {self.payment_status}"

    @property
    def is_paid(self):
        return self.payment_status == self.PaymentStatus.PAID

    def _stored_status(self):
        return (
            Bill.objects.filter(pk=self.pk)
            .values_list("payment_status", flat=True)
            .first()
        )

    def save(self, *args, **kwargs):
        if not self._state.adding and self._stored_status() == self.PaymentStatus.PAID:
            raise AlreadyPaid(bill_id=self.pk, message=f"Bill {self.pk} is paid and can no longer change")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        if self._stored_status() == self.PaymentStatus.PAID:
            raise AlreadyPaid(bill_id=self.pk, message=f"Bill {self.pk} is paid and cannot be deleted")
        return super().delete(*args, **kwargs)


class BillItem(models.Model):
    bill = models.ForeignKey(Bill, on_delete=models.CASCADE, related_name="items")
    menu_item_id = models.PositiveIntegerField(
        null=True, blank=True, help_text=_("Source menu item, kept for reporting only.")
    )
    name = models.CharField(max_length=200)
    quantity = models.PositiveIntegerField()
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)
    line_total = models.DecimalField(max_digits=12, decimal_places=2)
    notes = models.TextField(blank=True, default="")

    class Meta:
        ordering = ["id"]
        verbose_name = _("Bill Item")
        verbose_name_plural = _("Bill Items")

    def __str__(self):
        return f"{self.quantity} x {self.name} @ {self.unit_price}"

    def save(self, *args, **kwargs):
        if self.bill.is_paid:
            raise AlreadyPaid(bill_id=self.bill_id, message=f"Bill {self.bill_id} is paid and can no longer change")
        super().save(*args, **kwargs)
