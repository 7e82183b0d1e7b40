from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils.translation import gettext_lazy as _


class User(AbstractUser):
    """
    A member of restaurant staff.

    Waiters open orders and own tables, chefs accept and finish orders in the
    kitchen, managers confirm reservations and administer tables and menu.
    """

    class Role(models.TextChoices):
        WAITER = "waiter", _("Waiter")
        CHEF = "chef", _("Chef")
        MANAGER = "manager", _("Manager")

    role = models.CharField(
        _("role"), max_length=20, choices=Role.choices, default=Role.WAITER
    )
    phone_number = models.CharField(
        _("phone number"), max_length=20, blank=True, null=True
    )
    updated_at = models.DateTimeField(_("updated at"), auto_now=True)

    class Meta:
        verbose_name = _("Staff member")
        verbose_name_plural = _("Staff")
        ordering = ["username"]
        indexes = [
            models.Index(fields=["role"], name="user_role_idx"),
        ]

    def __str__(self):
        return self.display_name

    @property
    def display_name(self):
        full_name = self.get_full_name()
        return full_name or self.username

    @property
    def is_waiter(self):
        return self.role == self.Role.WAITER

    @property
    def is_chef(self):
        return self.role == self.Role.CHEF

    @property
    def is_manager(self):
        return self.role == self.Role.MANAGER or self.is_superuser
