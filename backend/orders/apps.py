from django.apps import AppConfig


class OrdersConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "orders"

    def ready(self):
        # Connect signal receivers decorated with @receiver.
        from . import signals  # noqa: F401
