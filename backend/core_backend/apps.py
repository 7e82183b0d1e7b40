from django.apps import AppConfig
from django.conf import settings
import logging

logger = logging.getLogger(__name__)


class CoreBackendConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "core_backend"

    def ready(self):
        """Log the engine configuration once at startup."""
        logger.debug(
            f"Restaurant engine ready: tax_rate={settings.RESTAURANT_TAX_RATE} "
            f"currency={settings.RESTAURANT_CURRENCY} lock_retries={settings.ORDER_LOCK_RETRIES}"
        )
