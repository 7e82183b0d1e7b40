"""
Unit-of-work helpers.

Engine operations run inside one database transaction. On PostgreSQL two
staff actions racing for the same row can end in a deadlock or a
serialization failure; those are retried a bounded number of times so the
caller only ever sees the business outcome.
"""
import logging
import time
from functools import wraps

from django.conf import settings
from django.db import OperationalError, transaction

logger = logging.getLogger(__name__)

RETRY_BACKOFF_SECONDS = 0.05


def atomic_with_retry(func):
    """
    Run `func` in its own transaction, retrying on lock contention.

    When the caller already holds an open transaction the function joins it
    and is not retried: the outer unit of work owns the rollback.
    """

    @wraps(func)
    def wrapper(*args, **kwargs):
        if transaction.get_connection().in_atomic_block:
            with transaction.atomic():
                return func(*args, **kwargs)

        max_attempts = max(1, getattr(settings, "ORDER_LOCK_RETRIES", 3))
        for attempt in range(1, max_attempts + 1):
            try:
                with transaction.atomic():
                    return func(*args, **kwargs)
            except OperationalError as e:
                if attempt == max_attempts:
                    logger.error(
                        f"{func.__qualname__} failed after {attempt} attempts: {e}"
                    )
                    raise
                logger.warning(
                    f"Lock contention in {func.__qualname__} (attempt {attempt}/{max_attempts}): {e}"
                )
                time.sleep(RETRY_BACKOFF_SECONDS * attempt)

    return wrapper
