# storefront/utils/retry.py
import logging

from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from storefront.domain.errors import ConflictError, TransientStorageError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


#reads only, a retried write could apply twice
def db_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
        retry=retry_if_exception_type(TransientStorageError),
        before_sleep=before_sleep_log(logger, logging.WARNING),
    )


#get-or-create / merge: another request won the race, the next attempt finds its row
def conflict_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(3),
        retry=retry_if_exception_type(ConflictError),
        before_sleep=before_sleep_log(logger, logging.WARNING),
    )
