from typing import Any

from loguru import logger
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from mergegate.domain.ports.environment_port import ProvisioningError


def _log_retry(retry_state: Any) -> None:
    exc = retry_state.outcome.exception()
    logger.warning("Provisioning retry {}: {}", retry_state.attempt_number, str(exc)[:200])


def provisioning_retry(attempts: int) -> AsyncRetrying:
    """Retry policy for provisioning steps; attempts=1 means no retry."""
    return AsyncRetrying(
        retry=retry_if_exception_type(ProvisioningError),
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=2, max=30),
        before_sleep=_log_retry,
        reraise=True,
    )
