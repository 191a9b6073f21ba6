"""Retry-with-backoff shared by outbound calls."""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryOutcome:
    """Result of a retried call: either `value` or the last `error`."""
    value: Any = None
    error: Optional[str] = None
    attempts: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None


def retry_with_backoff(fn: Callable[[int], Any], attempts: int = 3, base_delay: float = 0.25,
                       label: str = "call", sleep: Callable[[float], None] = time.sleep) -> RetryOutcome:
    """Call `fn(attempt)` until it returns without raising.

    Waits `base_delay * attempt` seconds between attempts. Any exception
    counts as a failure; the last one is reported in the outcome instead
    of being raised.

    Args:
        fn: Callable receiving the 1-based attempt number
        attempts: Maximum number of calls
        base_delay: Linear backoff step in seconds
        label: Name used in log lines
        sleep: Sleep function (injectable for tests)

    Returns:
        RetryOutcome with value on success, error on exhaustion
    """
    last_error = None
    for attempt in range(1, attempts + 1):
        try:
            value = fn(attempt)
            return RetryOutcome(value=value, error=None, attempts=attempt)
        except Exception as e:
            last_error = str(e) or e.__class__.__name__
            logger.warning(f"{label} failed (attempt {attempt}/{attempts}): {last_error}")
            if attempt < attempts:
                sleep(base_delay * attempt)

    logger.error(f"{label} failed after {attempts} attempts")
    return RetryOutcome(value=None, error=last_error, attempts=attempts)
