"""Retry with exponential backoff + jitter, for calls to the (possibly unreliable) stats store."""

import logging
import random
import time
from dataclasses import dataclass, field
from typing import Callable, TypeVar

from sqlalchemy.exc import OperationalError

from src.core.exceptions import PersistenceError, RetryableError, RetryExhaustedError

logger = logging.getLogger(__name__)

T = TypeVar("T")

RETRYABLE_CODES = frozenset({"unavailable", "resource-exhausted"})


def is_retryable(error: BaseException) -> bool:
    """Transient failures: explicit retryable errors, 'unavailable'/'resource-exhausted' codes, lost DB connections."""
    if isinstance(error, (RetryableError, OperationalError)):
        return True
    if isinstance(error, PersistenceError) and error.code in RETRYABLE_CODES:
        return True
    # remote clients do not always set a code, but do tend to say so in the message
    return "unavailable" in str(error).lower()


@dataclass
class RetryPolicy:
    max_attempts: int = 5
    base_delay: float = 0.5
    max_delay: float = 8.0
    jitter: float = 0.25
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False)
    rng: random.Random = field(default_factory=random.Random, repr=False)

    def delay(self, attempt: int) -> float:
        """Wait before retry number `attempt` (0-based): base doubled every attempt, plus up to `jitter` seconds."""
        backoff = min(self.base_delay * (2**attempt), self.max_delay)
        return backoff + self.rng.uniform(0, self.jitter)

    def call(self, fn: Callable[..., T], *args, **kwargs) -> T:
        """
        Call fn(*args, **kwargs), retrying transient failures.
        ----
        * non-retryable errors propagate unchanged on the first occurrence
        * after max_attempts transient failures, RetryExhaustedError is raised (last error chained)
        """
        for attempt in range(self.max_attempts):
            try:
                return fn(*args, **kwargs)
            except Exception as error:
                if not is_retryable(error):
                    raise
                if attempt == self.max_attempts - 1:
                    raise RetryExhaustedError(
                        f"{getattr(fn, '__name__', fn)!s} failed after {self.max_attempts} attempts: {error}",
                        attempts=self.max_attempts,
                    ) from error
                wait = self.delay(attempt)
                logger.debug(
                    "Retryable failure in %s (attempt %d/%d): %s. Retrying in %.2fs",
                    getattr(fn, "__name__", fn),
                    attempt + 1,
                    self.max_attempts,
                    error,
                    wait,
                )
                self.sleep(wait)
        # max_attempts < 1: nothing was tried
        raise RetryExhaustedError("Retry policy allows no attempts.", attempts=0)
