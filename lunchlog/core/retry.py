"""Retry with exponential backoff for calls to external services."""
import logging
import time
from typing import Callable, Tuple, Type, TypeVar

from lunchlog.config.settings import Settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryPolicy:
    def __init__(
        self,
        max_attempts: int = 3,
        base_delay: float = 1.0,
        retry_on: Tuple[Type[BaseException], ...] = (Exception,),
        sleep: Callable[[float], None] = time.sleep,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.retry_on = retry_on
        self.sleep = sleep

    @classmethod
    def from_settings(cls, settings: Settings, retry_on: Tuple[Type[BaseException], ...] = (Exception,)) -> "RetryPolicy":
        return cls(
            max_attempts=settings.retry_max_attempts,
            base_delay=settings.retry_base_delay_seconds,
            retry_on=retry_on,
        )

    def delay_for(self, attempt: int) -> float:
        """Delay after the given failed attempt (1-based)."""
        return self.base_delay * (2 ** (attempt - 1))

    def call(self, fn: Callable[..., T], *args, **kwargs) -> T:
        attempt = 1
        while True:
            try:
                return fn(*args, **kwargs)
            except self.retry_on as e:
                if attempt >= self.max_attempts:
                    logger.error(f"{getattr(fn, '__name__', 'call')} failed after {attempt} attempt(s): {e}")
                    raise
                delay = self.delay_for(attempt)
                logger.warning(
                    f"{getattr(fn, '__name__', 'call')} failed (attempt {attempt}/{self.max_attempts}), "
                    f"retrying in {delay:.1f}s: {e}"
                )
                self.sleep(delay)
                attempt += 1
