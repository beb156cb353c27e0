from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar

from conan_readme_mcp.errors import RateLimitError, ServiceUnavailableError, is_retryable

T = TypeVar("T")

logger = logging.getLogger(__name__)


@dataclass
class CircuitBreakerConfig:
    failure_threshold: int = 5
    reset_timeout_seconds: float = 30.0


class CircuitState:
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitBreaker:
    """Stops calling an upstream after repeated retryable failures.

    Only failures that :func:`is_retryable` accepts count toward opening the
    circuit; a 404 or a validation error says nothing about upstream health.
    """

    def __init__(self, config: Optional[CircuitBreakerConfig] = None, name: str = "upstream") -> None:
        self._config = config or CircuitBreakerConfig()
        self._name = name
        self._state = CircuitState.CLOSED
        self._failures = 0
        self._opened_at = 0.0

    @property
    def state(self) -> str:
        return self._state

    def _can_attempt(self) -> bool:
        if self._state == CircuitState.OPEN:
            if (time.monotonic() - self._opened_at) >= self._config.reset_timeout_seconds:
                self._state = CircuitState.HALF_OPEN
                return True
            return False
        return True

    def _on_success(self) -> None:
        self._state = CircuitState.CLOSED
        self._failures = 0

    def _on_failure(self) -> None:
        self._failures += 1
        if self._state == CircuitState.HALF_OPEN or self._failures >= self._config.failure_threshold:
            if self._state != CircuitState.OPEN:
                logger.warning("Circuit for %s opened after %d failures", self._name, self._failures)
            self._state = CircuitState.OPEN
            self._opened_at = time.monotonic()

    async def run(self, fn: Callable[[], Awaitable[T]]) -> T:
        if not self._can_attempt():
            raise ServiceUnavailableError(f"Circuit open for {self._name}; skipping upstream call")
        try:
            result = await fn()
        except Exception as exc:
            if is_retryable(exc):
                self._on_failure()
            else:
                self._on_success()
            raise
        else:
            self._on_success()
            return result


async def with_retries(
    coro_factory: Callable[[], Awaitable[T]],
    attempts: int = 3,
    base_delay: float = 1.0,
    context: str = "operation",
) -> T:
    """Run ``coro_factory`` until it succeeds or ``attempts`` are used up.

    Only retryable errors are retried; the delay doubles per attempt unless a
    rate-limit error supplies its own ``retry_after``.
    """
    for attempt in range(attempts):
        try:
            return await coro_factory()
        except Exception as exc:
            if not is_retryable(exc) or attempt == attempts - 1:
                if attempt:
                    logger.error("%s failed after %d attempts: %s", context, attempt + 1, exc)
                raise
            if isinstance(exc, RateLimitError) and exc.retry_after is not None:
                delay = exc.retry_after
            else:
                delay = base_delay * (2**attempt)
            logger.warning(
                "%s failed, retrying in %.2fs (attempt %d/%d): %s", context, delay, attempt + 1, attempts, exc
            )
            await asyncio.sleep(delay)
    raise ValueError("attempts must be at least 1")
