"""Utility module for configuration and resilience patterns."""

from .resilience import CircuitBreaker, CircuitBreakerConfig, CircuitState, with_retries

__all__ = [
    "CircuitBreaker",
    "CircuitBreakerConfig",
    "CircuitState",
    "with_retries",
]
