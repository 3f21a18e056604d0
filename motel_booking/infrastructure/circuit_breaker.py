"""
Circuit breaker for the payment gateway.

- CLOSED: requests pass through
- OPEN: too many consecutive failures, requests fail immediately
- HALF_OPEN: after ``reset_timeout`` one trial request decides the next state
"""

import logging

import httpx
from pybreaker import CircuitBreaker, CircuitBreakerError, CircuitBreakerListener

from motel_booking.config import get_settings

logger = logging.getLogger(__name__)


class StateChangeLogger(CircuitBreakerListener):
    """Logs breaker state transitions; an opening circuit is worth an alert."""

    def __init__(self, name: str):
        self.name = name

    def state_change(self, cb, old_state, new_state):
        logger.warning(
            "Circuit breaker state changed",
            extra={
                "breaker_name": self.name,
                "old_state": old_state.name if old_state else None,
                "new_state": new_state.name,
            },
        )


# Request timeout and rate limiting are transient even though they are 4xx.
TRANSIENT_CLIENT_STATUSES = frozenset({408, 429})


def is_client_rejection(error: Exception) -> bool:
    """A 4xx answer rejects one request (bad card, invalid payload); the service is up."""
    if not isinstance(error, httpx.HTTPStatusError):
        return False
    code = error.response.status_code
    return 400 <= code < 500 and code not in TRANSIENT_CLIENT_STATUSES


def build_breaker(name: str, fail_max: int, reset_timeout: int) -> CircuitBreaker:
    return CircuitBreaker(
        fail_max=fail_max,
        reset_timeout=reset_timeout,
        exclude=[is_client_rejection],
        name=f"{name}_circuit_breaker",
        listeners=[StateChangeLogger(name)],
    )


_settings = get_settings()

mercadopago_breaker = build_breaker(
    "mercadopago",
    fail_max=_settings.gateway_breaker_fail_max,
    reset_timeout=_settings.gateway_breaker_reset_timeout,
)


__all__ = [
    "mercadopago_breaker",
    "build_breaker",
    "is_client_rejection",
    "CircuitBreakerError",
]
