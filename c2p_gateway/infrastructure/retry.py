"""Retry driver: serial attempts with exponential backoff and jitter"""

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

from c2p_gateway.domain.errors import classify, is_retryable
from c2p_gateway.domain.exceptions import PaymentGatewayError
from c2p_gateway.domain.retry import RetryPolicy, compute_delay
from c2p_gateway.infrastructure.observability.logging import log_gateway_error
from c2p_gateway.infrastructure.observability.metrics import retry_attempt_counter

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def execute_with_retry(
    fn: Callable[[], Awaitable[T]],
    policy: RetryPolicy | None = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """
    Run `fn` until it succeeds, fails with a non-retryable error, or the
    attempts are exhausted.

    Every call starts a fresh attempt counter at 1 and never overlaps
    attempts. Failures are classified once: a PaymentGatewayError raised by
    `fn` keeps its error, anything else is classified here. Terminal failures
    are logged with the attempt count and raised as PaymentGatewayError.

    Raises:
        PaymentGatewayError: On the first non-retryable failure or after the final attempt
    """
    policy = policy or RetryPolicy()
    attempt = 0

    while True:
        attempt += 1
        try:
            return await fn()
        except Exception as e:
            error = classify(e)

            if not is_retryable(error) or attempt >= policy.max_retries:
                log_gateway_error(error, {"attempt": attempt, "max_retries": policy.max_retries})
                if isinstance(e, PaymentGatewayError):
                    raise
                raise PaymentGatewayError(error) from e

            delay_ms = compute_delay(attempt, policy, error)
            logger.warning(
                "Retrying gateway operation",
                extra={
                    "code": error.code,
                    "attempt": attempt,
                    "max_retries": policy.max_retries,
                    "delay_ms": delay_ms,
                },
            )
            retry_attempt_counter.inc()
            await sleep(delay_ms / 1000)
