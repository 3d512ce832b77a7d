"""Retry policy - pure backoff computation with no hidden state"""

import math
import random
from dataclasses import dataclass
from typing import Callable, Optional

from c2p_gateway.domain.errors import NormalizedError


@dataclass(frozen=True)
class RetryPolicy:
    """Bounds for the retry loop around one gateway call"""

    max_retries: int = 3
    base_delay_ms: int = 1000
    max_delay_ms: int = 30000
    jitter_ratio: float = 0.1

    def __post_init__(self) -> None:
        if self.max_retries < 1:
            raise ValueError("max_retries must allow at least one attempt")
        if self.base_delay_ms < 0 or self.max_delay_ms < 0:
            raise ValueError("retry delays must be non-negative")


def base_delay(attempt: int, policy: RetryPolicy) -> int:
    """Exponential delay before jitter: base * 2^(attempt-1), capped at max_delay (attempts start at 1)"""
    if attempt < 1:
        raise ValueError("attempt numbering starts at 1")
    return min(policy.base_delay_ms * (2 ** (attempt - 1)), policy.max_delay_ms)


def compute_delay(
    attempt: int,
    policy: RetryPolicy,
    error: Optional[NormalizedError] = None,
    rand: Callable[[], float] = random.random,
) -> int:
    """
    Delay in whole milliseconds before the next attempt.

    Up to `jitter_ratio` of the capped delay is added on top, then floored.
    Non-retryable errors get no delay.
    """
    if error is not None and not error.retryable:
        return 0
    delay = base_delay(attempt, policy)
    jitter = rand() * policy.jitter_ratio * delay
    return math.floor(delay + jitter)
