"""Delay calculation between attempts."""

import math
import random
from typing import Optional

from retryable.domain.config.retry import BackoffStrategy, RetryConfig


def compute_delay(attempt_number: int, config: RetryConfig, rng: Optional[random.Random] = None) -> float:
    """Compute the pause after a failed attempt.

    Linear: base_delay * attempt_number
    Exponential: base_delay * 2 ** (attempt_number - 1)

    Jitter scales the backoff result by a factor in [0.5, 1.5). The max_delay
    cap, when set, is applied last. Exponential growth past the float range
    yields math.inf rather than OverflowError.

    Args:
        attempt_number: 1-based number of the attempt that just failed
        config: Retry configuration
        rng: Random source for jitter (module-level random if None)

    Returns:
        Delay in seconds
    """
    if config.base_delay == 0:
        delay = 0.0
    elif config.backoff == BackoffStrategy.EXPONENTIAL:
        try:
            delay = config.base_delay * math.pow(2.0, attempt_number - 1)
        except OverflowError:
            delay = math.inf
    else:
        delay = config.base_delay * attempt_number

    if config.jitter:
        delay *= 0.5 + (rng or random).random()

    if config.max_delay is not None:
        delay = min(delay, config.max_delay)
    return delay
