"""Retry controllers built on tenacity.

This module translates a RetryConfig into tenacity's stop/wait/retry/
before_sleep pieces so that the thread and asyncio entry points share one
policy.
"""

from __future__ import annotations

import logging
import random
from typing import Any, Callable, Optional

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    Retrying,
    retry_if_exception,
    stop_after_attempt,
)
from tenacity.wait import wait_base

from retryable.domain.backoff import compute_delay
from retryable.domain.classifier import is_retryable
from retryable.domain.config.retry import RetryConfig

logger = logging.getLogger(__name__)


class wait_backoff(wait_base):
    """Wait strategy that delegates to compute_delay."""

    def __init__(self, config: RetryConfig, rng: Optional[random.Random] = None) -> None:
        self.config = config
        self.rng = rng

    def __call__(self, retry_state: RetryCallState) -> float:
        return compute_delay(retry_state.attempt_number, self.config, self.rng)


def _make_before_sleep(config: RetryConfig, label: str) -> Callable[[RetryCallState], None]:
    """Log the retry and fire before_retry ahead of the pause.

    tenacity computes the wait before before_sleep runs, so the delay (and any
    jitter draw from a seeded rng) is already taken when before_retry sees the
    error. A failing hook still aborts the loop before any pause.
    """

    def _before_sleep(retry_state: RetryCallState) -> None:
        if retry_state.outcome is None:
            return
        exception = retry_state.outcome.exception()
        attempt = retry_state.attempt_number
        delay = retry_state.next_action.sleep if retry_state.next_action else 0.0
        logger.warning(
            f"{label} failed (attempt {attempt}/{config.max_attempts}): {exception!r}. "
            f"Retrying in {delay:.2f}s..."
        )
        # Hook errors are not suppressed; they abort the retry loop
        if config.before_retry is not None:
            config.before_retry(attempt, exception)

    return _before_sleep


def _retry_kwargs(config: RetryConfig, label: str, rng: Optional[random.Random]) -> dict:
    return dict(
        stop=stop_after_attempt(config.max_attempts),
        wait=wait_backoff(config, rng),
        retry=retry_if_exception(lambda e: is_retryable(e, config)),
        reraise=True,
        before_sleep=_make_before_sleep(config, label),
    )


def create_retrying(
    config: RetryConfig,
    sleep: Callable[[float], Any],
    label: str = "Operation",
    rng: Optional[random.Random] = None,
) -> Retrying:
    """Create a thread-context tenacity controller.

    Args:
        config: Retry configuration
        sleep: Function called with the delay between attempts
        label: Name used in retry log messages
        rng: Random source for jitter

    Returns:
        Retrying instance; calling it with a thunk runs the retry loop
    """
    return Retrying(
        sleep=lambda seconds: sleep(float(seconds)),
        **_retry_kwargs(config, label, rng),
    )


def create_async_retrying(
    config: RetryConfig,
    sleep: Callable[[float], Any],
    label: str = "Operation",
    rng: Optional[random.Random] = None,
) -> AsyncRetrying:
    """Create an asyncio tenacity controller; sleep must be a coroutine function."""
    return AsyncRetrying(sleep=sleep, **_retry_kwargs(config, label, rng))
