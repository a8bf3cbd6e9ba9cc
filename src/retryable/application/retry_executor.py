"""Retry executor - runs a unit of work until it succeeds or gives up"""

import inspect
import logging
import random
from typing import Any, Awaitable, Callable, Optional, TypeVar, Union

from retryable.domain.config.retry import RetryConfig, default_config
from retryable.domain.models.attempt import AttemptState
from retryable.infrastructure.retry import create_async_retrying, create_retrying
from retryable.infrastructure.suspend import (
    SleepFn,
    Suspender,
    as_async_sleep_fn,
    as_blocking_sleep_fn,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryExecutor:
    """Re-executes a zero-argument callable on retryable errors.

    Each call to execute/execute_async owns its own attempt counter and
    tenacity controller, so one executor can serve concurrent callers.
    Terminal failures surface the original exception object unchanged.
    """

    def __init__(
        self,
        config: Optional[RetryConfig] = None,
        suspend: Optional[Union[Suspender, SleepFn]] = None,
        rng: Optional[random.Random] = None,
        label: str = "Operation",
    ):
        """Initialize executor

        Args:
            config: Default retry configuration (fresh defaults if None)
            suspend: Suspender or sleep function used between attempts
            rng: Random source for jitter
            label: Name used in retry log messages
        """
        self.config = config if config is not None else default_config()
        self.suspend = suspend
        self.rng = rng
        self.label = label

    def execute(
        self,
        work: Callable[[], T],
        config: Optional[RetryConfig] = None,
        suspend: Optional[Union[Suspender, SleepFn]] = None,
    ) -> T:
        """Run work on the calling thread, blocking it between attempts

        Args:
            work: Zero-argument callable
            config: Overrides the executor's configuration for this call
            suspend: Overrides the executor's suspender for this call

        Returns:
            Whatever work returned on its successful attempt

        Raises:
            Exception: The error of the last attempt, unchanged
        """
        config = config if config is not None else self.config
        sleep = as_blocking_sleep_fn(suspend or self.suspend)
        state = AttemptState()

        def _attempt() -> T:
            state.begin()
            return work()

        retrying = create_retrying(config, sleep, label=self.label, rng=self.rng)
        try:
            result = retrying(_attempt)
        except Exception as e:
            if config.on_failure is not None:
                config.on_failure(e, state.attempts)
            raise

        return self._succeeded(config, state, result)

    async def execute_async(
        self,
        work: Callable[[], Union[Awaitable[T], T]],
        config: Optional[RetryConfig] = None,
        suspend: Optional[Union[Suspender, SleepFn]] = None,
    ) -> T:
        """Run work inside an asyncio task, yielding to the loop between attempts

        work may be a coroutine function or a plain callable; awaitable results
        are awaited before being classified.
        """
        config = config if config is not None else self.config
        sleep = as_async_sleep_fn(suspend or self.suspend)
        state = AttemptState()

        async def _attempt() -> T:
            state.begin()
            result = work()
            if inspect.isawaitable(result):
                result = await result
            return result

        retrying = create_async_retrying(config, sleep, label=self.label, rng=self.rng)
        try:
            result = await retrying(_attempt)
        except Exception as e:
            if config.on_failure is not None:
                config.on_failure(e, state.attempts)
            raise

        return self._succeeded(config, state, result)

    def _succeeded(self, config: RetryConfig, state: AttemptState, result: T) -> T:
        if state.attempts > 1:
            logger.debug(f"{self.label} succeeded on attempt {state.attempts}/{config.max_attempts}")
        if config.on_success is not None:
            config.on_success(result, state.attempts)
        return result


def run(work: Callable[[], T], suspend: Optional[Union[Suspender, SleepFn]] = None, **options: Any) -> T:
    """Retry work with options layered over the defaults.

    Example:
        >>> run(fetch, max_attempts=5, on=(ConnectionError,), backoff="exponential")
    """
    return RetryExecutor(RetryConfig.from_options(options), suspend=suspend).execute(work)


async def run_async(
    work: Callable[[], Union[Awaitable[T], T]],
    suspend: Optional[Union[Suspender, SleepFn]] = None,
    **options: Any,
) -> T:
    """Asyncio counterpart of run"""
    return await RetryExecutor(RetryConfig.from_options(options), suspend=suspend).execute_async(work)
