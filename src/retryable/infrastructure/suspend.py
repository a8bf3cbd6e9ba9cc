"""Suspension strategies used between attempts.

The executor never inspects the running scheduler: a thread-blocking or an
event-loop-friendly suspender is chosen by the entry point or injected by
the caller.
"""

from __future__ import annotations

import asyncio
import inspect
import threading
import time
from typing import Any, Awaitable, Callable, Optional, Protocol, Union, runtime_checkable

SleepFn = Callable[[float], Union[None, Awaitable[None]]]

# Longest single pause handed to time.sleep / asyncio.sleep
MAX_SUSPEND_SECONDS = threading.TIMEOUT_MAX


@runtime_checkable
class Suspender(Protocol):
    """Anything that can pause the current attempt for a number of seconds"""

    def suspend(self, seconds: float) -> Any:
        ...


class ThreadSuspender:
    """Blocks the calling thread only; other threads keep running."""

    def suspend(self, seconds: float) -> None:
        time.sleep(min(seconds, MAX_SUSPEND_SECONDS))


class AsyncioSuspender:
    """Yields to the running event loop for the duration of the pause."""

    async def suspend(self, seconds: float) -> None:
        await asyncio.sleep(min(seconds, MAX_SUSPEND_SECONDS))


def as_sleep_fn(suspend: Optional[Union[Suspender, SleepFn]], default: Suspender) -> SleepFn:
    """Turn a suspender object or a plain callable into a sleep function

    Raises:
        TypeError: If suspend is neither a Suspender nor callable
    """
    if suspend is None:
        suspend = default
    if isinstance(suspend, Suspender):
        return suspend.suspend
    if callable(suspend):
        return suspend
    raise TypeError(f"Expected a Suspender or a callable, got {type(suspend).__name__}")


def as_async_sleep_fn(
    suspend: Optional[Union[Suspender, SleepFn]],
) -> Callable[[float], Awaitable[None]]:
    """Sleep function for the asyncio path; synchronous suspenders are accepted too"""
    sleep = as_sleep_fn(suspend, AsyncioSuspender())

    async def _sleep(seconds: float) -> None:
        outcome = sleep(float(seconds))
        if inspect.isawaitable(outcome):
            await outcome

    return _sleep


def as_blocking_sleep_fn(suspend: Optional[Union[Suspender, SleepFn]]) -> Callable[[float], None]:
    """Sleep function for the thread path

    Raises:
        TypeError: If the suspender is asynchronous; its coroutine would never be awaited
    """
    sleep = as_sleep_fn(suspend, ThreadSuspender())
    if inspect.iscoroutinefunction(sleep):
        raise TypeError(f"{_describe(sleep)} is asynchronous; use execute_async instead")

    def _sleep(seconds: float) -> None:
        outcome = sleep(seconds)
        if inspect.isawaitable(outcome):
            if inspect.iscoroutine(outcome):
                outcome.close()
            raise TypeError(f"{_describe(sleep)} returned an awaitable; use execute_async instead")

    return _sleep


def _describe(sleep: Callable[..., Any]) -> str:
    return getattr(sleep, "__qualname__", type(sleep).__name__)
