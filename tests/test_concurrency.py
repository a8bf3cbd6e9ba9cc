"""Independent concurrent invocations must not interfere"""

import asyncio
from concurrent.futures import ThreadPoolExecutor

from retryable import RetryConfig, RetryExecutor


def _flaky(failures, value):
    calls = {"n": 0}

    def work():
        calls["n"] += 1
        if calls["n"] <= failures:
            raise ConnectionError(f"{value} failed {calls['n']}")
        return value, calls["n"]

    return work


def test_parallel_threads_keep_their_own_attempt_counts():
    # One executor shared by every thread
    executor = RetryExecutor(RetryConfig(max_attempts=5, base_delay=0.001))
    attempts = {}

    def call(i):
        def on_success(result, n):
            attempts[i] = n

        return executor.execute(_flaky(i, f"job-{i}"), executor.config.merged(on_success=on_success))

    with ThreadPoolExecutor(max_workers=5) as pool:
        results = list(pool.map(call, range(5)))

    assert results == [(f"job-{i}", i + 1) for i in range(5)]
    assert attempts == {i: i + 1 for i in range(5)}


def test_concurrent_tasks_keep_their_own_attempt_counts():
    executor = RetryExecutor(RetryConfig(max_attempts=5, base_delay=0.001))

    async def main():
        return await asyncio.gather(*(executor.execute_async(_flaky(i, i * 10)) for i in range(5)))

    results = asyncio.run(main())

    assert results == [(i * 10, i + 1) for i in range(5)]
