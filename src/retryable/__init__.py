"""Retry helper for sync and asyncio callers."""

from retryable.application.retry_executor import RetryExecutor, run, run_async
from retryable.domain.backoff import compute_delay
from retryable.domain.classifier import is_retryable
from retryable.domain.config import BackoffStrategy, RetryConfig, default_config
from retryable.infrastructure.config.config_manager import ConfigManager, ConfigurationError
from retryable.infrastructure.suspend import AsyncioSuspender, Suspender, ThreadSuspender

__all__ = [
    "RetryExecutor",
    "run",
    "run_async",
    "RetryConfig",
    "BackoffStrategy",
    "default_config",
    "ConfigManager",
    "ConfigurationError",
    "compute_delay",
    "is_retryable",
    "Suspender",
    "ThreadSuspender",
    "AsyncioSuspender",
]
