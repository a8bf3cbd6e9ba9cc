"""Configuration models with Pydantic validation."""

from retryable.domain.config.app import AppConfig
from retryable.domain.config.retry import (
    BackoffStrategy,
    RetryConfig,
    default_config,
    resolve_error_class,
)

__all__ = [
    "AppConfig",
    "BackoffStrategy",
    "RetryConfig",
    "default_config",
    "resolve_error_class",
]
