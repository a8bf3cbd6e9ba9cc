"""Decides whether a failed attempt may be retried."""

from retryable.domain.config.retry import RetryConfig


def is_retryable(error: BaseException, config: RetryConfig) -> bool:
    """Check if error should be retried under config.

    Exceptions raised by config.retry_if propagate to the caller.
    """
    if not isinstance(error, config.retryable_errors):
        return False
    # Exclusions win over the retryable list
    if config.exclude and isinstance(error, config.exclude):
        return False
    if config.retry_if is not None:
        return bool(config.retry_if(error))
    return True
