"""Root configuration model for .retryable.yml."""

from pydantic import BaseModel, ConfigDict, Field

from retryable.domain.config.retry import RetryConfig


class AppConfig(BaseModel):
    """Root configuration loaded from .retryable.yml.

    Validation is performed at load time to fail fast on configuration errors.

    Attributes:
        retry: Default retry policy for calls made through the loaded config
    """

    retry: RetryConfig = Field(default_factory=RetryConfig)

    model_config = ConfigDict(
        extra="forbid",  # Reject unknown sections
        json_schema_extra={
            "example": {
                "retry": {
                    "max_attempts": 5,
                    "on": ["ConnectionError", "TimeoutError"],
                    "base_delay": 0.5,
                    "backoff": "exponential",
                    "jitter": True,
                    "max_delay": 30.0,
                },
            }
        },
    )
