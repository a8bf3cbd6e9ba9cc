"""Retry configuration model."""

import builtins
import importlib
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Type

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class BackoffStrategy(str, Enum):
    """How the delay grows between attempts"""

    LINEAR = "linear"
    EXPONENTIAL = "exponential"


def resolve_error_class(name: str) -> Type[Exception]:
    """Resolve an exception class from a dotted path or a builtin name.

    Args:
        name: "ConnectionError", "socket.timeout", "mypkg.errors.Transient", ...

    Returns:
        Exception class

    Raises:
        ValueError: If the name does not point to an Exception subclass
    """
    module_name, _, attr = name.rpartition(".")
    try:
        if module_name:
            target = getattr(importlib.import_module(module_name), attr)
        else:
            target = getattr(builtins, attr)
    except (ImportError, AttributeError) as e:
        raise ValueError(f"Cannot resolve error class '{name}'") from e

    if not (isinstance(target, type) and issubclass(target, Exception)):
        raise ValueError(f"'{name}' is not an Exception subclass")
    return target


def _normalize_error_classes(value: Any) -> Any:
    if value is None:
        return ()
    if isinstance(value, (type, str)):
        value = (value,)
    return tuple(resolve_error_class(v) if isinstance(v, str) else v for v in value)


class RetryConfig(BaseModel):
    """Configuration for one retried call.

    Out-of-range numbers are clamped instead of rejected, so a config built
    from loosely typed options still describes a runnable policy.

    Attributes:
        max_attempts: Total number of attempts, including the first one (>= 1)
        retryable_errors: Exception classes that trigger a retry (alias: on)
        base_delay: Seed delay in seconds (>= 0)
        backoff: Linear or exponential delay growth
        jitter: Scale each delay by a random factor in [0.5, 1.5)
        before_retry: Callback (attempt, error) fired before each pause
        retry_if: Extra predicate an error must satisfy to be retried (alias: condition)
        exclude: Exception classes never retried (alias: except)
        max_delay: Upper bound for a single delay, applied last
        on_success: Callback (result, attempts) fired when the work returns
        on_failure: Callback (error, attempts) fired before a terminal error propagates
    """

    max_attempts: int = 3
    retryable_errors: Tuple[Type[Exception], ...] = Field(
        (Exception,),
        validation_alias=AliasChoices("retryable_errors", "on"),
    )
    base_delay: float = 1.0
    backoff: BackoffStrategy = Field(
        BackoffStrategy.LINEAR,
        validation_alias=AliasChoices("backoff", "backoff_strategy"),
    )
    jitter: bool = Field(False, validation_alias=AliasChoices("jitter", "jitter_enabled"))
    before_retry: Optional[Callable[[int, Exception], Any]] = Field(
        None,
        validation_alias=AliasChoices("before_retry", "before_retry_hook"),
    )

    retry_if: Optional[Callable[[Exception], bool]] = Field(
        None,
        validation_alias=AliasChoices("retry_if", "condition"),
    )
    exclude: Tuple[Type[Exception], ...] = Field(
        (),
        validation_alias=AliasChoices("exclude", "except", "except_"),
    )
    max_delay: Optional[float] = None
    on_success: Optional[Callable[[Any, int], Any]] = None
    on_failure: Optional[Callable[[Exception, int], Any]] = None

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        arbitrary_types_allowed=True,
    )

    @field_validator("retryable_errors", "exclude", mode="before")
    @classmethod
    def _coerce_error_classes(cls, v: Any) -> Any:
        """Accept a single class, any iterable of classes and dotted names."""
        return _normalize_error_classes(v)

    @field_validator("backoff", mode="before")
    @classmethod
    def _coerce_backoff(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("max_attempts")
    @classmethod
    def _clamp_attempts(cls, v: int) -> int:
        return max(1, v)

    @field_validator("base_delay")
    @classmethod
    def _clamp_base_delay(cls, v: float) -> float:
        return max(0.0, v)

    @field_validator("max_delay")
    @classmethod
    def _clamp_max_delay(cls, v: Optional[float]) -> Optional[float]:
        if v is None:
            return None
        return max(0.0, v)

    @classmethod
    def canonical_options(cls, options: Mapping[str, Any]) -> Dict[str, Any]:
        """Rename option aliases (on, condition, except, ...) to field names"""
        aliases: Dict[str, str] = {}
        for name, field in cls.model_fields.items():
            for choice in getattr(field.validation_alias, "choices", ()):
                aliases[choice] = name

        return {aliases.get(key, key): value for key, value in options.items()}

    def merged(self, **overrides: Any) -> "RetryConfig":
        """Return a new config with overrides applied field by field.

        Raises:
            ValidationError: If an override is invalid or unknown
        """
        values = {name: getattr(self, name) for name in type(self).model_fields}
        values.update(self.canonical_options(overrides))
        return type(self).model_validate(values)

    @classmethod
    def from_options(cls, options: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> "RetryConfig":
        """Build a config from an options bag layered over fresh defaults"""
        return default_config().merged(**{**dict(options or {}), **kwargs})


def default_config() -> RetryConfig:
    """Fresh default configuration (never shared between calls)"""
    return RetryConfig()
