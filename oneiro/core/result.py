#!/usr/bin/env python3
"""
result.py
--------------------
Result container for pipeline primitives that may fail.

Internal steps of the parser (building one entry, validating it) report
failure by value instead of by raising: a Result carries either the value
or a Defect describing what went wrong. The parse supervisor is the only
place that turns a failed Result into a fallback entry or re-raises it.

Usage:
    from oneiro.core.result import attempt

    outcome = attempt("build", DreamEntry.from_callout, block)
    if outcome.ok:
        entries.append(outcome.value)
    else:
        errors.append(outcome.defect.message)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Defect:
    """
    Description of a failed pipeline step.

    Attributes:
        stage: Pipeline stage that failed (e.g. 'scan', 'build')
        message: Human-readable failure message
        error: Original exception, kept so strict mode can re-raise it
    """

    stage: str
    message: str
    error: Optional[BaseException] = None

    @classmethod
    def from_exception(cls, stage: str, error: BaseException) -> Defect:
        """Build a defect from a caught exception."""
        message = str(error) or type(error).__name__
        return cls(stage=stage, message=message, error=error)

    def __str__(self) -> str:
        return f"{self.stage}: {self.message}"


@dataclass(frozen=True)
class Result(Generic[T]):
    """Either a value or a Defect, never both."""

    value: Optional[T] = None
    defect: Optional[Defect] = None

    @classmethod
    def success(cls, value: T) -> Result[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, defect: Defect) -> Result[T]:
        return cls(defect=defect)

    @property
    def ok(self) -> bool:
        return self.defect is None

    def unwrap(self) -> T:
        """
        Return the value, re-raising the original error on failure.

        Raises:
            The exception stored in the defect, or RuntimeError when the
            defect was created without one.
        """
        if self.defect is None:
            return self.value  # type: ignore[return-value]
        if self.defect.error is not None:
            raise self.defect.error
        raise RuntimeError(str(self.defect))


def attempt(stage: str, func: Callable[..., T], *args: Any, **kwargs: Any) -> Result[T]:
    """
    Run ``func`` and capture its outcome as a Result.

    Any Exception becomes a failed Result tagged with ``stage``.
    BaseExceptions such as KeyboardInterrupt propagate.
    """
    try:
        return Result.success(func(*args, **kwargs))
    except Exception as e:
        return Result.failure(Defect.from_exception(stage, e))
