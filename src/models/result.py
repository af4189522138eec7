"""
Result types for calls to external services.

A call either succeeds with ``Ok(value=...)`` or fails with
``Err(message=...)``. Callers decide the fallback explicitly with
``unwrap_or`` instead of catching exceptions.
"""

from typing import Any, Generic, TypeVar, Union

from pydantic import BaseModel, Field

T = TypeVar("T")


class Ok(BaseModel, Generic[T]):
    """Successful outcome carrying a value."""

    value: T

    def unwrap_or(self, default: Any) -> T:
        return self.value


class Err(BaseModel):
    """Failed outcome of an external service call."""

    message: str = Field(description="Human-readable failure reason")
    kind: str = Field(default="error", description="Failure category, e.g. timeout")

    def unwrap_or(self, default: Any) -> Any:
        return default


# Pydantic generics do not keep TypeVars through Union, so the alias is unparametrized
Result = Union[Ok, Err]
