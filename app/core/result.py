"""
Tagged success/failure result returned across the repository boundary.
"""

from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar, Union

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T

    @property
    def is_success(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    message: str
    error: Optional[BaseException] = None

    @property
    def is_success(self) -> bool:
        return False


Result = Union[Success[T], Failure]


def unknown_variant(value: Any) -> TypeError:
    """Error for a value that is none of the declared variants."""
    return TypeError(f"Unhandled variant: {type(value).__name__}")


def map_result(result: "Result[T]", fn: Callable[[T], U]) -> "Result[U]":
    if isinstance(result, Success):
        return Success(fn(result.value))
    if isinstance(result, Failure):
        return result
    raise unknown_variant(result)


def unwrap_or(result: "Result[T]", default: T) -> T:
    if isinstance(result, Success):
        return result.value
    if isinstance(result, Failure):
        return default
    raise unknown_variant(result)
