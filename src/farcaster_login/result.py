"""Ok/Err result values.

Operations that can fail for expected reasons return a Result instead of
raising, so every outcome is a value the caller has to inspect.
"""

from dataclasses import dataclass
from typing import Generic, NoReturn, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E", bound=Exception)


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful result."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_err(self) -> NoReturn:
        raise ValueError(f"Called unwrap_err on Ok: {self.value!r}")


@dataclass(frozen=True)
class Err(Generic[E]):
    """Failed result wrapping an error value."""

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> NoReturn:
        raise self.error

    def unwrap_err(self) -> E:
        return self.error


Result = Union[Ok[T], Err[E]]
