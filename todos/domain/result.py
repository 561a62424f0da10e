from __future__ import annotations
from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from todos.domain.errors import DomainError

T = TypeVar("T")
E = TypeVar("E", bound=DomainError)


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome carrying `value`."""
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err(Generic[E]):
    """Failed outcome carrying a `DomainError` instance."""
    error: E

    @property
    def ok(self) -> bool:
        return False


Result = Union[Ok[T], Err[E]]


### COMMENTS
# Usage:
#   match collection.complete(todo_id):
#       case Ok(value=new_collection): ...
#       case Err(error=TodoAlreadyCompletedError()): ...
#       case Err(error=error): ...
