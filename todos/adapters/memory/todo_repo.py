from todos.domain.todo import TodoRecord
from todos.domain.errors import PersistenceError
from todos.domain.result import Ok, Result
from typing import Iterable

### COMMENTS
# ==========================================================
# In-memory adapter for the todo repository (adapters/memory/todo_repo.py).
# ==========================================================
# - Used by tests and by `todos --memory` (no persistence between runs).
# - Holds one immutable snapshot (tuple); save_all swaps it in a single
#   assignment, so a save is all-or-nothing.
# - Never fails.


class InMemoryTodoRepository:
    """
        In-process repository.
        :param initial: Optional records to seed the store with.
    """
    def __init__(self, initial: Iterable[TodoRecord] | None = None) -> None:
        self._snapshot: tuple[TodoRecord, ...] = tuple(initial or ())
        self.closed = False

    def load_all(self) -> Result[tuple[TodoRecord, ...], PersistenceError]:
        return Ok(tuple(sorted(self._snapshot, key=lambda t: t.id)))

    def save_all(self, records: Iterable[TodoRecord]) -> Result[int, PersistenceError]:
        self._snapshot = tuple(records)
        return Ok(len(self._snapshot))

    def close(self) -> None:
        self.closed = True
