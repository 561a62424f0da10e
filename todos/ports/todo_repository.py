from typing import Protocol, Iterable
from todos.domain.todo import TodoRecord
from todos.domain.errors import PersistenceError
from todos.domain.result import Result


### COMMENTS
# ==========================================================
# Persistence contract (ports/todo_repository.py).
# ==========================================================
# This module defines the interface (Protocol) of the todo persistence layer.
# - Independent of technology (memory, JSONL file, SQL database).
# - Adapters never raise: technical errors are returned as
#   Err(PersistenceError(operation, cause)).
# - The store is keyed by `id` with fields {id, title, description, completed}.
# - The engine never touches storage; the service calls the repository.


class TodoRepository(Protocol):
    """Interface for loading and saving the whole set of `TodoRecord`.

    Adapters must:
    - save atomically: all records written, or the store left as it was,
    - load a consistent snapshot, ordered by stored `id`,
    - map technical errors to `PersistenceError`.
    """

    def load_all(self) -> Result[tuple[TodoRecord, ...], PersistenceError]:
        """Reads every stored record.

        Returns:
            Ok(tuple[TodoRecord, ...]): Records ordered by `id` (possibly empty).
            Err(PersistenceError): Connection, read or decoding failure.
        """

    def save_all(self, records: Iterable[TodoRecord]) -> Result[int, PersistenceError]:
        """Replaces the stored set with `records`.

        Returns:
            Ok(int): Number of records written.
            Err(PersistenceError): The store is left in its pre-call state.

        Notes:
            Records absent from `records` are gone after a successful save.
        """

    def close(self) -> None:
        """Releases connections / file handles. Safe to call more than once."""
