from __future__ import annotations
import logging
from dataclasses import dataclass, field, replace
from typing import Iterable, Iterator

from todos.domain.todo import TodoRecord, TodoId
from todos.domain.errors import TodoNotFoundError, TodoAlreadyCompletedError
from todos.domain.result import Ok, Err, Result

logger = logging.getLogger(__name__)


### COMMENTS
# ==========================================================
# Todo collection engine (domain/collection.py).
# ==========================================================
# Role:
# - Owns the ordered sequence of TodoRecord plus the next-id counter.
# - Pure: no I/O, no shared state.
#
# Invariants:
# - Ids are dense: for N records the ids in order are exactly 1..N.
#   Re-derived from position on EVERY construction (__post_init__).
# - next_id == N + 1, always derived from content.
# - Completing is one-way; a second complete is TodoAlreadyCompletedError.
# - Never mutated in place: changes return a new TodoCollection, the old
#   value stays valid (frozen dataclass + tuple storage).
# - Failing operations return Err(...) and produce no new collection.


def consolidate_ids(records: Iterable[TodoRecord]) -> tuple[TodoRecord, ...]:
    """Returns the records renumbered by position (index + 1)."""
    return tuple(
        record if record.id == position else replace(record, id=TodoId(position))
        for position, record in enumerate(records, start=1)
    )


@dataclass(frozen=True)
class TodoCollection:
    """
    Immutable, ordered collection of todos.

    :param items: Records in display order; their ids are overwritten positionally.
    """
    items: tuple[TodoRecord, ...] = ()
    next_id: int = field(init=False)

    def __post_init__(self) -> None:
        items = consolidate_ids(self.items)
        object.__setattr__(self, "items", items)
        object.__setattr__(self, "next_id", len(items) + 1)

    @classmethod
    def create(cls, records: Iterable[TodoRecord] = (), next_id: int | None = None) -> TodoCollection:
        """
            Builds a collection from existing records (e.g. freshly loaded from storage).

            - Whatever ids the records carried are discarded and re-derived from position.
            - `next_id` is always derived from content (max id + 1, or 1 when empty);
              an explicit value is ignored.

            :param records: Ordered records, possibly empty, ids may be arbitrary.
            :param next_id: Accepted for callers that track their own counter; ignored.
            :return: New `TodoCollection`. Never fails.
        """
        collection = cls(tuple(records))
        if next_id is not None and next_id != collection.next_id:
            logger.debug("Ignoring next_id=%s, derived %s from content", next_id, collection.next_id)
        return collection

    def add(self, title: str, description: str | None = None) -> TodoCollection:
        """
            Appends a new pending todo with `id = next_id`.

            The title is not validated here; the service rejects empty titles.

            :return: New collection with `next_id` advanced by one. Never fails.
        """
        record = TodoRecord(id=TodoId(self.next_id), title=title, description=description)
        return TodoCollection(self.items + (record,))

    def find_by_id(self, todo_id: int) -> Result[TodoRecord, TodoNotFoundError]:
        index = self._index_of(todo_id)
        if index is None:
            return Err(TodoNotFoundError(todo_id))
        return Ok(self.items[index])

    def complete(self, todo_id: int) -> Result[TodoCollection, TodoNotFoundError | TodoAlreadyCompletedError]:
        """
            Marks a todo as completed.

            - Missing id -> `Err(TodoNotFoundError)`.
            - Already completed -> `Err(TodoAlreadyCompletedError)` (one-way transition).
            - Count does not change, so ids and `next_id` stay as they were.
        """
        index = self._index_of(todo_id)
        if index is None:
            return Err(TodoNotFoundError(todo_id))
        todo = self.items[index]
        if todo.completed:
            return Err(TodoAlreadyCompletedError(todo_id))
        return Ok(self._replace_at(index, replace(todo, completed=True)))

    def update(
        self,
        todo_id: int,
        *,
        title: str | None = None,
        description: str | None = None,
    ) -> Result[TodoCollection, TodoNotFoundError]:
        """
            Merges the given fields into an existing todo.

            Only fields that are not None overwrite; `id` and `completed` cannot be
            set through this path. Calling it with no fields is a valid no-op merge.
        """
        index = self._index_of(todo_id)
        if index is None:
            return Err(TodoNotFoundError(todo_id))
        changes = {}
        if title is not None:
            changes["title"] = title
        if description is not None:
            changes["description"] = description
        return Ok(self._replace_at(index, replace(self.items[index], **changes)))

    def remove(self, todo_id: int) -> Result[TodoCollection, TodoNotFoundError]:
        """
            Removes a todo; remaining todos keep their order and are renumbered
            so ids stay 1..N, `next_id` becomes N + 1.
        """
        index = self._index_of(todo_id)
        if index is None:
            return Err(TodoNotFoundError(todo_id))
        return Ok(TodoCollection(self.items[:index] + self.items[index + 1:]))

    def list_all(self) -> tuple[TodoRecord, ...]:
        """Read-only snapshot of the records in display order."""
        return self.items

    def render_short(self) -> str:
        """One line per todo: `<id>: <title> - ✓|✗`."""
        return "\n".join(
            f"{todo.id}: {todo.title} - {'✓' if todo.completed else '✗'}"
            for todo in self.items
        )

    def render_long(self) -> str:
        if not self.items:
            return "No todos found."
        return "\n\n".join(
            f"ID: {todo.id}\n"
            f"Title: {todo.title}\n"
            f"Description: {todo.description or 'N/A'}\n"
            f"Completed: {'Yes' if todo.completed else 'No'}"
            for todo in self.items
        )

    def _index_of(self, todo_id: int) -> int | None:
        for index, todo in enumerate(self.items):
            if todo.id == todo_id:
                return index
        return None

    def _replace_at(self, index: int, record: TodoRecord) -> TodoCollection:
        return TodoCollection(self.items[:index] + (record,) + self.items[index + 1:])

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[TodoRecord]:
        return iter(self.items)
