import logging
from todos.ports.todo_repository import TodoRepository
from todos.domain.todo import TodoRecord
from todos.domain.collection import TodoCollection
from todos.domain.errors import DomainError, TodoValidationError, PersistenceError
from todos.domain.result import Ok, Err, Result

logger = logging.getLogger(__name__)


### COMMENTS
# ==========================================================
# Service layer (services/todo_service.py) — use cases.
# ==========================================================
# Role:
# - Holds the session's current TodoCollection and swaps the reference
#   whenever the engine returns a new value.
# - Caller-side validation (empty title, update without changes).
# - Bridges the collection and the TodoRepository port (save / load).
#
# Rules:
# - The service talks to ports only; it never imports adapters.
# - Nothing is raised: every use case returns Ok(...) or Err(DomainError).
# - On Err the held collection is left untouched.


def _clean(value: str | None) -> str | None:
    """Strips text; blank -> None."""
    if value is None:
        return None
    value = value.strip()
    return value or None


class TodoService:
    """
    Use-case service for todos.

    :param repo: TodoRepository implementation.
    :param collection: Starting collection (empty by default).
    """
    def __init__(self, repo: TodoRepository, collection: TodoCollection | None = None) -> None:
        self.repo = repo
        self.collection = collection if collection is not None else TodoCollection()

    def add_todo(self, title: str | None, description: str | None = None) -> Result[TodoRecord, TodoValidationError]:
        """
            Creates a new todo at the end of the collection.

            - Validation: `title` must not be empty or whitespace only
              (`TodoValidationError("title", "Title cannot be empty")`).
            - Blank description is stored as "no description" (`None`).

            :return: Ok with the created `TodoRecord`.
        """
        title = _clean(title)
        if title is None:
            return Err(TodoValidationError("title", "Title cannot be empty"))

        self.collection = self.collection.add(title, _clean(description))
        todo = self.collection.list_all()[-1]
        logger.info("Added todo %d", todo.id)
        return Ok(todo)

    def get_todo(self, todo_id: int) -> Result[TodoRecord, DomainError]:
        return self.collection.find_by_id(todo_id)

    def list_todos(self) -> tuple[TodoRecord, ...]:
        return self.collection.list_all()

    def update_todo(
        self,
        todo_id: int,
        title: str | None = None,
        description: str | None = None,
    ) -> Result[TodoRecord, DomainError]:
        """
            Overwrites title and/or description of an existing todo.

            - Blank values mean "keep current".
            - If nothing actually differs from the stored todo, returns
              `TodoValidationError("update", "No changes made")`.
            - Missing id -> `TodoNotFoundError`.
        """
        found = self.collection.find_by_id(todo_id)
        if isinstance(found, Err):
            return found
        current = found.value

        title = _clean(title)
        description = _clean(description)
        if title == current.title:
            title = None
        if description == current.description:
            description = None
        if title is None and description is None:
            return Err(TodoValidationError("update", "No changes made"))

        result = self.collection.update(todo_id, title=title, description=description)
        if isinstance(result, Ok):
            self.collection = result.value
            logger.info("Updated todo %d", todo_id)
            return self.collection.find_by_id(todo_id)
        return result

    def complete_todo(self, todo_id: int) -> Result[TodoRecord, DomainError]:
        """
            Marks an existing todo as completed.

            - Missing id -> `TodoNotFoundError`.
            - Already done -> `TodoAlreadyCompletedError` (not idempotent).
        """
        result = self.collection.complete(todo_id)
        if isinstance(result, Err):
            return result
        self.collection = result.value
        logger.info("Completed todo %d", todo_id)
        return self.collection.find_by_id(todo_id)

    def remove_todo(self, todo_id: int) -> Result[TodoRecord, DomainError]:
        """
            Removes a todo; the ones after it move up by one id.

            :return: Ok with the removed record (as it was before removal).
        """
        found = self.collection.find_by_id(todo_id)
        if isinstance(found, Err):
            return found
        removed = found.value

        result = self.collection.remove(todo_id)
        if isinstance(result, Err):
            return result
        self.collection = result.value
        logger.info("Removed todo %d, %d left", todo_id, len(self.collection))
        return Ok(removed)

    def save(self) -> Result[int, PersistenceError]:
        """Persists every todo of the current collection (all-or-nothing)."""
        return self.repo.save_all(self.collection.list_all())

    def load(self) -> Result[int, PersistenceError]:
        """
            Replaces the current collection with the stored todos.

            Ids are re-derived by position; on failure the current
            collection is kept and the PersistenceError is returned as-is.
        """
        result = self.repo.load_all()
        if isinstance(result, Err):
            return result
        self.collection = TodoCollection.create(result.value)
        return Ok(len(self.collection))

    def close(self) -> None:
        self.repo.close()
