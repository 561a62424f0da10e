from todos.adapters.memory.todo_repo import InMemoryTodoRepository
from todos.services.todo_service import TodoService
from todos.domain.collection import TodoCollection
from todos.domain.todo import TodoRecord, TodoId
from todos.domain.errors import (
    PersistenceError, TodoAlreadyCompletedError, TodoNotFoundError, TodoValidationError,
)
from todos.domain.result import Ok, Err
import pytest


class FailingRepository:
    """Repository whose every call fails, like a database that is gone."""
    def __init__(self):
        self.calls = 0
        self.closed = False
    def load_all(self):
        self.calls += 1
        return Err(PersistenceError("load", "disk I/O error"))
    def save_all(self, records):
        self.calls += 1
        return Err(PersistenceError("save", "disk I/O error"))
    def close(self):
        self.closed = True


@pytest.fixture
def service():
    return TodoService(InMemoryTodoRepository())


def test_add_todo(service):
    # Act
    result = service.add_todo("Buy milk")

    # Assert
    assert result == Ok(TodoRecord(id=TodoId(1), title="Buy milk"))
    assert service.list_todos() == (result.value,)


def test_add_todo_strips_and_drops_blank_description(service):
    result = service.add_todo("  Buy milk  ", "   ")

    assert result.value.title == "Buy milk"
    assert result.value.description is None


@pytest.mark.parametrize("title", ["", "   ", None])
def test_add_todo_rejects_empty_title(service, title):
    result = service.add_todo(title)

    assert isinstance(result, Err)
    assert isinstance(result.error, TodoValidationError)
    assert result.error.field == "title"
    assert service.list_todos() == ()


def test_get_todo_missing(service):
    service.add_todo("A")

    result = service.get_todo(99)

    assert isinstance(result.error, TodoNotFoundError)


def test_update_todo_title_only(service):
    service.add_todo("A", "desc")

    result = service.update_todo(1, title="B", description="")

    assert result.value == TodoRecord(id=TodoId(1), title="B", description="desc")
    assert service.list_todos()[0].title == "B"


def test_update_todo_without_changes_is_invalid_input(service):
    # Arrange
    service.add_todo("A", "desc")
    before = service.collection

    # Act
    blank = service.update_todo(1, title="", description=" ")
    same = service.update_todo(1, title="A", description="desc")

    # Assert
    for result in (blank, same):
        assert isinstance(result.error, TodoValidationError)
        assert str(result.error) == "No changes made"
    assert service.collection is before


def test_update_todo_missing_id(service):
    result = service.update_todo(4, title="X")

    assert isinstance(result.error, TodoNotFoundError)


def test_complete_todo_is_one_way(service):
    service.add_todo("A")

    first = service.complete_todo(1)
    second = service.complete_todo(1)

    assert first.value.completed is True
    assert isinstance(second.error, TodoAlreadyCompletedError)
    assert service.list_todos()[0].completed is True


def test_remove_todo_returns_removed_and_renumbers(service):
    # Arrange
    service.add_todo("A")
    service.add_todo("B")
    service.add_todo("C")

    # Act
    result = service.remove_todo(1)

    # Assert
    assert result.value.title == "A"
    assert [(t.id, t.title) for t in service.list_todos()] == [(1, "B"), (2, "C")]


def test_remove_todo_missing_keeps_collection(service):
    service.add_todo("A")
    before = service.collection

    result = service.remove_todo(2)

    assert isinstance(result.error, TodoNotFoundError)
    assert service.collection is before


def test_save_and_load_round_trip():
    # Arrange
    repo = InMemoryTodoRepository()
    writer = TodoService(repo)
    writer.add_todo("A", "first")
    writer.add_todo("B")
    writer.complete_todo(2)

    # Act
    saved = writer.save()
    reader = TodoService(repo)
    loaded = reader.load()

    # Assert
    assert saved == Ok(2)
    assert loaded == Ok(2)
    assert reader.list_todos() == writer.list_todos()
    assert reader.collection.next_id == 3


def test_load_renumbers_stored_records():
    repo = InMemoryTodoRepository([
        TodoRecord(id=TodoId(10), title="late"),
        TodoRecord(id=TodoId(4), title="early"),
    ])
    service = TodoService(repo)

    service.load()

    assert [(t.id, t.title) for t in service.list_todos()] == [(1, "early"), (2, "late")]


def test_persistence_errors_propagate_unchanged():
    # Arrange
    repo = FailingRepository()
    service = TodoService(repo, TodoCollection().add("A"))
    before = service.collection

    # Act
    saved = service.save()
    loaded = service.load()

    # Assert
    assert isinstance(saved.error, PersistenceError)
    assert saved.error.cause == "disk I/O error"
    assert isinstance(loaded.error, PersistenceError)
    assert service.collection is before


def test_close_closes_repository():
    repo = InMemoryTodoRepository()

    TodoService(repo).close()

    assert repo.closed is True
