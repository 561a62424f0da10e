import pytest
from typer.testing import CliRunner
from todos.api import cli
from todos.api.cli import app, build_repository
from todos.adapters.jsonl.todo_repo import JsonlTodoRepository
from todos.adapters.memory.todo_repo import InMemoryTodoRepository
from todos.adapters.sql.todo_repo import SqlTodoRepository

runner = CliRunner()


@pytest.fixture
def db(tmp_path):
    return ["--db", str(tmp_path / "todos.db")]


def invoke(*args, input=None):
    return runner.invoke(app, list(args), input=input)


def test_build_repository_picks_adapter(tmp_path):
    assert isinstance(build_repository("x", memory=True), InMemoryTodoRepository)
    assert isinstance(build_repository(str(tmp_path / "t.jsonl")), JsonlTodoRepository)
    repo = build_repository(str(tmp_path / "t.db"))
    assert isinstance(repo, SqlTodoRepository)
    repo.close()


def test_add_then_list(db):
    # Act
    added = invoke(*db, "add", "Buy milk", "-d", "2%")
    listed = invoke(*db, "list", "--long")

    # Assert
    assert added.exit_code == 0, added.output
    assert "Todo added" in added.output
    assert listed.exit_code == 0
    assert "ID: 1\nTitle: Buy milk\nDescription: 2%\nCompleted: No" in listed.output


def test_list_table_and_empty(db):
    empty = invoke(*db, "list")
    invoke(*db, "add", "A")
    table = invoke(*db, "list")

    assert "No todos found." in empty.output
    assert "Total: 1" in table.output


def test_add_empty_title_fails(db):
    result = invoke(*db, "add", "   ")

    assert result.exit_code == 1
    assert "Title cannot be empty" in result.output


def test_done_twice(db):
    invoke(*db, "add", "A")

    first = invoke(*db, "done", "1")
    second = invoke(*db, "done", "1")

    assert first.exit_code == 0
    assert second.exit_code == 1
    assert "Todo already completed" in second.output


def test_show_missing_todo(db):
    result = invoke(*db, "show", "7")

    assert result.exit_code == 1
    assert "Todo not found" in result.output


def test_edit_and_show(db):
    invoke(*db, "add", "A", "-d", "keep")

    edited = invoke(*db, "edit", "1", "--title", "B")
    shown = invoke(*db, "show", "1")

    assert edited.exit_code == 0
    assert "B" in shown.output
    assert "keep" in shown.output


def test_rm_renumbers_stored_todos(db):
    invoke(*db, "add", "A")
    invoke(*db, "add", "B")
    invoke(*db, "add", "C")

    removed = invoke(*db, "rm", "1", "--yes")
    listed = invoke(*db, "list", "-l")

    assert removed.exit_code == 0
    assert "ID: 1\nTitle: B" in listed.output
    assert "ID: 2\nTitle: C" in listed.output
    assert "Title: A" not in listed.output


def test_rm_declined_keeps_todo(db):
    invoke(*db, "add", "A")

    result = invoke(*db, "rm", "1", input="n\n")

    assert "Cancelled." in result.output
    assert "Title: A" in invoke(*db, "list", "-l").output


def test_jsonl_storage(tmp_path):
    target = ["--db", str(tmp_path / "todos.jsonl")]

    invoke(*target, "add", "A")

    assert (tmp_path / "todos.jsonl").exists()
    assert "Title: A" in invoke(*target, "list", "-l").output


def test_unreachable_database_fails_with_database_error(tmp_path):
    result = invoke("--db", str(tmp_path / "nope" / "todos.db"), "list")

    assert result.exit_code == 1
    assert "Database load failed" in result.output


def test_missing_database_driver_fails_with_database_error(monkeypatch):
    def missing_driver(target):
        raise ModuleNotFoundError("No module named 'psycopg2'")

    monkeypatch.setattr(cli, "SqlTodoRepository", missing_driver)

    result = invoke("--db", "postgresql://localhost/todos", "list")

    assert result.exit_code == 1
    assert "Database connect failed" in result.output


def test_shell_is_default_command():
    result = invoke("--memory", input="add\nBuy milk\n\nview\nquit\n")

    assert result.exit_code == 0
    assert "Title: Buy milk" in result.output
    assert "Shutting down application..." in result.output


def test_shell_save_then_one_shot_list(db):
    session = invoke(*db, "shell", input="add\nA\n\nsave\ny\nq\n")

    assert "Todos saved successfully." in session.output
    assert "Title: A" in invoke(*db, "list", "-l").output
