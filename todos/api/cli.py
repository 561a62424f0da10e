from todos.domain.errors import (
    DomainError, PersistenceError, TodoAlreadyCompletedError, TodoNotFoundError, TodoValidationError,
)
from todos.domain.todo import TodoRecord
from todos.domain.result import Err
from todos.services.todo_service import TodoService
from todos.ports.todo_repository import TodoRepository
from todos.adapters.memory.todo_repo import InMemoryTodoRepository
from todos.adapters.jsonl.todo_repo import JsonlTodoRepository
from todos.adapters.sql.todo_repo import SqlTodoRepository
from todos.api.commands import build_alias_table
from todos.api.dispatcher import Dispatcher
from todos.api.colors import TodoColor, color_completed
from todos.logging_setup import setup_logging
from sqlalchemy.exc import SQLAlchemyError
from typer import Context, Exit, Option, Typer, confirm
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.panel import Panel
from pathlib import Path
from typing import NoReturn, Optional


### COMMENTS
# ==========================================================
# CLI (Typer + Rich) — user interface for todos.
# ==========================================================
# Role:
# - No command (or `shell`) -> interactive session (Dispatcher).
# - One-shot commands (add/list/show/edit/done/rm) work on the stored
#   todos: load -> one TodoService call -> save.
# - Err(DomainError) -> red panel + exit code 1.
#
# Rules:
# - No business logic here; delegate to TodoService.
# - Dependencies (repo + service) are built once in the callback.


app = Typer(help="Todos CLI")
console = Console()

service: TodoService | None = None  # set in the callback


def build_repository(target: str, memory: bool = False) -> TodoRepository:
    """Picks the adapter.
    - --memory        -> InMemory (nothing is persisted)
    - *.jsonl         -> Jsonl file
    - anything else   -> SQL (file name for SQLite or a full SQLAlchemy URL)
    """
    if memory:
        return InMemoryTodoRepository()
    if target.endswith(".jsonl"):
        return JsonlTodoRepository(Path(target))
    return SqlTodoRepository(target)


def build_service(target: str, memory: bool = False) -> TodoService:
    return TodoService(build_repository(target, memory))


def fail(error: DomainError) -> NoReturn:
    """Prints the error as a red panel and stops with exit code 1."""
    match error:
        case TodoNotFoundError():
            title = "Not found"
            hint = "\n[dim]Use 'todos list' to find a valid ID[/]"
        case TodoAlreadyCompletedError():
            title = "Already completed"
            hint = ""
        case TodoValidationError():
            title = "Validation error"
            hint = "\n[dim]Hint: todos add 'Title' -d 'Description'[/]" if error.field == "title" else ""
        case PersistenceError():
            title = "Database error"
            hint = ""
        case _:
            title = "Domain error"
            hint = ""
    console.print(Panel.fit(f"❌ {escape(str(error))}{hint}", title=title, border_style="red"))
    raise Exit(code=1)


def load_stored() -> None:
    result = service.load()
    if isinstance(result, Err):
        fail(result.error)


def save_stored() -> None:
    result = service.save()
    if isinstance(result, Err):
        fail(result.error)


def describe(todo: TodoRecord) -> str:
    """ID / Title / Description / Completed lines in Rich markup."""
    return "\n".join([
        f"{TodoColor.ID}ID:{TodoColor.RESET} {todo.id}",
        f"[dim]Title:[/dim] {escape(todo.title)}",
        f"[dim]Description:[/dim] {escape(todo.description) if todo.description else '[dim]N/A[/]'}",
        f"[dim]Completed:[/dim] {color_completed(todo.completed)}",
    ])


def render_list(items: tuple[TodoRecord, ...]) -> None:
    """Renders a Rich table with columns: ID, Title, Description, Done."""
    if not items:
        console.print("[dim]No todos found.[/]")
        return

    table = Table(show_lines=True, header_style="bold")
    table.add_column("ID", no_wrap=True, style="cyan")
    table.add_column("Title")
    table.add_column("Description", style="dim")
    table.add_column("Done", no_wrap=True, justify="center")

    for t in items:
        table.add_row(str(t.id), escape(t.title), escape(t.description or ""), color_completed(t.completed))

    done = sum(1 for t in items if t.completed)
    console.print(table)
    console.print(f"[dim]Total: {len(items)} • Done: {done}[/dim]")


@app.callback(invoke_without_command=True)
def main(
    ctx: Context,
    db: str = Option(
        "todos.db",
        "--db",
        "-f",
        envvar="TODOS_DB",
        help="SQLite file, SQLAlchemy URL or *.jsonl file",
    ),
    memory: bool = Option(False, "--memory", help="Do not persist anything"),
    verbose: bool = Option(False, "--verbose", "-v", help="Log what is happening (stderr)"),
) -> None:
    """Bootstrap of dependencies when the CLI process starts."""
    global service
    setup_logging(verbose)
    try:
        service = build_service(db, memory)
    except (SQLAlchemyError, ImportError) as e:
        fail(PersistenceError("connect", str(e)))
    ctx.call_on_close(service.close)

    if ctx.invoked_subcommand is None:
        shell()


@app.command("shell")
def shell() -> None:
    """Interactive session: add, view, update, complete, remove, save, load, help, quit."""
    Dispatcher(service, aliases=build_alias_table(), console=console).run()


@app.command("add")
def add(title: str, desc: Optional[str] = Option(None, "--desc", "-d")) -> None:
    """Adds a new todo and stores it."""
    load_stored()
    result = service.add_todo(title, desc)
    if isinstance(result, Err):
        fail(result.error)
    save_stored()
    console.print(Panel.fit(f"✅ Todo added\n{describe(result.value)}", title="Success", border_style="green"))


@app.command("list")
def list_cmd(long: bool = Option(False, "--long", "-l", help="One block per todo")) -> None:
    """Lists stored todos."""
    load_stored()
    if long:
        console.print(service.collection.render_long(), markup=False, highlight=False)
        return
    render_list(service.list_todos())


@app.command("show")
def show(todo_id: int) -> None:
    """Shows the details of one todo."""
    load_stored()
    result = service.get_todo(todo_id)
    if isinstance(result, Err):
        fail(result.error)
    console.print(Panel.fit(describe(result.value), title="Todo details", border_style="cyan"))


@app.command("edit")
def edit(
    todo_id: int,
    title: Optional[str] = Option(None, "--title", "-t"),
    desc: Optional[str] = Option(None, "--desc", "-d"),
) -> None:
    """Changes the title and/or description of a todo."""
    load_stored()
    result = service.update_todo(todo_id, title, desc)
    if isinstance(result, Err):
        fail(result.error)
    save_stored()
    console.print(Panel.fit(f"✅ Todo updated\n{describe(result.value)}", title="Success", border_style="green"))


@app.command("done")
def done(todo_id: int) -> None:
    """Marks a todo as completed."""
    load_stored()
    result = service.complete_todo(todo_id)
    if isinstance(result, Err):
        fail(result.error)
    save_stored()
    console.print(Panel.fit(f"✅ Completed\n{describe(result.value)}", title="Success", border_style="green"))


@app.command("rm")
def rm(todo_id: int, yes: bool = Option(False, "--yes", "-y", help="Skip confirmation")) -> None:
    """Removes a todo; the todos after it are renumbered."""
    load_stored()
    found = service.get_todo(todo_id)
    if isinstance(found, Err):
        fail(found.error)
    if not yes and not confirm("Are you sure you want to remove a todo?", default=False):
        console.print("[dim]Cancelled.[/]")
        return
    result = service.remove_todo(todo_id)
    if isinstance(result, Err):
        fail(result.error)
    save_stored()
    console.print(Panel.fit(
        f"🟡 Todo removed\nID: {todo_id}\n[dim]Title:[/dim] {escape(result.value.title)}",
        title="Removed",
        border_style="yellow",
    ))


if __name__ == "__main__":
    app()
