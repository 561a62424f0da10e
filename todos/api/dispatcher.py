from __future__ import annotations
import logging
from typing import Callable, Mapping, assert_never
import typer
from rich.console import Console
from rich.markup import escape
from todos.api.commands import (
    COMMANDS, CommandKind, CommandSpec, build_alias_table, command_help, general_help, resolve, spec_for,
)
from todos.domain.enums import ErrorKind
from todos.domain.errors import TodoValidationError
from todos.domain.result import Ok, Err, Result
from todos.services.todo_service import TodoService

logger = logging.getLogger(__name__)

MAX_RETRIES = 3


### COMMENTS
# ==========================================================
# Interactive session (api/dispatcher.py).
# ==========================================================
# Role:
# - Reads one action per line, resolves aliases, asks for confirmation
#   and dispatches to TodoService through a single `match` on CommandKind.
# - Classifies errors by `error.kind`:
#     * USER   -> printed once, the loop goes on,
#     * SYSTEM -> consecutive failures are counted; more than `max_retries`
#                 ends the session. Any success resets the counter.
# - EOF / Ctrl-C on a prompt is treated like `quit`.


def _typer_prompt(text: str) -> str:
    return typer.prompt(text, default="", show_default=False)


def _typer_confirm(text: str) -> bool:
    return typer.confirm(text, default=False)


class Dispatcher:
    """
    Line-by-line command loop over a TodoService.

    :param service: Session service (holds the current collection and repository).
    :param aliases: Read-only alias table, see `build_alias_table()`.
    :param prompt: `text -> answer`; defaults to `typer.prompt`.
    :param confirm: `text -> bool`; defaults to `typer.confirm`.
    :param max_retries: Allowed consecutive system errors before giving up.
    """
    def __init__(
        self,
        service: TodoService,
        aliases: Mapping[str, CommandKind] | None = None,
        console: Console | None = None,
        prompt: Callable[[str], str] = _typer_prompt,
        confirm: Callable[[str], bool] = _typer_confirm,
        max_retries: int = MAX_RETRIES,
        commands: tuple[CommandSpec, ...] = COMMANDS,
    ) -> None:
        self.service = service
        self.commands = commands
        self.aliases = aliases if aliases is not None else build_alias_table(commands)
        self.console = console or Console()
        self.prompt = prompt
        self.confirm = confirm
        self.max_retries = max_retries
        self.failures = 0
        self.running = True

    def run(self) -> None:
        """Runs until `quit`, end of input, or too many system errors; then closes the repository."""
        names = ", ".join(spec.kind.value for spec in self.commands)
        self.console.print(f"\nAvailable commands: {names}")
        while self.running:
            try:
                line = self.prompt("Enter action")
                self.handle(line)
            except typer.Abort:
                logger.info("Input closed, leaving the session")
                self.running = False
        self.console.print("\nShutting down application...")
        self.service.close()

    def handle(self, line: str) -> None:
        words = line.split()
        if not words:
            self.console.print("[yellow]Please enter a valid command.[/]")
            return

        kind = resolve(self.aliases, words[0])
        if kind is None:
            self.console.print(
                f"[red]Invalid command: \"{escape(line.strip())}\". Type 'help' to see available commands.[/]"
            )
            return

        spec = spec_for(kind, self.commands)
        if spec.requires_confirmation and not self.confirm(spec.confirmation_message):
            self.console.print("[dim]Cancelled.[/]")
            return

        logger.debug("Executing %s", kind)
        self._report(spec, self.execute(kind, words[1:]))

    def execute(self, kind: CommandKind, args: list[str]) -> Result:
        match kind:
            case CommandKind.ADD:
                return self._add()
            case CommandKind.VIEW:
                return self._view()
            case CommandKind.UPDATE:
                return self._update()
            case CommandKind.COMPLETE:
                return self._complete()
            case CommandKind.REMOVE:
                return self._remove()
            case CommandKind.SAVE:
                return self.service.save()
            case CommandKind.LOAD:
                return self.service.load()
            case CommandKind.HELP:
                return self._help(args)
            case CommandKind.QUIT:
                self.running = False
                return Ok(None)
            case _:
                assert_never(kind)

    def _report(self, spec: CommandSpec, result: Result) -> None:
        match result:
            case Ok():
                self.failures = 0
                if spec.success_message:
                    self.console.print(f"\n[green]{spec.success_message}[/]")
            case Err(error=error) if error.kind is ErrorKind.USER:
                self.console.print(f"[red]Input error: {escape(str(error))}[/]")
                self.console.print("Please correct your input and try again.")
            case Err(error=error):
                self.failures += 1
                logger.warning("System error %d/%d: %s", self.failures, self.max_retries, error)
                self.console.print(f"[red]System error: {escape(str(error))}[/]")
                if self.failures > self.max_retries:
                    self.console.print(
                        f"[red]Maximum retry attempts ({self.max_retries}) exceeded. Exiting application.[/]"
                    )
                    self.running = False
                else:
                    self.console.print(
                        f"[yellow]System error detected. Retry attempt {self.failures}/{self.max_retries}. "
                        f"Please try again.[/]"
                    )

    def _prompt_for_id(self, action: str) -> Result[int, TodoValidationError]:
        todos = self.service.list_todos()
        if not todos:
            return Err(TodoValidationError("id", "No todos available."))
        self.console.print(self.service.collection.render_short(), markup=False, highlight=False)
        raw = self.prompt(f"Enter todo ID to {action}")
        try:
            return Ok(int(raw.strip()))
        except ValueError:
            return Err(TodoValidationError("id", "No valid ID provided"))

    def _add(self) -> Result:
        title = self.prompt("Enter todo title")
        description = self.prompt("Enter todo description (optional)")
        result = self.service.add_todo(title, description)
        if isinstance(result, Ok):
            self.console.print(f"Added todo {result.value.id}: {escape(result.value.title)}")
        return result

    def _view(self) -> Result:
        self.console.print("Current Todos:")
        self.console.print(self.service.collection.render_long(), markup=False, highlight=False)
        return Ok(None)

    def _update(self) -> Result:
        todo_id = self._prompt_for_id("update")
        if isinstance(todo_id, Err):
            return todo_id
        title = self.prompt("Enter new todo title (leave blank to keep current)")
        description = self.prompt("Enter new todo description (leave blank to keep current)")
        result = self.service.update_todo(todo_id.value, title, description)
        if isinstance(result, Ok):
            self.console.print(f"Updated todo ID {todo_id.value}")
        return result

    def _complete(self) -> Result:
        todo_id = self._prompt_for_id("complete")
        if isinstance(todo_id, Err):
            return todo_id
        result = self.service.complete_todo(todo_id.value)
        if isinstance(result, Ok):
            self.console.print(f"Marked todo ID {todo_id.value} as complete")
        return result

    def _remove(self) -> Result:
        todo_id = self._prompt_for_id("remove")
        if isinstance(todo_id, Err):
            return todo_id
        return self.service.remove_todo(todo_id.value)

    def _help(self, args: list[str]) -> Result:
        if not args:
            self.console.print(general_help(self.commands), markup=False, highlight=False)
            return Ok(None)
        kind = resolve(self.aliases, args[0])
        if kind is None:
            self.console.print(
                f"Unknown command: {args[0]}. Type 'help' to see all available commands.", markup=False, highlight=False
            )
        else:
            self.console.print(command_help(kind, self.commands), markup=False, highlight=False)
        return Ok(None)
