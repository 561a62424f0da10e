from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping


### COMMENTS
# ==========================================================
# Command table for the interactive session (api/commands.py).
# ==========================================================
# - CommandKind is the closed set of commands; the dispatcher matches on it.
# - COMMANDS describes each command once (aliases, help, confirmation).
# - build_alias_table() turns it into a read-only alias -> CommandKind map
#   that is built at startup and handed to the Dispatcher.


class CommandKind(str, Enum):
    ADD = "add"
    VIEW = "view"
    UPDATE = "update"
    COMPLETE = "complete"
    REMOVE = "remove"
    SAVE = "save"
    LOAD = "load"
    HELP = "help"
    QUIT = "quit"

    def __str__(self):
        return self.value


class CommandCategory(str, Enum):
    MANAGEMENT = "📝 Todo Management"
    DATABASE = "💾 Database Operations"
    UTILITY = "🔧 Utilities"

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class CommandSpec:
    kind: CommandKind
    aliases: tuple[str, ...]
    description: str
    usage: str
    category: CommandCategory
    confirmation_message: str | None = None
    success_message: str | None = None

    @property
    def requires_confirmation(self) -> bool:
        return self.confirmation_message is not None


COMMANDS: tuple[CommandSpec, ...] = (
    CommandSpec(CommandKind.ADD, ("create", "+"), "Add a new todo item", "add", CommandCategory.MANAGEMENT),
    CommandSpec(CommandKind.VIEW, ("list", "ls"), "Display all todos with details", "view", CommandCategory.MANAGEMENT),
    CommandSpec(
        CommandKind.UPDATE, ("edit", "modify"),
        "Update an existing todo's title and/or description", "update", CommandCategory.MANAGEMENT,
    ),
    CommandSpec(CommandKind.COMPLETE, ("done", "finish"), "Mark a todo as completed", "complete", CommandCategory.MANAGEMENT),
    CommandSpec(
        CommandKind.REMOVE, ("delete", "rm"),
        "Remove a todo item (requires confirmation)", "remove", CommandCategory.MANAGEMENT,
        confirmation_message="Are you sure you want to remove a todo?",
        success_message="Todo removed successfully.",
    ),
    CommandSpec(
        CommandKind.SAVE, ("persist", "store"),
        "Save current todos to database (requires confirmation)", "save", CommandCategory.DATABASE,
        confirmation_message="This will overwrite the existing database. Continue?",
        success_message="Todos saved successfully.",
    ),
    CommandSpec(
        CommandKind.LOAD, ("import", "get"),
        "Load todos from database (requires confirmation)", "load", CommandCategory.DATABASE,
        confirmation_message="This will overwrite the current todos. Continue?",
        success_message="Todos loaded successfully.",
    ),
    CommandSpec(CommandKind.HELP, ("?", "h"), "Show help information", "help [command]", CommandCategory.UTILITY),
    CommandSpec(CommandKind.QUIT, ("exit", "e", "q"), "Exit the application", "quit", CommandCategory.UTILITY),
)


def build_alias_table(commands: tuple[CommandSpec, ...] = COMMANDS) -> Mapping[str, CommandKind]:
    """Alias -> CommandKind (canonical names included). Read-only."""
    table: dict[str, CommandKind] = {}
    for spec in commands:
        table[spec.kind.value] = spec.kind
        for alias in spec.aliases:
            table[alias] = spec.kind
    return MappingProxyType(table)


def resolve(aliases: Mapping[str, CommandKind], word: str) -> CommandKind | None:
    return aliases.get(word.strip().lower())


def spec_for(kind: CommandKind, commands: tuple[CommandSpec, ...] = COMMANDS) -> CommandSpec:
    for spec in commands:
        if spec.kind is kind:
            return spec
    raise KeyError(kind)


def general_help(commands: tuple[CommandSpec, ...] = COMMANDS) -> str:
    lines = ["", "Available commands:"]
    for category in CommandCategory:
        lines.append("")
        lines.append(f"{category}:")
        for spec in commands:
            if spec.category is not category:
                continue
            alias_text = f" ({', '.join(spec.aliases)})" if spec.aliases else ""
            lines.append(f"  {spec.kind.value}{alias_text.ljust(20)} - {spec.description}")
    lines.append("")
    lines.append("Type 'help <command>' for detailed information about a specific command.")
    return "\n".join(lines)


def command_help(kind: CommandKind, commands: tuple[CommandSpec, ...] = COMMANDS) -> str:
    spec = spec_for(kind, commands)
    alias_text = f" (aliases: {', '.join(spec.aliases)})" if spec.aliases else ""
    lines = [
        f"Command: {spec.kind.value}{alias_text}",
        f"Description: {spec.description}",
        f"Usage: {spec.usage}",
    ]
    if spec.requires_confirmation:
        lines.append("Note: This command requires confirmation before execution.")
    return "\n".join(lines)
