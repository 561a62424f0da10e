from enum import Enum

class TodoColor(Enum):
    PENDING = "[red]"
    DONE = "[green]"
    ID = "[cyan]"
    RESET = "[/]"

    def __str__(self):
        return self.value


def color_completed(completed: bool) -> str:
    """Returns the completion glyph in Rich markup."""
    if completed:
        return f"{TodoColor.DONE}✓{TodoColor.RESET}"
    return f"{TodoColor.PENDING}✗{TodoColor.RESET}"
