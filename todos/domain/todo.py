from typing import NewType
from dataclasses import dataclass

TodoId = NewType("TodoId", int)

@dataclass(frozen=True)
class TodoRecord():
    """
    Domain model of a single todo; immutable. `id` is positional and gets
    re-derived by TodoCollection, so the value passed here is only a hint.
    """
    id: TodoId
    title: str
    description: str | None = None
    completed: bool = False


### COMMENTS
# - No validation here: an empty title is allowed on direct construction,
#   the service rejects it at the creation entry point.
# - `description=None` and `description=""` both mean "no description".
# - Changing a field = dataclasses.replace(record, ...) -> new instance.
