from todos.domain.enums import ErrorKind

### COMMENTS
# ============================================
# Error conventions used across the project
# ============================================
# - Engine (TodoCollection) and service:
#     * never raise these errors, they return them inside `Err(...)`
#     * no partial changes: on `Err` the caller keeps its previous collection
#
# - Repositories (adapters):
#     * map technical errors (SQLAlchemyError, OSError, JSONDecodeError)
#       to PersistenceError, keeping the original cause text
#
# - UI (CLI, REPL):
#     * `kind == ErrorKind.USER`   -> show once, no retry
#     * `kind == ErrorKind.SYSTEM` -> count towards the retry limit


class DomainError(Exception):
    """Base class for all domain errors.

    Instances are values: they travel inside `Err` and are inspected with
    `match`, not raised. Subclassing `Exception` keeps `str(error)` and
    `error.args` behaving the usual way.
    """
    kind: ErrorKind = ErrorKind.USER


class TodoNotFoundError(DomainError):
    """No todo with the requested id exists in the collection."""
    def __init__(self, todo_id: int):
        self.todo_id = todo_id
        super().__init__(self.__str__())
    def __str__(self):
        return f"Todo not found (ID {self.todo_id})"


class TodoAlreadyCompletedError(DomainError):
    """`complete` was called on a todo that is already done.

    Completion is one-way, so a second call is an error and not a no-op.
    """
    def __init__(self, todo_id: int):
        self.todo_id = todo_id
        super().__init__(self.__str__())
    def __str__(self):
        return f"Todo already completed (ID {self.todo_id})"


class TodoValidationError(DomainError):
    """Caller-side input validation failed.

    Examples:
    - the title is empty,
    - an update does not change any field,
    - the typed id is not a number.
    Produced by the service and the dispatcher, never by the engine.
    """
    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(self.__str__())
    def __str__(self):
        return self.message


class PersistenceError(DomainError):
    """The persistence collaborator failed (connection, transaction, serialization).

    `cause` always holds the text of the underlying technical error.
    """
    kind = ErrorKind.SYSTEM

    def __init__(self, operation: str, cause: str):
        self.operation = operation
        self.cause = cause
        super().__init__(self.__str__())
    def __str__(self):
        return f"Database {self.operation} failed: {self.cause}"
