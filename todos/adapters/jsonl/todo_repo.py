from todos.ports.todo_repository import TodoRepository
from todos.domain.todo import TodoRecord, TodoId
from todos.domain.errors import PersistenceError
from todos.domain.result import Ok, Err, Result
from pathlib import Path
from typing import Iterable
import os, json, logging

logger = logging.getLogger(__name__)


def _encode_todo(todo: TodoRecord) -> dict:
    return {
        "id": int(todo.id),
        "title": todo.title,
        "description": todo.description or None,
        "completed": bool(todo.completed),
    }

def _decode_todo(row: dict) -> TodoRecord:
    todo_id = row["id"]
    if not isinstance(todo_id, int) or isinstance(todo_id, bool):
        raise ValueError(f"id must be an integer, got {todo_id!r}")
    title = row["title"]
    if not isinstance(title, str):
        raise ValueError(f"title must be a string, got {title!r}")
    completed = row.get("completed", False)
    if not isinstance(completed, bool):
        raise ValueError(f"completed must be true or false, got {completed!r}")

    return TodoRecord(
        id=TodoId(todo_id),
        title=title,
        description=row.get("description") or None,
        completed=completed,
    )


class JsonlTodoRepository(TodoRepository):
    def __init__(self, path: Path) -> None:
        """JSON-lines repository, one todo per line."""
        self.path = Path(path)

    def load_all(self) -> Result[tuple[TodoRecord, ...], PersistenceError]:
        """Reads all todos ordered by id. A missing file is an empty store."""
        todos: dict[int, TodoRecord] = {}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                for lineno, line in enumerate(f, start=1):
                    line = line.strip()
                    if not line:
                        continue
                    try:
                        todo = _decode_todo(json.loads(line))
                    except json.JSONDecodeError as e:
                        return Err(PersistenceError("load", f"{self.path.name}:{lineno}: invalid JSON: {e}"))
                    except (KeyError, ValueError, TypeError, AttributeError) as e:
                        return Err(PersistenceError("load", f"{self.path.name}:{lineno}: {e}"))

                    if todo.id in todos:
                        return Err(PersistenceError("load", f"{self.path.name}:{lineno}: duplicate id {todo.id}"))
                    todos[todo.id] = todo
        except FileNotFoundError:
            logger.info("%s does not exist yet, nothing to load", self.path)
            return Ok(())
        except (OSError, UnicodeDecodeError) as e:
            logger.error("Reading %s failed: %s", self.path, e)
            return Err(PersistenceError("load", str(e)))
        logger.info("Loaded %d todos from %s", len(todos), self.path)
        return Ok(tuple(todos[key] for key in sorted(todos)))

    def save_all(self, records: Iterable[TodoRecord]) -> Result[int, PersistenceError]:
        """Writes to a swap file first, then replaces the target in one step."""
        records = list(records)
        ids = [r.id for r in records]
        if len(set(ids)) != len(ids):
            return Err(PersistenceError("save", "duplicate id in records"))

        tmp = self.path.with_suffix(self.path.suffix + ".swap")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tmp.open("w", encoding="utf-8", newline="\n") as f:
                for todo in records:
                    f.write(json.dumps(_encode_todo(todo), ensure_ascii=False))
                    f.write("\n")
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, self.path)
        except OSError as e:
            try:
                if tmp.exists():
                    tmp.unlink()
            except OSError:
                logger.warning("Could not remove swap file %s", tmp)
            logger.error("Writing %s failed: %s", self.path, e)
            return Err(PersistenceError("save", str(e)))
        logger.info("Saved %d todos to %s", len(records), self.path)
        return Ok(len(records))

    def close(self) -> None:
        """Nothing is kept open between calls."""
