from __future__ import annotations
import logging
from typing import Iterable
import sqlalchemy as db
from sqlalchemy.exc import SQLAlchemyError
from pathlib import Path
from todos.ports.todo_repository import TodoRepository
from todos.domain.todo import TodoRecord, TodoId
from todos.domain.errors import PersistenceError
from todos.domain.result import Ok, Err, Result

logger = logging.getLogger(__name__)


def to_url(target: str | Path) -> str:
    """'todos.db' / Path -> 'sqlite:///todos.db'; full SQLAlchemy URLs pass through."""
    if isinstance(target, Path) or "://" not in target:
        return f"sqlite:///{target}"
    return target


class SqlTodoRepository(TodoRepository):
    def __init__(self, url: str | Path) -> None:
        """
        url: e.g. 'sqlite:///data/todos.db' or a Path / plain file name (turned into a SQLite URL).
        The table is created lazily inside the first transaction.
        """
        self.url = to_url(url)
        self.engine = db.create_engine(self.url, future=True)
        self.meta = db.MetaData()

        self.todos = db.Table(
            "todos",
            self.meta,
            db.Column("id", db.Integer, primary_key=True, autoincrement=False),
            db.Column("title", db.String, nullable=False),
            db.Column("description", db.String, nullable=True),
            db.Column("completed", db.Boolean, nullable=False, default=False),
        )

    def _to_row(self, todo: TodoRecord) -> dict:
        return {
            'id': int(todo.id),
            'title': todo.title,
            'description': todo.description or None,
            'completed': bool(todo.completed),
        }

    def _from_row(self, row) -> TodoRecord:
        return TodoRecord(
            id=TodoId(row["id"]),
            title=row["title"],
            description=row["description"] or None,
            completed=bool(row["completed"]),
        )

    def load_all(self) -> Result[tuple[TodoRecord, ...], PersistenceError]:
        stmt = db.select(self.todos).order_by(self.todos.c.id.asc())
        try:
            # begin() -> one transaction, so the read is a consistent snapshot
            with self.engine.begin() as conn:
                self.meta.create_all(conn)
                rows = conn.execute(stmt).mappings().all()
        except SQLAlchemyError as e:
            logger.error("Loading todos from %s failed: %s", self.url, e)
            return Err(PersistenceError("load", str(e)))
        logger.info("Loaded %d todos from %s", len(rows), self.url)
        return Ok(tuple(self._from_row(r) for r in rows))

    def save_all(self, records: Iterable[TodoRecord]) -> Result[int, PersistenceError]:
        rows = [self._to_row(r) for r in records]
        try:
            with self.engine.begin() as conn:
                self.meta.create_all(conn)
                conn.execute(db.delete(self.todos))
                if rows:
                    conn.execute(db.insert(self.todos), rows)
        except SQLAlchemyError as e:
            # begin() has already rolled back
            logger.error("Saving %d todos to %s failed: %s", len(rows), self.url, e)
            return Err(PersistenceError("save", str(e)))
        logger.info("Saved %d todos to %s", len(rows), self.url)
        return Ok(len(rows))

    def close(self) -> None:
        self.engine.dispose()
