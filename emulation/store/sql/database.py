from __future__ import annotations

import logging
import os

from sqlalchemy import inspect, text
from sqlalchemy.engine.url import make_url
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from emulation.store.sql import models  # noqa: F401  registers the tables on SQLModel.metadata

log = logging.getLogger(__name__)

# Columns added after the first release; older files get them via ALTER TABLE.
_LATE_COLUMNS = {
    "score_records": {"violation_date": "DATE"},
    "weeks": {"week_number": "INTEGER"},
}


class Database:
    """Owns the engine for one SQLite file (or an in-memory database)."""

    def __init__(self, database_url: str, echo: bool = False):
        self.url = make_url(database_url)
        kwargs = {}
        if self.url.drivername.startswith("sqlite"):
            kwargs["connect_args"] = {"check_same_thread": False}
            if self.sqlite_path is None:
                # every session must see the same in-memory database
                kwargs["poolclass"] = StaticPool
        self.engine = create_engine(database_url, echo=echo, **kwargs)

    @property
    def sqlite_path(self) -> str | None:
        if not self.url.drivername.startswith("sqlite"):
            return None
        database = self.url.database
        if not database or database == ":memory:":
            return None
        return database

    def session(self) -> Session:
        return Session(self.engine, expire_on_commit=False)

    def create_all(self) -> None:
        path = self.sqlite_path
        if path:
            directory = os.path.dirname(os.path.abspath(path))
            if not os.path.isdir(directory):
                os.makedirs(directory, exist_ok=True)
                log.info("Created data directory %s", directory)
        SQLModel.metadata.create_all(self.engine)
        self._add_late_columns()

    def drop_all(self) -> None:
        SQLModel.metadata.drop_all(self.engine)

    def dispose(self) -> None:
        self.engine.dispose()

    def _add_late_columns(self) -> None:
        inspector = inspect(self.engine)
        with self.engine.begin() as conn:
            for table, columns in _LATE_COLUMNS.items():
                existing = {c["name"] for c in inspector.get_columns(table)}
                for name, ddl_type in columns.items():
                    if name not in existing:
                        conn.execute(text(f"ALTER TABLE {table} ADD COLUMN {name} {ddl_type}"))
                        log.info("Added column %s.%s", table, name)
