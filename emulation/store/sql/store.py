from __future__ import annotations

import logging

from emulation.store.sql.database import Database
from emulation.store.sql.repositories import (
    AdminRepository,
    ButtonRepository,
    ScoreRepository,
    StudentRepository,
    WeekRepository,
)

log = logging.getLogger(__name__)


class SqlStore:
    """SQLite file (or in-memory) backend; every mutation is committed before it returns."""

    def __init__(
        self,
        database_url: str,
        *,
        admin_username: str = "admin",
        admin_password: str = "admin123",
        seed_buttons: bool = True,
        default_points: float = 100,
        echo: bool = False,
    ):
        self.db = Database(database_url, echo=echo)
        self.admin_username = admin_username
        self.admin_password = admin_password
        self.seed_buttons = seed_buttons

        self.admins = AdminRepository(self.db)
        self.students = StudentRepository(self.db, default_points=default_points)
        self.buttons = ButtonRepository(self.db)
        self.weeks = WeekRepository(self.db)
        self.scores = ScoreRepository(self.db)

    def initialize(self) -> None:
        self.db.create_all()
        self.admins.ensure(self.admin_username, self.admin_password)
        if self.seed_buttons:
            self.buttons.seed_defaults()
        log.info("SQL store ready at %s", self.db.url.render_as_string(hide_password=True))

    def close(self) -> None:
        self.db.dispose()
