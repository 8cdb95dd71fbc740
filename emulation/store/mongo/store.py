from __future__ import annotations

import logging

from pymongo import MongoClient

from emulation.store.mongo.database import MongoDatabase
from emulation.store.mongo.repositories import (
    AdminRepository,
    ButtonRepository,
    ScoreRepository,
    StudentRepository,
    WeekRepository,
)

log = logging.getLogger(__name__)


class MongoStore:
    """MongoDB backend over an injected client (pymongo, or mongomock in tests)."""

    def __init__(
        self,
        client: MongoClient,
        db_name: str = "emulation",
        *,
        admin_username: str = "admin",
        admin_password: str = "admin123",
        seed_buttons: bool = True,
        default_points: float = 100,
    ):
        self.db = MongoDatabase(client, db_name)
        self.admin_username = admin_username
        self.admin_password = admin_password
        self.seed_buttons = seed_buttons

        self.admins = AdminRepository(self.db)
        self.students = StudentRepository(self.db, default_points=default_points)
        self.buttons = ButtonRepository(self.db)
        self.weeks = WeekRepository(self.db)
        self.scores = ScoreRepository(self.db)

    def initialize(self) -> None:
        self.db.create_indexes()
        self.admins.ensure(self.admin_username, self.admin_password)
        if self.seed_buttons:
            self.buttons.seed_defaults()
        log.info("Mongo store ready (database %s)", self.db.db.name)

    def close(self) -> None:
        self.db.close()
