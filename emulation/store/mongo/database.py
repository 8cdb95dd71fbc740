from __future__ import annotations

from typing import Any, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ASCENDING, DESCENDING, MongoClient


def connect(url: str, journal: bool = True) -> MongoClient:
    """Client whose writes are acknowledged (and journaled) before returning."""
    return MongoClient(url, w=1, journal=journal)


def oid(value: Any) -> Optional[ObjectId]:
    """ObjectId from whatever the caller passed; None when it can't be one."""
    if isinstance(value, ObjectId):
        return value
    if value is None or isinstance(value, bool):
        return None
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        return None


class MongoDatabase:
    """Collection handles for one database on an injected client."""

    def __init__(self, client: MongoClient, name: str):
        self.client = client
        self.db = client[name]
        self.admins = self.db["admin"]
        self.students = self.db["students"]
        self.buttons = self.db["preset_buttons"]
        self.weeks = self.db["weeks"]
        self.scores = self.db["score_records"]

    def create_indexes(self) -> None:
        self.admins.create_index("username", unique=True)
        self.students.create_index("student_code", unique=True)
        self.students.create_index([("points", DESCENDING), ("student_code", ASCENDING)])
        self.buttons.create_index([("type", ASCENDING), ("name", ASCENDING)])
        self.weeks.create_index("week_number")
        self.scores.create_index([("student_id", ASCENDING), ("created_at", DESCENDING)])
        self.scores.create_index("week_id")

    def close(self) -> None:
        self.client.close()
