from __future__ import annotations

import logging
from datetime import date, datetime, time
from typing import Any, Dict, Iterable, List, Optional

from pymongo import ASCENDING, DESCENDING
from pymongo.errors import DuplicateKeyError

from emulation.exceptions import DuplicateKey, NotFound, ValidationError
from emulation.schemas.admin import AdminOut, Id
from emulation.schemas.button import ButtonOut
from emulation.schemas.score import ScoreRecordOut
from emulation.schemas.student import StudentForm, StudentOut
from emulation.schemas.week import WeekOut
from emulation.security import hash_password, verify_password
from emulation.store.mongo.database import MongoDatabase, oid
from emulation.store.seeds import DEFAULT_BUTTONS
from emulation.utils import parse_week_number, require_button_type, require_text, utcnow

log = logging.getLogger(__name__)

NEWEST_FIRST = [("created_at", DESCENDING), ("_id", DESCENDING)]


def _str_id(value: Any) -> Optional[str]:
    return str(value) if value is not None else None


def _student_out(doc: Dict[str, Any]) -> StudentOut:
    return StudentOut(
        id=str(doc["_id"]),
        name=doc["name"],
        student_code=doc["student_code"],
        points=doc.get("points", 0),
        created_at=doc.get("created_at"),
    )


def _button_out(doc: Dict[str, Any]) -> ButtonOut:
    return ButtonOut(
        id=str(doc["_id"]),
        name=doc["name"],
        points=doc["points"],
        type=doc["type"],
        created_at=doc.get("created_at"),
    )


def _week_out(doc: Dict[str, Any]) -> WeekOut:
    return WeekOut(
        id=str(doc["_id"]),
        name=doc["name"],
        week_number=doc.get("week_number"),
        is_active=bool(doc.get("is_active", False)),
        created_at=doc.get("created_at"),
    )


def _to_bson_date(value: Optional[date]) -> Optional[datetime]:
    # BSON has no plain date type
    if value is None or isinstance(value, datetime):
        return value
    return datetime.combine(value, time())


def _from_bson_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    return value


class AdminRepository:
    def __init__(self, db: MongoDatabase):
        self.db = db

    def login(self, username: str, password: str) -> Optional[AdminOut]:
        admin = self.db.admins.find_one({"username": username})
        valid, new_hash = verify_password(password, admin["password_hash"] if admin else None)
        if not valid:
            return None
        if new_hash:
            self.db.admins.update_one({"_id": admin["_id"]}, {"$set": {"password_hash": new_hash}})
        return AdminOut(id=str(admin["_id"]), username=admin["username"])

    def change_password(self, admin_id: Id, new_password: str) -> None:
        if not new_password:
            raise ValidationError("password is required", field="password")
        result = self.db.admins.update_one(
            {"_id": oid(admin_id)}, {"$set": {"password_hash": hash_password(new_password)}}
        )
        if result.matched_count == 0:
            raise NotFound("admin", admin_id)
        log.info("Password changed for admin %s", admin_id)

    def ensure(self, username: str, password: str) -> bool:
        """Create the admin account unless it exists; True when created."""
        result = self.db.admins.update_one(
            {"username": username},
            {"$setOnInsert": {"username": username, "password_hash": hash_password(password)}},
            upsert=True,
        )
        if result.upserted_id is None:
            return False
        log.info("Created default admin %r", username)
        return True


class StudentRepository:
    def __init__(self, db: MongoDatabase, default_points: float = 100):
        self.db = db
        self.default_points = default_points

    def create(self, name: str, code: str) -> str:
        name = require_text(name, "name")
        code = require_text(code, "student_code")
        try:
            result = self.db.students.insert_one(
                {
                    "name": name,
                    "student_code": code,
                    "points": float(self.default_points),
                    "created_at": utcnow(),
                }
            )
        except DuplicateKeyError:
            raise DuplicateKey("student_code", code) from None
        return str(result.inserted_id)

    def get_by_id(self, student_id: Id) -> Optional[StudentOut]:
        key = oid(student_id)
        if key is None:
            return None
        doc = self.db.students.find_one({"_id": key})
        return _student_out(doc) if doc else None

    def get_by_code(self, code: str) -> Optional[StudentOut]:
        doc = self.db.students.find_one({"student_code": code})
        return _student_out(doc) if doc else None

    def get_all(self) -> List[StudentOut]:
        cursor = self.db.students.find().sort([("name", ASCENDING), ("_id", ASCENDING)])
        return [_student_out(doc) for doc in cursor]

    def get_leaderboard(self) -> List[StudentOut]:
        cursor = self.db.students.find().sort([("points", DESCENDING), ("student_code", ASCENDING)])
        return [_student_out(doc) for doc in cursor]

    def update(self, student_id: Id, name: str, code: str) -> None:
        name = require_text(name, "name")
        code = require_text(code, "student_code")
        key = oid(student_id)
        if key is None or self.db.students.count_documents({"_id": key}) == 0:
            raise NotFound("student", student_id)
        if self.db.students.count_documents({"student_code": code, "_id": {"$ne": key}}):
            raise DuplicateKey("student_code", code)
        try:
            self.db.students.update_one({"_id": key}, {"$set": {"name": name, "student_code": code}})
        except DuplicateKeyError:
            raise DuplicateKey("student_code", code) from None

    def update_points(self, student_id: Id, points: float) -> None:
        result = self.db.students.update_one({"_id": oid(student_id)}, {"$set": {"points": float(points)}})
        if result.matched_count == 0:
            raise NotFound("student", student_id)

    def reset_all_points(self) -> int:
        result = self.db.students.update_many({}, {"$set": {"points": float(self.default_points)}})
        log.info("Reset points for %d students", result.matched_count)
        return result.matched_count

    def delete(self, student_id: Id) -> None:
        key = oid(student_id)
        if key is None:
            return
        records = self.db.scores.delete_many({"student_id": key}).deleted_count
        self.db.students.delete_one({"_id": key})
        log.info("Deleted student %s and %d score records", key, records)

    def import_many(self, rows: Iterable[StudentForm]) -> int:
        imported = 0
        for row in rows:
            try:
                self.create(row.name, row.student_code)
            except (DuplicateKey, ValidationError) as e:
                log.warning("Skipping student %r: %s", row.student_code, e.message)
                continue
            imported += 1
        return imported


class ButtonRepository:
    def __init__(self, db: MongoDatabase):
        self.db = db

    def get_all(self) -> List[ButtonOut]:
        cursor = self.db.buttons.find().sort([("type", ASCENDING), ("name", ASCENDING)])
        return [_button_out(doc) for doc in cursor]

    def get_by_type(self, button_type: str) -> List[ButtonOut]:
        button_type = require_button_type(button_type)
        cursor = self.db.buttons.find({"type": button_type}).sort("name", ASCENDING)
        return [_button_out(doc) for doc in cursor]

    def create(self, name: str, points: float, button_type: str) -> str:
        name = require_text(name, "name")
        button_type = require_button_type(button_type)
        result = self.db.buttons.insert_one(
            {"name": name, "points": float(points), "type": button_type, "created_at": utcnow()}
        )
        return str(result.inserted_id)

    def delete(self, button_id: Id) -> None:
        key = oid(button_id)
        if key is not None:
            self.db.buttons.delete_one({"_id": key})

    def seed_defaults(self) -> int:
        """Insert the default catalog into an empty collection."""
        if self.db.buttons.find_one({}, {"_id": 1}):
            return 0
        now = utcnow()
        self.db.buttons.insert_many(
            [{**btn, "points": float(btn["points"]), "created_at": now} for btn in DEFAULT_BUTTONS]
        )
        log.info("Seeded %d default buttons", len(DEFAULT_BUTTONS))
        return len(DEFAULT_BUTTONS)


class WeekRepository:
    def __init__(self, db: MongoDatabase):
        self.db = db

    def get_all(self) -> List[WeekOut]:
        return [_week_out(doc) for doc in self.db.weeks.find().sort(NEWEST_FIRST)]

    def get_by_id(self, week_id: Id) -> Optional[WeekOut]:
        key = oid(week_id)
        if key is None:
            return None
        doc = self.db.weeks.find_one({"_id": key})
        return _week_out(doc) if doc else None

    def get_by_number(self, week_number: int) -> Optional[WeekOut]:
        doc = self.db.weeks.find_one({"week_number": week_number}, sort=NEWEST_FIRST)
        return _week_out(doc) if doc else None

    def get_active(self) -> Optional[WeekOut]:
        doc = self.db.weeks.find_one({"is_active": True})
        return _week_out(doc) if doc else None

    def create(self, name: str) -> str:
        name = require_text(name, "name")
        result = self.db.weeks.insert_one(
            {
                "name": name,
                "week_number": parse_week_number(name),
                "is_active": False,
                "created_at": utcnow(),
            }
        )
        return str(result.inserted_id)

    def set_active(self, week_id: Id) -> None:
        key = oid(week_id)
        if key is None or self.db.weeks.count_documents({"_id": key}) == 0:
            raise NotFound("week", week_id)
        self.db.weeks.update_many({"is_active": True}, {"$set": {"is_active": False}})
        self.db.weeks.update_one({"_id": key}, {"$set": {"is_active": True}})

    def delete(self, week_id: Id) -> None:
        key = oid(week_id)
        if key is None:
            return
        records = self.db.scores.delete_many({"week_id": key}).deleted_count
        self.db.weeks.delete_one({"_id": key})
        log.info("Deleted week %s and %d score records", key, records)


class ScoreRepository:
    def __init__(self, db: MongoDatabase):
        self.db = db

    def create(
        self,
        student_id: Id,
        button_id: Optional[Id] = None,
        week_id: Optional[Id] = None,
        points: float = 0,
        note: Optional[str] = None,
        violation_date: Optional[date] = None,
    ) -> str:
        key = oid(student_id)
        if key is None or self.db.students.count_documents({"_id": key}) == 0:
            raise NotFound("student", student_id)
        result = self.db.scores.insert_one(
            {
                "student_id": key,
                "button_id": oid(button_id),
                "week_id": oid(week_id),
                "points": float(points),
                "note": note,
                "violation_date": _to_bson_date(violation_date),
                "created_at": utcnow(),
            }
        )
        applied = self.db.students.update_one({"_id": key}, {"$inc": {"points": float(points)}})
        if applied.matched_count == 0:
            # student vanished between the check and the increment
            self.db.scores.delete_one({"_id": result.inserted_id})
            raise NotFound("student", student_id)
        log.debug("Score %s: %+g points for student %s", result.inserted_id, points, key)
        return str(result.inserted_id)

    def delete(self, record_id: Id) -> None:
        key = oid(record_id)
        if key is None:
            return
        # claiming the document first means a second delete finds nothing to reverse
        record = self.db.scores.find_one_and_delete({"_id": key})
        if record is None:
            return
        reversed_ = self.db.students.update_one(
            {"_id": record["student_id"]}, {"$inc": {"points": -record["points"]}}
        )
        if reversed_.matched_count == 0:
            log.warning("Student %s of score %s is gone, reversal skipped", record["student_id"], key)
        log.debug("Score %s deleted, %+g points reversed", key, -record["points"])

    def delete_all(self) -> int:
        deleted = self.db.scores.delete_many({}).deleted_count
        log.info("Deleted %d score records", deleted)
        return deleted

    def get_by_student(self, student_id: Id) -> List[ScoreRecordOut]:
        key = oid(student_id)
        if key is None:
            return []
        return self._denormalized({"student_id": key})

    def get_by_week(self, week_id: Id) -> List[ScoreRecordOut]:
        key = oid(week_id)
        if key is None:
            return []
        return self._denormalized({"week_id": key})

    def get_all(self) -> List[ScoreRecordOut]:
        return self._denormalized({})

    def _lookup(self, collection, ids, fields) -> Dict[Any, Dict[str, Any]]:
        ids = [i for i in ids if i is not None]
        if not ids:
            return {}
        return {doc["_id"]: doc for doc in collection.find({"_id": {"$in": ids}}, fields)}

    def _denormalized(self, query: Dict[str, Any]) -> List[ScoreRecordOut]:
        records = list(self.db.scores.find(query).sort(NEWEST_FIRST))
        students = self._lookup(
            self.db.students, {r["student_id"] for r in records}, {"name": 1, "student_code": 1}
        )
        buttons = self._lookup(self.db.buttons, {r.get("button_id") for r in records}, {"name": 1})
        weeks = self._lookup(self.db.weeks, {r.get("week_id") for r in records}, {"name": 1})

        out = []
        for r in records:
            student = students.get(r["student_id"], {})
            out.append(
                ScoreRecordOut(
                    id=str(r["_id"]),
                    student_id=str(r["student_id"]),
                    button_id=_str_id(r.get("button_id")),
                    week_id=_str_id(r.get("week_id")),
                    points=r["points"],
                    note=r.get("note"),
                    violation_date=_from_bson_date(r.get("violation_date")),
                    created_at=r.get("created_at"),
                    student_name=student.get("name"),
                    student_code=student.get("student_code"),
                    button_name=buttons.get(r.get("button_id"), {}).get("name"),
                    week_name=weeks.get(r.get("week_id"), {}).get("name"),
                )
            )
        return out
