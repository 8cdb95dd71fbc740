from __future__ import annotations

import logging
from datetime import date
from typing import Any, Iterable, List, Optional

from sqlalchemy import delete, func, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import col, select

from emulation.exceptions import DuplicateKey, NotFound, ValidationError
from emulation.schemas.admin import AdminOut, Id
from emulation.schemas.button import ButtonOut
from emulation.schemas.score import ScoreRecordOut
from emulation.schemas.student import StudentForm, StudentOut
from emulation.schemas.week import WeekOut
from emulation.security import hash_password, verify_password
from emulation.store.seeds import DEFAULT_BUTTONS
from emulation.store.sql.database import Database
from emulation.store.sql.models import Admin, PresetButton, ScoreRecord, Student, Week
from emulation.utils import INT64_MAX, parse_week_number, require_button_type, require_text

log = logging.getLogger(__name__)


def _pk(value: Any) -> Optional[int]:
    """Row id from whatever the caller passed; None when it can't be one."""
    if value is None or isinstance(value, bool):
        return None
    try:
        pk = int(value)
    except (TypeError, ValueError):
        return None
    return pk if 0 < pk <= INT64_MAX else None


class AdminRepository:
    def __init__(self, db: Database):
        self.db = db

    def login(self, username: str, password: str) -> Optional[AdminOut]:
        with self.db.session() as session:
            admin = session.exec(select(Admin).where(Admin.username == username)).first()
            valid, new_hash = verify_password(password, admin.password_hash if admin else None)
            if not valid:
                return None
            if new_hash:
                admin.password_hash = new_hash
                session.add(admin)
                session.commit()
            return AdminOut.model_validate(admin)

    def change_password(self, admin_id: Id, new_password: str) -> None:
        if not new_password:
            raise ValidationError("password is required", field="password")
        pk = _pk(admin_id)
        with self.db.session() as session:
            admin = session.get(Admin, pk) if pk is not None else None
            if admin is None:
                raise NotFound("admin", admin_id)
            admin.password_hash = hash_password(new_password)
            session.add(admin)
            session.commit()
        log.info("Password changed for admin %s", admin_id)

    def ensure(self, username: str, password: str) -> bool:
        """Create the admin account unless it exists; True when created."""
        with self.db.session() as session:
            if session.exec(select(Admin).where(Admin.username == username)).first():
                return False
            session.add(Admin(username=username, password_hash=hash_password(password)))
            session.commit()
        log.info("Created default admin %r", username)
        return True


class StudentRepository:
    def __init__(self, db: Database, default_points: float = 100):
        self.db = db
        self.default_points = default_points

    def create(self, name: str, code: str) -> int:
        name = require_text(name, "name")
        code = require_text(code, "student_code")
        with self.db.session() as session:
            student = Student(name=name, student_code=code, points=self.default_points)
            session.add(student)
            try:
                session.commit()
            except IntegrityError:
                session.rollback()
                raise DuplicateKey("student_code", code) from None
            return student.id

    def get_by_id(self, student_id: Id) -> Optional[StudentOut]:
        pk = _pk(student_id)
        if pk is None:
            return None
        with self.db.session() as session:
            student = session.get(Student, pk)
            return StudentOut.model_validate(student) if student else None

    def get_by_code(self, code: str) -> Optional[StudentOut]:
        with self.db.session() as session:
            student = session.exec(select(Student).where(Student.student_code == code)).first()
            return StudentOut.model_validate(student) if student else None

    def get_all(self) -> List[StudentOut]:
        with self.db.session() as session:
            rows = session.exec(select(Student).order_by(Student.name, Student.id)).all()
            return [StudentOut.model_validate(s) for s in rows]

    def get_leaderboard(self) -> List[StudentOut]:
        with self.db.session() as session:
            rows = session.exec(
                select(Student).order_by(col(Student.points).desc(), Student.student_code)
            ).all()
            return [StudentOut.model_validate(s) for s in rows]

    def update(self, student_id: Id, name: str, code: str) -> None:
        name = require_text(name, "name")
        code = require_text(code, "student_code")
        pk = _pk(student_id)
        with self.db.session() as session:
            student = session.get(Student, pk) if pk is not None else None
            if student is None:
                raise NotFound("student", student_id)
            student.name = name
            student.student_code = code
            session.add(student)
            try:
                session.commit()
            except IntegrityError:
                session.rollback()
                raise DuplicateKey("student_code", code) from None

    def update_points(self, student_id: Id, points: float) -> None:
        pk = _pk(student_id)
        with self.db.session() as session:
            matched = session.exec(update(Student).where(Student.id == pk).values(points=points)).rowcount
            session.commit()
        if matched == 0:
            raise NotFound("student", student_id)

    def reset_all_points(self) -> int:
        with self.db.session() as session:
            matched = session.exec(update(Student).values(points=self.default_points)).rowcount
            session.commit()
        log.info("Reset points for %d students", matched)
        return matched

    def delete(self, student_id: Id) -> None:
        pk = _pk(student_id)
        if pk is None:
            return
        with self.db.session() as session:
            records = session.exec(delete(ScoreRecord).where(ScoreRecord.student_id == pk)).rowcount
            session.exec(delete(Student).where(Student.id == pk))
            session.commit()
        log.info("Deleted student %s and %d score records", pk, records)

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
    def __init__(self, db: Database):
        self.db = db

    def get_all(self) -> List[ButtonOut]:
        with self.db.session() as session:
            rows = session.exec(select(PresetButton).order_by(PresetButton.type, PresetButton.name)).all()
            return [ButtonOut.model_validate(b) for b in rows]

    def get_by_type(self, button_type: str) -> List[ButtonOut]:
        button_type = require_button_type(button_type)
        with self.db.session() as session:
            rows = session.exec(
                select(PresetButton).where(PresetButton.type == button_type).order_by(PresetButton.name)
            ).all()
            return [ButtonOut.model_validate(b) for b in rows]

    def create(self, name: str, points: float, button_type: str) -> int:
        name = require_text(name, "name")
        button_type = require_button_type(button_type)
        with self.db.session() as session:
            button = PresetButton(name=name, points=points, type=button_type)
            session.add(button)
            session.commit()
            return button.id

    def delete(self, button_id: Id) -> None:
        pk = _pk(button_id)
        with self.db.session() as session:
            session.exec(delete(PresetButton).where(PresetButton.id == pk))
            session.commit()

    def seed_defaults(self) -> int:
        """Insert the default catalog into an empty table."""
        with self.db.session() as session:
            if session.exec(select(func.count()).select_from(PresetButton)).one():
                return 0
            for btn in DEFAULT_BUTTONS:
                session.add(PresetButton(**btn))
            session.commit()
        log.info("Seeded %d default buttons", len(DEFAULT_BUTTONS))
        return len(DEFAULT_BUTTONS)


class WeekRepository:
    def __init__(self, db: Database):
        self.db = db

    def get_all(self) -> List[WeekOut]:
        with self.db.session() as session:
            rows = session.exec(select(Week).order_by(col(Week.id).desc())).all()
            return [WeekOut.model_validate(w) for w in rows]

    def get_by_id(self, week_id: Id) -> Optional[WeekOut]:
        pk = _pk(week_id)
        if pk is None:
            return None
        with self.db.session() as session:
            week = session.get(Week, pk)
            return WeekOut.model_validate(week) if week else None

    def get_by_number(self, week_number: int) -> Optional[WeekOut]:
        with self.db.session() as session:
            week = session.exec(
                select(Week).where(Week.week_number == week_number).order_by(col(Week.id).desc())
            ).first()
            return WeekOut.model_validate(week) if week else None

    def get_active(self) -> Optional[WeekOut]:
        with self.db.session() as session:
            week = session.exec(select(Week).where(Week.is_active == True)).first()  # noqa: E712
            return WeekOut.model_validate(week) if week else None

    def create(self, name: str) -> int:
        name = require_text(name, "name")
        with self.db.session() as session:
            week = Week(name=name, week_number=parse_week_number(name))
            session.add(week)
            session.commit()
            return week.id

    def set_active(self, week_id: Id) -> None:
        pk = _pk(week_id)
        with self.db.session() as session:
            if pk is None or session.get(Week, pk) is None:
                raise NotFound("week", week_id)
            session.exec(update(Week).values(is_active=False))
            session.exec(update(Week).where(Week.id == pk).values(is_active=True))
            session.commit()

    def delete(self, week_id: Id) -> None:
        pk = _pk(week_id)
        if pk is None:
            return
        with self.db.session() as session:
            records = session.exec(delete(ScoreRecord).where(ScoreRecord.week_id == pk)).rowcount
            session.exec(delete(Week).where(Week.id == pk))
            session.commit()
        log.info("Deleted week %s and %d score records", pk, records)


class ScoreRepository:
    def __init__(self, db: Database):
        self.db = db

    def create(
        self,
        student_id: Id,
        button_id: Optional[Id] = None,
        week_id: Optional[Id] = None,
        points: float = 0,
        note: Optional[str] = None,
        violation_date: Optional[date] = None,
    ) -> int:
        pk = _pk(student_id)
        with self.db.session() as session:
            if pk is None or session.get(Student, pk) is None:
                raise NotFound("student", student_id)
            record = ScoreRecord(
                student_id=pk,
                button_id=_pk(button_id),
                week_id=_pk(week_id),
                points=points,
                note=note,
                violation_date=violation_date,
            )
            session.add(record)
            # insert and increment commit together
            session.exec(update(Student).where(Student.id == pk).values(points=Student.points + points))
            session.commit()
        log.debug("Score %s: %+g points for student %s", record.id, points, pk)
        return record.id

    def delete(self, record_id: Id) -> None:
        pk = _pk(record_id)
        if pk is None:
            return
        with self.db.session() as session:
            record = session.get(ScoreRecord, pk)
            if record is None:
                return
            owner, delta = record.student_id, record.points
            removed = session.exec(delete(ScoreRecord).where(ScoreRecord.id == pk)).rowcount
            if removed == 0:
                session.rollback()
                return
            reversed_ = session.exec(
                update(Student).where(Student.id == owner).values(points=Student.points - delta)
            ).rowcount
            if reversed_ == 0:
                log.warning("Student %s of score %s is gone, reversal skipped", owner, pk)
            session.commit()
        log.debug("Score %s deleted, %+g points reversed", pk, -delta)

    def delete_all(self) -> int:
        with self.db.session() as session:
            deleted = session.exec(delete(ScoreRecord)).rowcount
            session.commit()
        log.info("Deleted %d score records", deleted)
        return deleted

    def get_by_student(self, student_id: Id) -> List[ScoreRecordOut]:
        pk = _pk(student_id)
        if pk is None:
            return []
        return self._joined(ScoreRecord.student_id == pk)

    def get_by_week(self, week_id: Id) -> List[ScoreRecordOut]:
        pk = _pk(week_id)
        if pk is None:
            return []
        return self._joined(ScoreRecord.week_id == pk)

    def get_all(self) -> List[ScoreRecordOut]:
        return self._joined()

    def _joined(self, *where) -> List[ScoreRecordOut]:
        stmt = (
            select(ScoreRecord, Student.name, Student.student_code, PresetButton.name, Week.name)
            .select_from(ScoreRecord)
            .outerjoin(Student, ScoreRecord.student_id == Student.id)
            .outerjoin(PresetButton, ScoreRecord.button_id == PresetButton.id)
            .outerjoin(Week, ScoreRecord.week_id == Week.id)
            .where(*where)
            .order_by(col(ScoreRecord.created_at).desc(), col(ScoreRecord.id).desc())
        )
        with self.db.session() as session:
            return [
                ScoreRecordOut(
                    **record.model_dump(),
                    student_name=student_name,
                    student_code=student_code,
                    button_name=button_name,
                    week_name=week_name,
                )
                for record, student_name, student_code, button_name, week_name in session.exec(stmt).all()
            ]
