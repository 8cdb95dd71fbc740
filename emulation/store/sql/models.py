from datetime import date, datetime
from typing import Optional

from sqlalchemy import CheckConstraint, Index
from sqlmodel import Field, SQLModel

from emulation.utils import utcnow


class Admin(SQLModel, table=True):
    __tablename__ = "admin"

    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(unique=True, index=True)
    password_hash: str


class Student(SQLModel, table=True):
    __tablename__ = "students"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    student_code: str = Field(unique=True, index=True)
    points: float = 100
    created_at: datetime = Field(default_factory=utcnow)


class PresetButton(SQLModel, table=True):
    __tablename__ = "preset_buttons"
    __table_args__ = (
        CheckConstraint("type IN ('bonus', 'penalty')", name="ck_button_type"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    points: float
    type: str
    created_at: datetime = Field(default_factory=utcnow)


class Week(SQLModel, table=True):
    __tablename__ = "weeks"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    week_number: Optional[int] = Field(default=None, index=True)
    is_active: bool = False
    created_at: datetime = Field(default_factory=utcnow)


class ScoreRecord(SQLModel, table=True):
    __tablename__ = "score_records"
    __table_args__ = (
        Index("ix_score_student_created", "student_id", "created_at"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    student_id: int = Field(foreign_key="students.id")
    # button/week rows may be deleted later; the reference is kept and reads back as a null name
    button_id: Optional[int] = Field(default=None, foreign_key="preset_buttons.id")
    week_id: Optional[int] = Field(default=None, foreign_key="weeks.id", index=True)
    points: float
    note: Optional[str] = None
    violation_date: Optional[date] = None
    created_at: datetime = Field(default_factory=utcnow, index=True)
