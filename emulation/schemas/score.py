from datetime import date, datetime
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from emulation.schemas.admin import Id
from emulation.schemas.student import StudentForm
from emulation.schemas.week import WeekOut


class ScoreRecordOut(BaseModel):
    """A score record with the display names of whatever it references."""

    model_config = ConfigDict(from_attributes=True)

    id: Id
    student_id: Id
    button_id: Optional[Id] = None
    week_id: Optional[Id] = None
    points: float
    note: Optional[str] = None
    violation_date: Optional[date] = None
    created_at: Optional[datetime] = None

    student_name: Optional[str] = None
    student_code: Optional[str] = None
    button_name: Optional[str] = None
    week_name: Optional[str] = None


class ScoreForm(BaseModel):
    student_id: Id
    button_id: Optional[Id] = None
    week_id: Optional[Id] = None
    points: float
    note: Optional[str] = None
    violation_date: Optional[date] = None


class ImportScoreRow(BaseModel):
    student_code: str = Field(validation_alias=AliasChoices("student_code", "studentCode", "code"))
    points: float
    note: Optional[str] = None


class ImportScoresForm(BaseModel):
    week_id: Optional[Id] = Field(default=None, validation_alias=AliasChoices("week_id", "weekId"))
    records: List[ImportScoreRow]


class ImportStudentsForm(BaseModel):
    students: List[StudentForm]


class WeekOverview(BaseModel):
    week: Optional[WeekOut] = None
    records: List[ScoreRecordOut] = []
