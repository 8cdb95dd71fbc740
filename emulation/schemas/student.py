from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from emulation.schemas.admin import Id


class StudentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: Id
    name: str
    student_code: str
    points: float
    created_at: Optional[datetime] = None


class StudentForm(BaseModel):
    name: str
    student_code: str = Field(validation_alias=AliasChoices("student_code", "studentCode", "code"))


class PointsForm(BaseModel):
    points: float


class StudentProfile(StudentOut):
    rank: int
    total: int
