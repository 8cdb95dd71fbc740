from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from emulation.schemas.admin import Id


class WeekOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: Id
    name: str
    week_number: Optional[int] = None
    is_active: bool = False
    created_at: Optional[datetime] = None


class WeekForm(BaseModel):
    name: str
