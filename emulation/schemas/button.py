from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict

from emulation.schemas.admin import Id

BUTTON_TYPES = ("bonus", "penalty")
ButtonType = Literal["bonus", "penalty"]


class ButtonOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: Id
    name: str
    points: float
    type: ButtonType
    created_at: Optional[datetime] = None


class ButtonForm(BaseModel):
    # Category is checked by the repositories so both backends reject it the same way.
    name: str
    points: float
    type: str
