from typing import Union

from pydantic import BaseModel, ConfigDict, Field

Id = Union[int, str]


class AdminOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: Id
    username: str


class AdminLoginForm(BaseModel):
    username: str
    password: str


class StudentLoginForm(BaseModel):
    student_code: str = Field(validation_alias="studentCode")


class ChangePasswordForm(BaseModel):
    new_password: str = Field(validation_alias="newPassword", min_length=1)
