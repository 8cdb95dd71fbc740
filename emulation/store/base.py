"""
The persistence contract.

Each backend (``emulation.store.sql``, ``emulation.store.mongo``) provides one
``Store`` whose repositories satisfy the protocols below. Ids are whatever
the backend uses natively (``int`` rows, ``str`` ObjectIds); repositories
accept either form and treat an id they cannot parse as "not found".
"""
from __future__ import annotations

from datetime import date
from typing import Iterable, List, Optional, Protocol

from emulation.schemas.admin import AdminOut, Id
from emulation.schemas.button import ButtonOut
from emulation.schemas.score import ScoreRecordOut
from emulation.schemas.student import StudentForm, StudentOut
from emulation.schemas.week import WeekOut


class AdminRepository(Protocol):
    def login(self, username: str, password: str) -> Optional[AdminOut]: ...

    def change_password(self, admin_id: Id, new_password: str) -> None: ...


class StudentRepository(Protocol):
    def create(self, name: str, code: str) -> Id: ...

    def get_by_id(self, student_id: Id) -> Optional[StudentOut]: ...

    def get_by_code(self, code: str) -> Optional[StudentOut]: ...

    def get_all(self) -> List[StudentOut]: ...

    def get_leaderboard(self) -> List[StudentOut]: ...

    def update(self, student_id: Id, name: str, code: str) -> None: ...

    def update_points(self, student_id: Id, points: float) -> None: ...

    def reset_all_points(self) -> int: ...

    def delete(self, student_id: Id) -> None: ...

    def import_many(self, rows: Iterable[StudentForm]) -> int: ...


class ButtonRepository(Protocol):
    def get_all(self) -> List[ButtonOut]: ...

    def get_by_type(self, button_type: str) -> List[ButtonOut]: ...

    def create(self, name: str, points: float, button_type: str) -> Id: ...

    def delete(self, button_id: Id) -> None: ...


class WeekRepository(Protocol):
    def get_all(self) -> List[WeekOut]: ...

    def get_by_id(self, week_id: Id) -> Optional[WeekOut]: ...

    def get_by_number(self, week_number: int) -> Optional[WeekOut]: ...

    def get_active(self) -> Optional[WeekOut]: ...

    def create(self, name: str) -> Id: ...

    def set_active(self, week_id: Id) -> None: ...

    def delete(self, week_id: Id) -> None: ...


class ScoreRepository(Protocol):
    def create(
        self,
        student_id: Id,
        button_id: Optional[Id] = None,
        week_id: Optional[Id] = None,
        points: float = 0,
        note: Optional[str] = None,
        violation_date: Optional[date] = None,
    ) -> Id: ...

    def delete(self, record_id: Id) -> None: ...

    def delete_all(self) -> int: ...

    def get_by_student(self, student_id: Id) -> List[ScoreRecordOut]: ...

    def get_by_week(self, week_id: Id) -> List[ScoreRecordOut]: ...

    def get_all(self) -> List[ScoreRecordOut]: ...


class Store(Protocol):
    admins: AdminRepository
    students: StudentRepository
    buttons: ButtonRepository
    weeks: WeekRepository
    scores: ScoreRepository

    def initialize(self) -> None: ...

    def close(self) -> None: ...
