from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Request

from emulation.dependencies import get_store, require_student
from emulation.exceptions import Unauthorized
from emulation.schemas.score import ScoreRecordOut
from emulation.schemas.student import StudentOut, StudentProfile
from emulation.store import Store

router = APIRouter(prefix="/api/user", tags=["user"])


def _session_student(request: Request, session_student: Dict[str, Any], store: Store) -> StudentOut:
    student = store.students.get_by_id(session_student["id"])
    if student is None:
        request.session.pop("student", None)
        raise Unauthorized()
    return student


@router.get("/profile", response_model=StudentProfile)
def profile(
    request: Request,
    session_student: Dict[str, Any] = Depends(require_student),
    store: Store = Depends(get_store),
):
    student = _session_student(request, session_student, store)
    board = store.students.get_leaderboard()
    rank = next((i for i, s in enumerate(board, start=1) if str(s.id) == str(student.id)), 0)
    return StudentProfile(**student.model_dump(), rank=rank, total=len(board))


@router.get("/history", response_model=List[ScoreRecordOut])
def history(
    request: Request,
    session_student: Dict[str, Any] = Depends(require_student),
    store: Store = Depends(get_store),
):
    student = _session_student(request, session_student, store)
    return store.scores.get_by_student(student.id)
