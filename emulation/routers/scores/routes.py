import logging
from typing import List

from fastapi import APIRouter, Depends

from emulation.dependencies import get_store, require_admin
from emulation.schemas.score import ScoreForm, ScoreRecordOut
from emulation.store import Store

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/scores", tags=["scores"], dependencies=[Depends(require_admin)])


@router.post("")
def submit_score(form: ScoreForm, store: Store = Depends(get_store)):
    record_id = store.scores.create(
        form.student_id,
        form.button_id,
        form.week_id,
        form.points,
        form.note,
        form.violation_date,
    )
    return {"success": True, "id": record_id}


@router.get("/student/{student_id}", response_model=List[ScoreRecordOut])
def scores_for_student(student_id: str, store: Store = Depends(get_store)):
    return store.scores.get_by_student(student_id)


@router.get("/week/{week_id}", response_model=List[ScoreRecordOut])
def scores_for_week(week_id: str, store: Store = Depends(get_store)):
    return store.scores.get_by_week(week_id)


@router.get("/all", response_model=List[ScoreRecordOut])
def all_scores(store: Store = Depends(get_store)):
    return store.scores.get_all()


# must stay above /{record_id}
@router.delete("/all")
def wipe_scores(store: Store = Depends(get_store)):
    deleted = store.scores.delete_all()
    store.students.reset_all_points()
    log.info("Score history wiped (%d records), points reset", deleted)
    return {"success": True, "deleted": deleted}


@router.delete("/{record_id}")
def delete_score(record_id: str, store: Store = Depends(get_store)):
    store.scores.delete(record_id)
    return {"success": True}
