from typing import List, Optional

from fastapi import APIRouter, Depends

from emulation.dependencies import get_store, require_admin
from emulation.schemas.week import WeekForm, WeekOut
from emulation.store import Store

router = APIRouter(prefix="/api/weeks", tags=["weeks"])


@router.get("/public", response_model=List[WeekOut])
def public_weeks(store: Store = Depends(get_store)):
    return store.weeks.get_all()


@router.get("", response_model=List[WeekOut], dependencies=[Depends(require_admin)])
def list_weeks(store: Store = Depends(get_store)):
    return store.weeks.get_all()


@router.get("/active", response_model=Optional[WeekOut], dependencies=[Depends(require_admin)])
def active_week(store: Store = Depends(get_store)):
    return store.weeks.get_active()


@router.post("", dependencies=[Depends(require_admin)])
def create_week(form: WeekForm, store: Store = Depends(get_store)):
    week_id = store.weeks.create(form.name)
    return {"success": True, "id": week_id}


@router.post("/{week_id}/activate", dependencies=[Depends(require_admin)])
def activate_week(week_id: str, store: Store = Depends(get_store)):
    store.weeks.set_active(week_id)
    return {"success": True}


@router.delete("/{week_id}", dependencies=[Depends(require_admin)])
def delete_week(week_id: str, store: Store = Depends(get_store)):
    store.weeks.delete(week_id)
    return {"success": True}
