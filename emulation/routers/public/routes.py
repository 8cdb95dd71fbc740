from typing import List

from fastapi import APIRouter, Depends

from emulation.dependencies import get_store
from emulation.schemas.score import WeekOverview
from emulation.schemas.student import StudentOut
from emulation.store import Store
from emulation.utils import INT64_MAX

router = APIRouter(prefix="/api", tags=["public"])


def _overview(store: Store, week) -> WeekOverview:
    if week is None:
        return WeekOverview()
    return WeekOverview(week=week, records=store.scores.get_by_week(week.id))


@router.get("/leaderboard", response_model=List[StudentOut])
def leaderboard(store: Store = Depends(get_store)):
    return store.students.get_leaderboard()


@router.get("/overview/id/{week_id}", response_model=WeekOverview)
def week_overview_by_id(week_id: str, store: Store = Depends(get_store)):
    return _overview(store, store.weeks.get_by_id(week_id.strip()))


@router.get("/overview/{week_identifier}", response_model=WeekOverview)
def week_overview(week_identifier: str, store: Store = Depends(get_store)):
    """All-digit identifiers are week numbers ("5" -> "Week 5"); anything else is a week id."""
    ident = week_identifier.strip()
    if ident.isascii() and ident.isdigit():
        number = int(ident)
        week = store.weeks.get_by_number(number) if number <= INT64_MAX else None
    else:
        week = store.weeks.get_by_id(ident)
    return _overview(store, week)
