"""
Period Timing router — the school's daily period template.
Committed configuration (fetch / replace / preview) plus a per-school draft
that the console edits step by step before committing.
"""

from fastapi import APIRouter, Depends

from periodtiming.core.middleware import get_school_id
from periodtiming.core.schedule import PeriodScheduleModel
from periodtiming.core.security import require_role
from periodtiming.core.session import DraftRegistry, ScheduleSession, get_draft_registry
from periodtiming.core.store import ProfileStore, get_profile_store
from periodtiming.schemas.schedule import (
    BreakAdd, CheckStatus, FieldUpdate, PeriodAdd, PeriodMove, ScheduleConfig,
)
from periodtiming.utils.response import success_response

router = APIRouter(prefix="/api/period-timing", tags=["Period Timing"])

READERS = ["admin", "teacher"]
EDITORS = ["admin"]


def _draft_payload(session: ScheduleSession) -> dict:
    return {
        "state": session.state.value,
        "config": session.config,
        "period_timing_info": session.model.timing_info(),
        "validation": session.model.validation_report(),
    }


def _draft(user: dict, store: ProfileStore, drafts: DraftRegistry) -> ScheduleSession:
    return drafts.get(get_school_id(user), store)


# ═══════════════════════════════════════════════════════════
# COMMITTED CONFIGURATION
# ═══════════════════════════════════════════════════════════

@router.get("")
async def get_period_timing(
    user: dict = Depends(require_role(READERS)),
    store: ProfileStore = Depends(get_profile_store),
):
    config = store.fetch_schedule(get_school_id(user))
    model = PeriodScheduleModel(config)
    return success_response(data={**config.model_dump(mode="json"), "period_timing_info": model.timing_info()})


@router.put("")
async def update_period_timing(
    body: ScheduleConfig,
    user: dict = Depends(require_role(EDITORS)),
    store: ProfileStore = Depends(get_profile_store),
):
    """Replace the whole template. Period numbers are fixed automatically; duplicate names are rejected."""
    session = ScheduleSession(school_id=get_school_id(user))
    session.replace(body)
    result = session.save(store)
    return success_response(data=result.config, message=result.message)


@router.post("/preview")
async def preview_period_timing(
    body: ScheduleConfig,
    user: dict = Depends(require_role(READERS)),
):
    model = PeriodScheduleModel(body)
    return success_response(data={
        "period_timing_info": model.timing_info(),
        "validation": model.validation_report(),
    })


# ═══════════════════════════════════════════════════════════
# DRAFT — step by step editing
# ═══════════════════════════════════════════════════════════

@router.get("/draft")
async def get_draft(
    user: dict = Depends(require_role(EDITORS)),
    store: ProfileStore = Depends(get_profile_store),
    drafts: DraftRegistry = Depends(get_draft_registry),
):
    return success_response(data=_draft_payload(_draft(user, store, drafts)))


@router.delete("/draft")
async def discard_draft(
    user: dict = Depends(require_role(EDITORS)),
    store: ProfileStore = Depends(get_profile_store),
    drafts: DraftRegistry = Depends(get_draft_registry),
):
    school_id = get_school_id(user)
    drafts.drop(school_id)
    session = drafts.get(school_id, store)
    return success_response(data=_draft_payload(session), message="Local changes discarded")


@router.post("/draft/periods")
async def add_draft_periods(
    body: PeriodAdd,
    user: dict = Depends(require_role(EDITORS)),
    store: ProfileStore = Depends(get_profile_store),
    drafts: DraftRegistry = Depends(get_draft_registry),
):
    session = _draft(user, store, drafts)
    if body.count == 1:
        session.apply(session.model.add_period, body.kind, body.name, body.duration_minutes)
    else:
        session.apply(session.model.add_periods, body.count, body.kind, body.duration_minutes, body.name)
    return success_response(data=_draft_payload(session), message="Period added")


@router.delete("/draft/periods/{index}")
async def remove_draft_period(
    index: int,
    user: dict = Depends(require_role(EDITORS)),
    store: ProfileStore = Depends(get_profile_store),
    drafts: DraftRegistry = Depends(get_draft_registry),
):
    session = _draft(user, store, drafts)
    session.apply(session.model.remove_period, index)
    return success_response(data=_draft_payload(session), message="Period removed")


@router.patch("/draft/periods/{index}")
async def update_draft_period(
    index: int,
    body: FieldUpdate,
    user: dict = Depends(require_role(EDITORS)),
    store: ProfileStore = Depends(get_profile_store),
    drafts: DraftRegistry = Depends(get_draft_registry),
):
    session = _draft(user, store, drafts)
    session.apply(session.model.update_field, index, body.field, body.value)
    return success_response(data=_draft_payload(session), message="Period updated")


@router.post("/draft/periods/{index}/move")
async def move_draft_period(
    index: int,
    body: PeriodMove,
    user: dict = Depends(require_role(EDITORS)),
    store: ProfileStore = Depends(get_profile_store),
    drafts: DraftRegistry = Depends(get_draft_registry),
):
    session = _draft(user, store, drafts)
    moved = session.model.move_period(index, body.direction)
    if moved:
        session.mark_dirty()
    message = "Period moved" if moved else "Period already at the boundary"
    return success_response(data=_draft_payload(session), message=message)


@router.post("/draft/reorder")
async def reorder_draft(
    user: dict = Depends(require_role(EDITORS)),
    store: ProfileStore = Depends(get_profile_store),
    drafts: DraftRegistry = Depends(get_draft_registry),
):
    session = _draft(user, store, drafts)
    session.apply(session.model.reorder)
    return success_response(data=_draft_payload(session), message="Periods renumbered")


@router.post("/draft/validate")
async def validate_draft(
    user: dict = Depends(require_role(EDITORS)),
    store: ProfileStore = Depends(get_profile_store),
    drafts: DraftRegistry = Depends(get_draft_registry),
):
    session = _draft(user, store, drafts)
    check = session.model.validate()
    if check.status is CheckStatus.FIXED:
        session.mark_dirty()
    payload = {**_draft_payload(session), "period_numbers": check}
    return success_response(data=payload, message=f"Period numbers {check.status.value}")


@router.post("/draft/breaks")
async def add_draft_break(
    body: BreakAdd,
    user: dict = Depends(require_role(EDITORS)),
    store: ProfileStore = Depends(get_profile_store),
    drafts: DraftRegistry = Depends(get_draft_registry),
):
    session = _draft(user, store, drafts)
    session.apply(session.model.add_break, body.period, body.duration_minutes, body.name)
    return success_response(data=_draft_payload(session), message="Break added")


@router.delete("/draft/breaks/{index}")
async def remove_draft_break(
    index: int,
    user: dict = Depends(require_role(EDITORS)),
    store: ProfileStore = Depends(get_profile_store),
    drafts: DraftRegistry = Depends(get_draft_registry),
):
    session = _draft(user, store, drafts)
    session.apply(session.model.remove_break, index)
    return success_response(data=_draft_payload(session), message="Break removed")


@router.patch("/draft/breaks/{index}")
async def update_draft_break(
    index: int,
    body: FieldUpdate,
    user: dict = Depends(require_role(EDITORS)),
    store: ProfileStore = Depends(get_profile_store),
    drafts: DraftRegistry = Depends(get_draft_registry),
):
    session = _draft(user, store, drafts)
    session.apply(session.model.update_break, index, body.field, body.value)
    return success_response(data=_draft_payload(session), message="Break updated")


@router.post("/draft/commit")
async def commit_draft(
    user: dict = Depends(require_role(EDITORS)),
    store: ProfileStore = Depends(get_profile_store),
    drafts: DraftRegistry = Depends(get_draft_registry),
):
    session = _draft(user, store, drafts)
    result = session.save(store)
    # committed drafts mirror the store; the next GET starts a fresh one
    drafts.drop(session.school_id)
    return success_response(data=_draft_payload(session), message=result.message)
