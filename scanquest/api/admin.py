"""
Admin endpoints (tenant-scoped): tasks, teams, events, logs, scores, backup
"""
import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query
from fastapi.responses import FileResponse

from scanquest.api.deps import admin_identity, admin_store
from scanquest.core.auth import Identity
from scanquest.core.scoring import award_bonus
from scanquest.core.store import TenantStore
from scanquest.errors import InvalidInputError, NotFoundError
from scanquest.models import Bonus, EventAppend, NewEvent, NewTask
from scanquest.utils import backup_filename


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin"])

MAX_TEAMS_PER_BATCH = 500


@router.get("/me")
def me(identity: Identity = Depends(admin_identity)):
    return {"username": identity.username, "role": identity.role}


@router.get("/state")
def get_state(store: TenantStore = Depends(admin_store)):
    """All teams and tasks of the tenant"""
    return store.state()


# ==================== TASKS ====================

@router.post("/tasks")
def create_task(payload: NewTask, store: TenantStore = Depends(admin_store)):
    """
    Create a single-choice task

    Request:
        {"title": "Capital of France?", "options": [{"label": "Paris", "points": 10}, ...]}
    """
    task = store.create_task(payload.title, payload.options)
    return {"id": task.id}


@router.delete("/tasks/{task_id}")
def delete_task(task_id: str, store: TenantStore = Depends(admin_store)):
    """Delete a task and its answer records; scores are not recalculated"""
    store.delete_task(task_id)
    return {"ok": True}


# ==================== TEAMS ====================

@router.post("/teams/create")
def create_teams(request: dict = Body(default={}), store: TenantStore = Depends(admin_store)):
    """
    Create a batch of teams

    Request:
        {"count": 3}  # optional, default 1, at most MAX_TEAMS_PER_BATCH
    """
    try:
        count = int(request.get("count") or 1)
    except (TypeError, ValueError):
        count = 1
    if count < 1:
        count = 1
    if count > MAX_TEAMS_PER_BATCH:
        raise InvalidInputError(f"At most {MAX_TEAMS_PER_BATCH} teams per batch")

    teams = store.create_teams(count)
    return {"teams": [{"id": t.id, "name": t.name} for t in teams]}


@router.post("/teams/reset")
def reset_teams(store: TenantStore = Depends(admin_store)):
    """Delete all teams and records"""
    store.reset_teams()
    return {"ok": True}


@router.post("/reset")
def reset_scores(store: TenantStore = Depends(admin_store)):
    """Zero all scores and delete records; teams and logs are kept"""
    store.reset_scores()
    return {"ok": True}


@router.post("/bonus")
def bonus(payload: Bonus, store: TenantStore = Depends(admin_store),
                identity: Identity = Depends(admin_identity)):
    """
    Give bonus points

    Request:
        {"teamId": "...", "extra": 5}
    """
    award_bonus(store, payload.team_id, payload.extra, by=identity.username)
    return {"ok": True}


# ==================== EVENTS ====================

@router.post("/events")
def create_event(payload: NewEvent, store: TenantStore = Depends(admin_store)):
    if not payload.name:
        raise InvalidInputError("Missing name")
    event = store.create_event(payload.name, payload.team_ids, payload.task_ids)
    return {"id": event.id}


@router.get("/events")
def list_events(store: TenantStore = Depends(admin_store)):
    return {"events": [e.to_json() for e in store.list_events()]}


@router.get("/events/{event_id}")
def get_event(event_id: str, store: TenantStore = Depends(admin_store)):
    event = store.get_event(event_id)
    if event is None:
        raise NotFoundError("Event not found")
    return {"event": event.to_json()}


@router.post("/events/{event_id}/append")
def append_to_event(event_id: str, payload: EventAppend, store: TenantStore = Depends(admin_store)):
    """
    Add teams/tasks to an event; existing members are kept

    Request:
        {"teamIds": [...], "taskIds": [...]}
    """
    event = store.append_to_event(event_id, payload.team_ids, payload.task_ids)
    return {"event": event.to_json()}


# ==================== LOGS ====================

@router.get("/logs")
def list_logs(team_id: Optional[str] = Query(None, alias="teamId"), store: TenantStore = Depends(admin_store)):
    return {"logs": store.list_logs_humanized(team_id=team_id)}


@router.post("/logs/clear")
def clear_logs(store: TenantStore = Depends(admin_store)):
    store.clear_logs()
    return {"ok": True}


# ==================== BACKUP ====================

@router.get("/backup")
def backup(store: TenantStore = Depends(admin_store)):
    """Download the tenant's raw data file"""
    return FileResponse(
        path=store.path,
        filename=backup_filename(store.key),
        media_type="application/json",
    )
