"""
Player endpoints: join, scan, task lookup, score and event name

/join.html and /scan are opened by phone browsers from QR codes, so they answer
with redirects or plain text instead of JSON errors.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse, RedirectResponse

from scanquest import state
from scanquest.api.deps import get_context
from scanquest.core.auth import RequestContext, issue_team_session
from scanquest.core.scoring import (
    ALREADY_ANSWERED,
    NOT_IN_EVENT,
    join_team,
    parse_option_index,
    submit_answer,
)
from scanquest.errors import InvalidInputError, JoinRequiredError, NotFoundError, ScanQuestError


router = APIRouter(tags=["play"])
logger = logging.getLogger(__name__)

JOINED_PAGE = "/joined.html"


def plain_error(exc: ScanQuestError) -> PlainTextResponse:
    return PlainTextResponse(exc.message, status_code=exc.status_code)


@router.get("/join.html")
def join(team_id: Optional[str] = Query(None, alias="teamId"),
               event_id: Optional[str] = Query(None, alias="eventId"),
               ctx: RequestContext = Depends(get_context)):
    """
    Attach this device to a team (and optionally an event)

    Query:
        teamId: Team to join
        eventId: Event scope for subsequent scans
        t: Tenant key
    """
    try:
        tenant = ctx.tenant_key()
        store = state.TENANTS.resolve(tenant)
        join_team(store, team_id, event_id)
    except ScanQuestError as exc:
        return plain_error(exc)

    response = RedirectResponse(JOINED_PAGE, status_code=302)
    issue_team_session(response, tenant, team_id, event_id)
    return response


@router.get("/scan")
def scan(task_id: Optional[str] = Query(None, alias="taskId"),
               option_index: Optional[str] = Query(None, alias="optionIndex"),
               ctx: RequestContext = Depends(get_context)):
    """
    Submit the answer encoded in a scanned QR code

    Outcome is signalled on the redirect: ?points=N, ?already=true or
    ?notinEvent=true.
    """
    try:
        store = state.TENANTS.resolve(ctx.tenant_key())
        outcome = submit_answer(
            store,
            team_id=ctx.team_id,
            task_id=task_id,
            option_index=parse_option_index(option_index),
            event_id=ctx.event_id,
        )
    except JoinRequiredError as exc:
        return RedirectResponse(exc.location, status_code=302)
    except ScanQuestError as exc:
        return plain_error(exc)

    if outcome.status == ALREADY_ANSWERED:
        return RedirectResponse(f"{JOINED_PAGE}?already=true", status_code=302)
    if outcome.status == NOT_IN_EVENT:
        return RedirectResponse(f"{JOINED_PAGE}?notinEvent=true", status_code=302)
    return RedirectResponse(f"{JOINED_PAGE}?points={outcome.points}", status_code=302)


@router.get("/api/task/{task_id}")
def get_task(task_id: str, ctx: RequestContext = Depends(get_context)):
    store = state.TENANTS.resolve(ctx.tenant_key())
    task = store.get_task(task_id)
    if task is None:
        raise NotFoundError()
    return task.to_json()


@router.get("/api/score")
def get_score(ctx: RequestContext = Depends(get_context)):
    """Score and name of the team this device joined"""
    store = state.TENANTS.resolve(ctx.tenant_key())
    if not ctx.team_id:
        raise InvalidInputError("No team joined")
    team = store.get_team(ctx.team_id)
    if team is None:
        raise NotFoundError("Team not found")
    return {"score": team.score, "name": team.name}


@router.get("/api/event")
def get_event(ctx: RequestContext = Depends(get_context)):
    """Name of the session event; any failure degrades to null"""
    try:
        if not ctx.event_id:
            return {"event": None}
        store = state.TENANTS.resolve(ctx.tenant_key())
        event = store.get_event(ctx.event_id)
        if event is None:
            return {"event": None}
        return {"event": {"id": event.id, "name": event.name}}
    except Exception:
        logger.warning("⚠️ Event lookup failed", exc_info=True)
        return {"event": None}
