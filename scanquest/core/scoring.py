"""
Scoring engine - answer submission, joins and bonus points

Each (team, task) pair is either unanswered or answered. A valid scan moves it
to answered exactly once: the duplicate check, the record insert, the score
update and the answer log happen under one tenant lock, so concurrent
scans for the same pair produce a single record and the rest see "already".
Scans that end without scoring leave the tenant file untouched.
"""
import logging
import re
from typing import Optional

from pydantic import BaseModel

from scanquest.core.store import TenantStore, find_by_id
from scanquest.errors import (
    ForbiddenError,
    InvalidAnswerError,
    InvalidEventError,
    InvalidTaskError,
    InvalidTeamError,
    JoinRequiredError,
    NotFoundError,
)
from scanquest.models import Record, Team
from scanquest.utils import new_id, now_ms


logger = logging.getLogger(__name__)

AWARDED = "awarded"
ALREADY_ANSWERED = "already"
NOT_IN_EVENT = "not_in_event"

LEADING_INT = re.compile(r"\s*([+-]?\d+)")


class ScanOutcome(BaseModel):
    """Result of a scan that did not fail"""
    status: str  # AWARDED | ALREADY_ANSWERED | NOT_IN_EVENT
    points: Optional[int] = None


def parse_option_index(raw) -> Optional[int]:
    """
    Option index from a query value, read like a browser parseInt

    Leading whitespace and a sign are allowed and parsing stops at the first
    non-digit, so "1.5" gives 1 and "2abc" gives 2. None when no digits lead.
    """
    if raw is None:
        return None
    match = LEADING_INT.match(str(raw))
    return int(match.group(1)) if match else None


def submit_answer(
    store: TenantStore,
    team_id: Optional[str],
    task_id: Optional[str],
    option_index: Optional[int],
    event_id: Optional[str] = None,
) -> ScanOutcome:
    """
    Score a scanned answer

    Args:
        store: Tenant store
        team_id: Team from the session, None when not joined
        task_id: Scanned task
        option_index: Chosen option
        event_id: Event from the session, if any

    Returns:
        ScanOutcome with AWARDED and the points, ALREADY_ANSWERED, or NOT_IN_EVENT

    Raises:
        JoinRequiredError: No team session
        InvalidTeamError: Team in session no longer exists
        InvalidTaskError: Task does not exist
        InvalidEventError: Session event does not exist
        ForbiddenError: Team is not part of the session event
        InvalidAnswerError: Option index out of range
    """
    if not team_id:
        raise JoinRequiredError()

    # checks run on the live document; only a scoring scan is written
    with store.locked() as current:
        team = find_by_id(current.teams, team_id)
        if team is None:
            raise InvalidTeamError()

        task = find_by_id(current.tasks, task_id)
        if task is None:
            raise InvalidTaskError()

        if event_id:
            event = find_by_id(current.events, event_id)
            if event is None:
                raise InvalidEventError("Invalid event")
            if task_id not in event.task_ids:
                return ScanOutcome(status=NOT_IN_EVENT)
            if team_id not in event.team_ids:
                raise ForbiddenError("Team is not part of this event")

        if any(r.team_id == team_id and r.task_id == task_id for r in current.records):
            return ScanOutcome(status=ALREADY_ANSWERED)

        if option_index is None or not 0 <= option_index < len(task.options):
            raise InvalidAnswerError()

        points = task.options[option_index].points
        team_name, task_title = team.name, task.title

        with store.transaction() as doc:
            doc.records.append(Record(
                id=new_id(),
                team_id=team_id,
                task_id=task_id,
                option_index=option_index,
                points=points,
                event_id=event_id or None,
                time=now_ms(),
            ))
            find_by_id(doc.teams, team_id).score += points
            store.append_log(
                doc, "answer",
                team_id=team_id, task_id=task_id, option_index=option_index,
                points=points, event_id=event_id or None,
            )

    logger.info(f"✅ [{store.key}] Team {team_name} | Task '{task_title}' | Option {option_index} | {points:+d} points")
    return ScanOutcome(status=AWARDED, points=points)


def join_team(store: TenantStore, team_id: Optional[str], event_id: Optional[str] = None) -> Team:
    """
    Validate a join and log it

    Joining is repeatable; every call appends a "join" log entry but changes
    nothing else.

    Raises:
        InvalidTeamError: Unknown team
        InvalidEventError: Unknown event
        ForbiddenError: Team is not part of the event
    """
    with store.transaction() as doc:
        team = find_by_id(doc.teams, team_id)
        if team is None:
            raise InvalidTeamError()

        if event_id:
            event = find_by_id(doc.events, event_id)
            if event is None:
                raise InvalidEventError()
            if team_id not in event.team_ids:
                raise ForbiddenError("Team is not part of this event")

        store.append_log(doc, "join", team_id=team_id, event_id=event_id or None)
        joined = team.model_copy()

    logger.info(f"📲 [{store.key}] Device joined {joined.name}" + (f" (event {event_id})" if event_id else ""))
    return joined


def award_bonus(store: TenantStore, team_id: str, points: int, by: str) -> Team:
    """
    Add bonus points (may be negative) to a team and log who gave them

    Raises:
        NotFoundError: Unknown team
    """
    with store.transaction() as doc:
        team = find_by_id(doc.teams, team_id)
        if team is None:
            raise NotFoundError("Team not found")
        team.score += points
        store.append_log(doc, "bonus", team_id=team_id, points=points, by=by or "admin")
        updated = team.model_copy()

    logger.info(f"🎁 [{store.key}] {by} gave {points} bonus points to {updated.name}")
    return updated
