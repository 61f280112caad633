"""
Admin log view - joins raw log entries against current names
"""
from typing import List, Optional

from scanquest.models import LogEntry, TenantDocument
from scanquest.services.messages import catalog


UNKNOWN_TEAM = "—"


def describe(entry: LogEntry, team_name: str, task_title: str, event_name: str, locale: str) -> str:
    """Render one log entry as a sentence"""
    msgs = catalog(locale)
    event = msgs["event_suffix"].format(event=event_name) if event_name else ""
    points = entry.points or 0

    if entry.type == "join":
        return msgs["join"].format(team=team_name, event=event)
    if entry.type == "answer":
        verdict = msgs["correct"] if points > 0 else msgs["incorrect"]
        return msgs["answer"].format(team=team_name, task=task_title, verdict=verdict, points=points, event=event)
    if entry.type == "bonus":
        return msgs["bonus"].format(by=entry.by or "admin", points=points, team=team_name)
    return msgs["unknown"]


def humanize_logs(doc: TenantDocument, team_id: Optional[str] = None, locale: str = "en") -> List[dict]:
    """
    Build the admin log listing

    Names are looked up at read time, so renamed or deleted teams/tasks/events
    show their current state (or a placeholder), not the state at log time.

    Args:
        doc: Tenant snapshot
        team_id: Only entries for this team when given
        locale: Message language

    Returns:
        Entries sorted newest first
    """
    teams = {t.id: t for t in doc.teams}
    tasks = {t.id: t for t in doc.tasks}
    events = {e.id: e for e in doc.events}

    entries = [l for l in doc.logs if not team_id or l.team_id == team_id]
    entries.sort(key=lambda l: l.time, reverse=True)

    result = []
    for entry in entries:
        team_name = teams[entry.team_id].name if entry.team_id in teams else UNKNOWN_TEAM
        task_title = tasks[entry.task_id].title if entry.task_id in tasks else ""
        event_name = events[entry.event_id].name if entry.event_id in events else ""
        result.append({
            "id": entry.id,
            "type": entry.type,
            "time": entry.time,
            "message": describe(entry, team_name, task_title, event_name, locale),
            "teamId": entry.team_id,
            "eventId": entry.event_id,
            "taskId": entry.task_id,
            "points": entry.points or 0,
        })
    return result
