"""
Per-tenant data store

One TenantStore owns one tenant's teams, tasks, records, events and logs.
All writes go through transaction(): the tenant lock is held for the whole
read-modify-write, changes are made on a draft copy, and the draft only
replaces the live document once it has been written to disk.
"""
import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional

from scanquest.errors import NotFoundError
from scanquest.models import Event, LogEntry, Task, TaskOption, Team, TenantDocument
from scanquest.services.logs import humanize_logs
from scanquest.services.messages import catalog
from scanquest.utils import new_id, now_ms, write_document


logger = logging.getLogger(__name__)


def find_by_id(items, item_id):
    """First item whose id matches, or None"""
    if not item_id:
        return None
    return next((item for item in items if item.id == item_id), None)


def merge_ids(current: List[str], extra: List[str]) -> List[str]:
    """Union preserving first-seen order"""
    return list(dict.fromkeys([*current, *extra]))


class TenantStore:
    """Isolated document collection for one tenant"""

    def __init__(self, key: str, path: Path, locale: str = "en"):
        self.key = key
        self.path = Path(path)
        self.locale = locale
        self._lock = threading.RLock()
        self._doc = self._load()

    def _load(self) -> TenantDocument:
        if self.path.exists():
            return TenantDocument.model_validate_json(self.path.read_text(encoding='utf-8'))
        doc = TenantDocument()
        write_document(self.path, doc)
        logger.info(f"📁 Created tenant store '{self.key}' at {self.path}")
        return doc

    @contextmanager
    def transaction(self) -> Iterator[TenantDocument]:
        """
        Serialized read-modify-write over the whole tenant document

        Yields a draft; if the block raises, the draft is discarded and
        nothing is persisted.
        """
        with self._lock:
            draft = self._doc.model_copy(deep=True)
            yield draft
            write_document(self.path, draft)
            self._doc = draft

    @contextmanager
    def locked(self) -> Iterator[TenantDocument]:
        """
        Hold the tenant lock and yield the live document without copying

        For checks that must not race with writers but may end without
        writing. Do not mutate the yielded document; open transaction()
        inside the block instead.
        """
        with self._lock:
            yield self._doc

    def snapshot(self) -> TenantDocument:
        """Consistent read-only copy of the tenant document"""
        with self._lock:
            return self._doc.model_copy(deep=True)

    # ==================== LOOKUPS ====================

    def get_team(self, team_id: str) -> Optional[Team]:
        with self._lock:
            team = find_by_id(self._doc.teams, team_id)
            return team.model_copy() if team else None

    def get_task(self, task_id: str) -> Optional[Task]:
        with self._lock:
            task = find_by_id(self._doc.tasks, task_id)
            return task.model_copy(deep=True) if task else None

    def get_event(self, event_id: str) -> Optional[Event]:
        with self._lock:
            event = find_by_id(self._doc.events, event_id)
            return event.model_copy(deep=True) if event else None

    def list_events(self) -> List[Event]:
        return self.snapshot().events

    def state(self) -> dict:
        doc = self.snapshot()
        return {
            "teams": [t.to_json() for t in doc.teams],
            "tasks": [t.to_json() for t in doc.tasks],
        }

    # ==================== TASKS ====================

    def create_task(self, title: str, options: List[TaskOption]) -> Task:
        task = Task(id=new_id(), title=title, options=options)
        with self.transaction() as doc:
            doc.tasks.append(task)
        logger.info(f"📝 [{self.key}] Task created: {title} ({len(options)} options)")
        return task

    def delete_task(self, task_id: str) -> bool:
        """
        Remove a task and every record that answers it

        Team scores are left as they are; logs are untouched.

        Returns:
            True if the task existed
        """
        with self.transaction() as doc:
            before = len(doc.tasks)
            doc.tasks = [t for t in doc.tasks if t.id != task_id]
            doc.records = [r for r in doc.records if r.task_id != task_id]
            removed = len(doc.tasks) < before
        if removed:
            logger.info(f"🗑️ [{self.key}] Task {task_id} deleted")
        return removed

    # ==================== TEAMS ====================

    def create_teams(self, count: int) -> List[Team]:
        """
        Add count teams named sequentially after the current team count

        A batch of 3 in an empty tenant yields "Team 1", "Team 2", "Team 3".
        """
        name_format = catalog(self.locale)["team_name"]
        created = []
        with self.transaction() as doc:
            for _ in range(count):
                team = Team(id=new_id(), name=name_format.format(n=len(doc.teams) + 1), score=0)
                doc.teams.append(team)
                created.append(team)
        logger.info(f"👥 [{self.key}] Created {len(created)} teams")
        return created

    def reset_teams(self) -> None:
        """Remove all teams and all records"""
        with self.transaction() as doc:
            doc.teams = []
            doc.records = []
        logger.info(f"🔄 [{self.key}] Teams and records cleared")

    def reset_scores(self) -> None:
        """Remove all records and zero every score; teams and logs stay"""
        with self.transaction() as doc:
            doc.records = []
            for team in doc.teams:
                team.score = 0
        logger.info(f"🔄 [{self.key}] Scores reset")

    # ==================== EVENTS ====================

    def create_event(self, name: str, team_ids: List[str], task_ids: List[str]) -> Event:
        event = Event(
            id=new_id(),
            name=name,
            team_ids=merge_ids([], team_ids),
            task_ids=merge_ids([], task_ids),
            created=now_ms(),
        )
        with self.transaction() as doc:
            doc.events.append(event)
        logger.info(f"📅 [{self.key}] Event created: {name}")
        return event

    def append_to_event(self, event_id: str, add_team_ids: List[str], add_task_ids: List[str]) -> Event:
        """
        Union ids into an event; membership never shrinks

        Raises:
            NotFoundError: If the event does not exist
        """
        with self.transaction() as doc:
            event = find_by_id(doc.events, event_id)
            if event is None:
                raise NotFoundError("Event not found")
            event.team_ids = merge_ids(event.team_ids, add_team_ids)
            event.task_ids = merge_ids(event.task_ids, add_task_ids)
            updated = event.model_copy(deep=True)
        return updated

    # ==================== LOGS ====================

    def list_logs_humanized(self, team_id: Optional[str] = None) -> List[dict]:
        return humanize_logs(self.snapshot(), team_id=team_id, locale=self.locale)

    def clear_logs(self) -> None:
        with self.transaction() as doc:
            doc.logs = []
        logger.info(f"🧹 [{self.key}] Logs cleared")

    def append_log(self, doc: TenantDocument, entry_type: str, **fields) -> LogEntry:
        """Add a log entry inside an open transaction"""
        entry = LogEntry(id=new_id(), type=entry_type, time=now_ms(), **fields)
        doc.logs.append(entry)
        return entry
