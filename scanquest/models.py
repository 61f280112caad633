"""
Data models for the scavenger-hunt server

Persisted documents serialize with camelCase keys (teamIds, optionIndex, ...).
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True)


class User(CamelModel):
    """Admin account in the process-wide credential store"""
    id: str
    username: str
    salt: str
    hash: str
    role: str = "admin"  # "owner" | "admin"
    created: Optional[int] = None  # ms since epoch

    def public(self) -> dict:
        """Listing view, never exposes salt/hash"""
        return {"id": self.id, "username": self.username, "role": self.role, "created": self.created}


class CoreDocument(CamelModel):
    users: List[User] = Field(default_factory=list)


class Team(CamelModel):
    id: str
    name: str
    score: int = 0


class TaskOption(CamelModel):
    label: str
    points: int = 0  # may be zero or negative


class Task(CamelModel):
    id: str
    title: str
    options: List[TaskOption] = Field(default_factory=list)


class Event(CamelModel):
    """Named scope restricting which teams and tasks are valid together"""
    id: str
    name: str
    team_ids: List[str] = Field(default_factory=list)
    task_ids: List[str] = Field(default_factory=list)
    created: Optional[int] = None


class Record(CamelModel):
    """Proof that a team answered a task; at most one per (team_id, task_id)"""
    id: str
    team_id: str
    task_id: str
    option_index: int
    points: int
    event_id: Optional[str] = None
    time: int


class LogEntry(CamelModel):
    id: str
    type: str  # "join" | "answer" | "bonus"
    team_id: Optional[str] = None
    task_id: Optional[str] = None
    event_id: Optional[str] = None
    option_index: Optional[int] = None
    points: Optional[int] = None
    by: Optional[str] = None
    time: int


class TenantDocument(CamelModel):
    """Everything one tenant owns; persisted as a single JSON file"""
    teams: List[Team] = Field(default_factory=list)
    tasks: List[Task] = Field(default_factory=list)
    records: List[Record] = Field(default_factory=list)
    events: List[Event] = Field(default_factory=list)
    logs: List[LogEntry] = Field(default_factory=list)


# ==================== REQUEST BODIES ====================

class Credentials(BaseModel):
    username: str = ""
    password: str = ""


class NewUser(Credentials):
    role: Optional[str] = None


class NewTask(BaseModel):
    title: str = Field(min_length=1)
    options: List[TaskOption] = Field(default_factory=list)


class NewEvent(CamelModel):
    name: str = ""
    team_ids: List[str] = Field(default_factory=list)
    task_ids: List[str] = Field(default_factory=list)


class EventAppend(CamelModel):
    team_ids: List[str] = Field(default_factory=list)
    task_ids: List[str] = Field(default_factory=list)


class Bonus(CamelModel):
    team_id: str
    extra: int = 0
