"""
Tests for answer submission, joins and bonus points
"""
from concurrent.futures import ThreadPoolExecutor

import pytest

from scanquest.core.scoring import (
    ALREADY_ANSWERED,
    AWARDED,
    NOT_IN_EVENT,
    award_bonus,
    join_team,
    parse_option_index,
    submit_answer,
)
from scanquest.errors import (
    ForbiddenError,
    InvalidAnswerError,
    InvalidEventError,
    InvalidTaskError,
    InvalidTeamError,
    JoinRequiredError,
    NotFoundError,
)
from scanquest.models import TaskOption


@pytest.fixture
def task(store):
    return store.create_task("Capital of France?", [
        TaskOption(label="A", points=10),
        TaskOption(label="B", points=0),
        TaskOption(label="C", points=-5),
    ])


@pytest.fixture
def team(store):
    return store.create_teams(1)[0]


def test_scan_awards_points(store, task, team):
    """First scan awards the option's points and creates one record"""
    outcome = submit_answer(store, team.id, task.id, 0)
    assert outcome.status == AWARDED
    assert outcome.points == 10
    assert store.get_team(team.id).score == 10
    assert len(store.snapshot().records) == 1


def test_second_scan_already_answered(store, task, team):
    """Any later scan of the same task is a no-op"""
    submit_answer(store, team.id, task.id, 0)
    outcome = submit_answer(store, team.id, task.id, 1)
    assert outcome.status == ALREADY_ANSWERED
    assert outcome.points is None
    assert store.get_team(team.id).score == 10
    assert len(store.snapshot().records) == 1


def test_already_answered_wins_over_bad_option(store, task, team):
    """Duplicate check happens before option validation"""
    submit_answer(store, team.id, task.id, 0)
    assert submit_answer(store, team.id, task.id, 99).status == ALREADY_ANSWERED


def test_negative_and_zero_points(store, team):
    """Zero and negative options change the score by exactly that much"""
    t1 = store.create_task("Zero", [TaskOption(label="x", points=0)])
    t2 = store.create_task("Minus", [TaskOption(label="y", points=-5)])
    submit_answer(store, team.id, t1.id, 0)
    submit_answer(store, team.id, t2.id, 0)
    assert store.get_team(team.id).score == -5
    assert len(store.snapshot().records) == 2


def test_score_is_sum_of_distinct_scans(store, team):
    """N distinct scans add up"""
    tasks = [store.create_task(f"T{i}", [TaskOption(label="a", points=i)]) for i in range(1, 5)]
    for t in tasks:
        submit_answer(store, team.id, t.id, 0)
    assert store.get_team(team.id).score == 1 + 2 + 3 + 4


def test_answer_is_logged(store, task, team):
    """A successful scan appends one answer log entry"""
    submit_answer(store, team.id, task.id, 2)
    logs = store.snapshot().logs
    assert len(logs) == 1
    assert logs[0].type == "answer"
    assert logs[0].points == -5
    assert logs[0].option_index == 2


def test_no_team_session(store, task):
    """Scanning without a team redirects to join"""
    with pytest.raises(JoinRequiredError):
        submit_answer(store, None, task.id, 0)


def test_unknown_team(store, task):
    with pytest.raises(InvalidTeamError):
        submit_answer(store, "ghost", task.id, 0)


def test_unknown_task(store, team):
    with pytest.raises(InvalidTaskError):
        submit_answer(store, team.id, "nope", 0)


@pytest.mark.parametrize("index", [None, -1, 3])
def test_invalid_option(store, task, team, index):
    """Out of range or unparseable options are rejected without side effects"""
    with pytest.raises(InvalidAnswerError):
        submit_answer(store, team.id, task.id, index)
    assert store.snapshot().records == []
    assert store.get_team(team.id).score == 0


def test_event_scope(store, task, team):
    """Scans inside an event respect its team and task lists"""
    other_task = store.create_task("Other", [TaskOption(label="a", points=1)])
    event = store.create_event("Cup", [team.id], [task.id])

    assert submit_answer(store, team.id, other_task.id, 0, event.id).status == NOT_IN_EVENT

    outcome = submit_answer(store, team.id, task.id, 0, event.id)
    assert outcome.status == AWARDED
    assert store.snapshot().records[0].event_id == event.id


def test_event_unknown(store, task, team):
    with pytest.raises(InvalidEventError):
        submit_answer(store, team.id, task.id, 0, "missing-event")


def test_event_team_not_member(store, task, team):
    """Task in event but team not: forbidden"""
    event = store.create_event("Cup", [], [task.id])
    with pytest.raises(ForbiddenError):
        submit_answer(store, team.id, task.id, 0, event.id)


def test_concurrent_duplicate_scans(store, task, team):
    """Racing scans for one (team, task) create exactly one record"""
    with ThreadPoolExecutor(max_workers=16) as pool:
        outcomes = list(pool.map(lambda _: submit_answer(store, team.id, task.id, 0), range(32)))

    assert sum(1 for o in outcomes if o.status == AWARDED) == 1
    assert all(o.status in (AWARDED, ALREADY_ANSWERED) for o in outcomes)
    assert len(store.snapshot().records) == 1
    assert store.get_team(team.id).score == 10


def test_concrete_scenario(registry):
    """Task A=10/B=0: first scan gives 10, second is already answered"""
    store = registry.resolve("acme")
    task = store.create_task("T", [TaskOption(label="A", points=10), TaskOption(label="B", points=0)])
    team = store.create_teams(1)[0]

    assert submit_answer(store, team.id, task.id, 0).points == 10
    assert submit_answer(store, team.id, task.id, 1).status == ALREADY_ANSWERED
    assert store.get_team(team.id).score == 10


def test_join_logs_every_time(store, team):
    """Joining twice is allowed and logs twice"""
    join_team(store, team.id)
    join_team(store, team.id)
    logs = store.snapshot().logs
    assert [l.type for l in logs] == ["join", "join"]
    assert store.get_team(team.id).score == 0


def test_join_validation(store, team):
    event = store.create_event("Cup", [], [])
    with pytest.raises(InvalidTeamError):
        join_team(store, "ghost")
    with pytest.raises(InvalidEventError):
        join_team(store, team.id, "missing")
    with pytest.raises(ForbiddenError):
        join_team(store, team.id, event.id)
    assert store.snapshot().logs == []


def test_bonus(store, team):
    """Bonus changes the score by exactly B and logs who gave it"""
    award_bonus(store, team.id, 7, by="alice")
    award_bonus(store, team.id, -2, by="alice")
    assert store.get_team(team.id).score == 5
    logs = store.snapshot().logs
    assert [l.type for l in logs] == ["bonus", "bonus"]
    assert logs[0].by == "alice"
    assert logs[0].points == 7


def test_bonus_unknown_team(store):
    with pytest.raises(NotFoundError):
        award_bonus(store, "ghost", 5, by="alice")
    assert store.snapshot().logs == []


def test_parse_option_index():
    assert parse_option_index("2") == 2
    assert parse_option_index(" 0 ") == 0
    assert parse_option_index("abc") is None
    assert parse_option_index(None) is None
    assert parse_option_index("1.5") == 1
    assert parse_option_index("2abc") == 2
    assert parse_option_index("-1") == -1
    assert parse_option_index("") is None
    assert parse_option_index("x1") is None


def test_scan_query_read_leniently(store, task, team):
    """A decimal option index scores the option it starts with"""
    outcome = submit_answer(store, team.id, task.id, parse_option_index("0.9"))
    assert outcome.status == AWARDED
    assert outcome.points == 10


def test_scans_without_scoring_leave_file_untouched(store, task, team):
    other_task = store.create_task("Other", [TaskOption(label="a", points=1)])
    event = store.create_event("Cup", [team.id], [task.id])
    submit_answer(store, team.id, task.id, 0, event.id)
    before = store.path.stat()

    assert submit_answer(store, team.id, task.id, 1, event.id).status == ALREADY_ANSWERED
    assert submit_answer(store, team.id, other_task.id, 0, event.id).status == NOT_IN_EVENT
    with pytest.raises(InvalidAnswerError):
        submit_answer(store, team.id, other_task.id, 5)

    after = store.path.stat()
    assert (after.st_ino, after.st_mtime_ns) == (before.st_ino, before.st_mtime_ns)
    assert store.get_team(team.id).score == 10
