"""
Tests for tenant resolution and isolation
"""
from concurrent.futures import ThreadPoolExecutor

import pytest

from scanquest.core.scoring import submit_answer
from scanquest.core.tenants import normalize_tenant_key, resolve_tenant_key
from scanquest.errors import InvalidInputError, MissingTenantError
from scanquest.models import TaskOption


def test_resolve_returns_cached_instance(registry):
    assert registry.resolve("acme") is registry.resolve("  acme ")


def test_resolve_creates_file_lazily(registry):
    assert registry.exists("acme") is False
    registry.resolve("acme")
    assert registry.exists("acme") is True


@pytest.mark.parametrize("key", ["", "   ", None, "../etc", "a/b", ".hidden"])
def test_invalid_keys(registry, key):
    with pytest.raises(InvalidInputError):
        registry.resolve(key)


def test_normalize_trims():
    assert normalize_tenant_key("  acme  ") == "acme"


def test_concurrent_first_resolution(registry):
    """Racing first requests get one store instance"""
    with ThreadPoolExecutor(max_workers=16) as pool:
        stores = list(pool.map(lambda _: registry.resolve("race"), range(32)))
    assert len({id(s) for s in stores}) == 1


def test_request_precedence():
    assert resolve_tenant_key("q", "cookie", "admin") == "q"
    assert resolve_tenant_key(None, "cookie", "admin") == "cookie"
    assert resolve_tenant_key(" ", "", "admin") == "admin"


def test_request_missing_tenant():
    with pytest.raises(MissingTenantError):
        resolve_tenant_key(None, None, None)


def test_isolation(registry):
    """Writes to one tenant never show up in another"""
    a = registry.resolve("a")
    b = registry.resolve("b")
    task = a.create_task("T", [TaskOption(label="x", points=10)])
    team = a.create_teams(1)[0]
    submit_answer(a, team.id, task.id, 0)

    doc_b = b.snapshot()
    assert doc_b.teams == [] and doc_b.tasks == [] and doc_b.records == []
    assert a.path != b.path


def test_isolation_under_concurrency(registry):
    """Parallel activity on two tenants keeps each one's counts"""
    def work(key):
        store = registry.resolve(key)
        task = store.create_task("T", [TaskOption(label="x", points=1)])
        for team in store.create_teams(5):
            submit_answer(store, team.id, task.id, 0)
        return key

    with ThreadPoolExecutor(max_workers=4) as pool:
        list(pool.map(work, ["a", "b", "a", "b"]))

    for key in ("a", "b"):
        doc = registry.resolve(key).snapshot()
        assert len(doc.teams) == 10
        assert len(doc.records) == 10
