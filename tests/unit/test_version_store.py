"""Version store tests."""

import threading

import pytest
from hypothesis import given, settings as hyp_settings, strategies as st

from uiforge.agents.models import Plan
from uiforge.storage import VersionStore, VersionSummary, VersionType

from conftest import SAMPLE_PLAN_JSON


@pytest.fixture
def plan():
    return Plan.model_validate_json(SAMPLE_PLAN_JSON)


def add(store, session="s1", code="code", prompt="prompt", type=VersionType.GENERATE, plan=None):
    return store.add_version(session, code, plan, "explanation", prompt, type)


# ============================================================================
# Append / read
# ============================================================================

@pytest.mark.unit
def test_empty_session(store):
    assert store.get_versions("nope") == []
    assert store.get_latest_version("nope") is None
    assert store.get_version("nope", "ver_x") is None


@pytest.mark.unit
def test_add_creates_session_and_orders(store):
    v1 = add(store, code="one")
    v2 = add(store, code="two", type=VersionType.MODIFY)

    assert [v.id for v in store.get_versions("s1")] == [v1.id, v2.id]
    assert store.get_latest_version("s1") == v2
    assert store.get_version("s1", v1.id) == v1
    assert v1.timestamp <= v2.timestamp
    assert store.session_count() == 1


@pytest.mark.unit
def test_version_ids_are_unique_and_prefixed(store):
    ids = {add(store).id for _ in range(50)}
    assert len(ids) == 50
    assert all(i.startswith("ver_") for i in ids)


@pytest.mark.unit
def test_sessions_are_isolated(store):
    a = add(store, session="a")
    add(store, session="b")
    assert store.get_version("b", a.id) is None
    assert len(store.get_versions("a")) == 1


@pytest.mark.unit
def test_get_versions_returns_copy(store):
    add(store)
    history = store.get_versions("s1")
    history.clear()
    assert len(store.get_versions("s1")) == 1


@pytest.mark.unit
def test_versions_are_immutable(store):
    version = add(store)
    with pytest.raises(Exception):
        version.code = "changed"


# ============================================================================
# Rollback
# ============================================================================

@pytest.mark.unit
def test_rollback_appends_copy(store, plan):
    v1 = add(store, code="first", plan=plan)
    v2 = add(store, code="second", type=VersionType.MODIFY, plan=plan)

    rolled = store.rollback_to("s1", v1.id)

    assert rolled is not None
    assert rolled.id not in (v1.id, v2.id)
    assert rolled.code == "first"
    assert rolled.plan == plan
    assert rolled.type is VersionType.ROLLBACK
    assert rolled.user_prompt == f"Rollback to version {v1.id}"
    assert rolled.explanation == f"Rolled back to version from {v1.timestamp.isoformat()}"
    assert [v.id for v in store.get_versions("s1")] == [v1.id, v2.id, rolled.id]
    assert store.get_latest_version("s1") == rolled


@pytest.mark.unit
def test_rollback_missing_target(store):
    add(store)
    before = store.get_versions("s1")
    assert store.rollback_to("s1", "ver_missing") is None
    assert store.rollback_to("other", "ver_missing") is None
    assert store.get_versions("s1") == before


# ============================================================================
# Clear / summaries
# ============================================================================

@pytest.mark.unit
def test_clear_session(store):
    add(store)
    add(store, session="keep")
    store.clear_session("s1")
    assert store.get_versions("s1") == []
    assert len(store.get_versions("keep")) == 1
    store.clear_session("never-existed")


@pytest.mark.unit
def test_summary_omits_code(store):
    version = add(store, code="abcdef", prompt="make it")
    summary = VersionSummary.of(version)
    dumped = summary.model_dump(by_alias=True, mode="json")
    assert dumped["codeLength"] == 6
    assert dumped["userPrompt"] == "make it"
    assert dumped["type"] == "generate"
    assert "code" not in dumped


# ============================================================================
# Concurrency
# ============================================================================

@pytest.mark.unit
def test_concurrent_appends_keep_every_write(store):
    def worker(n):
        for i in range(25):
            add(store, code=f"{n}-{i}")

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    history = store.get_versions("s1")
    assert len(history) == 200
    assert len({v.id for v in history}) == 200


@pytest.mark.unit
def test_read_modify_append_under_lock_chains(store):
    """Each writer sees the previous writer's result when holding the session lock."""
    add(store, code="0")

    def bump():
        for _ in range(20):
            with store.lock("s1"):
                latest = store.get_latest_version("s1")
                add(store, code=str(int(latest.code) + 1), type=VersionType.MODIFY)

    threads = [threading.Thread(target=bump) for _ in range(5)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    codes = [int(v.code) for v in store.get_versions("s1")]
    assert codes == list(range(101))


@pytest.mark.unit
def test_reads_do_not_register_session_locks(store):
    for i in range(1000):
        assert store.get_versions(f"nobody-{i}") == []
        assert store.get_version(f"nobody-{i}", "ver_x") is None
        assert store.get_latest_version(f"nobody-{i}") is None
    assert store.lock_count() == 0


@pytest.mark.unit
def test_session_lock_dropped_when_unused(store):
    add(store)
    store.clear_session("s1")
    assert store.lock_count() == 0
    assert store.session_count() == 0


@pytest.mark.unit
def test_reads_proceed_while_session_locked(store):
    add(store, code="one")
    seen = []

    with store.lock("s1"):
        reader = threading.Thread(target=lambda: seen.append(store.get_versions("s1")))
        reader.start()
        reader.join(timeout=1)
        assert not reader.is_alive()

    assert [v.code for v in seen[0]] == ["one"]


# ============================================================================
# Properties
# ============================================================================

@pytest.mark.unit
@hyp_settings(max_examples=50)
@given(st.lists(st.sampled_from(["add", "rollback"]), max_size=30))
def test_history_only_grows(ops):
    store = VersionStore()
    first = add(store)
    length = 1
    for op in ops:
        if op == "add":
            add(store, type=VersionType.MODIFY)
        else:
            store.rollback_to("s1", first.id)
        assert len(store.get_versions("s1")) == length + 1
        length += 1
    assert store.get_versions("s1")[0] == first
