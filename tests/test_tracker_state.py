import pytest

from bug_tracker.adapters.outbound.in_memory_snapshot_store import InMemorySnapshotStore
from bug_tracker.adapters.outbound.json_snapshot_store import JsonFileSnapshotStore
from bug_tracker.application.services.tracker_state import BUG_SEQUENCE, USER_SEQUENCE, TrackerState
from bug_tracker.domain.tracker import Project, Snapshot, User, Role


def test_empty_store_is_seeded_and_saved(seed_source, clock):
    store = InMemorySnapshotStore()
    state = TrackerState.open(store, seed_source, clock=clock)

    assert [u.username for u in state.users] == ["manager1", "dev1", "dev2", "tester1", "tester2"]
    assert len(state.projects) == 3
    assert len(state.bugs) == 3
    assert store.save_count == 1


def test_corrupt_file_falls_back_to_seed_without_overwriting(tmp_path, seed_source, clock):
    path = tmp_path / "bugs.json"
    path.write_text("{{{ broken")
    state = TrackerState.open(JsonFileSnapshotStore(path), seed_source, clock=clock)

    assert len(state.users) == 5
    assert path.read_text() == "{{{ broken"

    assert state.commit()
    assert JsonFileSnapshotStore(path).load() is not None


def test_sequences_of_wrong_shape_fall_back_to_seed(tmp_path, seed_source, clock):
    path = tmp_path / "bugs.json"
    path.write_text('{"users": [], "projects": [], "bugs": [], "sequences": [1, 2]}')

    with pytest.raises(ValueError):
        JsonFileSnapshotStore(path).load()

    state = TrackerState.open(JsonFileSnapshotStore(path), seed_source, clock=clock)
    assert len(state.users) == 5
    assert len(state.bugs) == 3


def test_ids_are_monotonic_and_survive_reload(tmp_path, seed_source, clock):
    path = tmp_path / "bugs.json"
    state = TrackerState.open(JsonFileSnapshotStore(path), seed_source, clock=clock)

    assert state.next_id(BUG_SEQUENCE) == "4"
    assert state.next_id(BUG_SEQUENCE) == "5"
    state.commit()

    reopened = TrackerState.open(JsonFileSnapshotStore(path), seed_source, clock=clock)
    # "4" and "5" were handed out even though no bug was stored under them
    assert reopened.next_id(BUG_SEQUENCE) == "6"


def test_sequence_derived_from_existing_ids_when_absent():
    snapshot = Snapshot(users=(
        User(id="1", username="a", role=Role.TESTER),
        User(id="9", username="b", role=Role.TESTER),
        User(id="legacy", username="c", role=Role.TESTER),
    ))
    state = TrackerState(InMemorySnapshotStore(), snapshot)
    assert state.next_id(USER_SEQUENCE) == "10"


def test_snapshot_is_detached_from_later_changes():
    state = TrackerState(InMemorySnapshotStore())
    before = state.snapshot()
    state.add_project(Project(id="1", name="Alpha"))

    assert before.projects == ()
    assert state.snapshot().projects == (Project(id="1", name="Alpha"),)


def test_in_memory_store_keeps_last_snapshot():
    store = InMemorySnapshotStore()
    assert store.load() is None

    first = Snapshot(users=(User(id="1", username="pm", role=Role.PROJECT_MANAGER),))
    second = Snapshot(projects=(Project(id="1", name="Portal"),))
    assert store.save(first)
    assert store.save(second)

    assert store.load() is second
    assert store.save_count == 2
