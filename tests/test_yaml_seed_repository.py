from datetime import datetime, timedelta

import pytest

from bug_tracker.adapters.outbound.yaml_seed_repository import YamlSeedRepository
from bug_tracker.domain.tracker import Priority, Status


def test_default_dataset(seed_source):
    now = datetime(2024, 3, 10, 8, 0)
    snapshot = seed_source.load_seed(now)

    assert [p.name for p in snapshot.projects] == ["E-commerce Website", "Mobile App", "API Service"]

    login, checkout, api = snapshot.bugs
    assert login.priority == Priority.HIGH
    assert login.created_date == now - timedelta(days=2)
    assert login.updated_date == now - timedelta(days=1)
    assert login.comments[0].author_id == "4"

    assert checkout.status == Status.IN_PROGRESS
    assert checkout.assignee_id == "2"

    assert api.project_id == "3"
    assert api.status == Status.NEW
    assert api.assignee_id is None


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        YamlSeedRepository(tmp_path / "missing.yaml").load_seed(datetime.now())


def test_empty_file_gives_empty_snapshot(tmp_path):
    path = tmp_path / "seed.yaml"
    path.write_text("")
    snapshot = YamlSeedRepository(path).load_seed(datetime.now())
    assert snapshot.users == () and snapshot.bugs == ()


def test_each_load_reads_the_file(tmp_path):
    path = tmp_path / "seed.yaml"
    path.write_text("users:\n  - {id: 1, username: pm, role: PROJECT_MANAGER}\n")
    repository = YamlSeedRepository(path)
    assert [u.username for u in repository.load_seed(datetime.now()).users] == ["pm"]

    path.write_text("users:\n  - {id: 9, username: qa, role: TESTER}\n")
    assert [u.username for u in repository.load_seed(datetime.now()).users] == ["qa"]
