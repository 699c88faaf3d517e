"""Shared fixtures: a fixed clock, the seed dataset and an in-memory wired container.

The project root is added to sys.path so `import bug_tracker` works without an
editable install.
"""

import sys
from datetime import datetime, timedelta
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from bug_tracker.adapters.outbound.in_memory_snapshot_store import InMemorySnapshotStore  # noqa: E402
from bug_tracker.adapters.outbound.yaml_seed_repository import YamlSeedRepository  # noqa: E402
from bug_tracker.configuration.container import assemble_container  # noqa: E402
from bug_tracker.configuration.settings import Settings  # noqa: E402

SEED_YAML = ROOT / "config" / "seed_data.yaml"


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 5, 1, 9, 30, 0))


@pytest.fixture
def seed_source():
    return YamlSeedRepository(SEED_YAML)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        app_env="test",
        server_name="bug-tracker-test",
        data_file=str(tmp_path / "bugs.json"),
        seed_yaml_path=str(SEED_YAML),
        store_backend="memory",
    )


@pytest.fixture
def store():
    return InMemorySnapshotStore()


@pytest.fixture
def container(settings, store, seed_source, clock):
    return assemble_container(settings, store, seed_source, clock=clock)


@pytest.fixture
def engine(container):
    return container.engine


@pytest.fixture
def directory(container):
    return container.directory
