import logging
from collections.abc import Callable
from datetime import datetime

from bug_tracker.application.ports.seed_data_port import SeedDataPort
from bug_tracker.application.ports.snapshot_store_port import SnapshotStorePort
from bug_tracker.domain.tracker import Bug, Project, Snapshot, User, max_numeric_id

logger = logging.getLogger(__name__)

USER_SEQUENCE = "user"
PROJECT_SEQUENCE = "project"
BUG_SEQUENCE = "bug"


class TrackerState:
    """
    In-memory snapshot shared by the services.

    Every mutation is followed by ``commit()``, which hands the whole snapshot
    to the store. A failed save keeps the in-memory change; memory and disk
    stay diverged until the next successful commit.
    """

    def __init__(self, store: SnapshotStorePort, snapshot: Snapshot | None = None):
        self._store = store
        snapshot = snapshot or Snapshot()
        self._users: tuple[User, ...] = tuple(snapshot.users)
        self._projects: tuple[Project, ...] = tuple(snapshot.projects)
        self._bugs: tuple[Bug, ...] = tuple(snapshot.bugs)
        self._sequences: dict[str, int] = dict(snapshot.sequences)

    @classmethod
    def open(
        cls,
        store: SnapshotStorePort,
        seed_source: SeedDataPort,
        clock: Callable[[], datetime] = datetime.now,
    ) -> "TrackerState":
        """Loads the stored snapshot, falling back to the seed dataset."""
        try:
            snapshot = store.load()
        except ValueError as e:
            logger.error("Stored snapshot is unreadable, using seed data: %s", e)
            return cls(store, seed_source.load_seed(clock()))

        if snapshot is None:
            logger.info("No stored snapshot found, creating seed data")
            state = cls(store, seed_source.load_seed(clock()))
            state.commit()
            return state

        logger.info(
            "Snapshot loaded: %d users, %d projects, %d bugs",
            len(snapshot.users), len(snapshot.projects), len(snapshot.bugs),
        )
        return cls(store, snapshot)

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def users(self) -> tuple[User, ...]:
        return self._users

    @property
    def projects(self) -> tuple[Project, ...]:
        return self._projects

    @property
    def bugs(self) -> tuple[Bug, ...]:
        return self._bugs

    def snapshot(self) -> Snapshot:
        return Snapshot(
            users=self._users,
            projects=self._projects,
            bugs=self._bugs,
            sequences=dict(self._sequences),
        )

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def next_id(self, kind: str) -> str:
        """Allocates the next id for ``kind`` from a monotonic sequence."""
        existing = {
            USER_SEQUENCE: self._users,
            PROJECT_SEQUENCE: self._projects,
            BUG_SEQUENCE: self._bugs,
        }[kind]
        # Sequence never goes below ids already in use (e.g. a file written without sequences)
        last = max(self._sequences.get(kind, 0), max_numeric_id(existing))
        self._sequences[kind] = last + 1
        return str(last + 1)

    def add_user(self, user: User) -> None:
        self._users = self._users + (user,)

    def add_project(self, project: Project) -> None:
        self._projects = self._projects + (project,)

    def add_bug(self, bug: Bug) -> None:
        self._bugs = self._bugs + (bug,)

    def replace_bug(self, bug: Bug) -> None:
        self._bugs = tuple(bug if existing == bug else existing for existing in self._bugs)

    def commit(self) -> bool:
        """Writes the full snapshot to the store."""
        saved = self._store.save(self.snapshot())
        if not saved:
            logger.error("Snapshot save failed; in-memory state is ahead of the store")
        return saved
