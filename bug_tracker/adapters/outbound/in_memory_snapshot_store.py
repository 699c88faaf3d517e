import logging

from bug_tracker.domain.tracker import Snapshot

logger = logging.getLogger(__name__)


class InMemorySnapshotStore:
    """In-memory snapshot store (nothing survives the process)"""

    def __init__(self, snapshot: Snapshot | None = None):
        self._snapshot = snapshot
        self.save_count = 0

    def load(self) -> Snapshot | None:
        return self._snapshot

    def save(self, snapshot: Snapshot) -> bool:
        self._snapshot = snapshot
        self.save_count += 1
        logger.debug("Snapshot stored in memory: %d bugs", len(snapshot.bugs))
        return True
