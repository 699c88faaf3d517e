from typing import Protocol

from bug_tracker.domain.tracker import Snapshot


class SnapshotStorePort(Protocol):
    """Contract for persisting the full tracker snapshot"""

    def load(self) -> Snapshot | None:
        """
        Loads the stored snapshot.

        Returns:
            Snapshot, or None when nothing has been stored yet

        Raises:
            ValueError: the stored document is malformed
        """
        ...

    def save(self, snapshot: Snapshot) -> bool:
        """Overwrites the stored snapshot as a whole. Returns False on I/O failure."""
        ...
