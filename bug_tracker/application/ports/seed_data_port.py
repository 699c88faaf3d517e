from datetime import datetime
from typing import Protocol

from bug_tracker.domain.tracker import Snapshot


class SeedDataPort(Protocol):
    """Source of the default dataset used when no snapshot is stored"""

    def load_seed(self, now: datetime) -> Snapshot:
        """Builds the default snapshot with timestamps relative to ``now``."""
        ...
