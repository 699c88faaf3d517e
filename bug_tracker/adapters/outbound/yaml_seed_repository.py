import logging
from datetime import datetime, timedelta
from pathlib import Path

import yaml

from bug_tracker.domain.tracker import Bug, Comment, Priority, Project, Role, Snapshot, Status, User

logger = logging.getLogger(__name__)


class YamlSeedRepository:
    """Default dataset read from a YAML file"""

    def __init__(self, yaml_path: str | Path):
        self._path = Path(yaml_path)

    def _read(self) -> dict:
        if not self._path.exists():
            raise FileNotFoundError(f"Seed YAML file not found: {self._path}")

        logger.info("Loading seed YAML: %s", self._path)
        with open(self._path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}

    def load_seed(self, now: datetime) -> Snapshot:
        """
        Builds the default snapshot.

        Bug and comment times are given in the YAML as day offsets
        (``created_days_ago`` etc.) and resolved against ``now``.
        """
        data = self._read()

        users = tuple(
            User(id=str(u["id"]), username=u["username"], role=Role(u["role"]))
            for u in data.get("users", [])
        )
        projects = tuple(
            Project(id=str(p["id"]), name=p["name"], description=p.get("description", ""))
            for p in data.get("projects", [])
        )
        bugs = tuple(self._build_bug(b, now) for b in data.get("bugs", []))

        logger.info(
            "Seed data built: %d users, %d projects, %d bugs",
            len(users), len(projects), len(bugs),
        )
        return Snapshot(users=users, projects=projects, bugs=bugs)

    @staticmethod
    def _build_bug(data: dict, now: datetime) -> Bug:
        created = now - timedelta(days=data.get("created_days_ago", 0))
        updated = now - timedelta(days=data.get("updated_days_ago", 0))
        assignee_id = data.get("assignee_id")
        return Bug(
            id=str(data["id"]),
            title=data["title"],
            description=data.get("description", ""),
            project_id=str(data["project_id"]),
            reporter_id=str(data["reporter_id"]),
            assignee_id=str(assignee_id) if assignee_id is not None else None,
            status=Status(data.get("status", Status.NEW.value)),
            priority=Priority(data.get("priority", Priority.MEDIUM.value)),
            created_date=created,
            updated_date=max(created, updated),
            comments=tuple(
                Comment(
                    author_id=str(c["author_id"]),
                    text=c["text"],
                    timestamp=now - timedelta(days=c.get("days_ago", 0)),
                )
                for c in data.get("comments", [])
            ),
        )
