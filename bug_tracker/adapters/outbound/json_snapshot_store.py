import json
import logging
import os
import re
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Any

from bug_tracker.domain.tracker import Bug, Comment, Priority, Project, Role, Snapshot, Status, User

logger = logging.getLogger(__name__)

_EXTRA_FRACTION_DIGITS = re.compile(r"(\.\d{6})\d+")


class JsonFileSnapshotStore:
    """JSON file snapshot store (whole-file overwrite on every save)"""

    def __init__(self, path: str | Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    # ------------------------------------------------------------------
    # Public methods
    # ------------------------------------------------------------------

    def load(self) -> Snapshot | None:
        if not self._path.exists():
            logger.info("Data file not found: %s", self._path)
            return None

        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except OSError as e:
            raise ValueError(f"Cannot read data file {self._path}: {e}") from e

        # json.JSONDecodeError is a ValueError and propagates as-is
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError(f"Data file {self._path} does not hold an object")

        try:
            snapshot = Snapshot(
                users=tuple(self._parse_user(u) for u in data.get("users") or []),
                projects=tuple(self._parse_project(p) for p in data.get("projects") or []),
                bugs=tuple(self._parse_bug(b) for b in data.get("bugs") or []),
                sequences=self._parse_sequences(data.get("sequences") or {}),
            )
        except (KeyError, TypeError) as e:
            raise ValueError(f"Malformed data file {self._path}: {e!r}") from e

        logger.info("Data file loaded: %s", self._path)
        return snapshot

    def save(self, snapshot: Snapshot) -> bool:
        document = self.to_document(snapshot)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            # Write next to the target and swap in, so readers never see a half-written file
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp",
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(document, f, indent=2, ensure_ascii=False)
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            logger.error("Error saving data to %s: %s", self._path, e)
            return False
        return True

    # ------------------------------------------------------------------
    # Encoding
    # ------------------------------------------------------------------

    @classmethod
    def to_document(cls, snapshot: Snapshot) -> dict[str, Any]:
        return {
            "users": [
                {"id": u.id, "username": u.username, "role": u.role.value}
                for u in snapshot.users
            ],
            "projects": [
                {"id": p.id, "name": p.name, "description": p.description}
                for p in snapshot.projects
            ],
            "bugs": [cls._bug_to_dict(b) for b in snapshot.bugs],
            "sequences": dict(snapshot.sequences),
        }

    @staticmethod
    def _bug_to_dict(bug: Bug) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": bug.id,
            "title": bug.title,
            "description": bug.description,
            "projectId": bug.project_id,
            "reporterId": bug.reporter_id,
        }
        # Absent assignee is omitted, as in the original bugs.json
        if bug.assignee_id is not None:
            data["assigneeId"] = bug.assignee_id
        data.update({
            "status": bug.status.value,
            "priority": bug.priority.value,
            "createdDate": _format_timestamp(bug.created_date),
            "updatedDate": _format_timestamp(bug.updated_date),
            "comments": [
                {
                    "authorId": c.author_id,
                    "text": c.text,
                    "timestamp": _format_timestamp(c.timestamp),
                }
                for c in bug.comments
            ],
        })
        return data

    @staticmethod
    def _parse_sequences(data) -> dict[str, int]:
        if not isinstance(data, dict):
            raise TypeError(f"sequences must be an object, got {type(data).__name__}")
        return {str(k): int(v) for k, v in data.items()}

    @staticmethod
    def _parse_user(data: dict) -> User:
        return User(id=str(data["id"]), username=data["username"], role=Role(data["role"]))

    @staticmethod
    def _parse_project(data: dict) -> Project:
        return Project(
            id=str(data["id"]),
            name=data["name"],
            description=data.get("description") or "",
        )

    @staticmethod
    def _parse_bug(data: dict) -> Bug:
        assignee_id = data.get("assigneeId")
        return Bug(
            id=str(data["id"]),
            title=data.get("title") or "",
            description=data.get("description") or "",
            project_id=str(data["projectId"]),
            reporter_id=str(data["reporterId"]),
            assignee_id=str(assignee_id) if assignee_id is not None else None,
            status=Status(data.get("status", Status.NEW.value)),
            priority=Priority(data.get("priority", Priority.MEDIUM.value)),
            created_date=_parse_timestamp(data["createdDate"]),
            updated_date=_parse_timestamp(data["updatedDate"]),
            comments=tuple(
                Comment(
                    author_id=str(c["authorId"]),
                    text=c["text"],
                    timestamp=_parse_timestamp(c["timestamp"]),
                )
                for c in data.get("comments") or []
            ),
        )


def _format_timestamp(value: datetime) -> str:
    """ISO-8601 local date-time, no offset."""
    return value.replace(tzinfo=None).isoformat()


def _parse_timestamp(value: str) -> datetime:
    # Java writes up to nanoseconds; datetime keeps microseconds
    value = _EXTRA_FRACTION_DIGITS.sub(r"\1", value)
    return datetime.fromisoformat(value).replace(tzinfo=None)
