from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class Role(Enum):
    PROJECT_MANAGER = "PROJECT_MANAGER"
    DEVELOPER = "DEVELOPER"
    TESTER = "TESTER"


class Status(Enum):
    NEW = "NEW"
    IN_PROGRESS = "IN_PROGRESS"
    RESOLVED = "RESOLVED"
    CLOSED = "CLOSED"


class Priority(Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


# Entities compare and hash on id only; the remaining fields use compare=False.

@dataclass(frozen=True)
class User:
    """Tracker user"""
    id: str
    username: str = field(compare=False)
    role: Role = field(compare=False)


@dataclass(frozen=True)
class Project:
    """Project that bugs are filed against"""
    id: str
    name: str = field(compare=False)
    description: str = field(default="", compare=False)


@dataclass(frozen=True)
class Comment:
    """Comment on a bug (never edited or removed)"""
    author_id: str
    text: str
    timestamp: datetime


@dataclass(frozen=True)
class Bug:
    """Bug entity"""
    id: str
    title: str = field(compare=False)
    description: str = field(compare=False)
    project_id: str = field(compare=False)
    reporter_id: str = field(compare=False)
    priority: Priority = field(compare=False)
    created_date: datetime = field(compare=False)
    updated_date: datetime = field(compare=False)
    status: Status = field(default=Status.NEW, compare=False)
    assignee_id: str | None = field(default=None, compare=False)
    comments: tuple[Comment, ...] = field(default=(), compare=False)


@dataclass(frozen=True)
class Snapshot:
    """Full users / projects / bugs state plus id sequences"""
    users: tuple[User, ...] = ()
    projects: tuple[Project, ...] = ()
    bugs: tuple[Bug, ...] = ()
    # last id handed out per entity kind
    sequences: dict[str, int] = field(default_factory=dict)


def max_numeric_id(entities) -> int:
    """Returns the largest numeric id, or 0 when there is none."""
    numbers = [int(e.id) for e in entities if str(e.id).isdigit()]
    return max(numbers, default=0)
