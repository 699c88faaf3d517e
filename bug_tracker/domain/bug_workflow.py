from bug_tracker.domain.tracker import Bug, Role, Status, User

# Statuses in which a bug may still be (re)assigned
ASSIGNABLE_STATUSES = frozenset({Status.NEW, Status.IN_PROGRESS})

# Developer transitions: each status moves forward by exactly one step
_DEVELOPER_TRANSITIONS: dict[Status, tuple[Status, ...]] = {
    Status.NEW: (Status.IN_PROGRESS,),
    Status.IN_PROGRESS: (Status.RESOLVED,),
    Status.RESOLVED: (),
    Status.CLOSED: (),
}


def can_assign(bug: Bug) -> bool:
    return bug.status in ASSIGNABLE_STATUSES


def can_developer_update_status(bug: Bug, developer_id: str) -> bool:
    """Only the current assignee may move an open bug forward."""
    return (
        bug.assignee_id is not None
        and developer_id == bug.assignee_id
        and bug.status in ASSIGNABLE_STATUSES
    )


def can_close(bug: Bug) -> bool:
    return bug.status == Status.RESOLVED


def valid_transitions_for_developer(status: Status) -> tuple[Status, ...]:
    return _DEVELOPER_TRANSITIONS.get(status, ())


# ── Role-aware checks ──

def _has_role(actor: User | None, role: Role) -> bool:
    return actor is not None and actor.role == role


def may_create_project(actor: User | None) -> bool:
    return _has_role(actor, Role.PROJECT_MANAGER)


def may_report_bug(actor: User | None) -> bool:
    return _has_role(actor, Role.TESTER)


def may_assign(actor: User | None, bug: Bug, developer: User | None) -> bool:
    """Project manager assigns an open bug to a developer."""
    return (
        _has_role(actor, Role.PROJECT_MANAGER)
        and _has_role(developer, Role.DEVELOPER)
        and can_assign(bug)
    )


def may_transition(actor: User | None, bug: Bug, new_status: Status) -> bool:
    """
    Assigned developer moves the bug one step along the workflow.

    NEW -> IN_PROGRESS -> RESOLVED only; anything else (backwards, skipping,
    or CLOSED) is rejected.
    """
    if not _has_role(actor, Role.DEVELOPER):
        return False
    if not can_developer_update_status(bug, actor.id):
        return False
    return new_status in valid_transitions_for_developer(bug.status)


def may_close(actor: User | None, bug: Bug) -> bool:
    return _has_role(actor, Role.TESTER) and can_close(bug)


def may_comment(actor: User | None, text: str | None) -> bool:
    return actor is not None and bool(text and text.strip())
