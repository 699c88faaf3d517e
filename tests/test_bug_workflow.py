from datetime import datetime

import pytest

from bug_tracker.domain.bug_workflow import (
    can_assign,
    can_close,
    can_developer_update_status,
    may_assign,
    may_close,
    may_comment,
    may_create_project,
    may_report_bug,
    may_transition,
    valid_transitions_for_developer,
)
from bug_tracker.domain.tracker import Bug, Priority, Role, Status, User

MANAGER = User(id="1", username="manager1", role=Role.PROJECT_MANAGER)
DEV = User(id="2", username="dev1", role=Role.DEVELOPER)
OTHER_DEV = User(id="3", username="dev2", role=Role.DEVELOPER)
TESTER = User(id="4", username="tester1", role=Role.TESTER)


def _bug(status=Status.NEW, assignee_id=None):
    now = datetime(2024, 1, 1, 12, 0)
    return Bug(
        id="7",
        title="Crash on save",
        description="App crashes when saving",
        project_id="1",
        reporter_id=TESTER.id,
        priority=Priority.HIGH,
        created_date=now,
        updated_date=now,
        status=status,
        assignee_id=assignee_id,
    )


@pytest.mark.parametrize(
    "status, expected",
    [
        (Status.NEW, True),
        (Status.IN_PROGRESS, True),
        (Status.RESOLVED, False),
        (Status.CLOSED, False),
    ],
)
def test_can_assign_depends_only_on_status(status, expected):
    assert can_assign(_bug(status)) is expected
    assert can_assign(_bug(status, assignee_id=DEV.id)) is expected


def test_developer_update_requires_assignee_and_open_status():
    assert can_developer_update_status(_bug(Status.NEW, DEV.id), DEV.id)
    assert can_developer_update_status(_bug(Status.IN_PROGRESS, DEV.id), DEV.id)
    assert not can_developer_update_status(_bug(Status.RESOLVED, DEV.id), DEV.id)
    assert not can_developer_update_status(_bug(Status.CLOSED, DEV.id), DEV.id)
    assert not can_developer_update_status(_bug(Status.NEW, DEV.id), OTHER_DEV.id)
    assert not can_developer_update_status(_bug(Status.NEW), DEV.id)


def test_non_assignee_tester_cannot_update_status():
    bug = _bug(Status.IN_PROGRESS, DEV.id)
    assert not can_developer_update_status(bug, "5")


def test_can_close_only_resolved():
    assert can_close(_bug(Status.RESOLVED))
    for status in (Status.NEW, Status.IN_PROGRESS, Status.CLOSED):
        assert not can_close(_bug(status))


def test_developer_transitions_move_forward_one_step():
    assert valid_transitions_for_developer(Status.NEW) == (Status.IN_PROGRESS,)
    assert valid_transitions_for_developer(Status.IN_PROGRESS) == (Status.RESOLVED,)
    assert valid_transitions_for_developer(Status.RESOLVED) == ()
    assert valid_transitions_for_developer(Status.CLOSED) == ()


def test_role_checks():
    assert may_create_project(MANAGER)
    assert not may_create_project(DEV)
    assert not may_create_project(None)
    assert may_report_bug(TESTER)
    assert not may_report_bug(MANAGER)


def test_may_assign_requires_manager_and_developer():
    bug = _bug(Status.NEW)
    assert may_assign(MANAGER, bug, DEV)
    assert not may_assign(TESTER, bug, DEV)
    assert not may_assign(MANAGER, bug, TESTER)
    assert not may_assign(MANAGER, _bug(Status.RESOLVED), DEV)


def test_may_transition_rejects_skips_and_backwards_moves():
    assert may_transition(DEV, _bug(Status.NEW, DEV.id), Status.IN_PROGRESS)
    assert not may_transition(DEV, _bug(Status.NEW, DEV.id), Status.RESOLVED)
    assert not may_transition(DEV, _bug(Status.NEW, DEV.id), Status.CLOSED)
    assert not may_transition(DEV, _bug(Status.IN_PROGRESS, DEV.id), Status.NEW)
    assert not may_transition(OTHER_DEV, _bug(Status.NEW, DEV.id), Status.IN_PROGRESS)
    assert not may_transition(TESTER, _bug(Status.NEW, TESTER.id), Status.IN_PROGRESS)


def test_may_close_and_comment():
    assert may_close(TESTER, _bug(Status.RESOLVED))
    assert not may_close(DEV, _bug(Status.RESOLVED))
    assert may_comment(DEV, "looking into it")
    assert not may_comment(DEV, "   ")
    assert not may_comment(None, "hello")


def test_entities_compare_by_id_only():
    assert _bug(Status.NEW) == _bug(Status.CLOSED, DEV.id)
    assert User(id="2", username="someone", role=Role.TESTER) == DEV
    assert len({_bug(Status.NEW), _bug(Status.RESOLVED)}) == 1
