import pytest


def test_identify_user(container):
    assert container.identify_user_use_case.execute("Tester1") == {
        "id": "4", "username": "tester1", "role": "TESTER",
    }
    assert container.identify_user_use_case.execute("ghost") is None


def test_list_users_by_role(container):
    developers = container.list_users_use_case.execute(role="developer")
    assert [u["username"] for u in developers] == ["dev1", "dev2"]
    assert len(container.list_users_use_case.execute()) == 5
    with pytest.raises(ValueError):
        container.list_users_use_case.execute(role="admin")


def test_create_project_reasons(container):
    create = container.create_project_use_case.execute

    assert create("manager1", "Alpha", "first")["success"]
    assert create("manager1", "alpha", "dup") == {
        "success": False, "reason": "Invalid or duplicate project name.",
    }
    assert "Only Project Managers" in create("dev1", "Beta")["reason"]
    assert "Unknown user" in create("nobody", "Beta")["reason"]


def test_report_assign_transition_close(container):
    reported = container.report_bug_use_case.execute(
        "tester1", "2", "Push not received", "No notifications on Android", "high",
    )
    assert reported["success"]
    bug_id = reported["bug"]["id"]
    assert reported["bug"]["priority"] == "HIGH"
    assert reported["bug"]["assignee"] is None

    assigned = container.assign_bug_use_case.execute("manager1", bug_id, "dev2")
    assert assigned == {"success": True, "bug_id": bug_id, "assignee": "dev2", "status": "NEW"}

    skipped = container.transition_bug_use_case.execute("dev2", bug_id, "RESOLVED")
    assert not skipped["success"]
    assert skipped["available"] == ["IN_PROGRESS"]

    for target in ("in_progress", "RESOLVED"):
        assert container.transition_bug_use_case.execute("dev2", bug_id, target)["success"]

    cancelled = container.close_bug_use_case.execute("tester2", bug_id, confirm=False)
    assert cancelled == {"success": False, "reason": "Bug closure cancelled."}

    closed = container.close_bug_use_case.execute("tester2", bug_id, confirm=True)
    assert closed == {"success": True, "bug_id": bug_id, "new_status": "CLOSED"}

    detail = container.get_bug_by_id_use_case.execute(bug_id)
    assert detail["status"] == "CLOSED"
    assert detail["reporter"] == "tester1"
    assert detail["assignee"] == "dev2"


def test_report_bug_defaults_unknown_priority_to_medium(container):
    result = container.report_bug_use_case.execute("tester2", "1", "t", "d", "urgent")
    assert result["bug"]["priority"] == "MEDIUM"


def test_role_and_state_failures(container):
    assert "Only Project Managers" in container.assign_bug_use_case.execute("dev1", "1", "dev1")["reason"]
    assert "not a developer" in container.assign_bug_use_case.execute("manager1", "1", "tester1")["reason"].lower()
    assert "Only Testers" in container.report_bug_use_case.execute("dev1", "1", "t", "d")["reason"]
    assert "must be in RESOLVED" in container.close_bug_use_case.execute("tester1", "1", True)["reason"]

    # tester2 is not the assignee of bug 2
    denied = container.transition_bug_use_case.execute("tester2", "2", "RESOLVED")
    assert not denied["success"]
    not_mine = container.transition_bug_use_case.execute("dev2", "2", "RESOLVED")
    assert "assigned to you" in not_mine["reason"]


def test_comment_on_bug(container):
    result = container.comment_on_bug_use_case.execute("dev1", "1", "Looking into it")
    assert result == {"success": True, "bug_id": "1", "comment_count": 2}
    assert container.comment_on_bug_use_case.execute("dev1", "1", "")["reason"] == "Comment cannot be empty."
    assert "Bug not found" in container.comment_on_bug_use_case.execute("dev1", "77", "hi")["reason"]

    comments = container.get_bug_by_id_use_case.execute("1")["comments"]
    assert [c["author"] for c in comments] == ["tester1", "dev1"]


def test_get_bugs_scopes(container):
    get_bugs = container.get_bugs_use_case.execute

    assert [b["id"] for b in get_bugs(scope="project", project_id="1")] == ["1", "2"]
    assert [b["id"] for b in get_bugs(scope="assigned", username="dev1")] == ["2"]
    assert [b["id"] for b in get_bugs(scope="reported", username="tester1")] == ["1", "3"]
    assert len(get_bugs(scope="all")) == 3
    assert get_bugs(scope="assigned", username="ghost") == []
    with pytest.raises(ValueError):
        get_bugs(scope="project")
    with pytest.raises(ValueError):
        get_bugs(scope="everything")


def test_get_bug_restricted_to_project(container):
    assert container.get_bug_by_id_use_case.execute("3", project_id="1") is None
    assert container.get_bug_by_id_use_case.execute("3", project_id="3")["title"] == "API timeout errors"
