import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime

from bug_tracker.application.services.directory_service import DirectoryService
from bug_tracker.application.services.tracker_state import BUG_SEQUENCE, TrackerState
from bug_tracker.domain.bug_workflow import (
    can_assign,
    may_assign,
    may_close,
    may_comment,
    may_report_bug,
    may_transition,
    valid_transitions_for_developer,
)
from bug_tracker.domain.tracker import Bug, Comment, Priority, Status

logger = logging.getLogger(__name__)


class BugWorkflowEngine:
    """
    Owns bug creation, assignment, status transitions and comments.

    Two layers of operations:
    - ``create_bug`` / ``assign`` / ``update_status`` / ``add_comment`` act on
      ids only; ``update_status`` applies whatever status it is given.
    - ``report_bug`` / ``assign_as`` / ``transition_as`` / ``close_as`` /
      ``comment_as`` resolve the acting user and consult the guard first.

    Expected failures (unknown id, permission, invalid transition) come back
    as False/None. Each successful mutation commits the full snapshot before
    returning.
    """

    def __init__(
        self,
        state: TrackerState,
        directory: DirectoryService,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._state = state
        self._directory = directory
        self._clock = clock

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def all_bugs(self) -> tuple[Bug, ...]:
        return self._state.bugs

    def by_id(self, bug_id: str | None) -> Bug | None:
        if bug_id is None:
            return None
        return next((b for b in self._state.bugs if b.id == bug_id), None)

    def by_project(self, project_id: str) -> tuple[Bug, ...]:
        return tuple(b for b in self._state.bugs if b.project_id == project_id)

    def assigned_to(self, developer_id: str) -> tuple[Bug, ...]:
        return tuple(b for b in self._state.bugs if b.assignee_id == developer_id)

    def reported_by(self, reporter_id: str) -> tuple[Bug, ...]:
        return tuple(b for b in self._state.bugs if b.reporter_id == reporter_id)

    # ------------------------------------------------------------------
    # Id-level mutations
    # ------------------------------------------------------------------

    def create_bug(
        self,
        title: str,
        description: str,
        project_id: str,
        reporter_id: str,
        priority: Priority,
    ) -> Bug:
        """Creates a NEW bug. Project and reporter ids are not checked here."""
        now = self._clock()
        bug = Bug(
            id=self._state.next_id(BUG_SEQUENCE),
            title=title,
            description=description,
            project_id=project_id,
            reporter_id=reporter_id,
            priority=priority,
            created_date=now,
            updated_date=now,
        )
        self._state.add_bug(bug)
        self._state.commit()
        logger.info("✅ Bug created: #%s [%s] %s", bug.id, priority.value, title)
        return bug

    def assign(self, bug_id: str, developer_id: str) -> bool:
        bug = self.by_id(bug_id)
        if bug is None:
            logger.info("Assign skipped, bug not found: %s", bug_id)
            return False
        if not can_assign(bug):
            logger.info("Assign rejected: bug #%s is %s", bug_id, bug.status.value)
            return False

        self._store(replace(bug, assignee_id=developer_id, updated_date=self._touch(bug)))
        logger.info("✅ Bug #%s assigned to user %s", bug_id, developer_id)
        return True

    def update_status(self, bug_id: str, new_status: Status) -> bool:
        """Sets the status as given; permission checks belong to the caller."""
        bug = self.by_id(bug_id)
        if bug is None:
            logger.info("Status update skipped, bug not found: %s", bug_id)
            return False

        self._store(replace(bug, status=new_status, updated_date=self._touch(bug)))
        logger.info("✅ Bug #%s status: %s → %s", bug_id, bug.status.value, new_status.value)
        return True

    def add_comment(self, bug_id: str, author_id: str, text: str) -> bool:
        bug = self.by_id(bug_id)
        if bug is None:
            logger.info("Comment skipped, bug not found: %s", bug_id)
            return False

        now = self._touch(bug)
        comment = Comment(author_id=author_id, text=text, timestamp=now)
        self._store(replace(bug, comments=bug.comments + (comment,), updated_date=now))
        logger.info("✅ Comment added to bug #%s by user %s", bug_id, author_id)
        return True

    # ------------------------------------------------------------------
    # Actor-level operations
    # ------------------------------------------------------------------

    def report_bug(
        self,
        actor_id: str,
        project_id: str,
        title: str,
        description: str,
        priority: Priority = Priority.MEDIUM,
    ) -> Bug | None:
        """Tester files a bug against an existing project."""
        actor = self._directory.user_by_id(actor_id)
        if not may_report_bug(actor):
            logger.info("Bug report denied for user %s", actor_id)
            return None
        if not self._directory.project_exists(project_id):
            logger.info("Bug report rejected, unknown project: %s", project_id)
            return None
        title = (title or "").strip()
        description = (description or "").strip()
        if not title or not description:
            logger.info("Bug report rejected, empty title or description")
            return None
        return self.create_bug(title, description, project_id, actor.id, priority)

    def assign_as(self, actor_id: str, bug_id: str, developer_id: str) -> bool:
        bug = self.by_id(bug_id)
        if bug is None:
            return False
        actor = self._directory.user_by_id(actor_id)
        developer = self._directory.user_by_id(developer_id)
        if not may_assign(actor, bug, developer):
            logger.info(
                "Assign denied: actor=%s, bug=#%s (%s), developer=%s",
                actor_id, bug_id, bug.status.value, developer_id,
            )
            return False
        return self.assign(bug_id, developer_id)

    def available_transitions(self, actor_id: str, bug_id: str) -> tuple[Status, ...]:
        """Statuses the actor may move the bug to right now."""
        bug = self.by_id(bug_id)
        if bug is None:
            return ()
        actor = self._directory.user_by_id(actor_id)
        return tuple(
            s for s in valid_transitions_for_developer(bug.status)
            if may_transition(actor, bug, s)
        )

    def transition_as(self, actor_id: str, bug_id: str, new_status: Status) -> bool:
        bug = self.by_id(bug_id)
        if bug is None:
            return False
        actor = self._directory.user_by_id(actor_id)
        if not may_transition(actor, bug, new_status):
            logger.info(
                "Transition denied: actor=%s, bug=#%s, %s → %s",
                actor_id, bug_id, bug.status.value, new_status.value,
            )
            return False
        return self.update_status(bug_id, new_status)

    def close_as(self, actor_id: str, bug_id: str, confirmed: bool) -> bool:
        """Tester closes a RESOLVED bug. Nothing changes unless ``confirmed``."""
        bug = self.by_id(bug_id)
        if bug is None:
            return False
        actor = self._directory.user_by_id(actor_id)
        if not may_close(actor, bug):
            logger.info("Close denied: actor=%s, bug=#%s (%s)", actor_id, bug_id, bug.status.value)
            return False
        if not confirmed:
            logger.info("Close of bug #%s cancelled", bug_id)
            return False
        return self.update_status(bug_id, Status.CLOSED)

    def comment_as(self, actor_id: str, bug_id: str, text: str) -> bool:
        actor = self._directory.user_by_id(actor_id)
        if not may_comment(actor, text):
            logger.info("Comment rejected: actor=%s, bug=#%s", actor_id, bug_id)
            return False
        return self.add_comment(bug_id, actor.id, text.strip())

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _touch(self, bug: Bug) -> datetime:
        # updated_date never moves backwards, even if the clock does
        return max(self._clock(), bug.updated_date)

    def _store(self, bug: Bug) -> None:
        self._state.replace_bug(bug)
        self._state.commit()
