import logging

from bug_tracker.application.services.bug_workflow_engine import BugWorkflowEngine
from bug_tracker.application.services.directory_service import DirectoryService
from bug_tracker.application.use_cases.get_bug_by_id import bug_to_dict
from bug_tracker.domain.bug_workflow import may_report_bug
from bug_tracker.domain.tracker import Priority

logger = logging.getLogger(__name__)


class ReportBugUseCase:
    """Use Case in which a tester reports a new bug"""

    def __init__(self, engine: BugWorkflowEngine, directory: DirectoryService):
        self.engine = engine
        self.directory = directory

    def execute(
        self,
        username: str,
        project_id: str,
        title: str,
        description: str,
        priority: str | None = None,
    ) -> dict:
        """
        Reports a bug in NEW status.

        Args:
            username: Acting user (must be a tester)
            project_id: Existing project id
            title: Bug title (non-empty)
            description: Bug description (non-empty)
            priority: LOW / MEDIUM / HIGH. Missing or unknown falls back to MEDIUM

        Returns:
            {"success": True, "bug": {...}} or {"success": False, "reason": ...}
        """
        logger.info("ReportBugUseCase: username=%s, project_id=%s", username, project_id)

        actor = self.directory.user_by_username(username)
        if actor is None:
            return {"success": False, "reason": f"Unknown user: {username}"}
        if not may_report_bug(actor):
            return {"success": False, "reason": "Access denied. Only Testers can report bugs."}
        if not self.directory.project_exists(project_id):
            return {"success": False, "reason": f"Project not found: {project_id}"}
        if not (title or "").strip():
            return {"success": False, "reason": "Bug title cannot be empty."}
        if not (description or "").strip():
            return {"success": False, "reason": "Bug description cannot be empty."}

        bug = self.engine.report_bug(
            actor.id, project_id, title, description, _parse_priority(priority),
        )
        if bug is None:
            return {"success": False, "reason": "Bug could not be reported."}

        return {"success": True, "bug": bug_to_dict(bug, self.directory)}


def _parse_priority(value: str | None) -> Priority:
    try:
        return Priority((value or "").strip().upper())
    except ValueError:
        logger.info("Invalid priority %r, defaulting to MEDIUM", value)
        return Priority.MEDIUM
