import logging

from bug_tracker.application.services.bug_workflow_engine import BugWorkflowEngine
from bug_tracker.application.services.directory_service import DirectoryService
from bug_tracker.domain.bug_workflow import can_close
from bug_tracker.domain.tracker import Role

logger = logging.getLogger(__name__)


class CloseBugUseCase:
    """Use Case in which a tester closes a resolved bug after confirmation"""

    def __init__(self, engine: BugWorkflowEngine, directory: DirectoryService):
        self.engine = engine
        self.directory = directory

    def execute(self, username: str, bug_id: str, confirm: bool = False) -> dict:
        """
        Closes a RESOLVED bug.

        Args:
            username: Acting user (must be a tester)
            bug_id: Bug id
            confirm: Must be True; otherwise the close is cancelled

        Returns:
            {"success": True, "bug_id", "new_status"} or {"success": False, "reason": ...}
        """
        logger.info("CloseBugUseCase: username=%s, bug_id=%s, confirm=%s", username, bug_id, confirm)

        actor = self.directory.user_by_username(username)
        if actor is None:
            return {"success": False, "reason": f"Unknown user: {username}"}
        if actor.role != Role.TESTER:
            return {"success": False, "reason": "Access denied. Only Testers can close bugs."}

        bug = self.engine.by_id(bug_id)
        if bug is None:
            return {"success": False, "reason": f"Bug not found: {bug_id}"}
        if not can_close(bug):
            return {
                "success": False,
                "reason": "This bug cannot be closed. It must be in RESOLVED status first.",
            }
        if not confirm:
            return {"success": False, "reason": "Bug closure cancelled."}

        if not self.engine.close_as(actor.id, bug_id, confirmed=True):
            return {"success": False, "reason": "Failed to close bug."}

        return {"success": True, "bug_id": bug_id, "new_status": self.engine.by_id(bug_id).status.value}
