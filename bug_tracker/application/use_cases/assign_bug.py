import logging

from bug_tracker.application.services.bug_workflow_engine import BugWorkflowEngine
from bug_tracker.application.services.directory_service import DirectoryService
from bug_tracker.domain.bug_workflow import can_assign
from bug_tracker.domain.tracker import Role

logger = logging.getLogger(__name__)


class AssignBugUseCase:
    """Use Case in which a project manager assigns a bug to a developer"""

    def __init__(self, engine: BugWorkflowEngine, directory: DirectoryService):
        self.engine = engine
        self.directory = directory

    def execute(self, username: str, bug_id: str, developer: str) -> dict:
        """
        Args:
            username: Acting user (must be a project manager)
            bug_id: Bug id
            developer: Username of the developer to assign

        Returns:
            {"success": True, "bug_id", "assignee", "status"} or {"success": False, "reason": ...}
        """
        logger.info("AssignBugUseCase: username=%s, bug_id=%s, developer=%s", username, bug_id, developer)

        actor = self.directory.user_by_username(username)
        if actor is None:
            return {"success": False, "reason": f"Unknown user: {username}"}
        if actor.role != Role.PROJECT_MANAGER:
            return {"success": False, "reason": "Access denied. Only Project Managers can assign bugs."}

        bug = self.engine.by_id(bug_id)
        if bug is None:
            return {"success": False, "reason": f"Bug not found: {bug_id}"}
        if not can_assign(bug):
            return {"success": False, "reason": f"This bug cannot be assigned (status: {bug.status.value})"}

        assignee = self.directory.user_by_username(developer)
        if assignee is None or assignee.role != Role.DEVELOPER:
            return {"success": False, "reason": f"Not a developer: {developer}"}

        if not self.engine.assign_as(actor.id, bug_id, assignee.id):
            return {"success": False, "reason": "Failed to assign bug."}

        updated = self.engine.by_id(bug_id)
        return {
            "success": True,
            "bug_id": bug_id,
            "assignee": assignee.username,
            "status": updated.status.value,
        }
