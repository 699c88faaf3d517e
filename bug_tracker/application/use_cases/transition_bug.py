import logging

from bug_tracker.application.services.bug_workflow_engine import BugWorkflowEngine
from bug_tracker.application.services.directory_service import DirectoryService
from bug_tracker.domain.bug_workflow import can_developer_update_status
from bug_tracker.domain.tracker import Role, Status

logger = logging.getLogger(__name__)


class TransitionBugUseCase:
    """Use Case in which the assigned developer moves a bug to its next status"""

    def __init__(self, engine: BugWorkflowEngine, directory: DirectoryService):
        self.engine = engine
        self.directory = directory

    def execute(self, username: str, bug_id: str, target_status: str) -> dict:
        """
        Moves the bug to ``target_status``.

        Args:
            username: Acting user (must be the assigned developer)
            bug_id: Bug id
            target_status: IN_PROGRESS (from NEW) or RESOLVED (from IN_PROGRESS)

        Returns:
            {"success": True, "bug_id", "previous_status", "new_status"}
            or {"success": False, "reason": ..., "available": [...]}
        """
        logger.info(
            "TransitionBugUseCase: username=%s, bug_id=%s, target_status=%s",
            username, bug_id, target_status,
        )

        actor = self.directory.user_by_username(username)
        if actor is None:
            return {"success": False, "reason": f"Unknown user: {username}", "available": []}
        if actor.role != Role.DEVELOPER:
            return {
                "success": False,
                "reason": "Access denied. Only Developers can update bug status.",
                "available": [],
            }

        bug = self.engine.by_id(bug_id)
        if bug is None:
            return {"success": False, "reason": f"Bug not found: {bug_id}", "available": []}
        if not can_developer_update_status(bug, actor.id):
            return {
                "success": False,
                "reason": "You cannot update this bug's status. "
                          "Bug must be assigned to you and in NEW or IN_PROGRESS state.",
                "available": [],
            }

        available = [s.value for s in self.engine.available_transitions(actor.id, bug_id)]
        try:
            new_status = Status((target_status or "").strip().upper())
        except ValueError:
            return {"success": False, "reason": f"Unknown status: {target_status}", "available": available}

        if not self.engine.transition_as(actor.id, bug_id, new_status):
            return {
                "success": False,
                "reason": f"Invalid transition: {bug.status.value} → {new_status.value}",
                "available": available,
            }

        logger.info("✅ Bug #%s: %s → %s", bug_id, bug.status.value, new_status.value)
        return {
            "success": True,
            "bug_id": bug_id,
            "previous_status": bug.status.value,
            "new_status": new_status.value,
        }
