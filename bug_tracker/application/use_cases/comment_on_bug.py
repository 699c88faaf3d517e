import logging

from bug_tracker.application.services.bug_workflow_engine import BugWorkflowEngine
from bug_tracker.application.services.directory_service import DirectoryService

logger = logging.getLogger(__name__)


class CommentOnBugUseCase:
    """Use Case that appends a comment to a bug"""

    def __init__(self, engine: BugWorkflowEngine, directory: DirectoryService):
        self.engine = engine
        self.directory = directory

    def execute(self, username: str, bug_id: str, text: str) -> dict:
        logger.info("CommentOnBugUseCase: username=%s, bug_id=%s", username, bug_id)

        actor = self.directory.user_by_username(username)
        if actor is None:
            return {"success": False, "reason": f"Unknown user: {username}"}
        if not (text or "").strip():
            return {"success": False, "reason": "Comment cannot be empty."}
        if self.engine.by_id(bug_id) is None:
            return {"success": False, "reason": f"Bug not found: {bug_id}"}

        if not self.engine.comment_as(actor.id, bug_id, text):
            return {"success": False, "reason": "Failed to add comment."}

        bug = self.engine.by_id(bug_id)
        return {"success": True, "bug_id": bug_id, "comment_count": len(bug.comments)}
