import logging

from bug_tracker.application.services.bug_workflow_engine import BugWorkflowEngine
from bug_tracker.application.services.directory_service import DirectoryService
from bug_tracker.domain.tracker import Bug

logger = logging.getLogger(__name__)


def bug_to_dict(bug: Bug, directory: DirectoryService, with_comments: bool = False) -> dict:
    """Converts a bug into a response dict, resolving user ids to usernames."""
    reporter = directory.user_by_id(bug.reporter_id)
    assignee = directory.user_by_id(bug.assignee_id)
    project = directory.project_by_id(bug.project_id)
    result = {
        "id": bug.id,
        "title": bug.title,
        "description": bug.description,
        "project_id": bug.project_id,
        "project_name": project.name if project else "Unknown",
        "status": bug.status.value,
        "priority": bug.priority.value,
        "reporter": reporter.username if reporter else "Unknown",
        "assignee": (assignee.username if assignee else "Unknown") if bug.assignee_id else None,
        "created_date": bug.created_date,
        "updated_date": bug.updated_date,
    }
    if with_comments:
        result["comments"] = [
            {
                "author": _username(directory, c.author_id),
                "text": c.text,
                "timestamp": c.timestamp,
            }
            for c in bug.comments
        ]
    return result


def _username(directory: DirectoryService, user_id: str) -> str:
    user = directory.user_by_id(user_id)
    return user.username if user else "Unknown"


class GetBugByIdUseCase:
    """Use Case that looks up a single bug by id"""

    def __init__(self, engine: BugWorkflowEngine, directory: DirectoryService):
        self.engine = engine
        self.directory = directory

    def execute(self, bug_id: str, project_id: str | None = None) -> dict | None:
        """
        Looks up a bug by id.

        Args:
            bug_id: Bug id (e.g. "3")
            project_id: when given, only a bug of that project matches

        Returns:
            bug dict including comments, or None when not found
        """
        logger.info("GetBugByIdUseCase: bug_id=%s, project_id=%s", bug_id, project_id)

        bug = self.engine.by_id(bug_id)
        if bug is None or (project_id is not None and bug.project_id != project_id):
            logger.info("Bug not found: %s", bug_id)
            return None

        return bug_to_dict(bug, self.directory, with_comments=True)
