import logging

from bug_tracker.application.services.bug_workflow_engine import BugWorkflowEngine
from bug_tracker.application.services.directory_service import DirectoryService
from bug_tracker.application.use_cases.get_bug_by_id import bug_to_dict

logger = logging.getLogger(__name__)

SCOPES = ("project", "assigned", "reported", "all")


class GetBugsUseCase:
    """Use Case that lists bugs of a project, or the ones assigned to / reported by a user"""

    def __init__(self, engine: BugWorkflowEngine, directory: DirectoryService):
        self.engine = engine
        self.directory = directory

    def execute(self, scope: str = "project", project_id: str | None = None, username: str | None = None) -> list[dict]:
        """
        Lists bugs.

        Args:
            scope: "project" (needs project_id), "assigned" / "reported" (needs username), "all"
            project_id: Project id for the "project" scope
            username: User for the "assigned" / "reported" scopes

        Returns:
            Bug dicts in creation order. Unknown project or user yields an empty list

        Raises:
            ValueError: unknown scope or missing argument for the scope
        """
        logger.info("GetBugsUseCase: scope=%s, project_id=%s, username=%s", scope, project_id, username)

        if scope not in SCOPES:
            raise ValueError(f"Unknown scope: '{scope}'. Available: {list(SCOPES)}")

        if scope == "project":
            if not project_id:
                raise ValueError("project_id is required for scope 'project'")
            bugs = self.engine.by_project(project_id)
        elif scope == "all":
            bugs = self.engine.all_bugs()
        else:
            if not username:
                raise ValueError(f"username is required for scope '{scope}'")
            user = self.directory.user_by_username(username)
            if user is None:
                logger.info("Unknown username: %s", username)
                return []
            bugs = self.engine.assigned_to(user.id) if scope == "assigned" else self.engine.reported_by(user.id)

        logger.info("✅ %d bugs found", len(bugs))
        return [bug_to_dict(bug, self.directory) for bug in bugs]
