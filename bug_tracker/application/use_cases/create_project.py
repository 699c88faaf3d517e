import logging

from bug_tracker.application.services.directory_service import DirectoryService
from bug_tracker.application.services.project_service import ProjectService
from bug_tracker.domain.bug_workflow import may_create_project

logger = logging.getLogger(__name__)


class CreateProjectUseCase:
    """Use Case in which a project manager creates a project"""

    def __init__(self, project_service: ProjectService, directory: DirectoryService):
        self.project_service = project_service
        self.directory = directory

    def execute(self, username: str, name: str, description: str = "") -> dict:
        """
        Creates a project.

        Args:
            username: Acting user (must be a project manager)
            name: Project name, unique ignoring case
            description: Free text

        Returns:
            {"success": True, "project": {...}} or {"success": False, "reason": ...}
        """
        logger.info("CreateProjectUseCase: username=%s, name=%s", username, name)

        actor = self.directory.user_by_username(username)
        if actor is None:
            return {"success": False, "reason": f"Unknown user: {username}"}
        if not may_create_project(actor):
            return {"success": False, "reason": "Access denied. Only Project Managers can create projects."}
        if not self.project_service.is_valid_project_name(name):
            return {"success": False, "reason": "Invalid or duplicate project name."}

        project = self.project_service.create_project_as(actor.id, name, description)
        if project is None:
            return {"success": False, "reason": "Project could not be created."}

        return {
            "success": True,
            "project": {"id": project.id, "name": project.name, "description": project.description},
        }
