import logging

from bug_tracker.application.services.directory_service import DirectoryService
from bug_tracker.application.services.tracker_state import PROJECT_SEQUENCE, TrackerState
from bug_tracker.domain.bug_workflow import may_create_project
from bug_tracker.domain.tracker import Project

logger = logging.getLogger(__name__)


class ProjectService:
    """Project creation and name validation"""

    def __init__(self, state: TrackerState, directory: DirectoryService):
        self._state = state
        self._directory = directory

    def is_valid_project_name(self, name: str | None) -> bool:
        """Name must be non-blank and unique ignoring case."""
        if not name or not name.strip():
            return False
        wanted = name.strip().casefold()
        return all(p.name.casefold() != wanted for p in self._state.projects)

    def create_project(self, name: str, description: str = "") -> Project:
        """Creates a project without validation. Callers check the name first."""
        project = Project(
            id=self._state.next_id(PROJECT_SEQUENCE),
            name=name.strip(),
            description=(description or "").strip(),
        )
        self._state.add_project(project)
        self._state.commit()
        logger.info("✅ Project created: id=%s, name=%s", project.id, project.name)
        return project

    def create_project_as(self, actor_id: str, name: str, description: str = "") -> Project | None:
        """
        Creates a project on behalf of ``actor_id``.

        Returns:
            The created project, or None if the actor is not a project manager
            or the name is blank/duplicate
        """
        actor = self._directory.user_by_id(actor_id)
        if not may_create_project(actor):
            logger.info("Project creation denied for user %s", actor_id)
            return None
        if not self.is_valid_project_name(name):
            logger.info("Project creation rejected, invalid or duplicate name: %r", name)
            return None
        return self.create_project(name, description)
