import logging

from bug_tracker.application.services.directory_service import DirectoryService

logger = logging.getLogger(__name__)


class ListProjectsUseCase:
    """Use Case that lists all projects"""

    def __init__(self, directory: DirectoryService):
        self.directory = directory

    def execute(self) -> list[dict]:
        projects = self.directory.all_projects()
        logger.info("ListProjectsUseCase: %d projects", len(projects))
        return [{"id": p.id, "name": p.name, "description": p.description} for p in projects]
