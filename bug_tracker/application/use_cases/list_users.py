import logging

from bug_tracker.application.services.directory_service import DirectoryService
from bug_tracker.domain.tracker import Role

logger = logging.getLogger(__name__)


class ListUsersUseCase:
    """Use Case that lists users, optionally filtered by role"""

    def __init__(self, directory: DirectoryService):
        self.directory = directory

    def execute(self, role: str | None = None) -> list[dict]:
        """
        Args:
            role: PROJECT_MANAGER / DEVELOPER / TESTER. None lists everyone

        Raises:
            ValueError: unknown role name
        """
        logger.info("ListUsersUseCase: role=%s", role)
        if role:
            users = self.directory.users_by_role(Role(role.strip().upper()))
        else:
            users = self.directory.all_users()
        return [{"id": u.id, "username": u.username, "role": u.role.value} for u in users]
