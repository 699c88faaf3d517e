import logging

from bug_tracker.application.services.directory_service import DirectoryService

logger = logging.getLogger(__name__)


class IdentifyUserUseCase:
    """Use Case that resolves a username to the acting user"""

    def __init__(self, directory: DirectoryService):
        self.directory = directory

    def execute(self, username: str) -> dict | None:
        logger.info("IdentifyUserUseCase: username=%s", username)
        user = self.directory.user_by_username(username)
        if user is None:
            logger.info("Unknown username: %s", username)
            return None
        return {"id": user.id, "username": user.username, "role": user.role.value}
