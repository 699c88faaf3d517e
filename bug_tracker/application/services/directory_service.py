import logging

from bug_tracker.application.services.tracker_state import USER_SEQUENCE, TrackerState
from bug_tracker.domain.tracker import Project, Role, User

logger = logging.getLogger(__name__)


class DirectoryService:
    """Lookups of users and projects over the in-memory snapshot (linear scan)"""

    def __init__(self, state: TrackerState):
        self._state = state

    def all_users(self) -> tuple[User, ...]:
        return self._state.users

    def user_by_id(self, user_id: str | None) -> User | None:
        if user_id is None:
            return None
        return next((u for u in self._state.users if u.id == user_id), None)

    def user_by_username(self, username: str | None) -> User | None:
        """Case-insensitive exact match on username."""
        if not username:
            return None
        wanted = username.strip().casefold()
        return next((u for u in self._state.users if u.username.casefold() == wanted), None)

    def users_by_role(self, role: Role) -> tuple[User, ...]:
        return tuple(u for u in self._state.users if u.role == role)

    def all_projects(self) -> tuple[Project, ...]:
        return self._state.projects

    def project_by_id(self, project_id: str | None) -> Project | None:
        if project_id is None:
            return None
        return next((p for p in self._state.projects if p.id == project_id), None)

    def project_exists(self, project_id: str | None) -> bool:
        return self.project_by_id(project_id) is not None

    def create_user(self, username: str, role: Role) -> User | None:
        """
        Registers a new user.

        Returns:
            The created user, or None when the username is blank or already taken
        """
        username = (username or "").strip()
        if not username or self.user_by_username(username) is not None:
            logger.info("User not created, invalid or duplicate username: %r", username)
            return None

        user = User(id=self._state.next_id(USER_SEQUENCE), username=username, role=role)
        self._state.add_user(user)
        self._state.commit()
        logger.info("✅ User created: id=%s, username=%s, role=%s", user.id, user.username, role.value)
        return user
