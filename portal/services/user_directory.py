"""
User Directory

In-memory user store backing login. Persistence is an external
collaborator; this keeps just enough to authenticate and to hand the
normalizer a realistic user record.

Passwords are stored as werkzeug password hashes.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from werkzeug.security import check_password_hash, generate_password_hash

from portal.constants.roles import Role
from portal.core.errors import ConflictError, ValidationError

logger = logging.getLogger(__name__)

RoleIndicator = Union[int, str]


@dataclass
class UserRecord:
    id: int
    username: str
    email: str
    name: str
    role_id: RoleIndicator
    password_hash: str = field(repr=False)

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)

    def to_public_dict(self) -> Dict[str, Any]:
        """User fields safe to return to clients and store in the browser."""
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "name": self.name,
            "roleId": self.role_id,
        }


class UserDirectory:
    """Thread-safe in-memory user store keyed by lowercase username."""

    def __init__(self):
        self._lock = threading.Lock()
        self._users: Dict[str, UserRecord] = {}
        self._next_id = 1

    def add_user(
        self,
        username: str,
        password: str,
        role_id: RoleIndicator,
        email: Optional[str] = None,
        name: Optional[str] = None
    ) -> UserRecord:
        """
        Register a user.

        role_id is stored as given (canonical number, numeric string or
        legacy token) - the normalizer deals with the shape at login.

        Raises:
            ValidationError: Empty username or password
            ConflictError: Username already taken
        """
        if not username or not username.strip():
            raise ValidationError("Username is required", details={"field": "username"})
        if not password:
            raise ValidationError("Password is required", details={"field": "password"})

        key = username.strip().lower()
        with self._lock:
            if key in self._users:
                raise ConflictError(f"User '{username}' already exists")

            user = UserRecord(
                id=self._next_id,
                username=username.strip(),
                email=email or f"{key}@example.com",
                name=name or username.strip(),
                role_id=role_id,
                password_hash=generate_password_hash(password),
            )
            self._users[key] = user
            self._next_id += 1

        logger.info(f"Added user {user.username} (id={user.id})")
        return user

    def get_by_username(self, username: str) -> Optional[UserRecord]:
        if not username:
            return None
        with self._lock:
            return self._users.get(username.strip().lower())

    def get_by_id(self, user_id: Any) -> Optional[UserRecord]:
        try:
            wanted = int(user_id)
        except (TypeError, ValueError):
            return None
        with self._lock:
            for user in self._users.values():
                if user.id == wanted:
                    return user
        return None

    def authenticate(self, username: str, password: str) -> Optional[UserRecord]:
        """Return the user if the credentials match, else None."""
        user = self.get_by_username(username)
        if user is None or not user.check_password(password or ""):
            return None
        return user

    def list_users(self) -> List[UserRecord]:
        with self._lock:
            return sorted(self._users.values(), key=lambda u: u.id)

    def clear(self) -> None:
        with self._lock:
            self._users.clear()
            self._next_id = 1


DEMO_USERS = (
    ("admin", Role.ADMIN, "admin@aditeke.com", "Admin"),
    ("manager", Role.MANAGER, "manager@aditeke.com", "Manager"),
    ("client", Role.CLIENT, "client@example.com", "Client"),
)


def seed_demo_users(directory: UserDirectory, password: str) -> List[UserRecord]:
    """Add one demo user per role (skips usernames that already exist)."""
    seeded = []
    for username, role, email, name in DEMO_USERS:
        if directory.get_by_username(username) is None:
            seeded.append(directory.add_user(username, password, int(role), email=email, name=name))
    return seeded


# ==================== Singleton Instance ====================

_directory: Optional[UserDirectory] = None


def get_user_directory() -> UserDirectory:
    """Get the process-wide directory, seeding demo users when configured."""
    global _directory

    if _directory is None:
        _directory = UserDirectory()
        from portal.core.config import settings
        if settings.DEMO_USER_PASSWORD:
            seed_demo_users(_directory, settings.DEMO_USER_PASSWORD)
            logger.info("Seeded demo users")

    return _directory
