import sys
from pathlib import Path

import pytest

# Add the project root to sys.path so that the "portal" package can be found
# structure: <root>/portal/tests/conftest.py
current_dir = Path(__file__).parent.absolute()
root_dir = current_dir.parent.parent
sys.path.insert(0, str(root_dir))


@pytest.fixture(autouse=True)
def jwt_secret(monkeypatch):
    """Fixed signing secret so tokens issued in one test stay decodable."""
    monkeypatch.setenv("JWT_SECRET", "test-secret-for-portal-tests")
    monkeypatch.delenv("TELEMETRY_URL", raising=False)
    monkeypatch.delenv("DEMO_USER_PASSWORD", raising=False)


@pytest.fixture
def directory():
    """Fresh user directory with one user per role (password: secret123)."""
    from portal.services.user_directory import UserDirectory, seed_demo_users

    users = UserDirectory()
    seed_demo_users(users, "secret123")
    return users


@pytest.fixture
def shared_directory(monkeypatch, directory):
    """Install the seeded directory as the process singleton used by the API."""
    from portal.services import user_directory

    monkeypatch.setattr(user_directory, "_directory", directory)
    return directory
