import os
import sys
from pathlib import Path
from typing import Callable

import pytest
from fastapi.testclient import TestClient

# Ensure project root is on sys.path so 'src' is importable during tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("SUPABASE_DISABLED", "1")
os.environ.setdefault("USE_LOCAL_DB", "0")
os.environ.setdefault("SUPABASE_FAKE_EMAIL_CONFIRMATION", "0")
os.environ.setdefault("LOG_LEVEL", "WARNING")


def _clear_memory_stores() -> None:
    from src.infrastructure.database import supabase_client
    from src.infrastructure.database.repositories import (
        message_repository,
        post_repository,
        profile_repository,
    )

    supabase_client._MEM_IDENTITIES.clear()
    supabase_client._MEM_SESSIONS.clear()
    profile_repository._MEM_PROFILES.clear()
    post_repository._MEM_POSTS.clear()
    message_repository._MEM_MESSAGES.clear()


@pytest.fixture(autouse=True)
def reset_memory_stores():
    _clear_memory_stores()
    yield
    _clear_memory_stores()


@pytest.fixture(scope="session")
def client() -> TestClient:
    # lazy import after env configured
    from src.main import create_app

    app = create_app()
    return TestClient(app)


@pytest.fixture()
def auth():
    from src.infrastructure.database.supabase_client import SupabaseAuthAdapter

    return SupabaseAuthAdapter(require_confirmation=False)


@pytest.fixture()
def profiles():
    from src.infrastructure.database.repositories.profile_repository import ProfileRepository

    return ProfileRepository(None)


@pytest.fixture()
def posts():
    from src.infrastructure.database.repositories.post_repository import PostRepository

    return PostRepository(None)


@pytest.fixture()
def messages():
    from src.infrastructure.database.repositories.message_repository import MessageRepository

    return MessageRepository(None)


@pytest.fixture()
def make_user(auth, profiles) -> Callable:
    """Register, sign in and provision a user; returns the live session."""

    def _make(
        email: str,
        nickname: str | None = None,
        *,
        admin: bool = False,
        banned: bool = False,
        with_profile: bool = True,
    ):
        auth.sign_up(email, "secret-pw")
        session = auth.sign_in(email, "secret-pw")
        if with_profile:
            profiles.create(session.user.id, email, nickname)
            profiles.update_flags(session.user.id, is_admin=admin or None, banned=banned or None)
        return session

    return _make


@pytest.fixture()
def bearer() -> Callable:
    def _bearer(session) -> dict[str, str]:
        return {"Authorization": f"Bearer {session.access_token}"}

    return _bearer
