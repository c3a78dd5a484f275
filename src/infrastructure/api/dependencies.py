from __future__ import annotations

import logging
from typing import Annotated

from fastapi import Depends, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.application.use_cases.moderation import ModerationService
from src.domain.entities.session import Session
from src.domain.errors import BoardError, ErrorKind
from src.infrastructure.database.repositories.message_repository import MessageRepository
from src.infrastructure.database.repositories.post_repository import PostRepository
from src.infrastructure.database.repositories.profile_repository import ProfileRepository
from src.infrastructure.database.supabase_client import SupabaseAuthAdapter, get_supabase_client

logger = logging.getLogger(__name__)

_bearer_scheme = HTTPBearer(auto_error=False)


def get_auth_adapter() -> SupabaseAuthAdapter:
    return SupabaseAuthAdapter()


def get_session(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Security(_bearer_scheme)] = None,
    auth: Annotated[SupabaseAuthAdapter, Depends(get_auth_adapter)] = None,
) -> Session | None:
    """Current session, or None. Use cases decide whether that is an error.

    A gateway failure is a STORE_ERROR, not a signed-out caller.
    """
    if not credentials or not credentials.scheme or credentials.scheme.lower() != "bearer":
        return None
    if not credentials.credentials:
        return None
    try:
        return auth.get_session(credentials.credentials)
    except RuntimeError as exc:
        logger.exception("session lookup failed")
        raise BoardError(ErrorKind.STORE_ERROR, "Could not check your session, please try again.") from exc


def get_profile_repo() -> ProfileRepository:
    return ProfileRepository(get_supabase_client())


def get_post_repo() -> PostRepository:
    return PostRepository(get_supabase_client())


def get_message_repo() -> MessageRepository:
    return MessageRepository(get_supabase_client())


def get_moderation(
    profiles: Annotated[ProfileRepository, Depends(get_profile_repo)],
    posts: Annotated[PostRepository, Depends(get_post_repo)],
    messages: Annotated[MessageRepository, Depends(get_message_repo)],
) -> ModerationService:
    return ModerationService(profiles, posts, messages)
