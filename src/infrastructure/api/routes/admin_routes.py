from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from src.application.dtos.admin_dto import (
    AdminCheckResponse,
    AdminMessagesResponse,
    AdminPostsResponse,
    BanToggleResponse,
    ListUsersResponse,
)
from src.application.dtos.auth_dto import ProfileResponse
from src.application.dtos.common_dto import DeleteResponse, ErrorResponse
from src.application.dtos.message_dto import MessageItem
from src.application.dtos.post_dto import PostItem
from src.application.use_cases.moderation import ADMIN_LIMIT, ModerationService
from src.infrastructure.api.dependencies import get_moderation, get_session

router = APIRouter(
    prefix="/admin",
    tags=["Moderation"],
    responses={
        403: {"model": ErrorResponse, "description": "Forbidden - Caller is not an admin"},
        502: {"model": ErrorResponse, "description": "Store Error - Database backend failed"},
    },
)

_limit = Query(ADMIN_LIMIT, ge=1, le=ADMIN_LIMIT, description="Maximum number of rows (1-1000)")


@router.get("/check", response_model=AdminCheckResponse, summary="Check Admin Rights")
def check(session=Depends(get_session), moderation: ModerationService = Depends(get_moderation)):
    """Whether the caller is an admin, read fresh from their profile."""
    return AdminCheckResponse(is_admin=moderation.is_admin(session))


@router.get("/users", response_model=ListUsersResponse, summary="List Users")
def list_users(
    session=Depends(get_session),
    moderation: ModerationService = Depends(get_moderation),
    limit: int = _limit,
):
    """All profiles, newest first."""
    users = moderation.list_users(session, limit)
    return ListUsersResponse(users=[ProfileResponse.from_entity(u) for u in users])


@router.get("/posts", response_model=AdminPostsResponse, summary="List All Posts")
def list_posts(
    session=Depends(get_session),
    moderation: ModerationService = Depends(get_moderation),
    limit: int = _limit,
):
    """All posts, newest first."""
    posts = moderation.list_posts(session, limit)
    return AdminPostsResponse(posts=[PostItem.from_listing(p) for p in posts])


@router.get("/messages", response_model=AdminMessagesResponse, summary="List All Messages")
def list_messages(
    session=Depends(get_session),
    moderation: ModerationService = Depends(get_moderation),
    limit: int = _limit,
):
    """All private messages, newest first."""
    messages = moderation.list_messages(session, limit)
    return AdminMessagesResponse(messages=[MessageItem.from_listing(m) for m in messages])


@router.post(
    "/users/{user_id}/ban",
    response_model=BanToggleResponse,
    summary="Toggle User Ban",
    description="""
    Flip the user's ban flag. A banned user is signed out on their next
    session refresh and can no longer post or receive messages.
    """,
    responses={404: {"model": ErrorResponse, "description": "Not Found - No such user"}},
)
def toggle_ban(
    user_id: str,
    session=Depends(get_session),
    moderation: ModerationService = Depends(get_moderation),
):
    """Ban or unban a user."""
    return BanToggleResponse(user_id=user_id, banned=moderation.toggle_ban(session, user_id))


@router.delete("/users/{user_id}", response_model=DeleteResponse, summary="Delete User")
def delete_user(
    user_id: str,
    session=Depends(get_session),
    moderation: ModerationService = Depends(get_moderation),
):
    """Delete a user's profile. Related rows follow the database's own rules."""
    return {"ok": moderation.delete_user(session, user_id)}


@router.delete("/posts/{post_id}", response_model=DeleteResponse, summary="Delete Any Post")
def delete_post(
    post_id: str,
    session=Depends(get_session),
    moderation: ModerationService = Depends(get_moderation),
):
    """Delete any post."""
    return {"ok": moderation.delete_post(session, post_id)}


@router.delete("/messages/{message_id}", response_model=DeleteResponse, summary="Delete Message")
def delete_message(
    message_id: str,
    session=Depends(get_session),
    moderation: ModerationService = Depends(get_moderation),
):
    """Delete a private message."""
    return {"ok": moderation.delete_message(session, message_id)}
