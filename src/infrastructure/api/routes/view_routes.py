from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse

from src.application.use_cases.directory import SearchNickUseCase
from src.application.use_cases.moderation import ModerationService
from src.application.use_cases.posts import ListPostsUseCase
from src.application.use_cases.private_messages import ListInboxUseCase
from src.domain.errors import BoardError
from src.infrastructure.api import rendering
from src.infrastructure.api.dependencies import (
    get_message_repo,
    get_moderation,
    get_post_repo,
    get_profile_repo,
    get_session,
)
from src.infrastructure.database.repositories.message_repository import MessageRepository
from src.infrastructure.database.repositories.post_repository import PostRepository
from src.infrastructure.database.repositories.profile_repository import ProfileRepository

# Fragments always come back as 200; failures are rendered in place.
router = APIRouter(prefix="/views", tags=["HTML Fragments"], default_response_class=HTMLResponse)


@router.get("/posts", summary="Post List Fragment")
def posts_view(
    profiles: ProfileRepository = Depends(get_profile_repo),
    posts: PostRepository = Depends(get_post_repo),
):
    try:
        return rendering.render_posts(ListPostsUseCase(profiles, posts).execute())
    except BoardError as exc:
        return rendering.render_error(exc)


@router.get("/inbox", summary="Inbox Fragment")
def inbox_view(
    session=Depends(get_session),
    profiles: ProfileRepository = Depends(get_profile_repo),
    messages: MessageRepository = Depends(get_message_repo),
):
    try:
        return rendering.render_inbox(ListInboxUseCase(profiles, messages).execute(session))
    except BoardError as exc:
        return rendering.render_error(exc)


@router.get("/search", summary="Directory Search Fragment")
def search_view(
    profiles: ProfileRepository = Depends(get_profile_repo),
    q: str = Query(""),
):
    try:
        return rendering.render_search(SearchNickUseCase(profiles).execute(q))
    except BoardError as exc:
        return rendering.render_error(exc)


@router.get("/admin/users", summary="Admin User List Fragment")
def admin_users_view(session=Depends(get_session), moderation: ModerationService = Depends(get_moderation)):
    try:
        return rendering.render_admin_users(moderation.list_users(session))
    except BoardError as exc:
        return rendering.render_error(exc)


@router.get("/admin/posts", summary="Admin Post List Fragment")
def admin_posts_view(session=Depends(get_session), moderation: ModerationService = Depends(get_moderation)):
    try:
        return rendering.render_posts(moderation.list_posts(session), admin=True)
    except BoardError as exc:
        return rendering.render_error(exc)


@router.get("/admin/messages", summary="Admin Message List Fragment")
def admin_messages_view(session=Depends(get_session), moderation: ModerationService = Depends(get_moderation)):
    try:
        return rendering.render_admin_messages(moderation.list_messages(session))
    except BoardError as exc:
        return rendering.render_error(exc)
