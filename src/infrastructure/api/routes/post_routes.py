from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from src.application.dtos.common_dto import DeleteResponse, ErrorResponse
from src.application.dtos.post_dto import CreatePostBody, ListPostsResponse, PostItem
from src.application.use_cases.posts import (
    POSTS_LIMIT,
    CreatePostUseCase,
    DeletePostUseCase,
    ListPostsUseCase,
)
from src.infrastructure.api.dependencies import get_post_repo, get_profile_repo, get_session
from src.infrastructure.database.repositories.post_repository import PostRepository
from src.infrastructure.database.repositories.profile_repository import ProfileRepository

router = APIRouter(
    prefix="/posts",
    tags=["Posts"],
    responses={502: {"model": ErrorResponse, "description": "Store Error - Database backend failed"}},
)


@router.get(
    "",
    response_model=ListPostsResponse,
    summary="List Posts",
    description="""
    Newest announcements first, with author nicknames.

    Authors without a profile or nickname are shown as "Anonymous".

    **Authentication required**: No
    """,
)
def list_posts(
    profiles: ProfileRepository = Depends(get_profile_repo),
    posts: PostRepository = Depends(get_post_repo),
    limit: int = Query(POSTS_LIMIT, ge=1, le=POSTS_LIMIT, description="Maximum number of posts (1-500)"),
):
    """List the newest posts."""
    listings = ListPostsUseCase(profiles, posts).execute(limit)
    return ListPostsResponse(posts=[PostItem.from_listing(p) for p in listings])


@router.post(
    "",
    response_model=PostItem,
    status_code=status.HTTP_201_CREATED,
    summary="Create Post",
    description="""
    Publish an announcement as the signed-in user.

    **Request Requirements:**
    - Title and content must not be empty or whitespace only
    - Game types are optional free text

    **Authentication required**: Yes (Bearer token)
    **Access control**: Blocked accounts cannot post
    """,
    responses={
        400: {"model": ErrorResponse, "description": "Validation Error - Title or content missing"},
        401: {"model": ErrorResponse, "description": "Unauthorized - No active session"},
        403: {"model": ErrorResponse, "description": "Forbidden - Account is blocked"},
    },
)
def create_post(
    body: CreatePostBody,
    session=Depends(get_session),
    profiles: ProfileRepository = Depends(get_profile_repo),
    posts: PostRepository = Depends(get_post_repo),
):
    """Create a new post."""
    listing = CreatePostUseCase(profiles, posts).execute(
        session, body.title, body.content, body.game_types
    )
    return PostItem.from_listing(listing)


@router.delete(
    "/{post_id}",
    response_model=DeleteResponse,
    summary="Delete Post",
    description="""
    Delete a post.

    **Authentication required**: Yes (Bearer token)
    **Access control**: The author or an admin
    """,
    responses={
        401: {"model": ErrorResponse, "description": "Unauthorized - No active session"},
        403: {"model": ErrorResponse, "description": "Forbidden - Not the author"},
        404: {"model": ErrorResponse, "description": "Not Found - Post does not exist"},
    },
)
def delete_post(
    post_id: str,
    session=Depends(get_session),
    profiles: ProfileRepository = Depends(get_profile_repo),
    posts: PostRepository = Depends(get_post_repo),
):
    """Delete one of your posts."""
    return {"ok": DeletePostUseCase(profiles, posts).execute(session, post_id)}
