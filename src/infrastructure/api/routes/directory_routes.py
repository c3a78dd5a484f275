from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from src.application.dtos.directory_dto import DirectoryEntry, SearchResponse
from src.application.use_cases.directory import SEARCH_LIMIT, SearchNickUseCase
from src.infrastructure.api.dependencies import get_profile_repo
from src.infrastructure.database.repositories.profile_repository import ProfileRepository

router = APIRouter(prefix="/directory", tags=["Directory"])


@router.get(
    "/search",
    response_model=SearchResponse,
    summary="Search Users by Nickname",
    description="""
    Case-insensitive substring search over nicknames, at most 50 results.

    An empty query runs no search and returns `prompt=true`.

    **Authentication required**: No
    """,
)
def search(
    profiles: ProfileRepository = Depends(get_profile_repo),
    q: str = Query("", description="Nickname fragment"),
    limit: int = Query(SEARCH_LIMIT, ge=1, le=SEARCH_LIMIT),
):
    """Search the user directory."""
    result = SearchNickUseCase(profiles).execute(q, limit)
    return SearchResponse(
        prompt=result.prompt,
        results=[
            DirectoryEntry(id=p.id, nickname=p.nickname, email=p.email, type=p.type)
            for p in result.results
        ],
    )
