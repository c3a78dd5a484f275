from __future__ import annotations

from dataclasses import dataclass, field

from src.application.errors import store_errors
from src.domain.entities.profile import ProfileEntity
from src.domain.errors import is_blank
from src.infrastructure.database.repositories.profile_repository import ProfileRepository

SEARCH_LIMIT = 50


@dataclass(frozen=True)
class SearchResult:
    prompt: bool  # True when there was nothing to search for
    results: list[ProfileEntity] = field(default_factory=list)


@dataclass
class SearchNickUseCase:
    profiles: ProfileRepository

    def execute(self, query: str | None, limit: int = SEARCH_LIMIT) -> SearchResult:
        if is_blank(query):
            return SearchResult(prompt=True)
        with store_errors("search users"):
            hits = self.profiles.search_by_nickname(query.strip(), max(1, min(limit, SEARCH_LIMIT)))
        return SearchResult(prompt=False, results=hits)
