from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from src.application.use_cases.posts import PostListing


class CreatePostBody(BaseModel):
    title: str = Field("", description="Announcement title", examples=["Looking for a raid group"])
    content: str = Field("", description="Announcement text")
    game_types: str | None = Field(None, description="Free-text game tags", examples=["MMO, co-op"])


class PostItem(BaseModel):
    """A single announcement with its author's nickname."""
    id: str = Field(..., description="Unique identifier of the post")
    user_id: str = Field(..., description="Id of the author's profile")
    author: str = Field(..., description="Author nickname, or 'Anonymous'")
    title: str
    content: str
    game_types: str | None = None
    created_at: datetime

    @classmethod
    def from_listing(cls, listing: PostListing) -> PostItem:
        p = listing.post
        return cls(
            id=p.id,
            user_id=p.user_id,
            author=listing.author,
            title=p.title,
            content=p.content,
            game_types=p.game_types,
            created_at=p.created_at,
        )


class ListPostsResponse(BaseModel):
    posts: list[PostItem] = Field(..., description="Posts, newest first")
