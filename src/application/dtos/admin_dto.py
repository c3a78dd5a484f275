from __future__ import annotations

from pydantic import BaseModel, Field

from src.application.dtos.auth_dto import ProfileResponse
from src.application.dtos.message_dto import MessageItem
from src.application.dtos.post_dto import PostItem


class AdminCheckResponse(BaseModel):
    is_admin: bool


class ListUsersResponse(BaseModel):
    users: list[ProfileResponse] = Field(..., description="Profiles, newest first")


class AdminPostsResponse(BaseModel):
    posts: list[PostItem]


class AdminMessagesResponse(BaseModel):
    messages: list[MessageItem]


class BanToggleResponse(BaseModel):
    user_id: str
    banned: bool = Field(..., description="Ban state after the toggle")
