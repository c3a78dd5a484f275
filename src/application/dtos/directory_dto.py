from __future__ import annotations

from pydantic import BaseModel, Field


class DirectoryEntry(BaseModel):
    id: str
    nickname: str | None = None
    email: str | None = None
    type: str | None = Field(None, description="Optional profile tag")


class SearchResponse(BaseModel):
    prompt: bool = Field(..., description="True when the query was empty and no search ran")
    results: list[DirectoryEntry] = Field(default_factory=list)
