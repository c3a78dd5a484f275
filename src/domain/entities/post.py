from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class PostEntity:
    id: str
    user_id: str
    title: str
    content: str
    created_at: datetime
    game_types: str | None = None  # free-text tags, e.g. "RPG, co-op"
