from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class ProfileEntity:
    id: str  # user id from Supabase auth
    email: str | None
    nickname: str | None = None
    is_admin: bool = False
    banned: bool = False
    created_at: datetime | None = None
    type: str | None = None  # free-text tag shown in directory search
