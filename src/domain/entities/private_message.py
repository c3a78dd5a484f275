from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class PrivateMessageEntity:
    id: str
    sender: str  # profile id
    recipient: str  # profile id
    content: str
    created_at: datetime
