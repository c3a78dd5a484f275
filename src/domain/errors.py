"""Error taxonomy shared by every use case."""
from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    VALIDATION = "validation"  # missing or empty required field
    CONFLICT = "conflict"  # nickname taken
    AUTH = "auth"  # no active session
    FORBIDDEN = "forbidden"  # banned, not an admin, or banned recipient
    NOT_FOUND = "not_found"
    STORE_ERROR = "store_error"  # record store or identity gateway failure


class BoardError(Exception):
    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message

    def __repr__(self) -> str:
        return f"BoardError({self.kind.value!r}, {self.message!r})"


def is_blank(value: str | None) -> bool:
    return value is None or not value.strip()
