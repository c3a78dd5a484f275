from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class UserInfo:
    id: str
    email: str | None


@dataclass(slots=True)
class Session:
    """An authenticated identity together with the token that proves it."""

    access_token: str
    user: UserInfo


@dataclass(frozen=True)
class SessionState:
    """What the client should show after a session refresh.

    ``notice`` and ``redirect_to`` are only set when a banned user has just
    been expelled.
    """

    signed_in: bool
    user_id: str | None = None
    email: str | None = None
    nickname: str | None = None
    is_admin: bool = False
    notice: str | None = None
    redirect_to: str | None = None

    @classmethod
    def signed_out(cls, notice: str | None = None, redirect_to: str | None = None) -> SessionState:
        return cls(signed_in=False, notice=notice, redirect_to=redirect_to)
