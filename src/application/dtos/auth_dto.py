from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from src.domain.entities.profile import ProfileEntity
from src.domain.entities.session import SessionState
from src.domain.services.navigation import render_navigation


class SignUpBody(BaseModel):
    """Request model for account registration."""
    email: str = Field("", description="Email address", examples=["alice@example.com"])
    password: str = Field("", description="Account password")
    nickname: str = Field("", description="Unique public nickname", examples=["alice"])


class SignUpResponse(BaseModel):
    user_id: str | None = Field(None, description="Identity id, absent while email confirmation is pending")
    email: str
    confirmation_required: bool = Field(
        ..., description="True when the account must be confirmed by email before signing in"
    )


class SignInBody(BaseModel):
    email: str = Field("", description="Email address", examples=["alice@example.com"])
    password: str = Field("", description="Account password")


class SessionResponse(BaseModel):
    """Session state plus the navigation the client should render for it."""
    signed_in: bool
    user_id: str | None = None
    email: str | None = None
    nickname: str | None = None
    is_admin: bool = False
    welcome_label: str = Field("", description="Text for the status area, e.g. 'Welcome, alice'")
    show_login: bool
    show_logout: bool
    show_admin_link: bool
    notice: str | None = Field(None, description="Blocking notice to show, e.g. after a ban")
    redirect_to: str | None = Field(None, description="Path the client should navigate to")

    @classmethod
    def from_state(cls, state: SessionState) -> SessionResponse:
        nav = render_navigation(state)
        return cls(
            signed_in=state.signed_in,
            user_id=state.user_id,
            email=state.email,
            nickname=state.nickname,
            is_admin=state.is_admin,
            welcome_label=nav.welcome_label,
            show_login=nav.show_login,
            show_logout=nav.show_logout,
            show_admin_link=nav.show_admin_link,
            notice=nav.notice,
            redirect_to=nav.redirect_to,
        )


class SignInResponse(BaseModel):
    access_token: str | None = Field(None, description="Bearer token, absent when the account is blocked")
    session: SessionResponse


class UpdateNicknameBody(BaseModel):
    nickname: str = Field("", description="New nickname", examples=["alice"])


class ProfileResponse(BaseModel):
    id: str
    email: str | None = None
    nickname: str | None = None
    is_admin: bool = False
    banned: bool = False
    created_at: datetime | None = None

    @classmethod
    def from_entity(cls, profile: ProfileEntity) -> ProfileResponse:
        return cls(
            id=profile.id,
            email=profile.email,
            nickname=profile.nickname,
            is_admin=profile.is_admin,
            banned=profile.banned,
            created_at=profile.created_at,
        )
