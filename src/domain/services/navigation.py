from __future__ import annotations

from dataclasses import dataclass

from src.domain.entities.session import SessionState


@dataclass(frozen=True)
class NavigationView:
    welcome_label: str
    show_login: bool
    show_logout: bool
    show_admin_link: bool
    notice: str | None = None
    redirect_to: str | None = None


def render_navigation(state: SessionState) -> NavigationView:
    """Derive the visible navigation controls from a session state.

    Pure: the same state always renders the same view. The admin link is
    driven only by ``state.is_admin``; a signed-out state never shows it.
    """
    if not state.signed_in:
        return NavigationView(
            welcome_label="",
            show_login=True,
            show_logout=False,
            show_admin_link=False,
            notice=state.notice,
            redirect_to=state.redirect_to,
        )
    label = f"Welcome, {state.nickname}" if state.nickname else (state.email or "")
    return NavigationView(
        welcome_label=label,
        show_login=False,
        show_logout=True,
        show_admin_link=state.is_admin,
    )
