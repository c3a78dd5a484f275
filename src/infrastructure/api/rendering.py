"""HTML fragments for the board's static pages.

Each function returns a fragment meant to be dropped into a container
element. All user-supplied text goes through ``escape``.
"""
from __future__ import annotations

from datetime import datetime
from html import escape

from src.application.use_cases.directory import SearchResult
from src.application.use_cases.posts import PostListing
from src.application.use_cases.private_messages import InboxResult, MessageListing
from src.domain.entities.profile import ProfileEntity
from src.domain.errors import BoardError, ErrorKind

MESSAGES_BY_KIND: dict[ErrorKind, str] = {
    ErrorKind.FORBIDDEN: "Permission denied.",
    ErrorKind.AUTH: "Sign in to continue.",
    ErrorKind.STORE_ERROR: "Loading failed.",
}


def _muted(text: str) -> str:
    return f'<p class="text-muted">{escape(text)}</p>'


def _when(ts: datetime) -> str:
    return escape(ts.strftime("%Y-%m-%d %H:%M"))


def render_error(exc: BoardError) -> str:
    text = MESSAGES_BY_KIND.get(exc.kind, exc.message)
    return f'<p class="text-danger">{escape(text)}</p>'


def render_posts(posts: list[PostListing], *, admin: bool = False) -> str:
    if not posts:
        return _muted("No posts yet.")
    out = []
    for item in posts:
        p = item.post
        button = (
            f'<button class="btn btn-sm btn-danger" data-postdel="{escape(p.id)}">Delete post</button>'
            if admin
            else f'<button class="btn btn-sm btn-outline-danger" data-del="{escape(p.id)}">Delete</button>'
        )
        out.append(
            '<div class="card mb-2 p-3">'
            f'<div><strong>{escape(p.title or "Untitled")}</strong> '
            f'<small class="text-muted">by {escape(item.author)}</small></div>'
            f'<div class="mt-2">{escape(p.content)}</div>'
            f'<div class="mt-2"><small class="text-muted">{escape(p.game_types or "")}</small></div>'
            f'<div class="mt-2">{button}</div>'
            "</div>"
        )
    return "".join(out)


def _render_message(item: MessageListing, admin: bool) -> str:
    m = item.message
    button = (
        f'<div class="mt-2"><button class="btn btn-sm btn-danger" data-msgdel="{escape(m.id)}">'
        "Delete message</button></div>"
        if admin
        else ""
    )
    return (
        '<div class="card p-2 mb-2">'
        f'<div><small class="text-muted">{_when(m.created_at)}</small></div>'
        f'<div class="mt-1"><strong>From:</strong> {escape(item.sender_name)} '
        f"<strong>To:</strong> {escape(item.recipient_name)}</div>"
        f'<div class="mt-2">{escape(m.content)}</div>'
        f"{button}"
        "</div>"
    )


def render_inbox(inbox: InboxResult) -> str:
    if not inbox.signed_in:
        return _muted("Sign in to see your messages.")
    if not inbox.messages:
        return _muted("No messages.")
    return "".join(_render_message(m, admin=False) for m in inbox.messages)


def render_admin_messages(messages: list[MessageListing]) -> str:
    if not messages:
        return _muted("No messages.")
    return "".join(_render_message(m, admin=True) for m in messages)


def render_admin_users(users: list[ProfileEntity]) -> str:
    if not users:
        return _muted("No users.")
    out = []
    for u in users:
        ban_label = "Unban" if u.banned else "Ban"
        out.append(
            '<div class="card p-2 mb-2">'
            f'<div><strong>{escape(u.nickname or u.email or u.id)}</strong> '
            f'<small class="text-muted">{escape(u.email or "")}</small></div>'
            f'<div class="mt-1">Admin: {"yes" if u.is_admin else "no"} '
            f'&bull; Banned: {"yes" if u.banned else "no"}</div>'
            f'<div class="mt-2"><button class="btn btn-sm btn-danger" data-ban="{escape(u.id)}">{ban_label}</button> '
            f'<button class="btn btn-sm btn-outline-danger" data-deluser="{escape(u.id)}">Delete user</button></div>'
            "</div>"
        )
    return "".join(out)


def render_search(result: SearchResult) -> str:
    if result.prompt:
        return _muted("Type a nickname...")
    if not result.results:
        return _muted("No results.")
    return "".join(
        '<div class="card p-2 mb-2">'
        f'<div><strong>{escape(u.nickname or "")}</strong> '
        f'<small class="text-muted">{escape(u.email or "")}</small></div>'
        f'<div class="mt-1"><small>Type: {escape(u.type or "-")}</small></div>'
        "</div>"
        for u in result.results
    )
