from __future__ import annotations

import logging
from dataclasses import dataclass

from src.application.errors import store_errors
from src.application.use_cases.nicknames import resolve_nicknames
from src.application.use_cases.posts import ANONYMOUS, PostListing
from src.application.use_cases.private_messages import MessageListing, to_listings
from src.domain.entities.profile import ProfileEntity
from src.domain.entities.session import Session
from src.domain.errors import BoardError, ErrorKind
from src.infrastructure.database.repositories.message_repository import MessageRepository
from src.infrastructure.database.repositories.post_repository import PostRepository
from src.infrastructure.database.repositories.profile_repository import ProfileRepository

logger = logging.getLogger(__name__)

ADMIN_LIMIT = 1000


@dataclass
class ModerationService:
    """
    Admin-only listings and mutations.

    Every public method re-reads the caller's ``is_admin`` flag from the
    profiles collection before touching anything; what the client chose to
    display is never trusted. Non-admins get FORBIDDEN and cause no writes.
    """

    profiles: ProfileRepository
    posts: PostRepository
    messages: MessageRepository

    def is_admin(self, session: Session | None) -> bool:
        if session is None:
            return False
        try:
            profile = self.profiles.get(session.user.id)
        except RuntimeError:
            logger.warning("admin check failed for user %s", session.user.id, exc_info=True)
            return False
        return profile is not None and profile.is_admin is True

    def _require_admin(self, session: Session | None) -> Session:
        if session is None or not self.is_admin(session):
            raise BoardError(ErrorKind.FORBIDDEN, "Permission denied.")
        return session

    def list_messages(self, session: Session | None, limit: int = ADMIN_LIMIT) -> list[MessageListing]:
        self._require_admin(session)
        with store_errors("load messages"):
            messages = self.messages.list_recent(max(1, min(limit, ADMIN_LIMIT)))
        names = resolve_nicknames(
            self.profiles, (uid for m in messages for uid in (m.sender, m.recipient))
        )
        return to_listings(messages, names)

    def list_users(self, session: Session | None, limit: int = ADMIN_LIMIT) -> list[ProfileEntity]:
        self._require_admin(session)
        with store_errors("load users"):
            return self.profiles.list_recent(max(1, min(limit, ADMIN_LIMIT)))

    def list_posts(self, session: Session | None, limit: int = ADMIN_LIMIT) -> list[PostListing]:
        self._require_admin(session)
        with store_errors("load posts"):
            posts = self.posts.list_recent(max(1, min(limit, ADMIN_LIMIT)))
        names = resolve_nicknames(self.profiles, (p.user_id for p in posts))
        return [PostListing(post=p, author=names.get(p.user_id, ANONYMOUS)) for p in posts]

    def toggle_ban(self, session: Session | None, user_id: str) -> bool:
        """Flip the user's ban flag and return the new value.

        Read-then-write: two admins toggling at once may cancel out.
        """
        admin = self._require_admin(session)
        with store_errors("load the user"):
            target = self.profiles.get(user_id)
        if target is None:
            raise BoardError(ErrorKind.NOT_FOUND, "User not found.")
        banned = not bool(target.banned)
        with store_errors("update the ban"):
            self.profiles.update_flags(user_id, banned=banned)
        logger.info("admin %s set banned=%s for user %s", admin.user.id, banned, user_id)
        return banned

    def delete_user(self, session: Session | None, user_id: str) -> bool:
        admin = self._require_admin(session)
        with store_errors("delete the user"):
            deleted = self.profiles.delete(user_id)
        logger.info("admin %s deleted user %s", admin.user.id, user_id)
        return deleted

    def delete_post(self, session: Session | None, post_id: str) -> bool:
        admin = self._require_admin(session)
        with store_errors("delete the post"):
            deleted = self.posts.delete(post_id)
        logger.info("admin %s deleted post %s", admin.user.id, post_id)
        return deleted

    def delete_message(self, session: Session | None, message_id: str) -> bool:
        admin = self._require_admin(session)
        with store_errors("delete the message"):
            deleted = self.messages.delete(message_id)
        logger.info("admin %s deleted message %s", admin.user.id, message_id)
        return deleted
