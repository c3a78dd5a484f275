from __future__ import annotations

import logging
from dataclasses import dataclass

from src.application.errors import store_errors
from src.application.use_cases.nicknames import resolve_nicknames
from src.application.use_cases.provision_profile import ProvisionProfileUseCase
from src.domain.entities.post import PostEntity
from src.domain.entities.session import Session
from src.domain.errors import BoardError, ErrorKind, is_blank
from src.infrastructure.database.repositories.post_repository import PostRepository
from src.infrastructure.database.repositories.profile_repository import ProfileRepository

logger = logging.getLogger(__name__)

POSTS_LIMIT = 500
ANONYMOUS = "Anonymous"


@dataclass(frozen=True)
class PostListing:
    post: PostEntity
    author: str


@dataclass
class CreatePostUseCase:
    profiles: ProfileRepository
    posts: PostRepository

    def execute(
        self, session: Session | None, title: str, content: str, game_types: str | None = None
    ) -> PostListing:
        """
        Publish an announcement as the signed-in user.

        Checks run in order: session, ban, required fields. A missing profile
        is provisioned on the way so the insert does not trip the foreign key.

        Raises:
            BoardError: AUTH, FORBIDDEN, VALIDATION, or STORE_ERROR.
        """
        if session is None:
            raise BoardError(ErrorKind.AUTH, "You must be signed in.")
        uid = session.user.id

        with store_errors("load your profile"):
            profile = self.profiles.get(uid)
        if profile is None:
            ProvisionProfileUseCase(self.profiles).execute(session.user)
        elif profile.banned:
            raise BoardError(ErrorKind.FORBIDDEN, "Your account is blocked.")

        if is_blank(title) or is_blank(content):
            raise BoardError(ErrorKind.VALIDATION, "Title and content are required.")

        tags = game_types.strip() if game_types else None
        with store_errors("publish the post"):
            post = self.posts.create(uid, title.strip(), content.strip(), tags or None)
        logger.info("user %s created post %s", uid, post.id)
        author = profile.nickname if profile and profile.nickname else ANONYMOUS
        return PostListing(post=post, author=author)


@dataclass
class ListPostsUseCase:
    profiles: ProfileRepository
    posts: PostRepository

    def execute(self, limit: int = POSTS_LIMIT) -> list[PostListing]:
        """Newest posts first with author nicknames, two store queries at most."""
        limit = max(1, min(limit, POSTS_LIMIT))
        with store_errors("load posts"):
            posts = self.posts.list_recent(limit)
        names = resolve_nicknames(self.profiles, (p.user_id for p in posts))
        return [PostListing(post=p, author=names.get(p.user_id, ANONYMOUS)) for p in posts]


@dataclass
class DeletePostUseCase:
    """Remove a post on behalf of its author or an admin."""

    profiles: ProfileRepository
    posts: PostRepository

    def execute(self, session: Session | None, post_id: str) -> bool:
        if session is None:
            raise BoardError(ErrorKind.AUTH, "You must be signed in.")
        uid = session.user.id
        with store_errors("load the post"):
            post = self.posts.get(post_id)
        if post is None:
            raise BoardError(ErrorKind.NOT_FOUND, "Post not found.")

        if post.user_id != uid:
            with store_errors("check permissions"):
                caller = self.profiles.get(uid)
            if caller is None or not caller.is_admin:
                raise BoardError(ErrorKind.FORBIDDEN, "You can only delete your own posts.")

        with store_errors("delete the post"):
            deleted = self.posts.delete(post_id)
        logger.info("user %s deleted post %s", uid, post_id)
        return deleted
