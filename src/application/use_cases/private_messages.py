from __future__ import annotations

import logging
from dataclasses import dataclass, field

from src.application.errors import store_errors
from src.application.use_cases.nicknames import resolve_nicknames
from src.domain.entities.private_message import PrivateMessageEntity
from src.domain.entities.session import Session
from src.domain.errors import BoardError, ErrorKind, is_blank
from src.infrastructure.database.repositories.message_repository import MessageRepository
from src.infrastructure.database.repositories.profile_repository import ProfileRepository

logger = logging.getLogger(__name__)

INBOX_LIMIT = 500


@dataclass(frozen=True)
class MessageListing:
    message: PrivateMessageEntity
    sender_name: str
    recipient_name: str


@dataclass(frozen=True)
class InboxResult:
    signed_in: bool
    messages: list[MessageListing] = field(default_factory=list)


def to_listings(messages: list[PrivateMessageEntity], names: dict[str, str]) -> list[MessageListing]:
    # unresolved ids are shown as-is
    return [
        MessageListing(
            message=m,
            sender_name=names.get(m.sender, m.sender),
            recipient_name=names.get(m.recipient, m.recipient),
        )
        for m in messages
    ]


@dataclass
class SendPrivateMessageUseCase:
    profiles: ProfileRepository
    messages: MessageRepository

    def execute(self, session: Session | None, target_nickname: str, content: str) -> PrivateMessageEntity:
        """
        Send a private message to the profile holding ``target_nickname``.

        Only the recipient's ban is checked; a banned sender can still send.

        Raises:
            BoardError: VALIDATION, NOT_FOUND, FORBIDDEN, AUTH, or STORE_ERROR.
        """
        if is_blank(target_nickname) or is_blank(content):
            raise BoardError(ErrorKind.VALIDATION, "Recipient and message are required.")

        with store_errors("look up the recipient"):
            recipient = self.profiles.get_by_nickname(target_nickname.strip())
        if recipient is None:
            raise BoardError(ErrorKind.NOT_FOUND, "User not found.")
        if recipient.banned:
            raise BoardError(ErrorKind.FORBIDDEN, "This user is blocked.")

        if session is None:
            raise BoardError(ErrorKind.AUTH, "You must be signed in.")

        with store_errors("send the message"):
            message = self.messages.create(session.user.id, recipient.id, content.strip())
        logger.info("user %s sent message %s", session.user.id, message.id)
        return message


@dataclass
class ListInboxUseCase:
    profiles: ProfileRepository
    messages: MessageRepository

    def execute(self, session: Session | None, limit: int = INBOX_LIMIT) -> InboxResult:
        """Messages sent or received by the caller; a signed-out caller gets a prompt."""
        if session is None:
            return InboxResult(signed_in=False)
        limit = max(1, min(limit, INBOX_LIMIT))
        with store_errors("load messages"):
            messages = self.messages.list_for_user(session.user.id, limit)
        names = resolve_nicknames(
            self.profiles, (uid for m in messages for uid in (m.sender, m.recipient))
        )
        return InboxResult(signed_in=True, messages=to_listings(messages, names))
