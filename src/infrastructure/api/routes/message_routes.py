from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from src.application.dtos.common_dto import ErrorResponse
from src.application.dtos.message_dto import (
    InboxResponse,
    MessageItem,
    SendMessageBody,
    SentMessageResponse,
)
from src.application.use_cases.private_messages import (
    INBOX_LIMIT,
    ListInboxUseCase,
    SendPrivateMessageUseCase,
)
from src.infrastructure.api.dependencies import get_message_repo, get_profile_repo, get_session
from src.infrastructure.database.repositories.message_repository import MessageRepository
from src.infrastructure.database.repositories.profile_repository import ProfileRepository

router = APIRouter(
    prefix="/messages",
    tags=["Private Messages"],
    responses={502: {"model": ErrorResponse, "description": "Store Error - Database backend failed"}},
)


@router.get(
    "",
    response_model=InboxResponse,
    summary="List Inbox",
    description="""
    Messages the signed-in user sent or received, newest first.

    Without a session the response has `signed_in=false` and no messages
    rather than an error, so the client can show a sign-in prompt.

    **Authentication required**: Optional (Bearer token)
    """,
)
def list_inbox(
    session=Depends(get_session),
    profiles: ProfileRepository = Depends(get_profile_repo),
    messages: MessageRepository = Depends(get_message_repo),
    limit: int = Query(INBOX_LIMIT, ge=1, le=INBOX_LIMIT, description="Maximum number of messages (1-500)"),
):
    """List the caller's private messages."""
    inbox = ListInboxUseCase(profiles, messages).execute(session, limit)
    return InboxResponse(
        signed_in=inbox.signed_in,
        messages=[MessageItem.from_listing(m) for m in inbox.messages],
    )


@router.post(
    "",
    response_model=SentMessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Send Private Message",
    description="""
    Send a message to another user by exact nickname.

    **Authentication required**: Yes (Bearer token)
    **Access control**: Blocked users cannot receive messages
    """,
    responses={
        400: {"model": ErrorResponse, "description": "Validation Error - Recipient or content missing"},
        401: {"model": ErrorResponse, "description": "Unauthorized - No active session"},
        403: {"model": ErrorResponse, "description": "Forbidden - Recipient is blocked"},
        404: {"model": ErrorResponse, "description": "Not Found - No user with that nickname"},
    },
)
def send_message(
    body: SendMessageBody,
    session=Depends(get_session),
    profiles: ProfileRepository = Depends(get_profile_repo),
    messages: MessageRepository = Depends(get_message_repo),
):
    """Send a private message."""
    msg = SendPrivateMessageUseCase(profiles, messages).execute(session, body.to_nickname, body.content)
    return SentMessageResponse(id=msg.id, recipient=msg.recipient, created_at=msg.created_at)
