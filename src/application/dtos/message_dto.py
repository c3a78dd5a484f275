from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from src.application.use_cases.private_messages import MessageListing


class SendMessageBody(BaseModel):
    to_nickname: str = Field("", description="Recipient nickname (exact match)", examples=["alice"])
    content: str = Field("", description="Message text")


class MessageItem(BaseModel):
    id: str
    sender: str
    recipient: str
    sender_name: str = Field(..., description="Sender nickname, or the raw id when unknown")
    recipient_name: str = Field(..., description="Recipient nickname, or the raw id when unknown")
    content: str
    created_at: datetime

    @classmethod
    def from_listing(cls, listing: MessageListing) -> MessageItem:
        m = listing.message
        return cls(
            id=m.id,
            sender=m.sender,
            recipient=m.recipient,
            sender_name=listing.sender_name,
            recipient_name=listing.recipient_name,
            content=m.content,
            created_at=m.created_at,
        )


class SentMessageResponse(BaseModel):
    id: str
    recipient: str
    created_at: datetime


class InboxResponse(BaseModel):
    signed_in: bool = Field(..., description="False when there is no session; messages is then empty")
    messages: list[MessageItem] = Field(default_factory=list, description="Messages, newest first")
