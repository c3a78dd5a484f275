from __future__ import annotations

import os
import uuid
from datetime import UTC, datetime

from supabase import Client

from src.domain.entities.private_message import PrivateMessageEntity
from src.infrastructure.database.postgres_client import get_postgres_client

# module-level in-memory store for disabled mode
_MEM_MESSAGES: dict[str, PrivateMessageEntity] = {}

_MESSAGE_COLUMNS = "id,content,created_at,sender,recipient"


class MessageRepository:
    """Access to the ``private_messages`` collection."""

    def __init__(self, client: Client | None) -> None:
        self.client = client
        self.disabled = os.getenv("SUPABASE_DISABLED", "0") == "1"
        self.use_local_db = os.getenv("USE_LOCAL_DB", "0") == "1"
        self.pg_client = get_postgres_client() if self.use_local_db else None

    def _row_to_entity(self, row: dict) -> PrivateMessageEntity:
        created_at = row["created_at"]
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at)
        return PrivateMessageEntity(
            id=str(row["id"]),
            sender=row["sender"],
            recipient=row["recipient"],
            content=row.get("content") or "",
            created_at=created_at,
        )

    def create(self, sender: str, recipient: str, content: str) -> PrivateMessageEntity:
        # PostgreSQL mode
        if self.use_local_db and self.pg_client:
            try:
                query = """
                    INSERT INTO private_messages (sender, recipient, content, created_at)
                    VALUES (%s, %s, %s, CURRENT_TIMESTAMP)
                    RETURNING *
                """
                row = self.pg_client.insert_returning(query, (sender, recipient, content))
            except Exception as exc:
                raise RuntimeError(f"PostgreSQL insert message failed: {exc}") from exc
            return self._row_to_entity(row)

        # In-memory mode
        if self.disabled or self.client is None:
            entity = PrivateMessageEntity(
                id=str(uuid.uuid4()),
                sender=sender,
                recipient=recipient,
                content=content,
                created_at=datetime.now(UTC),
            )
            _MEM_MESSAGES[entity.id] = entity
            return entity

        # Supabase mode
        try:  # pragma: no cover - network
            data = {"sender": sender, "recipient": recipient, "content": content}
            res = self.client.table("private_messages").insert(data).execute()
            return self._row_to_entity(res.data[0])
        except Exception as exc:  # pragma: no cover - network
            raise RuntimeError(f"DB insert message failed: {exc}") from exc

    def list_for_user(self, user_id: str, limit: int) -> list[PrivateMessageEntity]:
        """Messages the user sent or received, newest first."""
        if self.use_local_db and self.pg_client:
            try:
                query = """
                    SELECT * FROM private_messages
                    WHERE recipient = %s OR sender = %s
                    ORDER BY created_at DESC
                    LIMIT %s
                """
                rows = self.pg_client.fetch_all(query, (user_id, user_id, limit))
            except Exception as exc:
                raise RuntimeError(f"PostgreSQL list inbox failed: {exc}") from exc
            return [self._row_to_entity(row) for row in rows]

        if self.disabled or self.client is None:
            mine = [m for m in _MEM_MESSAGES.values() if user_id in (m.sender, m.recipient)]
            return sorted(mine, key=lambda m: m.created_at)[::-1][:limit]

        try:  # pragma: no cover - network
            res = (
                self.client.table("private_messages")
                .select(_MESSAGE_COLUMNS)
                .or_(f"recipient.eq.{user_id},sender.eq.{user_id}")
                .order("created_at", desc=True)
                .limit(limit)
                .execute()
            )
        except Exception as exc:  # pragma: no cover - network
            raise RuntimeError(f"DB list inbox failed: {exc}") from exc
        return [self._row_to_entity(row) for row in res.data or []]  # pragma: no cover - network

    def list_recent(self, limit: int) -> list[PrivateMessageEntity]:
        """Every message, newest first. Moderation only."""
        if self.use_local_db and self.pg_client:
            try:
                rows = self.pg_client.fetch_all(
                    "SELECT * FROM private_messages ORDER BY created_at DESC LIMIT %s", (limit,)
                )
            except Exception as exc:
                raise RuntimeError(f"PostgreSQL list messages failed: {exc}") from exc
            return [self._row_to_entity(row) for row in rows]

        if self.disabled or self.client is None:
            return sorted(_MEM_MESSAGES.values(), key=lambda m: m.created_at)[::-1][:limit]

        try:  # pragma: no cover - network
            res = (
                self.client.table("private_messages")
                .select(_MESSAGE_COLUMNS)
                .order("created_at", desc=True)
                .limit(limit)
                .execute()
            )
        except Exception as exc:  # pragma: no cover - network
            raise RuntimeError(f"DB list messages failed: {exc}") from exc
        return [self._row_to_entity(row) for row in res.data or []]  # pragma: no cover - network

    def delete(self, message_id: str) -> bool:
        if self.use_local_db and self.pg_client:
            try:
                return (
                    self.pg_client.execute("DELETE FROM private_messages WHERE id = %s", (message_id,))
                    > 0
                )
            except Exception as exc:
                raise RuntimeError(f"PostgreSQL delete message failed: {exc}") from exc

        if self.disabled or self.client is None:
            return _MEM_MESSAGES.pop(message_id, None) is not None

        try:  # pragma: no cover - network
            res = self.client.table("private_messages").delete().eq("id", message_id).execute()
            return bool(res.data)
        except Exception as exc:  # pragma: no cover - network
            raise RuntimeError(f"DB delete message failed: {exc}") from exc
