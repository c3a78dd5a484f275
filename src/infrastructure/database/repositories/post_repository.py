from __future__ import annotations

import os
import uuid
from datetime import UTC, datetime

from supabase import Client

from src.domain.entities.post import PostEntity
from src.infrastructure.database.postgres_client import get_postgres_client

# module-level in-memory store for disabled mode
_MEM_POSTS: dict[str, PostEntity] = {}

_POST_COLUMNS = "id,user_id,title,content,game_types,created_at"


class PostRepository:
    def __init__(self, client: Client | None) -> None:
        self.client = client
        self.disabled = os.getenv("SUPABASE_DISABLED", "0") == "1"
        self.use_local_db = os.getenv("USE_LOCAL_DB", "0") == "1"
        self.pg_client = get_postgres_client() if self.use_local_db else None

    def _row_to_entity(self, row: dict) -> PostEntity:
        created_at = row["created_at"]
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at)
        return PostEntity(
            id=str(row["id"]),
            user_id=row["user_id"],
            title=row.get("title") or "",
            content=row.get("content") or "",
            created_at=created_at,
            game_types=row.get("game_types"),
        )

    def create(self, user_id: str, title: str, content: str, game_types: str | None) -> PostEntity:
        # PostgreSQL mode
        if self.use_local_db and self.pg_client:
            try:
                query = """
                    INSERT INTO posts (user_id, title, content, game_types, created_at)
                    VALUES (%s, %s, %s, %s, CURRENT_TIMESTAMP)
                    RETURNING *
                """
                row = self.pg_client.insert_returning(query, (user_id, title, content, game_types))
            except Exception as exc:
                raise RuntimeError(f"PostgreSQL insert post failed: {exc}") from exc
            return self._row_to_entity(row)

        # In-memory mode
        if self.disabled or self.client is None:
            entity = PostEntity(
                id=str(uuid.uuid4()),
                user_id=user_id,
                title=title,
                content=content,
                created_at=datetime.now(UTC),
                game_types=game_types,
            )
            _MEM_POSTS[entity.id] = entity
            return entity

        # Supabase mode
        try:  # pragma: no cover - network
            data = {"user_id": user_id, "title": title, "content": content, "game_types": game_types}
            res = self.client.table("posts").insert(data).execute()
            return self._row_to_entity(res.data[0])
        except Exception as exc:  # pragma: no cover - network
            raise RuntimeError(f"DB insert post failed: {exc}") from exc

    def get(self, post_id: str) -> PostEntity | None:
        if self.use_local_db and self.pg_client:
            try:
                row = self.pg_client.fetch_one("SELECT * FROM posts WHERE id = %s", (post_id,))
            except Exception as exc:
                raise RuntimeError(f"PostgreSQL get post failed: {exc}") from exc
            return self._row_to_entity(row) if row else None

        if self.disabled or self.client is None:
            return _MEM_POSTS.get(post_id)

        try:  # pragma: no cover - network
            res = self.client.table("posts").select(_POST_COLUMNS).eq("id", post_id).limit(1).execute()
        except Exception as exc:  # pragma: no cover - network
            raise RuntimeError(f"DB get post failed: {exc}") from exc
        rows = res.data or []  # pragma: no cover - network
        return self._row_to_entity(rows[0]) if rows else None  # pragma: no cover - network

    def list_recent(self, limit: int) -> list[PostEntity]:
        """Newest first, at most ``limit`` rows."""
        if self.use_local_db and self.pg_client:
            try:
                rows = self.pg_client.fetch_all(
                    "SELECT * FROM posts ORDER BY created_at DESC LIMIT %s", (limit,)
                )
            except Exception as exc:
                raise RuntimeError(f"PostgreSQL list posts failed: {exc}") from exc
            return [self._row_to_entity(row) for row in rows]

        if self.disabled or self.client is None:
            return sorted(_MEM_POSTS.values(), key=lambda p: p.created_at)[::-1][:limit]

        try:  # pragma: no cover - network
            res = (
                self.client.table("posts")
                .select(_POST_COLUMNS)
                .order("created_at", desc=True)
                .limit(limit)
                .execute()
            )
        except Exception as exc:  # pragma: no cover - network
            raise RuntimeError(f"DB list posts failed: {exc}") from exc
        return [self._row_to_entity(row) for row in res.data or []]  # pragma: no cover - network

    def delete(self, post_id: str) -> bool:
        if self.use_local_db and self.pg_client:
            try:
                return self.pg_client.execute("DELETE FROM posts WHERE id = %s", (post_id,)) > 0
            except Exception as exc:
                raise RuntimeError(f"PostgreSQL delete post failed: {exc}") from exc

        if self.disabled or self.client is None:
            return _MEM_POSTS.pop(post_id, None) is not None

        try:  # pragma: no cover - network
            res = self.client.table("posts").delete().eq("id", post_id).execute()
            return bool(res.data)
        except Exception as exc:  # pragma: no cover - network
            raise RuntimeError(f"DB delete post failed: {exc}") from exc
