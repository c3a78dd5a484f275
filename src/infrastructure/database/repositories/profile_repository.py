from __future__ import annotations

import os
from dataclasses import replace
from datetime import UTC, datetime

from supabase import Client

from src.domain.entities.profile import ProfileEntity
from src.infrastructure.database.postgres_client import get_postgres_client

# module-level in-memory store for disabled mode
_MEM_PROFILES: dict[str, ProfileEntity] = {}

_PROFILE_COLUMNS = "id,email,nickname,is_admin,banned,created_at,type"


def like_pattern(fragment: str) -> str:
    """Substring LIKE pattern with the fragment's own wildcards escaped."""
    escaped = fragment.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class ProfileRepository:
    def __init__(self, client: Client | None) -> None:
        self.client = client
        self.disabled = os.getenv("SUPABASE_DISABLED", "0") == "1"
        self.use_local_db = os.getenv("USE_LOCAL_DB", "0") == "1"
        self.pg_client = get_postgres_client() if self.use_local_db else None

    def _row_to_entity(self, row: dict) -> ProfileEntity:
        """Convert database row to ProfileEntity."""
        created_at = row.get("created_at")
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at)

        return ProfileEntity(
            id=row["id"],
            email=row.get("email"),
            nickname=row.get("nickname"),
            is_admin=bool(row.get("is_admin")),
            banned=bool(row.get("banned")),
            created_at=created_at,
            type=row.get("type"),
        )

    @property
    def _in_memory(self) -> bool:
        return self.disabled or self.client is None

    def get(self, user_id: str) -> ProfileEntity | None:
        # PostgreSQL mode
        if self.use_local_db and self.pg_client:
            try:
                row = self.pg_client.fetch_one("SELECT * FROM profiles WHERE id = %s", (user_id,))
            except Exception as exc:
                raise RuntimeError(f"PostgreSQL get profile failed: {exc}") from exc
            return self._row_to_entity(row) if row else None

        # In-memory mode
        if self._in_memory:
            return _MEM_PROFILES.get(user_id)

        # Supabase mode
        try:  # pragma: no cover - network
            res = (
                self.client.table("profiles")
                .select(_PROFILE_COLUMNS)
                .eq("id", user_id)
                .limit(1)
                .execute()
            )
        except Exception as exc:  # pragma: no cover - network
            raise RuntimeError(f"DB get profile failed: {exc}") from exc
        rows = res.data or []  # pragma: no cover - network
        return self._row_to_entity(rows[0]) if rows else None  # pragma: no cover - network

    def get_by_nickname(self, nickname: str) -> ProfileEntity | None:
        """Exact, case-sensitive nickname lookup."""
        if self.use_local_db and self.pg_client:
            try:
                row = self.pg_client.fetch_one(
                    "SELECT * FROM profiles WHERE nickname = %s LIMIT 1", (nickname,)
                )
            except Exception as exc:
                raise RuntimeError(f"PostgreSQL get profile by nickname failed: {exc}") from exc
            return self._row_to_entity(row) if row else None

        if self._in_memory:
            return next((p for p in _MEM_PROFILES.values() if p.nickname == nickname), None)

        try:  # pragma: no cover - network
            res = (
                self.client.table("profiles")
                .select(_PROFILE_COLUMNS)
                .eq("nickname", nickname)
                .limit(1)
                .execute()
            )
        except Exception as exc:  # pragma: no cover - network
            raise RuntimeError(f"DB get profile by nickname failed: {exc}") from exc
        rows = res.data or []  # pragma: no cover - network
        return self._row_to_entity(rows[0]) if rows else None  # pragma: no cover - network

    def create(self, user_id: str, email: str | None, nickname: str | None = None) -> ProfileEntity:
        """Insert a new profile. Duplicate ids or nicknames are store errors."""
        if self.use_local_db and self.pg_client:
            try:
                query = """
                    INSERT INTO profiles (id, email, nickname, created_at)
                    VALUES (%s, %s, %s, CURRENT_TIMESTAMP)
                    RETURNING *
                """
                row = self.pg_client.insert_returning(query, (user_id, email, nickname))
            except Exception as exc:
                raise RuntimeError(f"PostgreSQL insert profile failed: {exc}") from exc
            return self._row_to_entity(row)

        if self._in_memory:
            if user_id in _MEM_PROFILES:
                raise RuntimeError(f"DB insert profile failed: duplicate id {user_id}")
            if nickname is not None and self.get_by_nickname(nickname) is not None:
                raise RuntimeError(f"DB insert profile failed: duplicate nickname {nickname}")
            entity = ProfileEntity(
                id=user_id, email=email, nickname=nickname, created_at=datetime.now(UTC)
            )
            _MEM_PROFILES[user_id] = entity
            return entity

        try:  # pragma: no cover - network
            data = {"id": user_id, "email": email, "nickname": nickname}
            res = self.client.table("profiles").insert(data).execute()
            return self._row_to_entity(res.data[0])
        except Exception as exc:  # pragma: no cover - network
            raise RuntimeError(f"DB insert profile failed: {exc}") from exc

    def set_nickname(self, user_id: str, nickname: str) -> ProfileEntity | None:
        if self.use_local_db and self.pg_client:
            try:
                row = self.pg_client.fetch_one(
                    "UPDATE profiles SET nickname = %s WHERE id = %s RETURNING *",
                    (nickname, user_id),
                )
            except Exception as exc:
                raise RuntimeError(f"PostgreSQL update profile failed: {exc}") from exc
            return self._row_to_entity(row) if row else None

        if self._in_memory:
            current = _MEM_PROFILES.get(user_id)
            if current is None:
                return None
            holder = self.get_by_nickname(nickname)
            if holder is not None and holder.id != user_id:
                raise RuntimeError(f"DB update profile failed: duplicate nickname {nickname}")
            updated = replace(current, nickname=nickname)
            _MEM_PROFILES[user_id] = updated
            return updated

        try:  # pragma: no cover - network
            res = (
                self.client.table("profiles")
                .update({"nickname": nickname})
                .eq("id", user_id)
                .execute()
            )
        except Exception as exc:  # pragma: no cover - network
            raise RuntimeError(f"DB update profile failed: {exc}") from exc
        rows = res.data or []  # pragma: no cover - network
        return self._row_to_entity(rows[0]) if rows else None  # pragma: no cover - network

    def update_flags(
        self, user_id: str, *, banned: bool | None = None, is_admin: bool | None = None
    ) -> None:
        """Write the moderation flags that are not None."""
        changes: dict[str, bool] = {}
        if banned is not None:
            changes["banned"] = banned
        if is_admin is not None:
            changes["is_admin"] = is_admin
        if not changes:
            return

        if self.use_local_db and self.pg_client:
            assignments = ", ".join(f"{col} = %s" for col in changes)
            try:
                self.pg_client.execute(
                    f"UPDATE profiles SET {assignments} WHERE id = %s",
                    (*changes.values(), user_id),
                )
            except Exception as exc:
                raise RuntimeError(f"PostgreSQL update profile flags failed: {exc}") from exc
            return

        if self._in_memory:
            current = _MEM_PROFILES.get(user_id)
            if current is not None:
                _MEM_PROFILES[user_id] = replace(current, **changes)
            return

        try:  # pragma: no cover - network
            self.client.table("profiles").update(changes).eq("id", user_id).execute()
        except Exception as exc:  # pragma: no cover - network
            raise RuntimeError(f"DB update profile flags failed: {exc}") from exc

    def delete(self, user_id: str) -> bool:
        if self.use_local_db and self.pg_client:
            try:
                return self.pg_client.execute("DELETE FROM profiles WHERE id = %s", (user_id,)) > 0
            except Exception as exc:
                raise RuntimeError(f"PostgreSQL delete profile failed: {exc}") from exc

        if self._in_memory:
            return _MEM_PROFILES.pop(user_id, None) is not None

        try:  # pragma: no cover - network
            res = self.client.table("profiles").delete().eq("id", user_id).execute()
            return bool(res.data)
        except Exception as exc:  # pragma: no cover - network
            raise RuntimeError(f"DB delete profile failed: {exc}") from exc

    def list_recent(self, limit: int) -> list[ProfileEntity]:
        """All profiles, newest first."""
        if self.use_local_db and self.pg_client:
            try:
                rows = self.pg_client.fetch_all(
                    "SELECT * FROM profiles ORDER BY created_at DESC LIMIT %s", (limit,)
                )
            except Exception as exc:
                raise RuntimeError(f"PostgreSQL list profiles failed: {exc}") from exc
            return [self._row_to_entity(row) for row in rows]

        if self._in_memory:
            return sorted(_MEM_PROFILES.values(), key=lambda p: p.created_at)[::-1][:limit]

        try:  # pragma: no cover - network
            res = (
                self.client.table("profiles")
                .select(_PROFILE_COLUMNS)
                .order("created_at", desc=True)
                .limit(limit)
                .execute()
            )
        except Exception as exc:  # pragma: no cover - network
            raise RuntimeError(f"DB list profiles failed: {exc}") from exc
        return [self._row_to_entity(row) for row in res.data or []]  # pragma: no cover - network

    def search_by_nickname(self, fragment: str, limit: int) -> list[ProfileEntity]:
        """Case-insensitive substring match on nickname."""
        if self.use_local_db and self.pg_client:
            try:
                rows = self.pg_client.fetch_all(
                    "SELECT * FROM profiles WHERE nickname ILIKE %s LIMIT %s",
                    (like_pattern(fragment), limit),
                )
            except Exception as exc:
                raise RuntimeError(f"PostgreSQL search profiles failed: {exc}") from exc
            return [self._row_to_entity(row) for row in rows]

        if self._in_memory:
            needle = fragment.lower()
            hits = [p for p in _MEM_PROFILES.values() if p.nickname and needle in p.nickname.lower()]
            return hits[:limit]

        try:  # pragma: no cover - network
            res = (
                self.client.table("profiles")
                .select(_PROFILE_COLUMNS)
                .ilike("nickname", like_pattern(fragment))
                .limit(limit)
                .execute()
            )
        except Exception as exc:  # pragma: no cover - network
            raise RuntimeError(f"DB search profiles failed: {exc}") from exc
        return [self._row_to_entity(row) for row in res.data or []]  # pragma: no cover - network

    def nicknames_by_ids(self, user_ids: list[str]) -> dict[str, str | None]:
        """Resolve many profile ids to nicknames with a single query.

        Ids without a profile are absent from the result.
        """
        if not user_ids:
            return {}

        if self.use_local_db and self.pg_client:
            try:
                rows = self.pg_client.fetch_all(
                    "SELECT id, nickname FROM profiles WHERE id = ANY(%s)", (list(user_ids),)
                )
            except Exception as exc:
                raise RuntimeError(f"PostgreSQL resolve nicknames failed: {exc}") from exc
            return {str(row["id"]): row.get("nickname") for row in rows}

        if self._in_memory:
            return {uid: _MEM_PROFILES[uid].nickname for uid in user_ids if uid in _MEM_PROFILES}

        try:  # pragma: no cover - network
            res = self.client.table("profiles").select("id,nickname").in_("id", list(user_ids)).execute()
        except Exception as exc:  # pragma: no cover - network
            raise RuntimeError(f"DB resolve nicknames failed: {exc}") from exc
        return {row["id"]: row.get("nickname") for row in res.data or []}  # pragma: no cover - network
