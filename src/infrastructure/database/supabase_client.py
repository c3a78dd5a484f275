from __future__ import annotations

import hashlib
import logging
import os
import secrets
import uuid
from dataclasses import dataclass

from supabase import Client, create_client

from src.domain.entities.session import Session, UserInfo

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _MemIdentity:
    user: UserInfo
    password_sha256: str
    confirmed: bool


# module-level in-memory identities for disabled mode, keyed by email
_MEM_IDENTITIES: dict[str, _MemIdentity] = {}
# access token -> user
_MEM_SESSIONS: dict[str, UserInfo] = {}


def _gateway_error(exc: Exception, action: str) -> Exception:
    """Classify a Supabase Auth failure.

    4xx answers (bad credentials, duplicate email, weak password) become
    ``ValueError``; anything else is an unreachable or failing gateway.
    """
    status = getattr(exc, "status", None)
    if isinstance(status, int) and 400 <= status < 500:
        return ValueError(str(exc))
    return RuntimeError(f"Auth {action} failed: {exc}")


class SupabaseAuthAdapter:
    """Identity gateway: sign-up, password sign-in, session lookup, sign-out.

    When SUPABASE_DISABLED=1 identities and sessions live in process memory.
    SUPABASE_FAKE_EMAIL_CONFIRMATION=1 makes the in-memory sign-up defer the
    identity the way a project with email confirmation does.
    """

    def __init__(self, require_confirmation: bool | None = None) -> None:
        self.disabled = os.getenv("SUPABASE_DISABLED", "0") == "1"
        self.url = os.getenv("SUPABASE_URL")
        self.key = os.getenv("SUPABASE_ANON_KEY")
        if require_confirmation is None:
            require_confirmation = os.getenv("SUPABASE_FAKE_EMAIL_CONFIRMATION", "0") == "1"
        self.require_confirmation = require_confirmation
        self._client: Client | None = None
        if not self.disabled and self.url and self.key:
            self._client = create_client(self.url, self.key)

    @property
    def in_memory(self) -> bool:
        return self.disabled or self._client is None

    def sign_up(self, email: str, password: str) -> UserInfo | None:
        """Create credentials. Returns None when the identity is not usable yet."""
        if self.in_memory:
            if email.lower() in _MEM_IDENTITIES:
                raise ValueError("User already registered")
            user = UserInfo(id=str(uuid.uuid4()), email=email)
            _MEM_IDENTITIES[email.lower()] = _MemIdentity(
                user=user,
                password_sha256=hashlib.sha256(password.encode()).hexdigest(),
                confirmed=not self.require_confirmation,
            )
            return None if self.require_confirmation else user
        try:  # pragma: no cover - network
            res = self._client.auth.sign_up({"email": email, "password": password})
        except Exception as exc:  # pragma: no cover - network
            raise _gateway_error(exc, "sign-up") from exc
        user = res.user  # pragma: no cover - network
        if user is None:  # pragma: no cover - network
            return None
        return UserInfo(id=user.id, email=user.email)  # pragma: no cover - network

    def sign_in(self, email: str, password: str) -> Session:
        if self.in_memory:
            ident = _MEM_IDENTITIES.get(email.lower())
            digest = hashlib.sha256(password.encode()).hexdigest()
            if ident is None or not secrets.compare_digest(ident.password_sha256, digest):
                raise ValueError("Invalid login credentials")
            if not ident.confirmed:
                raise ValueError("Email not confirmed")
            token = secrets.token_urlsafe(32)
            _MEM_SESSIONS[token] = ident.user
            return Session(access_token=token, user=ident.user)
        try:  # pragma: no cover - network
            res = self._client.auth.sign_in_with_password({"email": email, "password": password})
        except Exception as exc:  # pragma: no cover - network
            raise _gateway_error(exc, "sign-in") from exc
        if res.session is None or res.user is None:  # pragma: no cover - network
            raise ValueError("Sign-in did not return a session")
        return Session(  # pragma: no cover - network
            access_token=res.session.access_token,
            user=UserInfo(id=res.user.id, email=res.user.email),
        )

    def get_session(self, token: str | None) -> Session | None:
        """Resolve a bearer token to its session, or None if it is not valid."""
        if not token:
            return None
        if self.in_memory:
            user = _MEM_SESSIONS.get(token)
            return Session(access_token=token, user=user) if user else None
        try:  # pragma: no cover - network
            res = self._client.auth.get_user(token)
        except Exception as exc:  # pragma: no cover - network
            err = _gateway_error(exc, "session lookup")
            if isinstance(err, ValueError):
                return None
            raise err from exc
        user = res.user if res else None  # pragma: no cover - network
        if not user:  # pragma: no cover - network
            return None
        return Session(access_token=token, user=UserInfo(id=user.id, email=user.email))  # pragma: no cover

    def sign_out(self, token: str) -> None:
        if self.in_memory:
            _MEM_SESSIONS.pop(token, None)
            return
        try:  # pragma: no cover - network
            self._client.auth.admin.sign_out(token)
        except Exception as exc:  # pragma: no cover - network
            raise RuntimeError(f"Auth sign-out failed: {exc}") from exc


# Simple reusable singleton client getter for repositories
_CLIENT_SINGLETON: Client | None = None


def get_supabase_client() -> Client | None:
    global _CLIENT_SINGLETON
    disabled = os.getenv("SUPABASE_DISABLED", "0") == "1"
    url = os.getenv("SUPABASE_URL")
    key = os.getenv("SUPABASE_ANON_KEY")
    if disabled or not url or not key:
        return None
    if _CLIENT_SINGLETON is None:
        _CLIENT_SINGLETON = create_client(url, key)
    return _CLIENT_SINGLETON
