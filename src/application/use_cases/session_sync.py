from __future__ import annotations

import logging
from dataclasses import dataclass

from src.application.use_cases.provision_profile import ProvisionProfileUseCase
from src.domain.entities.session import Session, SessionState
from src.domain.errors import BoardError, ErrorKind, is_blank
from src.infrastructure.database.repositories.profile_repository import ProfileRepository
from src.infrastructure.database.supabase_client import SupabaseAuthAdapter

logger = logging.getLogger(__name__)

LANDING_PATH = "/"
BANNED_NOTICE = "Your account has been blocked."


@dataclass
class RefreshSessionUseCase:
    """
    Derive the client's session state from the current session.

    Re-entrant; the client calls it after every sign-in, sign-out and
    sign-up. A banned profile is never reported as signed in: its session
    is revoked and the state carries a blocking notice and a redirect.
    """

    auth: SupabaseAuthAdapter
    profiles: ProfileRepository

    def execute(self, session: Session | None) -> SessionState:
        if session is None:
            return SessionState.signed_out()

        user = session.user
        ProvisionProfileUseCase(self.profiles).execute(user)

        try:
            profile = self.profiles.get(user.id)
        except RuntimeError:
            logger.warning("profile fetch failed for user %s", user.id, exc_info=True)
            profile = None

        if profile is not None and profile.banned:
            self._expel(session)
            return SessionState.signed_out(notice=BANNED_NOTICE, redirect_to=LANDING_PATH)

        return SessionState(
            signed_in=True,
            user_id=user.id,
            email=user.email,
            nickname=profile.nickname if profile else None,
            is_admin=bool(profile and profile.is_admin),
        )

    def _expel(self, session: Session) -> None:
        logger.info("signing out banned user %s", session.user.id)
        try:
            self.auth.sign_out(session.access_token)
        except RuntimeError:
            # the next refresh expels again while the token stays valid
            logger.exception("could not revoke session of banned user %s", session.user.id)


@dataclass
class SignInUseCase:
    auth: SupabaseAuthAdapter
    profiles: ProfileRepository

    def execute(self, email: str, password: str) -> tuple[Session | None, SessionState]:
        """
        Password sign-in followed by a session refresh.

        Returns the session only when the resulting state is signed in, so a
        banned user never walks away with a usable token.
        """
        if is_blank(email) or is_blank(password):
            raise BoardError(ErrorKind.VALIDATION, "Email and password are required.")
        try:
            session = self.auth.sign_in(email.strip(), password)
        except ValueError as exc:
            raise BoardError(ErrorKind.AUTH, str(exc)) from exc
        except RuntimeError as exc:
            logger.exception("sign-in failed for %s", email)
            raise BoardError(ErrorKind.STORE_ERROR, "Could not sign in, please try again.") from exc

        state = RefreshSessionUseCase(self.auth, self.profiles).execute(session)
        return (session if state.signed_in else None), state


@dataclass
class SignOutUseCase:
    auth: SupabaseAuthAdapter

    def execute(self, session: Session | None) -> SessionState:
        if session is not None:
            try:
                self.auth.sign_out(session.access_token)
            except RuntimeError:
                logger.exception("sign-out failed for user %s", session.user.id)
        return SessionState.signed_out(redirect_to=LANDING_PATH)
