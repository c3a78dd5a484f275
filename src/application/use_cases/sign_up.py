from __future__ import annotations

import logging
from dataclasses import dataclass

from src.application.errors import store_errors
from src.application.use_cases.provision_profile import ProvisionOutcome, ProvisionProfileUseCase
from src.domain.entities.session import UserInfo
from src.domain.errors import BoardError, ErrorKind, is_blank
from src.infrastructure.database.repositories.profile_repository import ProfileRepository
from src.infrastructure.database.supabase_client import SupabaseAuthAdapter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SignUpResult:
    user: UserInfo | None
    # None when the gateway deferred the identity (email confirmation)
    provisioning: ProvisionOutcome | None

    @property
    def confirmation_required(self) -> bool:
        return self.user is None


@dataclass
class SignUpUseCase:
    auth: SupabaseAuthAdapter
    profiles: ProfileRepository

    def execute(self, email: str, password: str, nickname: str) -> SignUpResult:
        """
        Register a new account with a unique nickname.

        The nickname check runs before any credentials are created, so a
        taken nickname leaves no identity or profile behind. The check and
        the later insert are not atomic; the store's unique index is the
        final guard.

        Raises:
            BoardError: VALIDATION, CONFLICT, or STORE_ERROR.
        """
        if is_blank(email) or is_blank(password) or is_blank(nickname):
            raise BoardError(ErrorKind.VALIDATION, "Email, password and nickname are required.")
        email = email.strip()
        nickname = nickname.strip()

        with store_errors("check nickname"):
            taken = self.profiles.get_by_nickname(nickname)
        if taken is not None:
            raise BoardError(ErrorKind.CONFLICT, "This nickname is already taken.")

        try:
            user = self.auth.sign_up(email, password)
        except ValueError as exc:
            raise BoardError(ErrorKind.VALIDATION, str(exc)) from exc
        except RuntimeError as exc:
            logger.exception("sign-up failed for %s", email)
            raise BoardError(ErrorKind.STORE_ERROR, "Could not create the account, please try again.") from exc

        if user is None:
            logger.info("sign-up for %s awaits email confirmation, profile deferred", email)
            return SignUpResult(user=None, provisioning=None)

        outcome = ProvisionProfileUseCase(self.profiles).execute(user, nickname)
        return SignUpResult(user=user, provisioning=outcome)
