from __future__ import annotations

from dataclasses import dataclass

from src.application.errors import store_errors
from src.application.use_cases.provision_profile import ProvisionProfileUseCase
from src.domain.entities.profile import ProfileEntity
from src.domain.entities.session import Session
from src.domain.errors import BoardError, ErrorKind, is_blank
from src.infrastructure.database.repositories.profile_repository import ProfileRepository


@dataclass
class UpdateNicknameUseCase:
    """Let a user pick or change their own nickname."""

    profiles: ProfileRepository

    def execute(self, session: Session | None, nickname: str) -> ProfileEntity:
        if session is None:
            raise BoardError(ErrorKind.AUTH, "You must be signed in.")
        if is_blank(nickname):
            raise BoardError(ErrorKind.VALIDATION, "Nickname cannot be empty.")
        nickname = nickname.strip()
        uid = session.user.id

        with store_errors("load your profile"):
            profile = self.profiles.get(uid)
        if profile is not None and profile.banned:
            raise BoardError(ErrorKind.FORBIDDEN, "Your account is blocked.")

        with store_errors("check nickname"):
            holder = self.profiles.get_by_nickname(nickname)
        if holder is not None and holder.id != uid:
            raise BoardError(ErrorKind.CONFLICT, "This nickname is already taken.")

        if profile is None:
            ProvisionProfileUseCase(self.profiles).execute(session.user)
        with store_errors("update nickname"):
            updated = self.profiles.set_nickname(uid, nickname)
        if updated is None:
            raise BoardError(ErrorKind.NOT_FOUND, "Profile not found.")
        return updated
