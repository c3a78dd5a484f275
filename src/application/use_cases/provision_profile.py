from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from src.domain.entities.session import UserInfo
from src.infrastructure.database.repositories.profile_repository import ProfileRepository

logger = logging.getLogger(__name__)


class ProvisionOutcome(str, Enum):
    SKIPPED = "skipped"  # no identity to provision
    EXISTS = "exists"
    CREATED = "created"
    FAILED = "failed"


@dataclass
class ProvisionProfileUseCase:
    """
    Make sure an authenticated identity has a profile row.

    This is a soft operation: it never raises. Callers may inspect the
    outcome but are not expected to act on it.
    """

    profiles: ProfileRepository

    def execute(self, user: UserInfo | None, nickname: str | None = None) -> ProvisionOutcome:
        if user is None or not user.id:
            return ProvisionOutcome.SKIPPED
        try:
            if self.profiles.get(user.id) is not None:
                return ProvisionOutcome.EXISTS
            self.profiles.create(user.id, user.email, nickname or None)
        except Exception:
            logger.exception("profile provisioning failed for user %s", user.id)
            return ProvisionOutcome.FAILED
        logger.info("Profile created for user %s", user.id)
        return ProvisionOutcome.CREATED
