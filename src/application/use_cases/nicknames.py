from __future__ import annotations

import logging
from typing import Iterable

from src.infrastructure.database.repositories.profile_repository import ProfileRepository

logger = logging.getLogger(__name__)


def resolve_nicknames(profiles: ProfileRepository, user_ids: Iterable[str | None]) -> dict[str, str]:
    """Map the distinct ids to nicknames using one batched query.

    Ids without a profile or without a nickname are left out so callers
    can apply their own fallback. A failed lookup degrades to an empty map.
    """
    unique = list(dict.fromkeys(uid for uid in user_ids if uid))
    if not unique:
        return {}
    try:
        found = profiles.nicknames_by_ids(unique)
    except RuntimeError:
        logger.warning("nickname lookup failed for %d ids", len(unique), exc_info=True)
        return {}
    return {uid: nick for uid, nick in found.items() if nick}
