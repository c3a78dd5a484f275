from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from src.domain.errors import BoardError, ErrorKind

logger = logging.getLogger(__name__)


@contextmanager
def store_errors(action: str) -> Iterator[None]:
    """Turn record store / gateway failures into a logged STORE_ERROR."""
    try:
        yield
    except RuntimeError as exc:
        logger.exception("%s failed", action)
        raise BoardError(ErrorKind.STORE_ERROR, f"Could not {action}, please try again.") from exc
