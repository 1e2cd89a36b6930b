"""
VidHub Ownership Guard — may this viewer mutate this entity?

Comments and playlists carry an ``owner_id``. The guard is a pure decision:
it never touches the store, and it is always consulted after the entity has
been loaded (a missing entity is a NotFound, not a denial).
"""
from __future__ import annotations

import enum
import uuid
from typing import Any, Optional, Protocol

from vidhub.core.errors import UnauthorizedError


class Owned(Protocol):
    owner_id: Any


class Decision(str, enum.Enum):
    ALLOWED = "allowed"
    DENIED = "denied"


def _canonical(identity: Any) -> Optional[uuid.UUID]:
    if identity is None:
        return None
    if isinstance(identity, uuid.UUID):
        return identity
    try:
        return uuid.UUID(str(identity))
    except ValueError:
        return None


def authorize(entity: Owned, viewer_id: Any) -> Decision:
    owner = _canonical(getattr(entity, "owner_id", None))
    viewer = _canonical(viewer_id)
    if owner is None or viewer is None or owner != viewer:
        return Decision.DENIED
    return Decision.ALLOWED


def ensure_owner(entity: Owned, viewer_id: Any, message: str) -> None:
    """Raise UnauthorizedError unless ``viewer_id`` owns ``entity``."""
    if authorize(entity, viewer_id) is Decision.DENIED:
        raise UnauthorizedError(message)
