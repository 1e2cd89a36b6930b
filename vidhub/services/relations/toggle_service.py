"""
VidHub Toggle Relation Engine — flip binary relation facts.

A toggle looks for the (actor, kind, target) fact and deletes it when it
exists, or creates it when it does not. The outcome is always one of the two
states; there is no no-op.

Lookup and write are separate statements, so two concurrent toggles can both
see "absent". The unique constraints on ``likes`` and ``subscriptions`` make
the losing create fail with an IntegrityError; that loser then deletes the
row the winner created and reports the relation inactive, so no duplicate
fact is ever stored.
"""
from __future__ import annotations

import enum
import logging
import uuid
from dataclasses import dataclass
from typing import Any, List, Tuple, Type

from prometheus_client import Counter
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from vidhub.core.config import get_settings
from vidhub.core.errors import ValidationError
from vidhub.models.models import Like, Subscription

logger = logging.getLogger(__name__)
settings = get_settings()

RELATION_TOGGLES = Counter(
    "vidhub_relation_toggles_total",
    "Relation toggles by kind and resulting state",
    ["kind", "state"],
)


class RelationKind(str, enum.Enum):
    VIDEO_LIKE = "video_like"
    COMMENT_LIKE = "comment_like"
    SUBSCRIPTION = "subscription"


@dataclass(frozen=True)
class ToggleResult:
    active: bool


class ToggleRelationEngine:
    """Check-then-act toggle over likes and subscriptions."""

    def __init__(self, db: AsyncSession, allow_self_subscription: bool | None = None):
        self.db = db
        if allow_self_subscription is None:
            allow_self_subscription = settings.allow_self_subscription
        self.allow_self_subscription = allow_self_subscription

    # ── Public API ───────────────────────────────────────────────────

    async def toggle(self, actor_id: uuid.UUID, kind: RelationKind, target_id: uuid.UUID) -> ToggleResult:
        if kind is RelationKind.SUBSCRIPTION and actor_id == target_id and not self.allow_self_subscription:
            raise ValidationError("Cannot subscribe to your own channel")

        model, criteria = self._criteria(kind, actor_id, target_id)

        existing = await self.db.scalar(select(model.id).where(*criteria).limit(1))
        if existing is not None:
            await self._remove(model, criteria)
            return self._done(kind, actor_id, target_id, active=False)

        self.db.add(self._build(kind, actor_id, target_id))
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            logger.info(f"Concurrent {kind.value} create for {actor_id} -> {target_id}; toggling off")
            await self._remove(model, criteria)
            return self._done(kind, actor_id, target_id, active=False)

        return self._done(kind, actor_id, target_id, active=True)

    async def is_active(self, actor_id: uuid.UUID, kind: RelationKind, target_id: uuid.UUID) -> bool:
        model, criteria = self._criteria(kind, actor_id, target_id)
        found = await self.db.scalar(select(model.id).where(*criteria).limit(1))
        return found is not None

    # ── Internals ────────────────────────────────────────────────────

    @staticmethod
    def _criteria(kind: RelationKind, actor_id: uuid.UUID, target_id: uuid.UUID) -> Tuple[Type[Any], List[Any]]:
        if kind is RelationKind.VIDEO_LIKE:
            return Like, [Like.liked_by_id == actor_id, Like.video_id == target_id]
        if kind is RelationKind.COMMENT_LIKE:
            return Like, [Like.liked_by_id == actor_id, Like.comment_id == target_id]
        return Subscription, [Subscription.subscriber_id == actor_id, Subscription.channel_id == target_id]

    @staticmethod
    def _build(kind: RelationKind, actor_id: uuid.UUID, target_id: uuid.UUID):
        if kind is RelationKind.VIDEO_LIKE:
            return Like(liked_by_id=actor_id, video_id=target_id)
        if kind is RelationKind.COMMENT_LIKE:
            return Like(liked_by_id=actor_id, comment_id=target_id)
        return Subscription(subscriber_id=actor_id, channel_id=target_id)

    async def _remove(self, model, criteria) -> None:
        # Zero rows affected means a concurrent toggle already removed it
        await self.db.execute(delete(model).where(*criteria))
        await self.db.commit()

    @staticmethod
    def _done(kind: RelationKind, actor_id, target_id, active: bool) -> ToggleResult:
        RELATION_TOGGLES.labels(kind=kind.value, state="on" if active else "off").inc()
        logger.debug(f"Toggled {kind.value} {actor_id} -> {target_id}: active={active}")
        return ToggleResult(active=active)
