"""
VidHub Subscription Service — channel subscription toggles and the two
subscription views (who subscribes to a channel, whom a user subscribes to).
"""
from __future__ import annotations

import uuid
from typing import List, Optional, Union

from sqlalchemy.ext.asyncio import AsyncSession

from vidhub.core.errors import NotFoundError
from vidhub.core.validation import parse_id
from vidhub.models.models import User
from vidhub.schemas.schemas import (
    Page,
    SubscribedChannelEntry,
    SubscriberEntry,
    SubscriptionToggleResponse,
)
from vidhub.services.aggregation.query_builder import (
    channel_subscribers_query,
    latest_videos_query,
    subscribed_channels_query,
    to_subscribed_channel_entry,
    to_subscriber_entry,
)
from vidhub.services.pagination.paginator import paginate
from vidhub.services.relations.toggle_service import RelationKind, ToggleRelationEngine


class SubscriptionService:

    def __init__(self, db: AsyncSession, allow_self_subscription: Optional[bool] = None):
        self.db = db
        self.engine = ToggleRelationEngine(db, allow_self_subscription=allow_self_subscription)

    async def toggle_subscription(self, channel_id: str, actor_id: uuid.UUID) -> SubscriptionToggleResponse:
        cid = parse_id(channel_id, "channelId")
        if await self.db.get(User, cid) is None:
            raise NotFoundError("Channel not found")
        result = await self.engine.toggle(actor_id, RelationKind.SUBSCRIPTION, cid)
        return SubscriptionToggleResponse(subscribed=result.active)

    async def channel_subscribers(
        self,
        channel_id: str,
        viewer_id: Optional[uuid.UUID] = None,
        page: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> Union[List[SubscriberEntry], Page[SubscriberEntry]]:
        cid = parse_id(channel_id, "channelId")
        stmt = channel_subscribers_query(cid, viewer_id=viewer_id)
        if page is not None or limit is not None:
            return await paginate(self.db, stmt, page, limit, to_subscriber_entry)
        result = await self.db.execute(stmt)
        return [to_subscriber_entry(row) for row in result.all()]

    async def subscribed_channels(
        self,
        subscriber_id: str,
        page: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> Union[List[SubscribedChannelEntry], Page[SubscribedChannelEntry]]:
        sid = parse_id(subscriber_id, "subscriberId")
        stmt = subscribed_channels_query(sid)

        if page is not None or limit is not None:
            window = await paginate(self.db, stmt, page, limit, lambda row: row[0])
            window.items = await self._with_latest_videos(window.items)
            return window

        channels = list((await self.db.execute(stmt)).scalars().all())
        return await self._with_latest_videos(channels)

    async def _with_latest_videos(self, channels: List[User]) -> List[SubscribedChannelEntry]:
        # Batch the latest-video lookup for all channels at once
        latest = {}
        if channels:
            result = await self.db.execute(latest_videos_query(c.id for c in channels))
            latest = {video.owner_id: video for video in result.scalars().all()}
        return [to_subscribed_channel_entry(channel, latest) for channel in channels]
