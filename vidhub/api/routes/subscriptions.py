"""
VidHub API — Subscription routes.

  - POST /subscriptions/c/{channel_id} — toggle the viewer's subscription
  - GET  /subscriptions/c/{channel_id} — subscribers of a channel
  - GET  /subscriptions/u/{subscriber_id} — channels a user subscribes to
"""
from __future__ import annotations

import uuid
from typing import List, Optional, Union

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from vidhub.api.deps import get_optional_viewer_id, get_viewer_id
from vidhub.core.database import get_db
from vidhub.schemas.schemas import (
    Page,
    SubscribedChannelEntry,
    SubscriberEntry,
    SubscriptionToggleResponse,
)
from vidhub.services.subscriptions.subscription_service import SubscriptionService

router = APIRouter(prefix="/subscriptions", tags=["Subscriptions"])


@router.post("/c/{channel_id}", response_model=SubscriptionToggleResponse)
async def toggle_subscription(
    channel_id: str,
    viewer_id: uuid.UUID = Depends(get_viewer_id),
    db: AsyncSession = Depends(get_db),
):
    return await SubscriptionService(db).toggle_subscription(channel_id, viewer_id)


@router.get("/c/{channel_id}", response_model=Union[Page[SubscriberEntry], List[SubscriberEntry]])
async def channel_subscribers(
    channel_id: str,
    page: Optional[int] = Query(None, ge=1),
    limit: Optional[int] = Query(None, ge=1),
    viewer_id: Optional[uuid.UUID] = Depends(get_optional_viewer_id),
    db: AsyncSession = Depends(get_db),
):
    return await SubscriptionService(db).channel_subscribers(
        channel_id, viewer_id=viewer_id, page=page, limit=limit,
    )


@router.get("/u/{subscriber_id}", response_model=Union[Page[SubscribedChannelEntry], List[SubscribedChannelEntry]])
async def subscribed_channels(
    subscriber_id: str,
    page: Optional[int] = Query(None, ge=1),
    limit: Optional[int] = Query(None, ge=1),
    db: AsyncSession = Depends(get_db),
):
    """Channels the user subscribes to, each with its newest video."""
    return await SubscriptionService(db).subscribed_channels(subscriber_id, page=page, limit=limit)
