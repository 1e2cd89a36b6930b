"""
VidHub API — Like routes.
"""
from __future__ import annotations

import uuid
from typing import List, Optional, Union

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from vidhub.api.deps import get_viewer_id
from vidhub.core.database import get_db
from vidhub.schemas.schemas import LikedVideo, LikeToggleResponse, Page
from vidhub.services.likes.like_service import LikeService

router = APIRouter(prefix="/likes", tags=["Likes"])


@router.post("/toggle/v/{video_id}", response_model=LikeToggleResponse)
async def toggle_video_like(
    video_id: str,
    viewer_id: uuid.UUID = Depends(get_viewer_id),
    db: AsyncSession = Depends(get_db),
):
    return await LikeService(db).toggle_video_like(video_id, viewer_id)


@router.post("/toggle/c/{comment_id}", response_model=LikeToggleResponse)
async def toggle_comment_like(
    comment_id: str,
    viewer_id: uuid.UUID = Depends(get_viewer_id),
    db: AsyncSession = Depends(get_db),
):
    return await LikeService(db).toggle_comment_like(comment_id, viewer_id)


@router.get("/videos", response_model=Union[Page[LikedVideo], List[LikedVideo]])
async def liked_videos(
    page: Optional[int] = Query(None, ge=1),
    limit: Optional[int] = Query(None, ge=1),
    viewer_id: uuid.UUID = Depends(get_viewer_id),
    db: AsyncSession = Depends(get_db),
):
    """Videos liked by the viewer, most recently liked first. Paged only on request."""
    return await LikeService(db).liked_videos(viewer_id, page=page, limit=limit)
