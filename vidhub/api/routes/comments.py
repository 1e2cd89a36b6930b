"""
VidHub API — Comment routes.

Comment feed for a video, and owner-only edit/delete.
"""
from __future__ import annotations

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from vidhub.api.deps import get_optional_viewer_id, get_viewer_id
from vidhub.core.config import get_settings
from vidhub.core.database import get_db
from vidhub.schemas.schemas import (
    CommentCreate,
    CommentDeleted,
    CommentFeedItem,
    CommentSchema,
    CommentUpdate,
    Page,
)
from vidhub.services.aggregation.query_builder import CommentSort
from vidhub.services.comments.comment_service import CommentService

settings = get_settings()
router = APIRouter(prefix="/comments", tags=["Comments"])


@router.get("/{video_id}", response_model=Page[CommentFeedItem])
async def list_video_comments(
    video_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    sort: CommentSort = Query(CommentSort.OLDEST),
    viewer_id: Optional[uuid.UUID] = Depends(get_optional_viewer_id),
    db: AsyncSession = Depends(get_db),
):
    """Paginated comments of a video with like counts and the viewer's like flag."""
    return await CommentService(db).list_video_comments(
        video_id, page=page, limit=limit, viewer_id=viewer_id, sort=sort,
    )


@router.post("/{video_id}", response_model=CommentSchema, status_code=201)
async def add_comment(
    video_id: str,
    data: CommentCreate,
    viewer_id: uuid.UUID = Depends(get_viewer_id),
    db: AsyncSession = Depends(get_db),
):
    return await CommentService(db).add_comment(video_id, data.content, viewer_id)


@router.patch("/c/{comment_id}", response_model=CommentSchema)
async def update_comment(
    comment_id: str,
    data: CommentUpdate,
    viewer_id: uuid.UUID = Depends(get_viewer_id),
    db: AsyncSession = Depends(get_db),
):
    """Edit a comment. Only its owner may do so."""
    return await CommentService(db).update_comment(comment_id, data.content, viewer_id)


@router.delete("/c/{comment_id}", response_model=CommentDeleted)
async def delete_comment(
    comment_id: str,
    viewer_id: uuid.UUID = Depends(get_viewer_id),
    db: AsyncSession = Depends(get_db),
):
    return await CommentService(db).delete_comment(comment_id, viewer_id)
