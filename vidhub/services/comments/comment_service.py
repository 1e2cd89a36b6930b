"""
VidHub Comment Service — comment feed plus owner-guarded edits.

Check order for every mutation: input validation, existence, ownership,
then the write. Nothing is written before all checks pass.
"""
from __future__ import annotations

import logging
import uuid
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from vidhub.core.errors import NotFoundError, PersistenceError
from vidhub.core.validation import parse_id, require_text
from vidhub.models.models import Comment, Like, Video
from vidhub.schemas.schemas import CommentDeleted, CommentFeedItem, CommentSchema, Page
from vidhub.services.aggregation.query_builder import (
    CommentSort,
    comment_feed_query,
    to_comment_feed_item,
)
from vidhub.services.ownership.ownership_guard import ensure_owner
from vidhub.services.pagination.paginator import paginate

logger = logging.getLogger(__name__)


def to_comment_schema(comment: Comment) -> CommentSchema:
    return CommentSchema(
        id=str(comment.id),
        content=comment.content,
        video=str(comment.video_id),
        owner=str(comment.owner_id),
        created_at=comment.created_at,
        updated_at=comment.updated_at,
    )


class CommentService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_video_comments(
        self,
        video_id: str,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        viewer_id: Optional[uuid.UUID] = None,
        sort: CommentSort = CommentSort.OLDEST,
    ) -> Page[CommentFeedItem]:
        vid = parse_id(video_id, "videoId")
        stmt = comment_feed_query(vid, viewer_id=viewer_id, sort=sort)
        return await paginate(self.db, stmt, page, limit, to_comment_feed_item)

    async def add_comment(self, video_id: str, content: Optional[str], actor_id: uuid.UUID) -> CommentSchema:
        content = require_text(content, "Content is required")
        vid = parse_id(video_id, "videoId")

        if await self.db.get(Video, vid) is None:
            raise NotFoundError("Video not found")

        comment = Comment(content=content, video_id=vid, owner_id=actor_id)
        self.db.add(comment)
        await self.db.commit()
        await self.db.refresh(comment)
        if comment.id is None:
            raise PersistenceError("Failed to add comment please try again")

        logger.info(f"Comment {comment.id} added to video {vid} by {actor_id}")
        return to_comment_schema(comment)

    async def update_comment(self, comment_id: str, content: Optional[str], actor_id: uuid.UUID) -> CommentSchema:
        content = require_text(content, "Content is required")
        cid = parse_id(comment_id, "commentId")

        comment = await self._get_comment(cid)
        ensure_owner(comment, actor_id, "Only comment owner can edit their comment")

        comment.content = content
        await self.db.commit()
        await self.db.refresh(comment)
        return to_comment_schema(comment)

    async def delete_comment(self, comment_id: str, actor_id: uuid.UUID) -> CommentDeleted:
        cid = parse_id(comment_id, "commentId")

        comment = await self._get_comment(cid)
        ensure_owner(comment, actor_id, "Only comment owner can delete their comment")

        await self.db.execute(delete(Like).where(Like.comment_id == cid))
        result = await self.db.execute(delete(Comment).where(Comment.id == cid))
        if result.rowcount == 0:
            await self.db.rollback()
            raise PersistenceError("Failed to delete comment please try again")
        await self.db.commit()

        logger.info(f"Comment {cid} deleted by {actor_id}")
        return CommentDeleted(comment_id=str(cid))

    async def _get_comment(self, cid: uuid.UUID) -> Comment:
        comment = await self.db.scalar(select(Comment).where(Comment.id == cid))
        if comment is None:
            raise NotFoundError("Comment not found")
        return comment
