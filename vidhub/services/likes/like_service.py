"""
VidHub Like Service — video/comment like toggles and the liked-videos feed.
"""
from __future__ import annotations

import uuid
from typing import List, Optional, Union

from sqlalchemy.ext.asyncio import AsyncSession

from vidhub.core.errors import NotFoundError
from vidhub.core.validation import parse_id
from vidhub.models.models import Comment, Video
from vidhub.schemas.schemas import LikedVideo, LikeToggleResponse, Page
from vidhub.services.aggregation.query_builder import liked_videos_query, to_liked_video
from vidhub.services.pagination.paginator import paginate
from vidhub.services.relations.toggle_service import RelationKind, ToggleRelationEngine


class LikeService:

    def __init__(self, db: AsyncSession):
        self.db = db
        self.engine = ToggleRelationEngine(db)

    async def toggle_video_like(self, video_id: str, actor_id: uuid.UUID) -> LikeToggleResponse:
        vid = parse_id(video_id, "videoId")
        if await self.db.get(Video, vid) is None:
            raise NotFoundError("Video not found")
        result = await self.engine.toggle(actor_id, RelationKind.VIDEO_LIKE, vid)
        return LikeToggleResponse(is_liked=result.active)

    async def toggle_comment_like(self, comment_id: str, actor_id: uuid.UUID) -> LikeToggleResponse:
        cid = parse_id(comment_id, "commentId")
        if await self.db.get(Comment, cid) is None:
            raise NotFoundError("Comment not found")
        result = await self.engine.toggle(actor_id, RelationKind.COMMENT_LIKE, cid)
        return LikeToggleResponse(is_liked=result.active)

    async def liked_videos(
        self,
        viewer_id: uuid.UUID,
        page: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> Union[List[LikedVideo], Page[LikedVideo]]:
        """Full list by default; a page when the caller asks for one."""
        stmt = liked_videos_query(viewer_id)
        if page is not None or limit is not None:
            return await paginate(self.db, stmt, page, limit, to_liked_video)
        result = await self.db.execute(stmt)
        return [to_liked_video(row) for row in result.all()]
