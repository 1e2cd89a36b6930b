"""
VidHub Playlist Service — owner-managed playlists with set membership.

Adding a video is a set-add: the (playlist, video) pair is unique, so a
second add of the same video leaves the playlist unchanged. Removing a
video that is not in the playlist is a no-op. Every membership change
bumps the playlist's ``updated_at``.
"""
from __future__ import annotations

import logging
import uuid
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from vidhub.core.errors import NotFoundError, PersistenceError
from vidhub.core.validation import parse_id, require_text
from vidhub.models.models import Playlist, PlaylistVideo, Video, utc_now
from vidhub.schemas.schemas import PlaylistDeleted, PlaylistDetail, PlaylistSchema, PlaylistSummary
from vidhub.services.aggregation.query_builder import (
    playlist_summary_query,
    playlist_videos_query,
    to_owned_video_card,
    to_playlist_summary,
)
from vidhub.services.ownership.ownership_guard import ensure_owner

logger = logging.getLogger(__name__)


def to_playlist_schema(playlist: Playlist) -> PlaylistSchema:
    return PlaylistSchema(
        id=str(playlist.id),
        name=playlist.name,
        description=playlist.description or "",
        owner=str(playlist.owner_id),
        videos=[str(v) for v in playlist.video_ids],
        created_at=playlist.created_at,
        updated_at=playlist.updated_at,
    )


class PlaylistService:

    def __init__(self, db: AsyncSession):
        self.db = db

    # ── Playlist records ─────────────────────────────────────────────

    async def create_playlist(self, name: Optional[str], description: Optional[str], actor_id: uuid.UUID) -> PlaylistSchema:
        name = require_text(name, "name is required")

        playlist = Playlist(name=name, description=(description or "").strip(), owner_id=actor_id)
        self.db.add(playlist)
        await self.db.commit()
        await self.db.refresh(playlist, ["items"])
        if playlist.id is None:
            raise PersistenceError("failed to create playlist")

        logger.info(f"Playlist {playlist.id} created by {actor_id}")
        return to_playlist_schema(playlist)

    async def update_playlist(
        self,
        playlist_id: str,
        name: Optional[str],
        description: Optional[str],
        actor_id: uuid.UUID,
    ) -> PlaylistSchema:
        name = require_text(name, "name is required")
        pid = parse_id(playlist_id, "playlistId")

        playlist = await self._get_playlist(pid)
        ensure_owner(playlist, actor_id, "only owner can edit the playlist")

        playlist.name = name
        if description is not None:
            playlist.description = description.strip()
        playlist.updated_at = utc_now()
        await self.db.commit()
        return await self._fresh(playlist)

    async def delete_playlist(self, playlist_id: str, actor_id: uuid.UUID) -> PlaylistDeleted:
        pid = parse_id(playlist_id, "playlistId")

        playlist = await self._get_playlist(pid)
        ensure_owner(playlist, actor_id, "only owner can delete the playlist")

        await self.db.delete(playlist)
        await self.db.commit()

        logger.info(f"Playlist {pid} deleted by {actor_id}")
        return PlaylistDeleted(playlist_id=str(pid))

    # ── Membership ───────────────────────────────────────────────────

    async def add_video(self, playlist_id: str, video_id: str, actor_id: uuid.UUID) -> PlaylistSchema:
        pid = parse_id(playlist_id, "playlistId")
        vid = parse_id(video_id, "videoId")

        playlist = await self._get_playlist(pid)
        if await self.db.get(Video, vid) is None:
            raise NotFoundError("Video not found")
        ensure_owner(playlist, actor_id, "only owner can add video to their playlist")

        if vid not in playlist.video_ids:
            playlist.items.append(PlaylistVideo(video_id=vid))
            playlist.updated_at = utc_now()
            try:
                await self.db.commit()
            except IntegrityError:
                # Added concurrently; the set already holds it
                await self.db.rollback()
                playlist = await self._get_playlist(pid)

        return await self._fresh(playlist)

    async def remove_video(self, playlist_id: str, video_id: str, actor_id: uuid.UUID) -> PlaylistSchema:
        pid = parse_id(playlist_id, "playlistId")
        vid = parse_id(video_id, "videoId")

        playlist = await self._get_playlist(pid)
        ensure_owner(playlist, actor_id, "only owner can remove video from their playlist")

        result = await self.db.execute(
            delete(PlaylistVideo).where(PlaylistVideo.playlist_id == pid, PlaylistVideo.video_id == vid)
        )
        if result.rowcount:
            playlist.updated_at = utc_now()
        await self.db.commit()
        return await self._fresh(playlist)

    # ── Views ────────────────────────────────────────────────────────

    async def user_playlists(self, user_id: str) -> List[PlaylistSummary]:
        uid = parse_id(user_id, "userId")
        result = await self.db.execute(playlist_summary_query(uid))
        return [to_playlist_summary(row) for row in result.all()]

    async def playlist_detail(self, playlist_id: str) -> PlaylistDetail:
        pid = parse_id(playlist_id, "PlaylistId")
        playlist = await self._get_playlist(pid)

        result = await self.db.execute(playlist_videos_query(pid))
        return PlaylistDetail(
            id=str(playlist.id),
            name=playlist.name,
            description=playlist.description or "",
            owner=str(playlist.owner_id),
            created_at=playlist.created_at,
            updated_at=playlist.updated_at,
            videos=[to_owned_video_card(row) for row in result.all()],
        )

    # ── Internals ────────────────────────────────────────────────────

    async def _get_playlist(self, pid: uuid.UUID) -> Playlist:
        playlist = await self.db.scalar(select(Playlist).where(Playlist.id == pid))
        if playlist is None:
            raise NotFoundError("Playlist not found")
        return playlist

    async def _fresh(self, playlist: Playlist) -> PlaylistSchema:
        await self.db.refresh(playlist, ["items"])
        return to_playlist_schema(playlist)
