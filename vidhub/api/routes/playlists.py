"""
VidHub API — Playlist routes.
"""
from __future__ import annotations

import uuid
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from vidhub.api.deps import get_viewer_id
from vidhub.core.database import get_db
from vidhub.schemas.schemas import (
    PlaylistCreate,
    PlaylistDeleted,
    PlaylistDetail,
    PlaylistSchema,
    PlaylistSummary,
    PlaylistUpdate,
)
from vidhub.services.playlists.playlist_service import PlaylistService

router = APIRouter(prefix="/playlists", tags=["Playlists"])


@router.post("", response_model=PlaylistSchema, status_code=201)
async def create_playlist(
    data: PlaylistCreate,
    viewer_id: uuid.UUID = Depends(get_viewer_id),
    db: AsyncSession = Depends(get_db),
):
    return await PlaylistService(db).create_playlist(data.name, data.description, viewer_id)


@router.get("/user/{user_id}", response_model=List[PlaylistSummary])
async def user_playlists(user_id: str, db: AsyncSession = Depends(get_db)):
    """Playlists owned by a user with video and view totals."""
    return await PlaylistService(db).user_playlists(user_id)


@router.get("/{playlist_id}", response_model=PlaylistDetail)
async def get_playlist(playlist_id: str, db: AsyncSession = Depends(get_db)):
    """Playlist with its published videos only."""
    return await PlaylistService(db).playlist_detail(playlist_id)


@router.patch("/{playlist_id}", response_model=PlaylistSchema)
async def update_playlist(
    playlist_id: str,
    data: PlaylistUpdate,
    viewer_id: uuid.UUID = Depends(get_viewer_id),
    db: AsyncSession = Depends(get_db),
):
    return await PlaylistService(db).update_playlist(playlist_id, data.name, data.description, viewer_id)


@router.delete("/{playlist_id}", response_model=PlaylistDeleted)
async def delete_playlist(
    playlist_id: str,
    viewer_id: uuid.UUID = Depends(get_viewer_id),
    db: AsyncSession = Depends(get_db),
):
    return await PlaylistService(db).delete_playlist(playlist_id, viewer_id)


@router.patch("/add/{video_id}/{playlist_id}", response_model=PlaylistSchema)
async def add_video_to_playlist(
    video_id: str,
    playlist_id: str,
    viewer_id: uuid.UUID = Depends(get_viewer_id),
    db: AsyncSession = Depends(get_db),
):
    return await PlaylistService(db).add_video(playlist_id, video_id, viewer_id)


@router.patch("/remove/{video_id}/{playlist_id}", response_model=PlaylistSchema)
async def remove_video_from_playlist(
    video_id: str,
    playlist_id: str,
    viewer_id: uuid.UUID = Depends(get_viewer_id),
    db: AsyncSession = Depends(get_db),
):
    return await PlaylistService(db).remove_video(playlist_id, video_id, viewer_id)
