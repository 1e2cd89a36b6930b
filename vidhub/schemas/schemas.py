"""
VidHub API Schemas — Pydantic v2 models for request/response validation.

Python attributes are snake_case; the wire format is camelCase
(``likesCount``, ``isLiked``, ``totalPages``).
"""
from __future__ import annotations

from datetime import datetime
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True,
    )


# ═══════════════════════════════════════════════════════════════════════
# Pagination
# ═══════════════════════════════════════════════════════════════════════

class Page(ApiModel, Generic[T]):
    items: List[T] = []
    page: int
    limit: int
    total_items: int
    total_pages: int
    has_next_page: bool
    has_prev_page: bool
    prev_page: Optional[int] = None
    next_page: Optional[int] = None


# ═══════════════════════════════════════════════════════════════════════
# Users / Videos
# ═══════════════════════════════════════════════════════════════════════

class PublicUser(ApiModel):
    """Public-safe owner projection. Never carries email or credentials."""
    id: str
    username: str
    full_name: str
    avatar: Optional[str] = None


class VideoCard(ApiModel):
    id: str
    video_file: Optional[str] = None
    thumbnail: Optional[str] = None
    owner: str
    title: str
    description: Optional[str] = None
    views: int = 0
    duration: float = 0.0
    created_at: datetime
    is_published: bool = True


class OwnedVideoCard(VideoCard):
    owner_details: Optional[PublicUser] = None


# ═══════════════════════════════════════════════════════════════════════
# Comments
# ═══════════════════════════════════════════════════════════════════════

class CommentCreate(ApiModel):
    content: Optional[str] = None


class CommentUpdate(ApiModel):
    content: Optional[str] = None


class CommentSchema(ApiModel):
    id: str
    content: str
    video: str
    owner: str
    created_at: datetime
    updated_at: datetime


class CommentFeedItem(ApiModel):
    id: str
    content: str
    created_at: datetime
    likes_count: int = 0
    owner: Optional[PublicUser] = None
    is_liked: bool = False


class CommentDeleted(ApiModel):
    comment_id: str


# ═══════════════════════════════════════════════════════════════════════
# Likes
# ═══════════════════════════════════════════════════════════════════════

class LikeToggleResponse(ApiModel):
    is_liked: bool


class LikedVideo(ApiModel):
    liked_video: OwnedVideoCard


# ═══════════════════════════════════════════════════════════════════════
# Subscriptions
# ═══════════════════════════════════════════════════════════════════════

class SubscriptionToggleResponse(ApiModel):
    subscribed: bool


class SubscriberSchema(ApiModel):
    id: str
    username: str
    full_name: str
    avatar: Optional[str] = None
    subscribers_count: int = 0
    subscribed_to_subscriber: bool = False


class SubscriberEntry(ApiModel):
    subscriber: SubscriberSchema


class ChannelSchema(ApiModel):
    id: str
    username: str
    full_name: str
    avatar: Optional[str] = None
    latest_video: Optional[VideoCard] = None


class SubscribedChannelEntry(ApiModel):
    subscribed_channel: ChannelSchema


# ═══════════════════════════════════════════════════════════════════════
# Playlists
# ═══════════════════════════════════════════════════════════════════════

class PlaylistCreate(ApiModel):
    name: Optional[str] = None
    description: Optional[str] = Field(None, max_length=5000)


class PlaylistUpdate(ApiModel):
    name: Optional[str] = None
    description: Optional[str] = Field(None, max_length=5000)


class PlaylistSchema(ApiModel):
    id: str
    name: str
    description: str = ""
    owner: str
    videos: List[str] = []
    created_at: datetime
    updated_at: datetime


class PlaylistSummary(ApiModel):
    id: str
    name: str
    description: str = ""
    total_videos: int = 0
    total_views: int = 0
    updated_at: datetime


class PlaylistDetail(ApiModel):
    id: str
    name: str
    description: str = ""
    owner: str
    created_at: datetime
    updated_at: datetime
    videos: List[OwnedVideoCard] = []


class PlaylistDeleted(ApiModel):
    playlist_id: str
