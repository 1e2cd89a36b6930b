"""
VidHub Aggregation Query Builder — joined read views with derived fields.

Each builder returns a plain ``Select`` over the ORM relations so that the
caller decides how to run it (all rows, or one page through the paginator).
Derived values (like counts, "liked by me", mutual subscription flags,
playlist totals) are computed in SQL per request and never stored.

Views:
  - comment feed           comment_feed_query / to_comment_feed_item
  - liked videos           liked_videos_query / to_liked_video
  - playlist summaries     playlist_summary_query / to_playlist_summary
  - playlist detail        playlist_videos_query / to_owned_video_card
  - channel subscribers    channel_subscribers_query / to_subscriber_entry
  - subscribed channels    subscribed_channels_query + latest_videos_query
"""
from __future__ import annotations

import enum
import uuid
from typing import Dict, Iterable, Optional

from sqlalchemy import Boolean, Select, and_, exists, func, literal, select
from sqlalchemy.orm import aliased

from vidhub.models.models import Comment, Like, Playlist, PlaylistVideo, Subscription, User, Video
from vidhub.schemas.schemas import (
    ChannelSchema,
    CommentFeedItem,
    LikedVideo,
    OwnedVideoCard,
    PlaylistSummary,
    PublicUser,
    SubscribedChannelEntry,
    SubscriberEntry,
    SubscriberSchema,
    VideoCard,
)


class CommentSort(str, enum.Enum):
    OLDEST = "oldest"
    NEWEST = "newest"
    LIKES = "likes"


def _viewer_flag(condition, viewer_id: Optional[uuid.UUID], label: str):
    """``exists(condition)`` for a known viewer, a literal false otherwise."""
    if viewer_id is None:
        return literal(False, type_=Boolean).label(label)
    return exists().where(condition).label(label)


# ── Projections ──────────────────────────────────────────────────────────

def to_public_user(user: Optional[User]) -> Optional[PublicUser]:
    if user is None:
        return None
    return PublicUser(
        id=str(user.id),
        username=user.username,
        full_name=user.full_name,
        avatar=user.avatar,
    )


def to_video_card(video: Video) -> VideoCard:
    return VideoCard(
        id=str(video.id),
        video_file=video.video_file,
        thumbnail=video.thumbnail,
        owner=str(video.owner_id),
        title=video.title,
        description=video.description,
        views=video.views or 0,
        duration=video.duration or 0.0,
        created_at=video.created_at,
        is_published=video.is_published,
    )


def to_owned_video_card(row) -> OwnedVideoCard:
    video, owner = row[0], row[1]
    card = to_video_card(video)
    return OwnedVideoCard(**card.model_dump(), owner_details=to_public_user(owner))


# ═══════════════════════════════════════════════════════════════════════
# Comment feed
# ═══════════════════════════════════════════════════════════════════════

def comment_feed_query(
    video_id: uuid.UUID,
    viewer_id: Optional[uuid.UUID] = None,
    sort: CommentSort = CommentSort.OLDEST,
) -> Select:
    likes_count = (
        select(func.count(Like.id))
        .where(Like.comment_id == Comment.id)
        .correlate(Comment)
        .scalar_subquery()
        .label("likes_count")
    )
    is_liked = _viewer_flag(
        and_(Like.comment_id == Comment.id, Like.liked_by_id == viewer_id),
        viewer_id,
        "is_liked",
    )

    stmt = (
        select(Comment, User, likes_count, is_liked)
        .outerjoin(User, Comment.owner_id == User.id)
        .where(Comment.video_id == video_id)
    )

    if sort is CommentSort.NEWEST:
        stmt = stmt.order_by(Comment.created_at.desc(), Comment.id)
    elif sort is CommentSort.LIKES:
        stmt = stmt.order_by(likes_count.desc(), Comment.created_at.asc(), Comment.id)
    else:
        stmt = stmt.order_by(Comment.created_at.asc(), Comment.id)
    return stmt


def to_comment_feed_item(row) -> CommentFeedItem:
    comment, owner, likes_count, is_liked = row
    return CommentFeedItem(
        id=str(comment.id),
        content=comment.content,
        created_at=comment.created_at,
        likes_count=int(likes_count or 0),
        owner=to_public_user(owner),
        is_liked=bool(is_liked),
    )


# ═══════════════════════════════════════════════════════════════════════
# Liked videos
# ═══════════════════════════════════════════════════════════════════════

def liked_videos_query(viewer_id: uuid.UUID) -> Select:
    """Videos the viewer liked, most recently liked first."""
    return (
        select(Video, User)
        .select_from(Like)
        .join(Video, Like.video_id == Video.id)
        .join(User, Video.owner_id == User.id)
        .where(Like.liked_by_id == viewer_id, Like.video_id.is_not(None))
        .order_by(Like.created_at.desc(), Like.id)
    )


def to_liked_video(row) -> LikedVideo:
    return LikedVideo(liked_video=to_owned_video_card(row))


# ═══════════════════════════════════════════════════════════════════════
# Playlists
# ═══════════════════════════════════════════════════════════════════════

def playlist_summary_query(owner_id: uuid.UUID) -> Select:
    total_videos = func.count(Video.id).label("total_videos")
    total_views = func.coalesce(func.sum(Video.views), 0).label("total_views")
    return (
        select(Playlist, total_videos, total_views)
        .outerjoin(PlaylistVideo, PlaylistVideo.playlist_id == Playlist.id)
        .outerjoin(Video, PlaylistVideo.video_id == Video.id)
        .where(Playlist.owner_id == owner_id)
        .group_by(Playlist.id)
        .order_by(Playlist.created_at.asc(), Playlist.id)
    )


def to_playlist_summary(row) -> PlaylistSummary:
    playlist, total_videos, total_views = row
    return PlaylistSummary(
        id=str(playlist.id),
        name=playlist.name,
        description=playlist.description or "",
        total_videos=int(total_videos or 0),
        total_views=int(total_views or 0),
        updated_at=playlist.updated_at,
    )


def playlist_videos_query(playlist_id: uuid.UUID) -> Select:
    """Published videos of a playlist, each with its public owner fields."""
    return (
        select(Video, User)
        .select_from(PlaylistVideo)
        .join(Video, PlaylistVideo.video_id == Video.id)
        .outerjoin(User, Video.owner_id == User.id)
        .where(PlaylistVideo.playlist_id == playlist_id, Video.is_published.is_(True))
        .order_by(PlaylistVideo.added_at.asc(), PlaylistVideo.id)
    )


# ═══════════════════════════════════════════════════════════════════════
# Subscriptions
# ═══════════════════════════════════════════════════════════════════════

def channel_subscribers_query(channel_id: uuid.UUID, viewer_id: Optional[uuid.UUID] = None) -> Select:
    """
    Subscribers of ``channel_id``.

    ``subscribed_to_subscriber`` asks whether the queried channel subscribes
    back to each subscriber; it is only evaluated inside a viewer context.
    """
    counted = aliased(Subscription)
    back = aliased(Subscription)

    subscribers_count = (
        select(func.count(counted.id))
        .where(counted.channel_id == User.id)
        .correlate(User)
        .scalar_subquery()
        .label("subscribers_count")
    )
    subscribed_back = _viewer_flag(
        and_(back.subscriber_id == channel_id, back.channel_id == User.id),
        viewer_id,
        "subscribed_to_subscriber",
    )

    return (
        select(User, subscribers_count, subscribed_back)
        .join(Subscription, Subscription.subscriber_id == User.id)
        .where(Subscription.channel_id == channel_id)
        .order_by(Subscription.created_at.asc(), Subscription.id)
    )


def to_subscriber_entry(row) -> SubscriberEntry:
    user, subscribers_count, subscribed_back = row
    return SubscriberEntry(subscriber=SubscriberSchema(
        id=str(user.id),
        username=user.username,
        full_name=user.full_name,
        avatar=user.avatar,
        subscribers_count=int(subscribers_count or 0),
        subscribed_to_subscriber=bool(subscribed_back),
    ))


def subscribed_channels_query(subscriber_id: uuid.UUID) -> Select:
    return (
        select(User)
        .join(Subscription, Subscription.channel_id == User.id)
        .where(Subscription.subscriber_id == subscriber_id)
        .order_by(Subscription.created_at.asc(), Subscription.id)
    )


def latest_videos_query(owner_ids: Iterable[uuid.UUID]) -> Select:
    """Newest video per owner in one pass (row_number over owner)."""
    ranked = (
        select(
            Video.id.label("video_id"),
            func.row_number().over(
                partition_by=Video.owner_id,
                order_by=[Video.created_at.desc(), Video.id.desc()],
            ).label("rank"),
        )
        .where(Video.owner_id.in_(list(owner_ids)))
        .subquery()
    )
    return select(Video).join(ranked, ranked.c.video_id == Video.id).where(ranked.c.rank == 1)


def to_subscribed_channel_entry(user: User, latest: Dict[uuid.UUID, Video]) -> SubscribedChannelEntry:
    video = latest.get(user.id)
    return SubscribedChannelEntry(subscribed_channel=ChannelSchema(
        id=str(user.id),
        username=user.username,
        full_name=user.full_name,
        avatar=user.avatar,
        latest_video=to_video_card(video) if video is not None else None,
    ))
