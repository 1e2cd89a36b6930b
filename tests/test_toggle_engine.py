import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from vidhub.core.errors import ValidationError
from vidhub.models.models import Like, Subscription
from vidhub.services.relations.toggle_service import RelationKind, ToggleRelationEngine


async def _count(db, model) -> int:
    return await db.scalar(select(func.count(model.id)))


class StaleReadSession:
    """Session whose first lookup misses, as if a concurrent toggle had not committed yet."""

    def __init__(self, inner):
        self._inner = inner
        self._stale = True

    async def scalar(self, stmt, *args, **kwargs):
        if self._stale:
            self._stale = False
            return None
        return await self._inner.scalar(stmt, *args, **kwargs)

    def __getattr__(self, name):
        return getattr(self._inner, name)


@pytest.mark.asyncio
async def test_video_like_toggles_on_then_off(db, make_user, make_video):
    alice = await make_user("alice")
    video = await make_video(alice)
    engine = ToggleRelationEngine(db)

    assert (await engine.toggle(alice.id, RelationKind.VIDEO_LIKE, video.id)).active is True
    assert await _count(db, Like) == 1
    assert await engine.is_active(alice.id, RelationKind.VIDEO_LIKE, video.id) is True

    assert (await engine.toggle(alice.id, RelationKind.VIDEO_LIKE, video.id)).active is False
    assert await _count(db, Like) == 0


@pytest.mark.asyncio
async def test_comment_like_rows_target_only_the_comment(db, make_user, make_video, make_comment):
    alice = await make_user("alice")
    video = await make_video(alice)
    comment = await make_comment(video, alice)
    engine = ToggleRelationEngine(db)

    await engine.toggle(alice.id, RelationKind.COMMENT_LIKE, comment.id)
    like = await db.scalar(select(Like))
    assert like.comment_id == comment.id
    assert like.video_id is None


@pytest.mark.asyncio
async def test_video_and_comment_likes_are_independent(db, make_user, make_video, make_comment):
    alice = await make_user("alice")
    video = await make_video(alice)
    comment = await make_comment(video, alice)
    engine = ToggleRelationEngine(db)

    await engine.toggle(alice.id, RelationKind.VIDEO_LIKE, video.id)
    await engine.toggle(alice.id, RelationKind.COMMENT_LIKE, comment.id)
    assert await _count(db, Like) == 2

    assert (await engine.toggle(alice.id, RelationKind.COMMENT_LIKE, comment.id)).active is False
    assert await engine.is_active(alice.id, RelationKind.VIDEO_LIKE, video.id) is True


@pytest.mark.asyncio
async def test_like_with_both_targets_is_rejected_by_store(db, make_user, make_video, make_comment):
    alice = await make_user("alice")
    video = await make_video(alice)
    comment = await make_comment(video, alice)

    db.add(Like(liked_by_id=alice.id, video_id=video.id, comment_id=comment.id))
    with pytest.raises(IntegrityError):
        await db.commit()
    await db.rollback()


@pytest.mark.asyncio
async def test_like_with_no_target_is_rejected_by_store(db, make_user):
    alice = await make_user("alice")
    db.add(Like(liked_by_id=alice.id))
    with pytest.raises(IntegrityError):
        await db.commit()
    await db.rollback()


@pytest.mark.asyncio
async def test_subscription_toggle(db, make_user):
    alice = await make_user("alice")
    bob = await make_user("bob")
    engine = ToggleRelationEngine(db)

    assert (await engine.toggle(alice.id, RelationKind.SUBSCRIPTION, bob.id)).active is True
    row = await db.scalar(select(Subscription))
    assert (row.subscriber_id, row.channel_id) == (alice.id, bob.id)

    assert (await engine.toggle(alice.id, RelationKind.SUBSCRIPTION, bob.id)).active is False
    assert await _count(db, Subscription) == 0


@pytest.mark.asyncio
async def test_self_subscription_rejected_by_default(db, make_user):
    alice = await make_user("alice")
    with pytest.raises(ValidationError, match="own channel"):
        await ToggleRelationEngine(db, allow_self_subscription=False).toggle(
            alice.id, RelationKind.SUBSCRIPTION, alice.id
        )
    assert await _count(db, Subscription) == 0


@pytest.mark.asyncio
async def test_self_subscription_when_allowed(db, make_user):
    alice = await make_user("alice")
    engine = ToggleRelationEngine(db, allow_self_subscription=True)
    assert (await engine.toggle(alice.id, RelationKind.SUBSCRIPTION, alice.id)).active is True


@pytest.mark.asyncio
async def test_concurrent_create_turns_into_delete(db, make_user, make_video):
    alice = await make_user("alice")
    video = await make_video(alice)

    # The "other" request already created the like
    db.add(Like(liked_by_id=alice.id, video_id=video.id))
    await db.commit()

    engine = ToggleRelationEngine(StaleReadSession(db))
    result = await engine.toggle(alice.id, RelationKind.VIDEO_LIKE, video.id)

    assert result.active is False
    assert await _count(db, Like) == 0
