import os
import tempfile

# Point the app-level engine at SQLite before vidhub is imported anywhere.
os.environ.setdefault(
    "VIDHUB_DB_URL",
    "sqlite+aiosqlite:///" + os.path.join(tempfile.gettempdir(), "vidhub-test-app.db"),
)

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from vidhub.core.database import Base, enable_sqlite_foreign_keys
from vidhub.models.models import Comment, Like, User, Video


@pytest_asyncio.fixture
async def engine(tmp_path):
    eng = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'vidhub.db'}")
    enable_sqlite_foreign_keys(eng)
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


# ── Seed helpers (users and videos come from the catalog service) ────────

@pytest.fixture
def make_user(db):
    async def _make(username: str, **fields) -> User:
        user = User(
            username=username,
            full_name=fields.pop("full_name", username.title()),
            email=fields.pop("email", f"{username}@example.com"),
            avatar=fields.pop("avatar", f"https://cdn.example.com/{username}.png"),
            **fields,
        )
        db.add(user)
        await db.commit()
        return user

    return _make


@pytest.fixture
def make_video(db):
    async def _make(owner: User, title: str = "video", **fields) -> Video:
        video = Video(owner_id=owner.id, title=title, **fields)
        db.add(video)
        await db.commit()
        return video

    return _make


@pytest.fixture
def make_comment(db):
    async def _make(video: Video, owner: User, content: str = "nice") -> Comment:
        comment = Comment(video_id=video.id, owner_id=owner.id, content=content)
        db.add(comment)
        await db.commit()
        return comment

    return _make


@pytest.fixture
def like_comment(db):
    async def _like(user: User, comment: Comment) -> Like:
        like = Like(liked_by_id=user.id, comment_id=comment.id)
        db.add(like)
        await db.commit()
        return like

    return _like
