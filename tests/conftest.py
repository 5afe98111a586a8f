"""Pytest fixtures for the posts tests."""
import itertools
from datetime import timedelta

import pytest

import foodie.db.base  # noqa: F401
from foodie.db.session import Base, build_engine, build_session_maker, utcnow
from foodie.models.post import Post
from foodie.models.tag import Tag
from foodie.models.user import User
from foodie.repositories import PostRepository
from foodie.services import post_service


@pytest.fixture
async def engine(tmp_path):
    """A fresh SQLite database per test, schema built from the models."""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'posts.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db(engine):
    session_maker = build_session_maker(engine)
    async with session_maker() as session:
        yield session


@pytest.fixture
def repo(db) -> PostRepository:
    return PostRepository(db)


@pytest.fixture
def make_user(db):
    counter = itertools.count(1)

    async def make(**attrs) -> User:
        n = next(counter)
        attrs.setdefault("username", f"user{n}")
        attrs.setdefault("email", f"user{n}@example.com")
        user = User(**attrs)
        db.add(user)
        await db.flush()
        return user

    return make


@pytest.fixture
async def user(make_user) -> User:
    return await make_user(display_name="Some User")


@pytest.fixture
def make_tag(db):
    async def make(name: str) -> Tag:
        tag = Tag(name=name)
        db.add(tag)
        await db.flush()
        return tag

    return make


@pytest.fixture
def valid_attrs(user):
    def build(**overrides):
        attrs = {
            "title": "some title",
            "content": "some content",
            "visible": True,
            "published_on": utcnow() - timedelta(days=1),
            "user_id": user.id,
        }
        attrs.update(overrides)
        return attrs

    return build


@pytest.fixture
def make_post(repo, valid_attrs):
    counter = itertools.count(1)

    async def make(tags=(), **overrides) -> Post:
        overrides.setdefault("title", f"some title {next(counter)}")
        post = await post_service.create_post(repo, valid_attrs(**overrides), tags)
        assert isinstance(post, Post), getattr(post, "errors", post)
        return post

    return make
