"""Data access for posts.

Services never touch the session directly for posts; they get a
``PostRepository`` bound to the request's ``AsyncSession``. Every write runs
inside a SAVEPOINT so a constraint failure rolls back only that unit and the
session stays usable.
"""
from collections.abc import Callable, Iterable
from datetime import datetime

from sqlalchemy import desc, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from foodie.models import Comment, Post, Tag
from foodie.services import comment_service, tag_service

LIKE_ESCAPE = "\\"


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so ``term`` only ever matches literally."""
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


class PostRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_published(self, now: datetime) -> list[Post]:
        q = (
            select(Post)
            .where(Post.visible.is_(True), Post.published_on <= now)
            .order_by(desc(Post.published_on))
            .options(selectinload(Post.user), selectinload(Post.tags))
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(q)
        return list(result.scalars().all())

    async def search_visible(self, term: str | None = None) -> list[Post]:
        """Visible posts, newest first; filtered by title/content substring when ``term`` is set.

        Only the owning user is loaded.
        """
        q = (
            select(Post)
            .where(Post.visible.is_(True))
            .order_by(desc(Post.published_on))
            .options(selectinload(Post.user))
        )
        if term:
            pattern = f"%{escape_like(term)}%"
            q = q.where(
                or_(
                    Post.title.ilike(pattern, escape=LIKE_ESCAPE),
                    Post.content.ilike(pattern, escape=LIKE_ESCAPE),
                )
            )
        result = await self.db.execute(q)
        return list(result.scalars().all())

    async def get(self, post_id: int) -> Post | None:
        result = await self.db.execute(
            select(Post)
            .where(Post.id == post_id)
            .options(
                selectinload(Post.user),
                selectinload(Post.cover_image),
                selectinload(Post.tags),
            )
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_comments(self, post_id: int) -> list[Comment]:
        return await comment_service.list_post_comments(self.db, post_id)

    async def title_taken(self, title: str, exclude_id: int | None = None) -> bool:
        q = select(func.count(Post.id)).where(Post.title == title)
        if exclude_id is not None:
            q = q.where(Post.id != exclude_id)
        result = await self.db.execute(q)
        return (result.scalar() or 0) > 0

    async def get_tags(self, tag_ids: Iterable[int]) -> list[Tag]:
        return await tag_service.get_tags(self.db, dict.fromkeys(tag_ids))

    async def load_associations(self, post: Post, *names: str) -> None:
        """Make sure the given relationships of a persisted post are loaded."""
        await self.db.refresh(post, attribute_names=list(names))

    async def reload(self, post: Post) -> None:
        """Reset a persisted post to what the store holds, dropping unsaved changes."""
        self.db.expire(post)
        await self.db.refresh(post)
        await self.db.refresh(post, attribute_names=["tags", "cover_image"])

    async def save(self, post: Post, apply: Callable[[], object] | None = None) -> Post:
        """Insert or update ``post`` with its association changes as one unit.

        ``apply`` mutates the post once it is in the session and inside the
        savepoint; nothing may be pending on the post before this call, since
        opening the savepoint flushes the session.

        Raises ``sqlalchemy.exc.IntegrityError`` if a store constraint rejects
        the write; the savepoint is rolled back before it propagates.
        """
        async with self.db.begin_nested():
            self.db.add(post)
            if apply is not None:
                apply()
            await self.db.flush()
        return post

    async def delete(self, post: Post) -> None:
        async with self.db.begin_nested():
            await self.db.delete(post)
            await self.db.flush()
