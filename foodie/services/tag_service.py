"""Tag lookups and creation."""
from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from foodie.models.tag import Tag
from foodie.schemas.tag import TagCreate


async def list_tags(db: AsyncSession) -> list[Tag]:
    result = await db.execute(select(Tag).order_by(Tag.name))
    return list(result.scalars().all())


async def get_tags(db: AsyncSession, tag_ids: Iterable[int]) -> list[Tag]:
    ids = list(tag_ids)
    if not ids:
        return []
    result = await db.execute(select(Tag).where(Tag.id.in_(ids)).order_by(Tag.id))
    return list(result.scalars().all())


async def create_tag(db: AsyncSession, name: str) -> Tag:
    data = TagCreate(name=name.strip())
    tag = Tag(name=data.name)
    db.add(tag)
    await db.flush()
    await db.refresh(tag)
    return tag
