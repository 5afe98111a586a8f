"""Comment queries used by the posts module."""
from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from foodie.models.comment import Comment
from foodie.schemas.comment import CommentCreate


async def list_post_comments(db: AsyncSession, post_id: int) -> list[Comment]:
    """Comments of a post, newest first (ties by id), each with its author loaded."""
    result = await db.execute(
        select(Comment)
        .where(Comment.post_id == post_id)
        .order_by(desc(Comment.created_at), desc(Comment.id))
        .options(selectinload(Comment.user))
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


async def create_comment(
    db: AsyncSession,
    *,
    user_id: int,
    post_id: int,
    data: CommentCreate,
) -> Comment:
    comment = Comment(user_id=user_id, post_id=post_id, content=data.content, parent_id=data.parent_id)
    db.add(comment)
    await db.flush()
    await db.refresh(comment)
    return comment
