"""Post business logic: listing, search, lookups and validated writes."""
import logging
from collections.abc import Iterable, Mapping
from typing import Any

from sqlalchemy import inspect
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.attributes import set_committed_value

from foodie.core.exceptions import PostNotFoundError
from foodie.db.session import utcnow
from foodie.models.post import Post
from foodie.models.tag import Tag
from foodie.repositories.post_repository import PostRepository
from foodie.schemas.comment import CommentResponse
from foodie.schemas.post import CoverImageResponse, PostResponse
from foodie.schemas.tag import TagResponse
from foodie.schemas.user import UserPublic
from foodie.services.post_changeset import (
    MISSING_REFERENCE,
    STILL_ASSOCIATED,
    TAKEN,
    PostChangeset,
    validate,
)

logger = logging.getLogger(__name__)

TITLE_CONSTRAINT = "uq_posts_title"
UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"

Attrs = Mapping[str, Any]
TagSet = Iterable[Tag | int]


async def list_posts(repo: PostRepository) -> list[Post]:
    """Visible posts already published, newest first."""
    return await repo.list_published(utcnow())


async def search(repo: PostRepository, term: str) -> list[PostResponse]:
    """Visible posts whose title or content contains ``term`` (case-insensitive).

    A blank term returns every visible post, future publish dates included.
    Results are views built without tags, whatever the session has loaded.
    """
    if not (term or "").strip():
        posts = await repo.search_visible()
    else:
        posts = await repo.search_visible(term)
    return [post_to_response(post, with_tags=False) for post in posts]


async def get_post(repo: PostRepository, post_id: int) -> Post:
    post = await repo.get(post_id)
    if post is None:
        raise PostNotFoundError(post_id)
    comments = await repo.list_comments(post.id)
    set_committed_value(post, "comments", comments)
    return post


async def change_post(
    repo: PostRepository,
    post: Post,
    attrs: Attrs | None = None,
    tags: TagSet | None = None,
) -> PostChangeset:
    """Validate ``attrs`` against ``post`` without writing anything."""
    return await validate(repo, post, attrs, tags)


async def create_post(repo: PostRepository, attrs: Attrs, tags: TagSet = ()) -> Post | PostChangeset:
    changeset = await validate(repo, Post(visible=True), attrs, tags)
    changeset.action = "insert"
    return await _persist(repo, changeset)


async def update_post(
    repo: PostRepository,
    post: Post,
    attrs: Attrs,
    tags: TagSet = (),
) -> Post | PostChangeset:
    # The cover image and current tags must be in memory before the replace
    await repo.load_associations(post, "cover_image", "tags")
    changeset = await validate(repo, post, attrs, tags)
    changeset.action = "update"
    return await _persist(repo, changeset)


async def delete_post(repo: PostRepository, post: Post) -> Post | PostChangeset:
    post_id = post.id
    try:
        await repo.delete(post)
    except IntegrityError as exc:
        if not _is_foreign_key_violation(exc):
            raise
        changeset = PostChangeset(post, action="delete")
        changeset.add_error("comments", STILL_ASSOCIATED)
        logger.info("Post delete blocked by dependent rows", extra={"post_id": post_id})
        return changeset
    logger.info("Post deleted", extra={"post_id": post_id})
    return post


async def _persist(repo: PostRepository, changeset: PostChangeset) -> Post | PostChangeset:
    if not changeset.valid:
        logger.info(
            "Post %s rejected", changeset.action, extra={"post_id": changeset.data.id, "errors": changeset.errors}
        )
        return changeset

    post = changeset.data
    try:
        await repo.save(post, changeset.apply)
    except IntegrityError as exc:
        field, message = _constraint_error(exc)
        changeset.add_error(field, message)
        if changeset.action == "update":
            await repo.reload(post)
        logger.info(
            "Post %s hit a store constraint", changeset.action, extra={"post_id": post.id, "errors": changeset.errors}
        )
        return changeset

    logger.info("Post %s succeeded", changeset.action, extra={"post_id": post.id, "user_id": post.user_id})
    return post


def _error_detail(exc: IntegrityError, name: str) -> Any:
    # asyncpg's own exception sits behind the DBAPI adapter's error
    for error in (exc.orig, getattr(exc.orig, "__cause__", None)):
        value = getattr(error, name, None)
        if value:
            return value
    return None


def _sqlstate(exc: IntegrityError) -> str | None:
    return _error_detail(exc, "sqlstate") or _error_detail(exc, "pgcode")


def _is_foreign_key_violation(exc: IntegrityError) -> bool:
    state = _sqlstate(exc)
    if state is not None:
        return state == FOREIGN_KEY_VIOLATION
    # SQLite reports no SQLSTATE
    return "foreign key" in str(exc.orig).lower()


def _is_title_violation(exc: IntegrityError) -> bool:
    state = _sqlstate(exc)
    if state is not None:
        if state != UNIQUE_VIOLATION:
            return False
        constraint = _error_detail(exc, "constraint_name")
        if constraint is not None:
            return constraint == TITLE_CONSTRAINT
    message = str(exc.orig).lower()
    return "title" in message and ("unique" in message or "duplicate" in message)


def _constraint_error(exc: IntegrityError) -> tuple[str, str]:
    if _is_title_violation(exc):
        return "title", TAKEN
    if _is_foreign_key_violation(exc):
        return "user_id", MISSING_REFERENCE
    raise exc


def _loaded(post: Post, attribute: str) -> bool:
    return attribute not in inspect(post).unloaded


def post_to_response(post: Post, with_tags: bool = True) -> PostResponse:
    """Build the API view of ``post`` from whatever associations were loaded for it."""
    user = post.user if _loaded(post, "user") else None
    cover = post.cover_image if _loaded(post, "cover_image") else None
    tags = post.tags if with_tags and _loaded(post, "tags") else []
    comments = post.comments if _loaded(post, "comments") else []
    return PostResponse(
        id=post.id,
        title=post.title,
        content=post.content,
        visible=post.visible,
        published_on=post.published_on,
        user_id=post.user_id,
        created_at=post.created_at,
        updated_at=post.updated_at,
        user=UserPublic.model_validate(user) if user else None,
        cover_image=CoverImageResponse.model_validate(cover) if cover else None,
        tags=[TagResponse.model_validate(tag) for tag in tags],
        comments=[CommentResponse.model_validate(comment) for comment in comments],
    )
