"""Validation of post writes.

A ``PostChangeset`` holds the cast attribute changes and final tag set for one
post together with the field errors found while validating them. Nothing here
writes to the store; ``post_service`` decides whether to persist.
"""
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from foodie.models.post import Post
from foodie.models.tag import Tag
from foodie.repositories.post_repository import PostRepository
from foodie.schemas.post import WRITABLE_FIELDS, PostAttrs

REQUIRED_FIELDS = WRITABLE_FIELDS

BLANK = "can't be blank"
INVALID = "is invalid"
TAKEN = "has already been taken"
MISSING_REFERENCE = "does not exist"
STILL_ASSOCIATED = "are still associated with this entry"


class PostChangeset:
    def __init__(
        self,
        data: Post,
        changes: dict[str, Any] | None = None,
        tags: list[Tag] | None = None,
        action: str | None = None,
    ):
        self.data = data
        self.changes = changes or {}
        self.tags = tags
        self.action = action
        self.errors: dict[str, list[str]] = {}

    def __repr__(self) -> str:
        return f"<PostChangeset action={self.action} changes={self.changes} errors={self.errors} valid={self.valid}>"

    @property
    def valid(self) -> bool:
        return not self.errors

    def add_error(self, field: str, message: str) -> None:
        self.errors.setdefault(field, []).append(message)

    def get_field(self, field: str) -> Any:
        """Value of ``field`` once the changes are applied."""
        if field in self.changes:
            return self.changes[field]
        return getattr(self.data, field)

    def apply(self) -> Post:
        """Copy the changes onto the post and replace its tags with the new set."""
        post = self.data
        for field, value in self.changes.items():
            setattr(post, field, value)
        if self.tags is not None:
            replace_tags(post, self.tags)
        return post


def _tag_key(tag: Tag):
    return tag.id if tag.id is not None else id(tag)


def replace_tags(post: Post, tags: Iterable[Tag]) -> None:
    """Make ``post.tags`` equal ``tags`` by removing and adding only the difference."""
    desired = {_tag_key(tag): tag for tag in tags}
    current = {_tag_key(tag) for tag in post.tags}
    for tag in list(post.tags):
        if _tag_key(tag) not in desired:
            post.tags.remove(tag)
    for key, tag in desired.items():
        if key not in current:
            post.tags.append(tag)


def cast(attrs: Mapping[str, Any]) -> tuple[dict[str, Any], dict[str, list[str]]]:
    """Coerce the writable fields of ``attrs``; other keys are ignored."""
    raw = {key: value for key, value in attrs.items() if key in WRITABLE_FIELDS}
    errors: dict[str, list[str]] = {}
    try:
        parsed = PostAttrs.model_validate(raw)
    except ValidationError as exc:
        for error in exc.errors():
            if error["loc"]:
                errors.setdefault(str(error["loc"][0]), [INVALID])
        parsed = PostAttrs.model_validate({k: v for k, v in raw.items() if k not in errors})
    return parsed.model_dump(include=parsed.model_fields_set), errors


async def _resolve_tags(
    repo: PostRepository, tags: Iterable[Tag | int], changeset: PostChangeset
) -> list[Tag]:
    resolved: list[Tag] = []
    ids: list[int] = []
    for tag in tags:
        if isinstance(tag, Tag):
            resolved.append(tag)
        elif isinstance(tag, int) or (isinstance(tag, str) and tag.isdigit()):
            ids.append(int(tag))
        else:
            changeset.add_error("tags", INVALID)
    if ids:
        found = await repo.get_tags(ids)
        if len(found) != len(set(ids)):
            changeset.add_error("tags", INVALID)
        resolved.extend(found)
    return resolved


async def validate(
    repo: PostRepository,
    post: Post,
    attrs: Mapping[str, Any] | None,
    tags: Iterable[Tag | int] | None = None,
) -> PostChangeset:
    """Build a changeset for writing ``attrs`` and ``tags`` onto ``post``.

    ``tags=None`` leaves the tag set alone; any iterable (including an empty
    one) becomes the complete new set.
    """
    supplied, cast_errors = cast(attrs or {})
    changes = {field: value for field, value in supplied.items() if getattr(post, field) != value}
    changeset = PostChangeset(post, changes)
    for field, messages in cast_errors.items():
        for message in messages:
            changeset.add_error(field, message)

    for field in REQUIRED_FIELDS:
        if field not in changeset.errors and changeset.get_field(field) is None:
            changeset.add_error(field, BLANK)

    # Advisory only; the unique constraint decides when two writes race
    if "title" in changes and "title" not in changeset.errors:
        if await repo.title_taken(changes["title"], exclude_id=post.id):
            changeset.add_error("title", TAKEN)

    if tags is not None:
        changeset.tags = await _resolve_tags(repo, tags, changeset)

    return changeset
