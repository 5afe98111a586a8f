"""Pydantic schemas for Post."""
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, field_validator

from foodie.schemas.comment import CommentResponse
from foodie.schemas.tag import TagResponse
from foodie.schemas.user import UserPublic

WRITABLE_FIELDS = ("title", "content", "visible", "published_on", "user_id")


class PostAttrs(BaseModel):
    """Writable post fields. Unknown keys are dropped, not rejected."""

    model_config = ConfigDict(extra="ignore")

    title: str | None = None
    content: str | None = None
    visible: bool | None = None
    published_on: datetime | None = None
    user_id: int | None = None

    @field_validator("title", "content", "visible", "published_on", "user_id", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("published_on")
    @classmethod
    def to_naive_utc(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value


class CoverImageResponse(BaseModel):
    id: int
    url: str
    alt_text: str | None = None

    model_config = {"from_attributes": True}


class PostResponse(BaseModel):
    id: int
    title: str
    content: str
    visible: bool = True
    published_on: datetime
    user_id: int
    created_at: datetime | None = None
    updated_at: datetime | None = None
    user: UserPublic | None = None
    cover_image: CoverImageResponse | None = None
    tags: list[TagResponse] = []
    comments: list[CommentResponse] = []

    model_config = {"from_attributes": True}
