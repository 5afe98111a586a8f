"""Pydantic schemas for Comment."""
from datetime import datetime

from pydantic import BaseModel, Field

from foodie.schemas.user import UserPublic


class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1)
    parent_id: int | None = None


class CommentResponse(BaseModel):
    id: int
    user_id: int
    post_id: int
    content: str
    created_at: datetime
    parent_id: int | None = None
    user: UserPublic | None = None

    model_config = {"from_attributes": True}
