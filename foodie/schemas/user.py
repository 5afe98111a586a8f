"""Pydantic schemas for User."""
from datetime import datetime

from pydantic import BaseModel


class UserPublic(BaseModel):
    id: int
    username: str
    display_name: str | None = None
    created_at: datetime | None = None

    model_config = {"from_attributes": True}
