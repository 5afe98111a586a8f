"""SQLAlchemy declarative base and model imports for Alembic."""
from foodie.db.session import Base  # noqa: F401
from foodie.models.user import User  # noqa: F401
from foodie.models.post import CoverImage, Post  # noqa: F401
from foodie.models.tag import Tag, posts_tags  # noqa: F401
from foodie.models.comment import Comment  # noqa: F401

__all__ = ["Base", "User", "Post", "CoverImage", "Tag", "posts_tags", "Comment"]
