from foodie.models.user import User
from foodie.models.post import CoverImage, Post
from foodie.models.tag import Tag, posts_tags
from foodie.models.comment import Comment

__all__ = ["User", "Post", "CoverImage", "Tag", "posts_tags", "Comment"]
