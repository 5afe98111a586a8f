from foodie.schemas.user import UserPublic
from foodie.schemas.tag import TagCreate, TagResponse
from foodie.schemas.comment import CommentCreate, CommentResponse
from foodie.schemas.post import CoverImageResponse, PostAttrs, PostResponse
