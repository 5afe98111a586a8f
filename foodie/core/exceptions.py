"""Exceptions raised by the posts module."""


class PostNotFoundError(LookupError):
    """Raised when a post lookup by id finds nothing."""

    def __init__(self, post_id: int):
        super().__init__(f"Post {post_id} not found")
        self.post_id = post_id
