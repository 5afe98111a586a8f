from foodie.repositories.post_repository import PostRepository, escape_like

__all__ = ["PostRepository", "escape_like"]
