import asyncio
import sys
import os

# Add project root to sys.path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from foodie.db.session import async_session_maker
from foodie.repositories import PostRepository
from foodie.services import post_service

async def list_posts(term=None):
    async with async_session_maker() as session:
        repo = PostRepository(session)
        if term is None:
            posts = await post_service.list_posts(repo)
        else:
            posts = await post_service.search(repo, term)
        if not posts:
            print("No posts found in database.")
        else:
            print("Posts:")
            for post in posts:
                print(f"- [{post.id}] {post.title} | published {post.published_on:%Y-%m-%d %H:%M} | by {post.user.username}")

if __name__ == "__main__":
    asyncio.run(list_posts(sys.argv[1] if len(sys.argv) > 1 else None))
