import asyncio
import sys
import os
from datetime import timedelta

# Add project root to sys.path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import select
from foodie.core.logging import configure_logging
from foodie.db.session import async_session_maker, utcnow
from foodie.models.user import User
from foodie.repositories import PostRepository
from foodie.services import post_service, tag_service
from foodie.services.post_changeset import PostChangeset

SAMPLE_POSTS = [
    ("burger", "A classic smash burger with pickles.", ["beef", "grill"]),
    ("bacon cheeseburger", "Crispy bacon, cheddar and a toasted bun.", ["beef", "grill"]),
    ("ice-cream", "Vanilla bean ice cream, churned at home.", ["dessert"]),
]

async def seed_posts(username, email):
    async with async_session_maker() as session:
        res = await session.execute(select(User).where(User.username == username))
        user = res.scalar_one_or_none()
        if not user:
            user = User(username=username, email=email, display_name=username)
            session.add(user)
            await session.flush()

        tags = {}
        for tag in await tag_service.list_tags(session):
            tags[tag.name] = tag

        repo = PostRepository(session)
        now = utcnow()
        for offset, (title, content, tag_names) in enumerate(SAMPLE_POSTS):
            for name in tag_names:
                if name not in tags:
                    tags[name] = await tag_service.create_tag(session, name)
            result = await post_service.create_post(
                repo,
                {
                    "title": title,
                    "content": content,
                    "published_on": now - timedelta(days=offset),
                    "user_id": user.id,
                },
                [tags[name] for name in tag_names],
            )
            if isinstance(result, PostChangeset):
                print(f"Skipped '{title}': {result.errors}")
            else:
                print(f"Created post {result.id}: {title}")
        await session.commit()

if __name__ == "__main__":
    if len(sys.argv) < 3:
        print("Usage: python scripts/seed_posts.py <username> <email>")
        sys.exit(1)

    configure_logging()
    asyncio.run(seed_posts(sys.argv[1], sys.argv[2]))
