"""Tests for post search."""
from datetime import timedelta

import pytest

from foodie.db.session import utcnow
from foodie.repositories import escape_like
from foodie.schemas.post import PostResponse
from foodie.services import post_service


def ids(items) -> list[int]:
    return [item.id for item in items]


@pytest.fixture
async def food_posts(make_post, make_tag):
    now = utcnow()
    tag = await make_tag("beef")
    post = await make_post(title="burger", published_on=now - timedelta(hours=1), tags=[tag])
    post1 = await make_post(title="ice-cream", published_on=now - timedelta(hours=2))
    post2 = await make_post(title="bacon cheeseburger", published_on=now - timedelta(hours=3), tags=[tag])
    return post, post1, post2


@pytest.mark.parametrize("term", ["burger", "Bur", "BuRger", "BURGER"])
async def test_search_pulls_posts_by_title_case_insensitively(repo, food_posts, term):
    post, _, post2 = food_posts

    assert ids(await post_service.search(repo, term)) == ids([post, post2])


async def test_search_with_empty_term_returns_all_visible_posts(repo, food_posts):
    post, post1, post2 = food_posts

    assert ids(await post_service.search(repo, "")) == ids([post, post1, post2])
    assert ids(await post_service.search(repo, "   ")) == ids([post, post1, post2])


async def test_search_with_empty_term_ignores_publish_date(repo, make_post):
    now = utcnow()
    scheduled = await make_post(published_on=now + timedelta(days=3))
    published = await make_post(published_on=now - timedelta(days=3))
    await make_post(visible=False)

    assert ids(await post_service.search(repo, "")) == ids([scheduled, published])
    assert await post_service.list_posts(repo) == [published]


async def test_search_matches_content(repo, make_post):
    post = await make_post(title="weekend", content="Smoked BRISKET all day")
    await make_post(title="weekday", content="salad")

    assert ids(await post_service.search(repo, "brisket")) == [post.id]


async def test_search_skips_hidden_posts(repo, make_post):
    await make_post(title="secret burger", visible=False)

    assert await post_service.search(repo, "burger") == []


async def test_search_results_carry_no_tags(repo, food_posts, user):
    results = await post_service.search(repo, "burger")

    assert results
    assert all(isinstance(p, PostResponse) for p in results)
    assert all(p.tags == [] for p in results)
    assert all(p.user.username == user.username for p in results)


async def test_search_leaves_tags_of_fetched_posts_alone(repo, food_posts):
    post, _, _ = food_posts
    fetched = await post_service.get_post(repo, post.id)

    [hit, _] = await post_service.search(repo, "burger")

    assert [t.name for t in fetched.tags] == ["beef"]
    await post_service.get_post(repo, post.id)
    assert hit.tags == []


async def test_search_treats_wildcards_literally(repo, make_post):
    discount = await make_post(title="burgers 50% off")
    await make_post(title="burgers 500 off")
    snake = await make_post(title="snake_case sandwich")
    await make_post(title="snakeXcase sandwich")

    assert ids(await post_service.search(repo, "50%")) == [discount.id]
    assert ids(await post_service.search(repo, "e_c")) == [snake.id]
    assert ids(await post_service.search(repo, "%")) == [discount.id]


def test_escape_like():
    assert escape_like("50%") == "50\\%"
    assert escape_like("a_b") == "a\\_b"
    assert escape_like("back\\slash") == "back\\\\slash"
    assert escape_like("plain") == "plain"
