# tests/test_lookup.py

import pytest

from app.models.article import Article, Editorial, NewsArticle
from app.models.slug import Slug
from app.slugs.lookup import find_owner, owner_exists
from tests.helpers import make, rename


@pytest.mark.asyncio
async def test_find_by_current_slug(db):
    article = await make(db, "hello")
    assert await find_owner(db, Article, "hello") is article
    assert await owner_exists(db, Article, "hello")


@pytest.mark.asyncio
async def test_find_by_old_and_new_slug(db):
    article = await make(db, "x")
    await rename(db, article, "y")
    assert await find_owner(db, Article, "x") is article
    assert await find_owner(db, Article, "y") is article
    assert await owner_exists(db, Article, "x")
    assert await owner_exists(db, Article, "y")


@pytest.mark.asyncio
async def test_find_by_old_sequenced_slug(db):
    await make(db, "hello")
    second = await make(db, "hello")
    await rename(db, second, "other")
    assert await find_owner(db, Article, "hello--2") is second


@pytest.mark.asyncio
async def test_owner_found_by_old_slug_is_writable(db):
    article = await make(db, "hello")
    await rename(db, article, "goodbye")
    found = await find_owner(db, Article, "hello")
    found.body = "still editable"
    await db.commit()
    assert found.body == "still editable"


@pytest.mark.asyncio
async def test_find_by_primary_key(db):
    article = await make(db, "hello")
    assert await find_owner(db, Article, article.id) is article
    assert await find_owner(db, Article, str(article.id)) is article
    assert await owner_exists(db, Article, str(article.id))


@pytest.mark.asyncio
async def test_falls_back_to_raw_primary_key(db):
    article = await make(db, "hello")
    legacy = f"000{article.id}"
    assert await find_owner(db, Article, legacy) is article
    assert await owner_exists(db, Article, legacy)


@pytest.mark.asyncio
async def test_not_found(db):
    await make(db, "hello")
    assert await find_owner(db, Article, "missing") is None
    assert await find_owner(db, Article, "999") is None
    assert not await owner_exists(db, Article, "missing")
    assert not await owner_exists(db, Article, 999)


@pytest.mark.asyncio
async def test_oversized_numeric_identifier_is_not_found(db):
    await make(db, "hello")
    assert await find_owner(db, Article, "9" * 20) is None
    assert await find_owner(db, Article, 2**40) is None
    assert not await owner_exists(db, Article, "9" * 20)
    assert not await owner_exists(db, Article, -(2**40))
    assert await find_owner(db, Article, "hello--" + "9" * 20) is None
    assert not await owner_exists(db, Article, "hello--" + "9" * 20)


@pytest.mark.asyncio
async def test_orphaned_history_row_falls_through(db):
    db.add(Slug(name="ghost", sequence=1, sluggable_type="Article", sluggable_id=999))
    await db.commit()
    assert await find_owner(db, Article, "ghost") is None
    assert not await owner_exists(db, Article, "ghost")


@pytest.mark.asyncio
async def test_lookup_through_subtypes(db):
    news = await make(db, "breaking", NewsArticle)
    await rename(db, news, "old-news")
    assert await find_owner(db, Article, "breaking") is news
    assert await find_owner(db, NewsArticle, "breaking") is news
    assert await find_owner(db, Editorial, "breaking") is None
    assert await owner_exists(db, NewsArticle, "breaking")
    assert not await owner_exists(db, Editorial, "breaking")
