# tests/test_synchronizer.py

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from app.models.article import Article, Editorial, NewsArticle
from app.models.slug import Slug
from app.slugs.synchronizer import (
    current_record,
    purge_history,
    synchronize_history,
)
from tests.helpers import count_slugs, make, rename, save


@pytest.mark.asyncio
async def test_create_writes_history_record(db):
    article = await make(db, "hello")
    record = await current_record(db, article)
    assert record is not None
    assert (record.name, record.sequence) == ("hello", 1)
    assert record.sluggable_type == "Article"
    assert record.sluggable_id == article.id
    assert record.scope is None


@pytest.mark.asyncio
async def test_sync_is_idempotent(db):
    article = await make(db, "hello")
    assert await synchronize_history(db, article) is None
    article.body = "edited"
    await save(db, article)
    assert await synchronize_history(db, article) is None
    assert await count_slugs(db) == 1


@pytest.mark.asyncio
async def test_sync_without_slug_is_noop(db):
    article = Article(title="!!!")
    await save(db, article)
    assert article.slug is None
    assert await count_slugs(db) == 0


@pytest.mark.asyncio
async def test_each_change_adds_one_record(db):
    article = await make(db, "one")
    for title in ("two", "three", "four"):
        await rename(db, article, title)
    assert await count_slugs(db, article) == 4
    record = await current_record(db, article)
    assert record.name == "four"


@pytest.mark.asyncio
async def test_current_record_is_greatest_id(db):
    article = await make(db, "one")
    await rename(db, article, "two")
    rows = (
        await db.execute(select(Slug).where(Slug.sluggable_id == article.id))
    ).scalars().all()
    newest = max(rows, key=lambda row: row.id)
    assert (await current_record(db, article)).id == newest.id


@pytest.mark.asyncio
async def test_revert_reclaims_own_record(db):
    article = await make(db, "x")
    await rename(db, article, "y")
    await rename(db, article, "x")
    assert article.slug == "x"
    rows = (
        await db.execute(
            select(Slug).where(Slug.sluggable_id == article.id).order_by(Slug.id)
        )
    ).scalars().all()
    assert [(row.name, row.sequence) for row in rows] == [("y", 1), ("x", 1)]


@pytest.mark.asyncio
async def test_regenerating_keeps_slug_without_growth(db):
    first = await make(db, "foo")
    second = await make(db, "foo")
    assert second.slug == "foo--2"
    first.slug = None
    await save(db, first)
    assert first.slug == "foo"
    assert await count_slugs(db, first) == 1


@pytest.mark.asyncio
async def test_reclaim_from_another_owner(db):
    first = await make(db, "foo")
    await rename(db, first, "bar")
    second = await make(db, "baz")
    # Taken over directly, as a racing writer or an import would
    second.slug = "foo"
    await save(db, second)
    holders = (
        await db.execute(select(Slug.sluggable_id).where(Slug.name == "foo"))
    ).scalars().all()
    assert holders == [second.id]
    assert await count_slugs(db, first) == 1


@pytest.mark.asyncio
async def test_subtypes_never_share_a_record(db):
    news = await make(db, "hello", NewsArticle)
    editorial = await make(db, "hello", Editorial)
    rows = (await db.execute(select(Slug))).scalars().all()
    pairs = {(row.name, row.sequence) for row in rows}
    assert len(pairs) == len(rows) == 2
    assert {row.sluggable_type for row in rows} == {"Article"}
    assert {row.sluggable_id for row in rows} == {news.id, editorial.id}


@pytest.mark.asyncio
async def test_purge_history(db):
    keep = await make(db, "keep")
    article = await make(db, "one")
    await rename(db, article, "two")
    assert await purge_history(db, article) == 2
    await db.commit()
    assert await count_slugs(db, article) == 0
    assert await count_slugs(db, keep) == 1


@pytest.mark.asyncio
async def test_duplicate_unscoped_record_is_rejected(db):
    db.add(Slug(name="dup", sequence=1, sluggable_type="Article", sluggable_id=1))
    await db.commit()
    db.add(Slug(name="dup", sequence=1, sluggable_type="Article", sluggable_id=2))
    with pytest.raises(IntegrityError):
        await db.commit()
    await db.rollback()


@pytest.mark.asyncio
async def test_same_pair_in_different_scopes_is_allowed(db):
    db.add(Slug(name="dup", sequence=1, sluggable_type="Article", sluggable_id=1))
    db.add(
        Slug(name="dup", sequence=1, sluggable_type="Article", sluggable_id=2, scope="a")
    )
    await db.commit()
    assert await db.scalar(select(func.count()).select_from(Slug)) == 2
