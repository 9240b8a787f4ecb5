# tests/helpers.py

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.article import Article
from app.models.slug import Slug
from app.slugs.resolver import generate_identifier
from app.slugs.synchronizer import synchronize_history


async def save(db: AsyncSession, article: Article) -> Article:
    """
    Save path as the service runs it: regenerate when needed, flush,
    synchronize history, commit.
    """
    if not article.slug:
        article.slug = await generate_identifier(db, article)
    db.add(article)
    await db.flush()
    await synchronize_history(db, article)
    await db.commit()
    return article


async def make(db: AsyncSession, title: str, cls=Article) -> Article:
    return await save(db, cls(title=title))


async def rename(db: AsyncSession, article: Article, title: str) -> Article:
    article.title = title
    article.slug = None
    return await save(db, article)


async def count_slugs(db: AsyncSession, article: Article | None = None) -> int:
    stmt = select(func.count()).select_from(Slug)
    if article is not None:
        stmt = stmt.where(Slug.sluggable_id == article.id)
    return await db.scalar(stmt)
