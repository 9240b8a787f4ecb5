# app/services/article_service.py

import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.article import ARTICLE_CLASSES, Article
from app.models.enums import ArticleKind
from app.models.slug import Slug
from app.slugs.config import get_config
from app.slugs.lookup import find_owner, owner_exists
from app.slugs.resolver import generate_identifier, should_generate_identifier
from app.slugs.synchronizer import purge_history, synchronize_history
from app.utils.exceptions import ConflictError, NotFoundError, ServiceUnavailableError

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger("audit")


async def _save_with_history(db: AsyncSession, article: Article) -> Article:
    """
    Flush the article, bring its slug history in line and commit, all in
    one transaction. A unique-index violation means another writer took
    the same slug between resolution and insert; nothing is retried here.
    """
    try:
        db.add(article)
        await db.flush()
        await synchronize_history(db, article)
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        logger.warning("Slug conflict while saving article: %s", exc)
        raise ConflictError("Slug was taken concurrently, please retry")
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.error("DB error while saving article: %s", exc, exc_info=True)
        raise ServiceUnavailableError("Database temporarily unavailable")

    await db.refresh(article)
    return article


async def create_article(db: AsyncSession, data: dict) -> Article:
    """Create an article of the requested kind with a fresh slug."""
    kind = ArticleKind(data.get("kind") or ArticleKind.ARTICLE)
    article = ARTICLE_CLASSES[kind](title=data["title"], body=data.get("body"))
    try:
        article.slug = await generate_identifier(db, article)
    except SQLAlchemyError as exc:
        logger.error("DB error while resolving slug: %s", exc, exc_info=True)
        raise ServiceUnavailableError("Database temporarily unavailable")

    created = await _save_with_history(db, article)
    logger.info("Article created: id=%s slug=%r", created.id, created.slug)
    audit_logger.info("Article created: id=%s slug=%r", created.id, created.slug)
    return created


async def update_article(db: AsyncSession, article_id: int, data: dict) -> Article:
    """
    Apply a partial update. The slug is regenerated when the title changes
    or when the caller clears it with ``slug=None``.
    """
    article = await get_article_by_id(db, article_id)
    previous_title = article.title

    for field in ("title", "body"):
        if field in data and data[field] is not None:
            setattr(article, field, data[field])
    if "slug" in data and data["slug"] is None:
        article.slug = None

    try:
        if should_generate_identifier(article, previous_title):
            article.slug = await generate_identifier(db, article)
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.error("DB error while resolving slug: %s", exc, exc_info=True)
        raise ServiceUnavailableError("Database temporarily unavailable")

    updated = await _save_with_history(db, article)
    logger.info("Article updated: id=%s slug=%r", updated.id, updated.slug)
    return updated


async def delete_article(db: AsyncSession, article_id: int) -> None:
    """Delete an article together with its entire slug history."""
    article = await get_article_by_id(db, article_id)
    try:
        purged = await purge_history(db, article)
        await db.delete(article)
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.error("DB error during article delete: %s", exc, exc_info=True)
        raise ServiceUnavailableError("Database temporarily unavailable")

    logger.info("Article deleted: id=%s (%d slug rows)", article_id, purged)
    audit_logger.info("Article deleted: id=%s", article_id)


async def get_article_by_id(db: AsyncSession, article_id: int) -> Article:
    try:
        article = await db.get(Article, article_id)
    except SQLAlchemyError as exc:
        logger.error("DB error during article get: %s", exc, exc_info=True)
        raise ServiceUnavailableError("Database temporarily unavailable")
    if article is None:
        raise NotFoundError("Article not found")
    return article


async def get_article(db: AsyncSession, identifier: str) -> Article:
    """Find an article by id, current slug, or any slug it has had before."""
    try:
        article = await find_owner(db, Article, identifier)
    except SQLAlchemyError as exc:
        logger.error("DB error during article lookup: %s", exc, exc_info=True)
        raise ServiceUnavailableError("Database temporarily unavailable")
    if article is None:
        raise NotFoundError("Article not found")
    return article


async def article_exists(db: AsyncSession, identifier: str) -> bool:
    try:
        return await owner_exists(db, Article, identifier)
    except SQLAlchemyError as exc:
        logger.error("DB error during article exists: %s", exc, exc_info=True)
        raise ServiceUnavailableError("Database temporarily unavailable")


async def list_slug_history(db: AsyncSession, article_id: int) -> List[Slug]:
    """Return every slug the article has held, newest first."""
    article = await get_article_by_id(db, article_id)
    config = get_config(article)
    try:
        stmt = (
            select(Slug)
            .where(
                Slug.sluggable_type == config.root_type,
                Slug.sluggable_id == article.id,
            )
            .order_by(Slug.id.desc())
        )
        result = await db.execute(stmt)
        return list(result.scalars().all())
    except SQLAlchemyError as exc:
        logger.error(
            "Error fetching slug history for article %s: %s",
            article_id,
            exc,
            exc_info=True,
        )
        raise ServiceUnavailableError("Database temporarily unavailable")
