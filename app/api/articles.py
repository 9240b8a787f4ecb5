# app/api/articles.py

import logging
from typing import List

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.models.article import Article
from app.schemas.article import ArticleCreate, ArticleRead, ArticleUpdate
from app.schemas.slug import SlugRead
from app.services.article_service import (
    article_exists,
    create_article,
    delete_article,
    get_article,
    list_slug_history,
    update_article,
)
from app.slugs.config import get_config
from app.utils.response import auto_response

router = APIRouter(prefix="/api/articles", tags=["articles"])
logger = logging.getLogger(__name__)


@router.post("", response_model=ArticleRead, status_code=status.HTTP_201_CREATED)
async def create(
    request: Request,
    data: ArticleCreate,
    db: AsyncSession = Depends(get_db),
):
    """
    Create an article. Its slug is derived from the title and made unique
    against every slug any article has ever used.
    """
    article = await create_article(db, data.model_dump())
    return auto_response(
        request, ArticleRead.model_validate(article), status.HTTP_201_CREATED
    )


@router.get("/{identifier}", response_model=ArticleRead, name="read_article")
async def read(
    identifier: str,
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    """
    Fetch an article by id, current slug or historical slug. Anything but
    the current slug answers with a permanent redirect to it.
    """
    article = await get_article(db, identifier)
    canonical = article.slug or str(article.id)
    if identifier != canonical:
        logger.info(
            "Redirecting article lookup %r -> %r (id=%s)",
            identifier,
            canonical,
            article.id,
        )
        return RedirectResponse(
            request.url_for("read_article", identifier=canonical),
            status_code=status.HTTP_301_MOVED_PERMANENTLY,
        )
    return auto_response(request, ArticleRead.model_validate(article))


@router.head("/{identifier}")
async def exists(identifier: str, db: AsyncSession = Depends(get_db)):
    """Existence check with the same resolution rules as GET."""
    found = await article_exists(db, identifier)
    return Response(
        status_code=status.HTTP_200_OK if found else status.HTTP_404_NOT_FOUND
    )


@router.put("/{article_id}", response_model=ArticleRead)
async def update(
    article_id: int,
    data: ArticleUpdate,
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    """
    Update an article. Changing the title, or sending ``"slug": null``,
    gives it a new slug; the old one keeps resolving.
    """
    article = await update_article(db, article_id, data.model_dump(exclude_unset=True))
    return auto_response(request, ArticleRead.model_validate(article))


@router.delete("/{article_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete(article_id: int, db: AsyncSession = Depends(get_db)):
    """
    Delete an article and its slug history; its slugs become free again.
    """
    await delete_article(db, article_id)


@router.get("/{article_id}/slugs", response_model=List[SlugRead])
async def slug_history(
    article_id: int,
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    """List every slug the article has held, newest first."""
    rows = await list_slug_history(db, article_id)
    separator = get_config(Article).separator
    return auto_response(
        request,
        [
            SlugRead(
                id=row.id,
                slug=row.to_identifier(separator),
                name=row.name,
                sequence=row.sequence,
                sluggable_type=row.sluggable_type,
                sluggable_id=row.sluggable_id,
                scope=row.scope,
                created_at=row.created_at,
            )
            for row in rows
        ],
    )
