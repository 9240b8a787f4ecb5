# app/models/article.py

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base
from app.models.enums import ArticleKind
from app.slugs.config import sluggable


@sluggable("title")
class Article(Base):
    """
    ORM model for a published article, addressed by a friendly slug.

    Subtypes share the ``articles`` table (single-table inheritance) and,
    through the root type recorded on each history row, one slug namespace.
    """

    __tablename__ = "articles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Discriminator for the inheritance hierarchy
    kind: Mapped[str] = mapped_column(String(20), nullable=False)

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    body: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Live composed identifier; history lives in the slugs table
    slug: Mapped[str | None] = mapped_column(
        String(255), nullable=True, unique=True, index=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=datetime.utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    __mapper_args__ = {
        "polymorphic_on": "kind",
        "polymorphic_identity": ArticleKind.ARTICLE.value,
    }


class NewsArticle(Article):
    __mapper_args__ = {"polymorphic_identity": ArticleKind.NEWS.value}


class Editorial(Article):
    __mapper_args__ = {"polymorphic_identity": ArticleKind.EDITORIAL.value}


ARTICLE_CLASSES = {
    ArticleKind.ARTICLE: Article,
    ArticleKind.NEWS: NewsArticle,
    ArticleKind.EDITORIAL: Editorial,
}
