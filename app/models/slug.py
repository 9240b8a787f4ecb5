# app/models/slug.py

from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base
from app.slugs.identifiers import compose_identifier


class Slug(Base):
    """
    ORM model for one (name, sequence) pair ever held by a sluggable entity.

    Rows are written by the history synchronizer and never updated; an
    entity's current row is the one with the greatest id. Ownership is
    polymorphic: ``sluggable_type`` is always the root class name of the
    owner's inheritance hierarchy, so subclasses share one namespace.
    """

    __tablename__ = "slugs"
    __table_args__ = (
        Index(
            "ix_slugs_name_type_sequence_scope",
            "name",
            "sluggable_type",
            "sequence",
            "scope",
            unique=True,
            postgresql_nulls_not_distinct=True,
        ),
        # NULL scopes are distinct in a plain unique index on SQLite
        Index(
            "ix_slugs_name_type_sequence_unscoped",
            "name",
            "sluggable_type",
            "sequence",
            unique=True,
            sqlite_where=text("scope IS NULL"),
            postgresql_where=text("scope IS NULL"),
        ),
    )

    # Monotonic primary key, also defines "most recent"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Normalized name without the sequence suffix
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    # Primary key of the owner, same key space as sluggable_type
    sluggable_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    # 1 means unsuffixed
    sequence: Mapped[int] = mapped_column(
        Integer, nullable=False, default=1, server_default="1"
    )

    sluggable_type: Mapped[str] = mapped_column(String(40), nullable=False)

    scope: Mapped[str | None] = mapped_column(String(255), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=datetime.utcnow
    )

    def to_identifier(self, separator: str) -> str:
        """Composed identifier for this row, e.g. ``foo`` or ``foo--2``."""
        return compose_identifier(self.name, self.sequence, separator)

    def __repr__(self) -> str:
        return (
            f"<Slug id={self.id} {self.sluggable_type}#{self.sluggable_id} "
            f"name={self.name!r} sequence={self.sequence}>"
        )
