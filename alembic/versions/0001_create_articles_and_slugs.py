"""create articles and slugs

Revision ID: 0001
Revises:
Create Date: 2026-10-18 12:00:00

"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "articles",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("kind", sa.String(length=20), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("body", sa.Text(), nullable=True),
        sa.Column("slug", sa.String(length=255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_articles_slug", "articles", ["slug"], unique=True)

    op.create_table(
        "slugs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("sluggable_id", sa.Integer(), nullable=False),
        sa.Column("sequence", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("sluggable_type", sa.String(length=40), nullable=False),
        sa.Column("scope", sa.String(length=255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_slugs_sluggable_id", "slugs", ["sluggable_id"])
    op.create_index(
        "ix_slugs_name_type_sequence_scope",
        "slugs",
        ["name", "sluggable_type", "sequence", "scope"],
        unique=True,
        postgresql_nulls_not_distinct=True,
    )
    op.create_index(
        "ix_slugs_name_type_sequence_unscoped",
        "slugs",
        ["name", "sluggable_type", "sequence"],
        unique=True,
        sqlite_where=sa.text("scope IS NULL"),
        postgresql_where=sa.text("scope IS NULL"),
    )


def downgrade() -> None:
    op.drop_index("ix_slugs_name_type_sequence_unscoped", table_name="slugs")
    op.drop_index("ix_slugs_name_type_sequence_scope", table_name="slugs")
    op.drop_index("ix_slugs_sluggable_id", table_name="slugs")
    op.drop_table("slugs")
    op.drop_index("ix_articles_slug", table_name="articles")
    op.drop_table("articles")
