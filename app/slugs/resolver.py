# app/slugs/resolver.py

import logging
from typing import Any, Optional

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.slug import Slug
from app.slugs.config import get_config, primary_key_of
from app.slugs.identifiers import compose_identifier, normalize

logger = logging.getLogger(__name__)


def _conflict_scope(
    stmt: Select,
    owner_type: str,
    scope: Optional[str],
    excluding_owner_id: Optional[Any],
) -> Select:
    """Restrict a slug query to one root type and scope, minus the requester."""
    stmt = stmt.where(Slug.sluggable_type == owner_type, Slug.scope == scope)
    if excluding_owner_id is not None:
        stmt = stmt.where(Slug.sluggable_id != excluding_owner_id)
    return stmt


async def resolve_sequence(
    db: AsyncSession,
    name: str,
    owner_type: str,
    scope: Optional[str] = None,
    excluding_owner_id: Optional[Any] = None,
) -> int:
    """
    Return the sequence to pair with ``name`` for a new identifier.

    History rows of the requesting owner never count as conflicts. If no
    other owner holds ``name`` unsuffixed the answer is 1; otherwise it is
    one past the highest sequence any other owner has ever held for it.
    Read-only; two concurrent callers can get the same answer, which the
    unique index on slugs rejects at insert time.
    """
    direct = _conflict_scope(
        select(Slug.id).where(Slug.name == name, Slug.sequence == 1),
        owner_type,
        scope,
        excluding_owner_id,
    ).limit(1)
    if (await db.execute(direct)).first() is None:
        return 1

    conflicts = _conflict_scope(
        select(Slug.sequence).where(Slug.name == name),
        owner_type,
        scope,
        excluding_owner_id,
    ).order_by(Slug.sequence.desc()).limit(1)
    highest = (await db.execute(conflicts)).scalars().first()
    sequence = 1 if highest is None else highest + 1
    logger.debug(
        "Slug %r conflicts for %s; next sequence is %d", name, owner_type, sequence
    )
    return sequence


def should_generate_identifier(owner: Any, previous_source: Optional[str]) -> bool:
    """
    Regenerate when the live identifier is empty or the source attribute
    changed since the last save.
    """
    config = get_config(owner)
    if not getattr(owner, config.slug_field):
        return True
    return getattr(owner, config.source) != previous_source


async def generate_identifier(db: AsyncSession, owner: Any) -> Optional[str]:
    """
    Derive the collision-free identifier for ``owner`` from its source
    attribute. Returns None when the source normalizes to nothing.
    """
    config = get_config(owner)
    name = normalize(getattr(owner, config.source), config.max_length)
    if not name:
        return None
    scope = getattr(owner, config.scope) if config.scope else None
    sequence = await resolve_sequence(
        db,
        name,
        config.root_type,
        scope=scope,
        excluding_owner_id=primary_key_of(owner),
    )
    return compose_identifier(name, sequence, config.separator)
