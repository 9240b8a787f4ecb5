# app/slugs/lookup.py

import logging
from typing import Any, Optional, Type, TypeVar

from sqlalchemy import BigInteger, Integer, SmallInteger, false, select
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.slug import Slug
from app.slugs.config import get_config
from app.slugs.identifiers import looks_like_primary_key, parse_identifier

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Signed width of each integer key type, as PostgreSQL stores them
INTEGER_KEY_BITS = ((BigInteger, 64), (SmallInteger, 16), (Integer, 32))


def _primary_key_column(model):
    return sa_inspect(model).primary_key[0]


def _coerce_primary_key(model, value: Any) -> Optional[Any]:
    """Convert ``value`` to the model's key type, or None if it cannot be one."""
    column = _primary_key_column(model)
    try:
        python_type = column.type.python_type
    except NotImplementedError:
        return value
    if isinstance(value, python_type):
        key = value
    else:
        try:
            key = python_type(value)
        except (TypeError, ValueError):
            return None
    if isinstance(key, int) and not _fits_integer_key(column.type, key):
        return None
    return key


def _fits_integer_key(column_type, key: int) -> bool:
    for type_, bits in INTEGER_KEY_BITS:
        if isinstance(column_type, type_):
            return -(2 ** (bits - 1)) <= key < 2 ** (bits - 1)
    return True


def _historical_owner_query(model, identifier: str, scope: Optional[str]):
    config = get_config(model)
    name, sequence = parse_identifier(identifier, config.separator)
    stmt = select(Slug.sluggable_id).limit(1)
    if not _fits_integer_key(Slug.__table__.c.sequence.type, sequence):
        return stmt.where(false())
    return stmt.where(
        Slug.sluggable_type == config.root_type,
        Slug.name == name,
        Slug.sequence == sequence,
        Slug.scope == scope,
    )


async def _get_by_primary_key(
    db: AsyncSession, model: Type[T], value: Any
) -> Optional[T]:
    key = _coerce_primary_key(model, value)
    if key is None:
        return None
    result = await db.execute(select(model).where(_primary_key_column(model) == key))
    return result.scalars().first()


async def _exists_by_primary_key(db: AsyncSession, model, value: Any) -> bool:
    key = _coerce_primary_key(model, value)
    if key is None:
        return False
    return await _exists(db, select(model).where(_primary_key_column(model) == key))


async def _exists(db: AsyncSession, stmt) -> bool:
    return bool(await db.scalar(select(stmt.exists())))


async def find_owner(
    db: AsyncSession, model: Type[T], identifier: Any, scope: Optional[str] = None
) -> Optional[T]:
    """
    Resolve an identifier to an instance of ``model``.

    Tries, in order: raw primary key (for key-shaped input), the live slug
    column, the slug history, and finally the primary key again for legacy
    identifiers. A history hit returns the owner even though its current
    slug differs; callers compare the two to decide on a redirect.
    """
    if looks_like_primary_key(identifier):
        return await _get_by_primary_key(db, model, identifier)

    config = get_config(model)
    slug_column = getattr(model, config.slug_field)
    result = await db.execute(select(model).where(slug_column == identifier).limit(1))
    owner = result.scalars().first()
    if owner is not None:
        return owner

    owner_id = await db.scalar(_historical_owner_query(model, identifier, scope))
    if owner_id is not None:
        owner = await _get_by_primary_key(db, model, owner_id)
        if owner is not None:
            logger.debug(
                "Resolved %s %r through slug history to id=%s",
                model.__name__,
                identifier,
                owner_id,
            )
            return owner
        logger.warning(
            "Slug history row %r points at %s id=%s, which is not a %s",
            identifier,
            config.root_type,
            owner_id,
            model.__name__,
        )

    return await _get_by_primary_key(db, model, identifier)


async def owner_exists(
    db: AsyncSession, model, identifier: Any, scope: Optional[str] = None
) -> bool:
    """Same resolution order as find_owner, using EXISTS queries only."""
    if looks_like_primary_key(identifier):
        return await _exists_by_primary_key(db, model, identifier)

    config = get_config(model)
    slug_column = getattr(model, config.slug_field)
    if await _exists(db, select(model).where(slug_column == identifier)):
        return True

    historical = _historical_owner_query(model, identifier, scope).scalar_subquery()
    if await _exists(db, select(model).where(_primary_key_column(model) == historical)):
        return True

    return await _exists_by_primary_key(db, model, identifier)
