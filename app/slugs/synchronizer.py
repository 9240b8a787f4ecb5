# app/slugs/synchronizer.py

import logging
from typing import Any, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.slug import Slug
from app.slugs.config import get_config, primary_key_of
from app.slugs.identifiers import parse_identifier

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger("audit")


async def current_record(db: AsyncSession, owner: Any) -> Optional[Slug]:
    """Return the owner's most recent history row (greatest id), if any."""
    config = get_config(owner)
    stmt = (
        select(Slug)
        .where(
            Slug.sluggable_type == config.root_type,
            Slug.sluggable_id == primary_key_of(owner),
        )
        .order_by(Slug.id.desc())
        .limit(1)
    )
    result = await db.execute(stmt)
    return result.scalars().first()


async def synchronize_history(db: AsyncSession, owner: Any) -> Optional[Slug]:
    """
    Make the owner's history reflect its live identifier.

    Must run after the owner has been flushed and inside the same
    transaction; nothing is committed here. Returns the newly written row,
    or None when there was nothing to do. A row with the exact target
    (name, sequence) held by anyone, including the owner itself from an
    earlier rename, is locked and deleted before the insert. Integrity
    errors from the insert are not handled.
    """
    config = get_config(owner)
    identifier = getattr(owner, config.slug_field)
    if not identifier:
        return None

    current = await current_record(db, owner)
    if current is not None and current.to_identifier(config.separator) == identifier:
        return None

    owner_id = primary_key_of(owner)
    scope = getattr(owner, config.scope) if config.scope else None
    name, sequence = parse_identifier(identifier, config.separator)

    target = (
        Slug.name == name,
        Slug.sequence == sequence,
        Slug.sluggable_type == config.root_type,
        Slug.scope == scope,
    )
    held = await db.execute(
        select(Slug.id, Slug.sluggable_id).where(*target).with_for_update()
    )
    reclaimed = held.all()
    if reclaimed:
        await db.execute(
            delete(Slug)
            .where(Slug.id.in_([row.id for row in reclaimed]))
            .execution_options(synchronize_session="fetch")
        )
        for row in reclaimed:
            audit_logger.info(
                "Slug reclaimed: %r from %s#%s by %s#%s",
                identifier,
                config.root_type,
                row.sluggable_id,
                config.root_type,
                owner_id,
            )

    record = Slug(
        name=name,
        sequence=sequence,
        sluggable_type=config.root_type,
        sluggable_id=owner_id,
        scope=scope,
    )
    db.add(record)
    await db.flush()

    logger.info(
        "Slug history for %s#%s now at %r", config.root_type, owner_id, identifier
    )
    audit_logger.info(
        "Slug recorded: %r for %s#%s (record=%s)",
        identifier,
        config.root_type,
        owner_id,
        record.id,
    )
    return record


async def purge_history(db: AsyncSession, owner: Any) -> int:
    """
    Delete every history row of ``owner``. Called when the owner itself is
    deleted, within the same transaction.
    """
    config = get_config(owner)
    owner_id = primary_key_of(owner)
    result = await db.execute(
        delete(Slug)
        .where(
            Slug.sluggable_type == config.root_type,
            Slug.sluggable_id == owner_id,
        )
        .execution_options(synchronize_session="fetch")
    )
    count = result.rowcount or 0
    audit_logger.info(
        "Slug history purged: %d row(s) for %s#%s", count, config.root_type, owner_id
    )
    return count
