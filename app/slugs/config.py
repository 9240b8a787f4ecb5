# app/slugs/config.py

# Per-model slug configuration.
#
# A model opts in with the ``sluggable`` class decorator:
#
#     @sluggable("title")
#     class Article(Base):
#         ...
#
# The decorator runs once, after SQLAlchemy has mapped the class, and records
# everything the engine needs at runtime: which attribute feeds the candidate
# name, which column holds the live identifier, the separator, and the root
# class name used to partition history rows across an inheritance hierarchy.

import logging
from dataclasses import dataclass
from typing import Any, FrozenSet, Iterable, Optional

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.exc import NoInspectionAvailable

from app.core.config import settings
from app.utils.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

SLUGGED = "slugged"
HISTORY = "history"
SCOPED = "scoped"

KNOWN_MODES = frozenset({SLUGGED, HISTORY, SCOPED})

# Max length of slugs.sluggable_type
ROOT_TYPE_MAX_LENGTH = 40


@dataclass(frozen=True)
class SluggableConfig:
    source: str
    slug_field: str
    separator: str
    root_type: str
    modes: FrozenSet[str]
    scope: Optional[str] = None
    max_length: Optional[int] = None

    @property
    def uses_history(self) -> bool:
        return HISTORY in self.modes


def sluggable(
    source: str,
    *,
    slug_field: str = "slug",
    use: Iterable[str] = (SLUGGED, HISTORY),
    separator: Optional[str] = None,
    scope: Optional[str] = None,
    max_length: Optional[int] = None,
):
    """
    Class decorator configuring a mapped model for friendly identifiers.

    Modes are cumulative down an inheritance chain: a subclass re-decorated
    with extra modes keeps the ones its parent declared. History and scoped
    conflict resolution cannot be combined; asking for both raises
    ConfigurationError immediately.
    """

    def decorator(cls):
        inherited: Optional[SluggableConfig] = getattr(cls, "__sluggable__", None)
        modes = set(use)
        if inherited is not None:
            modes |= inherited.modes
        if scope is not None:
            modes.add(SCOPED)

        unknown = modes - KNOWN_MODES
        if unknown:
            raise ConfigurationError(
                f"{cls.__name__}: unknown sluggable modes {sorted(unknown)}"
            )
        if HISTORY in modes and SCOPED in modes:
            raise ConfigurationError(
                f"{cls.__name__}: slug history is incompatible with scoped slugs"
            )
        modes.add(SLUGGED)

        config = SluggableConfig(
            source=source,
            slug_field=slug_field,
            separator=separator or settings.SLUG_SEPARATOR,
            root_type=_root_type_of(cls),
            modes=frozenset(modes),
            scope=scope,
            max_length=max_length or settings.SLUG_MAX_LENGTH,
        )
        cls.__sluggable__ = config
        logger.debug(
            "Configured sluggable %s (root=%s, modes=%s)",
            cls.__name__,
            config.root_type,
            sorted(config.modes),
        )
        return cls

    return decorator


def get_config(model_or_instance: Any) -> SluggableConfig:
    config = getattr(model_or_instance, "__sluggable__", None)
    if config is None:
        name = getattr(model_or_instance, "__name__", type(model_or_instance).__name__)
        raise ConfigurationError(f"{name} is not configured as sluggable")
    return config


def _root_type_of(cls) -> str:
    try:
        mapper = sa_inspect(cls)
    except NoInspectionAvailable:
        raise ConfigurationError(
            f"{cls.__name__} must be a mapped class before it is made sluggable"
        )
    root = mapper.base_mapper.class_.__name__
    if len(root) > ROOT_TYPE_MAX_LENGTH:
        raise ConfigurationError(
            f"Root type name {root!r} exceeds {ROOT_TYPE_MAX_LENGTH} characters"
        )
    return root


def primary_key_of(owner: Any) -> Any:
    """Primary key value of a mapped instance; None until it is flushed."""
    mapper = sa_inspect(type(owner))
    prop = mapper.get_property_by_column(mapper.primary_key[0])
    return getattr(owner, prop.key)
