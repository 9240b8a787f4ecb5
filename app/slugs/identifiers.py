# app/slugs/identifiers.py

# Pure helpers for composing, parsing and recognising identifiers.

from typing import Any, Optional, Tuple

from slugify import slugify


def compose_identifier(name: str, sequence: int, separator: str) -> str:
    """
    Join a name and its sequence into the external identifier.

    Sequence 1 is the unsuffixed form:

        >>> compose_identifier("hello", 1, "--")
        'hello'
        >>> compose_identifier("hello", 3, "--")
        'hello--3'
    """
    if sequence == 1:
        return name
    return f"{name}{separator}{sequence}"


def parse_identifier(value: str, separator: str) -> Tuple[str, int]:
    """
    Split an identifier into ``(name, sequence)``.

    Splits on the last separator only, and only when what follows it is a
    positive integer; anything else is treated as an unsuffixed name.

        >>> parse_identifier("hello--3", "--")
        ('hello', 3)
        >>> parse_identifier("hello", "--")
        ('hello', 1)
        >>> parse_identifier("hello--world", "--")
        ('hello--world', 1)
    """
    name, sep, suffix = value.rpartition(separator)
    if sep and name and suffix.isascii() and suffix.isdigit() and int(suffix) > 0:
        return name, int(suffix)
    return value, 1


def looks_like_primary_key(value: Any) -> bool:
    """
    True when ``value`` should be treated as a raw primary key rather than a
    friendly identifier: ints, and strings that survive an int round-trip
    unchanged ("42" but not "042" or "42-things").
    """
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, str):
        try:
            return str(int(value)) == value
        except ValueError:
            return False
    return False


def normalize(text: Optional[str], max_length: Optional[int] = None) -> str:
    """Slugify ``text``; ``max_length=None`` means no length limit."""
    # Single dashes only, so a normalized name never contains "--"
    if not text:
        return ""
    return slugify(text, max_length=max_length or 0, word_boundary=True, separator="-")
