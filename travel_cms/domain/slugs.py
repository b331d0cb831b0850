import re

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"

_NON_ALNUM = re.compile(r"[^a-z0-9\s-]")
_SEPARATORS = re.compile(r"[\s-]+")


def slugify(title: str) -> str:
    """
    Derive a URL slug from a title.

    Lowercases, strips everything except ASCII letters, digits, hyphens and
    whitespace, then collapses separator runs into single hyphens and trims
    stray hyphens.
    Returns an empty string when nothing usable remains.

    >>> slugify("Study in Malaysia: 2025 Guide!")
    'study-in-malaysia-2025-guide'
    """
    text = _NON_ALNUM.sub("", title.lower())
    return _SEPARATORS.sub("-", text.strip()).strip("-")


def is_valid_slug(slug: str, pattern: str = SLUG_PATTERN, max_length: int | None = None) -> bool:
    if max_length is not None and len(slug) > max_length:
        return False
    return bool(re.match(pattern, slug))
