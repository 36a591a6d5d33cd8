"""Deterministic storage keys derived from display labels and dates.

Subjects are stored under their slug and grades under ``<slug>_<date>``, so
writing the same subject (in any casing/spacing) or the same subject+date twice
replaces the existing document instead of adding a duplicate.
"""

from __future__ import annotations

import re

from ..common.validators import require_iso_date
from ..core.constants import GRADE_KEY_SEPARATOR, SLUG_SEPARATOR
from ..core.exceptions import ValidationError

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(label: str) -> str:
    """Lower-case, collapse non-alphanumeric runs to '-', trim leading/trailing '-'.

    Empty or all-punctuation labels yield ``""``; use :func:`require_slug` on
    write paths.
    """
    slug = _NON_ALNUM.sub(SLUG_SEPARATOR, (label or "").strip().lower())
    return slug.strip(SLUG_SEPARATOR)


def require_slug(label: str) -> str:
    slug = slugify(label)
    if not slug:
        raise ValidationError(f"Subject name {label!r} has no letters or digits")
    return slug


def grade_key(slug: str, date: str) -> str:
    # '_' never appears in a slug and the date is fixed width, so keys cannot collide.
    if not slug or slug != slugify(slug):
        raise ValidationError(f"Invalid subject slug {slug!r}")
    return f"{slug}{GRADE_KEY_SEPARATOR}{require_iso_date(date)}"
