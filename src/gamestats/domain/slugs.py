"""Slug generation for game documents.

Two slug shapes:
- Free text: ``slugify("Florida State")`` -> ``florida-state``.
- Game: ``YYYY-MM-DD-<opponent>``, e.g. ``2024-09-07-appalachian-state``.

INVARIANT: ``slugify(slugify(x)) == slugify(x)``.
"""

from __future__ import annotations

import re
from datetime import UTC, date, datetime

_NON_ALNUM_RUN = re.compile(r"[^a-z0-9]+")


def slugify(text: str) -> str:
    """Lowercase *text* and collapse every non ``[a-z0-9]`` run into one hyphen.

    Leading and trailing hyphens are removed.

    Examples:
        >>> slugify("Florida State")
        'florida-state'
        >>> slugify("  Texas A&M!  ")
        'texas-a-m'
    """
    return _NON_ALNUM_RUN.sub("-", text.lower()).strip("-")


def to_iso_date(value: date | datetime | str) -> str:
    """Normalize a date-like value to ``YYYY-MM-DD``.

    Aware datetimes are converted to UTC before the date is taken.

    Raises:
        ValueError: If *value* cannot be parsed as a date.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        return value.isoformat()
    else:
        text = str(value).strip()
        try:
            return date.fromisoformat(text).isoformat()
        except ValueError:
            parsed = datetime.fromisoformat(text)

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(UTC)
    return parsed.date().isoformat()


def game_slug(game_date: date | datetime | str, opponent: str) -> str:
    """Build the canonical game slug ``YYYY-MM-DD-<slugify(opponent)>``.

    Raises:
        ValueError: If *game_date* cannot be parsed.
    """
    return f"{to_iso_date(game_date)}-{slugify(opponent)}"
