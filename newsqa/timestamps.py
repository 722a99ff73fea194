"""
Resolve an item's age attribute into a UTC instant.

The live listing renders ``<span class="age" title="2024-09-10T12:34:56 1725971696">``:
an ISO timestamp followed by the same instant in unix seconds. Plain ISO
strings (with or without ``Z``) are accepted too.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from newsqa.accessor import ItemAccessor

logger = logging.getLogger(__name__)


def extract_timestamp(item: ItemAccessor) -> Optional[datetime]:
    """
    Return the item's timestamp, or ``None`` when it is missing, unparseable
    or could not be read. Never raises.
    """
    try:
        raw = item.get_timestamp_attribute()
    except Exception as exc:
        logger.warning("Error getting timestamp for article: %s", exc)
        return None
    if not raw:
        logger.debug("Article has no age attribute")
        return None
    parsed = parse_timestamp(raw)
    if parsed is None:
        logger.warning("Unparseable age attribute %r", raw)
    return parsed


def parse_timestamp(raw: str | None) -> Optional[datetime]:
    if not raw:
        return None
    tokens = str(raw).split()
    if not tokens:
        return None
    if not tokens[0].isdigit():
        parsed = _parse_iso(tokens[0])
        if parsed is not None:
            return parsed
    for token in tokens:
        if token.isdigit():
            try:
                return datetime.fromtimestamp(int(token), tz=timezone.utc)
            except (OverflowError, OSError, ValueError):
                return None
    return None


def _parse_iso(raw: str) -> Optional[datetime]:
    try:
        dt = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return None
    if not dt.tzinfo:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
