"""
Public API for the listing validation harness.
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from newsqa.accessor import ItemAccessor
from newsqa.errors import InvalidInputError
from newsqa.models import FullValidationResult
from newsqa.settings import HarnessSettings, load_settings
from newsqa.validators import ArticleValidator

__version__ = "1.0.0"

SETTINGS: HarnessSettings = load_settings()


def build_validator(settings: Optional[HarnessSettings] = None) -> ArticleValidator:
    resolved = settings or SETTINGS
    return ArticleValidator(
        expected_count=resolved.expected_item_count,
        time_threshold_minutes=resolved.staleness_threshold_minutes,
        max_workers=resolved.validation_workers,
    )


def perform_full_validation(
    items: Sequence[ItemAccessor], *, now: Optional[datetime] = None
) -> FullValidationResult:
    """
    Validate a fixed collection of listing items with the configured settings.
    """
    return build_validator().perform_full_validation(items, now=now)


__all__ = [
    "ArticleValidator",
    "FullValidationResult",
    "HarnessSettings",
    "InvalidInputError",
    "ItemAccessor",
    "build_validator",
    "perform_full_validation",
]
