"""
Core data structures shared by the validators, page object and reporter.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass
class ArticleDetails:
    title: str = ""
    url: str = ""
    author: str = ""
    # None when the score is missing or not a number.
    score: Optional[int] = None


@dataclass
class SortingResult:
    is_valid: bool
    message: str
    error_index: Optional[int] = None


@dataclass
class ContentValidationResult:
    is_valid: bool
    details: ArticleDetails


@dataclass
class InaccurateArticle:
    index: int
    timestamp: datetime


@dataclass
class TimestampAccuracyResult:
    is_accurate: bool
    inaccurate_articles: List[InaccurateArticle] = field(default_factory=list)


@dataclass
class DuplicateArticle:
    index: int
    title: str


@dataclass
class UniquenessResult:
    is_unique: bool
    duplicates: List[DuplicateArticle] = field(default_factory=list)


@dataclass
class FullValidationResult:
    """
    Outcome of every article check for one pass over the listing.

    ``is_fully_valid`` is derived from the four component results and is not
    accepted as a constructor argument.
    """

    sorting: SortingResult
    content: List[ContentValidationResult]
    timestamp_accuracy: TimestampAccuracyResult
    uniqueness: UniquenessResult
    is_fully_valid: bool = field(init=False)

    def __post_init__(self) -> None:
        self.is_fully_valid = (
            self.sorting.is_valid
            and all(entry.is_valid for entry in self.content)
            and self.timestamp_accuracy.is_accurate
            and self.uniqueness.is_unique
        )


@dataclass
class ListingItem:
    """
    Snapshot of one row of the listing, captured before the page moves on.

    Fields hold the raw text exactly as rendered; the accessor methods make a
    snapshot usable anywhere a live item handle is expected.
    """

    title: str = ""
    url: str = ""
    author: str = ""
    score_text: Optional[str] = None
    age_title: Optional[str] = None
    item_id: Optional[str] = None
    rank: Optional[int] = None

    def get_timestamp_attribute(self) -> Optional[str]:
        return self.age_title

    def get_title(self) -> str:
        return self.title

    def get_url(self) -> str:
        return self.url

    def get_author(self) -> str:
        return self.author

    def get_score(self) -> Optional[str]:
        return self.score_text
