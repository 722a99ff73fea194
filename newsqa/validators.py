"""
Multi-criteria validation of the listing: sort order, content completeness,
timestamp freshness and title uniqueness.

The validators only read through ``ItemAccessor``; they never mutate the
collection, so the four checks (and the per-item content checks) can be
fanned out on a thread pool and joined here.
"""
from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Set

from newsqa.accessor import ItemAccessor
from newsqa.errors import InvalidInputError
from newsqa.models import (
    ArticleDetails,
    ContentValidationResult,
    DuplicateArticle,
    FullValidationResult,
    InaccurateArticle,
    SortingResult,
    TimestampAccuracyResult,
    UniquenessResult,
)
from newsqa.timestamps import extract_timestamp

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


class ArticleValidator:
    def __init__(
        self,
        expected_count: int = 100,
        time_threshold_minutes: float = 5,
        max_workers: int = 4,
    ) -> None:
        self.expected_count = expected_count
        self.time_threshold = timedelta(minutes=time_threshold_minutes)
        self.max_workers = max(1, max_workers)

    # ------------------------------------------------------------------
    # Sorting
    # ------------------------------------------------------------------
    def validate_sorting(self, articles: Sequence[ItemAccessor]) -> SortingResult:
        """
        Check the articles are ordered newest first.

        Raises:
            InvalidInputError: ``articles`` is not a sequence or is empty.
        """
        _ensure_sequence(articles)
        if len(articles) != self.expected_count:
            return SortingResult(
                is_valid=False,
                message=f"Expected {self.expected_count}, but found {len(articles)} articles",
            )

        prev_timestamp: Optional[datetime] = None  # None stands for +infinity
        for index, article in enumerate(articles):
            timestamp = extract_timestamp(article)
            if timestamp is None:
                continue
            if prev_timestamp is not None and timestamp > prev_timestamp:
                return SortingResult(
                    is_valid=False,
                    error_index=index,
                    message=(
                        f"Sorting error at index {index}: {timestamp.isoformat()} "
                        f"is newer than {prev_timestamp.isoformat()}"
                    ),
                )
            prev_timestamp = timestamp
        return SortingResult(is_valid=True, message="All articles are correctly sorted")

    # ------------------------------------------------------------------
    # Content
    # ------------------------------------------------------------------
    def validate_article_content(self, article: ItemAccessor) -> ContentValidationResult:
        details = extract_article_details(article)
        return ContentValidationResult(is_valid=is_valid_article_content(details), details=details)

    # ------------------------------------------------------------------
    # Freshness
    # ------------------------------------------------------------------
    def validate_timestamp_accuracy(
        self, articles: Sequence[ItemAccessor], *, now: Optional[datetime] = None
    ) -> TimestampAccuracyResult:
        """
        Flag articles older than the staleness threshold.

        ``now`` is sampled once for the whole pass; a naive value is taken as
        UTC. Articles without a known timestamp are neither flagged nor
        counted as accurate.
        """
        reference = _utc_reference(now)
        inaccurate: List[InaccurateArticle] = []
        for index, article in enumerate(articles):
            timestamp = extract_timestamp(article)
            if timestamp is not None and reference - timestamp > self.time_threshold:
                inaccurate.append(InaccurateArticle(index=index, timestamp=timestamp))
        if inaccurate:
            logger.info("%d articles exceed the %s staleness threshold", len(inaccurate), self.time_threshold)
        return TimestampAccuracyResult(is_accurate=not inaccurate, inaccurate_articles=inaccurate)

    # ------------------------------------------------------------------
    # Uniqueness
    # ------------------------------------------------------------------
    def validate_uniqueness(self, articles: Sequence[ItemAccessor]) -> UniquenessResult:
        # Titles are compared exactly as read; whitespace or case variants count as distinct.
        titles: Set[str] = set()
        duplicates: List[DuplicateArticle] = []
        for index, article in enumerate(articles):
            title = _read_text(article.get_title, "title")
            if title in titles:
                duplicates.append(DuplicateArticle(index=index, title=title))
            else:
                titles.add(title)
        return UniquenessResult(is_unique=not duplicates, duplicates=duplicates)

    # ------------------------------------------------------------------
    # Aggregate
    # ------------------------------------------------------------------
    def perform_full_validation(
        self, articles: Sequence[ItemAccessor], *, now: Optional[datetime] = None
    ) -> FullValidationResult:
        """
        Run every check over ``articles`` and fold the outcomes together.

        All checks always run, even when an earlier one has already failed;
        an ``InvalidInputError`` for an empty collection surfaces only once
        they have finished. A non-sequence is rejected before anything runs.

        Checks run sequentially on the calling thread when ``max_workers == 1``
        or when any item is marked ``thread_bound`` (live handles owned by a
        sync Playwright page).
        """
        if not _is_sequence(articles):
            raise InvalidInputError("Invalid input: articles must be a non-empty sequence")
        reference = _utc_reference(now)
        if self.max_workers == 1 or any(getattr(article, "thread_bound", False) for article in articles):
            result = self._run_sequential(articles, reference)
        else:
            result = self._fan_out(articles, reference)
        logger.info(
            "Full validation of %d articles: fully_valid=%s sorting=%s",
            len(articles),
            result.is_fully_valid,
            result.sorting.message,
        )
        return result

    def _run_sequential(self, articles: Sequence[ItemAccessor], reference: datetime) -> FullValidationResult:
        sorting_error: Optional[InvalidInputError] = None
        sorting: Optional[SortingResult] = None
        try:
            sorting = self.validate_sorting(articles)
        except InvalidInputError as exc:
            sorting_error = exc
        content = [self.validate_article_content(article) for article in articles]
        accuracy = self.validate_timestamp_accuracy(articles, now=reference)
        uniqueness = self.validate_uniqueness(articles)
        if sorting_error is not None:
            raise sorting_error
        return FullValidationResult(
            sorting=sorting,
            content=content,
            timestamp_accuracy=accuracy,
            uniqueness=uniqueness,
        )

    def _fan_out(self, articles: Sequence[ItemAccessor], reference: datetime) -> FullValidationResult:
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            sorting_future = executor.submit(self.validate_sorting, articles)
            content_futures: List[Future] = [
                executor.submit(self.validate_article_content, article) for article in articles
            ]
            accuracy_future = executor.submit(self.validate_timestamp_accuracy, articles, now=reference)
            uniqueness_future = executor.submit(self.validate_uniqueness, articles)

        # The executor has joined every task; result() re-raises InvalidInputError.
        return FullValidationResult(
            sorting=sorting_future.result(),
            content=[future.result() for future in content_futures],
            timestamp_accuracy=accuracy_future.result(),
            uniqueness=uniqueness_future.result(),
        )


def extract_article_details(article: ItemAccessor) -> ArticleDetails:
    return ArticleDetails(
        title=_read_text(article.get_title, "title"),
        url=_read_text(article.get_url, "url"),
        author=_read_text(article.get_author, "author"),
        score=parse_score(_read_optional(article.get_score, "score")),
    )


def is_valid_article_content(details: ArticleDetails) -> bool:
    return bool(details.title and details.url and details.author and details.score is not None)


def parse_score(raw: Optional[str]) -> Optional[int]:
    """Parse the leading integer of a score label such as ``"42 points"``."""
    if raw is None:
        return None
    match = _LEADING_INT.match(str(raw))
    return int(match.group(1)) if match else None


def _is_sequence(articles: object) -> bool:
    return isinstance(articles, Sequence) and not isinstance(articles, (str, bytes, bytearray))


def _ensure_sequence(articles: object) -> None:
    if not _is_sequence(articles):
        raise InvalidInputError("Invalid input: articles must be a non-empty sequence")
    if len(articles) == 0:
        raise InvalidInputError("Invalid input: articles must be a non-empty sequence")


def _read_text(getter, field_name: str) -> str:
    try:
        return getter() or ""
    except Exception as exc:
        logger.warning("Error reading %s for article: %s", field_name, exc)
        return ""


def _read_optional(getter, field_name: str) -> Optional[str]:
    try:
        return getter()
    except Exception as exc:
        logger.warning("Error reading %s for article: %s", field_name, exc)
        return None


def _utc_reference(now: Optional[datetime]) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    if not now.tzinfo:
        return now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc)
