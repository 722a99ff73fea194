"""
Page object for the Hacker News "newest" listing.

``HackerNewsPage`` wraps a live Playwright ``Page``. Two kinds of item are
handed to the validators:

- ``PlaywrightItem``: a live row handle, only usable while the page stays on
  the listing it was read from and only from the thread that owns the page.
- ``ListingItem``: a snapshot taken with one DOM evaluation per page, used
  when the listing spans several pages.
"""
from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional

from playwright.sync_api import ElementHandle, Error as PlaywrightError, Page

from newsqa.browser import polite_wait
from newsqa.models import ListingItem
from newsqa.settings import HarnessSettings

logger = logging.getLogger(__name__)

_COMMENT_COUNT = re.compile(r"(\d+)\s+comments?")

_SNAPSHOT_SCRIPT = """
(rows, sel) => rows.map((row) => {
  const link = row.querySelector(sel.title_link);
  const rank = row.querySelector(sel.rank);
  const sub = row.nextElementSibling;
  const pick = (selector) => (sub ? sub.querySelector(selector) : null);
  const age = pick(sel.age);
  const user = pick(sel.author);
  const score = pick(sel.score);
  return {
    item_id: row.id || null,
    rank: rank ? parseInt(rank.textContent, 10) || null : null,
    title: link ? link.textContent : '',
    url: link ? link.href : '',
    author: user ? user.textContent : '',
    score_text: score ? score.textContent : null,
    age_title: age ? age.getAttribute('title') : null,
  };
})
"""

_LINKS_SCRIPT = """
(anchors) => anchors.map((a) => [a.getAttribute('href') || '', a.href || ''])
"""


class PlaywrightItem:
    """``ItemAccessor`` over a live ``tr.athing`` row and its subtext row."""

    # Handles may only be read from the thread that owns the page.
    thread_bound = True

    def __init__(self, row: ElementHandle, selectors: Dict[str, str]) -> None:
        self.row = row
        self.selectors = selectors

    def _subtext(self) -> Optional[ElementHandle]:
        return self.row.evaluate_handle("el => el.nextElementSibling").as_element()

    def _in_subtext(self, key: str) -> Optional[ElementHandle]:
        subtext = self._subtext()
        return subtext.query_selector(self.selectors[key]) if subtext else None

    def get_timestamp_attribute(self) -> Optional[str]:
        age = self._in_subtext("age")
        if age is None:
            raise LookupError("Age element not found")
        return age.get_attribute("title")

    def get_title(self) -> str:
        link = self.row.query_selector(self.selectors["title_link"])
        return (link.text_content() or "") if link else ""

    def get_url(self) -> str:
        link = self.row.query_selector(self.selectors["title_link"])
        return (link.evaluate("el => el.href") or "") if link else ""

    def get_author(self) -> str:
        user = self._in_subtext("author")
        return (user.text_content() or "") if user else ""

    def get_score(self) -> Optional[str]:
        score = self._in_subtext("score")
        return score.text_content() if score else None


class HackerNewsPage:
    def __init__(self, page: Page, settings: HarnessSettings, selectors: Dict[str, Any]) -> None:
        self.page = page
        self.settings = settings
        self.url = settings.base_url
        self.listing = selectors["listing"]
        self.navigation = selectors["navigation"]
        self.search = selectors["search"]

    def navigate(self) -> None:
        self.page.goto(self.url, timeout=self.settings.network_timeout_ms)

    def title(self) -> str:
        return self.page.title()

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------
    def collect_items(self, count: int, page_delay: float = 1.0) -> List[ListingItem]:
        """
        Snapshot the first ``count`` rows of the listing, following the
        "More" link across pages. Returns fewer rows if the listing ends.
        """
        self.navigate()
        items: List[ListingItem] = []
        while len(items) < count:
            self.page.wait_for_selector(self.listing["article"], timeout=self.settings.network_timeout_ms)
            rows = self.page.eval_on_selector_all(self.listing["article"], _SNAPSHOT_SCRIPT, self.listing)
            items.extend(ListingItem(**row) for row in rows)
            logger.info("Collected %d rows from %s (total %d)", len(rows), self.page.url, len(items))
            if len(items) >= count:
                break
            more = self.page.query_selector(self.listing["more_link"])
            if more is None:
                logger.warning("Listing ended after %d rows; wanted %d", len(items), count)
                break
            polite_wait(page_delay)
            more.click()
            self.page.wait_for_load_state("domcontentloaded")
        return items[:count]

    def get_articles(self) -> List[PlaywrightItem]:
        rows = self.page.query_selector_all(self.listing["article"])
        return [PlaywrightItem(row, self.listing) for row in rows]

    def click_more_link(self) -> None:
        self.page.click(self.listing["more_link"])
        self.page.wait_for_load_state("networkidle")

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------
    def perform_search(self, query: str) -> None:
        self.page.fill(self.search["input"], query)
        self.page.press(self.search["input"], "Enter")
        self.page.wait_for_load_state("networkidle")

    def get_search_results(self) -> List[ElementHandle]:
        try:
            self.page.wait_for_selector(self.search["result"], timeout=self.settings.network_timeout_ms)
        except PlaywrightError as exc:
            logger.warning("No search results rendered: %s", exc)
            return []
        return self.page.query_selector_all(self.search["result"])

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------
    def set_viewport(self, name: str) -> None:
        self.page.set_viewport_size(self.settings.viewport(name))

    def set_mobile_viewport(self) -> None:
        self.set_viewport("mobile")

    def reset_viewport(self) -> None:
        self.set_viewport("desktop")

    def is_mobile_menu_visible(self) -> bool:
        return self.page.is_visible(self.navigation["mobile_menu"])

    # ------------------------------------------------------------------
    # Links and comments
    # ------------------------------------------------------------------
    def collect_links(self) -> List[str]:
        pairs = self.page.eval_on_selector_all("a[href]", _LINKS_SCRIPT)
        links = []
        for raw, absolute in pairs:
            if not raw or raw.startswith(("#", "javascript:", "mailto:")):
                continue
            if absolute.startswith(("http://", "https://")):
                links.append(absolute)
        return links

    def get_comment_count(self, article_index: int) -> int:
        subtexts = self.page.query_selector_all(self.listing["subtext"])
        if len(subtexts) <= article_index:
            return 0
        return parse_comment_count(subtexts[article_index].text_content())

    def navigate_to_comments(self, article_index: int) -> bool:
        links = self.page.query_selector_all(self.listing["comment_link"])
        if len(links) <= article_index:
            return False
        links[article_index].click()
        self.page.wait_for_load_state("domcontentloaded")
        return True

    def get_visible_comments(self) -> List[ElementHandle]:
        return self.page.query_selector_all(self.listing["comment"])

    # ------------------------------------------------------------------
    # Failure handling
    # ------------------------------------------------------------------
    def simulate_network_failure(self) -> Optional[str]:
        """
        Abort every request, try to load the listing and return the
        navigation error message (``None`` if navigation succeeded).
        """
        self.page.route("**/*", lambda route: route.abort("failed"))
        try:
            self.navigate()
        except PlaywrightError as exc:
            logger.info("Navigation failed as expected: %s", exc)
            return str(exc)
        finally:
            self.page.unroute("**/*")
        return None


def parse_comment_count(text: Optional[str]) -> int:
    match = _COMMENT_COUNT.search(text or "")
    return int(match.group(1)) if match else 0
