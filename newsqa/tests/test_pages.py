import unittest
from unittest.mock import MagicMock, patch

from playwright.sync_api import Error as PlaywrightError

from newsqa.config_loader import load_selectors
from newsqa.models import ListingItem
from newsqa.pages.hacker_news import HackerNewsPage, PlaywrightItem, parse_comment_count
from newsqa.settings import HarnessSettings


def _row(index: int) -> dict:
    return {
        "item_id": str(5000 - index),
        "rank": index + 1,
        "title": f"Story {index}",
        "url": f"https://example.com/{index}",
        "author": f"user{index}",
        "score_text": "1 point",
        "age_title": "2024-09-10T12:00:00 1725969600",
    }


class CommentCountTests(unittest.TestCase):
    def test_parse_comment_count(self):
        self.assertEqual(parse_comment_count("12 points by pg 1 hour ago | hide | 42 comments"), 42)
        self.assertEqual(parse_comment_count("1 point by pg | hide | 1 comment"), 1)
        self.assertEqual(parse_comment_count("1 point by pg | hide | discuss"), 0)
        self.assertEqual(parse_comment_count(None), 0)


class HackerNewsPageTests(unittest.TestCase):
    def setUp(self) -> None:
        self.page = MagicMock()
        self.settings = HarnessSettings()
        self.hn = HackerNewsPage(self.page, self.settings, load_selectors())

    @patch("newsqa.pages.hacker_news.polite_wait")
    def test_collect_items_follows_more_link(self, mock_wait):
        self.page.eval_on_selector_all.side_effect = [
            [_row(i) for i in range(30)],
            [_row(i) for i in range(30, 60)],
        ]
        items = self.hn.collect_items(45)
        self.assertEqual(len(items), 45)
        self.assertIsInstance(items[0], ListingItem)
        self.assertEqual(items[44].title, "Story 44")
        self.page.goto.assert_called_once_with(self.settings.base_url, timeout=self.settings.network_timeout_ms)
        self.page.query_selector.return_value.click.assert_called_once()
        mock_wait.assert_called_once()

    @patch("newsqa.pages.hacker_news.polite_wait")
    def test_collect_items_stops_when_listing_ends(self, mock_wait):
        self.page.eval_on_selector_all.return_value = [_row(i) for i in range(30)]
        self.page.query_selector.return_value = None
        items = self.hn.collect_items(100)
        self.assertEqual(len(items), 30)
        mock_wait.assert_not_called()

    def test_collect_links_keeps_http_targets_only(self):
        self.page.eval_on_selector_all.return_value = [
            ["item?id=1", "https://news.ycombinator.com/item?id=1"],
            ["#", "https://news.ycombinator.com/newest#"],
            ["javascript:void(0)", "javascript:void(0)"],
            ["mailto:hn@ycombinator.com", "mailto:hn@ycombinator.com"],
            ["", ""],
            ["ftp://example.com/file", "ftp://example.com/file"],
            ["https://example.com/", "https://example.com/"],
        ]
        self.assertEqual(
            self.hn.collect_links(),
            ["https://news.ycombinator.com/item?id=1", "https://example.com/"],
        )

    def test_comment_count_out_of_range_is_zero(self):
        self.page.query_selector_all.return_value = []
        self.assertEqual(self.hn.get_comment_count(0), 0)
        self.assertFalse(self.hn.navigate_to_comments(0))

    def test_network_failure_returns_error_and_unroutes(self):
        self.page.goto.side_effect = PlaywrightError("net::ERR_FAILED")
        message = self.hn.simulate_network_failure()
        self.assertIn("ERR_FAILED", message)
        self.page.route.assert_called_once()
        self.page.unroute.assert_called_once_with("**/*")

    def test_search_results_timeout_returns_empty(self):
        self.page.wait_for_selector.side_effect = PlaywrightError("Timeout 10000ms exceeded")
        self.assertEqual(self.hn.get_search_results(), [])

    def test_viewport_switching(self):
        self.hn.set_mobile_viewport()
        self.hn.reset_viewport()
        self.assertEqual(
            [c.args[0] for c in self.page.set_viewport_size.call_args_list],
            [{"width": 375, "height": 667}, {"width": 1280, "height": 720}],
        )


class PlaywrightItemTests(unittest.TestCase):
    def test_missing_age_raises_lookup_error(self):
        row = MagicMock()
        row.evaluate_handle.return_value.as_element.return_value = None
        item = PlaywrightItem(row, load_selectors()["listing"])
        with self.assertRaises(LookupError):
            item.get_timestamp_attribute()
        self.assertEqual(item.get_author(), "")
        self.assertIsNone(item.get_score())


if __name__ == "__main__":
    unittest.main()
