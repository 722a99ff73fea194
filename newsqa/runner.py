"""
End-to-end suite: drives one browser session through every check and
records each step in a ``Reporter``.
"""
from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, Optional, Tuple

from newsqa.browser import BrowserCtx
from newsqa.checks.accessibility import AccessibilityChecker
from newsqa.checks.links import find_broken_links, within_budget
from newsqa.checks.performance import PerformanceAnalyzer
from newsqa.checks.security import SecurityScanner
from newsqa.config_loader import load_selectors
from newsqa.http_client import HttpClient
from newsqa.pages.hacker_news import HackerNewsPage
from newsqa.report import Reporter, SuiteReport, to_jsonable, validation_to_dict
from newsqa.settings import HarnessSettings
from newsqa.validators import ArticleValidator

logger = logging.getLogger(__name__)

StepOutcome = Tuple[bool, Dict[str, Any]]


def run_step(reporter: Reporter, name: str, fn: Callable[[], StepOutcome]) -> bool:
    """Run one step, time it and record it. Exceptions fail the step only."""
    logger.info("Step: %s", name)
    start = time.perf_counter()
    try:
        passed, details = fn()
        error = None if passed else f"{name} did not meet expectations"
    except Exception as exc:
        logger.exception("Step '%s' raised", name)
        passed, details, error = False, {}, f"{type(exc).__name__}: {exc}"
    duration_ms = (time.perf_counter() - start) * 1000
    reporter.add_step(name, "passed" if passed else "failed", duration_ms, error=error, details=details)
    logger.info("  [%s] %s (%.0fms)", "OK" if passed else "FAIL", name, duration_ms)
    return passed


class SuiteRunner:
    def __init__(
        self,
        settings: HarnessSettings,
        selectors: Optional[Dict[str, Any]] = None,
        reporter: Optional[Reporter] = None,
    ) -> None:
        self.settings = settings
        self.selectors = selectors or load_selectors()
        self.reporter = reporter or Reporter(target=settings.base_url)
        self.validator = ArticleValidator(
            expected_count=settings.expected_item_count,
            time_threshold_minutes=settings.staleness_threshold_minutes,
            max_workers=settings.validation_workers,
        )
        self.http = HttpClient(timeout=settings.network_timeout_ms / 1000, user_agent=settings.user_agent)
        self.hn: Optional[HackerNewsPage] = None

    def run(self) -> SuiteReport:
        try:
            with BrowserCtx(
                engine=self.settings.browser,
                headless=self.settings.headless,
                viewport=self.settings.viewport("desktop"),
                default_timeout_ms=self.settings.network_timeout_ms,
            ) as ctx:
                page = ctx.new_page()
                try:
                    self.hn = HackerNewsPage(page, self.settings, self.selectors)
                    for name, step in self.steps():
                        run_step(self.reporter, name, step)
                finally:
                    page.close()
        finally:
            self.http.close()
        self.reporter.summarize()
        return self.reporter.report

    def steps(self):
        return [
            ("navigate to listing", self.check_navigation),
            ("article validation", self.check_articles),
            ("search and pagination", self.check_interactions),
            ("responsive design", self.check_responsive),
            ("performance", self.check_performance),
            ("accessibility", self.check_accessibility),
            ("security", self.check_security),
            ("broken links", self.check_broken_links),
            ("comment consistency", self.check_comments),
            ("network failure handling", self.check_network_failure),
        ]

    def check_navigation(self) -> StepOutcome:
        self.hn.navigate()
        title = self.hn.title()
        return "Hacker News" in title, {"title": title}

    def check_articles(self) -> StepOutcome:
        items = self.hn.collect_items(self.settings.expected_item_count)
        result = self.validator.perform_full_validation(items)
        if not result.is_fully_valid:
            logger.error("Validation errors: sorting=%s", result.sorting.message)
        details = validation_to_dict(result)
        details["collected"] = len(items)
        return result.is_fully_valid, details

    def check_interactions(self) -> StepOutcome:
        self.hn.navigate()
        self.hn.perform_search(self.settings.search_query)
        search_results = len(self.hn.get_search_results())
        self.hn.navigate()
        self.hn.click_more_link()
        additional = len(self.hn.get_articles())
        passed = search_results > 0 and additional == self.settings.additional_articles_count
        return passed, {"search_results": search_results, "additional_articles": additional}

    def check_responsive(self) -> StepOutcome:
        self.hn.navigate()
        self.hn.set_mobile_viewport()
        try:
            visible = self.hn.is_mobile_menu_visible()
        finally:
            self.hn.reset_viewport()
        return visible, {"mobile_menu_visible": visible}

    def check_performance(self) -> StepOutcome:
        self.hn.navigate()
        analysis = PerformanceAnalyzer(self.settings.performance_thresholds).analyze(self.hn.page)
        return analysis.all_passed, to_jsonable(analysis)

    def check_accessibility(self) -> StepOutcome:
        self.hn.navigate()
        violations = AccessibilityChecker().analyze(self.hn.page)
        return not violations, {"violations": to_jsonable(violations)}

    def check_security(self) -> StepOutcome:
        self.hn.navigate()
        analysis = SecurityScanner(self.settings.security_headers).scan_page(self.hn.page)
        return analysis.is_secure, to_jsonable(analysis)

    def check_broken_links(self) -> StepOutcome:
        self.hn.navigate()
        links = self.hn.collect_links()
        broken = find_broken_links(links, self.http)
        passed = within_budget(broken, self.settings.max_broken_links)
        return passed, {"checked": len(set(links)), "broken": to_jsonable(broken)}

    def check_comments(self) -> StepOutcome:
        self.hn.navigate()
        expected = self.hn.get_comment_count(0)
        if not self.hn.navigate_to_comments(0):
            return False, {"error": "no comment link for the first article"}
        visible = len(self.hn.get_visible_comments())
        return visible == expected, {"comment_count": expected, "visible_comments": visible}

    def check_network_failure(self) -> StepOutcome:
        message = self.hn.simulate_network_failure()
        return message is not None, {"error": message}


def run_suite(
    settings: HarnessSettings,
    selectors: Optional[Dict[str, Any]] = None,
    reporter: Optional[Reporter] = None,
) -> SuiteReport:
    return SuiteRunner(settings, selectors=selectors, reporter=reporter).run()
