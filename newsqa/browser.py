"""
Playwright browser lifecycle for the harness.
"""
from __future__ import annotations

import logging
import random
import time
from typing import Dict, Optional

from playwright.sync_api import sync_playwright

logger = logging.getLogger(__name__)

SUPPORTED_ENGINES = ("chromium", "firefox", "webkit")


class BrowserCtx:
    """
    Context manager yielding a fresh ``BrowserContext``; driver, browser and
    context are all closed on exit.
    """

    def __init__(
        self,
        engine: str = "chromium",
        headless: bool = True,
        viewport: Optional[Dict[str, int]] = None,
        user_agent: Optional[str] = None,
        default_timeout_ms: Optional[int] = None,
    ):
        if engine not in SUPPORTED_ENGINES:
            raise ValueError(f"Unsupported browser engine '{engine}'")
        self.engine = engine
        self.headless = headless
        self.viewport = viewport
        self.user_agent = user_agent
        self.default_timeout_ms = default_timeout_ms
        self._p = None
        self._browser = None
        self._ctx = None

    def __enter__(self):
        self._p = sync_playwright().start()
        self._browser = getattr(self._p, self.engine).launch(headless=self.headless)
        options = {}
        if self.viewport:
            options["viewport"] = self.viewport
        if self.user_agent:
            options["user_agent"] = self.user_agent
        self._ctx = self._browser.new_context(**options)
        if self.default_timeout_ms:
            self._ctx.set_default_timeout(self.default_timeout_ms)
        logger.info("Launched %s (headless=%s)", self.engine, self.headless)
        return self._ctx

    def __exit__(self, exc_type, exc, tb):
        if self._ctx: self._ctx.close()
        if self._browser: self._browser.close()
        if self._p: self._p.stop()


def polite_wait(seconds=1.0):
    time.sleep(seconds + random.random())
