"""
Centralised settings for the harness (env-first, code-light).

Every value can be overridden with a ``NEWSQA_*`` environment variable;
invalid values fall back to the default with a warning.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Tuple

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://news.ycombinator.com/newest"
DEFAULT_SECURITY_HEADERS = [
    "Strict-Transport-Security",
    "Content-Security-Policy",
    "X-Frame-Options",
    "X-XSS-Protection",
]
DEFAULT_PERFORMANCE_THRESHOLDS = {
    "first_contentful_paint": 3000,
    "time_to_interactive": 6000,
    "dom_content_loaded": 4000,
    "load_time": 10000,
}
DEFAULT_VIEWPORTS = {
    "mobile": (375, 667),
    "tablet": (768, 1024),
    "desktop": (1280, 720),
}


@dataclass
class HarnessSettings:
    base_url: str = DEFAULT_BASE_URL
    expected_item_count: int = 100
    staleness_threshold_minutes: int = 5
    additional_articles_count: int = 30
    search_query: str = "playwright"
    max_broken_links: int = 5
    network_timeout_ms: int = 10000
    validation_workers: int = 4
    browser: str = "chromium"
    headless: bool = True
    user_agent: str = "NewsQA-Harness/1.0"
    report_path: Path = Path("newsqa-report.json")
    security_headers: List[str] = field(default_factory=lambda: list(DEFAULT_SECURITY_HEADERS))
    performance_thresholds: Dict[str, int] = field(default_factory=lambda: dict(DEFAULT_PERFORMANCE_THRESHOLDS))
    viewports: Dict[str, Tuple[int, int]] = field(default_factory=lambda: dict(DEFAULT_VIEWPORTS))

    def viewport(self, name: str) -> Dict[str, int]:
        width, height = self.viewports[name]
        return {"width": width, "height": height}


def _int_from_env(key: str, default: int, minimum: int = 1) -> int:
    raw = os.getenv(key)
    if raw is None or str(raw).strip() == "":
        return default
    try:
        value = int(raw)
        return value if value >= minimum else default
    except Exception:
        logger.warning("Invalid int value for %s=%s; using default %s", key, raw, default)
        return default


def _bool_from_env(key: str, default: bool) -> bool:
    raw = os.getenv(key)
    if raw is None or str(raw).strip() == "":
        return default
    token = str(raw).strip().lower()
    if token in ("1", "true", "yes", "on"):
        return True
    if token in ("0", "false", "no", "off"):
        return False
    logger.warning("Invalid bool value for %s=%s; using default %s", key, raw, default)
    return default


def _parse_headers(raw: str | None) -> List[str]:
    if not raw:
        return list(DEFAULT_SECURITY_HEADERS)
    headers = [token.strip() for token in raw.split(",") if token.strip()]
    return headers or list(DEFAULT_SECURITY_HEADERS)


def _parse_thresholds() -> Dict[str, int]:
    thresholds = dict(DEFAULT_PERFORMANCE_THRESHOLDS)
    for name, default in DEFAULT_PERFORMANCE_THRESHOLDS.items():
        thresholds[name] = _int_from_env(f"NEWSQA_THRESHOLD_{name.upper()}", default)
    return thresholds


def load_settings() -> HarnessSettings:
    report_env = os.getenv("NEWSQA_REPORT_PATH")
    return HarnessSettings(
        base_url=os.getenv("NEWSQA_BASE_URL") or DEFAULT_BASE_URL,
        expected_item_count=_int_from_env("NEWSQA_EXPECTED_ITEM_COUNT", 100),
        staleness_threshold_minutes=_int_from_env("NEWSQA_STALENESS_THRESHOLD_MINUTES", 5),
        additional_articles_count=_int_from_env("NEWSQA_ADDITIONAL_ARTICLES_COUNT", 30),
        search_query=os.getenv("NEWSQA_SEARCH_QUERY") or "playwright",
        max_broken_links=_int_from_env("NEWSQA_MAX_BROKEN_LINKS", 5, minimum=0),
        network_timeout_ms=_int_from_env("NEWSQA_NETWORK_TIMEOUT_MS", 10000),
        validation_workers=_int_from_env("NEWSQA_VALIDATION_WORKERS", 4),
        browser=(os.getenv("NEWSQA_BROWSER") or "chromium").strip().lower(),
        headless=_bool_from_env("NEWSQA_HEADLESS", True),
        user_agent=os.getenv("NEWSQA_USER_AGENT") or "NewsQA-Harness/1.0",
        report_path=Path(report_env) if report_env else Path("newsqa-report.json"),
        security_headers=_parse_headers(os.getenv("NEWSQA_SECURITY_HEADERS")),
        performance_thresholds=_parse_thresholds(),
    )
