"""
HTTP helper with retries + polite headers used by the link checker.
"""
from __future__ import annotations

import logging
from typing import Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

logger = logging.getLogger(__name__)


class HttpClient:
    def __init__(self, timeout: float = 10, max_retries: int = 2, user_agent: str | None = None):
        self.timeout = timeout
        self.session = requests.Session()
        retry = Retry(
            total=max_retries,
            backoff_factor=0.6,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["HEAD", "GET", "OPTIONS"],
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)
        self.session.headers.update(
            {
                "User-Agent": user_agent or "NewsQA-Harness/1.0",
                "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            }
        )

    def head_status(self, url: str) -> Optional[int]:
        """
        Return the final status code for ``url`` or ``None`` when the request
        failed outright. Servers rejecting HEAD with 405 are retried with GET.
        """
        try:
            resp = self.session.head(url, timeout=self.timeout, allow_redirects=True)
            if resp.status_code == 405:
                resp = self.session.get(url, timeout=self.timeout, allow_redirects=True, stream=True)
                resp.close()
            return resp.status_code
        except requests.RequestException as exc:
            logger.warning("HEAD %s failed: %s", url, exc)
            return None

    def close(self) -> None:
        self.session.close()
