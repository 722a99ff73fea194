"""
Broken-link detection over the anchors collected from a page.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Iterable, List, Optional

from newsqa.http_client import HttpClient

logger = logging.getLogger(__name__)


@dataclass
class BrokenLink:
    url: str
    # None when the request itself failed (DNS, timeout, refused).
    status: Optional[int] = None


def find_broken_links(urls: Iterable[str], client: HttpClient, max_workers: int = 5) -> List[BrokenLink]:
    unique = list(dict.fromkeys(url for url in urls if url))
    broken: List[BrokenLink] = []
    if not unique:
        return broken

    with ThreadPoolExecutor(max_workers=max(1, max_workers)) as executor:
        future_map = {executor.submit(client.head_status, url): url for url in unique}
        for future in as_completed(future_map):
            url = future_map[future]
            status = future.result()
            if status is None or status >= 400:
                broken.append(BrokenLink(url=url, status=status))

    broken.sort(key=lambda link: link.url)
    logger.info("Checked %d links, %d broken", len(unique), len(broken))
    return broken


def within_budget(broken: List[BrokenLink], max_broken_links: int) -> bool:
    return len(broken) <= max_broken_links
