"""
Static accessibility checks over the rendered page markup.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

from bs4 import BeautifulSoup

from newsqa.errors import CheckError

logger = logging.getLogger(__name__)

_LABELLED_INPUT_TYPES = {"text", "search", "email", "password", "url", "tel", "number"}


@dataclass
class AccessibilityViolation:
    id: str
    impact: str
    description: str
    nodes: List[str] = field(default_factory=list)


class AccessibilityChecker:
    """
    Rule set: document language, document title, image alt text, link
    names and form labels.
    """

    def __init__(self, max_nodes_per_violation: int = 10) -> None:
        self.max_nodes = max_nodes_per_violation

    def analyze(self, page) -> List[AccessibilityViolation]:
        try:
            html = page.content()
        except Exception as exc:
            raise CheckError("accessibility analysis", exc) from exc
        return self.analyze_html(html)

    def analyze_html(self, html: str) -> List[AccessibilityViolation]:
        soup = BeautifulSoup(html or "", "html.parser")
        violations: List[AccessibilityViolation] = []

        root = soup.find("html")
        if root is None or not (root.get("lang") or "").strip():
            violations.append(
                AccessibilityViolation(
                    id="html-has-lang",
                    impact="serious",
                    description="<html> element must have a lang attribute",
                )
            )

        title = soup.find("title")
        if title is None or not title.get_text(strip=True):
            violations.append(
                AccessibilityViolation(
                    id="document-title",
                    impact="serious",
                    description="Document must have a non-empty <title>",
                )
            )

        missing_alt = [str(img)[:120] for img in soup.find_all("img") if img.get("alt") is None]
        if missing_alt:
            violations.append(
                AccessibilityViolation(
                    id="image-alt",
                    impact="critical",
                    description="Images must have alternate text",
                    nodes=missing_alt[: self.max_nodes],
                )
            )

        unnamed_links = [str(a)[:120] for a in soup.find_all("a", href=True) if not _has_accessible_name(a)]
        if unnamed_links:
            violations.append(
                AccessibilityViolation(
                    id="link-name",
                    impact="serious",
                    description="Links must have discernible text",
                    nodes=unnamed_links[: self.max_nodes],
                )
            )

        label_targets = {label.get("for") for label in soup.find_all("label") if label.get("for")}
        unlabelled = []
        for field_el in soup.find_all("input"):
            if (field_el.get("type") or "text").lower() not in _LABELLED_INPUT_TYPES:
                continue
            if field_el.get("id") in label_targets or field_el.find_parent("label") is not None:
                continue
            if (field_el.get("aria-label") or field_el.get("title") or "").strip():
                continue
            unlabelled.append(str(field_el)[:120])
        if unlabelled:
            violations.append(
                AccessibilityViolation(
                    id="label",
                    impact="critical",
                    description="Form elements must have labels",
                    nodes=unlabelled[: self.max_nodes],
                )
            )

        if violations:
            logger.warning("Accessibility violations found: %s", [v.id for v in violations])
        else:
            logger.info("No accessibility violations found.")
        return violations


def _has_accessible_name(anchor) -> bool:
    if anchor.get_text(strip=True):
        return True
    if (anchor.get("aria-label") or anchor.get("title") or "").strip():
        return True
    return any((img.get("alt") or "").strip() for img in anchor.find_all("img"))
