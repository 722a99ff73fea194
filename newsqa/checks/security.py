"""
Transport and response-header checks for the monitored page.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Mapping

from newsqa.errors import CheckError

logger = logging.getLogger(__name__)


@dataclass
class SecurityIssue:
    type: str
    message: str


@dataclass
class SecurityAnalysisResult:
    issues: List[SecurityIssue] = field(default_factory=list)
    is_secure: bool = True
    summary: str = ""


class SecurityScanner:
    def __init__(self, required_headers: List[str]) -> None:
        self.required_headers = list(required_headers)

    def scan(self, url: str, headers: Mapping[str, str]) -> List[SecurityIssue]:
        issues: List[SecurityIssue] = []
        if not url.startswith("https://"):
            issues.append(
                SecurityIssue(type="insecure_connection", message="The page is not served over HTTPS")
            )
        present = {name.lower() for name, value in headers.items() if value}
        for header in self.required_headers:
            if header.lower() not in present:
                issues.append(SecurityIssue(type="missing_header", message=f"Missing security header: {header}"))
        return issues

    def analyze(self, url: str, headers: Mapping[str, str]) -> SecurityAnalysisResult:
        issues = self.scan(url, headers)
        return SecurityAnalysisResult(issues=issues, is_secure=not issues, summary=generate_summary(issues))

    def scan_page(self, page) -> SecurityAnalysisResult:
        """Reload ``page`` to capture its response headers, then analyse them."""
        try:
            response = page.goto(page.url)
        except Exception as exc:
            raise CheckError("security scan", exc) from exc
        headers = response.headers if response else {}
        result = self.analyze(page.url, headers)
        if not result.is_secure:
            logger.warning(result.summary)
        return result


def generate_summary(issues: List[SecurityIssue]) -> str:
    if not issues:
        return "No security issues found."
    lines = "\n".join(f"- {issue.type}: {issue.message}" for issue in issues)
    return f"Found {len(issues)} security issue(s):\n{lines}"
