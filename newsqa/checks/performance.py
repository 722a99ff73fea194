"""
Navigation/paint timing capture and threshold comparison.

Metrics come from the browser's Performance Timeline, so they are available
on every engine (no CDP session required). Values are milliseconds relative
to navigation start; ``time_to_interactive`` is approximated by
``domInteractive``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

from newsqa.errors import CheckError

logger = logging.getLogger(__name__)

METRIC_NAMES = ("first_contentful_paint", "time_to_interactive", "dom_content_loaded", "load_time")

_TIMING_SCRIPT = """
() => {
  const nav = performance.getEntriesByType('navigation')[0];
  const fcp = performance.getEntriesByName('first-contentful-paint')[0];
  const pick = (value) => (value && value > 0 ? value : null);
  return {
    first_contentful_paint: fcp ? pick(fcp.startTime) : null,
    time_to_interactive: nav ? pick(nav.domInteractive) : null,
    dom_content_loaded: nav ? pick(nav.domContentLoadedEventEnd) : null,
    load_time: nav ? pick(nav.loadEventEnd) : null,
  };
}
"""


@dataclass
class PerformanceMetrics:
    first_contentful_paint: Optional[float] = None
    time_to_interactive: Optional[float] = None
    dom_content_loaded: Optional[float] = None
    load_time: Optional[float] = None

    def as_dict(self) -> Dict[str, Optional[float]]:
        return {name: getattr(self, name) for name in METRIC_NAMES}


@dataclass
class PerformanceAnalysisResult:
    metrics: PerformanceMetrics
    results: Dict[str, bool] = field(default_factory=dict)
    all_passed: bool = True


class PerformanceAnalyzer:
    def __init__(self, thresholds: Mapping[str, float]) -> None:
        self.thresholds = dict(thresholds)

    def capture_metrics(self, page) -> PerformanceMetrics:
        try:
            raw = page.evaluate(_TIMING_SCRIPT) or {}
        except Exception as exc:
            raise CheckError("capturing performance metrics", exc) from exc
        return PerformanceMetrics(**{name: _as_float(raw.get(name)) for name in METRIC_NAMES})

    def compare_with_thresholds(self, metrics: PerformanceMetrics) -> PerformanceAnalysisResult:
        results: Dict[str, bool] = {}
        all_passed = True
        for name, value in metrics.as_dict().items():
            if value is None or name not in self.thresholds:
                continue
            passed = value <= self.thresholds[name]
            results[name] = passed
            all_passed = all_passed and passed
            if not passed:
                logger.warning("%s=%.0fms exceeds threshold %sms", name, value, self.thresholds[name])
        return PerformanceAnalysisResult(metrics=metrics, results=results, all_passed=all_passed)

    def analyze(self, page) -> PerformanceAnalysisResult:
        return self.compare_with_thresholds(self.capture_metrics(page))


def _as_float(value) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None
