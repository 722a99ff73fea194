"""
Single-run report for the harness: per-step outcomes plus a summary,
written as JSON.
"""
from __future__ import annotations

import logging
from dataclasses import asdict, is_dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from newsqa.models import FullValidationResult

logger = logging.getLogger(__name__)

StepStatus = Literal["passed", "failed"]


class StepResult(BaseModel):
    name: str
    status: StepStatus
    duration_ms: float
    error: Optional[str] = None
    details: Dict[str, Any] = Field(default_factory=dict)


class ReportSummary(BaseModel):
    total: int = 0
    passed: int = 0
    failed: int = 0
    pass_rate: str = "0.00%"


class SuiteReport(BaseModel):
    target: str
    started_at: datetime
    finished_at: Optional[datetime] = None
    summary: ReportSummary = Field(default_factory=ReportSummary)
    details: List[StepResult] = Field(default_factory=list)


class Reporter:
    def __init__(self, target: str) -> None:
        self.report = SuiteReport(target=target, started_at=datetime.now(timezone.utc))

    def add_step(
        self,
        name: str,
        status: StepStatus,
        duration_ms: float,
        error: Optional[BaseException | str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> StepResult:
        step = StepResult(
            name=name,
            status=status,
            duration_ms=round(duration_ms, 2),
            error=str(error) if error is not None else None,
            details=details or {},
        )
        self.report.details.append(step)
        return step

    def summarize(self) -> ReportSummary:
        total = len(self.report.details)
        passed = sum(1 for step in self.report.details if step.status == "passed")
        self.report.summary = ReportSummary(
            total=total,
            passed=passed,
            failed=total - passed,
            pass_rate=calculate_pass_rate(passed, total),
        )
        self.report.finished_at = datetime.now(timezone.utc)
        return self.report.summary

    def write(self, output_path: Path) -> Path:
        summary = self.summarize()
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(self.report.model_dump_json(indent=2), encoding="utf-8")
        logger.info("Test report generated: %s", output_path)
        logger.info(
            "Summary: Total: %d, Passed: %d, Failed: %d, Pass Rate: %s",
            summary.total,
            summary.passed,
            summary.failed,
            summary.pass_rate,
        )
        return output_path


def calculate_pass_rate(passed: int, total: int) -> str:
    if total == 0:
        return "0.00%"
    return f"{(passed / total) * 100:.2f}%"


def to_jsonable(value: Any) -> Any:
    """Convert check results (dataclasses, datetimes, nested lists) into JSON-friendly data."""
    if is_dataclass(value) and not isinstance(value, type):
        return to_jsonable(asdict(value))
    if isinstance(value, dict):
        return {key: to_jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(item) for item in value]
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def validation_to_dict(result: FullValidationResult) -> Dict[str, Any]:
    return to_jsonable(result)
