"""Summaries of the report index written by wstest."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Tuple


PASSING_BEHAVIORS = {"OK", "NON-STRICT", "INFORMATIONAL", "UNIMPLEMENTED"}
PASSING_CLOSE_BEHAVIORS = {"OK", "INFORMATIONAL"}


class ReportError(Exception):
    """Raised when a report index is missing or malformed."""


@dataclass
class ReportSummary:
    agent: str
    total_cases: int = 0
    behaviors: Dict[str, int] = field(default_factory=dict)
    failed_cases: List[str] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.failed_cases

    def format_line(self) -> str:
        status = "PASS" if self.passed else "FAIL"
        counts = ", ".join(
            f"{behavior}={count}" for behavior, count in sorted(self.behaviors.items())
        )
        line = f"[{status}] {self.agent}: {self.total_cases} cases ({counts})"
        if self.failed_cases:
            line += f" failed: {', '.join(self.failed_cases)}"
        return line


def case_sort_key(case_id: str) -> Tuple[Any, ...]:
    """Order dotted case ids numerically, e.g. 1.1.2 before 1.1.10."""
    parts: List[Any] = []
    for part in case_id.split("."):
        if part.isdigit():
            parts.append((0, int(part), ""))
        else:
            parts.append((1, 0, part))
    return tuple(parts)


def is_passing_case(result: Dict[str, Any]) -> bool:
    if result.get("behavior") not in PASSING_BEHAVIORS:
        return False
    close = result.get("behaviorClose")
    return close is None or close in PASSING_CLOSE_BEHAVIORS


def summarize_agent(agent: str, cases: Dict[str, Any]) -> ReportSummary:
    summary = ReportSummary(agent=agent)
    for case_id in sorted(cases, key=case_sort_key):
        result = cases[case_id]
        if not isinstance(result, dict):
            raise ReportError(f"Malformed result for case {case_id} of agent {agent}")
        behavior = str(result.get("behavior", "UNKNOWN"))
        summary.total_cases += 1
        summary.behaviors[behavior] = summary.behaviors.get(behavior, 0) + 1
        if not is_passing_case(result):
            summary.failed_cases.append(case_id)
    return summary


def load_report_index(index_path: Path) -> Dict[str, Any]:
    if not index_path.exists():
        raise ReportError(f"Report index not found: {index_path}")
    try:
        data = json.loads(index_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ReportError(f"Report index is not valid JSON: {index_path}: {exc}") from exc
    if not isinstance(data, dict) or not data:
        raise ReportError(f"Report index has no agents: {index_path}")
    return data


def summarize_report(index_path: Path) -> List[ReportSummary]:
    """Summarize every agent in a wstest report index, ordered by agent name."""
    data = load_report_index(index_path)
    summaries: List[ReportSummary] = []
    for agent in sorted(data):
        cases = data[agent]
        if not isinstance(cases, dict):
            raise ReportError(f"Malformed cases for agent {agent}: {index_path}")
        summaries.append(summarize_agent(agent, cases))
    return summaries
