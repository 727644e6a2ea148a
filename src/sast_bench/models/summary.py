"""Summary statistics models.

Ratios are always derived from counts. Unions add counts and recompute the
ratios, so a parent directory reports the ratio of sums of its children.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

from sast_bench.config import RATIO_DIGITS
from sast_bench.models.finding import CWESet, FindingParseError

CRITERIA = (
    "file",
    "file_cwe",
    "file_cwe_1000",
    "region",
    "region_cwe",
    "region_cwe_1000",
    "rule_id_exact",
)
"""Scoring criteria, in report order"""


def _ratio(numerator: int, denominator: float) -> float:
    if denominator == 0:
        return math.nan
    return round(numerator / denominator, RATIO_DIGITS)


def _dump_float(value: float) -> float | None:
    return None if math.isnan(value) else value


def _load_float(value: float | None) -> float:
    return math.nan if value is None else float(value)


@dataclass
class StatBlock:
    """Counts and ratios for one scoring criterion.

    Ratios are NaN when their denominator is zero.
    """

    true_positive_count: int = 0
    """Expected-fail findings satisfying the criterion"""

    false_positive_count: int = 0
    """Expected-pass findings satisfying the criterion"""

    false_negative_count: int = 0
    """Expected-fail findings not satisfying the criterion"""

    true_positive_rate: float = math.nan
    false_positive_rate: float = math.nan
    recall: float = math.nan
    precision: float = math.nan
    f1_score: float = math.nan

    @classmethod
    def from_counts(
        cls,
        true_positives: int,
        false_positives: int,
        positive_count: int,
        negative_count: int,
    ) -> StatBlock:
        """Compute a StatBlock from raw counts.

        Args:
            true_positives: Matches among ground truth positives
            false_positives: Matches among ground truth negatives
            positive_count: Number of ground truth positives
            negative_count: Number of ground truth negatives
        """
        false_negatives = positive_count - true_positives
        true_positive_rate = _ratio(true_positives, positive_count)
        return cls(
            true_positive_count=true_positives,
            false_positive_count=false_positives,
            false_negative_count=false_negatives,
            true_positive_rate=true_positive_rate,
            false_positive_rate=_ratio(false_positives, negative_count),
            recall=true_positive_rate,
            precision=_ratio(true_positives, true_positives + false_positives),
            f1_score=_ratio(
                true_positives, true_positives + (false_positives + false_negatives) / 2
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "true_positive_count": self.true_positive_count,
            "false_positive_count": self.false_positive_count,
            "false_negative_count": self.false_negative_count,
            "true_positive_rate": _dump_float(self.true_positive_rate),
            "false_positive_rate": _dump_float(self.false_positive_rate),
            "recall": _dump_float(self.recall),
            "precision": _dump_float(self.precision),
            "f1_score": _dump_float(self.f1_score),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StatBlock:
        return cls(
            true_positive_count=data.get("true_positive_count", 0),
            false_positive_count=data.get("false_positive_count", 0),
            false_negative_count=data.get("false_negative_count", 0),
            true_positive_rate=_load_float(data.get("true_positive_rate")),
            false_positive_rate=_load_float(data.get("false_positive_rate")),
            recall=_load_float(data.get("recall")),
            precision=_load_float(data.get("precision")),
            f1_score=_load_float(data.get("f1_score")),
        )


@dataclass
class SummaryStats:
    """Ground truth counts plus one StatBlock per criterion."""

    ground_truth_positive_count: int = 0
    """Number of expected-fail truth findings"""

    ground_truth_negative_count: int = 0
    """Number of expected-pass truth findings"""

    truth_positive_cwe_match_count: int = 0
    """Expected-fail findings with at least one best match on CWE"""

    truth_positive_cwe_1000_match_count: int = 0
    """Expected-fail findings with at least one best match on CWE-1000 class"""

    criteria: dict[str, StatBlock] = field(default_factory=dict)
    """StatBlock per criterion name (see CRITERIA)"""

    @classmethod
    def from_counts(
        cls,
        positive_count: int,
        negative_count: int,
        true_positives: dict[str, int],
        false_positives: dict[str, int],
        cwe_match_count: int = 0,
        cwe_1000_match_count: int = 0,
    ) -> SummaryStats:
        criteria = {
            name: StatBlock.from_counts(
                true_positives.get(name, 0),
                false_positives.get(name, 0),
                positive_count,
                negative_count,
            )
            for name in CRITERIA
        }
        return cls(
            ground_truth_positive_count=positive_count,
            ground_truth_negative_count=negative_count,
            truth_positive_cwe_match_count=cwe_match_count,
            truth_positive_cwe_1000_match_count=cwe_1000_match_count,
            criteria=criteria,
        )

    @classmethod
    def empty(cls) -> SummaryStats:
        return cls.from_counts(0, 0, {}, {})

    def union(self, other: SummaryStats) -> SummaryStats:
        """Add counts of both operands and recompute every ratio."""
        true_positives = {}
        false_positives = {}
        for name in CRITERIA:
            mine = self.criteria.get(name, StatBlock())
            theirs = other.criteria.get(name, StatBlock())
            true_positives[name] = mine.true_positive_count + theirs.true_positive_count
            false_positives[name] = mine.false_positive_count + theirs.false_positive_count
        return SummaryStats.from_counts(
            positive_count=self.ground_truth_positive_count + other.ground_truth_positive_count,
            negative_count=self.ground_truth_negative_count + other.ground_truth_negative_count,
            true_positives=true_positives,
            false_positives=false_positives,
            cwe_match_count=self.truth_positive_cwe_match_count
            + other.truth_positive_cwe_match_count,
            cwe_1000_match_count=self.truth_positive_cwe_1000_match_count
            + other.truth_positive_cwe_1000_match_count,
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "ground_truth_positive_count": self.ground_truth_positive_count,
            "ground_truth_negative_count": self.ground_truth_negative_count,
            "truth_positive_cwe_match_count": self.truth_positive_cwe_match_count,
            "truth_positive_cwe_1000_match_count": self.truth_positive_cwe_1000_match_count,
        }
        for name in CRITERIA:
            data[name] = self.criteria.get(name, StatBlock()).to_dict()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SummaryStats:
        return cls(
            ground_truth_positive_count=data.get("ground_truth_positive_count", 0),
            ground_truth_negative_count=data.get("ground_truth_negative_count", 0),
            truth_positive_cwe_match_count=data.get("truth_positive_cwe_match_count", 0),
            truth_positive_cwe_1000_match_count=data.get("truth_positive_cwe_1000_match_count", 0),
            criteria={name: StatBlock.from_dict(data[name]) for name in CRITERIA if name in data},
        )


def _breakdown_key(name: str) -> tuple:
    try:
        return (0, CWESet.parse(name).cwes, name)
    except FindingParseError:
        return (1, (), name)


def _union_breakdowns(
    left: dict[str, SummaryStats], right: dict[str, SummaryStats]
) -> dict[str, SummaryStats]:
    merged = {}
    for name in left.keys() | right.keys():
        merged[name] = left.get(name, SummaryStats.empty()).union(
            right.get(name, SummaryStats.empty())
        )
    return merged


def _breakdowns_to_list(breakdowns: dict[str, SummaryStats]) -> list[dict[str, Any]]:
    return [
        {"name": name, **breakdowns[name].to_dict()}
        for name in sorted(breakdowns, key=_breakdown_key)
    ]


def _breakdowns_from_list(items: list[dict[str, Any]]) -> dict[str, SummaryStats]:
    return {item["name"]: SummaryStats.from_dict(item) for item in items}


@dataclass
class SummaryCard:
    """Statistics of one tool configuration over a directory of benchmarks."""

    tool: str
    """Tool identifier (``<script>_<config>``)"""

    total_time: float = 0.0
    """Summed tool run time in seconds"""

    run_count: int = 0
    """Number of (benchmark, tool) runs covered"""

    failed_run_count: int = 0
    """Runs whose script errored or whose output failed to parse"""

    timeout_count: int = 0
    """Runs that hit the timeout"""

    runs_summary: SummaryStats = field(default_factory=SummaryStats.empty)
    """Statistics over every truth finding"""

    cwes_summary: dict[str, SummaryStats] = field(default_factory=dict)
    """Statistics per expected CWE set"""

    cwes_1000_summary: dict[str, SummaryStats] = field(default_factory=dict)
    """Statistics per CWE-1000 class"""

    def union(self, other: SummaryCard) -> SummaryCard:
        """Merge two cards of the same tool; breakdowns are merged by name."""
        if self.tool != other.tool:
            raise ValueError(f"Cannot merge summaries of {self.tool} and {other.tool}")
        return SummaryCard(
            tool=self.tool,
            total_time=self.total_time + other.total_time,
            run_count=self.run_count + other.run_count,
            failed_run_count=self.failed_run_count + other.failed_run_count,
            timeout_count=self.timeout_count + other.timeout_count,
            runs_summary=self.runs_summary.union(other.runs_summary),
            cwes_summary=_union_breakdowns(self.cwes_summary, other.cwes_summary),
            cwes_1000_summary=_union_breakdowns(self.cwes_1000_summary, other.cwes_1000_summary),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "tool": self.tool,
            "total_time": self.total_time,
            "run_count": self.run_count,
            "failed_run_count": self.failed_run_count,
            "timeout_count": self.timeout_count,
            "runs_summary": self.runs_summary.to_dict(),
            "cwes_summary": _breakdowns_to_list(self.cwes_summary),
            "cwes_1000_summary": _breakdowns_to_list(self.cwes_1000_summary),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SummaryCard:
        return cls(
            tool=data["tool"],
            total_time=data.get("total_time", 0.0),
            run_count=data.get("run_count", 0),
            failed_run_count=data.get("failed_run_count", 0),
            timeout_count=data.get("timeout_count", 0),
            runs_summary=SummaryStats.from_dict(data.get("runs_summary", {})),
            cwes_summary=_breakdowns_from_list(data.get("cwes_summary", [])),
            cwes_1000_summary=_breakdowns_from_list(data.get("cwes_1000_summary", [])),
        )


@dataclass
class MatchVector:
    """Which expected vulnerabilities one tool configuration detected.

    ``matches`` holds one entry per truth finding, in sweep order: True
    when the summary match is in the right file with a CWE of the right
    CWE-1000 class. Expected-pass findings are always False.
    """

    tool: str
    matches: list[bool] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"tool": self.tool, "matches": list(self.matches)}
