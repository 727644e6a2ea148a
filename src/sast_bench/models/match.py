"""Match verdicts and evaluation cards."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from sast_bench.models.finding import CWESet, Finding, Kind


@dataclass(frozen=True)
class ExpectedResult:
    """What the ground truth expects for one finding."""

    kind: Kind
    """Whether a vulnerability is expected"""

    cwes: CWESet
    """Expected CWE identifiers"""

    @classmethod
    def from_finding(cls, finding: Finding) -> ExpectedResult:
        if finding.kind is None:
            raise ValueError("truth finding should have a kind")
        return cls(kind=finding.kind, cwes=finding.cwes)

    def to_dict(self) -> dict[str, Any]:
        return {"expected_kind": self.kind.value, "expected_cwe": str(self.cwes)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ExpectedResult:
        return cls(kind=Kind(data["expected_kind"]), cwes=CWESet.parse(data["expected_cwe"]))


@dataclass(frozen=True)
class MatchVerdict:
    """How well one tool finding corresponds to one truth finding."""

    cwe_match: bool = False
    """Some truth CWE is the same as or an ancestor of some reported CWE"""

    cwe_class_match: bool = False
    """Some reported CWE falls under a CWE-1000 class of a truth CWE"""

    file_match_any: bool = False
    """At least one truth location shares a path with a tool location"""

    file_match_all: bool = False
    """Every truth location shares a path with a tool location"""

    region_match_any: bool = False
    """At least one truth location has a matching tool region"""

    region_match_all: bool = False
    """Every truth location has a matching tool region"""

    reported_cwes: CWESet | None = None
    """CWEs of the tool finding (None when nothing was matched)"""

    truth_result: dict | None = field(default=None, compare=False, hash=False)
    """Truth finding as a SARIF result (detailed reports only)"""

    tool_result: dict | None = field(default=None, compare=False, hash=False)
    """Tool finding as a SARIF result (detailed reports only)"""

    @property
    def key(self) -> tuple:
        """Identity of the verdict ignoring the detailed payload."""
        return (
            self.cwe_class_match,
            self.cwe_match,
            self.file_match_any,
            self.file_match_all,
            self.region_match_any,
            self.region_match_all,
            self.reported_cwes,
        )

    def to_dict(self, detailed: bool = False) -> dict[str, Any]:
        data: dict[str, Any] = {
            "cwe_1000_match": self.cwe_class_match,
            "at_least_one_file_match": self.file_match_any,
            "cwe_match": self.cwe_match,
            "at_least_one_region_match": self.region_match_any,
            "reported_cwe": None if self.reported_cwes is None else str(self.reported_cwes),
            "all_files_match": self.file_match_all,
            "all_regions_match": self.region_match_all,
        }
        if detailed:
            data["truth_result"] = self.truth_result
            data["tool_result"] = self.tool_result
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MatchVerdict:
        reported = data.get("reported_cwe")
        return cls(
            cwe_match=data.get("cwe_match", False),
            cwe_class_match=data.get("cwe_1000_match", False),
            file_match_any=data.get("at_least_one_file_match", False),
            file_match_all=data.get("all_files_match", False),
            region_match_any=data.get("at_least_one_region_match", False),
            region_match_all=data.get("all_regions_match", False),
            reported_cwes=CWESet.parse(reported) if reported else None,
            truth_result=data.get("truth_result"),
            tool_result=data.get("tool_result"),
        )


@dataclass
class FindingCard:
    """Evaluation of one truth finding against a whole tool output."""

    expected: ExpectedResult
    """The truth finding's kind and CWEs"""

    best_matches: list[MatchVerdict] = field(default_factory=list)
    """Maximal verdicts under the detailed partial order"""

    summary_match: MatchVerdict = field(default_factory=MatchVerdict)
    """Single best verdict under the coarser summary order"""

    def to_dict(self, detailed: bool = False) -> dict[str, Any]:
        summary = self.summary_match.to_dict()
        for key in ("all_files_match", "all_regions_match"):
            summary.pop(key)
        return {
            "expected_result": self.expected.to_dict(),
            "max_match": [verdict.to_dict(detailed) for verdict in self.best_matches],
            "max_minimal_match": summary,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FindingCard:
        return cls(
            expected=ExpectedResult.from_dict(data["expected_result"]),
            best_matches=[MatchVerdict.from_dict(m) for m in data.get("max_match", [])],
            summary_match=MatchVerdict.from_dict(data.get("max_minimal_match", {})),
        )


@dataclass
class RunCard:
    """Evaluation of one tool output against one truth set."""

    findings: list[FindingCard] = field(default_factory=list)

    def to_dict(self, detailed: bool = False) -> dict[str, Any]:
        return {"result": [card.to_dict(detailed) for card in self.findings]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RunCard:
        return cls(findings=[FindingCard.from_dict(card) for card in data.get("result", [])])
