"""Candidate indexing and best-match selection.

For each truth finding only tool findings sharing a path or a CWE with it
are evaluated. Two selections are made over the resulting verdicts:

- ``best_matches``: the maximal verdicts under a partial order over CWE,
  file and region agreement. Incomparable verdicts are all kept.
- ``summary_match``: a single verdict under a coarser total pre-order, used
  for the aggregate statistics.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field

from sast_bench.logging import get_logger
from sast_bench.matching.evaluator import evaluate
from sast_bench.models.finding import Finding, FindingSet
from sast_bench.models.match import ExpectedResult, FindingCard, MatchVerdict, RunCard
from sast_bench.ordering import Ordering, combine_orderings, compare, maximal_elements
from sast_bench.sarif import finding_to_result
from sast_bench.taxonomy import Taxonomy

logger = get_logger(__name__)


@dataclass
class CandidateIndex:
    """Tool findings indexed by path and by CWE.

    Findings are referenced by their position in the tool set so that
    candidate pools come out in a stable order.
    """

    findings: list[Finding]
    by_path: dict[str, set[int]] = field(default_factory=dict)
    by_cwe: dict[int, set[int]] = field(default_factory=dict)

    @classmethod
    def build(cls, tools: FindingSet) -> CandidateIndex:
        by_path: dict[str, set[int]] = defaultdict(set)
        by_cwe: dict[int, set[int]] = defaultdict(set)
        findings = list(tools)
        for index, finding in enumerate(findings):
            for path in finding.paths:
                by_path[path].add(index)
            for cwe in finding.cwes:
                by_cwe[cwe].add(index)
        return cls(findings=findings, by_path=dict(by_path), by_cwe=dict(by_cwe))

    def candidates(self, truth: Finding) -> list[Finding]:
        """Tool findings sharing at least one path or CWE with ``truth``, in tool order."""
        indices: set[int] = set()
        for path in truth.paths:
            indices.update(self.by_path.get(path, ()))
        for cwe in truth.cwes:
            indices.update(self.by_cwe.get(cwe, ()))
        return [self.findings[index] for index in sorted(indices)]


def match_order(left: MatchVerdict, right: MatchVerdict) -> Ordering | None:
    """Partial order used for ``best_matches``.

    Compares CWE agreement, file agreement and region agreement
    independently; the verdicts are ordered only when no component
    disagrees with another.
    """
    return combine_orderings(
        [
            compare(
                (left.cwe_class_match, left.cwe_match),
                (right.cwe_class_match, right.cwe_match),
            ),
            compare(
                (left.file_match_any, left.file_match_all),
                (right.file_match_any, right.file_match_all),
            ),
            compare(
                (left.file_match_any, left.region_match_all),
                (right.file_match_any, right.region_match_all),
            ),
        ]
    )


def summary_key(verdict: MatchVerdict) -> tuple[bool, bool, bool, bool]:
    """Total pre-order used for ``summary_match``."""
    return (
        verdict.cwe_class_match,
        verdict.file_match_any,
        verdict.cwe_match,
        verdict.region_match_any,
    )


def select_best_matches(verdicts: list[MatchVerdict]) -> list[MatchVerdict]:
    """Maximal verdicts, with verdicts of identical outcome collapsed to the first."""
    best = []
    seen = set()
    for verdict in maximal_elements(verdicts, match_order):
        if verdict.key in seen:
            continue
        seen.add(verdict.key)
        best.append(verdict)
    return best


def select_summary_match(verdicts: list[MatchVerdict]) -> MatchVerdict:
    """Highest verdict by ``summary_key``.

    Ties go to the smallest reported CWE set, then to the earliest
    candidate, so the choice does not depend on candidate order beyond
    the tool set's own order.
    """
    best_index = 0
    for index in range(1, len(verdicts)):
        candidate = verdicts[index]
        current = verdicts[best_index]
        ordering = compare(summary_key(candidate), summary_key(current))
        if ordering == Ordering.GREATER:
            best_index = index
        elif ordering == Ordering.EQUAL and candidate.reported_cwes < current.reported_cwes:
            best_index = index
    return verdicts[best_index]


def evaluate_finding(
    truth: Finding,
    index: CandidateIndex,
    taxonomy: Taxonomy,
    detailed: bool = False,
) -> FindingCard:
    """Evaluate one truth finding against its candidate pool."""
    expected = ExpectedResult.from_finding(truth)
    candidates = index.candidates(truth)
    if not candidates:
        no_match = MatchVerdict(truth_result=finding_to_result(truth) if detailed else None)
        return FindingCard(expected=expected, best_matches=[no_match], summary_match=no_match)

    verdicts = [evaluate(truth, tool, taxonomy, detailed) for tool in candidates]
    return FindingCard(
        expected=expected,
        best_matches=select_best_matches(verdicts),
        summary_match=select_summary_match(verdicts),
    )


def evaluate_tool(
    truth: FindingSet,
    tools: FindingSet,
    taxonomy: Taxonomy,
    detailed: bool = False,
) -> RunCard:
    """Evaluate a whole tool output against a truth set.

    Args:
        truth: Ground truth findings (each must have a kind)
        tools: Tool findings
        taxonomy: CWE hierarchy
        detailed: Attach SARIF results of each pair to the verdicts

    Returns:
        RunCard with one FindingCard per truth finding, in truth order
    """
    index = CandidateIndex.build(tools)
    cards = [evaluate_finding(finding, index, taxonomy, detailed) for finding in truth]
    logger.debug(
        f"Evaluated {len(truth)} truth findings of {truth.name or '<truth>'} "
        f"against {len(tools)} findings of {tools.name or '<tool>'}"
    )
    return RunCard(findings=cards)
