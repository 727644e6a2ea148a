"""Score aggregation: FindingCards to SummaryStats.

Every FindingCard is scored through its ``summary_match``. Expected-fail
cards count towards true positives, expected-pass cards towards false
positives, per criterion.
"""

from collections.abc import Iterable

from sast_bench.models.finding import CWESet, Kind, format_cwe
from sast_bench.models.match import FindingCard
from sast_bench.models.summary import CRITERIA, SummaryStats
from sast_bench.taxonomy import Taxonomy


def criteria_met(card: FindingCard) -> dict[str, bool]:
    """Which scoring criteria the card's summary match satisfies."""
    verdict = card.summary_match
    exact = verdict.reported_cwes is not None and set(verdict.reported_cwes) == set(
        card.expected.cwes
    )
    return {
        "file": verdict.file_match_any,
        "file_cwe": verdict.file_match_any and verdict.cwe_match,
        "file_cwe_1000": verdict.file_match_any and verdict.cwe_class_match,
        "region": verdict.region_match_any,
        "region_cwe": verdict.region_match_any and verdict.cwe_match,
        "region_cwe_1000": verdict.region_match_any and verdict.cwe_class_match,
        "rule_id_exact": verdict.region_match_any and exact,
    }


def summarize_cards(cards: Iterable[FindingCard]) -> SummaryStats:
    """Compute SummaryStats for a group of FindingCards."""
    positives = 0
    negatives = 0
    cwe_match_count = 0
    cwe_1000_match_count = 0
    true_positives = dict.fromkeys(CRITERIA, 0)
    false_positives = dict.fromkeys(CRITERIA, 0)

    for card in cards:
        if card.expected.kind == Kind.FAIL:
            positives += 1
            counts = true_positives
            cwe_match_count += any(verdict.cwe_match for verdict in card.best_matches)
            cwe_1000_match_count += any(verdict.cwe_class_match for verdict in card.best_matches)
        else:
            negatives += 1
            counts = false_positives
        for name, met in criteria_met(card).items():
            counts[name] += met

    return SummaryStats.from_counts(
        positive_count=positives,
        negative_count=negatives,
        true_positives=true_positives,
        false_positives=false_positives,
        cwe_match_count=cwe_match_count,
        cwe_1000_match_count=cwe_1000_match_count,
    )


def summarize_by_cwes(cards: Iterable[FindingCard]) -> dict[str, SummaryStats]:
    """SummaryStats per distinct expected CWE set."""
    groups: dict[CWESet, list[FindingCard]] = {}
    for card in cards:
        groups.setdefault(card.expected.cwes, []).append(card)
    return {str(cwes): summarize_cards(group) for cwes, group in groups.items()}


def summarize_by_cwe_1000(
    cards: Iterable[FindingCard], taxonomy: Taxonomy
) -> dict[str, SummaryStats]:
    """SummaryStats per CWE-1000 class.

    A card joins the group of every class reachable from any of its
    expected CWEs. Cards whose CWEs fall under no class are left out.
    """
    groups: dict[int, list[FindingCard]] = {}
    for card in cards:
        classes: set[int] = set()
        for cwe in card.expected.cwes:
            classes.update(taxonomy.classes_of(cwe))
        for cwe_class in classes:
            groups.setdefault(cwe_class, []).append(card)
    return {format_cwe(cwe_class): summarize_cards(group) for cwe_class, group in groups.items()}


def match_vector(cards: Iterable[FindingCard]) -> list[bool]:
    """Per card, whether an expected vulnerability was found in its file with its class."""
    return [
        card.expected.kind == Kind.FAIL
        and card.summary_match.file_match_any
        and card.summary_match.cwe_class_match
        for card in cards
    ]
