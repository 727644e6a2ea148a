"""Summarize sweep: RunCards to SummaryCards, rolled up the directory tree.

Pairs that were never evaluated still count: their truth set is scored
against an empty tool output, so every expected vulnerability becomes a
false negative.
"""

from pathlib import Path

from rich.table import Table

from sast_bench.benchmarking.storage import ResultDirectory, save_summaries, summary_path
from sast_bench.console import console
from sast_bench.logging import get_logger
from sast_bench.matching.selector import evaluate_tool
from sast_bench.models.finding import FindingParseError, FindingSet
from sast_bench.models.match import RunCard
from sast_bench.models.metadata import RunMetadata
from sast_bench.models.runs import Runs
from sast_bench.models.summary import CRITERIA, MatchVector, SummaryCard
from sast_bench.renderers import format_ratio
from sast_bench.sarif import load_truth
from sast_bench.scoring.rollup import ROOT, rollup
from sast_bench.scoring.stats import (
    match_vector,
    summarize_by_cwe_1000,
    summarize_by_cwes,
    summarize_cards,
)
from sast_bench.taxonomy import Taxonomy

logger = get_logger(__name__)


class Summarizer:
    """Builds SummaryCards for every directory level of a results tree."""

    def __init__(self, runs: Runs, output: Path, taxonomy: Taxonomy):
        self.runs = runs
        self.output = output
        self.taxonomy = taxonomy
        self.matches: dict[str, MatchVector] = {}

    def _placeholder_card(self, directory: ResultDirectory) -> RunCard:
        try:
            truth = load_truth(directory.truth_path)
        except FindingParseError as e:
            logger.error(f"Invalid truth in {directory.benchmark}: {e}")
            return RunCard()
        return evaluate_tool(truth, FindingSet.empty(), self.taxonomy)

    def collect_card(self, directory: ResultDirectory, metadata: RunMetadata | None) -> RunCard:
        """Read the evaluated RunCard of a pair, or build a placeholder."""
        if metadata is None:
            logger.warning(f"No metadata for {directory.tool} on {directory.benchmark}")
        elif not metadata.evaluated:
            logger.warning(f"{directory.tool} on {directory.benchmark} hasn't been evaluated")
        else:
            card = directory.read_card()
            if card is not None:
                return card
            logger.warning(f"No evaluation card for {directory.tool} on {directory.benchmark}")
        return self._placeholder_card(directory)

    def summarize_pair(self, directory: ResultDirectory) -> SummaryCard:
        """SummaryCard of one (benchmark, tool) pair."""
        metadata = directory.read_metadata()
        card = self.collect_card(directory, metadata)
        vector = self.matches.setdefault(directory.tool.name, MatchVector(tool=directory.tool.name))
        vector.matches.extend(match_vector(card.findings))
        metadata = metadata or RunMetadata()
        return SummaryCard(
            tool=directory.tool.name,
            total_time=metadata.time,
            run_count=1,
            failed_run_count=int(metadata.failed),
            timeout_count=int(metadata.timed_out),
            runs_summary=summarize_cards(card.findings),
            cwes_summary=summarize_by_cwes(card.findings),
            cwes_1000_summary=summarize_by_cwe_1000(card.findings, self.taxonomy),
        )

    def summarize(self) -> dict[Path, dict[str, SummaryCard]]:
        """Summarize every pair and roll the cards up the directory tree.

        Returns:
            directory (relative to the results directory) -> tool -> SummaryCard
        """
        logger.info(f"Summarizing results in {self.output}")
        self.matches = {}

        leaves: dict[Path, dict[str, SummaryCard]] = {}
        for benchmark, tool in self.runs.pairs():
            directory = ResultDirectory(output=self.output, benchmark=benchmark, tool=tool)
            card = self.summarize_pair(directory)
            cards = leaves.setdefault(benchmark, {})
            cards[card.tool] = cards[card.tool].union(card) if card.tool in cards else card

        return rollup(leaves)

    def root_summaries(self, tree: dict[Path, dict[str, SummaryCard]]) -> list[SummaryCard]:
        """Root-level cards in runs-description tool order."""
        root = tree.get(ROOT, {})
        return [root[tool.name] for tool in self.runs.tools() if tool.name in root]

    def root_matches(self) -> list[MatchVector]:
        """Match vectors of the last summarize() in runs-description tool order."""
        return [self.matches[tool.name] for tool in self.runs.tools() if tool.name in self.matches]

    def write(self, tree: dict[Path, dict[str, SummaryCard]]) -> None:
        """Persist a summary.json in every directory below the results root.

        The root-level summary.json is written by its renderer plugin.
        """
        for directory, cards in tree.items():
            if directory == ROOT:
                continue
            summaries = [cards[tool] for tool in sorted(cards)]
            save_summaries(summaries, summary_path(self.output, directory))
        logger.info(f"Wrote summaries for {len(tree) - (ROOT in tree)} directories")


def print_summaries(summaries: list[SummaryCard], criterion: str = "region_cwe") -> None:
    """Print one row per tool for a criterion using a Rich table."""
    if criterion not in CRITERIA:
        raise ValueError(f"Unknown criterion: {criterion}")

    table = Table(title=f"Summary ({criterion})")
    table.add_column("Tool", style="bold")
    table.add_column("Runs", justify="right")
    table.add_column("Failed", justify="right")
    table.add_column("Timeouts", justify="right")
    table.add_column("TP", justify="right")
    table.add_column("FP", justify="right")
    table.add_column("FN", justify="right")
    table.add_column("Precision", justify="right")
    table.add_column("Recall", justify="right")
    table.add_column("F1", justify="right")

    for summary in summaries:
        block = summary.runs_summary.criteria[criterion].to_dict()
        table.add_row(
            summary.tool,
            str(summary.run_count),
            str(summary.failed_run_count),
            str(summary.timeout_count),
            str(block["true_positive_count"]),
            str(block["false_positive_count"]),
            str(block["false_negative_count"]),
            format_ratio(block["precision"]),
            format_ratio(block["recall"]),
            format_ratio(block["f1_score"]),
        )

    console.print(table)
