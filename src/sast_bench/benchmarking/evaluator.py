"""Evaluation sweep over every (benchmark, tool) pair of a runs description.

For each pair with parsed tool output, the normalized tool findings are
evaluated against the benchmark's ground truth and the RunCard is written
next to them. Pairs without metadata, without parsed output or without
ground truth are skipped.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from rich.panel import Panel
from rich.text import Text

from sast_bench.benchmarking.storage import ResultDirectory
from sast_bench.console import console
from sast_bench.logging import get_logger
from sast_bench.matching.selector import evaluate_tool
from sast_bench.models.finding import FindingParseError, FindingSet
from sast_bench.models.runs import Runs
from sast_bench.sarif import load_tool, load_truth
from sast_bench.taxonomy import Taxonomy

logger = get_logger(__name__)


class EvaluationStatus(Enum):
    """Outcome of evaluating one (benchmark, tool) pair."""

    EVALUATED = "evaluated"
    """RunCard written"""

    NO_METADATA = "no_metadata"
    """The tool never ran on the benchmark"""

    NOT_PARSED = "not_parsed"
    """The tool output was not normalized"""

    NO_TRUTH = "no_truth"
    """The benchmark has no truth.sarif"""

    INVALID_TRUTH = "invalid_truth"
    """The benchmark's truth.sarif is malformed"""


@dataclass
class EvaluationSummary:
    """Counts of evaluation outcomes over a sweep."""

    counts: dict[EvaluationStatus, int] = field(
        default_factory=lambda: dict.fromkeys(EvaluationStatus, 0)
    )

    def add(self, status: EvaluationStatus) -> None:
        self.counts[status] += 1

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    @property
    def evaluated(self) -> int:
        return self.counts[EvaluationStatus.EVALUATED]

    @property
    def skipped(self) -> int:
        return self.total - self.evaluated

    def print_summary(self) -> None:
        """Print a formatted summary using Rich panel."""
        content = Text()
        content.append(f"  ✓ Evaluated:      {self.evaluated}\n", style="green")
        labels = {
            EvaluationStatus.NO_METADATA: "No metadata",
            EvaluationStatus.NOT_PARSED: "Not parsed",
            EvaluationStatus.NO_TRUTH: "No truth",
            EvaluationStatus.INVALID_TRUTH: "Invalid truth",
        }
        for status, label in labels.items():
            if self.counts[status] > 0:
                style = "red" if status == EvaluationStatus.INVALID_TRUTH else None
                content.append(f"  ○ {label + ':':<16}{self.counts[status]}\n", style=style)
        content.append(f"\n  Total: {self.total}")
        console.print(Panel(content, title="Evaluation Summary", expand=False))


class Evaluator:
    """Evaluates parsed tool outputs of a results directory."""

    def __init__(self, runs: Runs, output: Path, taxonomy: Taxonomy, detailed: bool = False):
        """Initialize evaluator.

        Args:
            runs: Runs description listing (benchmark, tool) pairs
            output: Results directory
            taxonomy: CWE hierarchy shared by every evaluation
            detailed: Attach SARIF results of each matched pair to the cards
        """
        self.runs = runs
        self.output = output
        self.taxonomy = taxonomy
        self.detailed = detailed
        self._truths: dict[Path, FindingSet] = {}

    def _load_truth(self, directory: ResultDirectory) -> FindingSet:
        if directory.benchmark not in self._truths:
            self._truths[directory.benchmark] = load_truth(directory.truth_path)
        return self._truths[directory.benchmark]

    def evaluate_one(self, directory: ResultDirectory) -> EvaluationStatus:
        """Evaluate one (benchmark, tool) pair and persist its RunCard."""
        metadata = directory.read_metadata()
        if metadata is None:
            logger.info(f"No metadata for {directory.tool} on {directory.benchmark}, skipping")
            return EvaluationStatus.NO_METADATA

        if not metadata.ready_for_evaluation:
            logger.info(
                f"No parsed results available for {directory.tool} on {directory.benchmark}, "
                "skipping"
            )
            return EvaluationStatus.NOT_PARSED

        if not directory.truth_path.exists():
            logger.warning(f"No truth found in {directory.benchmark}, skipping")
            return EvaluationStatus.NO_TRUTH

        try:
            truth = self._load_truth(directory)
        except FindingParseError as e:
            logger.error(f"Invalid truth in {directory.benchmark}: {e}")
            return EvaluationStatus.INVALID_TRUTH

        tools = load_tool(directory.sarif_path)
        card = evaluate_tool(truth, tools, self.taxonomy, detailed=self.detailed)
        directory.write_card(card, detailed=self.detailed)

        metadata.evaluated = True
        directory.write_metadata(metadata)
        logger.debug(f"Evaluated {directory.tool} on {directory.benchmark}")
        return EvaluationStatus.EVALUATED

    def evaluate_all(self) -> EvaluationSummary:
        """Evaluate every (benchmark, tool) pair of the runs description."""
        logger.info(f"Evaluating parsed results in {self.output}")

        summary = EvaluationSummary()
        for benchmark, tool in self.runs.pairs():
            directory = ResultDirectory(output=self.output, benchmark=benchmark, tool=tool)
            summary.add(self.evaluate_one(directory))

        logger.info("Evaluation done")
        return summary
