"""Summary renderer orchestration."""

from pathlib import Path

import sast_bench
from sast_bench.logging import get_logger
from sast_bench.models.summary import MatchVector, SummaryCard
from sast_bench.plugins import initialize_plugins, pm

logger = get_logger(__name__)


def format_ratio(value: float | None) -> str:
    """Format a serialized ratio, or N/A when it is undefined."""
    return "N/A" if value is None else f"{value:.3f}"


def render_summaries(
    summaries: list[SummaryCard],
    output_dir: Path,
    taxonomy_version: str = "",
    matches: list[MatchVector] | None = None,
) -> list[Path]:
    """Invoke all registered renderers and write their output files.

    Args:
        summaries: Root-level SummaryCards, one per tool configuration
        output_dir: Results directory receiving the reports
        taxonomy_version: Version of the CWE taxonomy used for scoring
        matches: Per-finding match vectors, one per tool configuration

    Returns:
        Paths of the files written
    """
    initialize_plugins()

    summary_dicts = [summary.to_dict() for summary in summaries]
    written = []
    for result in pm.hook.register_summary_renderer(
        sast_bench=sast_bench,
        summaries=summary_dicts,
        taxonomy_version=taxonomy_version,
        matches=[vector.to_dict() for vector in matches or []],
    ):
        if result:
            filepath = output_dir / result["filename"]
            try:
                filepath.write_text(result["content"])
                logger.info(f"Wrote {filepath}")
                written.append(filepath)
            except OSError as e:
                logger.error(f"Failed to write {filepath}: {e}")
    return written
