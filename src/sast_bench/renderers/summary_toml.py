"""Summary TOML renderer plugin."""

import tomlkit

from sast_bench import hookimpl
from sast_bench.models.summary import CRITERIA
from sast_bench.renderers import format_ratio

RATIO_FIELDS = ("true_positive_rate", "false_positive_rate", "precision", "recall", "f1_score")


@hookimpl
def register_summary_renderer(summaries: list[dict]) -> dict:
    """Render the root-level summaries as TOML.

    One table per tool configuration, with a sub-table per criterion.

    Args:
        summaries: SummaryCard dicts, one per tool configuration

    Returns:
        Dict with filename and content for summary.toml
    """
    doc = tomlkit.document()

    for summary in summaries:
        stats = summary["runs_summary"]
        section = tomlkit.table()
        section["run_count"] = summary["run_count"]
        section["failed_run_count"] = summary["failed_run_count"]
        section["timeout_count"] = summary["timeout_count"]
        section["total_time"] = round(summary["total_time"], 3)
        section["ground_truth_positive_count"] = stats["ground_truth_positive_count"]
        section["ground_truth_negative_count"] = stats["ground_truth_negative_count"]

        for criterion in CRITERIA:
            block = stats[criterion]
            criterion_table = tomlkit.table()
            criterion_table["true_positive_count"] = block["true_positive_count"]
            criterion_table["false_positive_count"] = block["false_positive_count"]
            criterion_table["false_negative_count"] = block["false_negative_count"]
            for name in RATIO_FIELDS:
                criterion_table[name] = format_ratio(block[name])
            section[criterion] = criterion_table

        doc[summary["tool"]] = section

    return {
        "filename": "summary.toml",
        "content": tomlkit.dumps(doc),
    }
