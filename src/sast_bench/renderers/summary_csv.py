import csv
import io

from sast_bench import hookimpl
from sast_bench.models.summary import CRITERIA
from sast_bench.renderers import format_ratio

CSV_HEADERS = [
    "tool",
    "criterion",
    "ground_truth_positive_count",
    "ground_truth_negative_count",
    "true_positive_count",
    "false_positive_count",
    "false_negative_count",
    "true_positive_rate",
    "false_positive_rate",
    "precision",
    "recall",
    "f1_score",
]


@hookimpl
def register_summary_renderer(summaries: list[dict]) -> dict:
    """Render the root-level summaries as CSV.

    One row per tool configuration and scoring criterion.

    Args:
        summaries: SummaryCard dicts, one per tool configuration.

    Returns:
        Dict with filename and content for summary.csv.
    """
    with io.StringIO() as output:
        writer = csv.DictWriter(output, fieldnames=CSV_HEADERS)
        writer.writeheader()

        for s in summaries:
            stats = s["runs_summary"]
            for criterion in CRITERIA:
                block = stats[criterion]
                writer.writerow(
                    {
                        "tool": s["tool"],
                        "criterion": criterion,
                        "ground_truth_positive_count": stats["ground_truth_positive_count"],
                        "ground_truth_negative_count": stats["ground_truth_negative_count"],
                        "true_positive_count": block["true_positive_count"],
                        "false_positive_count": block["false_positive_count"],
                        "false_negative_count": block["false_negative_count"],
                        "true_positive_rate": format_ratio(block["true_positive_rate"]),
                        "false_positive_rate": format_ratio(block["false_positive_rate"]),
                        "precision": format_ratio(block["precision"]),
                        "recall": format_ratio(block["recall"]),
                        "f1_score": format_ratio(block["f1_score"]),
                    }
                )

        return {
            "filename": "summary.csv",
            "content": output.getvalue(),
        }
