"""Summary JSON renderer plugin."""

import json

from sast_bench import hookimpl


@hookimpl
def register_summary_renderer(summaries: list[dict], taxonomy_version: str) -> dict:
    """Render the root-level summaries as pretty-printed JSON.

    Args:
        summaries: SummaryCard dicts, one per tool configuration
        taxonomy_version: Version of the CWE taxonomy used for scoring

    Returns:
        Dict with filename and content for summary.json
    """
    return {
        "filename": "summary.json",
        "content": json.dumps(
            {"taxonomy_version": taxonomy_version, "summaries": summaries}, indent=2
        ),
    }
