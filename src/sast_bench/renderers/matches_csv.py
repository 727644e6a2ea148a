"""Per-finding match renderer plugin."""

import csv
import io

from sast_bench import hookimpl


@hookimpl
def register_summary_renderer(matches: list[dict]) -> dict | None:
    """Render which truth findings each tool configuration detected.

    One row per tool configuration: the tool name, then ``true`` or
    ``false`` for every truth finding. Columns line up across rows, so the
    findings one tool catches and another misses stand out.

    Args:
        matches: MatchVector dicts, one per tool configuration.

    Returns:
        Dict with filename and content for matches.csv, or None without vectors.
    """
    if not matches:
        return None

    with io.StringIO() as output:
        writer = csv.writer(output)
        for vector in matches:
            writer.writerow(
                [vector["tool"], *("true" if match else "false" for match in vector["matches"])]
            )

        return {
            "filename": "matches.csv",
            "content": output.getvalue(),
        }
