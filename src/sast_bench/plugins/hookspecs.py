"""Hook specifications for sast-bench plugins.

Renderer plugins turn the root-level SummaryCards of a summarize run into
report files. Plugins use the @hookimpl decorator to implement these hooks.

Example plugin implementation:

    from sast_bench import hookimpl

    @hookimpl
    def register_summary_renderer(summaries):
        return {
            "filename": "my_report.txt",
            "content": "\\n".join(s["tool"] for s in summaries),
        }
"""

from types import ModuleType

import pluggy

hookspec = pluggy.HookspecMarker("sast_bench")


class RendererSpec:
    """Hook specifications for summary renderer plugins.

    Each hook uses Pluggy's dependency injection - plugins only need to
    declare the parameters they actually use.
    """

    @hookspec
    def register_summary_renderer(
        self,
        sast_bench: ModuleType,
        summaries: list[dict],
        taxonomy_version: str,
        matches: list[dict],
    ) -> dict | None:
        """Render the root-level summaries of a summarize run.

        Args:
            sast_bench: The sast_bench module, for helpers such as get_logger
            summaries: SummaryCard dicts, one per tool configuration
            taxonomy_version: Version of the CWE taxonomy used for scoring
            matches: MatchVector dicts, one per tool configuration, each with
                one detection flag per truth finding

        Returns:
            Dict with ``filename`` (relative to the results directory) and
            ``content`` (text to write), or None to skip
        """
        ...
