"""Runs description template generation."""

from pathlib import Path

import tomlkit

from sast_bench.config import TRUTH_FILE_NAME
from sast_bench.logging import get_logger
from sast_bench.models.runs import Run, Runs, ToolsSpec

logger = get_logger(__name__)


def collect_benchmarks(root: Path) -> list[Path]:
    """Directories under ``root`` holding a truth file, relative to ``root``."""
    benchmarks = sorted(
        {truth.parent.relative_to(root) for truth in root.rglob(TRUTH_FILE_NAME) if truth.is_file()}
    )
    logger.debug(f"Found {len(benchmarks)} benchmarks under {root}")
    return benchmarks


def make_runs_template(root: Path, tools: ToolsSpec | None = None) -> Runs:
    """A single run pairing every benchmark under ``root`` with every tool configuration."""
    tool_ids = tools.tool_ids() if tools is not None else []
    return Runs(runs=[Run(roots=collect_benchmarks(root), tools=tool_ids)])


def runs_to_toml(runs: Runs) -> str:
    """Serialize a runs description as TOML."""
    doc = tomlkit.document()
    runs_array = tomlkit.aot()
    for run in runs.runs:
        run_table = tomlkit.table()
        roots = tomlkit.array()
        roots.multiline(True)
        for root in run.roots:
            roots.append(root.as_posix())
        run_table["roots"] = roots

        tools = tomlkit.array()
        tools.multiline(True)
        for tool in run.tools:
            tool_table = tomlkit.inline_table()
            tool_table["script"] = tool.script
            tool_table["config"] = tool.config
            tools.append(tool_table)
        run_table["tools"] = tools
        runs_array.append(run_table)
    doc["runs"] = runs_array
    return tomlkit.dumps(doc)
