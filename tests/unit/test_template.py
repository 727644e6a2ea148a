"""Tests for runs description templates."""

import tomllib
from pathlib import Path

from sast_bench.benchmarking.template import collect_benchmarks, make_runs_template, runs_to_toml
from sast_bench.models.runs import Runs, ToolConfig, ToolId, ToolScript, ToolsSpec


def _benchmark(root, name):
    directory = root / name
    directory.mkdir(parents=True)
    (directory / "truth.sarif").write_text("{}")
    return directory


class TestCollectBenchmarks:
    """Tests for collect_benchmarks."""

    def test_finds_truth_directories(self, tmp_path):
        """Test that only directories with a truth file are collected, sorted."""
        _benchmark(tmp_path, "python/app2")
        _benchmark(tmp_path, "java/app1")
        (tmp_path / "java" / "notes").mkdir()

        assert collect_benchmarks(tmp_path) == [Path("java/app1"), Path("python/app2")]

    def test_empty(self, tmp_path):
        """Test a tree without benchmarks."""
        assert collect_benchmarks(tmp_path) == []


class TestRunsTemplate:
    """Tests for make_runs_template and runs_to_toml."""

    def test_without_tools(self, tmp_path):
        """Test a template listing benchmarks only."""
        _benchmark(tmp_path, "app1")

        runs = make_runs_template(tmp_path)

        assert runs.runs[0].roots == [Path("app1")]
        assert runs.runs[0].tools == []

    def test_toml_reads_back(self, tmp_path):
        """Test that the TOML output is a valid runs description."""
        _benchmark(tmp_path, "java/app1")
        _benchmark(tmp_path, "java/app2")
        tools = ToolsSpec(
            tools=[
                ToolScript(
                    script="tools/semgrep.sh",
                    name="semgrep",
                    configs=[ToolConfig("default"), ToolConfig("strict")],
                )
            ]
        )

        text = runs_to_toml(make_runs_template(tmp_path, tools))
        runs = Runs.from_dict(tomllib.loads(text))

        assert runs.runs[0].roots == [Path("java/app1"), Path("java/app2")]
        assert runs.runs[0].tools == [ToolId("semgrep", "default"), ToolId("semgrep", "strict")]
        assert len(runs) == 4
