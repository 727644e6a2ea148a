"""Tests for runs and tools description files."""

from pathlib import Path

import pytest

from sast_bench.models.runs import Run, Runs, RunsError, ToolId, ToolsSpec

RUNS_TOML = """
[[runs]]
roots = ["java/app1", "java/app2"]
tools = [
    { script = "semgrep", config = "default" },
    { script = "codeql", config = "security" },
]

[[runs]]
roots = ["python/app3"]
tools = [{ script = "semgrep", config = "default" }]
"""

TOOLS_TOML = """
[[tools]]
script = "tools/semgrep.sh"
name = "semgrep"

[[tools.configs]]
name = "default"
args = "--config auto"

[[tools.configs]]
name = "strict"

[[tools]]
script = "tools/bearer.sh"
name = "bearer"
configs = []
"""


class TestToolId:
    """Tests for ToolId."""

    def test_names(self):
        """Test the file stem and display forms."""
        tool = ToolId(script="semgrep", config="default")

        assert tool.name == "semgrep_default"
        assert str(tool) == "semgrep/default"

    def test_dict(self):
        """Test the dictionary form."""
        tool = ToolId.from_dict({"script": "codeql", "config": "security"})
        assert tool.to_dict() == {"script": "codeql", "config": "security"}


class TestRuns:
    """Tests for Runs."""

    @pytest.fixture
    def runs(self, tmp_path):
        path = tmp_path / "runs.toml"
        path.write_text(RUNS_TOML)
        return Runs.from_file(path)

    def test_from_file(self, runs):
        """Test reading a runs description."""
        assert len(runs.runs) == 2
        assert runs.runs[0].roots == [Path("java/app1"), Path("java/app2")]
        assert runs.runs[1].tools == [ToolId("semgrep", "default")]

    def test_len_counts_pairs(self, runs):
        """Test that the length is the number of (benchmark, tool) pairs."""
        assert len(runs) == 5

    def test_pairs(self, runs):
        """Test pair order: run, then root, then tool."""
        pairs = [(root.as_posix(), tool.name) for root, tool in runs.pairs()]

        assert pairs == [
            ("java/app1", "semgrep_default"),
            ("java/app1", "codeql_security"),
            ("java/app2", "semgrep_default"),
            ("java/app2", "codeql_security"),
            ("python/app3", "semgrep_default"),
        ]

    def test_tools_distinct(self, runs):
        """Test that tools are listed once in first-seen order."""
        assert runs.tools() == [ToolId("semgrep", "default"), ToolId("codeql", "security")]

    def test_to_dict(self):
        """Test the dictionary form."""
        runs = Runs(runs=[Run(roots=[Path("a/b")], tools=[ToolId("s", "c")])])
        assert runs.to_dict() == {
            "runs": [{"roots": ["a/b"], "tools": [{"script": "s", "config": "c"}]}]
        }

    def test_missing_file(self, tmp_path):
        """Test that a missing file raises RunsError."""
        with pytest.raises(RunsError, match="Cannot read runs"):
            Runs.from_file(tmp_path / "runs.toml")

    def test_invalid_toml(self, tmp_path):
        """Test that invalid TOML raises RunsError."""
        path = tmp_path / "runs.toml"
        path.write_text("[[runs]\n")

        with pytest.raises(RunsError, match="Failed to parse"):
            Runs.from_file(path)

    def test_tool_without_config(self, tmp_path):
        """Test that a tool entry needs script and config."""
        path = tmp_path / "runs.toml"
        path.write_text('[[runs]]\nroots = ["a"]\ntools = [{ script = "semgrep" }]\n')

        with pytest.raises(RunsError, match="Malformed"):
            Runs.from_file(path)


class TestToolsSpec:
    """Tests for ToolsSpec."""

    def test_tool_ids(self, tmp_path):
        """Test that every configuration of every tool is listed."""
        path = tmp_path / "tools.toml"
        path.write_text(TOOLS_TOML)

        spec = ToolsSpec.from_file(path)

        assert spec.tools[0].configs[0].args == "--config auto"
        assert spec.tool_ids() == [ToolId("semgrep", "default"), ToolId("semgrep", "strict")]

    def test_missing_name(self, tmp_path):
        """Test that a tool needs a name."""
        path = tmp_path / "tools.toml"
        path.write_text('[[tools]]\nscript = "x.sh"\n')

        with pytest.raises(RunsError, match="Malformed tools"):
            ToolsSpec.from_file(path)
