"""End-to-end test: evaluate then summarize a results directory."""

import csv
import io
import json
import tomllib

import pytest
from click.testing import CliRunner

from sast_bench.benchmarking.storage import load_summaries
from sast_bench.cli import cli
from sast_bench.plugins import reset_plugins

RUNS_TOML = """
[[runs]]
roots = ["java/app1", "python/app2"]
tools = [
    { script = "semgrep", config = "default" },
    { script = "codeql", config = "security" },
]
"""

PARSED = {"status": "Exited", "exit_code": 0, "time": {"secs": 3, "nanos": 0}, "parsed": "Yes"}


@pytest.fixture
def results(tmp_path, write_sarif, sarif_result):
    """Two benchmarks; semgrep ran on both, codeql never ran."""
    java = tmp_path / "java" / "app1"
    python = tmp_path / "python" / "app2"

    write_sarif(
        java / "truth.sarif",
        "bench",
        [
            sarif_result("BENCH:CWE-89", "src/Db.java", 10),
            sarif_result("BENCH:CWE-79", "src/View.java", 4, kind="pass"),
        ],
    )
    write_sarif(
        java / "semgrep_default.sarif",
        "semgrep",
        [
            sarif_result("SEMGREP:CWE-89", "src/Db.java", 10, startColumn=5, endColumn=20),
            sarif_result("SEMGREP:CWE-79", "src/View.java", 4),
            sarif_result("SEMGREP:java.lang.audit", "src/Db.java", 1),
        ],
    )
    (java / "semgrep_default.metadata").write_text(json.dumps(PARSED))

    write_sarif(python / "truth.sarif", "bench", [sarif_result("BENCH:CWE-22", "app.py", 3)])
    write_sarif(python / "semgrep_default.sarif", "semgrep", [])
    (python / "semgrep_default.metadata").write_text(json.dumps(PARSED))

    runs = tmp_path / "runs.toml"
    runs.write_text(RUNS_TOML)
    return tmp_path


class TestEvaluateAndSummarize:
    """Run both sweeps through the CLI."""

    def setup_method(self):
        reset_plugins()

    def teardown_method(self):
        reset_plugins()

    def _run(self, results):
        runner = CliRunner()
        runs = str(results / "runs.toml")
        evaluated = runner.invoke(cli, ["evaluate", "-r", runs, str(results)])
        summarized = runner.invoke(cli, ["summarize", "-r", runs, str(results)])
        return evaluated, summarized

    def test_exit_codes(self, results):
        """Test that both commands succeed."""
        evaluated, summarized = self._run(results)

        assert evaluated.exit_code == 0, evaluated.output
        assert summarized.exit_code == 0, summarized.output

    def test_cards_and_metadata(self, results):
        """Test that evaluation cards are written and metadata updated."""
        self._run(results)
        java = results / "java" / "app1"

        card = json.loads((java / "semgrep_default.json").read_text())
        metadata = json.loads((java / "semgrep_default.metadata").read_text())

        assert len(card["result"]) == 2
        assert card["result"][0]["max_minimal_match"]["at_least_one_region_match"] is True
        assert metadata["evaluated"] is True
        assert not (java / "codeql_security.json").exists()

    def test_summaries_at_every_level(self, results):
        """Test summary.json in benchmark and intermediate directories."""
        self._run(results)

        java = load_summaries(results / "java" / "summary.json")
        python = load_summaries(results / "python" / "app2" / "summary.json")

        semgrep_java = next(card for card in java if card.tool == "semgrep_default")
        assert semgrep_java.runs_summary.criteria["region_cwe"].true_positive_count == 1
        assert semgrep_java.runs_summary.criteria["region_cwe"].false_positive_count == 1
        semgrep_python = next(card for card in python if card.tool == "semgrep_default")
        assert semgrep_python.runs_summary.criteria["file"].false_negative_count == 1

    def test_root_summary(self, results):
        """Test the root summary aggregates both benchmarks for each tool."""
        self._run(results)

        data = json.loads((results / "summary.json").read_text())
        cards = {card["tool"]: card for card in data["summaries"]}

        assert data["taxonomy_version"] == "4.14"
        assert list(cards) == ["semgrep_default", "codeql_security"]

        semgrep = cards["semgrep_default"]
        block = semgrep["runs_summary"]["region_cwe"]
        assert semgrep["run_count"] == 2
        assert semgrep["total_time"] == 6.0
        assert semgrep["runs_summary"]["ground_truth_positive_count"] == 2
        assert semgrep["runs_summary"]["ground_truth_negative_count"] == 1
        assert block["precision"] == 0.5
        assert block["recall"] == 0.5

        codeql = cards["codeql_security"]
        assert codeql["run_count"] == 2
        assert codeql["runs_summary"]["region"]["false_negative_count"] == 2
        assert codeql["runs_summary"]["region"]["precision"] is None

    def test_reports(self, results):
        """Test the CSV and TOML reports at the root."""
        self._run(results)

        rows = list(csv.DictReader(io.StringIO((results / "summary.csv").read_text())))
        report = tomllib.loads((results / "summary.toml").read_text())

        region_cwe = next(
            row
            for row in rows
            if row["tool"] == "semgrep_default" and row["criterion"] == "region_cwe"
        )
        assert region_cwe["precision"] == "0.500"
        assert report["codeql_security"]["region"]["recall"] == "0.000"
        assert report["codeql_security"]["region"]["precision"] == "N/A"

    def test_matches(self, results):
        """Test one row per tool and one cell per truth finding, in runs order."""
        self._run(results)

        rows = list(csv.reader(io.StringIO((results / "matches.csv").read_text())))

        assert rows == [
            ["semgrep_default", "true", "false", "false"],
            ["codeql_security", "false", "false", "false"],
        ]

    def test_show(self, results):
        """Test that saved summaries can be displayed again at any level."""
        self._run(results)
        runner = CliRunner()

        root = runner.invoke(cli, ["show", str(results)])
        java = runner.invoke(cli, ["show", str(results), "java", "--criterion", "file"])

        assert root.exit_code == 0, root.output
        assert "Summary (region_cwe)" in root.output
        assert java.exit_code == 0, java.output
        assert "Summary (file)" in java.output
