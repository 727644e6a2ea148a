"""Tests for summary renderers."""

import csv
import io
import json
import tomllib

import pytest

from sast_bench.models.summary import CRITERIA, MatchVector, SummaryCard, SummaryStats
from sast_bench.plugins import reset_plugins
from sast_bench.renderers import format_ratio, render_summaries
from sast_bench.renderers import matches_csv, summary_csv, summary_json, summary_toml


def _summary(tool, positives, negatives, true_positives, false_positives):
    return SummaryCard(
        tool=tool,
        total_time=12.3456,
        run_count=2,
        failed_run_count=1,
        runs_summary=SummaryStats.from_counts(
            positive_count=positives,
            negative_count=negatives,
            true_positives=dict.fromkeys(CRITERIA, true_positives),
            false_positives=dict.fromkeys(CRITERIA, false_positives),
        ),
    )


@pytest.fixture
def summaries():
    return [
        _summary("semgrep_default", positives=2, negatives=2, true_positives=1, false_positives=1),
        _summary("codeql_security", positives=0, negatives=0, true_positives=0, false_positives=0),
    ]


@pytest.fixture
def matches():
    return [
        MatchVector(tool="semgrep_default", matches=[True, False, True]),
        MatchVector(tool="codeql_security", matches=[False, False, True]),
    ]

class TestFormatRatio:
    """Tests for format_ratio."""

    def test_value(self):
        """Test three-decimal formatting."""
        assert format_ratio(0.5) == "0.500"

    def test_undefined(self):
        """Test that an undefined ratio is N/A."""
        assert format_ratio(None) == "N/A"


class TestSummaryJson:
    """Tests for the JSON renderer."""

    def test_content(self, summaries):
        """Test that summaries and taxonomy version are written."""
        result = summary_json.register_summary_renderer(
            summaries=[s.to_dict() for s in summaries], taxonomy_version="4.14"
        )

        data = json.loads(result["content"])
        assert result["filename"] == "summary.json"
        assert data["taxonomy_version"] == "4.14"
        assert [s["tool"] for s in data["summaries"]] == ["semgrep_default", "codeql_security"]
        assert data["summaries"][1]["runs_summary"]["region"]["precision"] is None


class TestSummaryCsv:
    """Tests for the CSV renderer."""

    def test_rows(self, summaries):
        """Test one row per tool and criterion."""
        result = summary_csv.register_summary_renderer(summaries=[s.to_dict() for s in summaries])

        rows = list(csv.DictReader(io.StringIO(result["content"])))

        assert result["filename"] == "summary.csv"
        assert len(rows) == 2 * len(CRITERIA)
        assert [row["criterion"] for row in rows[: len(CRITERIA)]] == list(CRITERIA)

    def test_values(self, summaries):
        """Test counts and formatted ratios."""
        result = summary_csv.register_summary_renderer(summaries=[s.to_dict() for s in summaries])
        rows = list(csv.DictReader(io.StringIO(result["content"])))

        semgrep = rows[0]
        assert semgrep["tool"] == "semgrep_default"
        assert semgrep["true_positive_count"] == "1"
        assert semgrep["false_negative_count"] == "1"
        assert semgrep["precision"] == "0.500"

        codeql = rows[len(CRITERIA)]
        assert codeql["recall"] == "N/A"


class TestSummaryToml:
    """Tests for the TOML renderer."""

    def test_tables(self, summaries):
        """Test one table per tool with a sub-table per criterion."""
        result = summary_toml.register_summary_renderer(summaries=[s.to_dict() for s in summaries])

        data = tomllib.loads(result["content"])

        assert result["filename"] == "summary.toml"
        assert set(data) == {"semgrep_default", "codeql_security"}
        semgrep = data["semgrep_default"]
        assert semgrep["run_count"] == 2
        assert semgrep["failed_run_count"] == 1
        assert semgrep["total_time"] == 12.346
        assert semgrep["region_cwe"]["true_positive_count"] == 1
        assert semgrep["region_cwe"]["f1_score"] == "0.500"
        assert data["codeql_security"]["file"]["precision"] == "N/A"



class TestMatchesCsv:
    """Tests for the per-finding match renderer."""

    def test_content(self, matches):
        """Test one row per tool with one cell per truth finding."""
        result = matches_csv.register_summary_renderer(matches=[m.to_dict() for m in matches])

        rows = list(csv.reader(io.StringIO(result["content"])))

        assert result["filename"] == "matches.csv"
        assert rows == [
            ["semgrep_default", "true", "false", "true"],
            ["codeql_security", "false", "false", "true"],
        ]

    def test_tool_without_findings(self):
        """Test that a tool evaluated on no truth finding still gets a row."""
        result = matches_csv.register_summary_renderer(
            matches=[{"tool": "semgrep_default", "matches": []}]
        )

        assert list(csv.reader(io.StringIO(result["content"]))) == [["semgrep_default"]]

    def test_no_vectors(self):
        """Test that nothing is rendered without match vectors."""
        assert matches_csv.register_summary_renderer(matches=[]) is None

class TestRenderSummaries:
    """Tests for render_summaries."""

    def setup_method(self):
        reset_plugins()

    def teardown_method(self):
        reset_plugins()

    def test_writes_every_report(self, summaries, matches, tmp_path):
        """Test that every bundled renderer writes its file."""
        written = render_summaries(summaries, tmp_path, taxonomy_version="4.14", matches=matches)

        assert {path.name for path in written} == {
            "summary.json",
            "summary.csv",
            "summary.toml",
            "matches.csv",
        }
        for path in written:
            assert path.exists()
        assert json.loads((tmp_path / "summary.json").read_text())["taxonomy_version"] == "4.14"

    def test_without_matches(self, summaries, tmp_path):
        """Test that matches.csv is skipped when no vectors are given."""
        written = render_summaries(summaries, tmp_path, taxonomy_version="4.14")

        assert "matches.csv" not in {path.name for path in written}
        assert (tmp_path / "summary.csv").exists()

    def test_unwritable_directory(self, summaries, tmp_path, caplog):
        """Test that write failures are logged and skipped."""
        written = render_summaries(summaries, tmp_path / "missing", taxonomy_version="4.14")

        assert written == []
        assert "Failed to write" in caplog.text
