"""Tests for the directory roll-up."""

from pathlib import Path

from sast_bench.models.summary import CRITERIA, SummaryCard, SummaryStats
from sast_bench.scoring.rollup import ROOT, rollup


def _card(tool, positives=1, true_positives=0):
    return SummaryCard(
        tool=tool,
        run_count=1,
        runs_summary=SummaryStats.from_counts(
            positive_count=positives,
            negative_count=0,
            true_positives=dict.fromkeys(CRITERIA, true_positives),
            false_positives={},
        ),
    )


class TestRollup:
    """Tests for rollup."""

    def test_every_ancestor_is_present(self):
        """Test that intermediate directories and the root get a node."""
        tree = rollup({Path("java/spring/app1"): {"t": _card("t")}})

        assert set(tree) == {
            ROOT,
            Path("java"),
            Path("java/spring"),
            Path("java/spring/app1"),
        }

    def test_parents_aggregate_children(self):
        """Test that a parent's card is the union of its children's cards."""
        tree = rollup(
            {
                Path("a/x"): {"t": _card("t", true_positives=1)},
                Path("a/y"): {"t": _card("t")},
                Path("b"): {"t": _card("t"), "u": _card("u", positives=2)},
            }
        )

        assert tree[Path("a")]["t"].run_count == 2
        assert tree[Path("a")]["t"].runs_summary.criteria["region"].recall == 0.5
        assert tree[ROOT]["t"].run_count == 3
        assert tree[ROOT]["t"].runs_summary.ground_truth_positive_count == 3
        assert tree[ROOT]["u"].runs_summary.ground_truth_positive_count == 2
        assert set(tree[Path("a")]) == {"t"}

    def test_nested_benchmarks(self):
        """Test that a benchmark directory also aggregates nested benchmarks."""
        tree = rollup({Path("a"): {"t": _card("t")}, Path("a/b"): {"t": _card("t")}})

        assert tree[Path("a/b")]["t"].run_count == 1
        assert tree[Path("a")]["t"].run_count == 2
        assert tree[ROOT]["t"].run_count == 2

    def test_leaves_are_not_mutated(self):
        """Test that input cards are left untouched."""
        leaf = _card("t")

        rollup({Path("a/x"): {"t": leaf}, Path("a/y"): {"t": _card("t")}})

        assert leaf.run_count == 1

    def test_empty(self):
        """Test that no benchmarks give an empty root."""
        assert rollup({}) == {ROOT: {}}
