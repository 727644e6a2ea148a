"""Scoring layer: summary statistics and directory roll-up."""

from sast_bench.scoring.rollup import rollup
from sast_bench.scoring.stats import summarize_by_cwe_1000, summarize_by_cwes, summarize_cards

__all__ = [
    "rollup",
    "summarize_by_cwe_1000",
    "summarize_by_cwes",
    "summarize_cards",
]
