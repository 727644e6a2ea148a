"""Matching layer: truth/tool finding comparison and best-match selection."""

from sast_bench.matching.evaluator import evaluate
from sast_bench.matching.selector import CandidateIndex, evaluate_tool

__all__ = [
    "CandidateIndex",
    "evaluate",
    "evaluate_tool",
]
