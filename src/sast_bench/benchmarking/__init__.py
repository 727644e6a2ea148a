"""Benchmarking layer over a results directory.

This module provides functionality for:
- Evaluating normalized tool outputs against ground truth
- Summarizing evaluations per directory level
- Generating runs description templates
"""

from sast_bench.benchmarking.evaluator import Evaluator
from sast_bench.benchmarking.summarizer import Summarizer

__all__ = [
    "Evaluator",
    "Summarizer",
]
