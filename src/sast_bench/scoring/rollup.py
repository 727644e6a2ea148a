"""Hierarchical roll-up of SummaryCards over the benchmark directory tree."""

from collections.abc import Mapping
from pathlib import Path

from sast_bench.logging import get_logger
from sast_bench.models.summary import SummaryCard

logger = get_logger(__name__)

ROOT = Path(".")


def _merge_into(target: dict[str, SummaryCard], cards: Mapping[str, SummaryCard]) -> None:
    for tool, card in cards.items():
        target[tool] = target[tool].union(card) if tool in target else card


def rollup(leaves: Mapping[Path, Mapping[str, SummaryCard]]) -> dict[Path, dict[str, SummaryCard]]:
    """Aggregate per-benchmark cards into every ancestor directory.

    Args:
        leaves: benchmark directory -> tool name -> SummaryCard

    Returns:
        directory -> tool name -> SummaryCard, for every benchmark
        directory and all of its ancestors up to ``Path(".")``. A node's
        card is the union of its own card (if it is a benchmark) and its
        children's cards.
    """
    nodes: dict[Path, dict[str, SummaryCard]] = {ROOT: {}}
    for path, cards in leaves.items():
        nodes.setdefault(path, {})
        _merge_into(nodes[path], cards)
        for parent in path.parents:
            nodes.setdefault(parent, {})

    # Children before parents.
    for path in sorted(nodes, key=lambda p: len(p.parts), reverse=True):
        if path == path.parent:
            continue
        _merge_into(nodes[path.parent], nodes[path])

    logger.debug(f"Rolled up {len(leaves)} benchmarks into {len(nodes)} directories")
    return nodes
