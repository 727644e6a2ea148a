"""sast-bench: Score SAST tool findings against labeled ground truth."""

import pluggy

from sast_bench.config import __version__
from sast_bench.logging import get_logger

# Convenience export for plugins: from sast_bench import hookimpl
hookimpl = pluggy.HookimplMarker("sast_bench")

__all__ = [
    "__version__",
    "hookimpl",
    "get_logger",
]
