"""Results tree storage.

Layout of a results directory:

    <output>/<benchmark>/truth.sarif
    <output>/<benchmark>/<script>_<config>.metadata   run metadata (JSON)
    <output>/<benchmark>/<script>_<config>.sarif      normalized tool output
    <output>/<benchmark>/<script>_<config>.json       evaluation RunCard
    <output>/<dir>/summary.json                       summaries, every level
    <output>/matches.csv                              per-finding detections
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from sast_bench.config import (
    CARD_EXTENSION,
    METADATA_EXTENSION,
    SARIF_EXTENSION,
    SUMMARY_FILE_NAME,
    TRUTH_FILE_NAME,
)
from sast_bench.logging import get_logger
from sast_bench.models.match import RunCard
from sast_bench.models.metadata import RunMetadata
from sast_bench.models.runs import ToolId
from sast_bench.models.summary import SummaryCard

logger = get_logger(__name__)


def load_json(path: Path) -> Any | None:
    """Load a JSON file, returning None if it is absent or unreadable."""
    try:
        with open(path) as f:
            return json.load(f)

    except FileNotFoundError:
        logger.debug(f"File not found: {path}")
        return None

    except json.JSONDecodeError as e:
        logger.warning(f"Invalid JSON in {path}: {e}")
        return None

    except OSError as e:
        logger.warning(f"Error reading {path}: {e}")
        return None


def save_json(data: Any, output_path: Path) -> None:
    """Write pretty-printed JSON, creating parent directories."""
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w") as f:
        json.dump(data, f, indent=2)

    logger.debug(f"Saved {output_path}")


@dataclass(frozen=True)
class ResultDirectory:
    """Files of one (benchmark, tool) pair inside a results directory."""

    output: Path
    """Results directory root"""

    benchmark: Path
    """Benchmark directory, relative to ``output``"""

    tool: ToolId

    @property
    def benchmark_dir(self) -> Path:
        return self.output / self.benchmark

    @property
    def truth_path(self) -> Path:
        return self.benchmark_dir / TRUTH_FILE_NAME

    def _path(self, extension: str) -> Path:
        return self.benchmark_dir / f"{self.tool.name}.{extension}"

    @property
    def metadata_path(self) -> Path:
        return self._path(METADATA_EXTENSION)

    @property
    def sarif_path(self) -> Path:
        return self._path(SARIF_EXTENSION)

    @property
    def card_path(self) -> Path:
        return self._path(CARD_EXTENSION)

    def read_metadata(self) -> RunMetadata | None:
        data = load_json(self.metadata_path)
        if data is None:
            return None
        try:
            return RunMetadata.from_dict(data)
        except (ValueError, TypeError, AttributeError) as e:
            logger.warning(f"Invalid metadata in {self.metadata_path}: {e}")
            return None

    def write_metadata(self, metadata: RunMetadata) -> None:
        save_json(metadata.to_dict(), self.metadata_path)

    def read_card(self) -> RunCard | None:
        data = load_json(self.card_path)
        if data is None:
            return None
        try:
            return RunCard.from_dict(data)
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            logger.warning(f"Invalid evaluation card in {self.card_path}: {e}")
            return None

    def write_card(self, card: RunCard, detailed: bool = False) -> None:
        save_json(card.to_dict(detailed), self.card_path)


def summary_path(output: Path, directory: Path) -> Path:
    return output / directory / SUMMARY_FILE_NAME


def save_summaries(summaries: list[SummaryCard], output_path: Path) -> None:
    """Save the SummaryCards of one directory level."""
    save_json({"summaries": [summary.to_dict() for summary in summaries]}, output_path)


def load_summaries(path: Path) -> list[SummaryCard] | None:
    data = load_json(path)
    if data is None:
        return None
    try:
        return [SummaryCard.from_dict(summary) for summary in data["summaries"]]
    except (KeyError, ValueError, TypeError) as e:
        logger.warning(f"Invalid summary in {path}: {e}")
        return None
