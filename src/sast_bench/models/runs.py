"""Runs and tools description files."""

from __future__ import annotations

import tomllib
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


class RunsError(ValueError):
    """A runs or tools description file is missing or malformed."""


def _load_toml(path: Path, what: str) -> dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except OSError as e:
        raise RunsError(f"Cannot read {what} description {path}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise RunsError(f"Failed to parse {what} description {path}: {e}") from e


@dataclass(frozen=True, order=True)
class ToolId:
    """One configuration of one tool script."""

    script: str
    config: str

    @property
    def name(self) -> str:
        """File stem used for this tool's outputs (``<script>_<config>``)."""
        return f"{self.script}_{self.config}"

    def __str__(self) -> str:
        return f"{self.script}/{self.config}"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ToolId:
        return cls(script=data["script"], config=data["config"])

    def to_dict(self) -> dict[str, str]:
        return {"script": self.script, "config": self.config}


@dataclass
class Run:
    """Every tool in ``tools`` runs on every benchmark in ``roots``."""

    roots: list[Path] = field(default_factory=list)
    """Benchmark directories, relative to the results directory"""

    tools: list[ToolId] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Run:
        return cls(
            roots=[Path(root) for root in data.get("roots", [])],
            tools=[ToolId.from_dict(tool) for tool in data.get("tools", [])],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "roots": [root.as_posix() for root in self.roots],
            "tools": [tool.to_dict() for tool in self.tools],
        }


@dataclass
class Runs:
    """Contents of a runs description file."""

    runs: list[Run] = field(default_factory=list)

    def __len__(self) -> int:
        return sum(len(run.roots) * len(run.tools) for run in self.runs)

    def pairs(self) -> Iterator[tuple[Path, ToolId]]:
        """Yield every (benchmark, tool) pair, run by run."""
        for run in self.runs:
            for root in run.roots:
                for tool in run.tools:
                    yield root, tool

    def tools(self) -> list[ToolId]:
        """Distinct tools in first-seen order."""
        return list(dict.fromkeys(tool for run in self.runs for tool in run.tools))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Runs:
        return cls(runs=[Run.from_dict(run) for run in data.get("runs", [])])

    @classmethod
    def from_file(cls, path: Path) -> Runs:
        """Load a runs description.

        Raises:
            RunsError: If the file cannot be read or does not describe runs
        """
        data = _load_toml(path, "runs")
        try:
            return cls.from_dict(data)
        except (KeyError, TypeError) as e:
            raise RunsError(f"Malformed runs description {path}: {e}") from e

    def to_dict(self) -> dict[str, Any]:
        return {"runs": [run.to_dict() for run in self.runs]}


@dataclass
class ToolConfig:
    name: str
    args: str = ""


@dataclass
class ToolScript:
    """A tool script and the configurations it can run with."""

    script: str
    name: str
    configs: list[ToolConfig] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ToolScript:
        return cls(
            script=data["script"],
            name=data["name"],
            configs=[
                ToolConfig(name=config["name"], args=config.get("args", ""))
                for config in data.get("configs", [])
            ],
        )


@dataclass
class ToolsSpec:
    """Contents of a tools description file."""

    tools: list[ToolScript] = field(default_factory=list)

    def tool_ids(self) -> list[ToolId]:
        """Every (tool, configuration) combination."""
        return [
            ToolId(script=tool.name, config=config.name)
            for tool in self.tools
            for config in tool.configs
        ]

    @classmethod
    def from_file(cls, path: Path) -> ToolsSpec:
        """Load a tools description.

        Raises:
            RunsError: If the file cannot be read or does not describe tools
        """
        data = _load_toml(path, "tools")
        try:
            return cls(tools=[ToolScript.from_dict(tool) for tool in data.get("tools", [])])
        except (KeyError, TypeError) as e:
            raise RunsError(f"Malformed tools description {path}: {e}") from e
