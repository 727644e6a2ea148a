"""Per-run metadata written by the tool runner."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

NANOS_PER_SECOND = 1_000_000_000


class RunStatus(Enum):
    """How the tool process ended."""

    EXITED = "Exited"
    """Process exited (any exit code)"""

    SCRIPT_ERROR = "ScriptError"
    """The tool script itself failed"""

    TIMEOUT = "Timeout"
    """Process was killed on timeout"""


class ParseStatus(Enum):
    """Whether the tool output was normalized into SARIF."""

    NO = "No"
    FAILED = "Failed"
    YES = "Yes"


def _parse_time(value: Any) -> float:
    """Accept ``{"secs": s, "nanos": n}`` or plain seconds."""
    if value is None:
        return 0.0
    if isinstance(value, dict):
        return value.get("secs", 0) + value.get("nanos", 0) / NANOS_PER_SECOND
    return float(value)


def _format_time(time: float) -> dict[str, int]:
    """Split seconds into ``{"secs": s, "nanos": n}`` with ``n`` below one second."""
    secs, nanos = divmod(round(time * NANOS_PER_SECOND), NANOS_PER_SECOND)
    return {"secs": secs, "nanos": nanos}


@dataclass
class RunMetadata:
    """State of one (benchmark, tool) run."""

    status: RunStatus = RunStatus.EXITED
    exit_code: int = 0
    time: float = 0.0
    """Run time in seconds"""

    parsed: ParseStatus = ParseStatus.NO
    evaluated: bool = False

    @property
    def failed(self) -> bool:
        return self.status == RunStatus.SCRIPT_ERROR or self.parsed == ParseStatus.FAILED

    @property
    def timed_out(self) -> bool:
        return self.status == RunStatus.TIMEOUT

    @property
    def ready_for_evaluation(self) -> bool:
        return self.parsed == ParseStatus.YES

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RunMetadata:
        """Create RunMetadata from its JSON form.

        Raises:
            ValueError: If a status value is unknown
        """
        return cls(
            status=RunStatus(data.get("status", RunStatus.EXITED.value)),
            exit_code=data.get("exit_code", 0),
            time=_parse_time(data.get("time")),
            parsed=ParseStatus(data.get("parsed", ParseStatus.NO.value)),
            evaluated=data.get("evaluated", False),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "exit_code": self.exit_code,
            "time": _format_time(self.time),
            "parsed": self.parsed.value,
            "evaluated": self.evaluated,
        }
