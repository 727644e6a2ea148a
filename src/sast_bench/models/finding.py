"""Normalized finding models shared by truth files and tool outputs."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum

CWE_PREFIX = "CWE-"


class FindingParseError(ValueError):
    """A rule identifier, location or kind could not be decoded."""


class Kind(Enum):
    """Expected outcome of a ground truth finding."""

    FAIL = "Fail"
    """A vulnerability is expected at the location"""

    PASS = "Pass"
    """No vulnerability is expected at the location"""

    @classmethod
    def from_sarif(cls, value: str | None) -> Kind:
        """Map a SARIF result kind onto a truth kind.

        SARIF defaults a missing kind to ``fail``; any kind other than
        ``pass`` or ``fail`` is rejected for ground truth.
        """
        if value is None or value == "fail":
            return cls.FAIL
        if value == "pass":
            return cls.PASS
        raise FindingParseError(f"result should have 'pass' or 'fail' kind, got '{value}'")

    def to_sarif(self) -> str:
        return "fail" if self is Kind.FAIL else "pass"


def format_cwe(cwe: int) -> str:
    return f"{CWE_PREFIX}{cwe}"


def parse_cwe(text: str) -> int:
    """Decode ``CWE-<n>`` into ``n``."""
    text = text.strip()
    if not text.startswith(CWE_PREFIX):
        raise FindingParseError(f"CWE identifier should have {CWE_PREFIX} prefix: '{text}'")
    number = text[len(CWE_PREFIX) :]
    if not number.isdigit():
        raise FindingParseError(f"CWE identifier should have a number suffix: '{text}'")
    return int(number)


@dataclass(frozen=True, order=True)
class CWESet:
    """Ordered, deduplicated CWE identifiers attached to one finding."""

    cwes: tuple[int, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "cwes", tuple(dict.fromkeys(self.cwes)))

    @classmethod
    def of(cls, *cwes: int) -> CWESet:
        return cls(tuple(cwes))

    @classmethod
    def parse(cls, text: str) -> CWESet:
        """Decode a comma-joined list such as ``CWE-79,CWE-89``."""
        parts = [part for part in text.split(",") if part.strip()]
        if not parts:
            raise FindingParseError("CWE list should not be empty")
        return cls(tuple(parse_cwe(part) for part in parts))

    def __iter__(self) -> Iterator[int]:
        return iter(self.cwes)

    def __len__(self) -> int:
        return len(self.cwes)

    def __contains__(self, cwe: object) -> bool:
        return cwe in self.cwes

    def __str__(self) -> str:
        return ",".join(format_cwe(cwe) for cwe in self.cwes)


def parse_rule_id(rule_id: str) -> CWESet:
    """Decode a normalized rule identifier into its CWE set.

    The canonical form is ``<ORIGIN>:CWE-n[,CWE-m...]``; identifiers without
    an origin prefix are accepted as a bare CWE list.

    Raises:
        FindingParseError: If the CWE part cannot be decoded
    """
    _, separator, cwe_part = rule_id.partition(":")
    if not separator:
        cwe_part = rule_id
    return CWESet.parse(cwe_part)


@dataclass(frozen=True)
class Region:
    """Line/column span inside a source file.

    A missing ``end_line`` means the region is a single line; missing
    columns mean whole lines.
    """

    start_line: int
    end_line: int | None = None
    start_column: int | None = None
    end_column: int | None = None

    @property
    def last_line(self) -> int:
        return self.start_line if self.end_line is None else self.end_line

    @classmethod
    def from_dict(cls, data: dict) -> Region:
        """Create a Region from a SARIF region object.

        Raises:
            FindingParseError: If ``startLine`` is missing
        """
        start_line = data.get("startLine")
        if start_line is None:
            raise FindingParseError("region should have startLine")
        return cls(
            start_line=start_line,
            end_line=data.get("endLine"),
            start_column=data.get("startColumn"),
            end_column=data.get("endColumn"),
        )

    def to_dict(self) -> dict:
        data = {"startLine": self.start_line}
        if self.end_line is not None:
            data["endLine"] = self.end_line
        if self.start_column is not None:
            data["startColumn"] = self.start_column
        if self.end_column is not None:
            data["endColumn"] = self.end_column
        return data


@dataclass(frozen=True)
class Location:
    """File path plus optional region."""

    path: str
    region: Region | None = None


@dataclass(frozen=True)
class Finding:
    """A single reported or expected issue.

    ``kind`` is only set on ground truth findings.
    """

    cwes: CWESet
    """CWE identifiers decoded from the rule identifier"""

    locations: tuple[Location, ...] = ()
    """Primary location first, related locations after"""

    kind: Kind | None = None
    """Expected outcome (truth findings only)"""

    message: str | None = None
    """Human-readable message"""

    rule_id: str | None = None
    """Raw rule identifier as read from the normalized file"""

    @property
    def paths(self) -> set[str]:
        return {location.path for location in self.locations}

    @property
    def display_rule_id(self) -> str:
        return self.rule_id if self.rule_id is not None else str(self.cwes)


@dataclass
class FindingSet:
    """Named collection of findings: one truth file or one tool output."""

    name: str
    findings: list[Finding] = field(default_factory=list)

    def __iter__(self) -> Iterator[Finding]:
        return iter(self.findings)

    def __len__(self) -> int:
        return len(self.findings)

    @classmethod
    def empty(cls, name: str = "") -> FindingSet:
        return cls(name=name, findings=[])
