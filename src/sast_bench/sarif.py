"""Reading and writing normalized findings in SARIF.

Truth files and converted tool outputs share one SARIF 2.1.0 shape: a single
run whose results carry a ``ruleId`` of the form ``<ORIGIN>:CWE-n[,CWE-m]``,
an optional ``kind`` and physical locations with optional regions.
"""

import json
from pathlib import Path
from typing import Any

from sast_bench.logging import get_logger
from sast_bench.models.finding import (
    Finding,
    FindingParseError,
    FindingSet,
    Kind,
    Location,
    Region,
    parse_rule_id,
)

logger = get_logger(__name__)


def _parse_location(location: dict[str, Any]) -> Location:
    physical = location.get("physicalLocation")
    if physical is None:
        raise FindingParseError("location should have physicalLocation")
    artifact = physical.get("artifactLocation")
    if artifact is None:
        raise FindingParseError("location should have artifactLocation")
    uri = artifact.get("uri")
    if not uri:
        raise FindingParseError("artifactLocation should have uri")
    region = physical.get("region")
    return Location(path=uri, region=Region.from_dict(region) if region else None)


def parse_result(result: dict[str, Any], truth: bool = False) -> Finding:
    """Decode one SARIF result into a Finding.

    Args:
        result: SARIF result object
        truth: Whether the result comes from a ground truth file (reads kind)

    Raises:
        FindingParseError: If the result is malformed
    """
    rule_id = result.get("ruleId")
    if not rule_id:
        raise FindingParseError("result should have ruleId")
    cwes = parse_rule_id(rule_id)
    locations = tuple(_parse_location(loc) for loc in result.get("locations") or [])
    message = (result.get("message") or {}).get("text")
    kind = Kind.from_sarif(result.get("kind")) if truth else None
    return Finding(cwes=cwes, locations=locations, kind=kind, message=message, rule_id=rule_id)


def _single_run(sarif: dict[str, Any]) -> dict[str, Any]:
    runs = sarif.get("runs")
    if not isinstance(runs, list) or len(runs) != 1:
        raise FindingParseError("sarif should have exactly one run")
    return runs[0]


def _run_name(run: dict[str, Any]) -> str:
    return ((run.get("tool") or {}).get("driver") or {}).get("name", "")


def truth_from_sarif(sarif: dict[str, Any]) -> FindingSet:
    """Decode a ground truth document.

    Every result must be well formed: a dropped truth finding would silently
    undercount the ground truth.

    Raises:
        FindingParseError: If the document or any result is malformed
    """
    run = _single_run(sarif)
    results = run.get("results")
    if results is None:
        raise FindingParseError("run should have results")
    findings = [parse_result(result, truth=True) for result in results]
    return FindingSet(name=_run_name(run), findings=findings)


def tool_from_sarif(sarif: dict[str, Any]) -> FindingSet:
    """Decode a normalized tool output, dropping malformed results."""
    run = _single_run(sarif)
    findings = []
    for index, result in enumerate(run.get("results") or []):
        try:
            findings.append(parse_result(result))
        except FindingParseError as e:
            logger.warning(f"Dropping malformed result #{index} of {_run_name(run)}: {e}")
    return FindingSet(name=_run_name(run), findings=findings)


def _read_json(path: Path) -> dict[str, Any] | None:
    try:
        with open(path) as f:
            data: dict[str, Any] = json.load(f)
            return data

    except FileNotFoundError:
        logger.debug(f"SARIF file not found: {path}")
        return None

    except json.JSONDecodeError as e:
        logger.warning(f"Invalid JSON in SARIF file {path}: {e}")
        return None

    except OSError as e:
        logger.warning(f"Error reading SARIF file {path}: {e}")
        return None


def load_truth(path: Path) -> FindingSet:
    """Load a ground truth file.

    An absent or unreadable file yields an empty set named after the path.

    Raises:
        FindingParseError: If the file is readable but malformed
    """
    sarif = _read_json(path)
    if sarif is None:
        return FindingSet.empty(str(path))
    return truth_from_sarif(sarif)


def load_tool(path: Path) -> FindingSet:
    """Load a normalized tool output; absent or unreadable files yield an empty set."""
    sarif = _read_json(path)
    if sarif is None:
        return FindingSet.empty(str(path))
    try:
        return tool_from_sarif(sarif)
    except FindingParseError as e:
        logger.warning(f"Ignoring tool output {path}: {e}")
        return FindingSet.empty(str(path))


def finding_to_result(finding: Finding) -> dict[str, Any]:
    """Encode a Finding as a SARIF result."""
    result: dict[str, Any] = {"ruleId": finding.display_rule_id}
    if finding.kind is not None:
        result["kind"] = finding.kind.to_sarif()
    if finding.message is not None:
        result["message"] = {"text": finding.message}
    locations = []
    for location in finding.locations:
        physical: dict[str, Any] = {"artifactLocation": {"uri": location.path}}
        if location.region is not None:
            physical["region"] = location.region.to_dict()
        locations.append({"physicalLocation": physical})
    result["locations"] = locations
    return result
