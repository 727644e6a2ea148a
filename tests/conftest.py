"""Pytest configuration and fixtures for sast-bench tests."""

import json
import logging

import pytest

from sast_bench.models.finding import CWESet, Finding, FindingSet, Kind, Location, Region
from sast_bench.taxonomy import Taxonomy


@pytest.fixture(autouse=True)
def reset_logging():
    """Reset logging configuration after each test.

    This ensures that tests which call setup_logging() don't affect
    other tests that rely on caplog fixture for log capture.
    """
    yield

    logger = logging.getLogger("sast_bench")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def taxonomy():
    """Small hierarchy with injection, path and credential branches.

    89 -> 943 -> 74 -> 707, 79 -> 74, 22 -> 706 -> 664,
    798 -> (1391 -> 1390 -> 287 -> 284) and (344 -> 671 -> 657 -> 710).
    """
    return Taxonomy.from_edges(
        parents={
            89: [943],
            943: [74],
            74: [707],
            79: [74],
            22: [706],
            706: [664],
            798: [1391, 344],
            1391: [1390],
            1390: [287],
            287: [284],
            344: [671],
            671: [657],
            657: [710],
        },
        cwe_1000=[284, 664, 707, 710],
        version="test",
    )


def _make_finding(cwes, *locations, kind=None, message=None):
    """Build a Finding from CWE numbers and (path, region) pairs."""
    built = []
    for location in locations:
        if isinstance(location, str):
            built.append(Location(path=location))
        else:
            path, region = location
            built.append(Location(path=path, region=region))
    return Finding(cwes=CWESet.of(*cwes), locations=tuple(built), kind=kind, message=message)


@pytest.fixture
def make_finding():
    return _make_finding


@pytest.fixture
def sqli_truth():
    return _make_finding([89], ("a.py", Region(start_line=10)), kind=Kind.FAIL)


def _sarif_document(name, results):
    return {
        "version": "2.1.0",
        "runs": [{"tool": {"driver": {"name": name}}, "results": results}],
    }


def _sarif_result(rule_id, path, start_line=None, kind=None, **region):
    result = {"ruleId": rule_id}
    if kind is not None:
        result["kind"] = kind
    physical = {"artifactLocation": {"uri": path}}
    if start_line is not None:
        physical["region"] = {"startLine": start_line, **region}
    result["locations"] = [{"physicalLocation": physical}]
    return result


def _write_sarif(path, name, results):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(_sarif_document(name, results)))
    return path


@pytest.fixture
def sarif_result():
    return _sarif_result


@pytest.fixture
def write_sarif():
    return _write_sarif
