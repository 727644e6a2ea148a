"""CWE taxonomy: weakness hierarchy and CWE-1000 class lookup.

The hierarchy is read from a SARIF taxonomy document. Each taxon lists its
parents through ``superset`` relationships; the CWE-1000 research view lists
the top-level weakness classes through ``subset`` relationships.

A Taxonomy is built once and shared read-only by every evaluation.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from sast_bench.config import (
    CWE_1000,
    DEFAULT_TAXONOMY_VERSION,
    SUPPORTED_TAXONOMY_VERSIONS,
    TAXONOMY_FILES,
)
from sast_bench.logging import get_logger
from sast_bench.models.finding import FindingParseError, parse_cwe
from sast_bench.ordering import Ordering, is_at_least

logger = get_logger(__name__)

SUPERSET = "superset"
SUBSET = "subset"

TAXONOMIES_DIR = Path(__file__).resolve().parent / "taxonomies"


class TaxonomyError(Exception):
    """The taxonomy definition is unknown or malformed."""


class Taxonomy:
    """Read-only CWE hierarchy.

    Attributes:
        version: Taxonomy version string (e.g. "4.14")
        parents: child CWE -> set of parent CWEs
        cwe_1000: top-level weakness classes of the research view
    """

    def __init__(
        self,
        parents: Mapping[int, Iterable[int]],
        cwe_1000: Iterable[int],
        version: str = "",
    ):
        self.version = version
        self.parents: dict[int, frozenset[int]] = {
            cwe: frozenset(cwe_parents) for cwe, cwe_parents in parents.items()
        }
        self.cwe_1000: frozenset[int] = frozenset(cwe_1000)
        self._classes = self._compute_classes()

    def _nodes(self) -> set[int]:
        nodes = set(self.parents) | set(self.cwe_1000)
        for cwe_parents in self.parents.values():
            nodes.update(cwe_parents)
        return nodes

    def _compute_classes(self) -> dict[int, frozenset[int]]:
        classes = {}
        for cwe in self._nodes():
            classes[cwe] = frozenset(
                cwe_class
                for cwe_class in self.cwe_1000
                if is_at_least(self.ancestor_order(cwe_class, cwe))
            )
        return classes

    def _reaches(self, start: int, target: int) -> bool:
        """Walk parent edges from ``start`` looking for ``target``."""
        stack = [start]
        seen = set()
        while stack:
            cwe = stack.pop()
            if cwe == target:
                return True
            if cwe in seen:
                continue
            seen.add(cwe)
            stack.extend(self.parents.get(cwe, ()))
        return False

    def ancestor_order(self, left: int, right: int) -> Ordering | None:
        """Compare two CWEs by ancestry.

        Returns:
            EQUAL if they are the same CWE, LESS if ``left`` descends from
            ``right``, GREATER if ``left`` is an ancestor of ``right``, None
            if they are unrelated
        """
        if left == right:
            return Ordering.EQUAL
        if self._reaches(left, right):
            return Ordering.LESS
        if self._reaches(right, left):
            return Ordering.GREATER
        return None

    def classes_of(self, cwe: int) -> frozenset[int]:
        """Top-level CWE-1000 classes that are ancestors of (or equal to) ``cwe``."""
        return self._classes.get(cwe, frozenset())

    def __contains__(self, cwe: object) -> bool:
        return cwe in self._classes

    def __len__(self) -> int:
        return len(self._classes)

    def __repr__(self) -> str:
        return f"Taxonomy(version={self.version!r}, nodes={len(self)}, classes={len(self.cwe_1000)})"

    @classmethod
    def from_edges(
        cls,
        parents: Mapping[int, Iterable[int]],
        cwe_1000: Iterable[int],
        version: str = "",
    ) -> Taxonomy:
        return cls(parents=parents, cwe_1000=cwe_1000, version=version)

    @classmethod
    def from_sarif(cls, sarif: dict[str, Any]) -> Taxonomy:
        """Build a taxonomy from a parsed SARIF taxonomy document.

        Raises:
            TaxonomyError: If the document does not describe a taxonomy
        """
        try:
            component = sarif["runs"][0]["taxonomies"][0]
            taxa = component["taxa"]
            version = component.get("version", "")

            parents: dict[int, set[int]] = {}
            cwe_1000: set[int] = set()
            for taxon in taxa:
                number = parse_cwe(taxon["id"])
                for relationship in taxon.get("relationships") or []:
                    kinds = relationship.get("kinds") or []
                    if len(kinds) != 1:
                        raise TaxonomyError(
                            f"relationship of {taxon['id']} should have exactly one kind"
                        )
                    target = parse_cwe(relationship["target"]["id"])
                    if kinds[0] == SUPERSET:
                        parents.setdefault(number, set()).add(target)
                    elif kinds[0] == SUBSET and number == CWE_1000:
                        cwe_1000.add(target)
        except (KeyError, IndexError, TypeError, AttributeError, FindingParseError) as e:
            raise TaxonomyError(f"Malformed taxonomy definition: {e}") from e

        taxonomy = cls(parents=parents, cwe_1000=cwe_1000, version=version)
        logger.debug(f"Loaded CWE taxonomy {taxonomy!r}")
        return taxonomy

    @classmethod
    def from_string(cls, text: str) -> Taxonomy:
        try:
            sarif = json.loads(text)
        except json.JSONDecodeError as e:
            raise TaxonomyError(f"Taxonomy definition is not valid JSON: {e}") from e
        return cls.from_sarif(sarif)

    @classmethod
    def from_file(cls, path: Path) -> Taxonomy:
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            raise TaxonomyError(f"Cannot read taxonomy definition {path}: {e}") from e
        return cls.from_string(text)

    @classmethod
    def from_known_version(cls, version: str = DEFAULT_TAXONOMY_VERSION) -> Taxonomy:
        """Load one of the taxonomy definitions bundled with sast-bench.

        Raises:
            TaxonomyError: If the version is not bundled
        """
        if version not in SUPPORTED_TAXONOMY_VERSIONS:
            raise TaxonomyError(
                f"Unknown CWE taxonomy version '{version}'. "
                f"Supported versions are {', '.join(SUPPORTED_TAXONOMY_VERSIONS)}"
            )
        return cls.from_file(TAXONOMIES_DIR / TAXONOMY_FILES[version])


def load_taxonomy(path: Path | None = None, version: str | None = None) -> Taxonomy:
    """Load an external taxonomy when a path is given, a bundled one otherwise."""
    if path is not None:
        logger.debug(f"Loading CWE taxonomy from {path}")
        return Taxonomy.from_file(path)
    return Taxonomy.from_known_version(version or DEFAULT_TAXONOMY_VERSION)
