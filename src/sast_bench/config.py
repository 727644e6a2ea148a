"""Configuration constants for sast-bench."""

# Version
__version__ = "0.3.0"

# Taxonomy
SUPPORTED_TAXONOMY_VERSIONS = ("4.14",)
"""CWE taxonomy versions bundled with sast-bench"""

DEFAULT_TAXONOMY_VERSION = SUPPORTED_TAXONOMY_VERSIONS[0]
"""Taxonomy version used when none is specified"""

TAXONOMY_FILES = {
    "4.14": "CWE_v4.14.sarif",
}
"""Bundled taxonomy definitions, relative to sast_bench/taxonomies"""

TAXONOMY_ENV_VAR = "SAST_BENCH_TAXONOMY"
"""Environment variable pointing at an external taxonomy definition"""

CWE_1000 = 1000
"""Research view whose direct members are the top-level weakness classes"""

# Results tree layout
TRUTH_FILE_NAME = "truth.sarif"
"""Ground truth file expected in every benchmark directory"""

SUMMARY_FILE_NAME = "summary.json"
"""Aggregated summary written at every directory level"""

METADATA_EXTENSION = "metadata"
SARIF_EXTENSION = "sarif"
CARD_EXTENSION = "json"

# Scoring
RATIO_DIGITS = 3
"""Rounding applied to every derived ratio"""
