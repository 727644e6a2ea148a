"""Match evaluation of one truth finding against one tool finding."""

from sast_bench.models.finding import Finding, Location
from sast_bench.models.match import MatchVerdict
from sast_bench.ordering import is_at_least, region_order
from sast_bench.sarif import finding_to_result
from sast_bench.taxonomy import Taxonomy


def _region_match(truth_location: Location, tool_location: Location) -> bool:
    if truth_location.region is None or tool_location.region is None:
        return True
    return is_at_least(region_order(truth_location.region, tool_location.region))


def cwe_match(truth: Finding, tool: Finding, taxonomy: Taxonomy) -> bool:
    """True if some truth CWE and some tool CWE are equal or the truth CWE is the ancestor."""
    return any(
        is_at_least(taxonomy.ancestor_order(truth_cwe, tool_cwe))
        for truth_cwe in truth.cwes
        for tool_cwe in tool.cwes
    )


def cwe_class_match(truth: Finding, tool: Finding, taxonomy: Taxonomy) -> bool:
    """True if some tool CWE falls under a CWE-1000 class of some truth CWE."""
    return any(
        is_at_least(taxonomy.ancestor_order(cwe_class, tool_cwe))
        for truth_cwe in truth.cwes
        for cwe_class in taxonomy.classes_of(truth_cwe)
        for tool_cwe in tool.cwes
    )


def evaluate(
    truth: Finding, tool: Finding, taxonomy: Taxonomy, detailed: bool = False
) -> MatchVerdict:
    """Evaluate how well ``tool`` corresponds to ``truth``.

    Locations match when their paths are equal. A truth location is
    region-matched when some tool location on the same path has a region
    that covers it (or either region is absent). The ``*_all`` variants
    require every truth location to match, so they hold for a truth
    finding without locations.

    Args:
        truth: Ground truth finding
        tool: Tool finding
        taxonomy: CWE hierarchy used for CWE and class matching
        detailed: Attach both findings as SARIF results to the verdict

    Returns:
        MatchVerdict for the pair
    """
    file_matches = []
    region_matches = []
    for truth_location in truth.locations:
        file_match = False
        region_match = False
        for tool_location in tool.locations:
            if truth_location.path != tool_location.path:
                continue
            file_match = True
            if _region_match(truth_location, tool_location):
                region_match = True
                break
        file_matches.append(file_match)
        region_matches.append(region_match)

    return MatchVerdict(
        cwe_match=cwe_match(truth, tool, taxonomy),
        cwe_class_match=cwe_class_match(truth, tool, taxonomy),
        file_match_any=any(file_matches),
        file_match_all=all(file_matches),
        region_match_any=any(region_matches),
        region_match_all=all(region_matches),
        reported_cwes=tool.cwes,
        truth_result=finding_to_result(truth) if detailed else None,
        tool_result=finding_to_result(tool) if detailed else None,
    )
