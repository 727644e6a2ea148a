"""Command-line interface for sast-bench."""

import json
from pathlib import Path

import click

from sast_bench.config import (
    DEFAULT_TAXONOMY_VERSION,
    SUPPORTED_TAXONOMY_VERSIONS,
    TAXONOMY_ENV_VAR,
    __version__,
)
from sast_bench.console import error, success, warning
from sast_bench.logging import LOG_LEVELS, get_logger, setup_logging
from sast_bench.models.finding import FindingParseError, format_cwe, parse_cwe
from sast_bench.models.runs import Runs, RunsError, ToolsSpec
from sast_bench.models.summary import CRITERIA
from sast_bench.taxonomy import Taxonomy, TaxonomyError, load_taxonomy

logger = get_logger(__name__)


def taxonomy_options(func):
    """Add --taxonomy and --taxonomy-version options to a command."""
    func = click.option(
        "--taxonomy-version",
        type=click.Choice(SUPPORTED_TAXONOMY_VERSIONS),
        default=DEFAULT_TAXONOMY_VERSION,
        show_default=True,
        help="Bundled CWE taxonomy version",
    )(func)
    func = click.option(
        "--taxonomy",
        "taxonomy_path",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),  # type: ignore[type-var]
        envvar=TAXONOMY_ENV_VAR,
        default=None,
        help=f"External CWE taxonomy definition (SARIF). Also read from ${TAXONOMY_ENV_VAR}",
    )(func)
    return func


def _load_taxonomy(taxonomy_path: Path | None, taxonomy_version: str) -> Taxonomy:
    try:
        taxonomy = load_taxonomy(path=taxonomy_path, version=taxonomy_version)
    except TaxonomyError as e:
        raise click.ClickException(str(e)) from e
    logger.debug(f"Using {taxonomy!r}")
    return taxonomy


def _load_runs(runs_path: Path) -> Runs:
    try:
        return Runs.from_file(runs_path)
    except RunsError as e:
        raise click.ClickException(str(e)) from e


@click.group()
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    help="Enable verbose output (DEBUG level)",
)
@click.option(
    "-q",
    "--quiet",
    is_flag=True,
    help="Show only warnings and errors",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="Explicit log level (overrides -v/-q)",
)
@click.version_option(__version__, prog_name="sast-bench")
def cli(verbose, quiet, log_level):
    """Score SAST tool findings against labeled ground truth."""
    if sum([verbose, quiet, log_level is not None]) > 1:
        raise click.UsageError("--verbose, --quiet, and --log-level are mutually exclusive")

    setup_logging(verbose=verbose, quiet=quiet, log_level=log_level)


@cli.command(name="compare")
@click.argument("truth", type=click.Path(exists=True, dir_okay=False, path_type=Path))  # type: ignore[type-var]
@click.argument("tool", type=click.Path(exists=True, dir_okay=False, path_type=Path))  # type: ignore[type-var]
@click.option("--detailed", is_flag=True, help="Include the SARIF results of each match")
@taxonomy_options
def compare(truth, tool, detailed, taxonomy_path, taxonomy_version):
    """Evaluate one normalized tool output against one truth file.

    Prints the evaluation card as JSON.

    Example:
        sast-bench compare truth.sarif semgrep_default.sarif
    """
    from sast_bench.matching.selector import evaluate_tool
    from sast_bench.sarif import load_tool, load_truth

    taxonomy = _load_taxonomy(taxonomy_path, taxonomy_version)

    try:
        truth_set = load_truth(truth)
    except FindingParseError as e:
        raise click.ClickException(f"Invalid truth file {truth}: {e}") from e
    tool_set = load_tool(tool)

    card = evaluate_tool(truth_set, tool_set, taxonomy, detailed=detailed)
    click.echo(json.dumps(card.to_dict(detailed), indent=2))


@cli.command(name="evaluate")
@click.option(
    "-r",
    "--runs",
    "runs_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),  # type: ignore[type-var]
    help="Runs description (TOML)",
)
@click.argument("output", type=click.Path(exists=True, file_okay=False, path_type=Path))  # type: ignore[type-var]
@click.option("--detailed", is_flag=True, help="Include the SARIF results of each match")
@taxonomy_options
def evaluate(runs_path, output, detailed, taxonomy_path, taxonomy_version):
    """Evaluate parsed tool outputs of a results directory.

    Writes one evaluation card per (benchmark, tool) pair.

    Example:
        sast-bench evaluate -r runs.toml output/
    """
    from sast_bench.benchmarking.evaluator import EvaluationStatus, Evaluator

    taxonomy = _load_taxonomy(taxonomy_path, taxonomy_version)
    runs = _load_runs(runs_path)

    logger.info(f"Runs: {len(runs)} (benchmark, tool) pairs")
    evaluator = Evaluator(runs=runs, output=output, taxonomy=taxonomy, detailed=detailed)
    summary = evaluator.evaluate_all()
    summary.print_summary()

    if summary.counts[EvaluationStatus.INVALID_TRUTH]:
        error("Some benchmarks have an invalid truth file, their pairs were skipped")
    elif summary.evaluated == 0:
        warning("No parsed tool output was evaluated")


@cli.command(name="summarize")
@click.option(
    "-r",
    "--runs",
    "runs_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),  # type: ignore[type-var]
    help="Runs description (TOML)",
)
@click.argument("output", type=click.Path(exists=True, file_okay=False, path_type=Path))  # type: ignore[type-var]
@click.option(
    "--criterion",
    type=click.Choice(CRITERIA),
    default="region_cwe",
    show_default=True,
    help="Criterion shown in the console table",
)
@taxonomy_options
def summarize(runs_path, output, criterion, taxonomy_path, taxonomy_version):
    """Summarize evaluations at every directory level of a results directory.

    Writes summary.json in every directory, and the summary reports and
    per-finding matches.csv at the root.

    Example:
        sast-bench summarize -r runs.toml output/
    """
    from sast_bench.benchmarking.summarizer import Summarizer, print_summaries
    from sast_bench.renderers import render_summaries

    taxonomy = _load_taxonomy(taxonomy_path, taxonomy_version)
    runs = _load_runs(runs_path)

    summarizer = Summarizer(runs=runs, output=output, taxonomy=taxonomy)
    tree = summarizer.summarize()
    summarizer.write(tree)

    root_summaries = summarizer.root_summaries(tree)
    written = render_summaries(
        root_summaries,
        output,
        taxonomy_version=taxonomy.version,
        matches=summarizer.root_matches(),
    )
    print_summaries(root_summaries, criterion=criterion)
    success(f"Wrote {len(written)} report(s) to {output}")


@cli.command(name="show")
@click.argument("output", type=click.Path(exists=True, file_okay=False, path_type=Path))  # type: ignore[type-var]
@click.argument("directory", type=click.Path(path_type=Path), default=".")  # type: ignore[type-var]
@click.option(
    "--criterion",
    type=click.Choice(CRITERIA),
    default="region_cwe",
    show_default=True,
    help="Criterion shown in the table",
)
def show(output, directory, criterion):
    """Show the saved summaries of DIRECTORY, relative to OUTPUT.

    Reads the summary.json written by a previous summarize run.

    Example:
        sast-bench show output/ java
    """
    from sast_bench.benchmarking.storage import load_summaries, summary_path
    from sast_bench.benchmarking.summarizer import print_summaries

    path = summary_path(output, directory)
    summaries = load_summaries(path)
    if summaries is None:
        raise click.ClickException(f"No readable summaries in {path}, run summarize first")
    print_summaries(summaries, criterion=criterion)


@cli.command(name="template")
@click.argument("root", type=click.Path(exists=True, file_okay=False, path_type=Path))  # type: ignore[type-var]
@click.option(
    "-t",
    "--tools",
    "tools_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),  # type: ignore[type-var]
    default=None,
    help="Tools description (TOML) listing scripts and configurations",
)
def template(root, tools_path):
    """Print a runs description covering every benchmark under ROOT.

    Example:
        sast-bench template output/ -t tools.toml > runs.toml
    """
    from sast_bench.benchmarking.template import make_runs_template, runs_to_toml

    tools = None
    if tools_path is not None:
        try:
            tools = ToolsSpec.from_file(tools_path)
        except RunsError as e:
            raise click.ClickException(str(e)) from e

    runs = make_runs_template(root, tools)
    click.echo(runs_to_toml(runs), nl=False)


@cli.command(name="classes")
@click.argument("cwes", nargs=-1, required=True)
@taxonomy_options
def classes(cwes, taxonomy_path, taxonomy_version):
    """Show the CWE-1000 classes of each CWE (e.g. CWE-89 or 89)."""
    taxonomy = _load_taxonomy(taxonomy_path, taxonomy_version)

    for text in cwes:
        try:
            cwe = int(text) if text.isdigit() else parse_cwe(text)
        except FindingParseError as e:
            raise click.ClickException(str(e)) from e

        cwe_classes = sorted(taxonomy.classes_of(cwe))
        if cwe not in taxonomy:
            shown = click.style("not in taxonomy", fg="yellow")
        elif not cwe_classes:
            shown = click.style("no class", fg="yellow")
        else:
            shown = ", ".join(format_cwe(cwe_class) for cwe_class in cwe_classes)
        click.echo(f"{click.style(format_cwe(cwe), bold=True)}: {shown}")


def main():
    """Entry point for sast-bench command."""
    cli()


if __name__ == "__main__":
    main()
