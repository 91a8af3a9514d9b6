"""ganalyzer CLI - contributor statistics across many git repositories.

Usage:
    ganalyzer analyze [DIRECTORY] [options]
    ganalyzer analyze ~/src --normalize --aliases --sort lines --top 20
    ganalyzer analyze . --format json
"""

from __future__ import annotations

import io
import logging
import platform
import sys

import click
from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .analyzer import Analyzer
from .config import (
    DEFAULT_DIRECTORY,
    DEFAULT_FORMAT,
    DEFAULT_SORT,
    OUTPUT_FORMATS,
    SORT_KEYS,
    AnalysisConfig,
)
from .errors import AnalysisError, GanalyzerError
from .formatter import format_output
from .scanner import scan_for_repositories
from .stats import GlobalStats

console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool, quiet: bool) -> None:
    """Send package log records to stderr through rich."""
    pkg_logger = logging.getLogger("ganalyzer")
    for handler in list(pkg_logger.handlers):
        if isinstance(handler, RichHandler):
            pkg_logger.removeHandler(handler)

    handler = RichHandler(console=err_console, show_time=False, show_path=False, markup=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    pkg_logger.addHandler(handler)

    if verbose:
        pkg_logger.setLevel(logging.DEBUG)
    elif quiet:
        pkg_logger.setLevel(logging.WARNING)
    else:
        pkg_logger.setLevel(logging.INFO)


def analyze_repositories(repo_paths: list[str], analyzer: Analyzer) -> GlobalStats:
    """Analyze each repository in order and merge the successful ones.

    A repository whose git data cannot be collected is skipped with a warning.
    """
    stats = GlobalStats()
    total = len(repo_paths)
    for i, path in enumerate(repo_paths, start=1):
        logger.info("Analyzing repository %d/%d: %s", i, total, path)
        try:
            repo = analyzer.analyze_repository(path)
        except AnalysisError as e:
            logger.warning("Failed to analyze %s: %s", path, e)
            continue
        stats.add_repository(repo)
    return stats


def run(config: AnalysisConfig) -> str | None:
    """Scan, analyze and render. Returns the rendered report, or None if no repositories were found."""
    logger.info("Scanning directory: %s", config.directory)
    repo_paths = scan_for_repositories(config.directory)
    if not repo_paths:
        logger.warning("No Git repositories found in %s", config.directory)
        return None

    logger.info("Found %d repositories, analyzing...", len(repo_paths))
    stats = analyze_repositories(repo_paths, Analyzer(normalize=config.normalize_names))

    out = io.StringIO()
    format_output(stats, config, out)
    return out.getvalue()


@click.group(context_settings={"auto_envvar_prefix": "GANALYZER"})
@click.version_option(version=__version__, prog_name="ganalyzer")
def cli():
    """ganalyzer - who contributed what, across every repository in a tree.

    Finds git repositories under a directory, sums commits and changed lines
    per contributor across all of them, and prints a ranked report.
    """
    pass


@cli.command()
@click.argument("directory", default=DEFAULT_DIRECTORY)
@click.option("--format", "-f", "fmt", type=click.Choice(OUTPUT_FORMATS), default=DEFAULT_FORMAT, help="Output format")
@click.option("--top", "-n", "top_n", type=click.IntRange(min=0), default=0, help="Show only the top N contributors (0 = all)")
@click.option("--sort", "-s", "sort_by", type=click.Choice(SORT_KEYS, case_sensitive=False), default=DEFAULT_SORT, help="Sort contributors by")
@click.option("--normalize", is_flag=True, help="Group name variants (case, diacritics, punctuation, whitespace)")
@click.option("--aliases", "show_aliases", is_flag=True, help="Show grouped name variants (requires --normalize)")
@click.option("--verbose", "-v", is_flag=True, help="Show debug output on stderr")
@click.option("--quiet", "-q", is_flag=True, help="Only show warnings and errors on stderr")
def analyze(
    directory: str,
    fmt: str,
    top_n: int,
    sort_by: str,
    normalize: bool,
    show_aliases: bool,
    verbose: bool,
    quiet: bool,
):
    """Analyze every git repository under DIRECTORY.

    Examples:

        ganalyzer analyze ~/src

        ganalyzer analyze . --normalize --aliases

        ganalyzer analyze . --sort combined --top 10 --format csv
    """
    _configure_logging(verbose, quiet)

    if show_aliases and not normalize:
        logger.warning("--aliases requires --normalize to be effective")

    config = AnalysisConfig(
        directory=directory,
        output_format=fmt,
        top_n=top_n,
        sort_by=sort_by.lower(),
        normalize_names=normalize,
        show_aliases=show_aliases,
    )

    try:
        report = run(config)
    except GanalyzerError as e:
        raise click.ClickException(str(e))

    if report is not None:
        click.echo(report, nl=False)


@cli.command()
def version():
    """Show version information."""
    console.print(f"ganalyzer version {__version__}", markup=False, highlight=False)
    console.print(f"  Python version: {platform.python_version()}", markup=False, highlight=False)
    console.print(f"  OS/Arch: {sys.platform}/{platform.machine()}", markup=False, highlight=False)


if __name__ == "__main__":
    cli()
