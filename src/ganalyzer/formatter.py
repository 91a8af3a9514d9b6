"""Output rendering: rich table, JSON and CSV."""

from __future__ import annotations

import csv
import json
from typing import TextIO

from rich import box
from rich.cells import cell_len
from rich.console import Console
from rich.table import Table

from .config import AnalysisConfig
from .errors import UnsupportedFormatError
from .stats import ContributorStats, GlobalStats, Repository

MIN_TABLE_WIDTH = 100


def contributor_label(contributor: ContributorStats, config: AnalysisConfig) -> str:
    if config.aliases_enabled and contributor.aliases:
        return f"{contributor.name} (aliases: {', '.join(contributor.aliases)})"
    return contributor.name


def format_output(stats: GlobalStats, config: AnalysisConfig, stream: TextIO) -> None:
    """Render ranked contributors of ``stats`` to ``stream`` in ``config.output_format``."""
    renderers = {
        "table": _format_table,
        "json": _format_json,
        "csv": _format_csv,
    }
    renderer = renderers.get(config.output_format)
    if renderer is None:
        raise UnsupportedFormatError(f"unsupported output format: {config.output_format}")

    contributors = stats.sorted_contributors(config.sort_by, config.top_n)
    renderer(contributors, stats.repositories, config, stream)


def _format_table(
    contributors: list[ContributorStats],
    repos: list[Repository],
    config: AnalysisConfig,
    stream: TextIO,
) -> None:
    labels = [contributor_label(c, config) for c in contributors]
    width = max([MIN_TABLE_WIDTH, *(cell_len(label) + 60 for label in labels)])
    console = Console(
        file=stream,
        width=width,
        color_system=None,
        markup=False,
        highlight=False,
        emoji=False,
        soft_wrap=True,
    )

    console.print("Git Repository Analysis")
    console.print("======================")
    console.print()
    console.print(f"Found {len(repos)} repositories:")
    for repo in repos:
        console.print(f"  - {repo.name} ({repo.path})")
    console.print()

    if not contributors:
        console.print("No contributors found.")
        return

    console.print("Top Contributors:")
    console.print("================")

    table = Table(box=box.SIMPLE_HEAD, show_edge=False)
    table.add_column("Name", no_wrap=True)
    table.add_column("Commits", justify="right")
    table.add_column("Lines+", justify="right")
    table.add_column("Lines-", justify="right")
    table.add_column("Total Lines", justify="right")

    for label, c in zip(labels, contributors):
        table.add_row(
            label,
            str(c.commit_count),
            str(c.lines_added),
            str(c.lines_deleted),
            str(c.lines_changed),
        )
    console.print(table)


def _format_json(
    contributors: list[ContributorStats],
    repos: list[Repository],
    config: AnalysisConfig,
    stream: TextIO,
) -> None:
    data = {
        "repositories": [r.to_dict() for r in repos],
        "contributors": [c.to_dict() for c in contributors],
    }
    stream.write(json.dumps(data, indent=2, ensure_ascii=False))
    stream.write("\n")


def _format_csv(
    contributors: list[ContributorStats],
    repos: list[Repository],
    config: AnalysisConfig,
    stream: TextIO,
) -> None:
    writer = csv.writer(stream, lineterminator="\n")
    headers = ["Name", "Commits", "Lines Added", "Lines Deleted", "Total Lines"]
    if config.aliases_enabled:
        headers.append("Aliases")
    writer.writerow(headers)

    for c in contributors:
        record = [c.name, c.commit_count, c.lines_added, c.lines_deleted, c.lines_changed]
        if config.aliases_enabled:
            record.append("; ".join(c.aliases))
        writer.writerow(record)
