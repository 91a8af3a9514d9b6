"""Run configuration shared by the CLI and the formatter."""

from __future__ import annotations

from dataclasses import dataclass

from .stats import SORT_COMBINED, SORT_COMMITS, SORT_LINES

OUTPUT_FORMATS = ("table", "json", "csv")
SORT_KEYS = (SORT_COMMITS, SORT_LINES, SORT_COMBINED)

DEFAULT_DIRECTORY = "."
DEFAULT_FORMAT = "table"
DEFAULT_SORT = SORT_COMMITS


@dataclass(frozen=True)
class AnalysisConfig:
    """Options for one analysis run."""

    directory: str = DEFAULT_DIRECTORY
    output_format: str = DEFAULT_FORMAT
    top_n: int = 0  # 0 = all contributors
    sort_by: str = DEFAULT_SORT
    normalize_names: bool = False
    show_aliases: bool = False

    @property
    def aliases_enabled(self) -> bool:
        """Aliases only exist when names are normalized."""
        return self.show_aliases and self.normalize_names
