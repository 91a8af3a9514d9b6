"""Contributor statistics: per-repository records, the global merge and ranking."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

# Scoring weights for the "combined" sort
COMMITS_WEIGHT = 10
LINES_WEIGHT = 100

SORT_COMMITS = "commits"
SORT_LINES = "lines"
SORT_COMBINED = "combined"


@dataclass
class ContributorStats:
    """Accumulated statistics for one canonical contributor identity."""

    key: str
    name: str
    commit_count: int = 0
    lines_added: int = 0
    lines_deleted: int = 0
    aliases: list[str] = field(default_factory=list)

    @property
    def lines_changed(self) -> int:
        return self.lines_added + self.lines_deleted

    @property
    def combined_score(self) -> int:
        return self.commit_count * COMMITS_WEIGHT + self.lines_changed // LINES_WEIGHT

    def add_alias(self, alias: str) -> None:
        if alias != self.name and alias not in self.aliases:
            self.aliases.append(alias)

    def add_commits(self, count: int) -> None:
        self.commit_count += count

    def add_lines(self, added: int, deleted: int) -> None:
        self.lines_added += added
        self.lines_deleted += deleted

    def absorb(self, other: ContributorStats) -> None:
        """Fold another record for the same key into this one.

        The display name stays as it is; a differing incoming display name
        becomes an alias along with the incoming aliases.
        """
        self.add_commits(other.commit_count)
        self.add_lines(other.lines_added, other.lines_deleted)
        self.add_alias(other.name)
        for alias in other.aliases:
            self.add_alias(alias)

    def copy(self) -> ContributorStats:
        return ContributorStats(
            key=self.key,
            name=self.name,
            commit_count=self.commit_count,
            lines_added=self.lines_added,
            lines_deleted=self.lines_deleted,
            aliases=list(self.aliases),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "commit_count": self.commit_count,
            "lines_added": self.lines_added,
            "lines_deleted": self.lines_deleted,
            "lines_changed": self.lines_changed,
            "aliases": list(self.aliases),
        }


def extract_repo_name(path: str) -> str:
    """Last path segment after a ``/`` or ``\\`` separator.

    An empty path gives "unknown"; a path ending in a separator gives "".
    """
    if not path:
        return "unknown"
    cut = max(path.rfind("/"), path.rfind("\\"))
    return path[cut + 1:]


@dataclass
class Repository:
    """One scanned repository and its contributors, keyed by canonical key."""

    path: str
    name: str = ""
    contributors: dict[str, ContributorStats] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.name:
            self.name = extract_repo_name(self.path)

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "name": self.name,
            "contributors": {k: c.to_dict() for k, c in self.contributors.items()},
        }


def _sort_key(sort_by: str):
    if sort_by == SORT_LINES:
        return lambda c: (-c.lines_changed, c.key)
    if sort_by == SORT_COMBINED:
        return lambda c: (-c.combined_score, c.key)
    return lambda c: (-c.commit_count, c.key)


def rank_contributors(
    contributors: Iterable[ContributorStats],
    sort_by: str = SORT_COMMITS,
    top_n: int = 0,
) -> list[ContributorStats]:
    """Sort contributors by ``sort_by`` (descending) and keep the first ``top_n``.

    Unknown sort keys fall back to commits. Equal scores are ordered by
    canonical key. ``top_n == 0`` keeps everything.
    """
    if top_n < 0:
        raise ValueError(f"top_n must be non-negative, got {top_n}")
    ranked = sorted(contributors, key=_sort_key(sort_by))
    if top_n:
        ranked = ranked[:top_n]
    return ranked


class GlobalStats:
    """Contributor statistics merged across every added repository."""

    def __init__(self) -> None:
        self.contributors: dict[str, ContributorStats] = {}
        self.repositories: list[Repository] = []

    def add_repository(self, repo: Repository) -> None:
        """Merge ``repo`` into the global table.

        Call once per repository in discovery order. Counts are order
        independent; the display name of a key is taken from the first
        repository that contained it.
        """
        merged: dict[str, ContributorStats] = {}
        for key, stats in repo.contributors.items():
            existing = self.contributors.get(key)
            if existing is None:
                merged[key] = stats.copy()
            else:
                updated = existing.copy()
                updated.absorb(stats)
                merged[key] = updated

        self.contributors.update(merged)
        self.repositories.append(repo)

    def sorted_contributors(self, sort_by: str = SORT_COMMITS, top_n: int = 0) -> list[ContributorStats]:
        return rank_contributors(self.contributors.values(), sort_by, top_n)
