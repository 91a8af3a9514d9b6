"""Per-repository analysis.

Collects raw author rows from git (shortlog commit counts and per-commit
numstat line changes) and aggregates them into a Repository keyed by
canonical contributor identity.
"""

from __future__ import annotations

import logging
import re
import subprocess
from pathlib import Path
from typing import Iterable, Iterator, Sequence

from .errors import AnalysisError
from .normalizer import NameNormalizer
from .stats import ContributorStats, Repository

logger = logging.getLogger(__name__)

GIT_TIMEOUT = 300  # seconds per git invocation

SHORTLOG_ARGS = ["shortlog", "-sn", "--all"]
NUMSTAT_ARGS = ["log", "--all", "--format=%aN", "--numstat"]

_SHORTLOG_LINE = re.compile(r"^\s*([0-9]+)\s+(.+)$")
_COUNT = re.compile(r"[0-9]+")


def run_git(args: list[str], repo_path: str | Path, timeout: int = GIT_TIMEOUT) -> str:
    """Run ``git -C <repo_path> <args>`` and return stdout."""
    cmd = ["git", "-C", str(repo_path), *args]
    logger.debug("Running %s", " ".join(cmd))
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            stdin=subprocess.DEVNULL,
            timeout=timeout,
        )
    except FileNotFoundError as e:
        raise AnalysisError("git executable not found") from e
    except subprocess.TimeoutExpired as e:
        raise AnalysisError(f"git {args[0]} timed out after {timeout}s") from e

    if result.returncode != 0:
        stderr = result.stderr.strip()[:200]
        raise AnalysisError(f"git {args[0]} failed: {stderr or f'exit code {result.returncode}'}")
    return result.stdout


def parse_shortlog(output: str) -> Iterator[tuple[str, str]]:
    """Yield ``(author, count)`` rows from ``git shortlog -sn`` output."""
    for line in output.splitlines():
        match = _SHORTLOG_LINE.match(line)
        if match:
            yield match.group(2).strip(), match.group(1)


def parse_numstat(output: str) -> Iterator[tuple[str, str, str]]:
    """Yield ``(author, added, deleted)`` rows from ``git log --format=%aN --numstat``.

    Lines without a tab are author headers; numstat lines before the first
    header, or with fewer than three fields, are dropped. Counts are passed
    through as strings so that binary markers ("-") can be rejected by the
    aggregator.
    """
    author = ""
    for line in output.splitlines():
        line = line.strip()
        if not line:
            continue
        if "\t" not in line:
            author = line
            continue
        if not author:
            continue
        parts = line.split("\t")
        if len(parts) < 3:
            continue
        yield author, parts[0], parts[1]


def _parse_count(value: object) -> int | None:
    # ASCII digits only: no signs, underscores or other scripts
    text = str(value).strip()
    if not _COUNT.fullmatch(text):
        return None
    return int(text)


class Analyzer:
    """Builds Repository records, optionally grouping names by canonical key."""

    def __init__(self, normalize: bool = False, normalizer: NameNormalizer | None = None):
        self.normalize = normalize
        self.normalizer = normalizer or NameNormalizer()

    def contributor_key(self, name: str) -> str:
        if self.normalize:
            return self.normalizer.normalize(name)
        return name

    def _contributor(self, repo: Repository, name: str) -> ContributorStats:
        key = self.contributor_key(name)
        stats = repo.contributors.get(key)
        if stats is None:
            stats = ContributorStats(key=key, name=name)
            repo.contributors[key] = stats
        elif self.normalize:
            stats.add_alias(name)
        return stats

    def aggregate(
        self,
        path: str,
        commit_rows: Iterable[Sequence[object]],
        line_rows: Iterable[Sequence[object]],
    ) -> Repository:
        """Aggregate raw author rows for the repository at ``path``.

        ``commit_rows`` hold ``(name, commits)``; ``line_rows`` hold
        ``(name, added, deleted)`` once per commit. Malformed rows are
        skipped.
        """
        repo = Repository(path=path)
        skipped = 0

        for row in commit_rows:
            if len(row) < 2:
                skipped += 1
                continue
            count = _parse_count(row[1])
            if count is None:
                skipped += 1
                continue
            self._contributor(repo, str(row[0])).add_commits(count)

        for row in line_rows:
            if len(row) < 3:
                skipped += 1
                continue
            added = _parse_count(row[1])
            deleted = _parse_count(row[2])
            if added is None or deleted is None:
                skipped += 1
                continue
            self._contributor(repo, str(row[0])).add_lines(added, deleted)

        if skipped:
            logger.debug("Skipped %d malformed rows in %s", skipped, path)
        return repo

    def analyze_repository(self, repo_path: str | Path) -> Repository:
        """Run git in ``repo_path`` and aggregate its history."""
        path = str(repo_path)
        try:
            commits = run_git(SHORTLOG_ARGS, path)
        except AnalysisError as e:
            raise AnalysisError(f"commit analysis failed: {e}") from e
        try:
            numstat = run_git(NUMSTAT_ARGS, path)
        except AnalysisError as e:
            raise AnalysisError(f"line change analysis failed: {e}") from e

        return self.aggregate(path, parse_shortlog(commits), parse_numstat(numstat))


def aggregate(
    path: str,
    commit_rows: Iterable[Sequence[object]],
    line_rows: Iterable[Sequence[object]],
    normalize: bool = False,
) -> Repository:
    """Shortcut for ``Analyzer(normalize).aggregate(...)``."""
    return Analyzer(normalize=normalize).aggregate(path, commit_rows, line_rows)
