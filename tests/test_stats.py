"""Tests for contributor records, the global merge and ranking."""

import itertools

import pytest

from ganalyzer.stats import (
    ContributorStats,
    GlobalStats,
    Repository,
    extract_repo_name,
    rank_contributors,
)


def _contributor(key, name=None, commits=0, added=0, deleted=0, aliases=()):
    return ContributorStats(
        key=key,
        name=name or key,
        commit_count=commits,
        lines_added=added,
        lines_deleted=deleted,
        aliases=list(aliases),
    )


def _repo(path, *contributors):
    repo = Repository(path=path)
    for c in contributors:
        repo.contributors[c.key] = c
    return repo


class TestExtractRepoName:
    @pytest.mark.parametrize(
        "path, expected",
        [
            ("/path/to/my-repo", "my-repo"),
            ("my-repo", "my-repo"),
            ("C:\\src\\my-repo", "my-repo"),
            ("/mixed\\sep/repo", "repo"),
            ("", "unknown"),
            ("path/", ""),
        ],
    )
    def test_extract(self, path, expected):
        assert extract_repo_name(path) == expected

    def test_repository_derives_name(self):
        repo = Repository(path="/work/checkouts/service-a")
        assert repo.name == "service-a"
        assert repo.contributors == {}


class TestContributorStats:
    def test_lines_changed_is_sum(self):
        c = _contributor("alice", added=100, deleted=20)
        assert c.lines_changed == 120
        c.add_lines(5, 7)
        assert (c.lines_added, c.lines_deleted, c.lines_changed) == (105, 27, 132)

    def test_add_alias_dedups_and_skips_display_name(self):
        c = _contributor("martinprazak", name="Martin Pražák")
        c.add_alias("martin.prazak")
        c.add_alias("martin.prazak")
        c.add_alias("Martin Pražák")
        assert c.aliases == ["martin.prazak"]

    def test_copy_is_deep(self):
        c = _contributor("alice", aliases=["Alice"])
        dup = c.copy()
        dup.add_alias("ALICE")
        dup.add_commits(3)
        assert c.aliases == ["Alice"]
        assert c.commit_count == 0

    def test_combined_score(self):
        c = _contributor("alice", commits=3, added=150, deleted=99)
        assert c.combined_score == 3 * 10 + 249 // 100

    def test_to_dict(self):
        d = _contributor("alice", commits=2, added=3, deleted=4, aliases=["ALICE"]).to_dict()
        assert d == {
            "name": "alice",
            "commit_count": 2,
            "lines_added": 3,
            "lines_deleted": 4,
            "lines_changed": 7,
            "aliases": ["ALICE"],
        }


class TestGlobalStatsAddRepository:
    def test_add_and_sum(self):
        gs = GlobalStats()
        gs.add_repository(_repo(
            "/repo1",
            _contributor("alice", commits=10, added=100, deleted=20),
            _contributor("bob", commits=5, added=50, deleted=10),
        ))
        assert len(gs.repositories) == 1
        assert len(gs.contributors) == 2
        assert gs.contributors["alice"].commit_count == 10
        assert gs.contributors["alice"].lines_changed == 120

        gs.add_repository(_repo("/repo2", _contributor("alice", commits=3, added=30, deleted=5)))
        assert len(gs.contributors) == 2
        alice = gs.contributors["alice"]
        assert alice.commit_count == 13
        assert alice.lines_changed == 155
        assert alice.lines_changed == alice.lines_added + alice.lines_deleted
        assert [r.path for r in gs.repositories] == ["/repo1", "/repo2"]

    def test_insert_is_a_copy(self):
        original = _contributor("alice", commits=1, aliases=["ALICE"])
        gs = GlobalStats()
        gs.add_repository(_repo("/a", original))
        gs.add_repository(_repo("/b", _contributor("alice", commits=2, aliases=["Alice"])))
        assert original.commit_count == 1
        assert original.aliases == ["ALICE"]
        assert gs.contributors["alice"].aliases == ["ALICE", "Alice"]

    def test_display_name_first_repository_wins(self):
        gs = GlobalStats()
        gs.add_repository(_repo("/a", _contributor("martinprazak", name="Martin Pražák", commits=4)))
        gs.add_repository(_repo("/b", _contributor(
            "martinprazak", name="martin.prazak", commits=2, aliases=["Martin_Prazak", "Martin Pražák"],
        )))
        gs.add_repository(_repo("/c", _contributor("martinprazak", name="martin.prazak", commits=1)))

        merged = gs.contributors["martinprazak"]
        assert merged.name == "Martin Pražák"
        assert merged.aliases == ["martin.prazak", "Martin_Prazak"]
        assert merged.commit_count == 7

    def test_commit_totals_independent_of_merge_order(self):
        repos = [
            _repo("/a", _contributor("alice", "Alice", commits=3, added=1), _contributor("bob", commits=1)),
            _repo("/b", _contributor("alice", "alice", commits=5, deleted=4)),
            _repo("/c", _contributor("bob", commits=7, added=9), _contributor("carol", commits=2)),
        ]
        totals = set()
        for order in itertools.permutations(repos):
            gs = GlobalStats()
            for repo in order:
                gs.add_repository(repo)
            totals.add(tuple(
                (k, c.commit_count, c.lines_added, c.lines_deleted)
                for k, c in sorted(gs.contributors.items())
            ))
        assert totals == {(("alice", 8, 1, 4), ("bob", 8, 9, 0), ("carol", 2, 0, 0))}

    def test_empty_repository(self):
        gs = GlobalStats()
        gs.add_repository(_repo("/a", _contributor("alice", commits=1)))
        gs.add_repository(Repository(path="/empty"))
        assert len(gs.repositories) == 2
        assert list(gs.contributors) == ["alice"]


@pytest.fixture
def three_contributors():
    gs = GlobalStats()
    gs.add_repository(_repo(
        "/repo",
        _contributor("alice", commits=10, added=100),
        _contributor("bob", commits=5, added=200),
        _contributor("charlie", commits=15, added=50),
    ))
    return gs


class TestRanking:
    def test_sort_by_commits(self, three_contributors):
        ranked = three_contributors.sorted_contributors("commits", 0)
        assert [c.key for c in ranked] == ["charlie", "alice", "bob"]

    def test_sort_by_lines(self, three_contributors):
        ranked = three_contributors.sorted_contributors("lines", 0)
        assert [c.key for c in ranked] == ["bob", "alice", "charlie"]

    def test_sort_combined(self):
        contributors = [
            _contributor("few-commits-many-lines", commits=1, added=5000),  # 10 + 50
            _contributor("many-commits", commits=8, added=10),  # 80 + 0
            _contributor("middle", commits=5, added=999),  # 50 + 9
        ]
        ranked = rank_contributors(contributors, "combined")
        assert [c.key for c in ranked] == ["many-commits", "few-commits-many-lines", "middle"]

    def test_unknown_sort_falls_back_to_commits(self, three_contributors):
        fallback = three_contributors.sorted_contributors("popularity", 0)
        by_commits = three_contributors.sorted_contributors("commits", 0)
        assert [c.key for c in fallback] == [c.key for c in by_commits]

    def test_limit(self, three_contributors):
        top = three_contributors.sorted_contributors("commits", 2)
        assert [c.key for c in top] == ["charlie", "alice"]

    def test_zero_means_all(self, three_contributors):
        assert len(three_contributors.sorted_contributors("commits", 0)) == 3

    def test_limit_larger_than_table(self, three_contributors):
        assert len(three_contributors.sorted_contributors("lines", 10)) == 3

    def test_ties_ordered_by_key(self):
        contributors = [_contributor(k, commits=4) for k in ("zed", "amy", "max")]
        assert [c.key for c in rank_contributors(contributors)] == ["amy", "max", "zed"]

    def test_negative_limit_rejected(self):
        with pytest.raises(ValueError):
            rank_contributors([], "commits", -1)

    def test_empty(self):
        assert GlobalStats().sorted_contributors() == []
