"""
Tests for the pure leaderboard merge rules.
"""

from src.domain.leaderboard_rules import LEADERBOARD_SIZE, merge_score, remove_entry
from src.models.dc_models import LeaderboardEntryModel


def board(*pairs):
    return [LeaderboardEntryModel(username=u, score=s) for u, s in pairs]


def as_pairs(entries):
    return [(e.username, e.score) for e in entries]


class TestMergeScore:
    """Tests for merge_score."""

    def test_first_submission(self):
        assert as_pairs(merge_score([], "alice", 50)) == [("alice", 50)]

    def test_scenario_lower_score_ignored(self):
        entries = merge_score([], "alice", 50)
        entries = merge_score(entries, "bob", 70)
        entries = merge_score(entries, "alice", 40)
        assert as_pairs(entries) == [("bob", 70), ("alice", 50)]

    def test_higher_score_replaces(self):
        entries = merge_score(board(("bob", 70), ("alice", 50)), "alice", 90)
        assert as_pairs(entries) == [("alice", 90), ("bob", 70)]

    def test_equal_score_keeps_stored(self):
        entries = board(("bob", 70), ("alice", 50))
        assert as_pairs(merge_score(entries, "alice", 50)) == as_pairs(entries)

    def test_input_not_mutated(self):
        entries = board(("alice", 50))
        merge_score(entries, "alice", 80)
        assert entries[0].score == 50

    def test_cap_applied_after_sort(self):
        entries = board(*[(f"user{i}", 100 - i) for i in range(LEADERBOARD_SIZE)])
        merged = merge_score(entries, "newcomer", 95)
        assert len(merged) == LEADERBOARD_SIZE
        # user5 also has 95 and was there first
        assert [e.username for e in merged[5:7]] == ["user5", "newcomer"]
        assert "user9" not in [e.username for e in merged]

    def test_full_board_rejects_low_score(self):
        entries = board(*[(f"user{i}", 100 - i) for i in range(LEADERBOARD_SIZE)])
        merged = merge_score(entries, "newcomer", 1)
        assert as_pairs(merged) == as_pairs(entries)

    def test_tie_incumbent_stays_ahead(self):
        merged = merge_score(board(("alice", 50)), "bob", 50)
        assert as_pairs(merged) == [("alice", 50), ("bob", 50)]

    def test_tie_at_last_place_drops_newcomer(self):
        entries = board(*[(f"user{i}", 10) for i in range(LEADERBOARD_SIZE)])
        merged = merge_score(entries, "newcomer", 10)
        assert "newcomer" not in [e.username for e in merged]

    def test_invariants_over_many_submissions(self):
        entries = []
        for i in range(60):
            entries = merge_score(entries, f"user{i % 17}", (i * 37) % 101)
        scores = [e.score for e in entries]
        names = [e.username for e in entries]
        assert len(entries) <= LEADERBOARD_SIZE
        assert scores == sorted(scores, reverse=True)
        assert len(names) == len(set(names))

    def test_custom_size(self):
        merged = merge_score(board(("a", 3), ("b", 2)), "c", 1, size=2)
        assert as_pairs(merged) == [("a", 3), ("b", 2)]


class TestRemoveEntry:
    """Tests for remove_entry."""

    def test_removes_user(self):
        entries = board(("bob", 70), ("alice", 50), ("carol", 40))
        assert as_pairs(remove_entry(entries, "alice")) == [("bob", 70), ("carol", 40)]

    def test_idempotent(self):
        entries = board(("bob", 70), ("alice", 50))
        once = remove_entry(entries, "alice")
        assert as_pairs(remove_entry(once, "alice")) == as_pairs(once)

    def test_unknown_user(self):
        entries = board(("bob", 70))
        assert as_pairs(remove_entry(entries, "nobody")) == [("bob", 70)]
