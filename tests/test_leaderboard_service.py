# tests/test_leaderboard_service.py

import pytest

from bowldem.services.leaderboard_service import LeaderboardService
from bowldem.services.storage_service import KeySpace, MemoryStore

DATE = '2026-02-01'


@pytest.fixture
def leaderboard():
    return LeaderboardService(MemoryStore(), KeySpace('t'), default_size=20)


class TestLeaderboard:

    def test_top_is_ordered_by_guess_count(self, leaderboard):
        for name, guesses in (('carol', 4), ('alice', 1), ('bob', 3), ('dan', 2), ('erin', 5)):
            leaderboard.record_win(DATE, name, guesses)

        entries = leaderboard.get_top(DATE)
        counts = [entry.guess_count for entry in entries]
        assert counts == sorted(counts)
        assert [entry.username for entry in entries] == ['alice', 'dan', 'bob', 'carol', 'erin']
        assert [entry.rank for entry in entries] == [1, 2, 3, 4, 5]
        assert all(entry.won for entry in entries)

    def test_ties_keep_arrival_order(self, leaderboard):
        leaderboard.record_win(DATE, 'zed', 2)
        leaderboard.record_win(DATE, 'amy', 2)
        leaderboard.record_win(DATE, 'kim', 1)

        assert [e.username for e in leaderboard.get_top(DATE)] == ['kim', 'zed', 'amy']

    def test_upsert_overwrites_without_duplicates(self, leaderboard):
        leaderboard.record_win(DATE, 'alice', 4)
        leaderboard.record_win(DATE, 'bob', 3)
        leaderboard.record_win(DATE, 'alice', 2)

        entries = leaderboard.get_top(DATE)
        assert len(entries) == 2
        assert entries[0].username == 'alice'
        assert entries[0].guess_count == 2

    def test_get_top_limits_results(self, leaderboard):
        for i in range(5):
            leaderboard.record_win(DATE, f'user{i}', i + 1)

        assert len(leaderboard.get_top(DATE, 3)) == 3
        assert leaderboard.get_top(DATE, 0) == []

    def test_user_rank(self, leaderboard):
        leaderboard.record_win(DATE, 'alice', 3)
        leaderboard.record_win(DATE, 'bob', 1)

        entry = leaderboard.get_user_rank(DATE, 'alice')
        assert entry.rank == 2
        assert entry.guess_count == 3

    def test_user_without_win_has_no_rank(self, leaderboard):
        leaderboard.record_win(DATE, 'alice', 3)
        assert leaderboard.get_user_rank(DATE, 'bob') is None

    def test_dates_are_separate(self, leaderboard):
        leaderboard.record_win(DATE, 'alice', 3)
        assert leaderboard.get_top('2026-02-02') == []
