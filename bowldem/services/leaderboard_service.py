"""
Leaderboard Service

Per-date ranking of winners by guesses used, fewer is better. Equal guess
counts keep arrival order: the first winner at a count ranks higher.
"""

from typing import List, Optional

from ..models.leaderboard import LeaderboardEntry
from .storage_service import KeySpace, KeyValueStore


class LeaderboardService:

    def __init__(self, store: KeyValueStore, keys: KeySpace, default_size: int = 20):
        self.store = store
        self.keys = keys
        self.default_size = default_size

    def record_win(self, puzzle_date: str, username: str, guess_count: int) -> None:
        """Insert or overwrite the user's entry for the date."""
        self.store.sorted_set_upsert(self.keys.leaderboard(puzzle_date), username, guess_count)

    def get_top(self, puzzle_date: str, n: Optional[int] = None) -> List[LeaderboardEntry]:
        limit = self.default_size if n is None else n
        if limit <= 0:
            return []

        rows = self.store.sorted_set_range(self.keys.leaderboard(puzzle_date), 0, limit)
        return [
            LeaderboardEntry(rank=index + 1, username=member, guess_count=int(score))
            for index, (member, score) in enumerate(rows)
        ]

    def get_user_rank(self, puzzle_date: str, username: str) -> Optional[LeaderboardEntry]:
        """The user's entry, or None if they have not won that day."""
        key = self.keys.leaderboard(puzzle_date)
        rank = self.store.sorted_set_rank(key, username)
        if rank is None:
            return None

        score = self.store.sorted_set_score(key, username)
        return LeaderboardEntry(rank=rank + 1, username=username, guess_count=int(score or 0))
