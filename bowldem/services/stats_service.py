"""
Stats Service

Lifetime per-user counters, updated once each time a game reaches a
terminal status.
"""

import datetime
import json
from dataclasses import asdict, replace
from typing import Callable, Optional

from ..config.game_settings import MAX_GUESSES
from ..errors import ConcurrentUpdateError
from ..models.user import UserStats
from .storage_service import KeySpace, KeyValueStore

MAX_WRITE_ATTEMPTS = 3


def apply_result(stats: UserStats, won: bool, guess_count: int, puzzle_date: str) -> UserStats:
    """
    Fold one finished game into the stats. Returns a new object.

    A win continues the streak only when the previous win was exactly the
    day before; any other gap restarts it at 1. Applying the same winning
    date twice leaves the streak untouched. Any loss resets the streak to 0.
    """
    new_stats = replace(stats, guess_distribution=list(stats.guess_distribution))
    new_stats.games_played += 1
    new_stats.last_played_date = puzzle_date

    if won:
        new_stats.games_won += 1
        bucket = guess_count - 1
        if bucket >= len(new_stats.guess_distribution):
            new_stats.guess_distribution.extend([0] * (bucket + 1 - len(new_stats.guess_distribution)))
        new_stats.guess_distribution[bucket] += 1

        yesterday = (datetime.date.fromisoformat(puzzle_date) - datetime.timedelta(days=1)).isoformat()
        if new_stats.last_win_date == yesterday:
            new_stats.current_streak += 1
        elif new_stats.last_win_date != puzzle_date:
            new_stats.current_streak = 1

        new_stats.max_streak = max(new_stats.max_streak, new_stats.current_streak)
        new_stats.last_win_date = puzzle_date
    else:
        new_stats.current_streak = 0

    return new_stats


class StatsService:
    """Loads and persists user stats through the store."""

    def __init__(self, store: KeyValueStore, keys: KeySpace, max_guesses: int = MAX_GUESSES):
        self.store = store
        self.keys = keys
        self.max_guesses = max_guesses

    def _decode(self, raw: Optional[str]) -> UserStats:
        if not raw:
            return UserStats.default(self.max_guesses)
        return UserStats.from_dict(json.loads(raw), self.max_guesses)

    def get_stats(self, username: str) -> UserStats:
        return self._decode(self.store.get(self.keys.stats(username)))

    def update_stats(self, username: str, mutate: Callable[[UserStats], UserStats]) -> UserStats:
        """Read-modify-write the user's stats with compare-and-set. Returning the input unchanged skips the write."""
        key = self.keys.stats(username)
        for _ in range(MAX_WRITE_ATTEMPTS):
            raw, version = self.store.get_versioned(key)
            current = self._decode(raw)
            updated = mutate(current)
            if updated is current:
                return current
            if self.store.compare_and_set(key, json.dumps(asdict(updated)), version):
                return updated
        raise ConcurrentUpdateError()

    def record_result(self, username: str, won: bool, guess_count: int, puzzle_date: str) -> UserStats:
        """Apply a finished game once; a date that was already applied is a no-op."""
        def mutate(stats: UserStats) -> UserStats:
            if stats.last_played_date == puzzle_date:
                return stats
            return apply_result(stats, won, guess_count, puzzle_date)

        return self.update_stats(username, mutate)
