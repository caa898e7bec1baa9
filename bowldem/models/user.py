"""
User Data Models

Contains user-related data structures.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class UserStats:
    """Lifetime statistics of one user."""
    games_played: int = 0
    games_won: int = 0
    current_streak: int = 0
    max_streak: int = 0
    guess_distribution: List[int] = field(default_factory=list)
    last_win_date: Optional[str] = None
    last_played_date: Optional[str] = None

    @classmethod
    def default(cls, max_guesses: int) -> 'UserStats':
        return cls(guess_distribution=[0] * max_guesses)

    @classmethod
    def from_dict(cls, data: Dict, max_guesses: int) -> 'UserStats':
        """Merge stored fields over the defaults, padding the histogram."""
        stats = cls.default(max_guesses)
        stats.games_played = int(data.get('games_played', 0))
        stats.games_won = int(data.get('games_won', 0))
        stats.current_streak = int(data.get('current_streak', 0))
        stats.max_streak = int(data.get('max_streak', 0))
        stats.last_win_date = data.get('last_win_date')
        stats.last_played_date = data.get('last_played_date')

        stored = list(data.get('guess_distribution') or [])
        if len(stored) < max_guesses:
            stored.extend([0] * (max_guesses - len(stored)))
        stats.guess_distribution = stored
        return stats
