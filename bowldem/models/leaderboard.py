"""
Leaderboard Data Models
"""

from dataclasses import dataclass


@dataclass
class LeaderboardEntry:
    """One ranked winner for a puzzle date. Rank is 1-indexed."""
    rank: int
    username: str
    guess_count: int
    won: bool = True
