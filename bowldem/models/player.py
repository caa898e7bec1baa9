"""
Reference Data Models

Players and puzzles are loaded once at startup and never mutated.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Optional


class PlayerRole(Enum):
    """Closed set of playing roles."""
    BATSMAN = "Batsman"
    BOWLER = "Bowler"
    ALL_ROUNDER = "All-rounder"
    WICKETKEEPER = "Wicketkeeper"


@dataclass(frozen=True)
class Player:
    """A guessable player."""
    id: str
    full_name: str
    country: str
    role: str  # PlayerRole value

    def to_dict(self, active: Optional[bool] = None) -> dict:
        data = {
            'id': self.id,
            'full_name': self.full_name,
            'country': self.country,
            'role': self.role,
        }
        if active is not None:
            data['active'] = active
        return data


@dataclass(frozen=True)
class Scorecard:
    venue: str
    team1_name: str
    team2_name: str
    team1_score: str
    team2_score: str
    result: str


@dataclass(frozen=True)
class Puzzle:
    """
    One day's match scenario.

    The target player's team and role are denormalized from the player
    directory so feedback can be computed without a second lookup.
    """
    id: int
    target_player: str
    scorecard: Scorecard
    players_in_match: FrozenSet[str] = field(default_factory=frozenset)
    target_player_team: str = ""
    target_player_role: str = ""
    cricinfo_url: Optional[str] = None

    def summary(self) -> dict:
        """Public puzzle details shown before the answer is revealed."""
        return {
            'id': self.id,
            'venue': self.scorecard.venue,
            'team1_name': self.scorecard.team1_name,
            'team2_name': self.scorecard.team2_name,
            'team1_score': self.scorecard.team1_score,
            'team2_score': self.scorecard.team2_score,
        }
