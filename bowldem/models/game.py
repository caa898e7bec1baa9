"""
Game Data Models

Contains all game-related data structures and enums.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class GameStatus(Enum):
    """Lifecycle of one user's game for one puzzle date."""
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    WON = "won"
    LOST = "lost"

    @property
    def is_terminal(self) -> bool:
        return self in (GameStatus.WON, GameStatus.LOST)


@dataclass
class GameState:
    """Persisted progress of one user on one puzzle date."""
    puzzle_number: int
    puzzle_date: str
    guesses: List[str] = field(default_factory=list)
    game_status: str = GameStatus.NOT_STARTED.value  # Status as string for JSON serialization
    # Set once stats and leaderboard have taken a finished game into account
    result_recorded: bool = False

    @property
    def status(self) -> GameStatus:
        return GameStatus(self.game_status)

    @classmethod
    def from_dict(cls, data: Dict) -> 'GameState':
        # Records written before the flag existed were recorded in the same request
        status = GameStatus(data.get('game_status', GameStatus.NOT_STARTED.value))
        return cls(
            puzzle_number=int(data['puzzle_number']),
            puzzle_date=data['puzzle_date'],
            guesses=list(data.get('guesses', [])),
            game_status=status.value,
            result_recorded=bool(data.get('result_recorded', status.is_terminal)),
        )


@dataclass
class GuessFeedback:
    """Result of scoring one guess. Derived, never stored."""
    player_id: str
    player_name: str
    country: str
    role: str
    played_in_game: bool
    same_team: bool
    same_role: bool
    is_mvp: bool


@dataclass
class MatchSummary:
    """Answer reveal shown once the puzzle is won."""
    result: str
    team1_name: str
    team2_name: str
    team1_score: str
    team2_score: str
    mvp_name: str
    mvp_country: str
    mvp_role: str
    cricinfo_url: Optional[str] = None
