"""
Puzzle Service

Maps a calendar date onto the fixed puzzle list. Every user asking on the
same UTC day gets the same puzzle; the list cycles once it is exhausted.
"""

import datetime
from typing import Optional, Sequence, Tuple, Union

from ..config.game_settings import EPOCH_DATE
from ..errors import PuzzleNotFoundError
from ..models.player import Puzzle

DateLike = Union[str, datetime.date, datetime.datetime]


def _to_date(value: DateLike) -> datetime.date:
    """Normalise a YYYY-MM-DD string, date or datetime to a UTC calendar date."""
    if isinstance(value, datetime.datetime):
        if value.tzinfo is not None:
            value = value.astimezone(datetime.timezone.utc)
        return value.date()
    if isinstance(value, datetime.date):
        return value
    return datetime.date.fromisoformat(value)


def get_today_utc(now: Optional[datetime.datetime] = None) -> str:
    """Today's date in UTC as a YYYY-MM-DD string."""
    now = now or datetime.datetime.now(datetime.timezone.utc)
    return _to_date(now).isoformat()


def get_puzzle_number(puzzle_date: DateLike, epoch_date: DateLike = EPOCH_DATE) -> int:
    """Whole days since the epoch. Dates before the epoch collapse to 0."""
    days = (_to_date(puzzle_date) - _to_date(epoch_date)).days
    return max(0, days)


def get_puzzle_index(puzzle_number: int, total_puzzles: int) -> int:
    if total_puzzles <= 0:
        raise PuzzleNotFoundError("Puzzle list is empty")
    return puzzle_number % total_puzzles


def resolve_puzzle(puzzles: Sequence[Puzzle],
                   puzzle_date: DateLike,
                   epoch_date: DateLike = EPOCH_DATE) -> Tuple[Puzzle, int, int]:
    """
    Resolve the puzzle for a date.

    Args:
        puzzles: Ordered puzzle list
        puzzle_date: Calendar date (string, date or datetime)
        epoch_date: Date of puzzle #0

    Returns:
        Tuple of (puzzle, puzzle_number, puzzle_index)

    Raises:
        PuzzleNotFoundError: If the puzzle list is empty
    """
    puzzle_number = get_puzzle_number(puzzle_date, epoch_date)
    puzzle_index = get_puzzle_index(puzzle_number, len(puzzles))
    return puzzles[puzzle_index], puzzle_number, puzzle_index


def seconds_until_next_puzzle(now: Optional[datetime.datetime] = None) -> int:
    """Seconds left until the next UTC midnight."""
    now = now or datetime.datetime.now(datetime.timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=datetime.timezone.utc)
    now = now.astimezone(datetime.timezone.utc)

    tomorrow = datetime.datetime.combine(
        now.date() + datetime.timedelta(days=1),
        datetime.time(0, 0),
        tzinfo=datetime.timezone.utc
    )
    return int((tomorrow - now).total_seconds())


def format_countdown(seconds: int) -> str:
    """Format a number of seconds as HH:MM:SS."""
    seconds = max(0, int(seconds))
    hours, remainder = divmod(seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"
