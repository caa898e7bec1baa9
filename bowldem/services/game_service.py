"""
Game Service

Contains the core game logic: scoring a guess against the day's puzzle,
the per-day game state machine, and the orchestration that persists state,
stats and leaderboard entries through the store.
"""

import datetime
import json
from dataclasses import asdict, dataclass
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from ..config.game_settings import EPOCH_DATE, MAX_GUESSES, PLAYERS, PUZZLES
from ..errors import (
    ConcurrentUpdateError, DuplicateGuessError, GameAlreadyCompletedError,
    InvalidCandidateError, ValidationError
)
from ..models.game import GameState, GameStatus, GuessFeedback, MatchSummary
from ..models.player import Player, Puzzle
from ..models.user import UserStats
from .leaderboard_service import LeaderboardService
from .puzzle_service import get_today_utc, resolve_puzzle, seconds_until_next_puzzle, format_countdown
from .stats_service import MAX_WRITE_ATTEMPTS, StatsService
from .storage_service import KeySpace, KeyValueStore


def score_guess(candidate_id: str, puzzle: Puzzle,
                players: Mapping[str, Player]) -> Optional[GuessFeedback]:
    """
    Compare a candidate with the puzzle's target.

    Returns:
        GuessFeedback, or None if the candidate is not a known player
    """
    candidate = players.get(candidate_id)
    if candidate is None:
        return None

    return GuessFeedback(
        player_id=candidate.id,
        player_name=candidate.full_name,
        country=candidate.country,
        role=candidate.role,
        played_in_game=candidate_id in puzzle.players_in_match,
        same_team=candidate.country == puzzle.target_player_team,
        same_role=candidate.role == puzzle.target_player_role,
        is_mvp=candidate_id == puzzle.target_player,
    )


def submit_guess(state: GameState, candidate_id: str, puzzle: Puzzle,
                 players: Mapping[str, Player],
                 max_guesses: int = MAX_GUESSES) -> Tuple[GameState, GuessFeedback]:
    """
    Apply one guess to a game state. The input state is not modified.

    Raises:
        GameAlreadyCompletedError: The game is already won or lost
        DuplicateGuessError: The candidate was guessed before
        InvalidCandidateError: The candidate is not a known player
    """
    if state.status.is_terminal:
        raise GameAlreadyCompletedError()

    if candidate_id in state.guesses:
        raise DuplicateGuessError()

    feedback = score_guess(candidate_id, puzzle, players)
    if feedback is None:
        raise InvalidCandidateError()

    guesses = state.guesses + [candidate_id]

    if feedback.is_mvp:
        status = GameStatus.WON
    elif len(guesses) >= max_guesses:
        status = GameStatus.LOST
    else:
        status = GameStatus.IN_PROGRESS

    new_state = GameState(
        puzzle_number=state.puzzle_number,
        puzzle_date=state.puzzle_date,
        guesses=guesses,
        game_status=status.value,
    )
    return new_state, feedback


def replay_feedback(guesses: Sequence[str], puzzle: Puzzle,
                    players: Mapping[str, Player]) -> List[GuessFeedback]:
    """Rebuild the feedback history from the stored guesses, in order."""
    history = []
    for candidate_id in guesses:
        feedback = score_guess(candidate_id, puzzle, players)
        # Players dropped from the directory since the guess are skipped
        if feedback is not None:
            history.append(feedback)
    return history


def build_match_summary(puzzle: Puzzle, players: Mapping[str, Player]) -> MatchSummary:
    target = players.get(puzzle.target_player)
    card = puzzle.scorecard
    return MatchSummary(
        result=card.result,
        team1_name=card.team1_name,
        team2_name=card.team2_name,
        team1_score=card.team1_score,
        team2_score=card.team2_score,
        mvp_name=target.full_name if target else puzzle.target_player,
        mvp_country=puzzle.target_player_team,
        mvp_role=puzzle.target_player_role,
        cricinfo_url=puzzle.cricinfo_url,
    )


def generate_share_text(puzzle_number: int, feedback_list: Sequence[GuessFeedback], streak: int,
                        footer: Optional[str] = None) -> str:
    """
    Spoiler-free result grid.

    One row per guess: played in match, same team, same role, then a
    trophy for the Man of the Match. An optional footer line (for example
    where to play) closes the text.
    """
    rows = []
    for feedback in feedback_list:
        played = '🟢' if feedback.played_in_game else '🔴'
        team = '🟢' if feedback.same_team else '🔴'
        role = '🟢' if feedback.same_role else '🔴'
        motm = '🏆' if feedback.is_mvp else '🔴'
        rows.append(played + team + role + motm)

    text = f"🏏 Bowldem #{puzzle_number}\n\n" + '\n'.join(rows)
    if streak > 1:
        text += f"\n\n🔥{streak}"
    if footer:
        text += f"\n\n{footer}"
    return text


def _utc_now() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


@dataclass
class GuessResult:
    """Everything the client needs after a guess."""
    feedback: GuessFeedback
    game_state: GameState
    stats: UserStats
    match_summary: Optional[MatchSummary] = None
    share_text: Optional[str] = None

    @property
    def completed(self) -> bool:
        return self.game_state.status.is_terminal

    @property
    def won(self) -> bool:
        return self.game_state.status == GameStatus.WON


class GameService:
    """
    Core game service. Holds no per-user state of its own; everything is
    keyed by (username, puzzle date) in the store.

    This class handles:
    - Resolving today's puzzle
    - Guess validation and scoring
    - Optimistic read-modify-write of the game state
    - Updating stats and the leaderboard when a game finishes
    """

    def __init__(self,
                 store: KeyValueStore,
                 keys: Optional[KeySpace] = None,
                 players: Mapping[str, Player] = PLAYERS,
                 puzzles: Sequence[Puzzle] = PUZZLES,
                 max_guesses: int = MAX_GUESSES,
                 epoch_date: str = EPOCH_DATE,
                 leaderboard_size: int = 20,
                 share_footer: Optional[str] = None,
                 clock: Callable[[], datetime.datetime] = _utc_now):
        self.store = store
        self.keys = keys or KeySpace()
        self.players = players
        self.puzzles = puzzles
        self.max_guesses = max_guesses
        self.epoch_date = epoch_date
        self.share_footer = share_footer
        self.clock = clock

        self.stats_service = StatsService(store, self.keys, max_guesses)
        self.leaderboard_service = LeaderboardService(store, self.keys, leaderboard_size)

        active = set()
        for puzzle in puzzles:
            active.update(puzzle.players_in_match)
        self.active_player_ids = frozenset(active)

    def today(self) -> str:
        return get_today_utc(self.clock())

    def get_puzzle(self, puzzle_date: Optional[str] = None) -> Tuple[Puzzle, int, int]:
        return resolve_puzzle(self.puzzles, puzzle_date or self.today(), self.epoch_date)

    def get_game_state(self, username: str, puzzle_date: str) -> Optional[GameState]:
        raw = self.store.get(self.keys.game(username, puzzle_date))
        return GameState.from_dict(json.loads(raw)) if raw else None

    def make_guess(self, username: str, player_id: str, puzzle_date: Optional[str] = None) -> GuessResult:
        """
        Processes a guess and persists the new state.

        Player ids are matched exactly; surrounding whitespace is not trimmed.
        Resubmitting the guess that finished a game whose result was never
        recorded completes the recording and answers as the first time.

        Args:
            username: Current user
            player_id: Guessed player identifier
            puzzle_date: Defaults to today (UTC)

        Returns:
            GuessResult with feedback, new state and stats

        Raises:
            ValidationError, GameAlreadyCompletedError, DuplicateGuessError,
            InvalidCandidateError, ConcurrentUpdateError
        """
        if not isinstance(player_id, str) or not player_id:
            raise ValidationError("player_id is required")

        puzzle_date = puzzle_date or self.today()
        puzzle, puzzle_number, _ = self.get_puzzle(puzzle_date)
        key = self.keys.game(username, puzzle_date)

        for _ in range(MAX_WRITE_ATTEMPTS):
            raw, version = self.store.get_versioned(key)
            if raw:
                state = GameState.from_dict(json.loads(raw))
            else:
                state = GameState(puzzle_number=puzzle_number, puzzle_date=puzzle_date)

            if state.status.is_terminal and not state.result_recorded:
                stats = self._record_result(username, state)
                if state.guesses and state.guesses[-1] == player_id:
                    return self._build_result(state, puzzle, puzzle_number, stats)
                raise GameAlreadyCompletedError()

            # Re-validated on every attempt so a racing duplicate is rejected
            new_state, _ = submit_guess(state, player_id, puzzle, self.players, self.max_guesses)

            if self.store.compare_and_set(key, json.dumps(asdict(new_state)), version):
                break
        else:
            raise ConcurrentUpdateError()

        if new_state.status.is_terminal:
            stats = self._record_result(username, new_state)
        else:
            stats = self.stats_service.get_stats(username)
        return self._build_result(new_state, puzzle, puzzle_number, stats)

    def _build_result(self, state: GameState, puzzle: Puzzle, puzzle_number: int,
                      stats: UserStats) -> GuessResult:
        result = GuessResult(
            feedback=score_guess(state.guesses[-1], puzzle, self.players),
            game_state=state,
            stats=stats,
        )
        if result.won:
            result.match_summary = build_match_summary(puzzle, self.players)
        if result.completed:
            history = replay_feedback(state.guesses, puzzle, self.players)
            result.share_text = generate_share_text(
                puzzle_number, history, stats.current_streak, self.share_footer
            )
        return result

    def _record_result(self, username: str, state: GameState) -> UserStats:
        """
        Apply a finished game to stats and the leaderboard, then flag the
        stored state as recorded.

        Both writes are idempotent per puzzle date, so whichever request
        finds the flag unset can finish a recording that failed halfway.
        """
        guess_count = len(state.guesses)
        won = state.status == GameStatus.WON

        stats = self.stats_service.record_result(username, won, guess_count, state.puzzle_date)
        if won:
            self.leaderboard_service.record_win(state.puzzle_date, username, guess_count)

        self._mark_recorded(username, state.puzzle_date)
        state.result_recorded = True
        return stats

    def _mark_recorded(self, username: str, puzzle_date: str) -> None:
        key = self.keys.game(username, puzzle_date)
        for _ in range(MAX_WRITE_ATTEMPTS):
            raw, version = self.store.get_versioned(key)
            if not raw:
                return  # reset meanwhile
            state = GameState.from_dict(json.loads(raw))
            if state.result_recorded:
                return
            state.result_recorded = True
            if self.store.compare_and_set(key, json.dumps(asdict(state)), version):
                return
        raise ConcurrentUpdateError()

    def get_init_state(self, username: str) -> Dict:
        """Today's puzzle summary plus the user's saved progress."""
        puzzle_date = self.today()
        puzzle, puzzle_number, _ = self.get_puzzle(puzzle_date)
        state = self.get_game_state(username, puzzle_date)

        if state and state.status.is_terminal and not state.result_recorded:
            stats = self._record_result(username, state)
        else:
            stats = self.stats_service.get_stats(username)

        history = replay_feedback(state.guesses, puzzle, self.players) if state else []
        seconds_left = seconds_until_next_puzzle(self.clock())

        data = {
            'username': username,
            'puzzle_number': puzzle_number,
            'puzzle_date': puzzle_date,
            'max_guesses': self.max_guesses,
            'puzzle': puzzle.summary(),
            'game_state': asdict(state) if state else None,
            'stats': asdict(stats),
            'feedback_history': [asdict(feedback) for feedback in history],
            'seconds_until_next_puzzle': seconds_left,
            'next_puzzle_in': format_countdown(seconds_left),
        }

        if state and state.status == GameStatus.WON:
            data['match_summary'] = asdict(build_match_summary(puzzle, self.players))
        if state and state.status.is_terminal:
            data['share_text'] = generate_share_text(
                puzzle_number, history, stats.current_streak, self.share_footer
            )

        return data

    def get_leaderboard(self, username: str, size: Optional[int] = None) -> Dict:
        puzzle_date = self.today()
        _, puzzle_number, _ = self.get_puzzle(puzzle_date)

        entries = self.leaderboard_service.get_top(puzzle_date, size)
        user_entry = self.leaderboard_service.get_user_rank(puzzle_date, username)

        return {
            'puzzle_number': puzzle_number,
            'puzzle_date': puzzle_date,
            'entries': [asdict(entry) for entry in entries],
            'user_entry': asdict(user_entry) if user_entry else None,
        }

    def get_players(self) -> List[Dict]:
        """Full player directory with the `active` flag for autocomplete ranking."""
        return [
            player.to_dict(active=player.id in self.active_player_ids)
            for player in self.players.values()
        ]

    def reset_game(self, username: str, puzzle_date: Optional[str] = None) -> bool:
        """Delete today's game state for a user. Stats and leaderboard are untouched."""
        return self.store.delete(self.keys.game(username, puzzle_date or self.today()))


# Global service instance
_game_service = None


def get_game_service() -> Optional[GameService]:
    """Get the global game service instance."""
    return _game_service


def initialize_game_service(store: KeyValueStore, **kwargs) -> GameService:
    """Initialize the global game service instance."""
    global _game_service
    _game_service = GameService(store, **kwargs)
    return _game_service
