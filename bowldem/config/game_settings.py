"""
Game Configuration Constants Module

This module defines the game rules and loads the immutable reference data
(player directory and puzzle list) shipped as JSON next to this file.
Both are read once at import time and never mutated afterwards.
"""

import json
import os
from collections import Counter
from types import MappingProxyType
from typing import Dict, Final, List, Mapping, Tuple

from ..models.player import Player, PlayerRole, Puzzle, Scorecard

# Core Game Configuration Constants
MAX_GUESSES: Final[int] = 5
"""
Maximum number of guesses allowed per puzzle.
Also the size of the guess distribution histogram in user stats.
"""

EPOCH_DATE: Final[str] = '2026-01-15'
"""
Date of puzzle #0. Puzzle numbers count whole UTC days since this date.
"""

PLAYER_ROLES: Final[Tuple[str, ...]] = tuple(role.value for role in PlayerRole)

DATA_DIR: Final[str] = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'data')


def _read_json(file_name: str, root_key: str) -> list:
    json_file_path = os.path.join(DATA_DIR, file_name)

    try:
        with open(json_file_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Reference data file not found: {json_file_path}")

    if not isinstance(data, dict) or not isinstance(data.get(root_key), list):
        raise ValueError(f"{file_name} must contain an object with a '{root_key}' array")

    return data[root_key]


def load_players(file_name: str = 'players.json') -> Mapping[str, Player]:
    """
    Load the player directory keyed by player id.

    Returns:
        Read-only mapping of player id to Player

    Raises:
        FileNotFoundError: If the data file is missing
        ValueError: If a record is malformed or uses an unknown role
    """
    players: Dict[str, Player] = {}

    for index, record in enumerate(_read_json(file_name, 'players')):
        try:
            player = Player(
                id=record['id'],
                full_name=record['full_name'],
                country=record['country'],
                role=record['role'],
            )
        except (KeyError, TypeError) as e:
            raise ValueError(f"Player at index {index} is missing field {e}")

        if player.role not in PLAYER_ROLES:
            raise ValueError(f"Player '{player.id}' has unknown role '{player.role}'")
        if player.id in players:
            raise ValueError(f"Duplicate player id '{player.id}'")

        players[player.id] = player

    return MappingProxyType(players)


def load_puzzles(file_name: str = 'puzzles.json') -> Tuple[Puzzle, ...]:
    """
    Load the ordered puzzle list. An empty list is allowed here and only
    fails when a puzzle is requested.

    Raises:
        FileNotFoundError: If the data file is missing
        ValueError: If a record is malformed
    """
    puzzles: List[Puzzle] = []

    for index, record in enumerate(_read_json(file_name, 'puzzles')):
        try:
            match_data = record['match_data']
            card = match_data['scorecard']
            puzzle = Puzzle(
                id=int(record['id']),
                target_player=record['target_player'],
                scorecard=Scorecard(
                    venue=card['venue'],
                    team1_name=card['team1_name'],
                    team2_name=card['team2_name'],
                    team1_score=card['team1_score'],
                    team2_score=card['team2_score'],
                    result=card['result'],
                ),
                players_in_match=frozenset(match_data.get('players_in_match', [])),
                target_player_team=match_data['target_player_team'],
                target_player_role=match_data['target_player_role'],
                cricinfo_url=record.get('cricinfo_url'),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Puzzle at index {index} is malformed: {e}")

        puzzles.append(puzzle)

    return tuple(puzzles)


# Reference data loaded once per process
PLAYERS: Final[Mapping[str, Player]] = load_players()
PUZZLES: Final[Tuple[Puzzle, ...]] = load_puzzles()


def validate_puzzle_integrity(players: Mapping[str, Player] = PLAYERS,
                              puzzles: Tuple[Puzzle, ...] = PUZZLES) -> bool:
    """
    Validates the consistency between the puzzle list and the player directory.

    This function performs validation to ensure:
    1. Puzzle ids are unique
    2. Every target player exists in the player directory
    3. Every target player is in the match's participant set
    4. The denormalized target team and role agree with the directory

    Returns:
        bool: True if all checks pass

    Raises:
        ValueError: If any validation check fails with detailed error message
    """
    ids = [puzzle.id for puzzle in puzzles]
    if len(ids) != len(set(ids)):
        duplicates = sorted(pid for pid, count in Counter(ids).items() if count > 1)
        raise ValueError(f"Duplicate puzzle ids found: {duplicates}")

    for puzzle in puzzles:
        target = players.get(puzzle.target_player)
        if target is None:
            raise ValueError(f"Puzzle {puzzle.id} target '{puzzle.target_player}' is not a known player")

        if puzzle.target_player not in puzzle.players_in_match:
            raise ValueError(f"Puzzle {puzzle.id} target '{puzzle.target_player}' did not play in the match")

        if target.country != puzzle.target_player_team:
            raise ValueError(
                f"Puzzle {puzzle.id} target team '{puzzle.target_player_team}' "
                f"does not match player country '{target.country}'"
            )

        if target.role != puzzle.target_player_role:
            raise ValueError(
                f"Puzzle {puzzle.id} target role '{puzzle.target_player_role}' "
                f"does not match player role '{target.role}'"
            )

        unknown = sorted(pid for pid in puzzle.players_in_match if pid not in players)
        if unknown:
            raise ValueError(f"Puzzle {puzzle.id} lists unknown players: {unknown}")

    return True


def get_puzzle_statistics(players: Mapping[str, Player] = PLAYERS,
                          puzzles: Tuple[Puzzle, ...] = PUZZLES) -> dict:
    """
    Summarises the reference data.

    Returns:
        dict: Statistical analysis including:
            - total_players / total_puzzles
            - active_players: players appearing in at least one puzzle
            - role_breakdown: player count per role
            - target_roles: how often each role is the answer
    """
    active = set()
    for puzzle in puzzles:
        active.update(puzzle.players_in_match)

    return {
        "total_players": len(players),
        "total_puzzles": len(puzzles),
        "active_players": len(active & set(players)),
        "role_breakdown": dict(Counter(player.role for player in players.values())),
        "target_roles": dict(Counter(puzzle.target_player_role for puzzle in puzzles)),
    }


if __name__ == "__main__":

    try:
        validate_puzzle_integrity()
        print(" Puzzle data validation passed")

        print(f" Reference data statistics: {get_puzzle_statistics()}")
    except ValueError as config_error:
        print(f" Configuration validation failed: {config_error}")
        exit(1)
