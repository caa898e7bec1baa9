# tests/conftest.py

import datetime
import os
import tempfile
from types import MappingProxyType

import pytest

# Keep test logs out of the working tree; must run before bowldem is imported
os.environ.setdefault('LOG_DIR', tempfile.mkdtemp(prefix='bowldem-logs-'))

from bowldem import create_app
from bowldem.config import TestingConfig
from bowldem.models import Player, Puzzle, Scorecard
from bowldem.services.game_service import GameService, initialize_game_service
from bowldem.services.identity_service import initialize_identity_service
from bowldem.services.storage_service import KeySpace, MemoryStore

EPOCH = '2026-01-15'


class FakeClock:
    """Callable clock that tests can move forward day by day."""

    def __init__(self, now: datetime.datetime):
        self.now = now

    def __call__(self) -> datetime.datetime:
        return self.now

    def advance_days(self, days: int = 1):
        self.now = self.now + datetime.timedelta(days=days)


def _player(pid, name, country, role):
    return Player(id=pid, full_name=name, country=country, role=role)


@pytest.fixture
def players():
    roster = [
        _player('a1', 'Arjun Mehta', 'India', 'Batsman'),
        _player('a2', 'Dev Rao', 'India', 'Bowler'),
        _player('a3', 'Kiran Shah', 'India', 'Batsman'),
        _player('b1', 'Tom Hale', 'Australia', 'Batsman'),
        _player('b2', 'Liam Ward', 'Australia', 'All-rounder'),
        _player('b3', 'Sam Cole', 'Australia', 'Wicketkeeper'),
        _player('c1', 'Ed Frost', 'England', 'Bowler'),
        _player('c2', 'Max Lane', 'England', 'Batsman'),
        _player('c3', 'Ned Pike', 'England', 'Wicketkeeper'),
    ]
    return MappingProxyType({p.id: p for p in roster})


@pytest.fixture
def puzzles():
    return (
        Puzzle(
            id=1, target_player='a1',
            scorecard=Scorecard('Eden Gardens', 'India', 'Australia', '180/5', '170/9', 'India won by 10 runs'),
            players_in_match=frozenset({'a1', 'a2', 'a3', 'b1', 'b2', 'b3'}),
            target_player_team='India', target_player_role='Batsman',
        ),
        Puzzle(
            id=2, target_player='b2',
            scorecard=Scorecard('MCG', 'Australia', 'India', '150/4', '149/8', 'Australia won by 6 wickets'),
            players_in_match=frozenset({'a1', 'a2', 'b1', 'b2', 'b3'}),
            target_player_team='Australia', target_player_role='All-rounder',
            cricinfo_url='https://example.org/match/2',
        ),
        Puzzle(
            id=3, target_player='c2',
            scorecard=Scorecard("Lord's", 'England', 'India', '160/7', '120', 'England won by 40 runs'),
            players_in_match=frozenset({'c2', 'c3', 'a1', 'a3'}),
            target_player_team='England', target_player_role='Batsman',
        ),
    )


@pytest.fixture
def clock():
    # Epoch day: puzzle #0, the first puzzle (target a1)
    return FakeClock(datetime.datetime(2026, 1, 15, 12, 0, tzinfo=datetime.timezone.utc))


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def game_service(store, players, puzzles, clock):
    return GameService(
        store,
        keys=KeySpace('test'),
        players=players,
        puzzles=puzzles,
        max_guesses=5,
        epoch_date=EPOCH,
        leaderboard_size=20,
        clock=clock,
    )


@pytest.fixture
def app(store, players, puzzles, clock):
    initialize_identity_service(TestingConfig.JWT_SECRET, allow_anonymous=True)
    initialize_game_service(
        store,
        keys=KeySpace('test'),
        players=players,
        puzzles=puzzles,
        max_guesses=5,
        epoch_date=EPOCH,
        clock=clock,
    )
    app, _ = create_app(TestingConfig)
    return app


@pytest.fixture
def client(app):
    return app.test_client()
