# tests/test_puzzle_service.py

import datetime

import pytest

from bowldem.errors import PuzzleNotFoundError
from bowldem.services.puzzle_service import (
    format_countdown, get_puzzle_index, get_puzzle_number, get_today_utc,
    resolve_puzzle, seconds_until_next_puzzle
)

UTC = datetime.timezone.utc


class TestPuzzleSelection:

    def test_known_date_resolves_expected_puzzle(self, puzzles):
        puzzle, number, index = resolve_puzzle(puzzles, '2026-01-17', '2026-01-15')
        assert number == 2
        assert index == 2
        assert puzzle.id == 3

    def test_epoch_day_is_puzzle_zero(self, puzzles):
        puzzle, number, index = resolve_puzzle(puzzles, '2026-01-15', '2026-01-15')
        assert (number, index, puzzle.id) == (0, 0, 1)

    def test_dates_before_epoch_collapse_to_zero(self, puzzles):
        assert get_puzzle_number('2025-12-31', '2026-01-15') == 0
        puzzle, number, _ = resolve_puzzle(puzzles, '2020-06-01', '2026-01-15')
        assert number == 0
        assert puzzle.id == 1

    def test_list_cycles_with_its_length(self, puzzles):
        for offset in range(10):
            start = datetime.date(2026, 1, 15) + datetime.timedelta(days=offset)
            later = start + datetime.timedelta(days=len(puzzles))
            first = resolve_puzzle(puzzles, start, '2026-01-15')
            second = resolve_puzzle(puzzles, later, '2026-01-15')
            assert first[0] == second[0]
            assert first[2] == second[2]
            assert second[1] == first[1] + len(puzzles)

    def test_same_utc_day_gives_same_puzzle(self, puzzles):
        morning = datetime.datetime(2026, 2, 3, 0, 0, 1, tzinfo=UTC)
        night = datetime.datetime(2026, 2, 3, 23, 59, 59, tzinfo=UTC)
        # 2026-02-04 01:30 at UTC+05:30 is still 2026-02-03 in UTC
        offset = datetime.datetime(2026, 2, 4, 1, 30, tzinfo=datetime.timezone(datetime.timedelta(hours=5, minutes=30)))

        expected = resolve_puzzle(puzzles, '2026-02-03', '2026-01-15')
        for moment in (morning, night, offset):
            assert resolve_puzzle(puzzles, moment, '2026-01-15') == expected

    def test_empty_puzzle_list_raises(self):
        with pytest.raises(PuzzleNotFoundError):
            resolve_puzzle((), '2026-02-01', '2026-01-15')

    def test_index_requires_positive_total(self):
        with pytest.raises(PuzzleNotFoundError):
            get_puzzle_index(4, 0)

    def test_today_utc_uses_utc_calendar(self):
        late = datetime.datetime(2026, 3, 1, 20, 0, tzinfo=datetime.timezone(datetime.timedelta(hours=-8)))
        assert get_today_utc(late) == '2026-03-02'


class TestCountdown:

    def test_seconds_until_midnight(self):
        now = datetime.datetime(2026, 2, 1, 23, 0, 0, tzinfo=UTC)
        assert seconds_until_next_puzzle(now) == 3600

    def test_naive_datetime_treated_as_utc(self):
        now = datetime.datetime(2026, 2, 1, 0, 0, 0)
        assert seconds_until_next_puzzle(now) == 86400

    def test_format_countdown(self):
        assert format_countdown(3661) == '01:01:01'
        assert format_countdown(0) == '00:00:00'
        assert format_countdown(-5) == '00:00:00'
        assert format_countdown(86399) == '23:59:59'
