"""
Unit tests for the MatchScheduler.
"""
import pytest
import datetime
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from conftest import make_participants
from core.errors import ValidationError
from core.formats import RoundRobin, SingleElimination
from core.models import Match
from core.scheduling import MatchScheduler, format_match_date, parse_start_date

START = "2026-05-01T09:00:00Z"


def numbered_matches(count):
    return [Match("t1", f"a{i}", f"b{i}", round=1, match_number=i) for i in range(1, count + 1)]


class TestStartDate:
    """Tests for start date parsing and formatting."""

    def test_parse_zulu_string(self):
        dt = parse_start_date("2026-05-01T09:00:00Z")
        assert dt == datetime.datetime(2026, 5, 1, 9, 0, tzinfo=datetime.timezone.utc)

    def test_parse_offset_string_converts_to_utc(self):
        dt = parse_start_date("2026-05-01T11:00:00+02:00")
        assert dt == datetime.datetime(2026, 5, 1, 9, 0, tzinfo=datetime.timezone.utc)
        assert dt.tzinfo == datetime.timezone.utc

    def test_parse_naive_is_utc(self):
        dt = parse_start_date(datetime.datetime(2026, 5, 1, 9, 0))
        assert dt.tzinfo == datetime.timezone.utc

    def test_parse_plain_date(self):
        dt = parse_start_date(datetime.date(2026, 5, 1))
        assert dt == datetime.datetime(2026, 5, 1, 0, 0, tzinfo=datetime.timezone.utc)

    @pytest.mark.parametrize("value", [None, "", "next tuesday"])
    def test_invalid_start_date(self, value):
        with pytest.raises(ValidationError):
            parse_start_date(value)

    def test_format_match_date(self):
        dt = datetime.datetime(2026, 5, 1, 9, 30, 15, 123456, tzinfo=datetime.timezone.utc)
        assert format_match_date(dt) == "2026-05-01T09:30:15.123Z"


class TestEliminationSchedule:
    """Tests for elimination first-round staggering."""

    def test_stagger_wraps_every_four_matches(self):
        matches = MatchScheduler(START).schedule(numbered_matches(6), elimination=True)

        assert [m.date for m in matches] == [
            "2026-05-01T09:00:00.000Z",
            "2026-05-01T11:00:00.000Z",
            "2026-05-01T13:00:00.000Z",
            "2026-05-01T15:00:00.000Z",
            "2026-05-01T09:00:00.000Z",
            "2026-05-01T11:00:00.000Z",
        ]

    def test_default_venue(self):
        matches = MatchScheduler(START).schedule(numbered_matches(3), elimination=True)
        assert all(m.location == "Main Court" for m in matches)

    def test_custom_settings(self):
        scheduler = MatchScheduler(START, {'slot_hours': 1, 'matches_per_slot': 2,
                                           'default_location': 'Centre Court'})
        matches = scheduler.schedule(numbered_matches(3), elimination=True)
        assert [m.date[11:16] for m in matches] == ["09:00", "10:00", "09:00"]
        assert matches[0].location == "Centre Court"

    def test_generated_bracket(self, eight_participants):
        matches = SingleElimination().generate_matches(eight_participants, "t1")
        MatchScheduler(START).schedule(matches, elimination=True)
        assert all(m.date is not None for m in matches)

    def test_bye_slots_keep_their_time(self):
        # Three players: the first slot pair is a bye, so the only match is in the second slot
        matches = SingleElimination().generate_matches(make_participants([1500, 1400, 1300]), "t1")
        MatchScheduler(START).schedule(matches, elimination=True)
        assert [m.date for m in matches] == ["2026-05-01T11:00:00.000Z"]

    def test_standard_draw_with_byes(self):
        participants = make_participants([1500, 1400, 1300, 1200, 1100])
        matches = SingleElimination(seeding_mode='standard').generate_matches(participants, "t1")
        MatchScheduler(START).schedule(matches, elimination=True)

        assert [m.slot_index for m in matches] == [1]
        assert [m.date for m in matches] == ["2026-05-01T11:00:00.000Z"]


class TestRoundRobinSchedule:
    """Tests for round robin staggering across slots, days and courts."""

    def test_slots_and_days(self):
        matches = MatchScheduler(START).schedule(numbered_matches(10), elimination=False)
        times = [m.date for m in matches]

        # Four matches per two-hour slot
        assert times[0:4] == ["2026-05-01T09:00:00.000Z"] * 4
        assert times[4:8] == ["2026-05-01T11:00:00.000Z"] * 4
        # Eight per day; the slot offset keeps counting
        assert times[8:10] == ["2026-05-02T13:00:00.000Z"] * 2

    def test_courts_cycle(self):
        matches = MatchScheduler(START).schedule(numbered_matches(6), elimination=False)
        assert [m.location for m in matches] == [
            "Court 2", "Court 3", "Court 1", "Court 2", "Court 3", "Court 1",
        ]

    def test_uses_match_number_not_position(self):
        match = Match("t1", "a", "b", round=1, match_number=9)
        MatchScheduler(START).schedule([match], elimination=False)
        assert match.date == "2026-05-02T13:00:00.000Z"
        assert match.location == "Court 1"

    def test_generated_round_robin(self):
        participants = make_participants([1500, 1400, 1300, 1200, 1100])
        matches = RoundRobin().generate_matches(participants, "t1")
        MatchScheduler(START).schedule(matches, elimination=False)
        assert len({m.location for m in matches}) == 3

    def test_late_slots_roll_past_midnight(self):
        # Slot 8 adds 16 hours on top of 4 whole days
        match = Match("t1", "a", "b", round=1, match_number=33)
        MatchScheduler(START).schedule([match], elimination=False)
        assert match.date == "2026-05-06T01:00:00.000Z"
        assert match.location == "Court 1"
