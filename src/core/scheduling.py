"""
Date and court assignment for generated matches.

This is a fixed stagger from the tournament start, not an allocator: it
does not look at real court availability or player rest time.
"""
import datetime
import logging
from typing import List

from .errors import ValidationError
from .models import Match

logger = logging.getLogger(__name__)

DEFAULT_SCHEDULE_SETTINGS = {
    'slot_hours': 2,
    'matches_per_slot': 4,
    'matches_per_day': 8,
    'court_count': 3,
    'default_location': 'Main Court',
}


def parse_start_date(value) -> datetime.datetime:
    """Accept an ISO-8601 string, a date or a datetime and return an aware UTC datetime."""
    if isinstance(value, datetime.datetime):
        start = value
    elif isinstance(value, datetime.date):
        start = datetime.datetime.combine(value, datetime.time())
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        try:
            start = datetime.datetime.fromisoformat(text)
        except ValueError:
            raise ValidationError(f'Invalid tournament start date: {value}')
    else:
        raise ValidationError('Tournament start date is required')

    if start.tzinfo is None:
        return start.replace(tzinfo=datetime.timezone.utc)
    return start.astimezone(datetime.timezone.utc)


def format_match_date(dt: datetime.datetime) -> str:
    """ISO-8601 in UTC with millisecond precision, e.g. 2026-05-01T09:00:00.000Z"""
    dt = dt.astimezone(datetime.timezone.utc)
    return dt.strftime('%Y-%m-%dT%H:%M:%S.') + f'{dt.microsecond // 1000:03d}Z'


class MatchScheduler:
    def __init__(self, start_date, settings=None):
        self.start = parse_start_date(start_date)
        self.settings = {**DEFAULT_SCHEDULE_SETTINGS, **(settings or {})}

    def _slot(self) -> datetime.timedelta:
        return datetime.timedelta(hours=self.settings['slot_hours'])

    def elimination_slot(self, index: int):
        """(start time, location) for the first-round match drawn from slot pair index."""
        offset = (index % self.settings['matches_per_slot']) * self._slot()
        return self.start + offset, self.settings['default_location']

    def round_robin_slot(self, match_number: int):
        """
        (start time, location) for a round robin match, by its 1-based number.

        Slot hours and whole days are both added to the start, so slot hours
        that run past midnight carry into the next day.
        """
        index = match_number - 1
        offset = (index // self.settings['matches_per_slot']) * self._slot()
        offset += datetime.timedelta(days=index // self.settings['matches_per_day'])
        court = (match_number % self.settings['court_count']) + 1
        return self.start + offset, f'Court {court}'

    def schedule(self, matches: List[Match], elimination: bool) -> List[Match]:
        """Fill in date and location on each match, in place, and return them."""
        for index, match in enumerate(matches):
            if elimination:
                # Dropped bye pairs still take up their time slot
                slot_index = index if match.slot_index is None else match.slot_index
                when, location = self.elimination_slot(slot_index)
            else:
                when, location = self.round_robin_slot(match.match_number)
            match.date = format_match_date(when)
            match.location = location
        logger.debug(f'Scheduled {len(matches)} matches from {format_match_date(self.start)}')
        return matches
