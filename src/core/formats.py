"""
Tournament formats: turn a seeded roster into the initial list of matches.
"""
from itertools import combinations
from typing import List

from .elimination import pair_slots
from .errors import ValidationError
from .models import Match, Participant, SlotPair

MIN_PARTICIPANTS = 2


class TournamentFormat:
    name = None
    elimination = False

    def _check_participants(self, participants):
        if len(participants) < MIN_PARTICIPANTS:
            raise ValidationError(f'Tournament needs at least {MIN_PARTICIPANTS} participants')

    def generate_matches(self, participants: List[Participant], tournament_id) -> List[Match]:
        raise NotImplementedError


class SingleElimination(TournamentFormat):
    name = 'single_elimination'
    elimination = True

    def __init__(self, seeding_mode='simplified'):
        self.seeding_mode = seeding_mode

    def slot_pairs(self, participants: List[Participant]) -> List[SlotPair]:
        self._check_participants(participants)
        return pair_slots(participants, self.seeding_mode)

    def generate_matches(self, participants, tournament_id):
        matches = []
        match_number = 1
        for pair in self.slot_pairs(participants):
            # Byes are not turned into walkovers here; the lone player
            # is placed when the second round is drawn.
            if pair.kind != SlotPair.MATCH:
                continue
            player1, player2 = pair.participants
            matches.append(Match(
                tournament_id=tournament_id,
                player1_id=player1.player_id,
                player2_id=player2.player_id,
                round=1,
                match_number=match_number,
                slot_index=pair.index,
            ))
            match_number += 1
        return matches


class DoubleElimination(SingleElimination):
    """
    Winners bracket first round only.

    No losers bracket is drawn yet, so this produces exactly what
    SingleElimination does.
    """
    name = 'double_elimination'


class RoundRobin(TournamentFormat):
    name = 'round_robin'

    def generate_matches(self, participants, tournament_id):
        self._check_participants(participants)
        matches = []
        # Every pairing counts as round 1 in round robin
        for match_number, (player1, player2) in enumerate(combinations(participants, 2), start=1):
            matches.append(Match(
                tournament_id=tournament_id,
                player1_id=player1.player_id,
                player2_id=player2.player_id,
                round=1,
                match_number=match_number,
            ))
        return matches


FORMATS = {
    SingleElimination.name: SingleElimination,
    DoubleElimination.name: DoubleElimination,
    RoundRobin.name: RoundRobin,
}


def get_format(name: str, seeding_mode: str = 'simplified') -> TournamentFormat:
    """Look up the format strategy for a tournament's format string."""
    format_class = FORMATS.get(name)
    if format_class is None:
        raise ValidationError(f'Unsupported tournament format: {name}')
    if format_class.elimination:
        return format_class(seeding_mode=seeding_mode)
    return format_class()
