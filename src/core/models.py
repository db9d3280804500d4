from typing import Optional

TOURNAMENT_STATUSES = ('registration_open', 'registration_closed', 'in_progress', 'completed', 'cancelled')


class Participant:
    def __init__(self, participant_id, player_id, rating=None, registered_at=None, seed=None):
        self.participant_id = participant_id
        self.player_id = player_id
        self.rating = rating  # None until the player has a rating
        self.registered_at = registered_at
        self.seed = seed

    @classmethod
    def from_dict(cls, data: dict) -> 'Participant':
        return cls(
            participant_id=data['participant_id'],
            player_id=data['player_id'],
            rating=data.get('rating'),
            registered_at=data.get('registered_at'),
            seed=data.get('seed'),
        )

    def __repr__(self):
        return f"Participant(participant_id={self.participant_id}, player_id={self.player_id}, rating={self.rating})"


class Tournament:
    def __init__(self, id, status, format, start_date, name=None):
        self.id = id
        self.status = status
        self.format = format
        self.start_date = start_date
        self.name = name

    @classmethod
    def from_dict(cls, data: dict) -> 'Tournament':
        return cls(
            id=data['id'],
            status=data.get('status'),
            format=data.get('format'),
            start_date=data.get('start_date'),
            name=data.get('name'),
        )

    def __repr__(self):
        return f"Tournament(id={self.id}, status={self.status}, format={self.format})"


class Match:
    def __init__(self, tournament_id, player1_id, player2_id, round, match_number,
                 status='pending', date=None, location=None, slot_index=None):
        self.tournament_id = tournament_id
        self.player1_id = player1_id
        self.player2_id = player2_id  # None marks a bye
        self.round = round
        self.match_number = match_number
        self.status = status
        self.date = date
        self.location = location
        self.slot_index = slot_index  # first-round slot pair, elimination only

    def to_dict(self) -> dict:
        """Row shape used for the batch insert."""
        return {
            'tournament_id': self.tournament_id,
            'player1_id': self.player1_id,
            'player2_id': self.player2_id,
            'status': self.status,
            'date': self.date,
            'location': self.location,
            'round': self.round,
            'match_number': self.match_number,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Match':
        return cls(
            tournament_id=data['tournament_id'],
            player1_id=data.get('player1_id'),
            player2_id=data.get('player2_id'),
            round=data.get('round', 1),
            match_number=data['match_number'],
            status=data.get('status', 'pending'),
            date=data.get('date'),
            location=data.get('location'),
        )

    def __repr__(self):
        return (f"Match(match_number={self.match_number}, round={self.round}, "
                f"player1_id={self.player1_id}, player2_id={self.player2_id})")


class SeedAssignment:
    def __init__(self, participant: Participant, seed: int):
        self.participant = participant
        self.seed = seed

    def to_dict(self) -> dict:
        return {'participant_id': self.participant.participant_id, 'seed': self.seed}

    def __repr__(self):
        return f"SeedAssignment(seed={self.seed}, participant={self.participant.participant_id})"


class SlotPair:
    """Outcome of pairing two adjacent first-round bracket slots.

    kind is one of:
    - 'match': both slots hold a participant
    - 'bye':   exactly one slot holds a participant
    - 'empty': neither slot holds a participant
    """
    MATCH = 'match'
    BYE = 'bye'
    EMPTY = 'empty'

    def __init__(self, index: int, seeds: tuple, participants: tuple):
        self.index = index
        self.seeds = seeds
        self.participants = participants

    @property
    def kind(self) -> str:
        present = [p for p in self.participants if p is not None]
        if len(present) == 2:
            return self.MATCH
        if len(present) == 1:
            return self.BYE
        return self.EMPTY

    @property
    def advancing(self) -> Optional[Participant]:
        """The participant who would walk over, for bye pairs."""
        if self.kind != self.BYE:
            return None
        return next(p for p in self.participants if p is not None)

    def __repr__(self):
        return f"SlotPair(index={self.index}, seeds={self.seeds}, kind={self.kind})"
