"""
Rating-based seeding of a tournament roster.
"""
from typing import List

from .models import Participant, SeedAssignment

DEFAULT_RATING = 1200


def effective_rating(participant: Participant, default_rating: float = DEFAULT_RATING) -> float:
    """Rating used for seeding; players without one sit at the floor."""
    if participant.rating is None:
        return default_rating
    return participant.rating


def seed_participants(participants: List[Participant], default_rating: float = DEFAULT_RATING) -> List[SeedAssignment]:
    """
    Order participants by rating, highest first, and number them from 1.

    sorted() is stable, so equal ratings keep the order the roster was
    fetched in.
    """
    ordered = sorted(
        participants,
        key=lambda p: effective_rating(p, default_rating),
        reverse=True,
    )
    return [SeedAssignment(participant, seed) for seed, participant in enumerate(ordered, start=1)]


def seeded_roster(assignments: List[SeedAssignment]) -> List[Participant]:
    return [a.participant for a in sorted(assignments, key=lambda a: a.seed)]
