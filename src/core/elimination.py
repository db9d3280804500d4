"""
Single elimination bracket sizing, slot ordering and first-round pairing.
"""
import math
from typing import List, Optional

from .models import Participant, SlotPair

SEEDING_MODES = ('simplified', 'standard')


def get_round_name(teams_in_round: int) -> str:
    """Get the name of a round based on number of players left."""
    if teams_in_round == 2:
        return "Final"
    elif teams_in_round == 4:
        return "Semifinal"
    elif teams_in_round == 8:
        return "Quarterfinal"
    else:
        return f"Round of {teams_in_round}"


def calculate_bracket_size(num_players: int) -> int:
    """Calculate the bracket size (next power of 2)."""
    if num_players <= 0:
        return 0
    return 2 ** math.ceil(math.log2(num_players))


def calculate_byes(num_players: int) -> int:
    """Calculate number of byes needed."""
    return calculate_bracket_size(num_players) - num_players


def calculate_total_rounds(num_players: int) -> int:
    bracket_size = calculate_bracket_size(num_players)
    if bracket_size < 2:
        return 0
    return int(math.log2(bracket_size))


def generate_seeded_positions(bracket_size: int) -> List[int]:
    """
    Seed rank held by each slot of a bracket, simplified placement.

    Seed 1 takes the first slot and seed 2 the last. Seeds 3 and 4 sit either
    side of the middle (seed 4 just above it, seed 3 just below). Every other
    slot is filled top to bottom with seeds 5, 6, 7, ...

    For 4 slots: [1, 4, 3, 2]
    For 8 slots: [1, 5, 6, 4, 3, 7, 8, 2]

    Only the top four seeds are kept apart; use generate_standard_positions
    when lower seeds must be spread as well.
    """
    if bracket_size <= 1:
        return [1]

    positions = [0] * bracket_size
    positions[0] = 1
    positions[bracket_size - 1] = 2

    if bracket_size <= 2:
        return positions

    half = bracket_size // 2
    positions[half] = 3
    positions[half - 1] = 4

    next_seed = 5
    for i in range(bracket_size):
        if positions[i] == 0:
            positions[i] = next_seed
            next_seed += 1

    return positions


def generate_standard_positions(bracket_size: int) -> List[int]:
    """
    Generate the standard tournament bracket order.
    This ensures that if all higher seeds win, they meet in the proper rounds.

    For 8 players: [1, 8, 4, 5, 2, 7, 3, 6]
    This gives matchups: 1v8, 4v5, 2v7, 3v6
    """
    if bracket_size <= 1:
        return [1]
    if bracket_size == 2:
        return [1, 2]

    upper_half = generate_standard_positions(bracket_size // 2)
    lower_half = [bracket_size + 1 - seed for seed in upper_half]

    # Pair each upper seed with its complement
    result = []
    for u, l in zip(upper_half, lower_half):
        result.extend([u, l])

    return result


def bracket_positions(bracket_size: int, mode: str = 'simplified') -> List[int]:
    if mode == 'simplified':
        return generate_seeded_positions(bracket_size)
    if mode == 'standard':
        return generate_standard_positions(bracket_size)
    raise ValueError(f"Unknown seeding mode: {mode}")


def pair_slots(participants: List[Participant], mode: str = 'simplified') -> List[SlotPair]:
    """
    Pair adjacent bracket slots for the first round.

    participants must already be in seed order (index 0 is seed 1). A slot
    whose seed rank is above the number of participants is a bye.
    """
    num_players = len(participants)
    bracket_size = calculate_bracket_size(num_players)
    if bracket_size < 2:
        return []

    positions = bracket_positions(bracket_size, mode)

    def occupant(seed: int) -> Optional[Participant]:
        return participants[seed - 1] if seed <= num_players else None

    pairs = []
    for i in range(bracket_size // 2):
        seed1 = positions[i * 2]
        seed2 = positions[i * 2 + 1]
        pairs.append(SlotPair(
            index=i,
            seeds=(seed1, seed2),
            participants=(occupant(seed1), occupant(seed2)),
        ))
    return pairs
