"""
Shared pytest fixtures for bracket engine tests.
"""
import pytest
import sys
import os

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from core.models import Participant, Tournament
from store import TournamentStore


def make_participants(ratings):
    """Participants p1..pN for players user1..userN with the given ratings."""
    return [
        Participant(participant_id=f"p{i}", player_id=f"user{i}", rating=rating,
                    registered_at=f"2026-04-{i:02d}T10:00:00Z")
        for i, rating in enumerate(ratings, start=1)
    ]


@pytest.fixture
def five_participants():
    return make_participants([1500, 1400, 1300, 1200, 1100])


@pytest.fixture
def eight_participants():
    return make_participants([1800, 1750, 1700, 1650, 1600, 1550, 1500, 1450])


@pytest.fixture
def temp_data_dir(tmp_path):
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    return str(data_dir)


@pytest.fixture
def store(temp_data_dir):
    return TournamentStore(temp_data_dir, lock_timeout=5)


@pytest.fixture
def closed_tournament(store):
    """A single elimination tournament with four registered players, ready to draw."""
    tournament = Tournament(id="t1", name="Spring Open", status="registration_closed",
                            format="single_elimination", start_date="2026-05-01T09:00:00Z")
    store.add_tournament(tournament)
    for participant in make_participants([1400, 1600, 1500, 1300]):
        store.add_participant("t1", participant)
    return tournament


@pytest.fixture
def client(temp_data_dir):
    """Create a test client backed by a temporary data directory."""
    from app import app
    app.config['TESTING'] = True
    app.config['DATA_DIR'] = temp_data_dir
    with app.test_client() as client:
        yield client
