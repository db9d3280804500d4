"""
YAML-backed tournament store.

Layout of the data directory:

    tournaments.yaml   {tournaments: [{id, name, status, format, start_date}, ...]}
    participants.yaml  {participants: [{participant_id, tournament_id, player_id, rating, registered_at, seed}, ...]}
    matches.yaml       {matches: [{id, tournament_id, player1_id, player2_id, status, date, location, round, match_number}, ...]}

All reads and writes go through one FileLock on <data_dir>/.lock.
"""
import contextlib
import os
import logging
import threading
import uuid
import yaml
from filelock import FileLock, Timeout

from core.bracket_service import BracketRepository
from core.errors import PersistenceError
from core.models import TOURNAMENT_STATUSES, Match, Participant, Tournament

logger = logging.getLogger(__name__)

TOURNAMENTS_FILENAME = 'tournaments.yaml'
PARTICIPANTS_FILENAME = 'participants.yaml'
MATCHES_FILENAME = 'matches.yaml'


class TournamentStore(BracketRepository):
    def __init__(self, data_dir: str, lock_timeout: float = 10):
        self.data_dir = data_dir
        os.makedirs(data_dir, exist_ok=True)
        self._lock = FileLock(os.path.join(data_dir, '.lock'), timeout=lock_timeout)
        self._local = threading.local()

    def _path(self, filename):
        return os.path.join(self.data_dir, filename)

    def _read(self, filename, key):
        path = self._path(filename)
        if not os.path.exists(path):
            return []
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise PersistenceError(f'Failed to parse {path}: {e}') from e
        if not data:
            return []
        return data.get(key) or []

    def _write(self, filename, key, rows):
        try:
            with open(self._path(filename), 'w', encoding='utf-8') as f:
                yaml.dump({key: rows}, f, default_flow_style=False, sort_keys=False)
        except OSError as e:
            raise PersistenceError(f'Failed to write {filename}: {e}') from e

    @contextlib.contextmanager
    def _locked(self):
        try:
            with self._lock:
                yield
        except Timeout as e:
            raise PersistenceError(f'Timed out waiting for {self._lock.lock_file}') from e

    def _pending(self):
        return getattr(self._local, 'pending', None)

    @contextlib.contextmanager
    def transaction(self):
        """
        Buffer match inserts and tournament updates, and write both files
        only if the block finishes without raising.
        """
        if self._pending() is not None:
            raise PersistenceError('Nested transactions are not supported')
        with self._locked():
            self._local.pending = {
                'matches': self._read(MATCHES_FILENAME, 'matches'),
                'tournaments': self._read(TOURNAMENTS_FILENAME, 'tournaments'),
            }
            try:
                yield self
                pending = self._local.pending
                self._write(MATCHES_FILENAME, 'matches', pending['matches'])
                self._write(TOURNAMENTS_FILENAME, 'tournaments', pending['tournaments'])
            except Exception:
                logger.warning('Rolling back tournament store transaction')
                raise
            finally:
                self._local.pending = None

    # Tournaments

    def _tournament_rows(self):
        pending = self._pending()
        if pending is not None:
            return pending['tournaments']
        with self._locked():
            return self._read(TOURNAMENTS_FILENAME, 'tournaments')

    def get_tournament(self, tournament_id):
        for row in self._tournament_rows():
            if str(row.get('id')) == str(tournament_id):
                return Tournament.from_dict(row)
        return None

    def add_tournament(self, tournament: Tournament):
        row = {
            'id': tournament.id,
            'name': tournament.name,
            'status': tournament.status,
            'format': tournament.format,
            'start_date': tournament.start_date,
        }
        with self._locked():
            rows = self._read(TOURNAMENTS_FILENAME, 'tournaments')
            if any(str(r.get('id')) == str(tournament.id) for r in rows):
                raise PersistenceError(f'Tournament {tournament.id} already exists')
            rows.append(row)
            self._write(TOURNAMENTS_FILENAME, 'tournaments', rows)

    def update_tournament_status(self, tournament_id, status):
        pending = self._pending()
        if pending is not None:
            self._set_status(pending['tournaments'], tournament_id, status)
            return
        with self._locked():
            rows = self._read(TOURNAMENTS_FILENAME, 'tournaments')
            self._set_status(rows, tournament_id, status)
            self._write(TOURNAMENTS_FILENAME, 'tournaments', rows)

    @staticmethod
    def _set_status(rows, tournament_id, status):
        if status not in TOURNAMENT_STATUSES:
            raise PersistenceError(f'Unknown tournament status: {status}')
        for row in rows:
            if str(row.get('id')) == str(tournament_id):
                row['status'] = status
                return
        raise PersistenceError(f'Tournament {tournament_id} not found')

    # Participants

    def list_participants(self, tournament_id):
        with self._locked():
            rows = self._read(PARTICIPANTS_FILENAME, 'participants')
        return [Participant.from_dict(r) for r in rows
                if str(r.get('tournament_id')) == str(tournament_id)]

    def add_participant(self, tournament_id, participant: Participant):
        row = {
            'participant_id': participant.participant_id,
            'tournament_id': tournament_id,
            'player_id': participant.player_id,
            'rating': participant.rating,
            'registered_at': participant.registered_at,
            'seed': participant.seed,
        }
        with self._locked():
            rows = self._read(PARTICIPANTS_FILENAME, 'participants')
            rows.append(row)
            self._write(PARTICIPANTS_FILENAME, 'participants', rows)

    def update_participant_seed(self, participant_id, seed):
        with self._locked():
            rows = self._read(PARTICIPANTS_FILENAME, 'participants')
            for row in rows:
                if str(row.get('participant_id')) == str(participant_id):
                    row['seed'] = seed
                    break
            else:
                raise PersistenceError(f'Participant {participant_id} not found')
            self._write(PARTICIPANTS_FILENAME, 'participants', rows)

    # Matches

    def _match_rows(self):
        pending = self._pending()
        if pending is not None:
            return pending['matches']
        with self._locked():
            return self._read(MATCHES_FILENAME, 'matches')

    def list_matches(self, tournament_id):
        rows = [r for r in self._match_rows() if str(r.get('tournament_id')) == str(tournament_id)]
        rows.sort(key=lambda r: r.get('match_number', 0))
        return [Match.from_dict(r) for r in rows]

    def list_match_rows(self, tournament_id):
        """Stored rows including their ids, ordered by match number."""
        rows = [r for r in self._match_rows() if str(r.get('tournament_id')) == str(tournament_id)]
        return sorted(rows, key=lambda r: r.get('match_number', 0))

    def insert_matches(self, matches):
        new_rows = [{'id': uuid.uuid4().hex, **m.to_dict()} for m in matches]
        pending = self._pending()
        if pending is not None:
            pending['matches'].extend(new_rows)
            return
        with self._locked():
            rows = self._read(MATCHES_FILENAME, 'matches')
            rows.extend(new_rows)
            self._write(MATCHES_FILENAME, 'matches', rows)
