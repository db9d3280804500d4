"""
Bracket generation for a tournament whose registration has closed.

A run moves through these states, in order:

    validating -> seeding -> generating_matches -> scheduling -> persisting -> completed

and ends in 'failed' if any step raises. Records are read from and written
to a BracketRepository; the service itself keeps nothing between runs
except the state history of the last one.
"""
import contextlib
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import List

from .errors import BracketError, NotFoundError, PersistenceError, ValidationError
from .elimination import calculate_bracket_size, calculate_byes, calculate_total_rounds, get_round_name
from .formats import get_format
from .models import Match, SeedAssignment
from .scheduling import MatchScheduler
from .seeding import DEFAULT_RATING, seed_participants, seeded_roster

logger = logging.getLogger(__name__)

VALIDATING = 'validating'
SEEDING = 'seeding'
GENERATING_MATCHES = 'generating_matches'
SCHEDULING = 'scheduling'
PERSISTING = 'persisting'
COMPLETED = 'completed'
FAILED = 'failed'

REQUIRED_STATUS = 'registration_closed'
STARTED_STATUS = 'in_progress'


def _check_status(status):
    if status != REQUIRED_STATUS:
        raise ValidationError(
            f"Tournament must be in '{REQUIRED_STATUS}' status to generate brackets. "
            f"Current status: {status}"
        )


class BracketRepository:
    """Storage the service reads tournaments from and writes matches to."""

    def get_tournament(self, tournament_id):
        """Return the Tournament, or None if there is no such tournament."""
        raise NotImplementedError

    def list_participants(self, tournament_id):
        raise NotImplementedError

    def update_participant_seed(self, participant_id, seed):
        raise NotImplementedError

    def list_matches(self, tournament_id):
        raise NotImplementedError

    def insert_matches(self, matches):
        raise NotImplementedError

    def update_tournament_status(self, tournament_id, status):
        raise NotImplementedError

    def transaction(self):
        """Group the match insert and status update. No-op unless the store supports it."""
        return contextlib.nullcontext()


class GenerationResult:
    def __init__(self, matches_created: int, tournament_status: str, matches: List[Match], resumed=False):
        self.matches_created = matches_created
        self.tournament_status = tournament_status
        self.matches = matches
        self.resumed = resumed

    def to_dict(self) -> dict:
        return {
            'matchesCreated': self.matches_created,
            'tournamentStatus': self.tournament_status,
        }

    def __repr__(self):
        return f"GenerationResult(matches_created={self.matches_created}, tournament_status={self.tournament_status})"


class BracketGenerationService:
    def __init__(self, repository: BracketRepository, settings=None):
        self.repository = repository
        self.settings = settings or {}
        self.state = None
        self.history = []

    def _enter(self, state):
        logger.debug(f'Bracket generation: {self.state} -> {state}')
        self.state = state
        self.history.append(state)

    def generate(self, tournament_id) -> GenerationResult:
        self.state = None
        self.history = []
        try:
            return self._run(tournament_id)
        except BracketError as e:
            self._enter(FAILED)
            logger.warning(f'Bracket generation failed for tournament {tournament_id}: {e.message}')
            raise
        except Exception:
            self._enter(FAILED)
            logger.exception(f'Unexpected error generating bracket for tournament {tournament_id}')
            raise

    def _run(self, tournament_id) -> GenerationResult:
        self._enter(VALIDATING)
        if not tournament_id:
            raise ValidationError('Tournament ID is required')

        try:
            tournament = self.repository.get_tournament(tournament_id)
        except PersistenceError as e:
            logger.error(f'Failed to fetch tournament {tournament_id}: {e.message}')
            raise NotFoundError('Tournament not found') from e
        if tournament is None:
            raise NotFoundError('Tournament not found')

        _check_status(tournament.status)

        try:
            participants = self.repository.list_participants(tournament_id)
        except Exception as e:
            logger.error(f'Failed to fetch participants for tournament {tournament_id}: {e}')
            raise PersistenceError('Failed to fetch tournament participants') from e

        if not participants or len(participants) < 2:
            raise ValidationError('Tournament needs at least 2 participants')

        strategy = get_format(tournament.format, self.settings.get('seeding_mode', 'simplified'))

        self._enter(SEEDING)
        assignments = seed_participants(participants, self.settings.get('default_rating', DEFAULT_RATING))
        roster = seeded_roster(assignments)

        self._enter(GENERATING_MATCHES)
        matches = strategy.generate_matches(roster, tournament.id)
        logger.info(f'Generated {len(matches)} {strategy.name} matches for {len(roster)} participants')
        if strategy.elimination:
            bracket_size = calculate_bracket_size(len(roster))
            logger.info(f'Opening round is the {get_round_name(bracket_size)} with '
                        f'{calculate_byes(len(roster))} byes, '
                        f'{calculate_total_rounds(len(roster))} rounds in total')

        self._enter(SCHEDULING)
        MatchScheduler(tournament.start_date, self.settings).schedule(matches, strategy.elimination)

        self._enter(PERSISTING)
        self._write_seeds(assignments)
        result = self._commit(tournament.id, matches)

        self._enter(COMPLETED)
        logger.info(f'Tournament {tournament.id} is now {result.tournament_status} '
                    f'with {result.matches_created} matches')
        return result

    def _write_seeds(self, assignments: List[SeedAssignment]):
        """
        Write every seed number. Each update is attempted even if others
        fail; failures are logged and the run carries on.
        """
        if not assignments:
            return
        workers = max(1, min(self.settings.get('seed_update_workers', 4), len(assignments)))
        failures = []
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {
                executor.submit(self.repository.update_participant_seed,
                                a.participant.participant_id, a.seed): a
                for a in assignments
            }
            for future in as_completed(futures):
                assignment = futures[future]
                try:
                    future.result()
                except Exception as e:
                    failures.append(assignment)
                    logger.warning(f'Failed to update seed for participant '
                                   f'{assignment.participant.participant_id}: {e}')
        if failures:
            logger.warning(f'{len(failures)} of {len(assignments)} seed updates failed')

    def _commit(self, tournament_id, matches: List[Match]) -> GenerationResult:
        guard = self.settings.get('guard_existing_matches', True)
        with self.repository.transaction():
            # Another run may have started the tournament since validation
            current = self.repository.get_tournament(tournament_id)
            _check_status(current.status if current is not None else None)

            existing = []
            if guard:
                try:
                    existing = self.repository.list_matches(tournament_id)
                except Exception as e:
                    logger.error(f'Failed to read matches for tournament {tournament_id}: {e}')
                    raise PersistenceError('Failed to create tournament matches') from e

            if existing:
                # An earlier run inserted matches but never started the tournament
                logger.warning(f'Tournament {tournament_id} already has {len(existing)} matches; '
                               f'keeping them and only updating status')
            elif matches:
                try:
                    self.repository.insert_matches(matches)
                except Exception as e:
                    logger.error(f'Failed to insert matches for tournament {tournament_id}: {e}')
                    raise PersistenceError('Failed to create tournament matches') from e

            try:
                self.repository.update_tournament_status(tournament_id, STARTED_STATUS)
            except Exception as e:
                logger.error(f'Failed to update status of tournament {tournament_id}: {e}')
                raise PersistenceError('Failed to update tournament status') from e

        if existing:
            return GenerationResult(len(existing), STARTED_STATUS, existing, resumed=True)
        return GenerationResult(len(matches), STARTED_STATUS, matches)
