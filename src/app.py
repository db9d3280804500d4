"""
Flask web application for bracket generation.
"""
import logging
from datetime import datetime, timezone
from flask import Flask, jsonify, request

from config import DATA_DIR, load_settings
from core.bracket_service import BracketGenerationService
from core.errors import BracketError
from store import TournamentStore

app = Flask(__name__)
app.config['DATA_DIR'] = DATA_DIR

VERSION = '1.0.0'

CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Headers': 'Content-Type,X-Amz-Date,Authorization,X-Api-Key,X-Amz-Security-Token',
    'Access-Control-Allow-Methods': 'OPTIONS,GET,POST',
}


@app.after_request
def add_cors_headers(response):
    for header, value in CORS_HEADERS.items():
        response.headers[header] = value
    return response


def get_settings():
    return load_settings(app.config['DATA_DIR'])


def get_store(settings=None):
    """Return the tournament store for the configured data directory."""
    settings = settings or get_settings()
    return TournamentStore(app.config['DATA_DIR'], lock_timeout=settings['lock_timeout_seconds'])


def error_response(message, status_code):
    return jsonify({'success': False, 'error': message}), status_code


@app.route('/tournaments/<tournament_id>/generate-bracket', methods=['POST', 'OPTIONS'])
def api_generate_bracket(tournament_id):
    """Seed the roster, draw and schedule the first round, and start the tournament."""
    if request.method == 'OPTIONS':
        return '', 200

    try:
        settings = get_settings()
        service = BracketGenerationService(get_store(settings), settings)
        result = service.generate(tournament_id.strip())
    except BracketError as e:
        return error_response(e.message, e.status_code)
    except Exception as e:
        app.logger.error(f'Unexpected error generating bracket for {tournament_id}: {e}')
        return error_response('An unexpected error occurred', 500)

    app.logger.info(f'Bracket generated for {tournament_id}: {result.matches_created} matches')
    return jsonify({'success': True, 'data': result.to_dict()})


@app.route('/tournaments/<tournament_id>/matches', methods=['GET', 'OPTIONS'])
def api_tournament_matches(tournament_id):
    """List a tournament's matches in match number order."""
    if request.method == 'OPTIONS':
        return '', 200

    try:
        store = get_store()
        if store.get_tournament(tournament_id) is None:
            return error_response('Tournament not found', 404)
        matches = store.list_match_rows(tournament_id)
    except BracketError as e:
        return error_response(e.message, e.status_code)
    except Exception as e:
        app.logger.error(f'Unexpected error listing matches for {tournament_id}: {e}')
        return error_response('An unexpected error occurred', 500)

    return jsonify({'success': True, 'data': matches})


@app.route('/health', methods=['GET', 'OPTIONS'])
def health():
    if request.method == 'OPTIONS':
        return '', 200
    return jsonify({
        'status': 'healthy',
        'timestamp': datetime.now(timezone.utc).isoformat(),
        'version': VERSION,
    })


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    app.run(debug=True, port=5000)
