"""
Settings for bracket generation, read from settings.yaml in the data directory.
"""
import os
import logging
import yaml

from core.elimination import SEEDING_MODES

logger = logging.getLogger(__name__)

BASE_DIR = os.path.dirname(os.path.dirname(__file__))
DATA_DIR = os.environ.get('BRACKET_DATA_DIR', os.path.join(BASE_DIR, 'data'))
SETTINGS_FILENAME = 'settings.yaml'


def get_default_settings():
    """Return default settings."""
    return {
        'default_rating': 1200,
        'default_location': 'Main Court',
        'court_count': 3,
        'slot_hours': 2,
        'matches_per_slot': 4,
        'matches_per_day': 8,
        'seeding_mode': 'simplified',  # or 'standard'
        'guard_existing_matches': True,
        'seed_update_workers': 4,
        'lock_timeout_seconds': 10,
    }


def load_settings(data_dir: str = None):
    """Load settings from YAML file, merging with defaults."""
    defaults = get_default_settings()
    path = os.path.join(data_dir or DATA_DIR, SETTINGS_FILENAME)
    if not os.path.exists(path):
        return defaults
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.warning(f'Failed to parse {path}: {e}')
        return defaults
    if not data:
        return defaults
    if not isinstance(data, dict):
        logger.warning(f'Ignoring {path}: expected a mapping, got {type(data).__name__}')
        return defaults
    # Merge with defaults to ensure all keys exist
    for key, value in defaults.items():
        if key not in data:
            data[key] = value
    if data['seeding_mode'] not in SEEDING_MODES:
        logger.warning(f"Unknown seeding_mode {data['seeding_mode']!r} in {path}, "
                       f"using {defaults['seeding_mode']!r}")
        data['seeding_mode'] = defaults['seeding_mode']
    return data


def save_settings(settings, data_dir: str = None):
    """Save settings to YAML file."""
    directory = data_dir or DATA_DIR
    os.makedirs(directory, exist_ok=True)
    with open(os.path.join(directory, SETTINGS_FILENAME), 'w', encoding='utf-8') as f:
        yaml.dump(settings, f, default_flow_style=False)
