"""
Tests for settings loading.
"""
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from config import get_default_settings, load_settings, save_settings


class TestSettings:

    def test_defaults_when_missing(self, temp_data_dir):
        assert load_settings(temp_data_dir) == get_default_settings()

    def test_default_values(self):
        settings = get_default_settings()
        assert settings['default_rating'] == 1200
        assert settings['default_location'] == 'Main Court'
        assert settings['seeding_mode'] == 'simplified'
        assert settings['guard_existing_matches'] is True

    def test_partial_file_merges_defaults(self, temp_data_dir):
        with open(os.path.join(temp_data_dir, 'settings.yaml'), 'w', encoding='utf-8') as f:
            f.write("seeding_mode: standard\ncourt_count: 5\n")

        settings = load_settings(temp_data_dir)
        assert settings['seeding_mode'] == 'standard'
        assert settings['court_count'] == 5
        assert settings['slot_hours'] == 2

    def test_empty_file(self, temp_data_dir):
        open(os.path.join(temp_data_dir, 'settings.yaml'), 'w').close()
        assert load_settings(temp_data_dir) == get_default_settings()

    def test_unparseable_file_falls_back(self, temp_data_dir):
        with open(os.path.join(temp_data_dir, 'settings.yaml'), 'w', encoding='utf-8') as f:
            f.write("seeding_mode: [standard\n")
        assert load_settings(temp_data_dir) == get_default_settings()

    def test_save_and_load(self, tmp_path):
        data_dir = str(tmp_path / "new")
        settings = get_default_settings()
        settings['matches_per_day'] = 12
        save_settings(settings, data_dir)
        assert load_settings(data_dir)['matches_per_day'] == 12

    def test_non_mapping_file_falls_back(self, temp_data_dir, caplog):
        with open(os.path.join(temp_data_dir, 'settings.yaml'), 'w', encoding='utf-8') as f:
            f.write("- seeding_mode\n- standard\n")
        assert load_settings(temp_data_dir) == get_default_settings()
        assert 'expected a mapping' in caplog.text

    def test_unknown_seeding_mode_falls_back(self, temp_data_dir, caplog):
        with open(os.path.join(temp_data_dir, 'settings.yaml'), 'w', encoding='utf-8') as f:
            f.write("seeding_mode: random\ncourt_count: 5\n")

        settings = load_settings(temp_data_dir)
        assert settings['seeding_mode'] == 'simplified'
        assert settings['court_count'] == 5
        assert "Unknown seeding_mode 'random'" in caplog.text
