"""Tests for chunkmerge.services.settings."""
from __future__ import annotations

import json

from chunkmerge.core.diff.text_diff import DiffAlgorithm, WhitespaceMode
from chunkmerge.services.settings import ApplicationSettings, SettingsManager


def test_missing_file_gives_defaults(tmp_path):
    settings = SettingsManager(tmp_path / "settings.json").settings

    assert settings == ApplicationSettings()
    assert settings.comparison.algorithm == DiffAlgorithm.MINIMAL
    assert settings.merge.create_backup


def test_save_and_load(tmp_path):
    path = tmp_path / "conf" / "settings.json"
    manager = SettingsManager(path)
    settings = ApplicationSettings()
    settings.comparison.algorithm = DiffAlgorithm.PATIENCE
    settings.comparison.whitespace_mode = WhitespaceMode.IGNORE_TRAILING
    settings.merge.backup_extension = ".bak"
    settings.log_level = "DEBUG"

    assert manager.save(settings)

    data = json.loads(path.read_text())
    assert data['comparison']['algorithm'] == "PATIENCE"

    loaded = SettingsManager(path).settings
    assert loaded == settings


def test_unknown_enum_name_uses_default(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({'comparison': {'algorithm': "QUANTUM", 'ignore_case': True}}))

    settings = SettingsManager(path).settings

    assert settings.comparison.algorithm == DiffAlgorithm.MINIMAL
    assert settings.comparison.ignore_case


def test_corrupt_file_gives_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json")

    assert SettingsManager(path).settings == ApplicationSettings()


def test_to_compare_options():
    settings = ApplicationSettings()
    settings.comparison.ignore_case = True

    options = settings.comparison.to_compare_options()

    assert options.ignore_case
    assert options.algorithm == DiffAlgorithm.MINIMAL


def test_observers_notified_on_save(tmp_path):
    manager = SettingsManager(tmp_path / "settings.json")
    seen = []
    manager.add_observer(seen.append)

    manager.reset()
    manager.remove_observer(seen.append)
    manager.reset()

    assert len(seen) == 1
