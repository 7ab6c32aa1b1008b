"""
Merge settings management.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, asdict
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Optional

from chunkmerge.core.diff.text_diff import DiffAlgorithm, TextCompareOptions, WhitespaceMode


@dataclass
class ComparisonSettings:
    """Settings for the line diff used to find each side's edits."""
    algorithm: DiffAlgorithm = DiffAlgorithm.MINIMAL
    whitespace_mode: WhitespaceMode = WhitespaceMode.EXACT
    ignore_case: bool = False
    ignore_line_endings: bool = False

    def to_compare_options(self) -> TextCompareOptions:
        return TextCompareOptions(
            algorithm=self.algorithm,
            ignore_case=self.ignore_case,
            whitespace_mode=self.whitespace_mode,
            ignore_line_endings=self.ignore_line_endings
        )


@dataclass
class MergeSettings:
    """Settings for writing resolved output."""
    create_backup: bool = True
    backup_extension: str = ".orig"
    output_encoding: str = "utf-8"


@dataclass
class ApplicationSettings:
    """Main settings container."""
    comparison: ComparisonSettings = field(default_factory=ComparisonSettings)
    merge: MergeSettings = field(default_factory=MergeSettings)
    log_level: str = "INFO"


class SettingsManager:
    """Manager for loading/saving settings as JSON."""

    def __init__(self, settings_path: Optional[Path] = None):
        self.settings_path = Path(settings_path) if settings_path else self._get_default_path()
        self._settings: Optional[ApplicationSettings] = None
        self._observers: list[Callable[[ApplicationSettings], None]] = []

    @staticmethod
    def _get_default_path() -> Path:
        """Get the default settings file path."""
        if os.name == 'nt':
            app_data = os.environ.get('APPDATA', os.path.expanduser('~'))
            return Path(app_data) / 'ChunkMerge' / 'settings.json'
        config_home = os.environ.get('XDG_CONFIG_HOME', os.path.expanduser('~/.config'))
        return Path(config_home) / 'chunkmerge' / 'settings.json'

    @property
    def settings(self) -> ApplicationSettings:
        """Get current settings, loading from disk if needed."""
        if self._settings is None:
            self._settings = self.load()
        return self._settings

    def load(self) -> ApplicationSettings:
        """Load settings from disk; missing or unreadable files give defaults."""
        if not self.settings_path.exists():
            return ApplicationSettings()

        try:
            with open(self.settings_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            return self._from_dict(data)
        except (OSError, ValueError, AttributeError) as e:
            logging.warning(f"SettingsManager - Could not read {self.settings_path}: {e}")
            return ApplicationSettings()

    def save(self, settings: Optional[ApplicationSettings] = None) -> bool:
        """Save settings to disk."""
        settings = settings or self._settings
        if settings is None:
            return False

        try:
            self.settings_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.settings_path, 'w', encoding='utf-8') as f:
                json.dump(self._to_dict(settings), f, indent=2)
        except OSError as e:
            logging.error(f"SettingsManager - Could not write {self.settings_path}: {e}")
            return False

        self._settings = settings
        self._notify_observers()
        return True

    def reset(self) -> ApplicationSettings:
        """Reset to default settings."""
        self._settings = ApplicationSettings()
        self.save()
        return self._settings

    def add_observer(self, callback: Callable[[ApplicationSettings], None]) -> None:
        """Add a callback to be notified of settings changes."""
        self._observers.append(callback)

    def remove_observer(self, callback: Callable[[ApplicationSettings], None]) -> None:
        if callback in self._observers:
            self._observers.remove(callback)

    def _notify_observers(self) -> None:
        for callback in self._observers:
            callback(self._settings)

    def _to_dict(self, settings: ApplicationSettings) -> dict:
        """Convert settings to dictionary for JSON serialization."""
        def convert(obj: Any) -> Any:
            if isinstance(obj, Enum):
                return obj.name
            elif isinstance(obj, dict):
                return {k: convert(v) for k, v in obj.items()}
            elif isinstance(obj, list):
                return [convert(item) for item in obj]
            return obj

        return convert(asdict(settings))

    def _from_dict(self, data: dict) -> ApplicationSettings:
        """Convert dictionary back to settings objects."""
        def get_enum(enum_class: type, value: Any, default: Enum) -> Enum:
            if isinstance(value, str):
                try:
                    return enum_class[value.upper()]
                except KeyError:
                    return default
            return default

        comparison_data = data.get('comparison', {})
        defaults = ComparisonSettings()
        comparison = ComparisonSettings(
            algorithm=get_enum(DiffAlgorithm, comparison_data.get('algorithm'), defaults.algorithm),
            whitespace_mode=get_enum(
                WhitespaceMode, comparison_data.get('whitespace_mode'), defaults.whitespace_mode
            ),
            ignore_case=comparison_data.get('ignore_case', defaults.ignore_case),
            ignore_line_endings=comparison_data.get('ignore_line_endings', defaults.ignore_line_endings),
        )

        merge_data = data.get('merge', {})
        merge_defaults = MergeSettings()
        merge = MergeSettings(
            create_backup=merge_data.get('create_backup', merge_defaults.create_backup),
            backup_extension=merge_data.get('backup_extension', merge_defaults.backup_extension),
            output_encoding=merge_data.get('output_encoding', merge_defaults.output_encoding),
        )

        return ApplicationSettings(
            comparison=comparison,
            merge=merge,
            log_level=data.get('log_level', 'INFO'),
        )
