"""
Services for reading snapshots, writing results and persisting settings.
"""

from chunkmerge.services.file_io import (
    FileIOService,
    FileContent,
    LineEnding,
    ReadResult,
    WriteResult,
)
from chunkmerge.services.settings import (
    ApplicationSettings,
    ComparisonSettings,
    MergeSettings,
    SettingsManager,
)

__all__ = [
    'FileIOService',
    'FileContent',
    'LineEnding',
    'ReadResult',
    'WriteResult',
    'ApplicationSettings',
    'ComparisonSettings',
    'MergeSettings',
    'SettingsManager',
]
