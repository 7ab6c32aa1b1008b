"""
Diff module for the merge engine.

Provides:
- Line index lookups for a text snapshot
- The line-level diff primitive (with algorithm and whitespace options)
- The side diff adapter projecting edits onto line ranges
"""

from chunkmerge.core.diff.line_index import (
    LineIndex,
    build_line_index,
)
from chunkmerge.core.diff.text_diff import (
    TextDiffEngine,
    DiffAlgorithm,
    WhitespaceMode,
    TextCompareOptions,
    LineDiffer,
    split_lines,
)
from chunkmerge.core.diff.side_diff import diff_side

__all__ = [
    # Line index
    'LineIndex',
    'build_line_index',
    # Text diff
    'TextDiffEngine',
    'DiffAlgorithm',
    'WhitespaceMode',
    'TextCompareOptions',
    'LineDiffer',
    'split_lines',
    # Side adapter
    'diff_side',
]
