"""
Three-way text merge engine.

Computes the line-level edits two derivatives made to a common base,
coalesces them into classified chunks and resolves chunks by splicing
the chosen side's text back into the base.
"""

from chunkmerge.core.models import (
    ChunkAction,
    ChunkKind,
    EditSpan,
    LineRange,
    MergeChunk,
    PosRange,
    Side,
    SideChange,
    TextChange,
)
from chunkmerge.core.diff import (
    DiffAlgorithm,
    LineIndex,
    TextCompareOptions,
    TextDiffEngine,
    WhitespaceMode,
    diff_side,
)
from chunkmerge.core.merge import (
    MergeSession,
    ThreeWayChunkBuilder,
    apply_chunk_action,
    build_base_target_decorations,
    build_three_way_chunks,
)

__version__ = "1.0.0"

__all__ = [
    'ChunkAction',
    'ChunkKind',
    'EditSpan',
    'LineRange',
    'MergeChunk',
    'PosRange',
    'Side',
    'SideChange',
    'TextChange',
    'DiffAlgorithm',
    'LineIndex',
    'TextCompareOptions',
    'TextDiffEngine',
    'WhitespaceMode',
    'diff_side',
    'MergeSession',
    'ThreeWayChunkBuilder',
    'apply_chunk_action',
    'build_base_target_decorations',
    'build_three_way_chunks',
]
