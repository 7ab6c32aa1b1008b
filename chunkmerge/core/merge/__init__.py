"""
Merge module for three-way chunk merging.
"""

from chunkmerge.core.merge.three_way import (
    ThreeWayChunkBuilder,
    build_three_way_chunks,
    classify_chunk,
    ranges_overlap,
    MERGE_TOLERANCE,
)
from chunkmerge.core.merge.resolution import (
    MergeSession,
    apply_chunk_action,
    chunk_side_text,
    preview_chunk_action,
)
from chunkmerge.core.merge.decorations import (
    BaseTargetDecorations,
    LineDecoration,
    build_base_target_decorations,
    map_position,
)

__all__ = [
    'ThreeWayChunkBuilder',
    'build_three_way_chunks',
    'classify_chunk',
    'ranges_overlap',
    'MERGE_TOLERANCE',
    'MergeSession',
    'apply_chunk_action',
    'chunk_side_text',
    'preview_chunk_action',
    'BaseTargetDecorations',
    'LineDecoration',
    'build_base_target_decorations',
    'map_position',
]
