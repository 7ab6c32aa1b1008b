"""
Three-way chunk merger for text snapshots.

Implements the chunking step of a three-way merge:
1. Computes the edits from base to left and base to right
2. Sorts all edits by the base lines they touch
3. Sweeps once over them, folding touching or adjacent edits into chunks
4. Classifies each chunk as left-only, right-only, both or conflict

Chunks are rebuilt from scratch on every call; nothing is cached.
"""

from __future__ import annotations

import logging
from typing import Optional

from chunkmerge.core.diff.side_diff import diff_side
from chunkmerge.core.diff.text_diff import LineDiffer, TextCompareOptions, TextDiffEngine
from chunkmerge.core.models import (
    ChunkKind,
    LineRange,
    MergeChunk,
    Side,
    SideChange,
    union_lines,
    union_positions,
)


# Edits separated by at most this many untouched base lines share a chunk.
MERGE_TOLERANCE = 1


def ranges_overlap(a: Optional[LineRange], b: Optional[LineRange]) -> bool:
    """True if both ranges exist and share at least one line."""
    if a is None or b is None:
        return False
    return a.overlaps(b)


def classify_chunk(chunk: MergeChunk) -> ChunkKind:
    """Determine the kind of a fully accumulated chunk."""
    if ranges_overlap(chunk.left_base_range, chunk.right_base_range):
        return ChunkKind.CONFLICT
    if chunk.has_left and chunk.has_right:
        return ChunkKind.BOTH
    if chunk.has_left:
        return ChunkKind.LEFT_ONLY
    return ChunkKind.RIGHT_ONLY


class ThreeWayChunkBuilder:
    """
    Builds merge chunks for a base and two derivatives.

    Holds the diff primitive so hosts can rebuild chunks repeatedly
    (for example after every edit) with the same options.
    """

    def __init__(
        self,
        engine: Optional[LineDiffer] = None,
        options: Optional[TextCompareOptions] = None
    ):
        """
        Args:
            engine: Line diff primitive to use
            options: Options for a default :class:`TextDiffEngine`

        Raises:
            ValueError: If both ``engine`` and ``options`` are given
        """
        if engine is not None and options is not None:
            raise ValueError("Pass either a diff engine or compare options, not both")
        self.engine = engine or TextDiffEngine(options)

    def build(self, base_text: str, left_text: str, right_text: str) -> list[MergeChunk]:
        """
        Compute the chunk list.

        Args:
            base_text: Common ancestor text
            left_text: Left/ours derivative
            right_text: Right/theirs derivative

        Returns:
            Chunks ordered by base position; empty when neither side differs.
        """
        left_changes = diff_side(base_text, left_text, Side.LEFT, self.engine)
        right_changes = diff_side(base_text, right_text, Side.RIGHT, self.engine)

        # Stable sort keeps left before right for identical base ranges.
        changes = sorted(left_changes + right_changes, key=lambda c: c.sort_key)

        chunks: list[MergeChunk] = []
        current: Optional[MergeChunk] = None

        for change in changes:
            if current is not None and self._continues(current, change):
                self._absorb(current, change)
                continue

            if current is not None:
                chunks.append(self._finalize(current))
            current = self._start_chunk(change, len(chunks) + 1)

        if current is not None:
            chunks.append(self._finalize(current))

        logging.debug(
            f"ThreeWayChunkBuilder - {len(left_changes)} left and "
            f"{len(right_changes)} right changes merged into {len(chunks)} chunks"
        )
        return chunks

    @staticmethod
    def _continues(current: MergeChunk, change: SideChange) -> bool:
        return change.base_range.start_line <= current.base_range.end_line + MERGE_TOLERANCE

    @staticmethod
    def _start_chunk(change: SideChange, number: int) -> MergeChunk:
        """Open a new chunk seeded from one change."""
        chunk = MergeChunk(
            id=f"chunk-{number}",
            base_range=change.base_range,
            base_pos_range=change.base_pos
        )
        if change.side == Side.LEFT:
            chunk.left_range = change.other_range
            chunk.left_base_range = change.base_range
            chunk.left_pos_range = change.other_pos
        else:
            chunk.right_range = change.other_range
            chunk.right_base_range = change.base_range
            chunk.right_pos_range = change.other_pos
        return chunk

    @staticmethod
    def _absorb(chunk: MergeChunk, change: SideChange) -> None:
        """Fold a touching change into the open chunk."""
        chunk.base_range = chunk.base_range.union(change.base_range)
        chunk.base_pos_range = union_positions(chunk.base_pos_range, change.base_pos)

        if change.side == Side.LEFT:
            chunk.left_range = union_lines(chunk.left_range, change.other_range)
            chunk.left_base_range = union_lines(chunk.left_base_range, change.base_range)
            chunk.left_pos_range = union_positions(chunk.left_pos_range, change.other_pos)
        else:
            chunk.right_range = union_lines(chunk.right_range, change.other_range)
            chunk.right_base_range = union_lines(chunk.right_base_range, change.base_range)
            chunk.right_pos_range = union_positions(chunk.right_pos_range, change.other_pos)

    @staticmethod
    def _finalize(chunk: MergeChunk) -> MergeChunk:
        chunk.kind = classify_chunk(chunk)
        return chunk


def build_three_way_chunks(
    base_text: str,
    left_text: str,
    right_text: str,
    engine: Optional[LineDiffer] = None
) -> list[MergeChunk]:
    """
    Compute the merge chunks for three snapshots.

    Convenience wrapper around :class:`ThreeWayChunkBuilder`.
    """
    return ThreeWayChunkBuilder(engine).build(base_text, left_text, right_text)
