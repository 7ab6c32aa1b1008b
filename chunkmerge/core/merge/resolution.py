"""
Chunk resolution.

Splices the text a side contributed to a chunk back into the base.
Resolution never raises on malformed chunks: the base is returned
unchanged instead, since it runs on an interactive edit path.
"""

from __future__ import annotations

import logging
from typing import Optional

from chunkmerge.core.diff.text_diff import LineDiffer
from chunkmerge.core.merge.three_way import ThreeWayChunkBuilder
from chunkmerge.core.models import ChunkAction, ChunkKind, MergeChunk, PosRange


def chunk_side_text(text: str, pos_range: Optional[PosRange]) -> str:
    """Slice ``text`` by ``pos_range``; a missing range is the empty string."""
    if pos_range is None:
        return ""
    start, end = _clamp(pos_range, len(text))
    return text[start:end]


def preview_chunk_action(
    base_text: str,
    left_text: str,
    right_text: str,
    chunk: MergeChunk,
    action: ChunkAction
) -> str:
    """Text that would occupy the chunk's base span after ``action``."""
    if action == ChunkAction.APPLY_LEFT:
        return chunk_side_text(left_text, chunk.left_pos_range)
    if action == ChunkAction.APPLY_RIGHT:
        return chunk_side_text(right_text, chunk.right_pos_range)
    return chunk_side_text(base_text, chunk.base_pos_range)


def apply_chunk_action(
    base_text: str,
    left_text: str,
    right_text: str,
    chunk: MergeChunk,
    action: ChunkAction
) -> str:
    """
    Resolve one chunk and return the new base text.

    Args:
        base_text: Base the chunk was computed against
        left_text: Left derivative
        right_text: Right derivative
        chunk: Chunk to resolve
        action: Chosen resolution

    Returns:
        The base with only ``chunk.base_pos_range`` replaced for apply
        actions; the base unchanged for keep-base and manual.
    """
    if not action.modifies_base:
        return base_text

    base_range = chunk.base_pos_range
    if base_range is None:
        logging.debug(f"apply_chunk_action - {chunk.id} has no base position, keeping base")
        return base_text

    replacement = preview_chunk_action(base_text, left_text, right_text, chunk, action)
    start, end = _clamp(base_range, len(base_text))
    return f"{base_text[:start]}{replacement}{base_text[end:]}"


def _clamp(pos_range: PosRange, length: int) -> tuple[int, int]:
    start = min(max(pos_range.from_pos, 0), length)
    end = min(max(pos_range.to_pos, start), length)
    return start, end


class MergeSession:
    """
    Caller-owned state for resolving chunks one at a time.

    Keeps the working base, the action picked per chunk id and the
    selected chunk. Chunks are rebuilt whenever the working base changes,
    so ids are only meaningful for the current chunk list.
    """

    def __init__(
        self,
        base_text: str,
        left_text: str,
        right_text: str,
        engine: Optional[LineDiffer] = None
    ):
        self.left_text = left_text
        self.right_text = right_text
        self._builder = ThreeWayChunkBuilder(engine)
        self._base_text = base_text
        self._chunks: Optional[list[MergeChunk]] = None
        self.actions: dict[str, ChunkAction] = {}
        self.selected_chunk_id: Optional[str] = None

    @property
    def base_text(self) -> str:
        """Current working base."""
        return self._base_text

    @property
    def chunks(self) -> list[MergeChunk]:
        """Chunks for the current working base."""
        if self._chunks is None:
            self._rebuild()
        return self._chunks

    @property
    def selected_chunk(self) -> Optional[MergeChunk]:
        return self.get_chunk(self.selected_chunk_id) if self.selected_chunk_id else None

    @property
    def unresolved_count(self) -> int:
        """Chunks with no recorded action."""
        return sum(1 for chunk in self.chunks if chunk.id not in self.actions)

    def get_chunk(self, chunk_id: str) -> Optional[MergeChunk]:
        for chunk in self.chunks:
            if chunk.id == chunk_id:
                return chunk
        return None

    def reset(self, base_text: str) -> None:
        """Start over from a new base, forgetting recorded actions."""
        self._base_text = base_text
        self.actions.clear()
        self.selected_chunk_id = None
        self._chunks = None

    def can_apply(self, chunk: MergeChunk, action: ChunkAction) -> bool:
        """Whether ``action`` makes sense for ``chunk``."""
        if action == ChunkAction.APPLY_LEFT:
            return chunk.has_left
        if action == ChunkAction.APPLY_RIGHT:
            return chunk.has_right
        if action == ChunkAction.KEEP_BASE:
            return chunk.kind != ChunkKind.CONFLICT
        return True

    def apply(self, chunk: MergeChunk | str, action: ChunkAction) -> str:
        """
        Record ``action`` for a chunk and update the working base.

        Args:
            chunk: Chunk or chunk id from the current chunk list
            action: Chosen resolution

        Returns:
            The working base after the action.

        Raises:
            ValueError: If the chunk id is not in the current chunk list
        """
        chunk_id = chunk if isinstance(chunk, str) else chunk.id
        target = self.get_chunk(chunk_id)
        if target is None:
            raise ValueError(f"Invalid chunk ID: {chunk_id}")

        self.actions[chunk_id] = action
        target.action = action

        if action.modifies_base:
            new_base = apply_chunk_action(
                self._base_text, self.left_text, self.right_text, target, action
            )
            if new_base != self._base_text:
                self._base_text = new_base
                self._rebuild()

        logging.debug(f"MergeSession - {chunk_id} resolved with {action.value}")
        return self._base_text

    def select(self, chunk_id: str) -> Optional[MergeChunk]:
        """Select a chunk by id; unknown ids leave the selection unchanged."""
        chunk = self.get_chunk(chunk_id)
        if chunk is not None:
            self.selected_chunk_id = chunk.id
        return self.selected_chunk

    def select_next(self) -> Optional[MergeChunk]:
        return self._step(1)

    def select_previous(self) -> Optional[MergeChunk]:
        return self._step(-1)

    def _step(self, offset: int) -> Optional[MergeChunk]:
        chunks = self.chunks
        if not chunks:
            return None
        ids = [chunk.id for chunk in chunks]
        current = ids.index(self.selected_chunk_id) if self.selected_chunk_id in ids else 0
        bounded = min(max(current + offset, 0), len(chunks) - 1)
        self.selected_chunk_id = chunks[bounded].id
        return chunks[bounded]

    def _rebuild(self) -> None:
        self._chunks = self._builder.build(self._base_text, self.left_text, self.right_text)

        live_ids = {chunk.id for chunk in self._chunks}
        self.actions = {
            chunk_id: action for chunk_id, action in self.actions.items()
            if chunk_id in live_ids
        }
        for chunk in self._chunks:
            chunk.action = self.actions.get(chunk.id, ChunkAction.KEEP_BASE)

        if not self._chunks:
            self.selected_chunk_id = None
        elif self.selected_chunk_id not in live_ids:
            self.selected_chunk_id = self._chunks[0].id
