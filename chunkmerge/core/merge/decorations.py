"""
Base target decorations.

Projects chunks onto the lines of a live base document so a view can
mark which base lines a chunk would replace, and moves those marks
along with edits made before the chunks are rebuilt.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence

from chunkmerge.core.diff.line_index import LineIndex
from chunkmerge.core.models import MergeChunk, TextChange


BASE_TARGET_CLASS = "base-target"


@dataclass(frozen=True)
class LineDecoration:
    """A mark anchored at the start offset of one document line."""
    offset: int
    css_class: str = BASE_TARGET_CLASS


@dataclass(frozen=True)
class BaseTargetDecorations:
    """Ordered, de-duplicated set of line decorations."""
    decorations: tuple[LineDecoration, ...] = field(default_factory=tuple)

    @classmethod
    def from_offsets(
        cls,
        offsets: Iterable[int],
        css_class: str = BASE_TARGET_CLASS
    ) -> BaseTargetDecorations:
        unique = sorted(set(offsets))
        return cls(tuple(LineDecoration(offset, css_class) for offset in unique))

    def __len__(self) -> int:
        return len(self.decorations)

    def __iter__(self):
        return iter(self.decorations)

    @property
    def offsets(self) -> list[int]:
        return [decoration.offset for decoration in self.decorations]

    def lines(self, document_text: str) -> list[int]:
        """Zero-based line numbers of the anchors in ``document_text``."""
        index = LineIndex.build(document_text)
        return [index.line_at(decoration.offset) for decoration in self.decorations]

    def map_changes(self, changes: Sequence[TextChange]) -> BaseTargetDecorations:
        """
        Move anchors through a set of edits.

        ``changes`` use offsets of the document before any of them was
        applied and must not overlap. Anchors inside replaced text
        collapse to the start of the replacement.
        """
        if not changes or not self.decorations:
            return self

        ordered = sorted(changes, key=lambda c: (c.from_pos, c.to_pos))
        mapped = []
        for decoration in self.decorations:
            mapped.append(LineDecoration(
                map_position(decoration.offset, ordered),
                decoration.css_class
            ))

        unique: dict[int, LineDecoration] = {}
        for decoration in mapped:
            unique.setdefault(decoration.offset, decoration)
        return BaseTargetDecorations(tuple(unique[offset] for offset in sorted(unique)))


def map_position(pos: int, changes: Sequence[TextChange]) -> int:
    """Map an offset through edits ordered by position."""
    delta = 0
    for change in changes:
        if change.from_pos > pos:
            break
        if pos < change.to_pos:
            return change.from_pos + delta
        if change.from_pos == pos == change.to_pos:
            # Insertion exactly at the anchor: the anchor stays in front.
            break
        delta += change.delta
    return pos + delta


def build_base_target_decorations(
    document_text: str,
    chunks: Sequence[MergeChunk],
    css_class: str = BASE_TARGET_CLASS
) -> BaseTargetDecorations:
    """
    Decorate every base line targeted by a chunk.

    Chunk base ranges are clamped to the document's lines, since the
    document may have been edited after the chunks were computed.
    Chunks with neither a left nor a right range are skipped.
    """
    if not chunks:
        return BaseTargetDecorations()

    index = LineIndex.build(document_text)
    max_line = index.line_count

    offsets = []
    for chunk in chunks:
        if not chunk.has_left and not chunk.has_right:
            continue
        # One-based like an editor's line numbers.
        start_line = max(1, min(max_line, chunk.base_range.start_line + 1))
        end_line = max(start_line, min(max_line, chunk.base_range.end_line + 1))
        for line in range(start_line, end_line + 1):
            offsets.append(index.offset_of_line(line - 1))

    return BaseTargetDecorations.from_offsets(offsets, css_class)
