"""
Side diff adapter.

Projects the offset spans of the line diff primitive onto line ranges
of both snapshots and tags them with the side they came from.
"""

from __future__ import annotations

from typing import Optional

from chunkmerge.core.diff.line_index import LineIndex
from chunkmerge.core.diff.text_diff import LineDiffer, TextDiffEngine
from chunkmerge.core.models import PosRange, Side, SideChange


def diff_side(
    base_text: str,
    other_text: str,
    side: Side,
    engine: Optional[LineDiffer] = None
) -> list[SideChange]:
    """
    Compute the changes one side made relative to the base.

    Args:
        base_text: Common ancestor text
        other_text: Left or right derivative
        side: Which derivative ``other_text`` is
        engine: Line diff primitive (defaults to :class:`TextDiffEngine`)

    Returns:
        Changes ordered by base start offset; empty when the texts match.
    """
    engine = engine or TextDiffEngine()
    spans = engine.diff(base_text, other_text)
    if not spans:
        return []

    base_index = LineIndex.build(base_text)
    other_index = LineIndex.build(other_text)

    return [
        SideChange(
            side=side,
            base_range=base_index.lines_to_range(span.from_a, span.to_a),
            other_range=other_index.lines_to_range(span.from_b, span.to_b),
            base_pos=PosRange(span.from_a, span.to_a),
            other_pos=PosRange(span.from_b, span.to_b)
        )
        for span in sorted(spans, key=lambda s: (s.from_a, s.to_a))
    ]
