"""
Line index for a text snapshot.

Precomputes the offset at which every line starts so that offset to
line lookups are a binary search. Lookups never raise: offsets outside
the text are clamped to the first or last line.
"""

from __future__ import annotations

import bisect
from dataclasses import dataclass

from chunkmerge.core.models import LineRange, PosRange


@dataclass(frozen=True)
class LineIndex:
    """Line-start table for one snapshot."""
    line_starts: tuple[int, ...]
    text_length: int

    @classmethod
    def build(cls, text: str) -> LineIndex:
        """
        Build the index in a single pass.

        Line 0 starts at offset 0; every following line starts one past
        a newline. A text ending in a newline therefore has a trailing
        empty line starting at ``len(text)``.
        """
        starts = [0]
        pos = text.find('\n')
        while pos != -1:
            starts.append(pos + 1)
            pos = text.find('\n', pos + 1)
        return cls(tuple(starts), len(text))

    @property
    def line_count(self) -> int:
        return len(self.line_starts)

    @property
    def last_line(self) -> int:
        return len(self.line_starts) - 1

    def line_at(self, offset: int) -> int:
        """Zero-based line containing ``offset``."""
        if offset <= 0:
            return 0
        line = bisect.bisect_right(self.line_starts, offset) - 1
        return min(max(line, 0), self.last_line)

    def lines_to_range(self, from_pos: int, to_pos: int) -> LineRange:
        """
        Convert a half-open offset span into an inclusive line range.

        A non-empty span ending on a line boundary stops at the line
        before the boundary. An empty span on a line boundary refers to
        the line before the boundary; at offset 0 or mid-line it refers
        to the line it sits on.
        """
        if to_pos <= from_pos:
            if 0 < from_pos <= self.text_length and self.is_line_start(from_pos):
                line = self.line_at(from_pos - 1)
            else:
                line = self.line_at(from_pos)
            return LineRange(line, line)

        start_line = self.line_at(from_pos)
        end_line = max(start_line, self.line_at(to_pos - 1))
        return LineRange(start_line, end_line)

    def is_line_start(self, offset: int) -> bool:
        """True if a line begins at ``offset``."""
        pos = bisect.bisect_left(self.line_starts, offset)
        return pos < len(self.line_starts) and self.line_starts[pos] == offset

    def offset_of_line(self, line: int) -> int:
        """Start offset of ``line``; lines past the end map to the text length."""
        if line <= 0:
            return 0
        if line >= len(self.line_starts):
            return self.text_length
        return self.line_starts[line]

    def range_of_lines(self, start_line: int, end_line: int) -> PosRange:
        """Offsets covering lines ``start_line``..``end_line`` inclusive."""
        start_line = min(max(start_line, 0), self.last_line)
        end_line = min(max(end_line, start_line), self.last_line)
        return PosRange(
            self.offset_of_line(start_line),
            self.offset_of_line(end_line + 1)
        )


def build_line_index(text: str) -> LineIndex:
    """Build a :class:`LineIndex` for ``text``."""
    return LineIndex.build(text)
