"""
Line-level text diff primitive.

Provides line-by-line comparison with support for:
- Multiple diff algorithms
- Whitespace handling options
- Case sensitivity
- Line ending normalization

The engine reports edits as character offset spans into the two raw
texts, which is the narrow interface the merge engine consumes. Any
object with a compatible ``diff(a, b)`` method can stand in for it.
"""

from __future__ import annotations

import bisect
import difflib
import logging
from collections import Counter
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Optional, Protocol

from chunkmerge.core.diff.line_index import LineIndex
from chunkmerge.core.models import EditSpan


Opcode = tuple[str, int, int, int, int]


class DiffAlgorithm(Enum):
    """Available diff algorithms."""
    MYERS = auto()          # difflib default matching
    PATIENCE = auto()       # Anchors on lines unique to both sides
    HISTOGRAM = auto()      # Anchors on low-frequency lines
    MINIMAL = auto()        # difflib without the autojunk heuristic


class WhitespaceMode(Enum):
    """Whitespace handling modes."""
    EXACT = auto()            # Compare whitespace exactly
    IGNORE_TRAILING = auto()  # Ignore trailing whitespace
    IGNORE_LEADING = auto()   # Ignore leading whitespace
    IGNORE_ALL = auto()       # Ignore all whitespace
    NORMALIZE = auto()        # Collapse runs of whitespace


class LineDiffer(Protocol):
    """Narrow interface of a line diff primitive."""

    def diff(self, a: str, b: str) -> list[EditSpan]:
        ...


@dataclass
class TextCompareOptions:
    """Options for text comparison."""
    algorithm: DiffAlgorithm = DiffAlgorithm.MINIMAL
    ignore_case: bool = False
    whitespace_mode: WhitespaceMode = WhitespaceMode.EXACT
    ignore_line_endings: bool = False
    junk_filter: Optional[Callable[[str], bool]] = None

    def normalize_line(self, line: str) -> str:
        """Normalize a line according to options."""
        result = line

        if self.ignore_line_endings:
            result = result.rstrip('\r\n')

        if self.whitespace_mode == WhitespaceMode.IGNORE_TRAILING:
            result = result.rstrip()
        elif self.whitespace_mode == WhitespaceMode.IGNORE_LEADING:
            result = result.lstrip()
        elif self.whitespace_mode == WhitespaceMode.IGNORE_ALL:
            result = ''.join(result.split())
        elif self.whitespace_mode == WhitespaceMode.NORMALIZE:
            result = ' '.join(result.split())

        if self.ignore_case:
            result = result.lower()

        return result


def split_lines(text: str) -> list[str]:
    """
    Split on ``\\n`` only, keeping line endings.

    Unlike ``str.splitlines`` this agrees with :class:`LineIndex` line
    numbering, so line ``i`` always starts at ``line_starts[i]``.
    """
    if not text:
        return []
    parts = text.split('\n')
    lines = [part + '\n' for part in parts[:-1]]
    if parts[-1]:
        lines.append(parts[-1])
    return lines


class TextDiffEngine:
    """
    Engine for comparing two texts line by line.

    Supports multiple algorithms and normalization options. Normalization
    only decides which lines compare equal; reported offsets always refer
    to the texts as given.
    """

    def __init__(self, options: Optional[TextCompareOptions] = None):
        self.options = options or TextCompareOptions()

    def diff(self, a: str, b: str) -> list[EditSpan]:
        """
        Compute edit spans turning ``a`` into ``b``.

        Returns:
            Non-equal regions as offset spans, ordered by position in ``a``.
            Identical texts give an empty list.
        """
        if a == b:
            return []

        a_lines = split_lines(a)
        b_lines = split_lines(b)
        a_index = LineIndex.build(a)
        b_index = LineIndex.build(b)

        spans: list[EditSpan] = []
        for tag, i1, i2, j1, j2 in self.opcodes(a_lines, b_lines):
            if tag == 'equal':
                continue
            spans.append(EditSpan(
                from_a=a_index.offset_of_line(i1),
                to_a=a_index.offset_of_line(i2),
                from_b=b_index.offset_of_line(j1),
                to_b=b_index.offset_of_line(j2)
            ))

        logging.debug(
            f"TextDiffEngine - {len(spans)} edit spans "
            f"({len(a_lines)} vs {len(b_lines)} lines, {self.options.algorithm.name})"
        )
        return spans

    def opcodes(self, a_lines: list[str], b_lines: list[str]) -> list[Opcode]:
        """Get diff opcodes for two line lists using the configured algorithm."""
        left = [self.options.normalize_line(line) for line in a_lines]
        right = [self.options.normalize_line(line) for line in b_lines]
        return _merge_adjacent(self._get_opcodes(left, right))

    def _get_opcodes(self, left: list[str], right: list[str]) -> list[Opcode]:
        if self.options.algorithm == DiffAlgorithm.PATIENCE:
            return self._patience_diff(left, right)
        elif self.options.algorithm == DiffAlgorithm.HISTOGRAM:
            return self._histogram_diff(left, right)
        elif self.options.algorithm == DiffAlgorithm.MINIMAL:
            matcher = difflib.SequenceMatcher(
                self.options.junk_filter, left, right, autojunk=False
            )
            return matcher.get_opcodes()
        else:  # MYERS
            matcher = difflib.SequenceMatcher(self.options.junk_filter, left, right)
            return matcher.get_opcodes()

    def _patience_diff(self, left: list[str], right: list[str]) -> list[Opcode]:
        """
        Patience diff.

        Anchors on lines that occur exactly once on each side, keeping the
        longest run of anchors that appears in the same order on both.
        """
        left_counts = Counter(left)
        right_counts = Counter(right)
        right_positions = {line: j for j, line in enumerate(right)}

        anchors = [
            (i, right_positions[line])
            for i, line in enumerate(left)
            if left_counts[line] == 1 and right_counts.get(line) == 1
        ]
        return self._diff_between_anchors(left, right, anchors)

    def _histogram_diff(self, left: list[str], right: list[str]) -> list[Opcode]:
        """
        Histogram diff.

        Uses the least frequent common lines as anchors and falls back to
        plain matching when there are none.
        """
        left_counts = Counter(left)
        right_counts = Counter(right)
        rare = {
            line for line in left_counts.keys() & right_counts.keys()
            if left_counts[line] + right_counts[line] <= 3
        }
        if not rare:
            return difflib.SequenceMatcher(None, left, right, autojunk=False).get_opcodes()

        first_in_right: dict[str, int] = {}
        for j, line in enumerate(right):
            if line in rare:
                first_in_right.setdefault(line, j)

        anchors = []
        for i, line in enumerate(left):
            j = first_in_right.pop(line, None)
            if j is not None:
                anchors.append((i, j))
        return self._diff_between_anchors(left, right, anchors)

    def _diff_between_anchors(
        self,
        left: list[str],
        right: list[str],
        anchors: list[tuple[int, int]]
    ) -> list[Opcode]:
        """Keep the anchors that preserve order and diff the gaps between them."""
        anchors.sort()
        keep = _longest_increasing([j for _, j in anchors])
        anchors = [anchors[k] for k in keep]

        opcodes: list[Opcode] = []
        left_pos = 0
        right_pos = 0
        for i, j in anchors + [(len(left), len(right))]:
            opcodes.extend(_diff_gap(left, right, left_pos, i, right_pos, j))
            if i < len(left):
                opcodes.append(('equal', i, i + 1, j, j + 1))
            left_pos = i + 1
            right_pos = j + 1
        return opcodes


def _diff_gap(
    left: list[str],
    right: list[str],
    i1: int,
    i2: int,
    j1: int,
    j2: int
) -> list[Opcode]:
    """Opcodes for ``left[i1:i2]`` against ``right[j1:j2]``."""
    if i1 == i2 and j1 == j2:
        return []
    if i1 == i2:
        return [('insert', i1, i1, j1, j2)]
    if j1 == j2:
        return [('delete', i1, i2, j1, j1)]
    matcher = difflib.SequenceMatcher(None, left[i1:i2], right[j1:j2], autojunk=False)
    return [
        (tag, i1 + a1, i1 + a2, j1 + b1, j1 + b2)
        for tag, a1, a2, b1, b2 in matcher.get_opcodes()
    ]


def _merge_adjacent(opcodes: list[Opcode]) -> list[Opcode]:
    """Fold consecutive non-equal opcodes into a single edit."""
    merged: list[Opcode] = []
    for tag, i1, i2, j1, j2 in opcodes:
        if i1 == i2 and j1 == j2:
            continue
        if merged and tag != 'equal' and merged[-1][0] != 'equal':
            _, p1, _, q1, _ = merged[-1]
            merged[-1] = ('replace', p1, i2, q1, j2)
        elif merged and tag == 'equal' and merged[-1][0] == 'equal':
            _, p1, _, q1, _ = merged[-1]
            merged[-1] = ('equal', p1, i2, q1, j2)
        else:
            merged.append((tag, i1, i2, j1, j2))
    return merged


def _longest_increasing(sequence: list[int]) -> list[int]:
    """Indices of a longest strictly increasing subsequence."""
    tails: list[int] = []       # smallest tail value per subsequence length
    tail_index: list[int] = []  # index in sequence of that tail
    parent = [-1] * len(sequence)

    for i, value in enumerate(sequence):
        pos = bisect.bisect_left(tails, value)
        if pos == len(tails):
            tails.append(value)
            tail_index.append(i)
        else:
            tails[pos] = value
            tail_index[pos] = i
        parent[i] = tail_index[pos - 1] if pos > 0 else -1

    result = []
    idx = tail_index[-1] if tail_index else -1
    while idx >= 0:
        result.append(idx)
        idx = parent[idx]
    return list(reversed(result))

