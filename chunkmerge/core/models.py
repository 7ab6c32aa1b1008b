"""
Core data models for the three-way chunk merge engine.

This module defines all data structures used across the package:
- Line and offset ranges into a single text snapshot
- Edit spans reported by the line diff primitive
- Per-side changes produced by the side diff adapter
- Merge chunks and the actions a caller may apply to them
- Document edits used to move decorations

All models are designed to be:
- UI-agnostic (can be used with any frontend)
- Serializable (``to_dict`` for JSON output)
- Immutable where practical
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


# =============================================================================
# Enumerations
# =============================================================================

class Side(Enum):
    """Which derivative a change was computed against."""
    LEFT = "left"
    RIGHT = "right"


class ChunkKind(Enum):
    """Classification of a merged chunk."""
    LEFT_ONLY = "left-only"    # Only the left side touched these base lines
    RIGHT_ONLY = "right-only"  # Only the right side touched these base lines
    BOTH = "both"              # Both sides changed, on disjoint base lines
    CONFLICT = "conflict"      # Both sides changed overlapping base lines


class ChunkAction(Enum):
    """Resolution a caller can pick for a chunk."""
    KEEP_BASE = "keep_base"      # Explicitly ignore both sides
    APPLY_LEFT = "apply_left"    # Splice the left text over the chunk
    APPLY_RIGHT = "apply_right"  # Splice the right text over the chunk
    MANUAL = "manual"            # The user will edit the base directly

    @classmethod
    def from_string(cls, value: str) -> 'ChunkAction':
        """Create from a value (``apply_left``) or a name (``APPLY_LEFT``)."""
        normalized = value.strip().lower().replace('-', '_')
        for action in cls:
            if action.value == normalized:
                return action
        try:
            return cls[normalized.upper()]
        except KeyError:
            raise ValueError(f"Unknown chunk action: {value}") from None

    @property
    def modifies_base(self) -> bool:
        return self in (ChunkAction.APPLY_LEFT, ChunkAction.APPLY_RIGHT)


# =============================================================================
# Ranges
# =============================================================================

@dataclass(frozen=True)
class LineRange:
    """
    Inclusive range of zero-based line indices.

    Always refers to exactly one snapshot (base, left or right).
    """
    start_line: int
    end_line: int

    @property
    def line_count(self) -> int:
        return self.end_line - self.start_line + 1

    def union(self, other: Optional[LineRange]) -> LineRange:
        """Smallest range covering both ranges."""
        if other is None:
            return self
        return LineRange(
            min(self.start_line, other.start_line),
            max(self.end_line, other.end_line)
        )

    def overlaps(self, other: Optional[LineRange]) -> bool:
        """True if both ranges share at least one line."""
        if other is None:
            return False
        return self.start_line <= other.end_line and other.start_line <= self.end_line

    def to_dict(self) -> dict[str, int]:
        return {'start_line': self.start_line, 'end_line': self.end_line}


@dataclass(frozen=True)
class PosRange:
    """Half-open range of character offsets into one snapshot."""
    from_pos: int
    to_pos: int

    @property
    def length(self) -> int:
        return self.to_pos - self.from_pos

    @property
    def is_empty(self) -> bool:
        return self.to_pos <= self.from_pos

    def union(self, other: Optional[PosRange]) -> PosRange:
        if other is None:
            return self
        return PosRange(
            min(self.from_pos, other.from_pos),
            max(self.to_pos, other.to_pos)
        )

    def to_dict(self) -> dict[str, int]:
        return {'from': self.from_pos, 'to': self.to_pos}


def union_lines(target: Optional[LineRange], other: Optional[LineRange]) -> Optional[LineRange]:
    """Union that treats ``None`` as the empty range."""
    if target is None:
        return other
    return target.union(other)


def union_positions(target: Optional[PosRange], other: Optional[PosRange]) -> Optional[PosRange]:
    """Union that treats ``None`` as the empty range."""
    if target is None:
        return other
    return target.union(other)


# =============================================================================
# Diff Models
# =============================================================================

@dataclass(frozen=True)
class EditSpan:
    """
    One edit reported by the line diff primitive.

    ``a`` is the base text, ``b`` the other text. Offsets are half-open.
    """
    from_a: int
    to_a: int
    from_b: int
    to_b: int


@dataclass(frozen=True)
class SideChange:
    """An edit span between base and one side, projected onto lines."""
    side: Side
    base_range: LineRange
    other_range: LineRange
    base_pos: PosRange
    other_pos: PosRange

    @property
    def sort_key(self) -> tuple[int, int]:
        return (self.base_range.start_line, self.base_range.end_line)


# =============================================================================
# Merge Models
# =============================================================================

@dataclass
class MergeChunk:
    """
    A region of the base touched by one or both sides.

    Ranges describe the base as it was when the chunk was computed;
    after any resolution the chunks must be rebuilt.
    Side fields are ``None`` when that side did not contribute.
    """
    id: str
    base_range: LineRange
    left_range: Optional[LineRange] = None
    right_range: Optional[LineRange] = None
    left_base_range: Optional[LineRange] = None
    right_base_range: Optional[LineRange] = None
    base_pos_range: Optional[PosRange] = None
    left_pos_range: Optional[PosRange] = None
    right_pos_range: Optional[PosRange] = None
    kind: ChunkKind = ChunkKind.LEFT_ONLY
    action: ChunkAction = ChunkAction.KEEP_BASE

    @property
    def has_left(self) -> bool:
        return self.left_range is not None

    @property
    def has_right(self) -> bool:
        return self.right_range is not None

    @property
    def is_conflict(self) -> bool:
        return self.kind == ChunkKind.CONFLICT

    def range_for(self, side: Side) -> Optional[LineRange]:
        """Line range in the given side's snapshot."""
        return self.left_range if side == Side.LEFT else self.right_range

    def pos_range_for(self, side: Side) -> Optional[PosRange]:
        """Offset range in the given side's snapshot."""
        return self.left_pos_range if side == Side.LEFT else self.right_pos_range

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        def convert(value: Any) -> Any:
            if value is None:
                return None
            if isinstance(value, Enum):
                return value.value
            return value.to_dict()

        return {
            'id': self.id,
            'kind': self.kind.value,
            'action': self.action.value,
            'base_range': convert(self.base_range),
            'left_range': convert(self.left_range),
            'right_range': convert(self.right_range),
            'left_base_range': convert(self.left_base_range),
            'right_base_range': convert(self.right_base_range),
            'base_pos_range': convert(self.base_pos_range),
            'left_pos_range': convert(self.left_pos_range),
            'right_pos_range': convert(self.right_pos_range),
        }


# =============================================================================
# Document Edit Models
# =============================================================================

@dataclass(frozen=True)
class TextChange:
    """
    A single edit to a live document.

    ``from_pos``/``to_pos`` are offsets in the document before the edit.
    """
    from_pos: int
    to_pos: int
    inserted: str = ""

    @property
    def delta(self) -> int:
        """Change in document length caused by this edit."""
        return len(self.inserted) - (self.to_pos - self.from_pos)
