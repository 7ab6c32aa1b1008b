"""Tests for chunkmerge.core.merge.decorations."""
from __future__ import annotations

from chunkmerge.core.merge.decorations import (
    BASE_TARGET_CLASS,
    BaseTargetDecorations,
    build_base_target_decorations,
    map_position,
)
from chunkmerge.core.merge.three_way import build_three_way_chunks
from chunkmerge.core.models import LineRange, MergeChunk, TextChange


class TestBuildDecorations:
    """Tests for projecting chunks onto base lines."""

    def test_no_chunks(self):
        assert len(build_base_target_decorations("a\n", [])) == 0

    def test_single_line_chunk(self, conflicting):
        base = conflicting[0]
        decorations = build_base_target_decorations(base, build_three_way_chunks(*conflicting))

        assert decorations.offsets == [6]
        assert decorations.lines(base) == [1]
        assert all(d.css_class == BASE_TARGET_CLASS for d in decorations)

    def test_every_line_of_a_chunk(self, adjacent):
        base = adjacent[0]
        decorations = build_base_target_decorations(base, build_three_way_chunks(*adjacent))

        assert decorations.offsets == [0, 4]

    def test_several_chunks(self, disjoint):
        base = disjoint[0]
        decorations = build_base_target_decorations(base, build_three_way_chunks(*disjoint))

        assert decorations.lines(base) == [0, 2]

    def test_ranges_clamped_to_shorter_document(self):
        chunk = MergeChunk("chunk-1", LineRange(5, 7), left_range=LineRange(5, 5))
        decorations = build_base_target_decorations("a\nb\n", [chunk])

        assert decorations.offsets == [4]

    def test_chunk_without_sides_is_skipped(self):
        chunk = MergeChunk("chunk-1", LineRange(0, 0))
        assert len(build_base_target_decorations("a\n", [chunk])) == 0

    def test_custom_class(self, conflicting):
        decorations = build_base_target_decorations(
            conflicting[0], build_three_way_chunks(*conflicting), css_class="merge-target"
        )
        assert [d.css_class for d in decorations] == ["merge-target"]

    def test_overlapping_lines_are_deduplicated(self):
        chunks = [
            MergeChunk("chunk-1", LineRange(0, 1), left_range=LineRange(0, 1)),
            MergeChunk("chunk-2", LineRange(1, 2), right_range=LineRange(1, 2)),
        ]
        decorations = build_base_target_decorations("a\nb\nc\n", chunks)

        assert decorations.offsets == [0, 2, 4]


class TestMapChanges:
    """Tests for moving decorations through document edits."""

    def test_insertion_before_anchor_shifts_it(self, conflicting):
        decorations = BaseTargetDecorations.from_offsets([6])

        mapped = decorations.map_changes([TextChange(0, 0, "zz\n")])

        assert mapped.offsets == [9]
        assert mapped.lines("zz\n" + conflicting[0]) == [2]

    def test_deletion_around_anchor_collapses_it(self):
        mapped = BaseTargetDecorations.from_offsets([6]).map_changes([TextChange(4, 8)])
        assert mapped.offsets == [4]

    def test_insertion_at_anchor_keeps_it(self):
        mapped = BaseTargetDecorations.from_offsets([6]).map_changes([TextChange(6, 6, "x\n")])
        assert mapped.offsets == [6]

    def test_edit_after_anchor(self):
        mapped = BaseTargetDecorations.from_offsets([6]).map_changes([TextChange(10, 12)])
        assert mapped.offsets == [6]

    def test_multiple_changes_accumulate(self):
        changes = [TextChange(8, 8, "abc"), TextChange(0, 2, "")]
        assert map_position(10, sorted(changes, key=lambda c: c.from_pos)) == 11

    def test_collapsed_anchors_merge(self):
        decorations = BaseTargetDecorations.from_offsets([0, 6])
        mapped = decorations.map_changes([TextChange(0, 8, "")])

        assert mapped.offsets == [0]

    def test_no_changes_returns_same_set(self):
        decorations = BaseTargetDecorations.from_offsets([3, 1, 3])

        assert decorations.offsets == [1, 3]
        assert decorations.map_changes([]) is decorations
