"""
Workers for merge operations.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from PyQt6.QtCore import QObject

from chunkmerge.workers.base_worker import BaseWorker
from chunkmerge.core.diff.text_diff import TextCompareOptions, TextDiffEngine
from chunkmerge.core.merge.resolution import apply_chunk_action
from chunkmerge.core.merge.three_way import ThreeWayChunkBuilder
from chunkmerge.core.models import ChunkAction, MergeChunk
from chunkmerge.services.file_io import FileIOService


class ChunkBuildWorker(BaseWorker):
    """
    Worker that builds merge chunks off the UI thread.
    """

    def __init__(
        self,
        base_content: str,
        left_content: str,
        right_content: str,
        options: Optional[TextCompareOptions] = None,
        parent: Optional[QObject] = None
    ):
        super().__init__(parent)
        self.base_content = base_content
        self.left_content = left_content
        self.right_content = right_content
        self.options = options

    def do_work(self) -> list[MergeChunk]:
        """Build chunks for the three snapshots."""
        self.report_status("Computing chunks...")
        builder = ThreeWayChunkBuilder(TextDiffEngine(self.options))
        chunks = builder.build(self.base_content, self.left_content, self.right_content)
        self.check_cancelled()
        self.report_status(f"Found {len(chunks)} chunks")
        return chunks


class ChunkBuildFromFilesWorker(BaseWorker):
    """
    Worker that reads three files and builds merge chunks.

    Returns a tuple of (base, left, right, chunks) so the caller can
    resolve chunks against exactly the texts that were read.
    """

    def __init__(
        self,
        base_path: str | Path,
        left_path: str | Path,
        right_path: str | Path,
        options: Optional[TextCompareOptions] = None,
        parent: Optional[QObject] = None
    ):
        super().__init__(parent)
        self.paths = (Path(base_path), Path(left_path), Path(right_path))
        self.options = options
        self.file_io = FileIOService()

    def do_work(self) -> tuple[str, str, str, list[MergeChunk]]:
        texts = []
        for i, path in enumerate(self.paths):
            self.check_cancelled()
            self.report_progress(i, len(self.paths), f"Reading {path.name}...")
            result = self.file_io.read_file(path)
            if not result.success:
                raise OSError(result.error)
            texts.append(result.text)

        self.report_progress(len(self.paths), len(self.paths), "Computing chunks...")
        base, left, right = texts
        chunks = ThreeWayChunkBuilder(TextDiffEngine(self.options)).build(base, left, right)
        return base, left, right, chunks


class ApplyChunkWorker(BaseWorker):
    """
    Worker that resolves a single chunk.
    """

    def __init__(
        self,
        base_content: str,
        left_content: str,
        right_content: str,
        chunk: MergeChunk,
        action: ChunkAction,
        parent: Optional[QObject] = None
    ):
        super().__init__(parent)
        self.base_content = base_content
        self.left_content = left_content
        self.right_content = right_content
        self.chunk = chunk
        self.action = action

    def do_work(self) -> str:
        """Return the new base text."""
        return apply_chunk_action(
            self.base_content,
            self.left_content,
            self.right_content,
            self.chunk,
            self.action
        )


class SaveMergeWorker(BaseWorker):
    """
    Worker for saving a resolved base to file.
    """

    def __init__(
        self,
        content: str,
        output_path: str | Path,
        encoding: str = 'utf-8',
        create_backup: bool = True,
        parent: Optional[QObject] = None
    ):
        super().__init__(parent)
        self.content = content
        self.output_path = Path(output_path)
        self.encoding = encoding
        self.create_backup = create_backup

    def do_work(self) -> bool:
        """Save the content."""
        result = FileIOService().write_text(
            self.output_path,
            self.content,
            encoding=self.encoding,
            create_backup=self.create_backup
        )
        if not result.success:
            raise OSError(result.error)
        return True
