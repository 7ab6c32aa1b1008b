"""
Background workers for non-blocking operations.

Provides QThread-based workers for:
- Building merge chunks
- Resolving a chunk
- Saving the resolved base

All workers use Qt signals for thread-safe communication
with the UI thread.
"""

from chunkmerge.workers.base_worker import (
    BaseWorker,
    CancelledException,
    WorkerSignals,
    WorkerState,
    WorkerThread,
)
from chunkmerge.workers.merge_worker import (
    ApplyChunkWorker,
    ChunkBuildFromFilesWorker,
    ChunkBuildWorker,
    SaveMergeWorker,
)

__all__ = [
    # Base
    'BaseWorker',
    'CancelledException',
    'WorkerSignals',
    'WorkerState',
    'WorkerThread',
    # Merge
    'ApplyChunkWorker',
    'ChunkBuildFromFilesWorker',
    'ChunkBuildWorker',
    'SaveMergeWorker',
]
