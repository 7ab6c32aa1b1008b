"""
Base worker for running merge jobs off the UI thread.

A worker is a QObject with a ``do_work`` method. ``run`` wraps it,
tracks the state and turns the outcome into exactly one of the
``finished``, ``error`` or ``cancelled`` signals.
"""

from __future__ import annotations

import logging
from enum import Enum, auto
from typing import Any, Optional

from PyQt6.QtCore import QMutex, QMutexLocker, QObject, Qt, QThread, pyqtSignal, pyqtSlot


class WorkerState(Enum):
    """Lifecycle of a worker."""
    PENDING = auto()
    RUNNING = auto()
    CANCELLING = auto()
    CANCELLED = auto()
    COMPLETED = auto()
    FAILED = auto()


class WorkerSignals(QObject):
    """Signals a worker emits towards the UI thread."""
    progress = pyqtSignal(int, int, str)   # (current, total, message)
    status = pyqtSignal(str)
    started = pyqtSignal()
    finished = pyqtSignal(object)          # result of do_work
    error = pyqtSignal(str, str)           # (exception type, message)
    cancelled = pyqtSignal()
    state_changed = pyqtSignal(object)     # WorkerState


class CancelledException(Exception):
    """Raised from ``check_cancelled`` to unwind a cancelled job."""


class BaseWorker(QObject):
    """
    Base class for merge workers.

    Subclasses implement ``do_work`` and call ``check_cancelled``
    between steps. Run it on a thread with :class:`WorkerThread`, or
    call ``run`` directly to execute synchronously.
    """

    def __init__(self, parent: Optional[QObject] = None):
        super().__init__(parent)
        self.signals = WorkerSignals()
        self._mutex = QMutex()
        self._state = WorkerState.PENDING
        self._cancel_requested = False
        self._result: Any = None
        self._error: Optional[tuple[str, str]] = None

    @property
    def state(self) -> WorkerState:
        with QMutexLocker(self._mutex):
            return self._state

    def _set_state(self, state: WorkerState) -> None:
        with QMutexLocker(self._mutex):
            self._state = state
        self.signals.state_changed.emit(state)

    @property
    def is_cancelled(self) -> bool:
        with QMutexLocker(self._mutex):
            return self._cancel_requested

    @property
    def result(self) -> Any:
        """Return value of ``do_work`` once completed."""
        return self._result

    @property
    def error(self) -> Optional[tuple[str, str]]:
        """``(exception type, message)`` once failed."""
        return self._error

    def cancel(self) -> None:
        """Ask the worker to stop at its next cancellation check."""
        with QMutexLocker(self._mutex):
            self._cancel_requested = True
        if self.state == WorkerState.RUNNING:
            self._set_state(WorkerState.CANCELLING)

    @pyqtSlot()
    def run(self) -> None:
        self._set_state(WorkerState.RUNNING)
        self.signals.started.emit()

        try:
            result = self.do_work()
            self.check_cancelled()
        except CancelledException:
            logging.info(f"{type(self).__name__} - Cancelled")
            self._set_state(WorkerState.CANCELLED)
            self.signals.cancelled.emit()
            return
        except Exception as e:
            logging.error(f"{type(self).__name__} - {type(e).__name__}: {e}")
            self._error = (type(e).__name__, str(e))
            self._set_state(WorkerState.FAILED)
            self.signals.error.emit(type(e).__name__, str(e))
            return

        self._result = result
        self._set_state(WorkerState.COMPLETED)
        self.signals.finished.emit(result)

    def do_work(self) -> Any:
        raise NotImplementedError

    def report_progress(self, current: int, total: int, message: str = "") -> None:
        self.signals.progress.emit(current, total, message)

    def report_status(self, message: str) -> None:
        self.signals.status.emit(message)

    def check_cancelled(self) -> None:
        """Raise :class:`CancelledException` if a cancel was requested."""
        if self.is_cancelled:
            raise CancelledException(f"{type(self).__name__} cancelled")


class WorkerThread(QThread):
    """QThread that owns one worker and quits when it is done."""

    def __init__(self, worker: BaseWorker, parent: Optional[QObject] = None):
        super().__init__(parent)
        self.worker = worker
        self.worker.moveToThread(self)

        self.started.connect(self.worker.run)
        # The signals object stays on the creating thread; quit directly.
        for signal in (worker.signals.finished, worker.signals.error, worker.signals.cancelled):
            signal.connect(self.quit, Qt.ConnectionType.DirectConnection)

    def cancel(self) -> None:
        self.worker.cancel()

    @property
    def result(self) -> Any:
        return self.worker.result

    @property
    def error(self) -> Optional[tuple[str, str]]:
        return self.worker.error
