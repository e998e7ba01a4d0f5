"""Background execution on the Qt thread pool."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from PyQt6.QtCore import QObject, QRunnable, QThreadPool, pyqtSignal

logger = logging.getLogger(__name__)


class WorkerSignals(QObject):
    result = pyqtSignal(object)
    error = pyqtSignal(object)
    finished = pyqtSignal()


class Worker(QRunnable):
    """Runs one callable off the GUI thread and reports through ``signals``."""

    def __init__(self, task: Callable[[], Any]) -> None:
        super().__init__()
        self.task = task
        self.signals = WorkerSignals()
        # Lifetime is managed by BackgroundRunner.
        self.setAutoDelete(False)

    def run(self) -> None:
        try:
            outcome = self.task()
        except Exception as exc:  # noqa: BLE001
            logger.debug("Background task %r failed: %s", self.task, exc)
            self.signals.error.emit(exc)
        else:
            self.signals.result.emit(outcome)
        finally:
            self.signals.finished.emit()


class BackgroundRunner:
    """Runs callables on the thread pool; callbacks arrive on the GUI thread."""

    def __init__(self, thread_pool: QThreadPool | None = None) -> None:
        self.thread_pool = thread_pool or QThreadPool.globalInstance()
        self._active_workers: set[Worker] = set()

    def run(
        self,
        fn: Callable[[], Any],
        *,
        on_result: Callable[[Any], None] | None = None,
        on_error: Callable[[Exception], None] | None = None,
        on_finished: Callable[[], None] | None = None,
    ) -> None:
        worker = Worker(fn)
        self._active_workers.add(worker)
        if on_result is not None:
            worker.signals.result.connect(on_result)
        if on_error is not None:
            worker.signals.error.connect(on_error)

        def _release() -> None:
            self._active_workers.discard(worker)
            if on_finished is not None:
                on_finished()

        worker.signals.finished.connect(_release)
        self.thread_pool.start(worker)

    @property
    def active_count(self) -> int:
        return len(self._active_workers)
