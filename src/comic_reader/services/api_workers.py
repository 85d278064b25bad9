"""Request runners for non-blocking API calls using Qt threading."""

import itertools
import time
from typing import Callable, Dict

from PySide6.QtCore import QCoreApplication, QObject, QRunnable, QThreadPool, Signal, Slot

from comic_reader.core import NetworkError
from comic_reader.io import ApiResult
from comic_reader.utils.logging import get_logger

LOG = get_logger("comic_reader.workers")

ApiCall = Callable[[], ApiResult]
ResultCallback = Callable[[ApiResult], None]


class WorkerSignals(QObject):
    """
    Signals for communicating results from worker threads.

    QRunnable doesn't inherit from QObject, so we need a separate
    QObject to hold the signals.
    """
    finished = Signal()
    result = Signal(int, object)  # request id, ApiResult


class ApiWorker(QRunnable):
    """
    Worker that runs one API call in a background thread.

    Uses Qt's thread pool for efficient thread management.
    Emits the ApiResult when the call completes, even if it raised.
    """

    def __init__(self, request_id: int, call: ApiCall):
        super().__init__()
        self.request_id = request_id
        self.call = call
        self.signals = WorkerSignals()
        self.setAutoDelete(True)

    @Slot()
    def run(self):
        """Execute the API call in a background thread."""
        try:
            result = self.call()
        except Exception as e:
            # The client reports failures as results; anything else is a bug worth logging
            LOG.exception("Unexpected error in API worker")
            result = ApiResult(error=NetworkError(f"Unexpected request error: {e}"))
        try:
            self.signals.result.emit(self.request_id, result)
        finally:
            self.signals.finished.emit()


class RequestRunner:
    """Executes API calls and hands their results back to the caller's thread."""

    def submit(self, call: ApiCall, on_result: ResultCallback) -> None:
        raise NotImplementedError


class ImmediateRequestRunner(RequestRunner):
    """Runs calls inline on the calling thread. Used by tests and scripts."""

    def submit(self, call: ApiCall, on_result: ResultCallback) -> None:
        try:
            result = call()
        except Exception as e:
            LOG.exception("Unexpected error in inline API call")
            result = ApiResult(error=NetworkError(f"Unexpected request error: {e}"))
        on_result(result)


class ThreadPoolRequestRunner(QObject, RequestRunner):
    """
    Runs calls on a QThreadPool.

    Results are delivered through a queued signal to this object, so callbacks
    always execute on the thread that owns the runner (the UI thread).
    """

    def __init__(self, thread_pool: QThreadPool | None = None):
        super().__init__()
        self._thread_pool = thread_pool or QThreadPool.globalInstance()
        self._callbacks: Dict[int, ResultCallback] = {}
        self._ids = itertools.count(1)

    def submit(self, call: ApiCall, on_result: ResultCallback) -> None:
        request_id = next(self._ids)
        self._callbacks[request_id] = on_result
        worker = ApiWorker(request_id, call)
        worker.signals.result.connect(self._deliver)
        self._thread_pool.start(worker)

    @Slot(int, object)
    def _deliver(self, request_id: int, result: ApiResult) -> None:
        callback = self._callbacks.pop(request_id, None)
        if callback is None:
            return
        callback(result)

    @property
    def pending_count(self) -> int:
        return len(self._callbacks)

    def wait_for_done(self, timeout_ms: int = 3000) -> bool:
        """
        Block until every submitted request has finished and been delivered.

        Used for the final flush on exit, after the event loop has stopped:
        results are queued events, and a delivered result may submit the next
        request, so events are pumped until nothing is outstanding.
        """
        deadline = time.monotonic() + timeout_ms / 1000.0
        while self._callbacks:
            remaining_ms = int((deadline - time.monotonic()) * 1000)
            if remaining_ms <= 0 or not self._thread_pool.waitForDone(remaining_ms):
                return False
            QCoreApplication.processEvents()
        return True
