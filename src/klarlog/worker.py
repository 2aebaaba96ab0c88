"""
Single-thread FIFO executor.

Every destination that must serialize its side effects owns one
``SerialWorker``. Submitted callables run one at a time, in submission
order, on a daemon thread that is started on first use.

``stop`` retires the current thread together with its queue. A later
``submit`` starts a new thread on a fresh queue, and that thread waits for
its predecessor to finish before it runs anything, so at most one
callable executes at any moment even across restarts.
"""

from __future__ import annotations

import queue
import threading
import weakref
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any, Callable, Optional, TypeVar

from .core import get_diagnostics_logger

T = TypeVar("T")

logger = get_diagnostics_logger("klarlog.worker")

_STOP = object()

# indices into the state list shared with the thread and the finalizer
_QUEUE, _THREAD, _PREDECESSOR = 0, 1, 2

_current = threading.local()


class SerialWorker:
    """Mutual exclusion plus FIFO ordering for one resource."""

    def __init__(self, name: str = "klarlog-worker"):
        self._name = name
        self._lock = threading.Lock()
        self._state: list[Any] = [queue.SimpleQueue(), None, None]
        weakref.finalize(self, SerialWorker._drain, self._lock, self._state)

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_running(self) -> bool:
        thread = self._state[_THREAD]
        return thread is not None and thread.is_alive()

    def submit(self, fn: Callable[..., T], *args: Any) -> Future[T]:
        """Queue ``fn(*args)`` and return a future for its result."""
        future: Future[T] = Future()
        with self._lock:
            self._ensure_started()
            self._state[_QUEUE].put((future, fn, args))
        return future

    def flush(self, timeout: Optional[float] = None) -> bool:
        """Block until everything submitted so far has run."""
        if getattr(_current, "owner", None) is self._state:
            return True
        try:
            self.submit(_noop).result(timeout=timeout)
        except FutureTimeoutError:
            return False
        return True

    def stop(self, timeout: Optional[float] = None) -> None:
        """Drain the queue and stop the thread. A later ``submit`` restarts it."""
        thread = SerialWorker._retire(self._lock, self._state)
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)

    def _ensure_started(self) -> None:
        state = self._state
        thread = state[_THREAD]
        if thread is not None and thread.is_alive():
            return
        predecessor = state[_PREDECESSOR] if thread is None else thread
        thread = threading.Thread(
            target=_run,
            args=(state[_QUEUE], predecessor, state),
            name=self._name,
            daemon=True,
        )
        state[_THREAD] = thread
        state[_PREDECESSOR] = None
        thread.start()

    @staticmethod
    def _retire(lock: threading.Lock, state: list[Any]) -> Optional[threading.Thread]:
        with lock:
            thread = state[_THREAD]
            if thread is None:
                return None
            state[_QUEUE].put(_STOP)
            state[_QUEUE] = queue.SimpleQueue()
            state[_THREAD] = None
            state[_PREDECESSOR] = thread
        return thread

    @staticmethod
    def _drain(lock: threading.Lock, state: list[Any]) -> None:
        # interpreter exit or garbage collection: let pending work finish
        thread = SerialWorker._retire(lock, state)
        if thread is not None and thread is not threading.current_thread():
            thread.join()


def _noop() -> None:
    return None


def _run(
    work_queue: "queue.SimpleQueue[Any]",
    predecessor: Optional[threading.Thread],
    owner: list[Any],
) -> None:
    if predecessor is not None:
        predecessor.join()
    _current.owner = owner
    while True:
        item = work_queue.get()
        if item is _STOP:
            return
        future, fn, args = item
        if not future.set_running_or_notify_cancel():
            continue
        try:
            result = fn(*args)
        except Exception as exc:
            logger.debug("worker_task_failed", error=repr(exc))
            future.set_exception(exc)
        else:
            future.set_result(result)
