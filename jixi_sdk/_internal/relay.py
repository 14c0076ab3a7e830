"""Hand-off of completion callbacks to the controlling thread."""

import logging
import queue
import threading
from collections.abc import Callable

logger = logging.getLogger(__name__)

PendingCallback = Callable[[], None]


class CompletionRelay:
    """Single-consumer queue of deferred callbacks.

    Any thread may ``post``. Only the controlling thread may ``drain``;
    the first thread to drain becomes the controlling thread unless one
    was bound explicitly. Callbacks run in FIFO order. Each drain runs
    only the callbacks queued when it started, so callbacks posted while
    draining wait for the next tick.
    """

    def __init__(self) -> None:
        self._queue: queue.SimpleQueue[PendingCallback] = queue.SimpleQueue()
        self._owner: int | None = None

    def bind_to_current_thread(self) -> None:
        """Make the calling thread the controlling thread."""
        self._owner = threading.get_ident()

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def __len__(self) -> int:
        return self._queue.qsize()

    def post(self, callback: PendingCallback) -> None:
        """Enqueue a callback for the next drain. Safe from any thread."""
        self._queue.put(callback)

    def drain(self) -> int:
        """Invoke the callbacks queued so far, in order.

        A callback that raises is logged and the drain moves on, so one
        faulty callback does not starve the rest.

        Returns:
            Number of callbacks invoked.

        Raises:
            RuntimeError: If called from a thread other than the controlling thread.
        """
        current = threading.get_ident()
        if self._owner is None:
            self._owner = current
        elif self._owner != current:
            raise RuntimeError("CompletionRelay.drain() must be called from the controlling thread")

        count = self._queue.qsize()
        invoked = 0
        for _ in range(count):
            try:
                callback = self._queue.get_nowait()
            except queue.Empty:
                break
            invoked += 1
            try:
                callback()
            except Exception:
                logger.exception("[jixi] Completion callback raised")
        return invoked
