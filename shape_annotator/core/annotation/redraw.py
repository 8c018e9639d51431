"""
Frame-coalesced redraw scheduling.

State changes request a redraw; the scheduler asks the host for a single
display-refresh callback and renders once per frame no matter how many
requests arrived in between.
"""

import itertools
import logging
import queue
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


class FrameClock:
    """
    Minimal display-refresh source.

    Callbacks requested between two ``tick()`` calls run on the next tick.
    Hosts with a native refresh callback can pass their own
    ``request_frame``/``cancel_frame`` pair to ``RedrawScheduler`` instead.
    """

    def __init__(self):
        self._callbacks: Dict[int, Callable[[], None]] = {}
        self._handles = itertools.count(1)

    def request_frame(self, callback: Callable[[], None]) -> int:
        handle = next(self._handles)
        self._callbacks[handle] = callback
        return handle

    def cancel_frame(self, handle: int):
        self._callbacks.pop(handle, None)

    @property
    def pending(self) -> int:
        return len(self._callbacks)

    def tick(self) -> int:
        """
        Run the callbacks due for this frame.

        Returns:
            Number of callbacks run
        """
        due = self._callbacks
        self._callbacks = {}
        for callback in due.values():
            callback()
        return len(due)


class RedrawScheduler:
    """
    Coalesces redraw requests into one render per frame.

    Requests are queued for a single consumer, the frame callback, which
    drains the queue and renders once. At most one frame is pending at any
    time, and ``close()`` cancels it so a torn-down surface is never drawn.
    """

    def __init__(
        self,
        render: Callable[[], Any],
        request_frame: Callable[[Callable[[], None]], Any],
        cancel_frame: Callable[[Any], None],
    ):
        """
        Initialize scheduler.

        Args:
            render: Draws the current state; called at most once per frame
            request_frame: Host hook scheduling a callback for the next
                display refresh, returning a handle
            cancel_frame: Host hook cancelling a scheduled callback
        """
        self._render = render
        self._request_frame = request_frame
        self._cancel_frame = cancel_frame

        self._requests: "queue.SimpleQueue[Optional[str]]" = queue.SimpleQueue()
        self._pending_frame: Optional[Any] = None
        self._closed = False
        self.frames_rendered = 0

    @property
    def pending(self) -> bool:
        return self._pending_frame is not None

    @property
    def closed(self) -> bool:
        return self._closed

    def request_redraw(self, reason: Optional[str] = None) -> bool:
        """
        Ask for the current state to be drawn on the next frame.

        Returns:
            False if the scheduler is closed and the request was dropped
        """
        if self._closed:
            return False

        self._requests.put(reason)
        if self._pending_frame is None:
            self._pending_frame = self._request_frame(self._on_frame)
        return True

    def _drain(self) -> List[Optional[str]]:
        reasons = []
        while True:
            try:
                reasons.append(self._requests.get_nowait())
            except queue.Empty:
                return reasons

    def _on_frame(self):
        self._pending_frame = None
        if self._closed:
            return

        reasons = self._drain()
        if not reasons:
            return

        logger.debug("Rendering frame for %d coalesced request(s)", len(reasons))
        self.frames_rendered += 1
        self._render()

    def close(self):
        """Cancel any pending frame and drop further requests."""
        if self._closed:
            return
        self._closed = True
        if self._pending_frame is not None:
            self._cancel_frame(self._pending_frame)
            self._pending_frame = None
        self._drain()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()
