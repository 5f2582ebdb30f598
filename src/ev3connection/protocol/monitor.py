import logging

from ev3connection.conduit.base import Conduit
from ev3connection.protocol.driver import StreamEvent
from ev3connection.support.async_loop import AsyncLoop

logger = logging.getLogger(__name__)

default_poll_interval = 0.01


class StreamMonitor(AsyncLoop):
    """
    Watches a conduit on a background thread and posts readiness events.

    An event of a given kind is not posted again while the previous one is still pending, so a
    slow reader is not flooded with bytes-available events. post() should return a future (or
    None when the event is handled synchronously).

    :param conduit: the conduit to watch
    :param post: called with each StreamEvent
    :param wants_space: returns True while the writer is waiting for space on the output
    :param poll_interval: seconds between polls
    """

    def __init__(self, conduit: Conduit, post, wants_space=lambda: True, poll_interval=default_poll_interval):
        super().__init__(name='ev3-stream-monitor')
        self.conduit = conduit
        self.post = post
        self.wants_space = wants_space
        self.poll_interval = poll_interval
        self._pending = {}
        self._ended = False

    def startup(self):
        self._post(StreamEvent.OPEN_COMPLETED)

    def loop(self):
        self.poll()
        self.wait(self.poll_interval)

    def exception_handler(self, e):
        logger.warning("error polling stream: %s", e)
        self._post(StreamEvent.ERROR_OCCURRED)
        self.wait(self.poll_interval)

    def poll(self):
        conduit = self.conduit
        if not conduit.open:
            if not self._ended:
                self._ended = True
                self._post(StreamEvent.END_ENCOUNTERED)
            return
        if conduit.bytes_available and self._idle(StreamEvent.HAS_BYTES_AVAILABLE):
            self._post(StreamEvent.HAS_BYTES_AVAILABLE)
        if self.wants_space() and conduit.space_available and self._idle(StreamEvent.HAS_SPACE_AVAILABLE):
            self._post(StreamEvent.HAS_SPACE_AVAILABLE)

    def _idle(self, event):
        future = self._pending.get(event)
        return future is None or future.done()

    def _post(self, event):
        self._pending[event] = self.post(event)
