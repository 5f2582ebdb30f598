import logging
from collections import deque

logger = logging.getLogger(__name__)

default_max_buffer_size = 2


class WriteQueue:
    """
    The ordered backlog of payloads waiting to be written to the brick.

    The queue is bounded. Commands for a slow device go stale quickly, so when the backlog is full
    the oldest waiting payloads are discarded to make room for the new one rather than refusing it.
    A payload that has already been partly written (the remainder of a short write, held at the
    head) is in flight and is never discarded.

    Not thread safe: the queue is owned by the serial execution context.
    """

    def __init__(self, max_buffer_size=default_max_buffer_size):
        # one slot for the in-flight head and one for the newest payload
        if max_buffer_size < 2:
            raise ValueError("max_buffer_size must be at least 2, not %s" % max_buffer_size)
        self.max_buffer_size = max_buffer_size
        self.evicted = 0
        self._pending = deque()
        self._head_in_flight = False

    def __len__(self):
        return len(self._pending)

    @property
    def is_empty(self):
        return not self._pending

    @property
    def head_in_flight(self):
        return self._head_in_flight

    def enqueue(self, payload):
        """ appends a payload to the tail, first evicting stale payloads if the queue is full. """
        self._dismiss_if_needed()
        self._pending.append(payload)

    def push_front(self, payload):
        """ puts back the unwritten remainder of a payload so it is written before anything else. """
        self._pending.appendleft(payload)
        self._head_in_flight = True

    def dequeue_front(self):
        """
        :return: the payload at the head, or None when the queue is empty.
        """
        if not self._pending:
            return None
        self._head_in_flight = False
        return self._pending.popleft()

    def clear(self):
        self._pending.clear()
        self._head_in_flight = False

    def _dismiss_if_needed(self):
        # keep the in-flight head and drop the next oldest until the new payload fits
        protected = 1 if self._head_in_flight else 0
        dismissed = 0
        while len(self._pending) >= self.max_buffer_size:
            del self._pending[protected]
            dismissed += 1
        if dismissed:
            self.evicted += dismissed
            logger.info("cleared write buffer: dismissed %d stale command(s)", dismissed)

    def __iter__(self):
        return iter(list(self._pending))
