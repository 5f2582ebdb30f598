"""
Moves bytes between the write queue, the conduit and the report callback.

All methods are expected to be called from the serial execution context that owns the driver.
"""
import logging
import time

from ev3connection.conduit.base import Conduit
from ev3connection.protocol.frame import Frame, FrameError, read_frame
from ev3connection.protocol.write_queue import WriteQueue

logger = logging.getLogger(__name__)

# seconds to pause after each write - too much traffic disconnects the brick
default_write_delay = 0.125


class StreamEvent:
    """ readiness signals raised by the transport. """
    OPEN_COMPLETED = 'open-completed'
    HAS_BYTES_AVAILABLE = 'has-bytes-available'
    HAS_SPACE_AVAILABLE = 'has-space-available'
    ERROR_OCCURRED = 'error-occurred'
    END_ENCOUNTERED = 'end-encountered'


class StreamDriver:
    """
    Performs the byte transfer on an attached conduit.

    Writes are taken from the head of the queue. When the transport accepts only part of a payload
    the remainder goes back to the front of the queue, and writing stops until the transport signals
    space again. After every transfer the driver sleeps for write_delay, which throttles the
    calling context so the brick's receive buffer is not overrun.

    :param report_callback: called with the payload of each frame read.
    """

    def __init__(self, report_callback, queue: WriteQueue=None, write_delay=default_write_delay, sleep=time.sleep):
        self.report_callback = report_callback
        self.queue = queue if queue is not None else WriteQueue()
        self.write_delay = write_delay
        self.can_write = True
        self._conduit = None
        self._sleep = sleep

    @property
    def conduit(self) -> Conduit:
        return self._conduit

    @property
    def attached(self):
        return self._conduit is not None

    def attach(self, conduit: Conduit):
        self._conduit = conduit

    def detach(self) -> Conduit:
        """ unbinds the conduit. A partly written payload cannot be resumed on another conduit and is
            dropped. Whole payloads stay queued for the next attach. """
        conduit = self._conduit
        self._conduit = None
        self.can_write = True
        if self.queue.head_in_flight:
            remainder = self.queue.dequeue_front()
            logger.info("dropped %d unwritten byte(s) of a partly written payload", len(remainder))
        return conduit

    def write(self, payload):
        """ queues a payload and writes the head of the queue if the transport is ready. """
        self.queue.enqueue(bytes(payload))
        if self.can_write:
            self.attempt_write()

    def attempt_write(self):
        queue = self.queue
        conduit = self._conduit
        if queue.is_empty or conduit is None:
            return

        self.can_write = False

        try:
            has_space = conduit.space_available
        except (OSError, ValueError) as e:
            logger.warning("stream has no space available: %s", e)
            return
        if not has_space:
            logger.warning("stream has no space available")
            return

        data = queue.dequeue_front()
        logger.debug("writing data: %s", data.hex())
        try:
            written = conduit.output.write(data)
        except (OSError, ValueError) as e:
            logger.error("error while writing data to the output stream: %s", e)
            self.can_write = True
            return

        if written is None:
            written = 0
        if written < len(data):
            logger.warning("not enough space in stream: %d of %d bytes written", written, len(data))
            queue.push_front(data[written:])

        logger.debug("bytes written %d, write buffer size: %d", written, len(queue))
        self._sleep(self.write_delay)

    def read_frame(self) -> Frame:
        return read_frame(self._conduit.input)

    def read_report(self):
        """ reads one frame from the input and passes its payload on. Bad frames are logged and dropped. """
        if self._conduit is None:
            return None
        try:
            frame = self.read_frame()
        except FrameError as e:
            logger.warning("error on input stream: %s", e)
            return None
        except (OSError, ValueError) as e:
            logger.warning("error on input stream while reading a frame: %s", e)
            return None

        logger.debug("read data: %s", frame.payload.hex())
        self.report_callback(frame.payload)
        return frame

    def handle_event(self, event):
        if event == StreamEvent.HAS_BYTES_AVAILABLE:
            self.read_report()
        elif event == StreamEvent.HAS_SPACE_AVAILABLE:
            self.can_write = True
            self.attempt_write()
        elif event == StreamEvent.OPEN_COMPLETED:
            logger.info("stream opened")
        elif event == StreamEvent.ERROR_OCCURRED:
            logger.warning("error on stream")
        elif event == StreamEvent.END_ENCOUNTERED:
            logger.info("end of stream encountered")
        else:
            logger.info("connection event: %s", event)
