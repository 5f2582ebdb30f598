"""
The connection to a brick: one conduit, opened and closed as a unit, with all stream access
serialized through a single execution context.
"""
import logging
from abc import abstractmethod
from concurrent.futures import Future

from ev3connection.command import Command
from ev3connection.config.settings import ConnectionSettings
from ev3connection.connector.base import Connector
from ev3connection.protocol.driver import StreamDriver
from ev3connection.protocol.monitor import StreamMonitor
from ev3connection.protocol.write_queue import WriteQueue
from ev3connection.support.events import EventSource
from ev3connection.support.executor import SerialExecutor

logger = logging.getLogger(__name__)


class ConnectionChangedListener:
    """ notified when the connection opens (True) or closes (False) """

    @abstractmethod
    def connection_changed(self, connected: bool):
        raise NotImplementedError


class ReportListener:
    """ notified with the payload of each report read from the brick """

    @abstractmethod
    def report_received(self, report: bytes):
        raise NotImplementedError


class ConnectionManager:
    """
    Handles all read and write operations on the connection to a brick.

    Reads and writes are posted to a serial executor which runs them strictly one after the other, so
    the streams are never accessed concurrently. write() may be called from any thread.

    Connection listeners are called synchronously from open() and close(). Report listeners are called on
    a separate notification executor, in the order the reports were read.

    :param connector: provides the conduit when the connection is opened
    :param settings: queue size, write delay and polling interval
    :param notifier: executor used to deliver reports, a new SerialExecutor when not given
    """

    def __init__(self, connector: Connector, settings: ConnectionSettings=None, notifier=None):
        self.connector = connector
        self.settings = settings if settings is not None else ConnectionSettings()
        self.connection_events = EventSource()
        self.report_events = EventSource()
        self._serial = SerialExecutor('ev3-connection')
        self._notifier = notifier if notifier is not None else SerialExecutor('ev3-notify')
        self._owns_notifier = notifier is None
        self._driver = StreamDriver(self._report_received, WriteQueue(self.settings.max_buffer_size),
                                    write_delay=self.settings.write_delay)
        self._conduit = None
        self._monitor = None
        self._closed = True

    @property
    def is_open(self):
        return not self._closed

    @property
    def driver(self) -> StreamDriver:
        return self._driver

    def add_connection_changed_listener(self, listener: ConnectionChangedListener):
        self.connection_events.add(listener.connection_changed)

    def add_report_listener(self, listener: ReportListener):
        self.report_events.add(listener.report_received)

    def open(self):
        """ opens the connection. Does nothing if it is already open.
            Raises ConnectorError if the connector cannot provide a conduit. """
        if not self._closed:
            return

        conduit = self.connector.connect()
        self._conduit = conduit
        self._serial.call(self._driver.attach, conduit)
        self._monitor = StreamMonitor(conduit, self.stream_event, self._wants_space,
                                      poll_interval=self.settings.poll_interval)
        self._monitor.start()
        self._closed = False
        logger.info("connection opened to %s", self.connector.endpoint)

        self.connection_events.fire(True)

    def close(self):
        """ closes the connection. Listeners are told before the streams are torn down.
            Does nothing if the connection is closed. """
        if self._closed:
            return

        self.connection_events.fire(False)

        monitor, self._monitor = self._monitor, None
        monitor.stop()
        conduit, self._conduit = self._conduit, None
        try:
            conduit.close()
        except (OSError, ValueError) as e:
            logger.warning("error closing conduit: %s", e)
        self._serial.call(self._driver.detach)
        self.connector.disconnect()
        self._closed = True
        logger.info("connection closed to %s", self.connector.endpoint)

    def shutdown(self):
        """ closes the connection and stops the executors. The manager cannot be used afterwards. """
        self.close()
        self._serial.shutdown()
        if self._owns_notifier:
            self._notifier.shutdown()

    def write(self, command: Command) -> Future:
        """ writes a command to the brick. The write happens on the serial executor. """
        return self.write_bytes(command.to_bytes())

    def write_bytes(self, data) -> Future:
        return self._serial.submit(self._driver.write, data)

    def stream_event(self, event) -> Future:
        """ the readiness callback for the conduit's streams. """
        return self._serial.submit(self._driver.handle_event, event)

    def flush(self, timeout=None):
        """ waits until operations already posted have run and their reports have been delivered. """
        self._serial.flush(timeout)
        self._notifier.submit(_no_op).result(timeout)

    def _wants_space(self):
        driver = self._driver
        return not driver.can_write or not driver.queue.is_empty

    def _report_received(self, report):
        self._notifier.submit(self.report_events.fire, report)

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def _no_op():
    pass
