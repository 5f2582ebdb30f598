import logging

from serial import Serial, SerialException
from serial.tools import list_ports

from ev3connection.conduit.base import Conduit
from ev3connection.conduit.serial_conduit import SerialConduit, serial_port
from ev3connection.config.settings import SerialSettings
from ev3connection.connector.base import AbstractConnector, ConnectorError

logger = logging.getLogger(__name__)


def serial_ports():
    """
    Returns a generator for all available serial port device names.
    """
    for port in list_ports.comports():
        yield port.device


class SerialConnector(AbstractConnector):
    """
    Implements a connector that communicates data via a serial link, such as /dev/rfcomm0 bound to the brick.
    """
    def __init__(self, serial: Serial):
        """
        Creates a new serial connector.
        :param serial - the serial object defining the serial port to connect to.
                The serial instance should not be open.
        """
        super().__init__()
        self._serial = serial
        if serial.is_open:
            raise ValueError("serial object should be initially closed")

    @property
    def endpoint(self):
        return self._serial.port

    def _connected(self):
        return self._serial.is_open

    def _try_open(self):
        s = self._serial
        if not s.is_open:
            try:
                s.open()
                logger.info("opened serial port %s", s.port)
            except SerialException as e:
                logger.warning("error opening serial port %s: %s", s.port, e)
                raise ConnectorError("unable to open %s" % s.port) from e

    def _connect(self) -> Conduit:
        self._try_open()
        return SerialConduit(self._serial)

    def _disconnect(self):
        """ No special actions needed """

    def _try_available(self):
        try:
            return self._serial.port in serial_ports()
        except SerialException:
            return False


def serial_connector(port, settings: SerialSettings=None) -> SerialConnector:
    """
    Creates a connector for the brick on the given serial port.
    :param port: the device name, e.g. /dev/rfcomm0 or COM5
    """
    settings = settings if settings is not None else SerialSettings()
    return SerialConnector(serial_port(port, settings))
