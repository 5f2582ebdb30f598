"""
Implements a conduit over a serial port, such as an rfcomm device bound to the brick's Bluetooth address.
"""

import logging

import serial
from serial import SerialException

from ev3connection.conduit.base import Conduit

logger = logging.getLogger(__name__)


class SerialConduit(Conduit):
    """
    A conduit that provides comms via a serial port.
    The port should be configured with write_timeout=0 so that writes never block, and with a read timeout
    so that a stalled read eventually returns.
    """

    def __init__(self, ser: serial.Serial):
        self.ser = ser

    @property
    def target(self):
        return self.ser

    @property
    def input(self):
        return self.ser

    @property
    def output(self):
        return self.ser

    @property
    def open(self) -> bool:
        return self.ser.is_open

    @property
    def bytes_available(self) -> bool:
        return self.ser.in_waiting > 0

    @property
    def space_available(self) -> bool:
        try:
            return self.ser.out_waiting == 0
        except (AttributeError, NotImplementedError):
            # not every platform can report the output queue
            return self.ser.is_open

    def close(self):
        try:
            self.ser.close()
        except SerialException as e:
            logger.warning("error closing serial port %s: %s", self.ser.port, e)


def serial_port(port, settings):
    """
    Creates a closed serial port configured for talking to a brick.
    :param port: the device name, e.g. /dev/rfcomm0 or COM5
    :param settings: SerialSettings
    """
    ser = serial.Serial()
    ser.port = port
    ser.baudrate = settings.baudrate
    ser.timeout = settings.read_timeout
    ser.write_timeout = 0
    return ser
