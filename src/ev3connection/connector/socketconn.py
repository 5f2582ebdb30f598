import logging
import socket

from ev3connection.conduit.base import Conduit
from ev3connection.conduit.socket_conduit import SocketConduit
from ev3connection.config.settings import RfcommSettings
from ev3connection.connector.base import AbstractConnector, ConnectorError

logger = logging.getLogger(__name__)


class SocketConnector(AbstractConnector):
    """
    A connector that communicates data via a socket
    """
    def __init__(self, sock_args, connect_args, connect_timeout=5, read_timeout=None, report_errors=True):
        """
        Creates a new socket connector.
        :param sock_args the arguments passed to socket.socket(), defining the address family and protocol.
        :param connect_args connection arguments for the socket.connect() call
        :param read_timeout how long a read may stall before giving up. None blocks until data arrives.
        """
        super().__init__()
        self._sock_args = sock_args
        self._connect_args = connect_args
        self._connect_timeout = connect_timeout
        self._read_timeout = read_timeout
        self._report_errors = report_errors

    @property
    def endpoint(self):
        return self._connect_args

    def _connect(self) -> Conduit:
        try:
            sock = socket.socket(*self._sock_args)
        except (socket.error, TypeError) as e:
            raise ConnectorError("unable to create socket %s" % (self._sock_args,)) from e
        try:
            sock.settimeout(self._connect_timeout)
            sock.connect(self._connect_args)
            sock.settimeout(self._read_timeout)
            logger.info("opened socket to %s", self._connect_args)
            return SocketConduit(sock)
        except socket.error as e:
            sock.close()
            method = logger.warning if self._report_errors else logger.debug
            method("error opening socket to %s: %s", self._connect_args, e)
            raise ConnectorError("unable to connect to %s" % (self._connect_args,)) from e

    def _disconnect(self):
        pass

    def _try_available(self):
        return True


def rfcomm_socket_args():
    """ the socket() arguments for a Bluetooth RFCOMM stream socket, where the platform supports it. """
    family = getattr(socket, 'AF_BLUETOOTH', None)
    protocol = getattr(socket, 'BTPROTO_RFCOMM', None)
    if family is None or protocol is None:
        raise ConnectorError("Bluetooth RFCOMM sockets are not supported on this platform")
    return family, socket.SOCK_STREAM, protocol


def rfcomm_connector(address, settings: RfcommSettings=None) -> SocketConnector:
    """
    Creates a connector to the brick's serial port profile over RFCOMM.
    :param address: the brick's Bluetooth address, e.g. '00:16:53:AA:BB:CC'
    """
    settings = settings if settings is not None else RfcommSettings()
    return SocketConnector(rfcomm_socket_args(), (address, settings.channel),
                           connect_timeout=settings.connect_timeout, read_timeout=settings.read_timeout)
