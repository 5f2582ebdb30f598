from abc import abstractmethod

from ev3connection.conduit.base import Conduit


class ConnectorError(Exception):
    """ Indicates an error condition with a connection. """


class ConnectionNotConnectedError(ConnectorError):
    """ Indicates a connector is in the disconnected state when a connection is required. """


class ConnectionNotAvailableError(ConnectorError):
    """ Indicates the endpoint is not available. """


class Connector:
    """ A connector describes an endpoint to which a conduit can be established. """

    @property
    @abstractmethod
    def endpoint(self):
        """ the endpoint that this connector reaches out to """
        raise NotImplementedError

    @property
    @abstractmethod
    def connected(self) -> bool:
        """
        Determines if this connector is connected to its underlying resource.
        """
        raise NotImplementedError

    @property
    @abstractmethod
    def conduit(self) -> Conduit:
        """
        Retrieves the conduit for this connection.
        If the connector is not connected, raises ConnectionNotConnectedError
        """
        raise NotImplementedError

    @property
    @abstractmethod
    def available(self) -> bool:
        """ Determines if the underlying resource for this connector is available.
        :return: True if the resource is available and can be connected to.
        """
        raise NotImplementedError

    @abstractmethod
    def connect(self) -> Conduit:
        """
        Connects this connector to the underlying resource and returns the open conduit.
        If the connector is already connected, the existing conduit is returned.
        Raises ConnectorError if the connection cannot be established.
        """
        raise NotImplementedError

    @abstractmethod
    def disconnect(self):
        raise NotImplementedError


class AbstractConnector(Connector):
    """ Manages the connection cycle to an endpoint."""

    def __init__(self):
        self._conduit = None

    @property
    def available(self):
        return False if self.connected else self._try_available()

    @property
    def connected(self):
        return self._conduit is not None and self._connected()

    def connect(self) -> Conduit:
        if self.connected:
            return self._conduit

        if self._conduit is not None:
            # the previous conduit was closed from the other end
            self.disconnect()

        if not self.available:
            raise ConnectionNotAvailableError("%s is not available" % (self.endpoint,))

        try:
            self._conduit = self._connect()
        finally:
            if not self._conduit:
                self.disconnect()
        return self._conduit

    def disconnect(self):
        if self._conduit is None:
            return
        self._disconnect()
        self._conduit.close()
        self._conduit = None

    @abstractmethod
    def _connect(self) -> Conduit:
        """ Template method for subclasses to perform the connection.
            If connection is not possible, an exception should be thrown
        """
        raise NotImplementedError

    @abstractmethod
    def _try_available(self):
        """ Determine if this connection is available. This method is only called when
            the connection is disconnected.
        :return: True if the connection is available or False otherwise.
        :rtype: bool
        """
        raise NotImplementedError

    @abstractmethod
    def _disconnect(self):
        """ perform any actions needed on disconnection.
        The base class takes care of closing the conduit, which happens
        after this method has been called.
        """
        raise NotImplementedError

    def _connected(self):
        return self._conduit is not None and self._conduit.open

    @property
    def conduit(self) -> Conduit:
        """
        Retrieves the conduit for this connection.
        raises ConnectionNotConnectedError if not connected
        """
        self.check_connected()
        return self._conduit

    def check_connected(self):
        if not self.connected:
            raise ConnectionNotConnectedError
