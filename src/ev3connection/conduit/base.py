from abc import abstractmethod
from io import IOBase


class Conduit:
    """
    A conduit allows two-way communication. It provides a file-like input endpoint and a file-like output endpoint,
    and reports when each side is ready.
    """

    @property
    @abstractmethod
    def target(self):
        raise NotImplementedError

    @property
    @abstractmethod
    def input(self) -> IOBase:
        """ fetches the I/O stream that provides input.
            Callers can use the usual read() methods. """
        raise NotImplementedError

    @property
    @abstractmethod
    def output(self) -> IOBase:
        """ fetches the I/O stream that provides output.
            write() returns the number of bytes accepted, which may be fewer than offered. """
        raise NotImplementedError

    @property
    @abstractmethod
    def open(self) -> bool:
        """ determines if this conduit is open. When open, the streams provided by
            input and output can be read from/written to."""
        raise NotImplementedError

    @property
    @abstractmethod
    def bytes_available(self) -> bool:
        """ True when the input stream has data waiting to be read. """
        raise NotImplementedError

    @property
    @abstractmethod
    def space_available(self) -> bool:
        """ True when the output stream can accept more data without blocking. """
        raise NotImplementedError

    @abstractmethod
    def close(self):
        """
        Closes both the input and output streams.
        """
        raise NotImplementedError


class DefaultConduit(Conduit):
    """ provides the conduit streams from specific read/write file-like types (which may be the same value).
        Readiness comes from the read stream's in_waiting count. Streams without one never report
        bytes available. """

    def __init__(self, read=None, write=None):
        self._read = self._write = None
        self._closed = False
        self.set_streams(read, write)

    def set_streams(self, read, write=None):
        self._read = read
        self._write = write if write is not None else read

    @property
    def target(self):
        return self._read

    def close(self):
        self._closed = True
        self._write.close()
        if self._read is not self._write:
            self._read.close()

    @property
    def open(self):
        return not self._closed

    @property
    def bytes_available(self):
        waiting = getattr(self._read, 'in_waiting', None)
        return waiting is not None and waiting > 0

    @property
    def space_available(self):
        return self.open

    @property
    def input(self) -> IOBase:
        return self._read

    @property
    def output(self) -> IOBase:
        return self._write

