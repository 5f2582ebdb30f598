import io
import select
import socket

from ev3connection.conduit import base


class SocketReader(io.RawIOBase):
    """
    Reads from a socket without reading ahead, so that select() always reflects the data not yet read.
    read(n) keeps receiving until n bytes arrive, the peer closes or the socket times out.
    Once the peer has closed the connection at_eof is set.
    """

    def __init__(self, sock: socket.socket):
        super().__init__()
        self.sock = sock
        self.at_eof = False

    def readable(self):
        return True

    def read(self, size=-1):
        self._checkClosed()
        if size is None or size < 0:
            return self.sock.recv(4096)
        data = bytearray()
        while len(data) < size:
            try:
                chunk = self.sock.recv(size - len(data))
            except socket.timeout:
                break
            if not chunk:
                self.at_eof = True
                break
            data += chunk
        return bytes(data)


class SocketConduit(base.Conduit):
    """
    A conduit that provides communication via a connected socket, typically a Bluetooth RFCOMM socket.
    Readiness is determined with select(). Writes go straight to send(), so they may be partial.
    :param sock The open, connected socket
    """
    def __init__(self, sock: socket.socket):
        """
        :param sock: the client socket that represents the connection
        :type sock: socket
        """
        self.sock = sock
        self.read = SocketReader(sock)
        self.write = sock.makefile('wb', buffering=0)

    @property
    def open(self) -> bool:
        return self.sock.fileno() >= 0 and not self.read.at_eof

    @property
    def target(self):
        return self.sock

    @property
    def output(self):
        return self.write

    @property
    def input(self):
        return self.read

    @property
    def bytes_available(self) -> bool:
        readable, _, _ = select.select([self.sock], [], [], 0)
        return bool(readable)

    @property
    def space_available(self) -> bool:
        _, writable, _ = select.select([], [self.sock], [], 0)
        return bool(writable)

    def close(self):
        self.read.close()
        self.write.close()
        try:
            self.sock.shutdown(socket.SHUT_RDWR)
        except socket.error:
            # the peer may have closed the socket already
            pass
        finally:
            self.sock.close()
