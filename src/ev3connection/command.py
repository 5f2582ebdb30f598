from abc import abstractmethod


class Command:
    """ An outbound command. The encoding is not the connection's concern; it only needs the bytes. """

    @abstractmethod
    def to_bytes(self) -> bytes:
        raise NotImplementedError


class RawCommand(Command):
    """ A command whose bytes are already encoded, such as a complete direct command frame. """

    def __init__(self, data):
        self.data = bytes(data)

    def to_bytes(self) -> bytes:
        return self.data

    def __repr__(self):
        return 'RawCommand(%s)' % self.data.hex()
