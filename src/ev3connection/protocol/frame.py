"""
Framing for the EV3 wire protocol.

Every message, in both directions, is a 2 byte little-endian length followed by that many
payload bytes::

    [size low byte][size high byte][payload ...]
"""
from io import IOBase

# the header is 2 bytes, so this is also the largest payload a frame can carry
max_frame_size = 0xFFFF
header_size = 2


class FrameError(IOError):
    """ A frame could not be read from the input stream. The connection itself is unaffected. """


class FrameReadError(FrameError):
    """ Nothing could be read for the frame header. """


class FrameProtocolError(FrameError):
    """ The frame header or payload was malformed or incomplete. """


def encode_length(n) -> bytes:
    """
    Encodes a frame length, low byte first.
    >>> encode_length(5)
    b'\\x05\\x00'
    >>> encode_length(0x1234)
    b'4\\x12'
    """
    if not 0 <= n <= max_frame_size:
        raise ValueError("frame length %d is outside 0..%d" % (n, max_frame_size))
    return bytes((n & 0xFF, n >> 8))


def decode_length(b0, b1) -> int:
    """
    Decodes a frame length from the low and high bytes. Any two bytes are a valid length.
    >>> decode_length(0x05, 0x00)
    5
    >>> decode_length(0xFF, 0xFF)
    65535
    """
    return b1 << 8 | b0


class Frame:
    """ One length-prefixed message unit. """

    def __init__(self, payload):
        payload = bytes(payload)
        if len(payload) > max_frame_size:
            raise ValueError("payload of %d bytes does not fit in a frame" % len(payload))
        self.payload = payload

    @property
    def size(self):
        return len(self.payload)

    def to_bytes(self) -> bytes:
        return encode_length(self.size) + self.payload

    def __eq__(self, other):
        return isinstance(other, Frame) and other.payload == self.payload

    def __repr__(self):
        return 'Frame(%s)' % self.payload.hex()


def encode_frame(payload) -> bytes:
    """
    >>> encode_frame(b'\\x01\\x02')
    b'\\x02\\x00\\x01\\x02'
    """
    return Frame(payload).to_bytes()


def read_frame(stream: IOBase) -> Frame:
    """
    Reads the next frame from a stream.
    :raises FrameReadError: when the header read returns nothing.
    :raises FrameProtocolError: when the header is incomplete, declares an empty frame or
        fewer payload bytes arrive than were declared.
    """
    header = stream.read(header_size)
    if not header:
        raise FrameReadError("no data while reading the frame size")
    if len(header) < header_size:
        raise FrameProtocolError("incomplete frame size: %s" % bytes(header).hex())

    size = decode_length(header[0], header[1])
    if size <= 0:
        raise FrameProtocolError("frame size < 1")

    payload = stream.read(size)
    if not payload or len(payload) < size:
        raise FrameProtocolError("expected %d bytes of frame data, read %d" % (size, len(payload or b'')))
    return Frame(payload)
