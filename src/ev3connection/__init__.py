"""
Connection to a LEGO Mindstorms EV3 brick over a Bluetooth serial link.

- Conduit: abstraction of a bi-directional channel. Combines 2 streams for reading and writing,
  and reports when each is ready.
- Connector: the transport provider. Opens an endpoint (a serial port such as /dev/rfcomm0, or an
  RFCOMM socket to the brick's address) and yields a conduit.
- Frame: the wire unit, a 2 byte little-endian length followed by the payload. Commands and
  reports are both framed this way.
- WriteQueue: the bounded backlog of commands. When the brick cannot keep up, stale commands
  are dismissed rather than delivered late.
- StreamDriver: moves bytes between the queue, the conduit and the report listeners, pausing
  after each write so the brick is not flooded.
- ConnectionManager: opens and closes the connection, runs every stream operation on a single
  serial executor, and notifies connection and report listeners.

The manager never reconnects by itself, and transport errors never close the connection: a bad
frame is dropped, a failed write is logged. Listeners only hear connected=False from close().
"""
from ev3connection.command import Command, RawCommand
from ev3connection.connection import ConnectionChangedListener, ConnectionManager, ReportListener

__all__ = ['Command', 'RawCommand', 'ConnectionChangedListener', 'ConnectionManager', 'ReportListener']
