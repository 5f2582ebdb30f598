"""
The conduit package provides an abstraction of a bi-directional stream to the brick.
Concrete implementations cover a serial port (such as a bound rfcomm device) and a Bluetooth RFCOMM socket.
"""
