"""
The EV3 wire protocol: length-prefixed frames, the bounded queue of outbound commands and
the driver that moves bytes between the queue, the conduit and the report listeners.
"""
