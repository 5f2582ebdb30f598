"""
Connectors are the transport providers for a connection. A connector knows how to reach one endpoint,
and yields an open conduit (a pair of input and output streams) when connected.
"""
