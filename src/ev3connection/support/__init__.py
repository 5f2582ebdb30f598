"""
Small building blocks shared by the connection: observer lists, background loops and
the one-at-a-time executor that serializes stream access.
"""
