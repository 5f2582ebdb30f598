class EventSource(object):
    """
    An ordered list of handlers that are all invoked when an event is fired.
    The same handler may be added more than once, and is then invoked once per registration.
    """

    def __init__(self):
        self._handlers = []

    def __iadd__(self, handler):
        return self.add(handler)

    def __len__(self):
        return len(self._handlers)

    def add(self, handler):
        self._handlers.append(handler)
        return self

    def fire(self, *args, **keywargs):
        for handler in list(self._handlers):
            handler(*args, **keywargs)
