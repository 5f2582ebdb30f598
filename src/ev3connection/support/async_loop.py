import logging
import threading
import time

logger = logging.getLogger(__name__)


class AsyncLoop:
    """ Continually runs the loop template method on a background thread.
        Exceptions are logged and posted to a given handler
        The background thread is registered as a daemon.
    """

    def __init__(self, log=logger, name=None):
        """
        :param name the name given to the background thread
        """
        self.name = name
        self.stop_event = threading.Event()
        self.background_thread = None
        self.logger = log

    def start(self):
        """
        Starts the background thread. Starting a loop that is already running does nothing.
        """
        if self.background_thread is None:
            self.stop_event.clear()
            t = threading.Thread(target=self._run, name=self.name)
            t.daemon = True
            self.background_thread = t
            t.start()

    def exception_handler(self, e):
        self.logger.exception(e)

    def _run(self):
        """ The processing loop for the background thread.
             Invokes loop() for as long as the stop signal is not received.
        """
        self._do(self.startup)
        while self.running():
            self._do(self.loop)
        self._do(self.shutdown)
        self.logger.debug("background thread %s exiting", self.name)

    def _do(self, callme):
        """ runs a function and captures any exceptions """
        try:
            callme()
        except Exception as e:
            self.exception_handler(e)

    def startup(self):
        """ template method called when the thread starts"""
        pass

    def loop(self):
        """ template method called repeatedly until the loop is stopped """
        raise NotImplementedError

    def shutdown(self):
        """ template method called when the thread exits """
        pass

    def running(self):
        return not self.stop_event.is_set()

    def wait(self, timeout):
        """ sleeps for up to timeout seconds, returning early when the loop is stopped.
        :return: True if the loop was stopped while waiting.
        """
        return self.stop_event.wait(timeout)

    def stop(self):
        event = self.stop_event
        event.set()
        thread = self.background_thread
        self.background_thread = None
        if thread and thread is not threading.current_thread():
            thread.join()
