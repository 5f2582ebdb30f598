"""
The serial execution context. Every job submitted runs on one dedicated worker thread,
strictly in submission order, so jobs never overlap.
"""
import logging
from concurrent.futures import Future, ThreadPoolExecutor

logger = logging.getLogger(__name__)


class SerialExecutor:
    """
    Runs submitted callables one at a time, in FIFO order, on a single worker thread.

    The executor is the only synchronization used for state that it owns: as long as that
    state is touched only from submitted jobs, no locks are required.
    Exceptions raised by a job are logged and also set on the returned future.
    """

    def __init__(self, name='ev3-serial'):
        self.name = name
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=name)

    def submit(self, fn, *args, **kwargs) -> Future:
        future = self._executor.submit(fn, *args, **kwargs)
        future.add_done_callback(self._log_failure)
        return future

    def call(self, fn, *args, **kwargs):
        """ runs fn on the worker and waits for its result. """
        return self.submit(fn, *args, **kwargs).result()

    def flush(self, timeout=None):
        """ waits until every job submitted before this call has completed. """
        self.submit(_no_op).result(timeout)

    def shutdown(self, wait=True):
        self._executor.shutdown(wait=wait)

    def _log_failure(self, future: Future):
        if future.cancelled():
            return
        e = future.exception()
        if e is not None:
            logger.error("job on %s failed: %s", self.name, e, exc_info=e)


def _no_op():
    pass
