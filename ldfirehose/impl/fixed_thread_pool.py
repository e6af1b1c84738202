import queue
from threading import Event, Lock, Thread

from ldfirehose.impl.util import log


class FixedThreadPool:
    """
    A fixed number of worker threads that run jobs in the order they were submitted. The pool
    rejects jobs once ``capacity`` jobs are waiting or running.
    """

    def __init__(self, size, capacity, name):
        self._size = size
        self._capacity = capacity
        self._lock = Lock()
        self._busy_count = 0
        self._event = Event()
        self._job_queue = queue.Queue()
        for i in range(0, size):
            thread = Thread(target=self._run_worker)
            thread.name = "%s.%d" % (name, i + 1)
            thread.daemon = True
            thread.start()

    """
    Schedules a job for execution and returns true, or returns false if the pool is already at
    capacity.
    """

    def execute(self, jobFn):
        with self._lock:
            if self._busy_count >= self._capacity:
                return False
            self._busy_count = self._busy_count + 1
        self._job_queue.put(jobFn)
        return True

    """
    Waits until all scheduled jobs have completed.
    """

    def wait(self):
        while True:
            with self._lock:
                if self._busy_count == 0:
                    return
                self._event.clear()
            self._event.wait()

    """
    Tells all the worker threads to terminate once all scheduled jobs have completed.
    """

    def stop(self):
        for i in range(0, self._size):
            self._job_queue.put('stop')

    def _run_worker(self):
        while True:
            item = self._job_queue.get(block=True)
            if item == 'stop':
                return
            try:
                item()
            except Exception:
                log.warning('Unhandled exception in export worker thread', exc_info=True)
            with self._lock:
                self._busy_count = self._busy_count - 1
                self._event.set()
