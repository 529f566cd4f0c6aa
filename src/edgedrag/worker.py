"""A single consumer thread that runs host events one at a time, in the order they
were delivered"""

import logging
from concurrent.futures import ThreadPoolExecutor
from queue import SimpleQueue
from threading import Event
from typing import Callable, Optional

logger = logging.getLogger(__name__)
QUEUE_MSG_CLOSE = 0
QUEUE_MSG_CALL = 1


class ThreadWorker:
    """ThreadWorker serializes calls onto one thread, a failing call is logged and
    doesn't stop the ones after it.

    Each start creates a fresh queue, executor and stop flag. Threads of an
    earlier start only ever see their own, so a restart never leaves two
    consumers on one queue.
    """

    stopped = True
    executor: Optional[ThreadPoolExecutor] = None
    queue: Optional[SimpleQueue] = None
    _stop_flag: Optional[Event] = None

    def start_worker(self):
        """Start the consumer thread"""
        self.stopped = False
        self.queue = SimpleQueue()
        self._stop_flag = Event()
        self.executor = ThreadPoolExecutor(thread_name_prefix="edgedrag")
        self.executor.submit(self.consume_queue, self.queue)

    def stop_worker(self):
        """Stop the consumer thread once the queued calls are done and wait for it"""
        if self.stopped or self.queue is None:
            return
        self.stopped = True
        self._stop_flag.set()
        self.queue.put((QUEUE_MSG_CLOSE, None))
        self.executor.shutdown(wait=True)

    def enqueue(self, fn: Callable, *args, **kwargs):
        """Queue a call for the consumer thread"""
        if self.queue is None:
            logger.warning("worker not started, dropping call to %s", fn)
            return
        self.queue.put_nowait((QUEUE_MSG_CALL, (fn, args, kwargs)))

    def consume_queue(self, queue: SimpleQueue):
        """Run calls from the queue until asked to close"""
        while True:
            msg_type, msg = queue.get()
            if msg_type == QUEUE_MSG_CLOSE:
                logger.info("worker closing")
                break
            if msg_type == QUEUE_MSG_CALL:
                fn, args, kwargs = msg
                self.try_call(fn, *args, **kwargs)
            else:
                logger.error("unknown message type %s", msg_type)

    def try_call(self, fn: Callable, *args, **kwargs):
        """Call a function and log the exception if any"""
        try:
            fn(*args, **kwargs)
        except Exception:  # pylint: disable=broad-exception-caught
            logger.exception("error calling %s %s", fn, args)

    def periodic_call(self, interval: float, cb: Callable, *args):
        """Queue a call every interval seconds until the worker stops"""
        logger.info("periodic_call %s %s", interval, cb)
        queue, stop_flag = self.queue, self._stop_flag

        def wrapped():
            while not stop_flag.wait(interval):
                queue.put_nowait((QUEUE_MSG_CALL, (cb, args, {})))

        self.executor.submit(wrapped)
