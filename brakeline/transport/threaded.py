"""
brakeline.transport.threaded
~~~~~~~~~~~~~~~~~~~~~~~~~~~~

:copyright: (c) 2016 by the Brakeline Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""
from __future__ import absolute_import

import atexit
import logging
import os
import threading
import time
from concurrent.futures import Future
from queue import Empty, Queue

from brakeline.conf import defaults
from brakeline.transport.base import resolve
from brakeline.transport.requests import (
    RequestsHTTPRequest, RequestsHTTPTransport)

logger = logging.getLogger('brakeline.errors')


class AsyncWorker(object):
    _terminator = object()

    def __init__(self, shutdown_timeout=defaults.SHUTDOWN_TIMEOUT):
        self._queue = Queue(-1)
        self._lock = threading.Lock()
        self._thread = None
        self._thread_for_pid = None
        self.options = {
            'shutdown_timeout': shutdown_timeout,
        }
        self.start()

    def is_alive(self):
        if self._thread_for_pid != os.getpid():
            return False
        return self._thread is not None and self._thread.is_alive()

    def _ensure_thread(self):
        if self.is_alive():
            return
        self.start()

    def main_thread_terminated(self):
        size = self._queue.qsize()
        if size:
            timeout = self.options['shutdown_timeout']
            print("Brakeline is attempting to send %s pending error notices" % size)
            print("Waiting up to %s seconds" % timeout)
            if os.name == 'nt':
                print("Press Ctrl-Break to quit")
            else:
                print("Press Ctrl-C to quit")
        self.stop(timeout=self.options['shutdown_timeout'])

    def start(self):
        """
        Starts the task thread.
        """
        with self._lock:
            if not self.is_alive():
                self._thread = threading.Thread(
                    target=self._target, name='brakeline.AsyncWorker')
                self._thread.daemon = True
                self._thread.start()
                self._thread_for_pid = os.getpid()
        atexit.register(self.main_thread_terminated)

    def stop(self, timeout=None):
        """
        Stops the task thread. Synchronous!
        """
        with self._lock:
            if self._thread:
                self._queue.put_nowait(self._terminator)
                self._thread.join(timeout=timeout)
                self._thread = None
                self._thread_for_pid = None

    def queue(self, callback, *args, **kwargs):
        self._ensure_thread()
        self._queue.put_nowait((callback, args, kwargs))

    def _run(self, record):
        callback, args, kwargs = record
        try:
            callback(*args, **kwargs)
        except Exception:
            logger.error('Failed processing job', exc_info=True)

    def _drain(self):
        """
        Runs the jobs still queued behind the terminator, including the
        ones those jobs queue themselves.
        """
        while True:
            try:
                record = self._queue.get_nowait()
            except Empty:
                return
            try:
                if record is not self._terminator:
                    self._run(record)
            finally:
                self._queue.task_done()

    def _target(self):
        while True:
            record = self._queue.get()
            try:
                if record is self._terminator:
                    self._drain()
                    break
                self._run(record)
            finally:
                self._queue.task_done()

            time.sleep(0)


class ThreadedRequestsHTTPRequest(RequestsHTTPRequest):
    def __init__(self, worker, *args, **kwargs):
        super(ThreadedRequestsHTTPRequest, self).__init__(*args, **kwargs)
        self.worker = worker

    def execute(self, func, *args, **kwargs):
        future = Future()
        self.worker.queue(resolve, future, func, *args, **kwargs)
        return future


class ThreadedRequestsHTTPTransport(RequestsHTTPTransport):
    """
    Default transport. Opening the body and talking to the collector
    both happen on a background worker thread, so the notifier returns
    to its caller immediately.
    """

    request_cls = ThreadedRequestsHTTPRequest

    def __init__(self, *args, **kwargs):
        self.shutdown_timeout = kwargs.pop(
            'shutdown_timeout', defaults.SHUTDOWN_TIMEOUT)
        super(ThreadedRequestsHTTPTransport, self).__init__(*args, **kwargs)
        self._worker = None

    def get_worker(self):
        if self._worker is None:
            self._worker = AsyncWorker(shutdown_timeout=self.shutdown_timeout)
        return self._worker

    def get_request(self):
        return self.request_cls(
            self.get_worker(), self.url, self.session, timeout=self.timeout,
            verify_ssl=self.verify_ssl, proxies=self.proxies)
