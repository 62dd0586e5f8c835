import threading
import time

import mock
import responses

from brakeline.base import Notifier
from brakeline.conf import Config
from brakeline.notice import RequestStatus
from brakeline.transport.threaded import (
    AsyncWorker, ThreadedRequestsHTTPRequest, ThreadedRequestsHTTPTransport)
from brakeline.utils.testutils import InMemoryResponse, TestCase

URL = 'https://api.airbrake.io/api/v3/projects/1/notices?key=key'


def wait_for_queue_size(worker, size, timeout=1):
    deadline = time.time() + timeout
    while worker._queue.qsize() < size:
        assert time.time() < deadline
        time.sleep(0.01)


def block(started, gate):
    started.set()
    gate.wait(1)


def make_exception():
    try:
        raise ValueError('boom')
    except ValueError as exc:
        return exc


class AsyncWorkerTest(TestCase):
    def setUp(self):
        self.worker = AsyncWorker(shutdown_timeout=1)

    def tearDown(self):
        self.worker.stop(timeout=1)

    def test_runs_jobs_in_order(self):
        done = threading.Event()
        calls = []

        self.worker.queue(calls.append, 1)
        self.worker.queue(calls.append, 2)
        self.worker.queue(done.set)

        assert done.wait(1)
        assert calls == [1, 2]

    def test_survives_failing_job(self):
        done = threading.Event()

        def broken():
            raise ValueError('nope')

        with mock.patch('brakeline.transport.threaded.logger') as logger:
            self.worker.queue(broken)
            self.worker.queue(done.set)
            assert done.wait(1)

        assert logger.error.call_count == 1

    def test_stop_waits_for_pending_jobs(self):
        calls = []

        def slow():
            time.sleep(0.2)
            calls.append(True)

        self.worker.queue(slow)
        self.worker.main_thread_terminated()

        assert calls == [True]
        assert not self.worker.is_alive()

    def test_stop_runs_jobs_queued_while_stopping(self):
        calls = []
        started = threading.Event()
        gate = threading.Event()

        def second():
            calls.append('second')

        def first():
            started.set()
            gate.wait(1)
            self.worker.queue(second)
            calls.append('first')

        self.worker.queue(first)
        assert started.wait(1)
        stopper = threading.Thread(target=self.worker.main_thread_terminated)
        stopper.start()
        wait_for_queue_size(self.worker, 1)
        gate.set()
        stopper.join(2)

        assert calls == ['first', 'second']
        assert not self.worker.is_alive()

    def test_restarts_after_stop(self):
        done = threading.Event()
        self.worker.stop()

        self.worker.queue(done.set)

        assert done.wait(1)


class ThreadedTransportTest(TestCase):
    def setUp(self):
        self.config = Config(project_id='1', project_key='key')
        self.transport = ThreadedRequestsHTTPTransport.from_config(
            self.config, shutdown_timeout=1)
        self.notifier = Notifier(self.config, transport=self.transport)

    def tearDown(self):
        self.transport.get_worker().stop(timeout=1)

    def test_requests_use_worker(self):
        request = self.transport.get_request()
        assert isinstance(request, ThreadedRequestsHTTPRequest)
        assert request.worker is self.transport.get_worker()

    def test_send_happens_off_the_calling_thread(self):
        threads = []
        gate = threading.Event()

        def send(self):
            gate.wait(1)
            threads.append(threading.current_thread())
            raise IOError('offline')

        with mock.patch.object(ThreadedRequestsHTTPRequest, 'send', send):
            future = self.notifier.notify_async(make_exception())
            assert not future.done()
            gate.set()
            assert isinstance(future.exception(timeout=1), IOError)

        assert threads and threads[0] is not threading.current_thread()

    @responses.activate
    def test_does_send(self):
        responses.add(responses.POST, URL, status=201, json={'id': '9'})

        response = self.notifier.notify_async(make_exception()).result(timeout=1)

        assert response.status == RequestStatus.SUCCESS
        assert response.id == '9'
        assert len(responses.calls) == 1

    def test_notice_queued_before_exit_is_sent(self):
        worker = self.transport.get_worker()
        started = threading.Event()
        gate = threading.Event()
        sent = []

        def send(request):
            sent.append(request)
            return InMemoryResponse(201, b'{"id": "3"}')

        with mock.patch.object(ThreadedRequestsHTTPRequest, 'send', send):
            worker.queue(block, started, gate)
            assert started.wait(1)
            future = self.notifier.notify_async(make_exception())
            stopper = threading.Thread(target=worker.main_thread_terminated)
            stopper.start()
            # the body stream job and the terminator are both waiting
            wait_for_queue_size(worker, 2)
            gate.set()
            stopper.join(2)

        assert len(sent) == 1
        assert future.done()
        assert future.result().id == '3'
