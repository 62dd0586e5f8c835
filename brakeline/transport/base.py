"""
brakeline.transport.base
~~~~~~~~~~~~~~~~~~~~~~~~

:copyright: (c) 2016 by the Brakeline Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""
from __future__ import absolute_import

from concurrent.futures import Future


def resolve(future, func, *args, **kwargs):
    """
    Runs ``func`` and settles ``future`` with its return value or with the
    exception it raised.
    """
    try:
        result = func(*args, **kwargs)
    except Exception as e:
        future.set_exception(e)
    else:
        future.set_result(result)


class Transport(object):
    """
    All transport implementations need to subclass this class

    A transport hands out one ``Request`` per notice; the request does
    the actual work.
    """

    def get_request(self):
        raise NotImplementedError


class Request(object):
    """
    A single HTTP exchange with the collector.

    The notifier sets ``method``, ``content_type`` and ``accept``, writes
    the body into the stream produced by ``get_request_stream`` and then
    waits on ``get_response``. Both methods return a
    ``concurrent.futures.Future``; subclasses decide on which thread the
    work happens by overriding ``execute``.
    """

    def __init__(self):
        self.method = 'GET'
        self.content_type = None
        self.accept = None
        self.headers = {}

    def execute(self, func, *args, **kwargs):
        """
        Runs ``func`` and returns a future for its result. The default
        runs it right away on the calling thread.
        """
        future = Future()
        resolve(future, func, *args, **kwargs)
        return future

    def get_request_stream(self):
        return self.execute(self.open_request_stream)

    def get_response(self):
        return self.execute(self.send)

    def open_request_stream(self):
        raise NotImplementedError

    def send(self):
        raise NotImplementedError


class Response(object):
    status_code = None

    def get_response_stream(self):
        raise NotImplementedError

    def close(self):
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, tb):
        self.close()
