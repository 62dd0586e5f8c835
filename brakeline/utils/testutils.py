"""
brakeline.utils.testutils
~~~~~~~~~~~~~~~~~~~~~~~~~

:copyright: (c) 2016 by the Brakeline Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""
from __future__ import absolute_import

import io
from unittest import TestCase as BaseTestCase

from brakeline.transport.base import Request, Response, Transport
from brakeline.transport.requests import RequestBody
from brakeline.utils import json


class TestCase(BaseTestCase):
    pass


class InMemoryResponse(Response):
    def __init__(self, status_code, body):
        self.status_code = status_code
        self.body = body
        self.closed = False

    def get_response_stream(self):
        return io.BytesIO(self.body)

    def close(self):
        self.closed = True


class InMemoryRequest(Request):
    def __init__(self, transport):
        super(InMemoryRequest, self).__init__()
        self.transport = transport
        self.body = None
        self.response = None

    def open_request_stream(self):
        self.body = RequestBody()
        return self.body

    def send(self):
        self.transport.sent.append(self)
        status_code, body = self.transport.reply
        self.response = InMemoryResponse(status_code, body)
        return self.response

    @property
    def data(self):
        return self.body.data if self.body is not None else None

    @property
    def notice(self):
        return json.loads(self.data.decode('utf-8'))


class InMemoryTransport(Transport):
    """
    Records every request instead of talking to a collector and answers
    with ``reply``, a ``(status_code, body)`` pair.

    >>> transport = InMemoryTransport(reply=(201, b'{"id": "1"}'))
    >>> notifier = Notifier(config, transport=transport)
    """

    def __init__(self, reply=(201, b'{"id": "1", "url": "https://airbrake.io/1"}')):
        self.reply = reply
        self.requests = []
        self.sent = []

    def get_request(self):
        request = InMemoryRequest(self)
        self.requests.append(request)
        return request
