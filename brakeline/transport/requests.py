"""
brakeline.transport.requests
~~~~~~~~~~~~~~~~~~~~~~~~~~~~

:copyright: (c) 2016 by the Brakeline Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""
from __future__ import absolute_import

import io

import requests

import brakeline
from brakeline.conf import defaults
from brakeline.exceptions import TransportError
from brakeline.transport.base import Request, Response, Transport


class RequestBody(io.BytesIO):
    """
    In-memory request body that keeps what was written after it is
    closed.
    """

    def __init__(self):
        super(RequestBody, self).__init__()
        self.data = b''

    def close(self):
        if not self.closed:
            self.data = self.getvalue()
        super(RequestBody, self).close()


class RequestsResponse(Response):
    def __init__(self, response):
        self._response = response
        self.status_code = response.status_code
        self.headers = response.headers

    def get_response_stream(self):
        return io.BytesIO(self._response.content)

    def close(self):
        self._response.close()


class RequestsHTTPRequest(Request):
    def __init__(self, url, session, timeout=defaults.TIMEOUT,
                 verify_ssl=True, proxies=None):
        super(RequestsHTTPRequest, self).__init__()
        self.url = url
        self.session = session
        self.timeout = timeout
        self.verify_ssl = verify_ssl
        self.proxies = proxies
        self.body = None

    def get_headers(self):
        headers = {
            'User-Agent': 'brakeline/%s' % (brakeline.VERSION,),
        }
        if self.content_type:
            headers['Content-Type'] = self.content_type
        if self.accept:
            headers['Accept'] = self.accept
        headers.update(self.headers)
        return headers

    def open_request_stream(self):
        self.body = RequestBody()
        return self.body

    def send(self):
        """
        Sends the body to the collector and returns the response.
        Connection level failures are raised as ``TransportError``.
        """
        if self.body is None:
            data = None
        elif self.body.closed:
            data = self.body.data
        else:
            data = self.body.getvalue()

        try:
            response = self.session.request(
                self.method, self.url, data=data, headers=self.get_headers(),
                timeout=self.timeout, verify=self.verify_ssl,
                proxies=self.proxies)
        except requests.RequestException as e:
            raise TransportError(
                'Unable to reach Airbrake server: %s (url: %s)' % (e, self.url)
            ) from e
        return RequestsResponse(response)


class RequestsHTTPTransport(Transport):
    """
    Sends notices with ``requests`` on the thread that asks for the
    response. Use it from scripts and tests; applications want the
    threaded variant.
    """

    request_cls = RequestsHTTPRequest

    def __init__(self, project_id, project_key, host=defaults.HOST,
                 timeout=defaults.TIMEOUT, verify_ssl=True, proxy=None):
        self.project_id = project_id
        self.project_key = project_key
        self.host = host.rstrip('/')
        self.timeout = timeout
        self.verify_ssl = verify_ssl
        if proxy:
            self.proxies = {'http': proxy, 'https': proxy}
        else:
            self.proxies = None
        self.session = requests.Session()

    @classmethod
    def from_config(cls, config, **kwargs):
        return cls(config.project_id, config.project_key, host=config.host,
                   timeout=config.timeout, proxy=config.proxy, **kwargs)

    @property
    def url(self):
        return '%s/api/v3/projects/%s/notices?key=%s' % (
            self.host, self.project_id, self.project_key)

    def get_request(self):
        return self.request_cls(
            self.url, self.session, timeout=self.timeout,
            verify_ssl=self.verify_ssl, proxies=self.proxies)
