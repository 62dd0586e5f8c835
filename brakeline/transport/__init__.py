"""
brakeline.transport
~~~~~~~~~~~~~~~~~~~

:copyright: (c) 2016 by the Brakeline Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""
from __future__ import absolute_import

from brakeline.transport.base import Transport, Request, Response  # NOQA
from brakeline.transport.requests import RequestsHTTPTransport  # NOQA
from brakeline.transport.threaded import ThreadedRequestsHTTPTransport  # NOQA
