"""
brakeline.processors
~~~~~~~~~~~~~~~~~~~~

Filters applied to a notice before it is sent. A filter is any callable
taking a ``Notice`` and returning it (possibly changed) or ``None`` to drop
the notice.

:copyright: (c) 2016 by the Brakeline Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""
from __future__ import absolute_import

from brakeline.utils import varmap

__all__ = ('apply_filters', 'Filter', 'SanitizeFilter')


def apply_filters(notice, filters):
    """
    Runs ``filters`` in order, feeding each the previous result. Stops at
    the first filter returning ``None`` and returns ``None``.
    """
    for func in filters:
        notice = func(notice)
        if notice is None:
            return None
    return notice


class Filter(object):
    def __call__(self, notice):
        return self.process(notice)

    def process(self, notice):
        http = notice.http_context
        if http is not None:
            self.filter_http(http)
        return notice

    def filter_http(self, context):
        pass


class SanitizeFilter(Filter):
    """
    Asterisk out values whose key contains one of ``keys`` in the
    params, session and environment maps of the notice.

    >>> notifier.add_filter(SanitizeFilter(['password', 'secret']))
    """

    MASK = '*' * 8

    def __init__(self, keys):
        self.keys = frozenset(k.lower() for k in keys)

    def sanitize(self, key, value):
        if value is None:
            return

        if not key:  # key can be a NoneType
            return value

        # Just in case we have bytes here, we want to make them into text
        # properly without failing so we can perform our check.
        if isinstance(key, bytes):
            key = key.decode('utf-8', 'replace')
        else:
            key = str(key)

        key = key.lower()
        for field in self.keys:
            if field in key:
                # store mask as a fixed length for security
                return self.MASK
        return value

    def filter_http(self, context):
        for n in ('parameters', 'session', 'environment_vars'):
            value = getattr(context, n)
            if value is None:
                continue
            setattr(context, n, varmap(self.sanitize, value))
