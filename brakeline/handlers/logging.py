"""
brakeline.handlers.logging
~~~~~~~~~~~~~~~~~~~~~~~~~~

:copyright: (c) 2016 by the Brakeline Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""

from __future__ import absolute_import
from __future__ import print_function

import logging
import sys
import traceback

from brakeline.base import Notifier
from brakeline.notice import Severity

LEVELS = (
    (logging.CRITICAL, Severity.CRITICAL),
    (logging.ERROR, Severity.ERROR),
    (logging.WARNING, Severity.WARNING),
    (logging.INFO, Severity.INFO),
)


def severity_for_level(levelno):
    for level, severity in LEVELS:
        if levelno >= level:
            return severity
    return Severity.DEBUG


class AirbrakeHandler(logging.Handler, object):
    """
    Reports log records that carry exception information.

    >>> logging.getLogger().addHandler(AirbrakeHandler(notifier))
    >>> try:
    >>>     1/0
    >>> except ZeroDivisionError:
    >>>     logger.exception('division failed')
    """

    def __init__(self, notifier=None, level=logging.NOTSET):
        if notifier is None:
            notifier = Notifier()
        elif not isinstance(notifier, Notifier):
            raise ValueError('The first argument to %s must be a Notifier instance, got %r instead.' % (
                self.__class__.__name__,
                notifier,
            ))
        self.notifier = notifier

        logging.Handler.__init__(self, level=level)

    def can_record(self, record):
        return not (
            record.name == 'brakeline' or
            record.name.startswith('brakeline.')
        )

    def emit(self, record):
        try:
            # Beware to python3 bug (see #10805) if exc_info is (None, None, None)
            self.format(record)

            # Avoid typical config issues by overriding loggers behavior
            if not self.can_record(record):
                print(record.message, file=sys.stderr)
                return

            return self._emit(record)
        except Exception:
            if self.notifier.config.is_active():
                print("Top level Brakeline exception caught - failed creating log record", file=sys.stderr)
                print(record.msg, file=sys.stderr)
                print(traceback.format_exc(), file=sys.stderr)

    def _emit(self, record):
        # If there's no exception being processed, exc_info may be a 3-tuple of None
        # http://docs.python.org/library/sys.html#sys.exc_info
        if not (record.exc_info and all(record.exc_info)):
            return

        context = getattr(record, 'http_context', None)

        return self.notifier.notify(
            record.exc_info[1],
            context=context,
            severity=severity_for_level(record.levelno),
        )
