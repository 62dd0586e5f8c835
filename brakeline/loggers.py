"""
brakeline.loggers
~~~~~~~~~~~~~~~~~

Destinations for the outcome of a notify call.

:copyright: (c) 2016 by the Brakeline Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""
from __future__ import absolute_import

import logging

from brakeline.notice import AirbrakeResponse

__all__ = ('Logger', 'FileLogger')


class Logger(object):
    """
    All response loggers need to subclass this class and implement
    ``log``.
    """

    def log(self, value):
        """
        Receives either the exception that made the call fail or the
        ``AirbrakeResponse`` it produced.
        """
        raise NotImplementedError

    def format(self, value):
        if isinstance(value, AirbrakeResponse):
            parts = ['Status: %s' % (value.status,)]
            for key in ('id', 'url', 'message', 'errors'):
                item = getattr(value, key)
                if item is not None:
                    parts.append('%s: %s' % (key.capitalize(), item))
            return ', '.join(parts)
        return 'Error: %s: %s' % (type(value).__name__, value)


class FileLogger(Logger):
    """
    Appends one line per outcome to ``filename``.
    """

    format_string = '%(asctime)s %(message)s'

    def __init__(self, filename):
        self.filename = filename
        self.logger = logging.getLogger('brakeline.notices.%s' % (id(self),))
        self.logger.propagate = False
        self.logger.setLevel(logging.INFO)
        self.handler = logging.FileHandler(filename, delay=True, encoding='utf-8')
        self.handler.setFormatter(logging.Formatter(self.format_string))
        self.logger.addHandler(self.handler)

    def log(self, value):
        if isinstance(value, BaseException):
            self.logger.error(self.format(value))
        else:
            self.logger.info(self.format(value))

    def close(self):
        self.logger.removeHandler(self.handler)
        self.handler.close()
