"""
brakeline.middleware
~~~~~~~~~~~~~~~~~~~~

:copyright: (c) 2016 by the Brakeline Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""
from __future__ import absolute_import

from brakeline.notice import HttpContext


class ClosingIterator(object):
    """
    An iterator that is implements a ``close`` method as-per
    WSGI recommendation.
    """
    def __init__(self, airbrake, iterable, environ):
        self.airbrake = airbrake
        self.environ = environ
        self.iterable = iter(iterable)

    def __iter__(self):
        return self

    def __next__(self):
        try:
            return next(self.iterable)
        except StopIteration:
            # propagate up the normal StopIteration
            raise
        except Exception:
            # but capture any other exception, then re-raise
            self.airbrake.handle_exception(self.environ)
            raise
        except SystemExit as e:
            if e.code != 0:
                self.airbrake.handle_exception(self.environ)
            raise

    def close(self):
        if hasattr(self.iterable, 'close') and callable(self.iterable.close):
            try:
                self.iterable.close()
            except Exception:
                self.airbrake.handle_exception(self.environ)
                raise


class Airbrake(object):
    """
    A WSGI middleware which will attempt to capture any
    uncaught exceptions and send them to Airbrake.

    >>> from brakeline.base import Notifier
    >>> application = Airbrake(application, Notifier())
    """
    def __init__(self, application, notifier=None):
        self.application = application
        if notifier is None:
            from brakeline.base import Notifier
            notifier = Notifier()
        self.notifier = notifier

    def __call__(self, environ, start_response):
        try:
            iterable = self.application(environ, start_response)
        except Exception:
            self.handle_exception(environ)
            raise
        except SystemExit as e:
            if e.code != 0:
                self.handle_exception(environ)
            raise

        return ClosingIterator(self, iterable, environ)

    def get_http_context(self, environ):
        return HttpContext.from_wsgi_environ(environ)

    def handle_exception(self, environ=None):
        context = None
        if environ is not None:
            context = self.get_http_context(environ)
        try:
            return self.notifier.notify(context=context)
        except Exception:
            self.notifier.error_logger.error(
                'Unable to report exception from WSGI application',
                exc_info=True)
