"""
brakeline.events
~~~~~~~~~~~~~~~~

:copyright: (c) 2016 by the Brakeline Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""
from __future__ import absolute_import

import platform
import socket
import sys

from brakeline.conf import defaults
from brakeline.notice import (
    EnvironmentContext, ErrorEntry, HttpContext, Notice, Severity)
from brakeline.utils.stacks import get_stack_info, iter_traceback_frames

__all__ = ('NoticeBuilder', 'iter_exception_chain')


def iter_exception_chain(exception):
    """
    Yields ``exception`` followed by the exceptions that caused it,
    newest first. Explicit causes (``raise ... from ...``) win over the
    implicit context unless the context was suppressed.
    """
    seen = set()
    while exception is not None and id(exception) not in seen:
        seen.add(id(exception))
        yield exception
        cause = exception.__cause__
        if cause is None and not exception.__suppress_context__:
            cause = exception.__context__
        exception = cause


def get_hostname():
    if defaults.NAME:
        return defaults.NAME
    try:
        return socket.gethostname()
    except Exception:
        return None


class NoticeBuilder(object):
    """
    Assembles a ``Notice`` piece by piece. Nothing here performs I/O.

    >>> builder = NoticeBuilder()
    >>> builder.set_error_entries(exc)
    >>> builder.set_severity(Severity.WARNING)
    >>> notice = builder.to_notice()
    """

    def __init__(self):
        self.errors = []
        self.severity = Severity.ERROR
        self.environment = None
        self.app_version = None
        self.context = {}
        self.http_context = None
        self.environment_context = None

    @classmethod
    def build(cls, exception=None, context=None, config=None,
              severity=Severity.ERROR):
        builder = cls()
        builder.set_error_entries(exception)
        if config is not None:
            builder.set_configuration_context(config)
        builder.set_severity(severity)
        if context is not None:
            builder.set_http_context(context)
        builder.set_environment_context(
            get_hostname(), platform.platform(), defaults.LANGUAGE)
        return builder.to_notice()

    def set_error_entries(self, exception=None):
        """
        Records one entry per exception in the chain. When no exception
        is passed the one currently being handled is used.
        """
        if exception is None:
            exception = sys.exc_info()[1]

        if exception is None:
            raise ValueError('No exception found')

        self.errors = [
            ErrorEntry(
                type=type(exc).__name__,
                message=str(exc),
                backtrace=get_stack_info(
                    iter_traceback_frames(exc.__traceback__)),
            )
            for exc in iter_exception_chain(exception)
        ]

    def set_configuration_context(self, config):
        self.environment = config.environment
        self.app_version = config.app_version
        self.context = dict(config.context)

    def set_severity(self, severity):
        self.severity = Severity.validate(severity)

    def set_http_context(self, context):
        # the notice gets its own copy so filters never touch the caller's
        self.http_context = HttpContext(**dict(
            (field, getattr(context, field, None))
            for field in HttpContext.fields
        ))
        for field in ('session', 'parameters', 'environment_vars'):
            value = getattr(self.http_context, field)
            if value is not None:
                setattr(self.http_context, field, dict(value))

    def set_environment_context(self, hostname, os, language):
        self.environment_context = EnvironmentContext(
            hostname=hostname, os=os, language=language)

    def to_notice(self):
        return Notice(
            errors=self.errors,
            severity=self.severity,
            http_context=self.http_context,
            environment_context=self.environment_context,
            environment=self.environment,
            app_version=self.app_version,
            context=self.context,
        )
