"""
brakeline.notice
~~~~~~~~~~~~~~~~

The data sent to the collector for a single error occurrence, and the
collector's answer.

:copyright: (c) 2016 by the Brakeline Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""
from __future__ import absolute_import

import brakeline
from brakeline.conf import defaults
from brakeline.exceptions import ResponseParseError
from brakeline.utils import json

__all__ = ('Severity', 'NotifierInfo', 'Frame', 'ErrorEntry', 'HttpContext',
           'EnvironmentContext', 'Notice', 'RequestStatus', 'AirbrakeResponse')


class Severity(object):
    DEBUG = 'debug'
    INFO = 'info'
    NOTICE = 'notice'
    WARNING = 'warning'
    ERROR = 'error'
    CRITICAL = 'critical'
    ALERT = 'alert'
    EMERGENCY = 'emergency'

    # least to most severe
    ALL = (DEBUG, INFO, NOTICE, WARNING, ERROR, CRITICAL, ALERT, EMERGENCY)

    @classmethod
    def validate(cls, severity):
        if severity not in cls.ALL:
            raise ValueError('Unknown severity: %r' % (severity,))
        return severity


class NotifierInfo(object):
    name = defaults.NOTIFIER_NAME
    url = defaults.NOTIFIER_URL

    @property
    def version(self):
        return brakeline.VERSION

    def to_dict(self):
        return {
            'name': self.name,
            'version': self.version,
            'url': self.url,
        }


class Frame(object):
    def __init__(self, file, line, function):
        self.file = file
        self.line = line
        self.function = function

    def __repr__(self):
        return '<Frame: %s:%s in %s>' % (self.file, self.line, self.function)

    def to_dict(self):
        return {
            'file': self.file,
            'line': self.line,
            'function': self.function,
        }


class ErrorEntry(object):
    def __init__(self, type, message, backtrace=None):
        self.type = type
        self.message = message
        self.backtrace = list(backtrace or [])

    def __repr__(self):
        return '<ErrorEntry: %s: %s>' % (self.type, self.message)

    def to_dict(self):
        return {
            'type': self.type,
            'message': self.message,
            'backtrace': [frame.to_dict() for frame in self.backtrace],
        }


class HttpContext(object):
    """
    Request scoped data attached to a notice. Every field is optional and
    ``None`` means the value was not available; the three maps are kept
    apart from empty ones so an empty session is still reported.

    >>> context = HttpContext(url='http://example.com/', user_id='42')
    """

    fields = ('url', 'user_agent', 'user_id', 'user_email', 'user_name',
              'action', 'component', 'session', 'parameters',
              'environment_vars')

    def __init__(self, url=None, user_agent=None, user_id=None,
                 user_email=None, user_name=None, action=None,
                 component=None, session=None, parameters=None,
                 environment_vars=None):
        self.url = url
        self.user_agent = user_agent
        self.user_id = user_id
        self.user_email = user_email
        self.user_name = user_name
        self.action = action
        self.component = component
        self.session = session
        self.parameters = parameters
        self.environment_vars = environment_vars

    def __repr__(self):
        return '<%s: %s>' % (type(self).__name__, self.url)

    @classmethod
    def from_wsgi_environ(cls, environ, **kwargs):
        """
        Reads url, user agent, remote user, query string arguments and
        headers from a WSGI environ. ``kwargs`` fill in or override any
        field, e.g. the session or the user's email.
        """
        from brakeline.utils.wsgi import (
            get_current_url, get_headers, get_environ, get_params)

        environment_vars = dict(get_environ(environ))
        environment_vars.update(get_headers(environ))
        params = dict(get_params(environ))

        options = {
            'url': get_current_url(environ),
            'user_agent': environ.get('HTTP_USER_AGENT'),
            'user_name': environ.get('REMOTE_USER'),
            'parameters': params or None,
            'environment_vars': environment_vars or None,
        }
        options.update(kwargs)
        return cls(**options)


class EnvironmentContext(object):
    def __init__(self, hostname, os, language):
        self.hostname = hostname
        self.os = os
        self.language = language


class Notice(object):
    """
    A single error occurrence ready to be serialized.

    Filters receive the notice and may change any attribute before it is
    sent; the pipeline does not touch it after the last filter ran.
    """

    def __init__(self, errors, severity=Severity.ERROR, http_context=None,
                 environment_context=None, environment=None,
                 app_version=None, notifier=None, context=None):
        self.notifier = notifier or NotifierInfo()
        self.errors = list(errors)
        self.severity = severity
        self.http_context = http_context
        self.environment_context = environment_context
        self.environment = environment
        self.app_version = app_version
        self.context = dict(context or {})

    def __repr__(self):
        return '<Notice: %r>' % (self.errors[:1],)

    def get_context(self):
        # configured pairs first so the fields below always win
        context = dict(self.context)
        context.update({
            'notifier': self.notifier.to_dict(),
            'severity': self.severity,
        })
        if self.environment is not None:
            context['environment'] = self.environment
        if self.app_version is not None:
            context['version'] = self.app_version

        env = self.environment_context
        if env is not None:
            for key in ('hostname', 'os', 'language'):
                value = getattr(env, key)
                if value is not None:
                    context[key] = value

        http = self.http_context
        if http is not None:
            for key, wire_key in (('url', 'url'),
                                  ('user_agent', 'userAgent'),
                                  ('action', 'action'),
                                  ('component', 'component')):
                value = getattr(http, key)
                if value is not None:
                    context[wire_key] = value

            user = {}
            for key in ('id', 'email', 'name'):
                value = getattr(http, 'user_' + key)
                if value is not None:
                    user[key] = value
            if user:
                context['user'] = user

        return context

    def to_dict(self):
        data = {
            'errors': [error.to_dict() for error in self.errors],
            'context': self.get_context(),
        }

        http = self.http_context
        if http is not None:
            for key, wire_key in (('environment_vars', 'environment'),
                                  ('session', 'session'),
                                  ('parameters', 'params')):
                value = getattr(http, key)
                if value is not None:
                    data[wire_key] = dict(value)

        return data

    def to_json(self):
        """
        Serializes the notice into a JSON string. Keys are sorted so an
        unchanged notice always serializes to the same text.
        """
        return json.dumps(self.to_dict(), sort_keys=True)


class RequestStatus(object):
    SUCCESS = 'Success'
    IGNORED = 'Ignored'
    REQUEST_ERROR = 'RequestError'


class AirbrakeResponse(object):
    """
    Outcome of a single notify call.

    ``data`` holds whatever the collector replied with; ``id``, ``url``,
    ``message`` and ``errors`` are shortcuts into it.
    """

    def __init__(self, status=None, data=None):
        self.status = status
        self.data = data or {}

    def __repr__(self):
        return '<AirbrakeResponse: %s %r>' % (self.status, self.data)

    def __eq__(self, other):
        if not isinstance(other, AirbrakeResponse):
            return NotImplemented
        return self.status == other.status and self.data == other.data

    def __ne__(self, other):
        return not self.__eq__(other)

    id = property(lambda s: s.data.get('id'))
    url = property(lambda s: s.data.get('url'))
    message = property(lambda s: s.data.get('message'))
    errors = property(lambda s: s.data.get('errors'))

    @classmethod
    def ignored(cls):
        return cls(status=RequestStatus.IGNORED)

    @classmethod
    def from_json(cls, body, status=None):
        if isinstance(body, bytes):
            body = body.decode('utf-8')
        try:
            data = json.loads(body)
        except ValueError as e:
            raise ResponseParseError('Invalid response body: %r' % (body[:200],)) from e
        if not isinstance(data, dict):
            raise ResponseParseError('Expected a JSON object, got: %r' % (body[:200],))
        return cls(status=status, data=data)
