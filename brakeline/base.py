"""
brakeline.base
~~~~~~~~~~~~~~

:copyright: (c) 2016 by the Brakeline Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""
from __future__ import absolute_import

import logging
from concurrent.futures import Future
from functools import partial

from blinker import Namespace

from brakeline.conf import Config
from brakeline.events import NoticeBuilder
from brakeline.loggers import FileLogger
from brakeline.notice import AirbrakeResponse, RequestStatus, Severity
from brakeline.processors import SanitizeFilter, apply_filters
from brakeline.transport.threaded import ThreadedRequestsHTTPTransport
from brakeline.utils import is_ignored_environment

__all__ = ('Notifier', 'NotifyCompletedEvent', 'notify_completed')

JSON_CONTENT_TYPE = 'application/json'

HTTP_CREATED = 201

_signals = Namespace()

# Sent once per notify call with the notifier as sender and an ``event``
# keyword holding a ``NotifyCompletedEvent``.
notify_completed = _signals.signal('notify-completed')


class NotifyCompletedEvent(object):
    """
    Outcome of one notify call: either ``result`` (an ``AirbrakeResponse``)
    or ``error`` is set. Notify calls cannot be cancelled.
    """

    cancelled = False

    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error

    def __repr__(self):
        return '<%s: result=%r error=%r>' % (
            type(self).__name__, self.result, self.error)


class Notifier(object):
    """
    Reports exceptions to Airbrake.

    Will read configuration from ``AIRBRAKE_*`` environment variables
    when no config is given.

    >>> from brakeline import Notifier, Config

    >>> notifier = Notifier(Config(project_id='1', project_key='key'))

    >>> # Report an exception
    >>> try:
    >>>     1/0
    >>> except ZeroDivisionError as exc:
    >>>     future = notifier.notify_async(exc)
    >>>     print(future.result().id)
    """
    logger = logging.getLogger('brakeline')

    def __init__(self, config=None, logger=None, transport=None):
        self.configure_logging()

        cls = self.__class__
        self.logger = logging.getLogger(
            '%s.%s' % (cls.__module__, cls.__name__))
        self.error_logger = logging.getLogger('brakeline.errors')

        if config is None:
            self.logger.debug(
                "Configuring Brakeline from AIRBRAKE_* environment variables")
            config = Config.from_environ()
        self.config = config

        # an explicit response logger wins over the configured log file
        if logger is None and config.log_file:
            logger = FileLogger(config.log_file)
        self.response_logger = logger

        if transport is None:
            transport = ThreadedRequestsHTTPTransport.from_config(config)
        self.transport = transport

        self.filters = []
        if config.blacklist_keys:
            self.add_filter(SanitizeFilter(config.blacklist_keys))

        if not config.is_active():
            self.logger.info(
                'Brakeline is not configured (notices will not be sent). '
                'A project id and a project key are required.')

    def configure_logging(self):
        logger = logging.getLogger('brakeline')
        if logger.handlers:
            return
        logger.addHandler(logging.StreamHandler())
        logger.setLevel(logging.INFO)

    def add_filter(self, func):
        """
        Registers ``func`` to be applied to every notice before it is sent.
        Filters run in registration order; returning ``None`` drops the
        notice.

        >>> notifier.add_filter(lambda notice: notice if notice.environment != 'test' else None)
        """
        self.filters.append(func)

    def build_notice(self, exception=None, context=None,
                     severity=Severity.ERROR):
        return NoticeBuilder.build(
            exception, context=context, config=self.config, severity=severity)

    def notify(self, exception=None, context=None, severity=Severity.ERROR):
        """
        Reports ``exception`` and hands the outcome to the response logger,
        if one is configured. Returns the same future as ``notify_async``.
        """
        future = self.notify_async(exception, context, severity)
        if self.response_logger is not None:
            future.add_done_callback(self._log_outcome)
        return future

    def notify_async(self, exception=None, context=None,
                     severity=Severity.ERROR):
        """
        Reports ``exception`` without waiting for the collector.

        Returns a ``concurrent.futures.Future`` resolved with an
        ``AirbrakeResponse`` or failed with the error that stopped the
        delivery. The ``notify_completed`` signal fires at the same time.

        Raises ``ConfigurationError`` right away when the project id or key
        is missing.
        """
        self.config.validate()

        completion = Future()
        completion.set_running_or_notify_cancel()

        try:
            if is_ignored_environment(self.config.environment,
                                      self.config.ignore_environments):
                self.logger.debug(
                    'Ignoring notice for environment %r', self.config.environment)
                self._complete(completion, result=AirbrakeResponse.ignored())
                return completion

            notice = self.build_notice(exception, context, severity)

            if self.filters:
                notice = apply_filters(notice, self.filters)

            if notice is None:
                self.logger.debug('Notice dropped by filters')
                self._complete(completion, result=AirbrakeResponse.ignored())
                return completion

            payload = notice.to_json().encode('utf-8')

            request = self.transport.get_request()
            request.content_type = JSON_CONTENT_TYPE
            request.accept = JSON_CONTENT_TYPE
            request.method = 'POST'

            self.logger.debug('Sending notice of length %d', len(payload))

            request.get_request_stream().add_done_callback(
                partial(self._on_request_stream, request, payload, completion))
        except Exception as e:
            self._complete(completion, error=e)

        return completion

    def _on_request_stream(self, request, payload, completion, stream_future):
        try:
            with stream_future.result() as stream:
                stream.write(payload)

            request.get_response().add_done_callback(
                partial(self._on_response, completion))
        except Exception as e:
            self._failed_send(e)
            self._complete(completion, error=e)

    def _on_response(self, completion, response_future):
        response = None
        try:
            response = response_future.result()
            with response.get_response_stream() as stream:
                result = AirbrakeResponse.from_json(stream.read())
            if response.status_code == HTTP_CREATED:
                result.status = RequestStatus.SUCCESS
            else:
                result.status = RequestStatus.REQUEST_ERROR
        except Exception as e:
            self._failed_send(e)
            self._complete(completion, error=e)
            return
        finally:
            if response is not None:
                self._close_response(response)

        if result.status == RequestStatus.REQUEST_ERROR:
            self.error_logger.error(
                'Airbrake rejected the notice (status: %s, errors: %r)',
                response.status_code, result.errors or result.message)
        self._complete(completion, result=result)

    def _close_response(self, response):
        try:
            response.close()
        except Exception:
            self.error_logger.error(
                'Unable to close Airbrake response', exc_info=True)

    def _failed_send(self, e):
        self.error_logger.error(
            'Unable to deliver notice to Airbrake: %s', e,
            exc_info=(type(e), e, e.__traceback__))

    def _complete(self, completion, result=None, error=None):
        event = NotifyCompletedEvent(result=result, error=error)
        # one failing receiver must not hide the outcome from the others
        for receiver in notify_completed.receivers_for(self):
            try:
                receiver(self, event=event)
            except Exception:
                self.error_logger.error(
                    'notify_completed receiver failed', exc_info=True)

        if error is not None:
            completion.set_exception(error)
        else:
            completion.set_result(result)

    def _log_outcome(self, future):
        try:
            error = future.exception()
            if error is not None:
                self.response_logger.log(error)
            else:
                self.response_logger.log(future.result())
        except Exception:
            self.error_logger.error(
                'Failed logging notify outcome', exc_info=True)
