from __future__ import with_statement

import io
import os

import webob

from brakeline.contrib.paste import airbrake_filter_factory
from brakeline.middleware import Airbrake
from brakeline.utils.testutils import TestCase


class ErroringIterable(object):
    def __init__(self):
        self.closed = False

    def __iter__(self):
        raise ValueError('hello world')

    def close(self):
        self.closed = True


class ExitingIterable(ErroringIterable):
    def __init__(self, exc_func):
        self._exc_func = exc_func

    def __iter__(self):
        raise self._exc_func()


class ExampleApp(object):
    def __init__(self, iterable):
        self.iterable = iterable

    def __call__(self, environ, start_response):
        return self.iterable


class BrokenApp(object):
    def __call__(self, environ, start_response):
        raise KeyError('broken')


def test_notifier(notifier, transport):
    request = webob.Request.blank('/an-error?foo=bar')
    middleware = Airbrake(BrokenApp(), notifier=notifier)

    try:
        middleware(request.environ, lambda *args: None)
    except KeyError:
        pass

    notice = transport.sent[0].notice
    assert notice['errors'][0]['type'] == 'KeyError'
    assert notice['params'] == {'foo': 'bar'}


class MiddlewareTestCase(TestCase):
    def setUp(self):
        from brakeline.base import Notifier
        from brakeline.conf import Config
        from brakeline.utils.testutils import InMemoryTransport

        self.transport = InMemoryTransport()
        self.notifier = Notifier(Config(project_id='1', project_key='key'),
                                 transport=self.transport)
        self.request = webob.Request.blank('/an-error?foo=bar')

    def test_captures_error_in_iteration(self):
        iterable = ErroringIterable()
        app = ExampleApp(iterable)
        middleware = Airbrake(app, notifier=self.notifier)

        response = middleware(self.request.environ, lambda *args: None)

        with self.assertRaises(ValueError):
            response = list(response)

        self.assertEqual(len(self.transport.sent), 1)
        notice = self.transport.sent[0].notice

        exc = notice['errors'][0]
        self.assertEqual(exc['type'], 'ValueError')
        self.assertEqual(exc['message'], 'hello world')
        self.assertEqual(notice['context']['severity'], 'error')
        self.assertEqual(notice['context']['url'], 'http://localhost/an-error?foo=bar')
        self.assertNotIn('action', notice['context'])
        self.assertEqual(notice['params'], {'foo': 'bar'})
        self.assertEqual(notice['environment']['Host'], 'localhost:80')

    def test_closes_iterable(self):
        iterable = ExampleApp([b'ok'])
        middleware = Airbrake(iterable, notifier=self.notifier)

        response = middleware(self.request.environ, lambda *args: None)
        assert list(response) == [b'ok']
        response.close()

        assert self.transport.requests == []

    def test_close_failure_is_reported(self):
        class BrokenClose(object):
            def __iter__(self):
                return iter([b'ok'])

            def close(self):
                raise IOError('close failed')

        middleware = Airbrake(ExampleApp(BrokenClose()), notifier=self.notifier)
        response = middleware(self.request.environ, lambda *args: None)
        list(response)

        with self.assertRaises(IOError):
            response.close()

        assert self.transport.sent[0].notice['errors'][0]['type'] == 'OSError'

    def test_systemexit_0_is_ignored(self):
        iterable = ExitingIterable(lambda: SystemExit(0))
        app = ExampleApp(iterable)
        middleware = Airbrake(app, notifier=self.notifier)

        response = middleware(self.request.environ, lambda *args: None)

        with self.assertRaises(SystemExit):
            response = list(response)

        self.assertEqual(len(self.transport.requests), 0)

    def test_systemexit_is_captured(self):
        iterable = ExitingIterable(lambda: SystemExit(1))
        app = ExampleApp(iterable)
        middleware = Airbrake(app, notifier=self.notifier)

        response = middleware(self.request.environ, lambda *args: None)

        with self.assertRaises(SystemExit):
            response = list(response)

        self.assertEqual(len(self.transport.sent), 1)
        self.assertEqual(self.transport.sent[0].notice['errors'][0]['type'], 'SystemExit')

    def test_unconfigured_notifier_does_not_break_app(self):
        from brakeline.base import Notifier
        from brakeline.conf import Config

        notifier = Notifier(Config(), transport=self.transport)
        middleware = Airbrake(BrokenApp(), notifier=notifier)

        with self.assertRaises(KeyError):
            middleware(self.request.environ, lambda *args: None)

        self.assertEqual(self.transport.requests, [])


def test_paste_filter_factory():
    app = ExampleApp([])

    middleware = airbrake_filter_factory(
        app, {}, project_id='1', project_key='key', environment='production')

    assert isinstance(middleware, Airbrake)
    assert middleware.application is app
    assert middleware.notifier.config.project_id == '1'
    assert middleware.notifier.config.environment == 'production'


def test_modules_carry_header(project_root):
    package = os.path.join(project_root, 'brakeline')
    for dirpath, _, filenames in os.walk(package):
        for filename in filenames:
            path = os.path.join(dirpath, filename)
            if not filename.endswith('.py') or not os.path.getsize(path):
                continue
            module = os.path.relpath(path, project_root)[:-3].replace(os.sep, '.')
            if module.endswith('.__init__'):
                module = module[:-len('.__init__')]
            with io.open(path, encoding='utf-8') as fp:
                head = fp.read().split('\n')[:2]
            assert head == ['"""', module], path
