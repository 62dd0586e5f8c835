"""
brakeline.scripts.runner
~~~~~~~~~~~~~~~~~~~~~~~~

:copyright: (c) 2016 by the Brakeline Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""

from __future__ import absolute_import
from __future__ import print_function

import logging
import os
import sys
from optparse import OptionParser

from brakeline import Notifier
from brakeline.conf import Config
from brakeline.exceptions import ConfigurationError
from brakeline.notice import HttpContext, RequestStatus, Severity
from brakeline.transport.requests import RequestsHTTPTransport
from brakeline.utils import json


def store_json(option, opt_str, value, parser):
    try:
        value = json.loads(value)
    except ValueError:
        print("Invalid JSON was used for option %s.  Received: %s" % (opt_str, value))
        sys.exit(1)
    setattr(parser.values, option.dest, value)


def get_uid():
    try:
        import pwd
    except ImportError:
        return None
    return pwd.getpwuid(os.geteuid())[0]


class TestNotice(Exception):
    pass


def send_test_notice(notifier, options):
    config = notifier.config
    print("Notifier configuration:")
    for k in ('project_id', 'project_key', 'host', 'environment'):
        print('  %-15s: %s' % (k, getattr(config, k)))
    print()

    params = options.get('params') or {}
    context = HttpContext(
        url='http://example.com',
        component='brakeline.scripts.runner',
        action='test',
        user_name=get_uid(),
        parameters=dict((str(k), str(v)) for k, v in params.items()) or None,
    )

    print('Sending a test notice...', end=' ')

    try:
        raise TestNotice('This is a test notice generated using ``brakeline test``')
    except TestNotice as exc:
        try:
            future = notifier.notify_async(exc, context, Severity.INFO)
        except ConfigurationError as e:
            print('error!')
            print('Error: %s' % (e,))
            return False

    try:
        response = future.result()
    except Exception as e:
        print('error!')
        print('Error: %s' % (e,))
        return False

    if response.status != RequestStatus.SUCCESS:
        print('error!')
        print('Status was %s: %s' % (response.status, response.errors or response.message))
        return False

    print('success!')
    print('Notice ID was %r' % (response.id,))
    if response.url:
        print('View it at %s' % (response.url,))
    return True


def main():
    root = logging.getLogger('brakeline.errors')
    root.setLevel(logging.DEBUG)
    root.addHandler(logging.StreamHandler())

    parser = OptionParser(usage='%prog test [project_id project_key]')
    parser.add_option("--params", action="callback", callback=store_json,
        type="string", nargs=1, dest="params")
    parser.add_option("--host", dest="host")
    parser.add_option("--environment", dest="environment")
    (opts, args) = parser.parse_args()

    if not args or args[0] != 'test':
        parser.print_usage()
        sys.exit(1)

    config = Config.from_environ()
    if len(args) == 3:
        config.project_id, config.project_key = args[1], args[2]
    if opts.host:
        config.host = opts.host.rstrip('/')
    if opts.environment:
        config.environment = opts.environment

    if not config.is_active():
        print("Error: No configuration detected!")
        print("You must either pass a project id and key to the command, or "
              "set the AIRBRAKE_PROJECT_ID and AIRBRAKE_PROJECT_KEY environment variables.")
        sys.exit(1)

    notifier = Notifier(config, transport=RequestsHTTPTransport.from_config(config))
    if not send_test_notice(notifier, opts.__dict__):
        sys.exit(1)
