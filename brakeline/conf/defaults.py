"""
brakeline.conf.defaults
~~~~~~~~~~~~~~~~~~~~~~~

Represents the default values for all Brakeline settings.

:copyright: (c) 2016 by the Brakeline Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""
from __future__ import absolute_import

import platform
import socket

# Base URL of the collector; the notices endpoint is derived from it
HOST = 'https://api.airbrake.io'

# Seconds to wait for the collector to answer
TIMEOUT = 10

# Seconds the threaded worker waits for pending notices at interpreter exit
SHUTDOWN_TIMEOUT = 10

# Not all environments have access to socket module, for example Google App Engine
# Need to check to see if the socket module has ``gethostname``, if it doesn't we
# will set it to None.
NAME = socket.gethostname() if hasattr(socket, 'gethostname') else None

# Fixed identifier of the client runtime reported with every notice
LANGUAGE = 'python/%s' % platform.python_version()

# Identity of this notifier library
NOTIFIER_NAME = 'brakeline'
NOTIFIER_URL = 'https://github.com/brakeline/brakeline'

# Environments that are never reported
IGNORE_ENVIRONMENTS = ()

# Keys whose values are masked in params, session and environment
BLACKLIST_KEYS = ()
