"""
brakeline.contrib.paste
~~~~~~~~~~~~~~~~~~~~~~~

:copyright: (c) 2016 by the Brakeline Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""
from __future__ import absolute_import

from brakeline.base import Notifier
from brakeline.conf import Config
from brakeline.middleware import Airbrake


def airbrake_filter_factory(app, global_conf, **kwargs):
    notifier = Notifier(Config.from_mapping(kwargs))
    return Airbrake(app, notifier)
