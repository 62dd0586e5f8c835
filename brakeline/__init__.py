"""
brakeline
~~~~~~~~~

:copyright: (c) 2016 by the Brakeline Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""

__all__ = ('VERSION', 'Notifier', 'Config', 'Severity')

VERSION = '1.0.0'

from brakeline.base import *  # NOQA
from brakeline.conf import *  # NOQA
from brakeline.notice import Severity  # NOQA
