"""
brakeline.conf
~~~~~~~~~~~~~~

:copyright: (c) 2016 by the Brakeline Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""
from __future__ import absolute_import

import logging
import os

from brakeline.conf import defaults
from brakeline.exceptions import ConfigurationError

__all__ = ('Config', 'setup_logging')

EXCLUDE_LOGGER_DEFAULTS = (
    'brakeline',
    'brakeline.errors',
    'urllib3',
    'requests',
)

# option name -> accepted spellings in settings mappings
SETTING_ALIASES = {
    'project_id': ('project_id', 'ProjectId', 'Airbrake.ProjectId'),
    'project_key': ('project_key', 'ProjectKey', 'Airbrake.ProjectKey'),
    'host': ('host', 'Host', 'Airbrake.Host'),
    'environment': ('environment', 'Environment', 'Airbrake.Environment'),
    'app_version': ('app_version', 'AppVersion', 'Airbrake.AppVersion'),
    'ignore_environments': ('ignore_environments', 'IgnoreEnvironments',
                            'Airbrake.IgnoreEnvironments'),
    'log_file': ('log_file', 'LogFile', 'Airbrake.LogFile'),
    'timeout': ('timeout', 'Timeout', 'Airbrake.Timeout'),
    'proxy': ('proxy', 'ProxyUri', 'Airbrake.ProxyUri'),
    'blacklist_keys': ('blacklist_keys', 'BlacklistKeys', 'Airbrake.BlacklistKeys'),
    'context': ('context', 'Context', 'Airbrake.Context'),
}

ENVIRON_PREFIX = 'AIRBRAKE_'


def split_list(value):
    """
    Turns a comma separated string into a tuple of stripped items, leaving
    out blank ones. Any other iterable is returned as a tuple unchanged.

    >>> split_list('staging, test,')
    ('staging', 'test')
    """
    if value is None:
        return ()
    if isinstance(value, str):
        return tuple(item.strip() for item in value.split(',') if item.strip())
    return tuple(value)


def split_mapping(value):
    """
    Turns ``key=value`` pairs separated by commas into a dict. Mappings
    are copied.

    >>> split_mapping('region=eu, shard=3')
    {'region': 'eu', 'shard': '3'}
    """
    if value is None:
        return {}
    if isinstance(value, str):
        result = {}
        for item in split_list(value):
            key, sep, val = item.partition('=')
            if not sep:
                raise ConfigurationError('Invalid context entry: %r' % (item,))
            result[key.strip()] = val.strip()
        return result
    return dict(value)


class Config(object):
    """
    Settings consumed by the notifier.

    >>> config = Config(project_id='113743', project_key='81bbff95d52f8856c770bb39e827f3f6')

    >>> # Read configuration from ``AIRBRAKE_*`` environment variables
    >>> config = Config.from_environ()
    """

    def __init__(self, project_id=None, project_key=None, host=None,
                 environment=None, app_version=None, ignore_environments=None,
                 log_file=None, timeout=None, proxy=None, blacklist_keys=None,
                 context=None):
        self.project_id = project_id and str(project_id)
        self.project_key = project_key
        self.host = (host or defaults.HOST).rstrip('/')
        self.environment = environment
        self.app_version = app_version
        if ignore_environments is None:
            ignore_environments = defaults.IGNORE_ENVIRONMENTS
        self.ignore_environments = split_list(ignore_environments)
        self.log_file = log_file
        self.timeout = float(timeout or defaults.TIMEOUT)
        self.proxy = proxy
        if blacklist_keys is None:
            blacklist_keys = defaults.BLACKLIST_KEYS
        self.blacklist_keys = tuple(k for k in split_list(blacklist_keys) if k)
        # extra key/value pairs reported with every notice
        self.context = split_mapping(context)

    def __repr__(self):
        return '<%s: project_id=%r host=%r environment=%r>' % (
            type(self).__name__, self.project_id, self.host, self.environment)

    def is_active(self):
        return bool(self.project_id and self.project_key)

    def validate(self):
        if not self.project_id:
            raise ConfigurationError('Project Id is required')
        if not self.project_key:
            raise ConfigurationError('Project Key is required')

    @classmethod
    def from_mapping(cls, settings):
        """
        Builds a config from a settings mapping. Keys may be spelled as
        option names (``project_id``) or as the ``Airbrake.ProjectId``
        style used by application settings files.
        """
        options = {}
        for option, aliases in SETTING_ALIASES.items():
            for alias in aliases:
                if settings.get(alias) not in (None, ''):
                    options[option] = settings[alias]
                    break
        return cls(**options)

    @classmethod
    def from_environ(cls, environ=None):
        if environ is None:
            environ = os.environ
        return cls.from_mapping(dict(
            (option, environ.get(ENVIRON_PREFIX + option.upper()))
            for option in SETTING_ALIASES
        ))


def setup_logging(handler, exclude=EXCLUDE_LOGGER_DEFAULTS):
    """
    Configures logging to pipe to Airbrake.

    - ``exclude`` is a list of loggers that shouldn't go to Airbrake.

    >>> from brakeline.handlers.logging import AirbrakeHandler
    >>> notifier = Notifier(...)
    >>> setup_logging(AirbrakeHandler(notifier))

    Returns a boolean based on if logging was configured or not.
    """
    logger = logging.getLogger()
    if handler.__class__ in map(type, logger.handlers):
        return False

    logger.addHandler(handler)

    # Add StreamHandler to brakeline's default so you can catch missed exceptions
    for logger_name in exclude:
        logger = logging.getLogger(logger_name)
        logger.propagate = False
        logger.addHandler(logging.StreamHandler())

    return True
