"""
brakeline.exceptions
~~~~~~~~~~~~~~~~~~~~

:copyright: (c) 2016 by the Brakeline Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""


class BrakelineError(Exception):
    pass


class ConfigurationError(BrakelineError, ValueError):
    """
    Raised when the notifier is asked to send without a project id or
    project key.
    """


class TransportError(BrakelineError):
    def __init__(self, message, code=0):
        super(TransportError, self).__init__(message, code)
        self.code = code
        self.message = message

    def __str__(self):
        return "%s: %s" % (self.message, self.code)


class ResponseParseError(BrakelineError):
    """
    Raised when the collector replies with a body that is not a JSON object.
    """
