"""
brakeline.utils.stacks
~~~~~~~~~~~~~~~~~~~~~~

:copyright: (c) 2016 by the Brakeline Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""
from __future__ import absolute_import

from brakeline.notice import Frame

UNKNOWN = '<unknown>'


def is_hidden_frame(frame):
    """
    Frames defining a truthy ``__traceback_hide__`` local are left out of
    backtraces. ``f_locals`` may be missing or refuse lookups.
    """
    f_locals = getattr(frame, 'f_locals', None)
    try:
        return bool(f_locals['__traceback_hide__'])
    except Exception:
        return False


def iter_traceback_frames(tb):
    """
    Walks a traceback from the outermost call to the point where the
    exception was raised, yielding ``(frame, lineno)`` pairs.
    """
    while tb is not None:
        if not is_hidden_frame(tb.tb_frame):
            yield tb.tb_frame, getattr(tb, 'tb_lineno', None)
        tb = tb.tb_next


def get_stack_info(frames):
    """
    Given ``(frame, lineno)`` pairs ordered from the outermost call to the
    innermost one, returns a list of ``Frame`` objects with the most recent
    call first.

    Frames without code information are reported with ``<unknown>`` file
    and function names rather than dropped.
    """
    results = []
    for frame, lineno in frames:
        if is_hidden_frame(frame):
            continue

        f_code = getattr(frame, 'f_code', None)
        results.append(Frame(
            file=getattr(f_code, 'co_filename', None) or UNKNOWN,
            line=lineno or 0,
            function=getattr(f_code, 'co_name', None) or UNKNOWN,
        ))

    results.reverse()
    return results
