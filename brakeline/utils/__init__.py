"""
brakeline.utils
~~~~~~~~~~~~~~~

:copyright: (c) 2016 by the Brakeline Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""
from __future__ import absolute_import


def varmap(func, var, context=None, name=None):
    """
    Executes ``func(key_name, value)`` on all values
    recurisively discovering dict and list scoped
    values.
    """
    if context is None:
        context = {}
    objid = id(var)
    if objid in context:
        return func(name, '<...>')
    context[objid] = 1
    if isinstance(var, dict):
        ret = dict((k, varmap(func, v, context, k))
                   for k, v in var.items())
    elif isinstance(var, (list, tuple)):
        ret = [varmap(func, f, context, name) for f in var]
    else:
        ret = func(name, var)
    del context[objid]
    return ret


def is_ignored_environment(environment, ignore_environments):
    """
    Returns ``True`` when notices raised in ``environment`` must not be
    sent. Matching is exact and case sensitive; a missing environment
    only matches an explicit empty entry in the ignore list.

    >>> is_ignored_environment('test', ['development', 'test'])
    True
    """
    if not ignore_environments:
        return False
    return (environment or '') in ignore_environments
