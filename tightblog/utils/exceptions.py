# -*- coding: utf-8 -*-
"""
    tightblog.utils.exceptions
    ~~~~~~~~~~~~~~~~~~~~~~~~~~

    Exception utility module.

    :copyright: (c) 2009 by the TightBlog Team, see AUTHORS for more details.
    :license: BSD, see LICENSE for more details.
"""


class TightBlogException(Exception):
    """Baseclass for all TightBlog exceptions.  An exception can wrap the
    exception that caused it, that one is available as `root_cause`.

    >>> try:
    ...     int('x')
    ... except ValueError as e:
    ...     exc = TightBlogException('broken number', e)
    >>> str(exc)
    'broken number'
    >>> exc.root_cause.__class__.__name__
    'ValueError'
    """
    message = None

    def __init__(self, message=None, root_cause=None):
        Exception.__init__(self)
        if message is not None:
            self.message = message
        self.root_cause = root_cause
        if root_cause is not None:
            self.__cause__ = root_cause

    def __str__(self):
        if self.message is None:
            return ''
        return str(self.message)


class UserException(TightBlogException):
    """Baseclass for exceptions with messages that can be displayed to
    the user.
    """
