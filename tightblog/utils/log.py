# -*- coding: utf-8 -*-
"""
    tightblog.utils.log
    ~~~~~~~~~~~~~~~~~~~

    This module implements application depending logging.  This logging
    system always logs into a special file in the instance folder.

    We are not using the python logging system because it registers the
    loggers in a central spot and we want one log per instance folder.

    :copyright: (c) 2009 by the TightBlog Team, see AUTHORS for more details.
    :license: BSD, see LICENSE for more details.
"""
import os
import sys
from inspect import currentframe
from warnings import warn
from traceback import print_exception, format_exception

from tightblog import _core
from tightblog.utils import utcnow


LEVELS = {
    'critical':  5,
    'error':     4,
    'warning':   3,
    'notice':    2,
    'info':      1,
    'debug':     0
}


class Logger(object):
    """The central logger class that is attached to the application."""

    def __init__(self, logfile, level='warning'):
        self.logfile = logfile
        self._file = None
        self.level = LEVELS.get(level)

        # whoops. wrong level.  fall back to warning and log that
        if self.level is None:
            self.level = LEVELS['warning']
            self.log('error', 'Logger configuration got invalid level "%s", '
                     'fallen back to "warning"' % level, 'logger')

    def close(self):
        if self._file is not None:
            self._file.close()
            self._file = None

    __del__ = close

    @property
    def file(self):
        """An open file descriptor for appending.  On reopening the property
        makes sure that file ends with a newline.
        """
        if self._file is None or self._file.closed:
            try:
                self._file = open(self.logfile, 'ab+')
            except IOError:
                # log file not writable.  return a dummy
                return open(os.devnull, 'wb')
            if self._file.tell() > 0:
                self._file.seek(-1, 2)
                if self._file.read() != b'\n':
                    self._file.write(b'\n')
        return self._file

    def get_location(self, frame):
        """Returns the location for the frame.  If the location is unknown a
        placeholder string is returned
        """
        if frame is None:
            return '?'
        return '%s:%d' % (
            frame.f_globals.get('__name__', frame.f_code.co_name),
            frame.f_lineno
        )

    def log(self, level, message, module=None, frame=None):
        """Writes a single log entry to the stream."""
        prefix = '[%s-%s-%s] %s: ' % (
            utcnow().strftime('%Y-%m-%dT%H:%M:%SZ'),
            level,
            self.get_location(frame),
            module or 'unknown'
        )
        f = self.file
        for line in str(message).splitlines():
            f.write((prefix + line + '\n').encode('utf-8', 'replace'))
        f.flush()


class UnboundLogging(Warning):
    """Warning for unbound logging."""


def _logging_func(name):
    level = LEVELS[name]
    def log(message, module=None):
        logger = getattr(_core._application, 'log', None)
        if logger is None:
            warn(UnboundLogging('Tried to log %r but no application '
                                'was set up' % message), stacklevel=2)
            return
        if level >= logger.level:
            logger.log(name, message, module, currentframe().f_back)
    log.__name__ = name
    return log


def exception(message=None, module=None, exc_info=None):
    """Logs an error plus the current or given exc info."""
    if exc_info is None:
        exc_info = sys.exc_info()
    logger = getattr(_core._application, 'log', None)
    if logger is None:
        # no application, write the exception to stderr
        return print_exception(*exc_info)

    if LEVELS['error'] >= logger.level:
        message = (message and message + '\n' or '') + \
                  ''.join(format_exception(*exc_info))
        logger.log('error', message, module, currentframe().f_back)


# make a bunch of loggers
__all__ = list(LEVELS) + ['exception', 'Logger']
globals().update((k, _logging_func(k)) for k in LEVELS)
del _logging_func
