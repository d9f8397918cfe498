# -*- coding: utf-8 -*-
"""
    tightblog
    ~~~~~~~~~

    TightBlog is a multi-user weblog server.  One instance hosts any number
    of weblogs, each with its own members, entries, categories, comments
    and templates.


    Get a WSGI Application
    ======================

    To get the WSGI application for an instance folder use the
    `get_wsgi_app` function.  Here a small example `tightblog.wsgi` for
    mod_wsgi::

        from tightblog import get_wsgi_app
        application = get_wsgi_app('/path/to/instance')

    The instance folder must have been initialized with the management
    script first (``tightblog-management.py initdb``).


    :copyright: (c) 2009 by the TightBlog Team, see AUTHORS for more details.
    :license: BSD, see LICENSE for more details.
"""
__version__ = '0.3.0-dev'
__url__ = 'https://tightblog.example.org/'


from tightblog._core import setup, get_wsgi_app
__all__ = ('setup', 'get_wsgi_app')
