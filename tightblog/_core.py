# -*- coding: utf-8 -*-
"""
    tightblog._core
    ~~~~~~~~~~~~~~~

    Internal core module that holds the application singleton.

    :copyright: (c) 2009 by the TightBlog Team, see AUTHORS for more details.
    :license: BSD, see LICENSE for more details.
"""
from threading import Lock

_setup_lock = Lock()

#: the initialized application
_application = None


class InstanceNotInitialized(RuntimeError):
    """Raised if an application was created for a not yet initialized
    instance folder.
    """


def _create_tightblog(instance_folder):
    """Creates a new TightBlog object and initializes it.  If an
    application exists already that one is returned.
    """
    global _application
    _setup_lock.acquire()
    try:
        if _application is not None:
            return _application

        from tightblog.application import TightBlog
        _application = app = object.__new__(TightBlog)
        try:
            app.__init__(instance_folder)
        except Exception:
            _application = None
            raise
        return app
    finally:
        _setup_lock.release()


def _unload_tightblog():
    """Forget the current application.  The next request (or the next
    call to `setup`) creates a new one.
    """
    global _application
    _setup_lock.acquire()
    try:
        app = _application
        _application = None
        if app is not None:
            app.database_engine.dispose()
    finally:
        _setup_lock.release()


def setup(instance_folder):
    """Creates a new instance of the application.  This must be called only
    once per interpreter and afterwards `get_application` returns the
    application object.

    The setup function returns the application that was set up.
    """
    if _application is not None:
        raise RuntimeError('application already set up')
    return _create_tightblog(instance_folder)


def get_wsgi_app(instance_folder):
    """This function returns a proxy WSGI application that dispatches to
    TightBlog.  The application is recreated if the configuration file was
    changed on the file system.
    """
    # fail early if the application module is broken
    import tightblog.application

    _dispatch_lock = Lock()
    def application(environ, start_response):
        _dispatch_lock.acquire()
        try:
            app = _application
            if app is not None and app.wants_reload:
                _unload_tightblog()
                app = None
            if app is None:
                app = _create_tightblog(instance_folder)
        finally:
            _dispatch_lock.release()
        return app(environ, start_response)
    return application
