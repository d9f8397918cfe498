# -*- coding: utf-8 -*-
"""
    tightblog.application
    ~~~~~~~~~~~~~~~~~~~~~

    This module implements the central application object :class:`TightBlog`
    and a couple of helper functions and classes.

    :copyright: (c) 2009 by the TightBlog Team, see AUTHORS for more details.
    :license: BSD, see LICENSE for more details.
"""
from os import path
from time import time
from urllib.parse import urlparse, quote

from babel import Locale
from itsdangerous import URLSafeTimedSerializer, BadSignature
from jinja2 import Environment, ChoiceLoader, FileSystemLoader
from werkzeug import routing
from werkzeug.datastructures import CallbackDict
from werkzeug.exceptions import HTTPException, Forbidden, NotFound
from werkzeug.middleware.shared_data import SharedDataMiddleware
from werkzeug.wrappers import Request as RequestBase, \
     Response as ResponseBase

from tightblog import _core
from tightblog.environment import SHARED_DATA, BUILTIN_TEMPLATE_PATH
from tightblog.database import db, cleanup_session
from tightblog.cache import LazyExpiringCache
from tightblog.utils import ClosingIterator, local, local_manager, \
     dump_json, utcnow
from tightblog.utils.exceptions import UserException


#: the session cookie is valid for a month at most
SESSION_MAX_AGE = 60 * 60 * 24 * 31


def get_request():
    """Return the current request.  If no request is available this function
    returns `None`.
    """
    return getattr(local, 'request', None)


def get_application():
    """Get the application instance.  If the application was not yet set up
    the return value is `None`
    """
    return _core._application


def url_for(endpoint, **args):
    """Get the URL to an endpoint.  The keyword arguments provided are used
    as URL values.  Unknown URL values are used as keyword argument.
    Additionally there are some special keyword arguments:

    `_anchor`
        This string is used as URL anchor.

    `_external`
        If set to `True` the URL will be generated with the full server name
        and `http://` prefix.
    """
    anchor = args.pop('_anchor', None)
    external = args.pop('_external', False)
    rv = get_application().url_adapter.build(endpoint, args,
                                             force_external=external)
    if anchor is not None:
        rv += '#' + quote(anchor)
    return rv


def render_template(template_name, **context):
    """Renders a template.  If the `template_name` is a list of strings the
    first template that exists is selected.
    """
    env = get_application().template_env
    if isinstance(template_name, str):
        tmpl = env.get_template(template_name)
    else:
        tmpl = env.select_template(template_name)
    return tmpl.render(context)


def render_response(template_name, **context):
    """Like render_template but returns a response."""
    return Response(render_template(template_name, **context))


class InternalError(UserException):
    """Subclasses of this exception are used to signal internal errors that
    should not happen, but may do if the configuration is garbage.  If an
    internal error is raised during request handling they are converted into
    normal server errors.
    """


class Session(CallbackDict):
    """The session data of a request.  The session is stored in a signed
    cookie and only written back if it was modified.
    """

    def __init__(self, initial=None, new=True):
        def on_update(self):
            self.modified = True
        CallbackDict.__init__(self, initial, on_update)
        self.modified = False
        self.new = new

    @property
    def should_save(self):
        return self.modified


class Request(RequestBase):
    """This class holds the incoming request data."""

    def __init__(self, environ, app=None):
        RequestBase.__init__(self, environ)
        if app is None:
            app = get_application()
        self.app = app

        # get the session and try to get the user object for this request.
        from tightblog.models import User, AnonymousUser
        user = None
        self.session = app.load_session(self)
        user_id = self.session.get('uid')
        if user_id:
            user = db.session.get(User, user_id)
            if user is not None and not user.is_enabled:
                user = None
        if user is None:
            user = AnonymousUser()
        self.user = user

    @property
    def is_logged_in(self):
        return self.user.is_somebody

    def login(self, user):
        """Log the given user in."""
        self.user = user
        self.session['uid'] = user.id
        self.session['lt'] = time()

    def logout(self):
        """Log the current user out."""
        from tightblog.models import AnonymousUser
        self.user = AnonymousUser()
        self.session.clear()


class Response(ResponseBase):
    """This class holds the resonse data.  The default charset is utf-8
    and the default mimetype ``'text/html'``.
    """
    default_mimetype = 'text/html'


class TightBlog(object):
    """The central application object.

    Even though the :class:`TightBlog` class is a regular Python class, you
    can't create instances by using the regular constructor.  The only
    documented way to create this class is the :func:`setup` function or
    the dispatcher created by :func:`get_wsgi_app`.
    """

    def __init__(self, instance_folder):
        # this check ensures that only setup can create TightBlog instances
        if get_application() is not self:
            raise TypeError('cannot create %r instances. use the '
                            'setup factory function.' %
                            self.__class__.__name__)
        self.instance_folder = path.abspath(instance_folder)

        # and instanciate the configuration. this won't fail,
        # even if the database is not connected.
        from tightblog.config import Configuration
        self.cfg = Configuration(path.join(instance_folder, 'tightblog.ini'))
        if not self.cfg.exists:
            raise _core.InstanceNotInitialized()

        # and hook in the logger
        self.log = log.Logger(path.join(instance_folder, self.cfg['log_file']),
                              self.cfg['log_level'])

        # connect to the database
        self.database_engine = db.create_engine(self.cfg['database_uri'],
                                                self.instance_folder)

        # the caches for rendered pages and media files
        self.caches = {
            'weblogpage':   LazyExpiringCache('weblogpage',
                                              self.cfg['page_cache_size'],
                                              self.cfg['page_cache_timeout']),
            'weblogmedia':  LazyExpiringCache('weblogmedia',
                                              self.cfg['media_cache_size'],
                                              self.cfg['media_cache_timeout'])
        }

        # the last change of a weblog that shows up on the site weblog
        self.last_sitewide_change = utcnow()

        # the signer for the session cookie
        self.session_serializer = URLSafeTimedSerializer(
            self.cfg['secret_key'], salt='tightblog-session')

        # initialize i18n/l10n system
        self.locale = Locale.parse(self.cfg['language'])
        self.translations = i18n.load_core_translations(self.locale)

        # setup core package urls and views
        import tightblog
        from tightblog.urls import make_urls, shared_url
        from tightblog.views import all_views
        self.views = all_views.copy()

        # load the shared themes
        from tightblog.rendering.templates import load_shared_themes, \
             ThemeTemplateResolver
        self.themes = load_shared_themes(self)

        # init the template system with the core stuff
        env = Environment(loader=ChoiceLoader([
            ThemeTemplateResolver(self),
            FileSystemLoader(BUILTIN_TEMPLATE_PATH)
        ]), extensions=['jinja2.ext.i18n'], autoescape=True)
        env.globals.update(
            cfg=self.cfg,
            url_for=url_for,
            shared_url=shared_url,
            request=local('request'),
            tightblog={
                'version':      tightblog.__version__
            }
        )
        env.filters.update(
            json=dump_json,
            datetimeformat=i18n.format_datetime,
            dateformat=i18n.format_date,
            monthformat=i18n.format_month
        )
        env.install_gettext_translations(self.translations)
        self.template_env = env

        # now add the middleware for static file serving
        self.dispatch_wsgi = SharedDataMiddleware(self.dispatch_wsgi, {
            '/_shared': SHARED_DATA
        })

        # set up the urls
        self.url_map = routing.Map(make_urls(self))

        # and create a url adapter
        scheme, netloc, script_name = urlparse(self.cfg['site_url'])[:3]
        self.url_adapter = self.url_map.bind(netloc, script_name,
                                             url_scheme=scheme)

    @property
    def wants_reload(self):
        """True if the application requires a reload.  This is `True` if
        the config was changed on the file system.  A dispatcher checks this
        value every request and automatically unloads and reloads the
        application if necessary.
        """
        return self.cfg.changed_external

    def mark_sitewide_change(self):
        """Record a change that affects the aggregated content of the site
        weblog.
        """
        self.last_sitewide_change = utcnow()

    def load_session(self, request):
        """Load the session from the session cookie of the request.  Invalid
        or expired cookies give an empty session.
        """
        cookie = request.cookies.get(self.cfg['session_cookie_name'])
        if not cookie:
            return Session()
        try:
            data = self.session_serializer.loads(cookie,
                                                 max_age=SESSION_MAX_AGE)
        except BadSignature:
            return Session()
        return Session(data, new=False)

    def save_session(self, session, response):
        """Write the session back into the cookie if it was modified."""
        if not session.should_save:
            return
        cookie_name = self.cfg['session_cookie_name']
        if not session:
            response.delete_cookie(cookie_name)
            return
        response.set_cookie(cookie_name,
                            self.session_serializer.dumps(dict(session)),
                            max_age=SESSION_MAX_AGE, httponly=True)

    def handle_not_found(self, request, exception):
        """Handle a not found exception."""
        response = render_response('404.html')
        response.status_code = 404
        return response

    def handle_forbidden(self, request, exception):
        response = render_response('403.html')
        response.status_code = 403
        return response

    def handle_server_error(self, request, exc_info=None, suppress_log=False):
        """Called if a server error happens.  Logs the error and returns a
        response with an error message.
        """
        if not suppress_log:
            log.exception('Exception happened at "%s"' % request.path,
                          'core', exc_info)
        response = render_response('500.html')
        response.status_code = 500
        return response

    def dispatch_request(self, request):
        """Match the request against the url map and call the view."""
        try:
            try:
                endpoint, args = self.url_adapter.match(request.path,
                                                        request.method)
                response = self.views[endpoint](request, **args)
            except NotFound as e:
                response = self.handle_not_found(request, e)
            except Forbidden as e:
                response = self.handle_forbidden(request, e)
        except HTTPException as e:
            response = e.get_response(request.environ)
        return response

    def dispatch_wsgi(self, environ, start_response):
        """This method is the internal WSGI request and is wrapped by the
        middleware serving the shared files.  It handles the actual request
        dispatching.
        """
        # Create a new request object, register it with the application
        # and all the other stuff on the current thread but initialize
        # it afterwards.  We do this so that the request object can query
        # the database in the initialization method.
        request = object.__new__(Request)
        local.request = request
        request.__init__(environ, self)

        # wrap the real dispatching in a try/except so that we can
        # intercept exceptions that happen in the application.
        try:
            response = self.dispatch_request(request)

            # make sure the response object is one of ours
            response = Response.force_type(response, environ)
        except InternalError:
            response = self.handle_server_error(request)
        except Exception:
            if self.cfg['passthrough_errors']:
                raise
            db.session.rollback()
            response = self.handle_server_error(request)

        # update the session cookie at the request end if the
        # session data requires an update.
        self.save_session(request.session, response)
        return response(environ, start_response)

    def __call__(self, environ, start_response):
        """Make the application object a WSGI application."""
        return ClosingIterator(self.dispatch_wsgi(environ, start_response),
                               [local_manager.cleanup, cleanup_session])

    def __repr__(self):
        return '<TightBlog %r>' % self.instance_folder


# import here because of circular dependencies
from tightblog import i18n
from tightblog.utils import log
