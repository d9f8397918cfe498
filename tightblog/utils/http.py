# -*- coding: utf-8 -*-
"""
    tightblog.utils.http
    ~~~~~~~~~~~~~~~~~~~~

    Various HTTP related helpers.

    :copyright: (c) 2009 by the TightBlog Team, see AUTHORS for more details.
    :license: BSD, see LICENSE for more details.
"""
from urllib.parse import urlparse, urljoin

from werkzeug.exceptions import BadRequest
from werkzeug.utils import redirect as _redirect

from tightblog.application import get_application, url_for, Response
from tightblog.utils import dump_json, load_json


def check_external_url(app, url):
    """Check if a URL is on the application server and return the canonical
    URL (eg: it externalizes a passed in path)
    """
    site_url = app.cfg['site_url']
    check_url = urljoin(site_url, url)
    if urlparse(site_url)[:2] != urlparse(check_url)[:2]:
        raise ValueError('The URL %s is not on the same server' % check_url)
    return check_url


def make_external_url(path):
    """Return an external url for the given path."""
    return urljoin(get_application().cfg['site_url'], path.lstrip('/'))


def redirect(url, code=302, allow_external_redirect=False):
    """Return a redirect response.  Like Werkzeug's redirect but this
    one checks for external redirects too.  If a redirect to an external
    target was requested `BadRequest` is raised unless
    `allow_external_redirect` was explicitly set to `True`.
    """
    # leading slashes are ignored, if we redirect to "/foo" or "foo"
    # does not matter, in both cases we want to be below our site root.
    url = url.lstrip('/')

    if not allow_external_redirect:
        #: check if the url is on the same server
        #: and make it an external one
        try:
            url = check_external_url(get_application(), url)
        except ValueError:
            raise BadRequest()
    return _redirect(url, code, Response=Response)


def redirect_to(*args, **kwargs):
    """Temporarily redirect to an URL rule."""
    return _redirect(url_for(*args, **kwargs), Response=Response)


def json_response(data, status=200):
    """Return a JSON response for the data."""
    return Response(dump_json(data), status=status,
                    mimetype='application/json')


def json_error(message, status=400):
    """A JSON response with an error message."""
    return json_response({'error': str(message)}, status)


def text_response(message, status=200):
    """A plain text response, used for the status messages of the REST
    views.
    """
    return Response(str(message), status=status, mimetype='text/plain')


def get_json_data(request, expect=dict):
    """Return the JSON body of the request.  An empty body is an empty
    object (or list), anything that is not JSON of the expected type is
    a bad request.
    """
    data = request.get_data(as_text=True)
    if not data.strip():
        return expect()
    try:
        rv = load_json(data)
    except ValueError:
        raise BadRequest('invalid JSON')
    if not isinstance(rv, expect):
        raise BadRequest('expected a JSON %s' %
                         (expect is dict and 'object' or 'array'))
    return rv
