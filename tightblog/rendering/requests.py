# -*- coding: utf-8 -*-
"""
    tightblog.rendering.requests
    ~~~~~~~~~~~~~~~~~~~~~~~~~~~~

    The request parsers.  They turn the path below a weblog and the query
    arguments into typed requests.  The weblog, entry and custom page are
    looked up lazily, a parser never touches the database on its own.

    :copyright: (c) 2009 by the TightBlog Team, see AUTHORS for more details.
    :license: BSD, see LICENSE for more details.
"""
import re
from urllib.parse import unquote

from werkzeug.utils import cached_property

from tightblog.models import Weblog, WeblogEntry, DEVICE_STANDARD, \
     DEVICE_MOBILE
from tightblog.utils.exceptions import TightBlogException
from tightblog.utils.text import split_tags


_mobile_re = re.compile(r'iphone|ipod|android|blackberry|opera mini|'
                        r'opera mobi|windows phone|iemobile|palm|symbian|'
                        r'maemo|fennec|kindle|silk|mobile', re.I)
_date_re = re.compile(r'^(\d{6}|\d{8})$')

#: the page contexts
PAGE_CONTEXTS = ['weblog', 'entry', 'date', 'category', 'tags', 'page']


class InvalidRequest(TightBlogException):
    """Raised if a request cannot be parsed."""


def get_device_type(user_agent):
    """Return the device type for a user agent string.

    >>> get_device_type('Mozilla/5.0 (iPhone; CPU iPhone OS 12_0 like '
    ...                 'Mac OS X) Mobile/15E148')
    'MOBILE'
    >>> get_device_type('Mozilla/5.0 (X11; Linux x86_64) Firefox/99.0')
    'STANDARD'
    """
    if user_agent and _mobile_re.search(user_agent) is not None:
        return DEVICE_MOBILE
    return DEVICE_STANDARD


class WeblogRequest(object):
    """Base class for requests to something below a weblog."""

    def __init__(self, request, handle):
        self.request = request
        self.weblog_handle = handle
        self.user = request.user
        self.device_type = get_device_type(request.user_agent.string)

    @property
    def is_logged_in(self):
        return self.user.is_somebody

    @cached_property
    def weblog(self):
        return Weblog.query.by_handle(self.weblog_handle)


class WeblogPageRequest(WeblogRequest):
    """A request for a page of a weblog."""

    def __init__(self, request, handle, path_info=None):
        WeblogRequest.__init__(self, request, handle)
        self.path_info = path_info
        self.context = 'weblog'
        self.weblog_anchor = None
        self.custom_page_name = None
        self.category_name = None
        self.date_string = None
        self.tags = None
        self.page_num = 0

        if path_info:
            self._parse_path(path_info)

        args = request.args
        try:
            page = int(args.get('page', 0))
        except ValueError:
            page = 0
        if page > 0:
            self.page_num = page

        if self.date_string is None:
            date = args.get('date')
            if date and _date_re.match(date):
                self.date_string = date
        if self.category_name is None and args.get('cat'):
            self.category_name = args['cat']
        if self.tags is None and args.get('tags'):
            self.tags = split_tags(args['tags'])

    def _parse_path(self, path_info):
        context, _, extra = path_info.strip('/').partition('/')
        extra = unquote(extra.strip('/'))
        if context not in PAGE_CONTEXTS or context == 'weblog':
            raise InvalidRequest('unknown context %r' % context)
        self.context = context
        if context == 'entry':
            if not extra:
                raise InvalidRequest('entry anchor missing')
            self.weblog_anchor = extra
        elif context == 'date':
            if _date_re.match(extra) is None:
                raise InvalidRequest('invalid date %r' % extra)
            self.date_string = extra
        elif context == 'category':
            if not extra:
                raise InvalidRequest('category name missing')
            self.category_name = extra
        elif context == 'tags':
            # a missing tag list is the request for the tags index
            if extra:
                self.tags = split_tags(extra)
        elif context == 'page':
            if not extra:
                raise InvalidRequest('page name missing')
            self.custom_page_name = extra

    @cached_property
    def weblog_entry(self):
        if self.weblog_anchor is None or self.weblog is None:
            return None
        return WeblogEntry.query.by_anchor(self.weblog, self.weblog_anchor)

    @cached_property
    def weblog_page(self):
        """The custom page or `None`."""
        if self.custom_page_name is None or self.weblog is None:
            return None
        from tightblog.rendering.templates import get_weblog_theme
        theme = get_weblog_theme(self.weblog)
        return theme.get_template_by_path(self.custom_page_name) or \
               theme.get_template_by_name(self.custom_page_name)

    @cached_property
    def weblog_category(self):
        if self.category_name is None or self.weblog is None:
            return None
        return self.weblog.get_category_by_path(self.category_name)

    @property
    def cache_key(self):
        """The key of the rendered page in the page cache."""
        parts = ['weblogpage.key', self.weblog_handle]
        if self.weblog_anchor is not None:
            parts.append('entry/' + self.weblog_anchor)
        else:
            if self.custom_page_name is not None:
                parts.append('page/' + self.custom_page_name)
            if self.date_string is not None:
                parts.append('date/' + self.date_string)
            if self.category_name is not None:
                parts.append('category/' + self.category_name)
            if self.tags:
                parts.append('tags/' + '+'.join(self.tags))
            elif self.context == 'tags':
                parts.append('tags')
        if self.page_num > 0:
            parts.append('page=%d' % self.page_num)
        parts.append('deviceType=%s' % self.device_type)
        return '/'.join(parts)

    def __repr__(self):
        return '<%s %r %s>' % (
            self.__class__.__name__,
            self.weblog_handle,
            self.context
        )


class WeblogPreviewRequest(WeblogPageRequest):
    """A page request in preview mode.  The `theme` argument names a shared
    theme to preview the weblog with, `type` forces the device type.
    """

    def __init__(self, request, handle, path_info=None):
        WeblogPageRequest.__init__(self, request, handle, path_info)
        self.theme_name = request.args.get('theme') or None
        device = request.args.get('type')
        if device:
            if device == 'standard':
                self.device_type = DEVICE_STANDARD
            else:
                self.device_type = DEVICE_MOBILE

    @cached_property
    def shared_theme(self):
        if self.theme_name is None:
            return None
        return self.request.app.themes.get(self.theme_name)

    def replace_weblog(self, weblog):
        """Use another weblog object (a temporary theme preview copy) for
        the rest of the request.
        """
        self.__dict__['weblog'] = weblog
        for key in 'weblog_entry', 'weblog_page', 'weblog_category':
            self.__dict__.pop(key, None)


class WeblogMediaRequest(WeblogRequest):
    """A request for a media file of a weblog."""

    def __init__(self, request, handle, path_info=None):
        WeblogRequest.__init__(self, request, handle)
        self.path_info = path_info
        self.thumbnail = request.args.get('tn') == 'true'

    @property
    def media_file_id(self):
        """The id of the requested file or `None`."""
        if not self.path_info:
            return None
        value = self.path_info.strip('/').split('/', 1)[0]
        try:
            return int(value)
        except ValueError:
            return None
