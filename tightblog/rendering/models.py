# -*- coding: utf-8 -*-
"""
    tightblog.rendering.models
    ~~~~~~~~~~~~~~~~~~~~~~~~~~

    The page models.  A model is an object that is handed to the templates
    under its model name.  Models are grouped into model sets, the
    processors ask for a model map of one or more sets and pass it to the
    renderer as template context::

        model_map = get_model_map('pageModelSet', {
            'parsed_request':   page_request,
            'request_parameters': request.args
        })

    :copyright: (c) 2009 by the TightBlog Team, see AUTHORS for more details.
    :license: BSD, see LICENSE for more details.
"""
import re

from markupsafe import Markup, escape

from tightblog.application import get_application, url_for
from tightblog.database import db
from tightblog.models import Weblog, WeblogEntry, WeblogEntryComment, \
     WeblogEntryTag, WeblogCategory, User, COMMENT_APPROVED
from tightblog.privileges import check_weblog_role, OWNER, POST, \
     EDIT_DRAFT
from tightblog.i18n import lazy_gettext, format_datetime, format_date, \
     to_local_timezone
from tightblog.urls import weblog_url, weblog_entry_url, \
     weblog_collection_url, weblog_page_url, weblog_tags_index_url, \
     weblog_template_url, media_file_url, shared_url
from tightblog.utils import utcnow, log
from tightblog.utils.exceptions import TightBlogException
from tightblog.utils.http import make_external_url
from tightblog.rendering.pagers import WeblogEntriesPermalinkPager, \
     WeblogEntriesTimePager, LATEST, DAY, MONTH
from tightblog.rendering.requests import WeblogPageRequest
from tightblog.rendering.comments import CommentForm
from tightblog.rendering.templates import get_weblog_theme, WEBLOG


_tag_re = re.compile(r'<[^>]*>')

#: the actions of the editor menu with the weblog role they require
EDITOR_MENU = [
    ('entryAdd',    lazy_gettext('New Entry'),      EDIT_DRAFT),
    ('entries',     lazy_gettext('Entries'),        EDIT_DRAFT),
    ('comments',    lazy_gettext('Comments'),       POST),
    ('categories',  lazy_gettext('Categories'),     POST),
    ('mediaFiles',  lazy_gettext('Media Files'),    POST),
    ('templates',   lazy_gettext('Templates'),      OWNER),
    ('members',     lazy_gettext('Members'),        OWNER),
    ('weblogConfig', lazy_gettext('Settings'),      OWNER)
]


class Model(object):
    """Base class for models."""

    #: the name the model is available under in the templates
    model_name = None

    def init(self, init_data):
        pass


def _get_page_request(init_data):
    page_request = init_data.get('parsed_request')
    if page_request is None:
        raise TightBlogException('expected a parsed request in the init data')
    if not isinstance(page_request, WeblogPageRequest):
        raise TightBlogException('%r is not a page request, the page model '
                                 'only supports page requests' % page_request)
    return page_request


class PageModel(Model):
    """The model for weblog pages."""

    model_name = 'model'
    is_preview = False
    is_search_results = False
    include_drafts = False

    def init(self, init_data):
        self.page_request = _get_page_request(init_data)
        self.comment_form = init_data.get('comment_form') or CommentForm()
        self.request_parameters = init_data.get('request_parameters') or {}
        self.weblog = self.page_request.weblog
        self.device_type = self.page_request.device_type

    @property
    def locale(self):
        return self.weblog.locale

    @property
    def is_permalink(self):
        return self.page_request.weblog_anchor is not None

    @property
    def weblog_entry(self):
        return self.page_request.weblog_entry

    @property
    def weblog_page(self):
        """The requested custom page or the theme's weblog template."""
        if self.page_request.weblog_page is not None:
            return self.page_request.weblog_page
        return get_weblog_theme(self.weblog).get_template_by_role(WEBLOG.name)

    def get_template_by_name(self, name):
        return get_weblog_theme(self.weblog).get_template_by_name(name)

    @property
    def weblog_category(self):
        return self.page_request.weblog_category

    @property
    def tags(self):
        return self.page_request.tags or []

    def get_tag_counts(self, length=None):
        """The tags of the weblog as ``(name, count)`` tuples."""
        return WeblogEntryTag.query.tag_counts(self.weblog, None, length)

    def get_request_parameter(self, name):
        """The first value of a request parameter or `None`."""
        params = self.request_parameters
        if hasattr(params, 'getlist'):
            values = params.getlist(name)
        else:
            values = params.get(name)
            if values is not None and not isinstance(values, (list, tuple)):
                values = [values]
        if values:
            return values[0]

    def get_weblog_entries_pager(self, cat=None, tag=None):
        """Return the pager for the entries of this page.  Category and tag
        arguments replace the values of the request unless they are empty
        or ``'nil'``.
        """
        req = self.page_request
        category_name = req.category_name
        if cat and cat != 'nil':
            category_name = cat
        tags = req.tags
        if tag and tag != 'nil':
            tags = [tag]

        if req.weblog_anchor is not None:
            return WeblogEntriesPermalinkPager(
                self.weblog, req.custom_page_name, req.weblog_anchor,
                category_name, tags, self.include_drafts)

        interval = LATEST
        if req.date_string is not None:
            if len(req.date_string) == 8:
                interval = DAY
            elif len(req.date_string) == 6:
                interval = MONTH
        return WeblogEntriesTimePager(interval, self.weblog, req.date_string,
                                      category_name, tags, req.page_num)

    def get_editor_menu(self):
        """The editor actions the current user may use on this weblog.
        Anonymous visitors get `None`.
        """
        if not self.page_request.is_logged_in:
            return None
        user = self.page_request.user
        items = []
        for action, label, role in EDITOR_MENU:
            if check_weblog_role(user, self.weblog, role):
                items.append({
                    'action':   action,
                    'label':    label,
                    'url':      make_external_url(
                        'tb-ui/app/authoring/%s?weblogId=%s' %
                        (action, self.weblog.id))
                })
        return items or None


class PreviewPageModel(PageModel):
    """The page model in preview mode.  Permalinks to drafts work."""

    is_preview = True
    include_drafts = True


class SiteModel(Model):
    """Site wide information for the site weblog."""

    model_name = 'site'

    def get_weblogs(self, letter=None, offset=0, length=None):
        """The visible weblogs ordered by name.  The letter restricts the
        list to names starting with it.
        """
        q = Weblog.query.visible()
        if letter:
            q = q.filter(Weblog.name.ilike(letter + '%'))
        q = q.order_by(Weblog.name).offset(offset)
        if length is not None:
            q = q.limit(length)
        return q.all()

    def get_weblog(self, handle):
        return Weblog.query.by_handle(handle, visible_only=True)

    def get_recent_entries(self, length=10, category=None):
        """The latest published entries of all visible weblogs."""
        q = WeblogEntry.query.published().join(Weblog) \
                       .filter(Weblog.visible == True)
        if category:
            q = q.join(WeblogCategory,
                       WeblogEntry.category_id == WeblogCategory.id) \
                 .filter(WeblogCategory.name == category)
        return q.latest().limit(length).all()

    def get_recent_comments(self, length=10):
        return WeblogEntryComment.query.approved() \
            .order_by(WeblogEntryComment.post_time.desc()) \
            .limit(length).all()

    def get_hot_tags(self, length=20):
        """The most used tags of the site as ``(name, count)`` tuples."""
        count = db.func.count(WeblogEntryTag.id)
        return db.session.query(WeblogEntryTag.name, count) \
                 .group_by(WeblogEntryTag.name) \
                 .order_by(count.desc(), WeblogEntryTag.name) \
                 .limit(length).all()

    @property
    def weblog_count(self):
        return Weblog.query.visible().count()

    @property
    def user_count(self):
        return User.query.enabled().count()

    @property
    def entry_count(self):
        return WeblogEntry.query.published().count()

    @property
    def comment_count(self):
        return WeblogEntryComment.query.filter(
            WeblogEntryComment.status == COMMENT_APPROVED).count()


class URLModel(Model):
    """Builds the URLs of the weblog for the templates."""

    model_name = 'url'

    def init(self, init_data):
        parsed_request = init_data.get('parsed_request')
        if parsed_request is None or parsed_request.weblog is None:
            raise TightBlogException('expected a weblog request in the '
                                     'init data')
        self.weblog = parsed_request.weblog

    @property
    def site(self):
        return get_application().cfg['site_url']

    @property
    def home(self):
        return weblog_url(self.weblog)

    def entry(self, anchor):
        return weblog_entry_url(self.weblog, anchor)

    def collection(self, category=None, date=None, tags=None, page=0):
        return weblog_collection_url(self.weblog, category, date, tags, page)

    def category(self, name, page=0):
        return self.collection(category=name, page=page)

    def date(self, date_string, page=0):
        return self.collection(date=date_string, page=page)

    def tag(self, name, page=0):
        return self.collection(tags=[name], page=page)

    def page(self, name, category=None, date=None, tags=None, page=0):
        return weblog_page_url(self.weblog, name, category, date, tags, page)

    @property
    def tags_index(self):
        return weblog_tags_index_url(self.weblog)

    def template(self, name):
        """The URL of an accessible template of the weblog's theme."""
        template = get_weblog_theme(self.weblog).get_template_by_name(name)
        if template is None:
            return None
        return weblog_template_url(self.weblog, template)

    def media_file(self, media_file_id, thumbnail=False):
        return media_file_url(self.weblog, media_file_id, thumbnail)

    def shared(self, filename):
        return shared_url(filename)


class PreviewURLModel(URLModel):
    """The URL model of preview pages.  Links to pages of the weblog stay
    in preview mode and keep the previewed theme.
    """

    def init(self, init_data):
        URLModel.init(self, init_data)
        parsed_request = init_data['parsed_request']
        self.theme_name = getattr(parsed_request, 'theme_name', None)

    def _preview(self, path_info=None, **args):
        args = dict((k, v) for k, v in args.items() if v)
        if path_info:
            args['path_info'] = path_info
        if self.theme_name:
            args['theme'] = self.theme_name
        return url_for('weblog/preview', handle=self.weblog.handle, **args)

    @property
    def home(self):
        return self._preview()

    def entry(self, anchor):
        return self._preview('entry/' + anchor)

    def collection(self, category=None, date=None, tags=None, page=0):
        args = {}
        if page > 0:
            args['page'] = page
        if category:
            return self._preview('category/' + category, date=date, **args)
        if date:
            return self._preview('date/' + date, **args)
        if tags:
            return self._preview('tags/' + '+'.join(tags), **args)
        return self._preview(**args)

    def page(self, name, category=None, date=None, tags=None, page=0):
        args = {}
        if category:
            args['cat'] = category
        if date:
            args['date'] = date
        if tags:
            args['tags'] = '+'.join(tags)
        if page > 0:
            args['page'] = page
        return self._preview('page/' + name, **args)

    @property
    def tags_index(self):
        return self._preview('tags/')


class UtilitiesModel(Model):
    """Text and date helpers for the templates."""

    model_name = 'utils'

    def init(self, init_data):
        parsed_request = init_data.get('parsed_request')
        self.weblog = parsed_request and parsed_request.weblog or None
        self.user = parsed_request and parsed_request.user or None

    @property
    def is_user_authenticated(self):
        return self.user is not None and self.user.is_somebody

    @property
    def now(self):
        return utcnow()

    def format_date(self, value, format='medium'):
        """Format a date in the timezone of the weblog."""
        if value is None:
            return ''
        return format_date(value, format, self.weblog.tzinfo)

    def format_datetime(self, value, format='medium'):
        if value is None:
            return ''
        return format_datetime(value, format, self.weblog.tzinfo)

    def format_iso8601(self, value):
        if value is None:
            return ''
        return to_local_timezone(value, self.weblog.tzinfo).isoformat()

    def escape_html(self, text):
        return escape(text or '')

    def strip_html(self, text):
        return _tag_re.sub('', text or '')

    def truncate(self, text, length=100, ellipsis='...'):
        """Strip the markup and cut the text after `length` characters at
        a word boundary.
        """
        text = self.strip_html(text)
        if len(text) <= length:
            return text
        return text[:length].rsplit(None, 1)[0] + ellipsis

    def safe(self, text):
        return Markup(text or '')


#: the model sets by name
MODEL_SETS = {
    'pageModelSet':     [PageModel, URLModel, UtilitiesModel],
    'previewModelSet':  [PreviewPageModel, PreviewURLModel, UtilitiesModel],
    'siteModelSet':     [SiteModel]
}


def get_model_map(set_name, init_data, model_map=None):
    """Initialize the models of a model set and add them to the model map
    under their names.  Failures raise a `TightBlogException`.
    """
    if model_map is None:
        model_map = {}
    try:
        models = MODEL_SETS[set_name]
    except KeyError:
        raise TightBlogException('unknown model set %r' % set_name)
    for model_class in models:
        model = model_class()
        try:
            model.init(init_data)
        except TightBlogException:
            raise
        except Exception as e:
            log.exception('Model %s failed to initialize' %
                          model_class.__name__, 'rendering')
            raise TightBlogException('model %s failed' %
                                     model_class.__name__, e)
        model_map[model.model_name] = model
    return model_map
