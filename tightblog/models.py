# -*- coding: utf-8 -*-
"""
    tightblog.models
    ~~~~~~~~~~~~~~~~

    The core models and query helper functions.

    :copyright: (c) 2009 by the TightBlog Team, see AUTHORS for more details.
    :license: BSD, see LICENSE for more details.
"""
import os
from datetime import timedelta
from uuid import uuid4

from werkzeug.security import generate_password_hash, check_password_hash

from tightblog.database import users, weblogs, user_weblog_roles, \
     weblog_categories, weblog_entries, weblog_entry_tags, \
     weblog_entry_comments, weblog_templates, template_renditions, \
     media_files, db
from tightblog.privileges import get_global_role, ADMIN
from tightblog.application import get_application
from tightblog.i18n import get_timezone
from tightblog.utils import utcnow
from tightblog.utils.exceptions import TightBlogException
from tightblog.utils.text import gen_ascii_slug, increment_string, \
     normalize_tag


#: user states
USER_REGISTERED = 'REGISTERED'
USER_EMAILVERIFIED = 'EMAILVERIFIED'
USER_ENABLED = 'ENABLED'
USER_DISABLED = 'DISABLED'
USER_STATUSES = [USER_REGISTERED, USER_EMAILVERIFIED, USER_ENABLED,
                 USER_DISABLED]

#: all kind of states for an entry
STATUS_DRAFT = 'DRAFT'
STATUS_PUBLISHED = 'PUBLISHED'
STATUS_PENDING = 'PENDING'
STATUS_SCHEDULED = 'SCHEDULED'
ENTRY_STATUSES = [STATUS_DRAFT, STATUS_PUBLISHED, STATUS_PENDING,
                  STATUS_SCHEDULED]

#: comment states
COMMENT_APPROVED = 'APPROVED'
COMMENT_PENDING = 'PENDING'
COMMENT_SPAM = 'SPAM'
COMMENT_DISAPPROVED = 'DISAPPROVED'

#: device types of template renditions
DEVICE_STANDARD = 'STANDARD'
DEVICE_MOBILE = 'MOBILE'

#: edit formats of entries
EDIT_FORMATS = ['HTML', 'COMMONMARK']

#: the default number of days comments are allowed on new entries.  Zero
#: means unlimited.
COMMENT_DAY_OPTIONS = [0, 1, 2, 3, 7, 10, 14, 21, 30, 60, 90]


class UserQuery(db.Query):
    """Add some extra query methods to the user object."""

    def get_nobody(self):
        return AnonymousUser()

    def by_username(self, username):
        return self.filter(User.username == username).first()

    def by_screen_name(self, screen_name):
        return self.filter(User.screen_name == screen_name).first()

    def enabled(self):
        return self.filter(User.status == USER_ENABLED)

    def registration_pending(self):
        """Users that registered but were not yet approved."""
        return self.filter(User.status.in_([USER_REGISTERED,
                                            USER_EMAILVERIFIED]))

    def potential_members(self, weblog):
        """Enabled users without any membership (pending or not) in
        the weblog.
        """
        members = db.select(user_weblog_roles.c.user_id) \
                    .where(user_weblog_roles.c.weblog_id == weblog.id)
        return self.enabled().filter(~User.id.in_(members))


class User(object):
    """Represents an user."""

    query = db.query_property(UserQuery)
    is_somebody = True

    def __init__(self, username, screen_name, email, password=None,
                 global_role='BLOGGER', status=USER_REGISTERED):
        self.username = username
        self.screen_name = screen_name
        self.email = email
        if password is not None:
            self.set_password(password)
        else:
            self.pw_hash = '!'
        self.global_role = global_role
        self.status = status
        self.activation_code = None
        self.date_created = utcnow()
        self.last_login = None

    @property
    def role(self):
        return get_global_role(self.global_role)

    @property
    def is_admin(self):
        return self.has_global_role(ADMIN)

    @property
    def is_enabled(self):
        return self.status == USER_ENABLED

    def has_global_role(self, role):
        return role(self.role)

    def set_password(self, password):
        self.pw_hash = generate_password_hash(password)

    def check_password(self, password):
        if not self.pw_hash or self.pw_hash == '!':
            return False
        return check_password_hash(self.pw_hash, password)

    def make_activation_code(self):
        self.activation_code = str(uuid4())
        return self.activation_code

    def to_dict(self):
        return {
            'id':               self.id,
            'username':         self.username,
            'screen_name':      self.screen_name,
            'email':            self.email,
            'global_role':      self.global_role,
            'status':           self.status,
            'date_created':     self.date_created,
            'last_login':       self.last_login
        }

    def __repr__(self):
        return '<%s %r>' % (
            self.__class__.__name__,
            self.username
        )


class AnonymousUser(object):
    """The user object for requests without a login."""

    is_somebody = False
    is_admin = False
    is_enabled = False
    id = None
    username = ''
    screen_name = ''
    global_role = 'NOAUTHNEEDED'

    @property
    def role(self):
        return get_global_role(self.global_role)

    def has_global_role(self, role):
        return role(self.role)

    def check_password(self, password):
        return False

    def __bool__(self):
        return False

    def __repr__(self):
        return '<%s>' % self.__class__.__name__


class WeblogQuery(db.Query):
    """Weblog lookups."""

    def visible(self):
        return self.filter(Weblog.visible == True)

    def by_handle(self, handle, visible_only=False):
        """Return the weblog for the handle or `None`."""
        if not handle:
            return None
        q = self.filter(Weblog.handle == handle)
        if visible_only:
            q = q.filter(Weblog.visible == True)
        return q.first()


class Weblog(object):
    """A weblog.  New weblogs come with their root category."""

    query = db.query_property(WeblogQuery)

    def __init__(self, handle, name, creator=None, theme='basic',
                 tagline='', timezone='UTC', locale='en', visible=True,
                 entry_display_count=15, allow_comments='YES',
                 default_comment_days=0, edit_format='HTML'):
        self.handle = handle
        self.name = name
        self.tagline = tagline
        self.creator = creator
        self.theme = theme
        self.timezone = timezone
        self.locale = locale
        self.visible = visible
        self.entry_display_count = entry_display_count
        self.allow_comments = allow_comments
        self.default_comment_days = default_comment_days
        self.edit_format = edit_format
        self.date_created = self.last_modified = utcnow()
        WeblogCategory(self, None, 'root')

    @property
    def tzinfo(self):
        return get_timezone(self.timezone or 'UTC')

    @property
    def is_site_weblog(self):
        app = get_application()
        return app is not None and app.cfg['site_weblog'] == self.handle

    @property
    def root_category(self):
        for category in self.categories:
            if category.parent is None:
                return category

    @property
    def commenting_enabled(self):
        """Comments are possible if neither the site nor the weblog
        forbid them.
        """
        return self.allow_comments != 'NONE' and \
            get_application().cfg['comment_policy'] != 'NONE'

    def get_category_by_path(self, path):
        """Look up a category by path.  A bare name is looked up below the
        root category, an empty path returns the root category itself.
        """
        node = self.root_category
        if not path or path == '/':
            return node
        for name in path.strip('/').split('/'):
            for child in node.children:
                if child.name == name:
                    node = child
                    break
            else:
                return None
        return node

    def get_categories(self, include_root=False):
        """All categories of the weblog, depth first."""
        return self.root_category.get_descendants(include_self=include_root)

    def mark_modified(self):
        """Invalidates cached pages of this weblog."""
        self.last_modified = utcnow()

    def to_dict(self):
        return {
            'id':                   self.id,
            'handle':               self.handle,
            'name':                 self.name,
            'tagline':              self.tagline,
            'theme':                self.theme,
            'timezone':             self.timezone,
            'locale':               self.locale,
            'visible':              self.visible,
            'entry_display_count':  self.entry_display_count,
            'allow_comments':       self.allow_comments,
            'default_comment_days': self.default_comment_days,
            'edit_format':          self.edit_format,
            'date_created':         self.date_created,
            'last_modified':        self.last_modified
        }

    def __repr__(self):
        return '<%s %r>' % (self.__class__.__name__, self.handle)


class UserWeblogRoleQuery(db.Query):
    """Membership lookups."""

    def get_role(self, user, weblog):
        return self.filter(UserWeblogRole.user_id == user.id,
                           UserWeblogRole.weblog_id == weblog.id).first()

    def for_weblog(self, weblog, include_pending=True):
        q = self.filter(UserWeblogRole.weblog_id == weblog.id)
        if not include_pending:
            q = q.filter(UserWeblogRole.pending == False)
        return q

    def for_user(self, user, include_pending=True):
        q = self.filter(UserWeblogRole.user_id == user.id)
        if not include_pending:
            q = q.filter(UserWeblogRole.pending == False)
        return q


class UserWeblogRole(object):
    """The membership of a user in a weblog.  Invitations are pending
    memberships until the user accepts them.
    """

    query = db.query_property(UserWeblogRoleQuery)

    def __init__(self, user, weblog, weblog_role, pending=False):
        self.user = user
        self.weblog = weblog
        self.weblog_role = weblog_role
        self.pending = pending

    def to_dict(self):
        return {
            'id':           self.id,
            'user':         {'id': self.user.id,
                             'screen_name': self.user.screen_name},
            'weblog':       {'id': self.weblog.id,
                             'handle': self.weblog.handle,
                             'name': self.weblog.name},
            'weblog_role':  self.weblog_role,
            'pending':      self.pending
        }

    def __repr__(self):
        return '<%s %r@%r %s%s>' % (
            self.__class__.__name__,
            self.user.username,
            self.weblog.handle,
            self.weblog_role,
            self.pending and ' (pending)' or ''
        )


class WeblogCategory(object):
    """A category.  Categories form a tree per weblog, the root category
    has the path ``/``.
    """

    def __init__(self, weblog, parent, name, description=''):
        self.weblog = weblog
        self.name = name
        self.description = description
        if parent is not None:
            self.position = len(parent.children)
            parent.children.append(self)
        else:
            self.position = 0

    @property
    def is_root(self):
        return self.parent is None

    @property
    def path(self):
        if self.parent is None:
            return '/'
        return self.parent.path.rstrip('/') + '/' + self.name

    def has_child(self, name):
        return any(child.name == name for child in self.children)

    def get_descendants(self, include_self=False):
        """Return the category tree below this category, depth first."""
        result = include_self and [self] or []
        for child in sorted(self.children, key=lambda x: x.position):
            result.extend(child.get_descendants(include_self=True))
        return result

    def is_descendant_of(self, other):
        node = self.parent
        while node is not None:
            if node is other:
                return True
            node = node.parent
        return False

    def move_to(self, new_parent):
        """Move the category below another category of the same weblog."""
        if self.is_root:
            raise TightBlogException('The root category cannot be moved')
        if new_parent is self or new_parent.is_descendant_of(self):
            raise TightBlogException('A category cannot be moved into '
                                     'its own subtree')
        if new_parent.has_child(self.name):
            raise TightBlogException('Duplicate category name %r' %
                                     self.name)
        self.parent.children.remove(self)
        self.position = len(new_parent.children)
        new_parent.children.append(self)
        self.weblog.mark_modified()

    def move_contents(self, destination):
        """Move all entries of this category and its subcategories into
        the destination category.
        """
        for category in self.get_descendants(include_self=True):
            for entry in category.entries.all():
                entry.category = destination
        self.weblog.mark_modified()

    def to_dict(self):
        return {
            'id':           self.id,
            'name':         self.name,
            'path':         self.path,
            'description':  self.description
        }

    def __repr__(self):
        return '<%s %r>' % (self.__class__.__name__, self.path)


class WeblogEntrySearchCriteria(object):
    """Search criteria for weblog entries.  Everything that is `None`
    does not restrict the result.
    """

    def __init__(self, weblog=None, category=None, tags=None, status=None,
                 start_date=None, end_date=None, text=None,
                 sort_by='PUBLICATION_TIME', ascending=False, offset=0,
                 max_results=None, creator=None, published_only=False):
        self.weblog = weblog
        self.category = category
        self.tags = tags
        self.status = status
        self.start_date = start_date
        self.end_date = end_date
        self.text = text
        self.sort_by = sort_by
        self.ascending = ascending
        self.offset = offset
        self.max_results = max_results
        self.creator = creator
        self.published_only = published_only


class WeblogEntryQuery(db.Query):
    """Add some extra query methods to the entry object."""

    def published(self, now=None):
        """Only published entries with a publication time in the past."""
        if now is None:
            now = utcnow()
        return self.filter(WeblogEntry.status == STATUS_PUBLISHED,
                           WeblogEntry.pub_time <= now)

    def for_weblog(self, weblog):
        return self.filter(WeblogEntry.weblog_id == weblog.id)

    def by_anchor(self, weblog, anchor):
        return self.for_weblog(weblog).filter(WeblogEntry.anchor == anchor) \
                   .first()

    def in_category(self, category, include_subcategories=True):
        if include_subcategories:
            ids = [x.id for x in category.get_descendants(include_self=True)]
        else:
            ids = [category.id]
        return self.filter(WeblogEntry.category_id.in_(ids))

    def tagged(self, tags):
        """Entries that carry all the given tags."""
        q = self
        for tag in tags:
            q = q.filter(WeblogEntry.id.in_(
                db.select(weblog_entry_tags.c.entry_id)
                  .where(weblog_entry_tags.c.name == normalize_tag(tag))))
        return q

    def latest(self):
        return self.order_by(WeblogEntry.pub_time.desc(),
                             WeblogEntry.id.desc())

    def search(self, criteria):
        """Apply a `WeblogEntrySearchCriteria` to the query."""
        q = self
        if criteria.weblog is not None:
            q = q.for_weblog(criteria.weblog)
        if criteria.published_only:
            q = q.published()
        elif criteria.status:
            q = q.filter(WeblogEntry.status == criteria.status)
        if criteria.category is not None:
            q = q.in_category(criteria.category)
        if criteria.tags:
            q = q.tagged(criteria.tags)
        if criteria.creator is not None:
            q = q.filter(WeblogEntry.creator_id == criteria.creator.id)
        if criteria.start_date is not None:
            q = q.filter(WeblogEntry.pub_time >= criteria.start_date)
        if criteria.end_date is not None:
            q = q.filter(WeblogEntry.pub_time < criteria.end_date)
        if criteria.text:
            pattern = '%%%s%%' % criteria.text
            q = q.filter(db.or_(WeblogEntry.title.ilike(pattern),
                                WeblogEntry.text.ilike(pattern),
                                WeblogEntry.summary.ilike(pattern)))
        if criteria.sort_by == 'UPDATE_TIME':
            column = WeblogEntry.update_time
        else:
            column = WeblogEntry.pub_time
        if criteria.ascending:
            q = q.order_by(column.asc(), WeblogEntry.id.asc())
        else:
            q = q.order_by(column.desc(), WeblogEntry.id.desc())
        if criteria.offset:
            q = q.offset(criteria.offset)
        if criteria.max_results is not None:
            q = q.limit(criteria.max_results)
        return q


class WeblogEntry(object):
    """A weblog entry."""

    query = db.query_property(WeblogEntryQuery)

    def __init__(self, weblog, title, creator=None, category=None, text='',
                 summary='', status=STATUS_DRAFT, anchor=None, pub_time=None,
                 comment_days=None, edit_format=None):
        self.weblog = weblog
        self.title = title
        self.creator = creator
        self.category = category or weblog.root_category
        self.text = text
        self.summary = summary
        self.notes = ''
        self.status = status
        self.update_time = utcnow()
        self.pub_time = pub_time
        if comment_days is None:
            comment_days = weblog.default_comment_days
        self.comment_days = comment_days
        self.edit_format = edit_format or weblog.edit_format
        self.search_description = None
        self.enclosure_url = self.enclosure_type = None
        self.enclosure_length = None
        if anchor is None:
            self.set_auto_anchor()
        else:
            self.anchor = anchor

    def set_auto_anchor(self):
        """Generate an anchor from the title that is unique in the
        weblog.
        """
        anchor = gen_ascii_slug(self.title) or 'entry'
        with db.session.no_autoflush:
            while True:
                other = WeblogEntry.query.filter(
                    WeblogEntry.weblog_id == self.weblog.id,
                    WeblogEntry.anchor == anchor).first()
                if other is None or other is self:
                    break
                anchor = increment_string(anchor)
        self.anchor = anchor

    @property
    def is_published(self):
        return self.status == STATUS_PUBLISHED and \
            self.pub_time is not None and self.pub_time <= utcnow()

    @property
    def comments_still_allowed(self):
        """Comments are allowed while the comment window is open.  Zero
        comment days mean an unlimited window.
        """
        if not self.weblog.commenting_enabled:
            return False
        if not self.comment_days:
            return True
        pub_time = self.pub_time or self.update_time
        return pub_time + timedelta(days=self.comment_days) > utcnow()

    @property
    def tag_names(self):
        return sorted(tag.name for tag in self.tags)

    @property
    def tags_as_string(self):
        return ' '.join(self.tag_names)

    def set_tags(self, names):
        """Replace the tags of the entry."""
        wanted = set(normalize_tag(x) for x in names if x.strip())
        for tag in list(self.tags):
            if tag.name not in wanted:
                self.tags.remove(tag)
            else:
                wanted.discard(tag.name)
        for name in sorted(wanted):
            self.tags.append(WeblogEntryTag(self, name))

    @property
    def approved_comments(self):
        return [x for x in self.comments if x.status == COMMENT_APPROVED]

    @property
    def permalink(self):
        from tightblog.urls import weblog_entry_url
        return weblog_entry_url(self.weblog, self.anchor)

    def to_dict(self):
        return {
            'id':                   self.id,
            'title':                self.title,
            'text':                 self.text,
            'summary':              self.summary,
            'notes':                self.notes,
            'anchor':               self.anchor,
            'status':               self.status,
            'pub_time':             self.pub_time,
            'update_time':          self.update_time,
            'category':             self.category and {
                                        'id':   self.category.id,
                                        'name': self.category.name
                                    },
            'tags':                 self.tag_names,
            'tags_as_string':       self.tags_as_string,
            'comment_days':         self.comment_days,
            'edit_format':          self.edit_format,
            'search_description':   self.search_description,
            'enclosure_url':        self.enclosure_url,
            'enclosure_type':       self.enclosure_type,
            'enclosure_length':     self.enclosure_length,
            'creator':              self.creator and {
                                        'id':          self.creator.id,
                                        'screen_name': self.creator.screen_name
                                    },
            'permalink':            self.permalink
        }

    def __repr__(self):
        return '<%s %r>' % (self.__class__.__name__, self.anchor)


class WeblogEntryTagQuery(db.Query):

    def tag_counts(self, weblog, prefix=None, limit=None):
        """Return ``(name, count)`` tuples for the tags of a weblog, sorted
        by name.
        """
        q = db.session.query(WeblogEntryTag.name,
                             db.func.count(WeblogEntryTag.id)) \
                      .filter(WeblogEntryTag.weblog_id == weblog.id)
        if prefix:
            q = q.filter(WeblogEntryTag.name.like(normalize_tag(prefix) +
                                                  '%'))
        q = q.group_by(WeblogEntryTag.name).order_by(WeblogEntryTag.name)
        if limit is not None:
            q = q.limit(limit)
        return q.all()


class WeblogEntryTag(object):
    """A tag of a weblog entry."""

    query = db.query_property(WeblogEntryTagQuery)

    def __init__(self, entry, name):
        self.weblog = entry.weblog
        self.name = normalize_tag(name)

    def __repr__(self):
        return '<%s %r>' % (self.__class__.__name__, self.name)


class WeblogEntryCommentQuery(db.Query):

    def approved(self):
        return self.filter(WeblogEntryComment.status == COMMENT_APPROVED)

    def for_weblog(self, weblog):
        entries = db.select(weblog_entries.c.entry_id) \
                    .where(weblog_entries.c.weblog_id == weblog.id)
        return self.filter(WeblogEntryComment.entry_id.in_(entries))


class WeblogEntryComment(object):
    """A comment on a weblog entry."""

    query = db.query_property(WeblogEntryCommentQuery)

    def __init__(self, entry, name, content, email=None, url=None,
                 remote_host=None, user_agent=None, referrer=None,
                 status=COMMENT_PENDING):
        self.entry = entry
        self.name = name
        self.content = content
        self.email = email
        self.url = url
        self.remote_host = remote_host
        self.user_agent = user_agent
        self.referrer = referrer
        self.status = status
        self.post_time = utcnow()

    def to_dict(self):
        return {
            'id':           self.id,
            'name':         self.name,
            'email':        self.email,
            'url':          self.url,
            'content':      self.content,
            'status':       self.status,
            'post_time':    self.post_time
        }

    def __repr__(self):
        return '<%s %r by %r>' % (self.__class__.__name__, self.id, self.name)


class WeblogTemplateQuery(db.Query):

    def for_weblog(self, weblog):
        return self.filter(WeblogTemplate.weblog_id == weblog.id) \
                   .order_by(WeblogTemplate.name)

    def by_role(self, weblog, role):
        return self.for_weblog(weblog).filter(WeblogTemplate.role == role) \
                   .first()

    def by_name(self, weblog, name):
        return self.for_weblog(weblog).filter(WeblogTemplate.name == name) \
                   .first()

    def by_path(self, weblog, relative_path):
        return self.for_weblog(weblog) \
                   .filter(WeblogTemplate.relative_path == relative_path) \
                   .first()


class WeblogTemplate(object):
    """A template stored in the database for one weblog.  Templates
    override the templates of the weblog's shared theme.
    """

    query = db.query_property(WeblogTemplateQuery)

    def __init__(self, weblog, name, role, description=''):
        self.weblog = weblog
        self.name = name
        self.role = role
        self.description = description
        self.relative_path = None
        self.last_modified = utcnow()

    @property
    def component_type(self):
        from tightblog.rendering.templates import ComponentType
        return ComponentType.get(self.role)

    def get_rendition(self, device_type=DEVICE_STANDARD):
        """Return the rendition for the device type.  If there is no
        rendition for that device the standard rendition is returned.
        """
        fallback = None
        for rendition in self.renditions:
            if rendition.device_type == device_type:
                return rendition
            if rendition.device_type == DEVICE_STANDARD:
                fallback = rendition
        return fallback

    def get_template(self, device_type=DEVICE_STANDARD):
        rendition = self.get_rendition(device_type)
        return rendition and rendition.template or None

    def set_template(self, source, device_type=DEVICE_STANDARD):
        for rendition in self.renditions:
            if rendition.device_type == device_type:
                rendition.template = source
                break
        else:
            self.renditions.append(TemplateRendition(device_type, source))
        self.last_modified = utcnow()

    def resource_id(self, device_type=DEVICE_STANDARD):
        """The name the template loader knows this template under."""
        rv = str(self.id)
        if device_type == DEVICE_MOBILE:
            rv += ';mobile'
        return rv

    def to_dict(self):
        return {
            'id':               self.id,
            'name':             self.name,
            'role':             self.role,
            'description':      self.description,
            'relative_path':    self.relative_path,
            'last_modified':    self.last_modified,
            'device_types':     sorted(x.device_type for x in
                                       self.renditions)
        }

    def __repr__(self):
        return '<%s %r>' % (self.__class__.__name__, self.name)


class TemplateRendition(object):
    """The source of a template for one device type."""

    def __init__(self, device_type, template):
        self.device_type = device_type
        self.template = template


class MediaFileQuery(db.Query):

    def for_weblog(self, weblog):
        return self.filter(MediaFile.weblog_id == weblog.id)


class MediaFile(object):
    """A file uploaded to a weblog.  The content is stored in the media
    folder of the instance.
    """

    query = db.query_property(MediaFileQuery)

    def __init__(self, weblog, name, content_type, creator=None,
                 length=0, alt_text=''):
        self.weblog = weblog
        self.name = name
        self.content_type = content_type
        self.creator = creator
        self.length = length
        self.alt_text = alt_text
        self.last_updated = utcnow()

    @property
    def is_image(self):
        return self.content_type.startswith('image/')

    @property
    def folder(self):
        app = get_application()
        return os.path.join(app.instance_folder, app.cfg['media_folder'],
                            str(self.weblog_id))

    @property
    def content_path(self):
        return os.path.join(self.folder, str(self.id))

    @property
    def thumbnail_path(self):
        return os.path.join(self.folder, '%s_sm' % self.id)

    def to_dict(self):
        from tightblog.urls import media_file_url
        return {
            'id':               self.id,
            'name':             self.name,
            'content_type':     self.content_type,
            'length':           self.length,
            'alt_text':         self.alt_text,
            'last_updated':     self.last_updated,
            'url':              media_file_url(self.weblog, self.id)
        }

    def __repr__(self):
        return '<%s %r>' % (self.__class__.__name__, self.name)


# connect the tables.
db.mapper(User, users, properties={
    'id':               users.c.user_id,
    'email':            users.c.email_address,
    'weblog_roles':     db.relationship(UserWeblogRole, backref='user',
                                        cascade='all, delete-orphan')
})
db.mapper(Weblog, weblogs, properties={
    'id':               weblogs.c.weblog_id,
    'creator':          db.relationship(User),
    'categories':       db.relationship(WeblogCategory, backref='weblog',
                                        cascade='all, delete-orphan'),
    'entries':          db.dynamic_loader(WeblogEntry, backref='weblog',
                                          query_class=WeblogEntryQuery,
                                          cascade='all, delete-orphan'),
    'templates':        db.relationship(WeblogTemplate, backref='weblog',
                                        cascade='all, delete-orphan'),
    'roles':            db.relationship(UserWeblogRole, backref='weblog',
                                        cascade='all, delete-orphan'),
    'media_files':      db.relationship(MediaFile, backref='weblog',
                                        cascade='all, delete-orphan')
})
db.mapper(UserWeblogRole, user_weblog_roles, properties={
    'id':               user_weblog_roles.c.role_id
})
db.mapper(WeblogCategory, weblog_categories, properties={
    'id':               weblog_categories.c.category_id,
    'children':         db.relationship(WeblogCategory,
        order_by=[weblog_categories.c.position],
        backref=db.backref('parent',
                           remote_side=[weblog_categories.c.category_id])
    ),
    'entries':          db.dynamic_loader(WeblogEntry, backref='category',
                                          query_class=WeblogEntryQuery)
})
db.mapper(WeblogEntry, weblog_entries, properties={
    'id':               weblog_entries.c.entry_id,
    'creator':          db.relationship(User),
    'tags':             db.relationship(WeblogEntryTag, backref='entry',
                                        order_by=[weblog_entry_tags.c.name],
                                        cascade='all, delete-orphan'),
    'comments':         db.relationship(WeblogEntryComment, backref='entry',
        order_by=[weblog_entry_comments.c.post_time],
        cascade='all, delete-orphan'
    )
})
db.mapper(WeblogEntryTag, weblog_entry_tags, properties={
    'id':               weblog_entry_tags.c.tag_id,
    'weblog':           db.relationship(Weblog)
})
db.mapper(WeblogEntryComment, weblog_entry_comments, properties={
    'id':               weblog_entry_comments.c.comment_id
})
db.mapper(WeblogTemplate, weblog_templates, properties={
    'id':               weblog_templates.c.template_id,
    'renditions':       db.relationship(TemplateRendition,
                                        backref='weblog_template',
                                        cascade='all, delete-orphan')
})
db.mapper(TemplateRendition, template_renditions, properties={
    'id':               template_renditions.c.rendition_id
})
db.mapper(MediaFile, media_files, properties={
    'id':               media_files.c.media_file_id,
    'creator':          db.relationship(User)
})
