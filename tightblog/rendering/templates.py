# -*- coding: utf-8 -*-
"""
    tightblog.rendering.templates
    ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

    Themes and the template resolver.

    Shared themes are folders with a ``metadata.txt`` file and the template
    files of the theme.  The metadata names the theme and maps the files to
    their roles::

        name: Basic
        description: A simple theme
        author: The TightBlog Team
        enabled: yes
        roles: weblog.html=WEBLOG, permalink.html=PERMALINK

    A template file can have a rendition for mobile devices in the
    ``mobile/`` subfolder of the theme.

    Every weblog uses one shared theme.  Templates stored in the database
    for a weblog override the templates of the shared theme.  The template
    environment loads templates by resource id: ``theme:template`` for
    shared templates, the numeric id for database templates.  The suffix
    ``;mobile`` selects the mobile rendition.

    :copyright: (c) 2009 by the TightBlog Team, see AUTHORS for more details.
    :license: BSD, see LICENSE for more details.
"""
from os import path, listdir

from jinja2 import BaseLoader, TemplateNotFound, TemplateError

from tightblog.environment import BUILTIN_THEME_PATH
from tightblog.database import db
from tightblog.models import WeblogTemplate, DEVICE_STANDARD, DEVICE_MOBILE
from tightblog.utils import log
from tightblog.utils.exceptions import TightBlogException


MOBILE_SUFFIX = ';mobile'

#: the source new database templates start with
NEW_TEMPLATE_CONTENT = '<p>Edit this template to add content.</p>\n'


class ComponentType(object):
    """The role of a template."""
    _registry = {}

    def __init__(self, name, content_type, singleton, accessible,
                 readable_name):
        self.name = name
        self.content_type = content_type
        self.singleton = singleton
        self.accessible = accessible
        self.readable_name = readable_name

    @classmethod
    def register(cls, *args):
        rv = cls(*args)
        cls._registry[rv.name] = rv
        return rv

    @classmethod
    def get(cls, name):
        return cls._registry.get(name)

    @classmethod
    def all(cls):
        return list(cls._registry.values())

    def __repr__(self):
        return '<%s %s>' % (self.__class__.__name__, self.name)


WEBLOG = ComponentType.register('WEBLOG', 'text/html', True, False,
                                'Weblog')
PERMALINK = ComponentType.register('PERMALINK', 'text/html', True, False,
                                   'Permalink')
SEARCH = ComponentType.register('SEARCH', 'text/html', True, False,
                                'Search Results')
TAGSINDEX = ComponentType.register('TAGSINDEX', 'text/html', True, False,
                                   'Tag Index')
JAVASCRIPT = ComponentType.register('JAVASCRIPT', 'application/javascript',
                                    False, True, 'JavaScript file')
STYLESHEET = ComponentType.register('STYLESHEET', 'text/css', True, True,
                                    'Stylesheet')
CUSTOM_INTERNAL = ComponentType.register('CUSTOM_INTERNAL', 'text/html',
                                         False, False, 'Custom internal')
CUSTOM_EXTERNAL = ComponentType.register('CUSTOM_EXTERNAL', 'text/html',
                                         False, True, 'Custom external')

#: the order the roles are offered in
COMPONENT_TYPES = [WEBLOG, PERMALINK, SEARCH, TAGSINDEX, JAVASCRIPT,
                   STYLESHEET, CUSTOM_INTERNAL, CUSTOM_EXTERNAL]


def parse_metadata(string):
    """Parse the metadata of a theme.

    >>> parse_metadata('Name: Basic\\n# comment\\nEnabled: yes')
    {'name': 'Basic', 'enabled': 'yes'}
    """
    result = {}
    lines = iter(string.splitlines())
    for line in lines:
        line = line.strip()
        if not line or line.startswith('#'):
            continue
        if ':' not in line:
            key = line
            value = ''
        else:
            key, value = line.split(':', 1)
        while value.endswith('\\'):
            try:
                value = value[:-1] + next(lines).rstrip('\n')
            except StopIteration:
                break
        key = '_'.join(key.lower().split())
        result[key] = value.strip()
    return result


def parse_roles(value):
    """Parse the ``file=ROLE`` list of a theme's metadata.

    >>> parse_roles('weblog.html=WEBLOG, basic.css = stylesheet')
    [('weblog.html', 'WEBLOG'), ('basic.css', 'STYLESHEET')]
    """
    result = []
    for item in value.split(','):
        if '=' not in item:
            continue
        filename, role = item.split('=', 1)
        result.append((filename.strip(), role.strip().upper()))
    return result


class SharedTemplate(object):
    """A template file of a shared theme."""

    def __init__(self, theme, name, role):
        self.theme = theme
        self.name = name
        self.relative_path = name
        self.role = role
        self.description = ''

    @property
    def id(self):
        return '%s:%s' % (self.theme.name, self.name)

    @property
    def component_type(self):
        return ComponentType.get(self.role)

    def _get_filename(self, device_type):
        if device_type == DEVICE_MOBILE:
            filename = path.join(self.theme.folder, 'mobile', self.name)
            if path.isfile(filename):
                return filename
        return path.join(self.theme.folder, self.name)

    def get_template(self, device_type=DEVICE_STANDARD):
        """The source of the rendition for the device type."""
        filename = self._get_filename(device_type)
        if not path.isfile(filename):
            return None
        with open(filename, encoding='utf-8') as f:
            return f.read()

    def get_source(self, device_type):
        filename = self._get_filename(device_type)
        source = self.get_template(device_type)
        if source is None:
            return None
        mtime = path.getmtime(filename)
        return source, filename, lambda: mtime == path.getmtime(filename)

    def resource_id(self, device_type=DEVICE_STANDARD):
        rv = self.id
        if device_type == DEVICE_MOBILE:
            rv += MOBILE_SUFFIX
        return rv

    def to_dict(self):
        return {
            'id':               self.id,
            'name':             self.name,
            'role':             self.role,
            'relative_path':    self.relative_path,
            'shared':           True
        }

    def __repr__(self):
        return '<%s %r>' % (self.__class__.__name__, self.id)


class SharedTheme(object):
    """A theme that lives in a folder on the file system."""

    def __init__(self, name, folder, metadata):
        self.name = name
        self.folder = folder
        self.metadata = metadata
        self.templates = []
        for filename, role in parse_roles(metadata.get('roles', '')):
            if ComponentType.get(role) is None:
                log.warning('Theme %s uses unknown role %s for %s' %
                            (name, role, filename), 'themes')
                continue
            self.templates.append(SharedTemplate(self, filename, role))

    @property
    def display_name(self):
        return self.metadata.get('name') or self.name.title()

    @property
    def description(self):
        return self.metadata.get('description', '')

    @property
    def author(self):
        return self.metadata.get('author', '')

    @property
    def enabled(self):
        return self.metadata.get('enabled', 'yes').lower() in \
            ('yes', 'true', '1', 'on')

    def get_template_by_role(self, role):
        for template in self.templates:
            if template.role == role:
                return template

    def get_template_by_name(self, name):
        for template in self.templates:
            if template.name == name:
                return template

    def get_template_by_path(self, relative_path):
        return self.get_template_by_name(relative_path)

    def to_dict(self):
        return {
            'id':           self.name,
            'name':         self.display_name,
            'description':  self.description,
            'author':       self.author,
            'enabled':      self.enabled
        }

    def __repr__(self):
        return '<%s %r>' % (self.__class__.__name__, self.name)


def find_themes(folder):
    """Yield the shared themes in a folder."""
    if not folder or not path.isdir(folder):
        return
    for name in sorted(listdir(folder)):
        theme_folder = path.join(folder, name)
        metadata_file = path.join(theme_folder, 'metadata.txt')
        if not path.isfile(metadata_file):
            continue
        with open(metadata_file, encoding='utf-8') as f:
            metadata = parse_metadata(f.read())
        yield SharedTheme(name, theme_folder, metadata)


def load_shared_themes(app):
    """Load the builtin themes and the themes from the configured theme
    folder.  Themes from the theme folder replace builtin themes of the
    same name.
    """
    themes = {}
    folders = [BUILTIN_THEME_PATH]
    if app.cfg['theme_folder']:
        folders.append(path.join(app.instance_folder, app.cfg['theme_folder']))
    for folder in folders:
        for theme in find_themes(folder):
            themes[theme.name] = theme
    return themes


class WeblogPreviewCopy(object):
    """A temporary copy of a weblog that uses another shared theme.  All
    other attributes are forwarded to the real weblog.
    """
    temp_preview = True

    def __init__(self, weblog, theme):
        self.__dict__['_weblog'] = weblog
        self.__dict__['theme'] = theme

    def __getattr__(self, name):
        return getattr(self._weblog, name)

    def __setattr__(self, name, value):
        raise AttributeError('preview copies are read only')

    def __repr__(self):
        return '<%s %r with %r>' % (
            self.__class__.__name__,
            self._weblog.handle,
            self.theme
        )


class WeblogTheme(object):
    """The templates of a weblog: the database templates of the weblog
    first, then the shared theme.  Temporary preview copies only use the
    shared theme.
    """

    def __init__(self, weblog, shared_theme):
        self.weblog = weblog
        self.shared_theme = shared_theme
        self.use_database = not getattr(weblog, 'temp_preview', False)

    def get_template_by_role(self, role):
        if self.use_database:
            rv = WeblogTemplate.query.by_role(self.weblog, role)
            if rv is not None:
                return rv
        if self.shared_theme is not None:
            return self.shared_theme.get_template_by_role(role)

    def get_template_by_name(self, name):
        if self.use_database:
            rv = WeblogTemplate.query.by_name(self.weblog, name)
            if rv is not None:
                return rv
        if self.shared_theme is not None:
            return self.shared_theme.get_template_by_name(name)

    def get_template_by_path(self, relative_path):
        if self.use_database:
            rv = WeblogTemplate.query.by_path(self.weblog, relative_path)
            if rv is not None:
                return rv
        if self.shared_theme is not None:
            return self.shared_theme.get_template_by_path(relative_path)

    def get_templates(self):
        """All templates, database templates replace the shared templates
        of the same name.
        """
        result = {}
        if self.shared_theme is not None:
            for template in self.shared_theme.templates:
                result[template.name] = template
        if self.use_database:
            for template in WeblogTemplate.query.for_weblog(self.weblog):
                result[template.name] = template
        return sorted(result.values(), key=lambda x: x.name)


def get_weblog_theme(weblog):
    """Return the theme of a weblog."""
    from tightblog.application import get_application
    shared = get_application().themes.get(weblog.theme)
    if shared is None:
        log.warning('Weblog %s uses the unknown theme %s' %
                    (weblog.handle, weblog.theme), 'themes')
    return WeblogTheme(weblog, shared)


class ThemeTemplateResolver(BaseLoader):
    """Loads shared theme templates and weblog templates by their resource
    id.  Unknown ids raise `TemplateNotFound` so that the next loader is
    asked.
    """

    def __init__(self, app):
        BaseLoader.__init__(self)
        self.app = app

    def get_source(self, environment, resource_id):
        if not resource_id:
            log.error('No resource id provided', 'themes')
            raise TemplateNotFound(resource_id)

        device_type = DEVICE_STANDARD
        name = resource_id
        if name.endswith(MOBILE_SUFFIX):
            name = name[:-len(MOBILE_SUFFIX)]
            device_type = DEVICE_MOBILE

        if ':' in name:
            theme_name, template_name = name.split(':', 1)
            theme = self.app.themes.get(theme_name)
            template = theme and theme.get_template_by_name(template_name)
            rv = template and template.get_source(device_type)
            if rv is None:
                raise TemplateNotFound(resource_id)
            return rv

        # everything else must be the id of a weblog template
        try:
            template_id = int(name)
        except ValueError:
            raise TemplateNotFound(resource_id)
        template = db.session.get(WeblogTemplate, template_id)
        source = template and template.get_template(device_type)
        if source is None:
            raise TemplateNotFound(resource_id)
        last_modified = template.last_modified

        def uptodate():
            current = db.session.get(WeblogTemplate, template_id)
            return current is not None and \
                current.last_modified == last_modified
        return source, None, uptodate


class Renderer(object):
    """Renders one template with a model map."""

    def __init__(self, template):
        self.template = template

    def render(self, model_map):
        return self.template.render(model_map)


class RendererManager(object):
    """Looks up the renderers for templates."""

    def __init__(self, app):
        self.app = app

    def get_renderer(self, template, device_type=DEVICE_STANDARD):
        """Return the renderer for the template and the device type.  If
        the template has no source a `TightBlogException` is raised.
        """
        resource_id = template.resource_id(device_type)
        try:
            return Renderer(self.app.template_env.get_template(resource_id))
        except TemplateNotFound as e:
            raise TightBlogException('No source for template %s' %
                                     resource_id, e)
        except TemplateError as e:
            raise TightBlogException('Template %s is broken: %s' %
                                     (resource_id, e), e)
