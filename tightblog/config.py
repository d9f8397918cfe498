# -*- coding: utf-8 -*-
"""
    tightblog.config
    ~~~~~~~~~~~~~~~~

    This module implements the configuration.  The configuration is a more
    or less flat thing saved as ini in the instance folder.  If the
    configuration changes on the file system the application is recreated
    by the WSGI proxy (see `tightblog._core.get_wsgi_app`).

    Site wide settings (the registration policy, comment handling, the
    cache sizes and so on) live here as well, so the management script and
    the admin views change them the same way.

    :copyright: (c) 2009 by the TightBlog Team, see AUTHORS for more details.
    :license: BSD, see LICENSE for more details.
"""
import os
from os import path
from threading import Lock

from tightblog.i18n import lazy_gettext, _, list_timezones
from tightblog.utils import log
from tightblog.utils.forms import TextField, IntegerField, BooleanField, \
     ChoiceField, CommaSeparated
from tightblog.utils.validators import ValidationError, is_valid_url
from tightblog.application import InternalError


#: registration policies
REGISTRATION_POLICIES = ['DISABLED', 'EMAIL', 'APPROVAL_REQUIRED']

#: site wide comment policies.  Weblogs can only restrict them further.
COMMENT_POLICIES = ['NONE', 'MUSTMODERATE', 'YES']


#: variables the tightblog core uses
DEFAULT_VARS = {
    # general settings
    'database_uri':             TextField(default='sqlite:///tightblog.db'),
    'site_name':                TextField(default=lazy_gettext('TightBlog')),
    'site_url':                 TextField(default='http://localhost:8080/',
                                          validators=[is_valid_url()]),
    'site_weblog':              TextField(default=''),
    'timezone':                 ChoiceField(choices=[x[0] for x in
                                                     list_timezones()],
                                            default='UTC'),
    'language':                 TextField(default='en'),
    'session_cookie_name':      TextField(default='tightblog_session'),
    'secret_key':               TextField(default=''),
    'theme_folder':             TextField(default=''),
    'media_folder':             TextField(default='mediafiles'),

    # logger settings
    'log_file':                 TextField(default='tightblog.log'),
    'log_level':                ChoiceField(choices=sorted(log.LEVELS,
                                                key=lambda x: log.LEVELS[x]),
                                            default='warning'),

    # if set to true, internal errors are not caught.  This is useful for
    # debugging tools such as werkzeug.debug
    'passthrough_errors':       BooleanField(),

    # rendering
    'max_entries_per_page':     IntegerField(default=30, min_value=1),
    'page_cache_size':          IntegerField(default=400),
    'page_cache_timeout':       IntegerField(default=3600, min_value=1),
    'media_cache_size':         IntegerField(default=400),
    'media_cache_timeout':      IntegerField(default=3600, min_value=1),

    # users and weblogs
    'registration_policy':      ChoiceField(choices=REGISTRATION_POLICIES,
                                            default='APPROVAL_REQUIRED'),
    'users_create_blogs':       BooleanField(default=True),
    'max_autocomplete_tags':    IntegerField(default=20, min_value=1),
    'reserved_handles':         CommaSeparated(TextField(),
                                               default=lambda: ['tb-ui']),

    # comments
    'comment_policy':           ChoiceField(choices=COMMENT_POLICIES,
                                            default='MUSTMODERATE'),
    'akismet_api_key':          TextField(default=''),
    'delete_blatant_spam':      BooleanField(),
    'comment_max_links':        IntegerField(default=3, min_value=0),
    'comment_max_size':         IntegerField(default=1000, min_value=1)
}

HIDDEN_KEYS = set(('secret_key', 'akismet_api_key'))


def unquote_value(value):
    """Unquote a configuration value."""
    if not value:
        return ''
    if value[0] in '"\'' and value[0] == value[-1]:
        value = value[1:-1].encode('latin-1', 'backslashreplace') \
                           .decode('unicode-escape')
    return value


def quote_value(value):
    """Quote a configuration value."""
    if not value:
        return ''
    if value.strip() == value and value[0] not in '"\'' and \
       value[-1] not in '"\'' and len(value.splitlines()) == 1:
        return value
    return '"%s"' % value.replace('\\', '\\\\') \
                         .replace('\n', '\\n') \
                         .replace('\r', '\\r') \
                         .replace('\t', '\\t') \
                         .replace('"', '\\"')


def from_string(value, field):
    """Try to convert a value from string or fall back to the default."""
    try:
        return field(value)
    except ValidationError:
        return field.get_default()


class ConfigurationTransactionError(InternalError):
    """An exception that is raised if the transaction was unable to
    write the changes to the config file.
    """

    def __init__(self, message_or_exception):
        if isinstance(message_or_exception, str):
            message = message_or_exception
            error = None
        else:
            message = _('Could not save configuration file: %s') % \
                      message_or_exception
            error = message_or_exception
        InternalError.__init__(self, message, error)
        self.original_exception = error


class Configuration(object):
    """Helper class that manages configuration values in a INI configuration
    file.

    >>> app.cfg['comment_policy']
    'MUSTMODERATE'
    >>> app.cfg.change_single('comment_policy', 'YES')
    >>> app.cfg['comment_policy']
    'YES'
    >>> t = app.cfg.edit(); t.revert_to_default('comment_policy'); t.commit()
    >>> app.cfg['comment_policy']
    'MUSTMODERATE'
    """

    def __init__(self, filename):
        self.filename = filename

        self.config_vars = DEFAULT_VARS.copy()
        self._values = {}
        self._converted_values = {}
        self._comments = {}
        self._lock = Lock()

        # if the path does not exist yet set the existing flag to none and
        # set the time timetamp for the filename to something in the past
        if not path.exists(self.filename):
            self.exists = False
            self._load_time = 0
            return

        # otherwise parse the file and copy all values into the internal
        # values dict.  Do that also for values not covered by the current
        # `config_vars` dict to preserve unknown variables
        self._load_time = path.getmtime(self.filename)
        self.exists = True
        section = 'tightblog'
        current_comment = ''
        with open(self.filename, encoding='utf-8') as f:
            for line in f:
                line = line.strip()
                if not line or line[0] in '#;':
                    current_comment += line + '\n'
                    continue
                elif line[0] == '[' and line[-1] == ']':
                    section = line[1:-1].strip()
                    if current_comment.strip():
                        self._comments['[%s]' % section] = current_comment
                    current_comment = ''
                elif '=' not in line:
                    key = line.strip()
                    if current_comment.strip():
                        self._comments[key] = current_comment
                    current_comment = ''
                else:
                    key, value = line.split('=', 1)
                    key = key.strip()
                    if section != 'tightblog':
                        key = section + '/' + key
                    self._values[key] = unquote_value(value.strip())
                    if current_comment.strip():
                        self._comments[key] = current_comment
                    current_comment = ''
            # comments at the end of the file
            if current_comment.strip():
                self._comments[' end '] = current_comment

    def __getitem__(self, key):
        """Return the value for a key."""
        if key.startswith('tightblog/'):
            key = key[10:]
        try:
            return self._converted_values[key]
        except KeyError:
            field = self.config_vars[key]
        try:
            value = from_string(self._values[key], field)
        except KeyError:
            value = field.get_default()
        self._converted_values[key] = value
        return value

    def change_single(self, key, value):
        """Create and commit a transaction for a single key-value-pair."""
        t = self.edit()
        t[key] = value
        t.commit()

    def edit(self):
        """Return a new transaction object."""
        return ConfigTransaction(self)

    def touch(self):
        """Touch the file to trigger a reload."""
        os.utime(self.filename, None)

    @property
    def changed_external(self):
        """True if there are changes on the file system."""
        if not path.isfile(self.filename):
            return False
        return path.getmtime(self.filename) > self._load_time

    def __iter__(self):
        """Iterate over all keys"""
        return iter(self.config_vars)

    def __contains__(self, key):
        """Check if a given key exists."""
        if key.startswith('tightblog/'):
            key = key[10:]
        return key in self.config_vars

    def keys(self):
        """Return a list of keys."""
        return list(self)

    def items(self):
        """Return a list of all key, value tuples."""
        return [(key, self[key]) for key in self]

    def get_public_list(self, hide_insecure=False):
        """Return a list of publicly available information about the
        configuration.  This list is safe to share because dangerous keys
        are hidden if `hide_insecure` is enabled.
        """
        result = []
        for key, field in self.config_vars.items():
            value = self[key]
            if hide_insecure and key in HIDDEN_KEYS:
                value = '****'
            else:
                value = field.to_primitive(value)
            result.append({
                'key':          key,
                'default':      field.to_primitive(field.get_default()),
                'value':        value
            })
        result.sort(key=lambda x: x['key'].lower())
        return result

    def __len__(self):
        return len(self.config_vars)

    def __repr__(self):
        return '<%s %r>' % (self.__class__.__name__, dict(self.items()))


class ConfigTransaction(object):
    """A configuration transaction class. Instances of this class are returned
    by Config.edit(). Changes can then be added to the transaction and
    eventually be committed and saved to the file system using the commit()
    method.
    """

    def __init__(self, cfg):
        self.cfg = cfg
        self._values = {}
        self._converted_values = {}
        self._remove = []
        self._committed = False

    def __getitem__(self, key):
        """Get an item from the transaction or the underlaying config."""
        if key in self._converted_values:
            return self._converted_values[key]
        elif key in self._remove:
            return self.cfg.config_vars[key].get_default()
        return self.cfg[key]

    def __setitem__(self, key, value):
        """Set the value for a key by a python value."""
        self._assert_uncommitted()
        if key.startswith('tightblog/'):
            key = key[10:]
        if key not in self.cfg.config_vars:
            raise KeyError(key)

        # do not change if we already have the same value.  Otherwise this
        # would override defaulted values.
        if value == self[key]:
            return

        field = self.cfg.config_vars[key]
        self._values[key] = field.to_primitive(value)
        self._converted_values[key] = value
        if key in self._remove:
            self._remove.remove(key)

    def _assert_uncommitted(self):
        if self._committed:
            raise ValueError('This transaction was already committed.')

    def set_from_string(self, key, value, override=False):
        """Set the value for a key from a string."""
        self._assert_uncommitted()
        if key.startswith('tightblog/'):
            key = key[10:]
        field = self.cfg.config_vars[key]
        new = from_string(value, field)
        old = self._converted_values.get(key, None) or self.cfg[key]
        if override or field.to_primitive(old) != field.to_primitive(new):
            self[key] = new

    def revert_to_default(self, key):
        """Revert a key to the default value."""
        self._assert_uncommitted()
        if key.startswith('tightblog/'):
            key = key[10:]
        self._values.pop(key, None)
        self._converted_values.pop(key, None)
        self._remove.append(key)

    def update(self, *args, **kwargs):
        """Update multiple items at once."""
        for key, value in dict(*args, **kwargs).items():
            self[key] = value

    def commit(self):
        """Commit the transactions. This first tries to save the changes to the
        configuration file and only updates the config in memory when that is
        successful.
        """
        self._assert_uncommitted()
        if not self._values and not self._remove:
            self._committed = True
            return
        self.cfg._lock.acquire()
        try:
            all = self.cfg._values.copy()
            all.update(self._values)
            for key in self._remove:
                all.pop(key, None)

            sections = {}
            for key, value in all.items():
                if '/' in key:
                    section, key = key.split('/', 1)
                else:
                    section = 'tightblog'
                sections.setdefault(section, []).append((key, value))
            main_section = sections.pop('tightblog', [])
            sections = [('tightblog', main_section)] + sorted(sections.items())
            for section in sections:
                section[1].sort()

            try:
                with open(self.cfg.filename, 'w', encoding='utf-8') as f:
                    for idx, (section, items) in enumerate(sections):
                        if '[%s]' % section in self.cfg._comments:
                            f.write(self.cfg._comments['[%s]' % section])
                        elif idx:
                            f.write('\n')
                        f.write('[%s]\n' % section)
                        for key, value in items:
                            if section != 'tightblog':
                                ckey = '%s/%s' % (section, key)
                            else:
                                ckey = key
                            if ckey in self.cfg._comments:
                                f.write(self.cfg._comments[ckey])
                            f.write('%s = %s\n' % (key, quote_value(value)))
                    if ' end ' in self.cfg._comments:
                        f.write(self.cfg._comments[' end '])
            except IOError as e:
                log.error('Could not write configuration: %s' % e, 'config')
                raise ConfigurationTransactionError(e)
            self.cfg._values.update(self._values)
            self.cfg._converted_values.update(self._converted_values)
            for key in self._remove:
                self.cfg._values.pop(key, None)
                self.cfg._converted_values.pop(key, None)
            self.cfg.exists = True
            self.cfg._load_time = path.getmtime(self.cfg.filename)
        finally:
            self.cfg._lock.release()
        self._committed = True


def create_instance_config(instance_folder, **values):
    """Write the configuration file for a new instance folder.  Values not
    given fall back to their defaults, a secret key is generated if none
    is provided.
    """
    from secrets import token_hex
    if not path.isdir(instance_folder):
        os.makedirs(instance_folder)
    cfg = Configuration(path.join(instance_folder, 'tightblog.ini'))
    values.setdefault('secret_key', token_hex(20))
    t = cfg.edit()
    for key, value in values.items():
        t[key] = value
    t.commit()
    return cfg
