# -*- coding: utf-8 -*-
"""
    TightBlog Test Suite
    ~~~~~~~~~~~~~~~~~~~~

    This is the TightBlog test suite.  The `suite` function collects all
    modules in the tightblog package and builds a TestSuite with their
    doctests plus the unittest cases of the ``test_*`` modules in this
    directory.

    All tests share one application.  Its instance folder is a temporary
    folder with a sqlite database that is created on first use and removed
    when the interpreter exits.  `TightBlogTestCase` recreates the tables
    for every test.

    :copyright: (c) 2009 by the TightBlog Team, see AUTHORS for more details.
    :license: BSD, see LICENSE for more details.
"""
import sys
import os
import atexit
import unittest
from datetime import timedelta
from os.path import join, dirname
from shutil import rmtree
from tempfile import mkdtemp
from unittest import TestSuite, TextTestRunner
from doctest import DocTestSuite

from werkzeug.test import Client


#: the password all test users get
PASSWORD = 'Secret#42'

_application = None


def get_test_app():
    """Return the application of the test run.  It is set up on first
    use.
    """
    global _application
    if _application is not None:
        return _application

    # imported here so that coverage can track the whole tightblog import
    from tightblog import setup
    from tightblog.config import create_instance_config
    from tightblog.database import db, init_database

    instance_folder = mkdtemp(prefix='tightblog-tests-')
    atexit.register(rmtree, instance_folder, True)
    create_instance_config(instance_folder,
                           database_uri='sqlite:///database.db',
                           site_url='http://localhost/',
                           log_level='error')
    engine = db.create_engine('sqlite:///database.db', instance_folder)
    init_database(engine)
    engine.dispose()
    _application = setup(instance_folder)
    return _application


def reset_database(app):
    """Drop and recreate all tables."""
    from tightblog.database import db, metadata
    db.session.remove()
    metadata.drop_all(app.database_engine)
    metadata.create_all(app.database_engine)


class TightBlogTestCase(unittest.TestCase):
    """Base class for tests that need the application and a fresh
    database.  It comes with a test client and helpers to create users,
    weblogs and entries.
    """

    def setUp(self):
        self.app = get_test_app()
        reset_database(self.app)
        for cache in self.app.caches.values():
            cache.invalidate_all()
        self._config_backup = {}
        self.client = Client(self.app)

    def tearDown(self):
        from tightblog.database import db
        from tightblog.utils import local_manager
        if self._config_backup:
            t = self.app.cfg.edit()
            t.update(self._config_backup)
            t.commit()
        db.session.remove()
        local_manager.cleanup()

    def set_config(self, key, value):
        """Change a configuration value for the duration of the test."""
        self._config_backup.setdefault(key, self.app.cfg[key])
        self.app.cfg.change_single(key, value)

    def refetch(self, cls, id):
        """Load an object from a new session."""
        from tightblog.database import db
        db.session.remove()
        return db.session.get(cls, id)

    def create_user(self, username, global_role='BLOGGER', status=None,
                    password=PASSWORD):
        from tightblog.database import db
        from tightblog.models import User, USER_ENABLED
        user = User(username, username.title(), username + '@example.com',
                    password, global_role, status or USER_ENABLED)
        db.session.add(user)
        db.commit()
        return user

    def create_weblog(self, handle, owner=None, **kwargs):
        from tightblog.database import db
        from tightblog.models import Weblog, UserWeblogRole
        weblog = Weblog(handle, handle.title(), owner, **kwargs)
        db.session.add(weblog)
        if owner is not None:
            db.session.add(UserWeblogRole(owner, weblog, 'OWNER'))
        db.commit()
        return weblog

    def add_member(self, user, weblog, role, pending=False):
        from tightblog.database import db
        from tightblog.models import UserWeblogRole
        membership = UserWeblogRole(user, weblog, role, pending)
        db.session.add(membership)
        db.commit()
        return membership

    def create_category(self, weblog, name, parent=None):
        from tightblog.database import db
        from tightblog.models import WeblogCategory
        category = WeblogCategory(weblog, parent or weblog.root_category,
                                  name)
        db.session.add(category)
        db.commit()
        return category

    def create_entry(self, weblog, title, status='PUBLISHED', age=None,
                     creator=None, category=None, tags=(), **kwargs):
        """Create an entry.  Published entries are `age` old (one hour by
        default).
        """
        from tightblog.database import db
        from tightblog.models import WeblogEntry
        from tightblog.utils import utcnow
        if age is None:
            age = timedelta(hours=1)
        if status == 'PUBLISHED' and 'pub_time' not in kwargs:
            kwargs['pub_time'] = utcnow() - age
        entry = WeblogEntry(weblog, title, creator, category,
                            status=status, **kwargs)
        db.session.add(entry)
        if tags:
            entry.set_tags(tags)
        db.commit()
        return entry

    def login(self, username, password=PASSWORD):
        return self.client.post('/tb-ui/login', data={
            'username':     username,
            'password':     password
        })

    def get_json(self, url, **kwargs):
        response = self.client.get(url, **kwargs)
        return response, response.get_json(silent=True)


def suite(modnames=[]):
    """Generate the test suite.

    The first argument is a list of modules to be tested.  If it is empty
    (which it is by default), all sub-modules of the tightblog package are
    tested together with the test modules in this folder.
    """
    # the app object is used for two purposes:
    # 1) models and views are not usable without an initialized app
    # 2) for functions that require an application object as argument, you
    #    can write >>> my_function(app, ...) in the tests
    app = get_test_app()

    suite = TestSuite()
    test_modules = not modnames
    if not modnames:
        modnames = find_tightblog_modules()
    for modname in modnames:
        # the fromlist must contain something, otherwise the tightblog
        # package is returned, not our module
        mod = __import__(modname, None, None, [''])
        subsuite = DocTestSuite(mod, extraglobs={'app': app})
        # skip modules without any tests
        if subsuite.countTestCases():
            suite.addTest(subsuite)

    if test_modules:
        loader = unittest.TestLoader()
        for filename in sorted(os.listdir(dirname(__file__))):
            if filename.startswith('test_') and filename.endswith('.py'):
                mod = __import__('tests.' + filename[:-3], None, None, [''])
                suite.addTest(loader.loadTestsFromModule(mod))
    return suite


def find_tightblog_modules():
    """Find all sub-modules of the tightblog package."""
    modules = []
    import tightblog
    base = dirname(tightblog.__file__)
    start = len(dirname(base)) + 1

    for path, dirnames, filenames in os.walk(base):
        for filename in filenames:
            if filename.endswith('.py'):
                fullpath = join(path, filename)
                if filename == '__init__.py':
                    stripped = fullpath[start:-12]
                else:
                    stripped = fullpath[start:-3]
                modules.append(stripped.replace(os.sep, '.'))
    return sorted(modules)


def main():
    from argparse import ArgumentParser
    parser = ArgumentParser(description='Run the TightBlog tests.  Module '
                            'names have to be given in the form '
                            'utils.text (without tightblog.).  If no module '
                            'names are given, all tests are run.')
    parser.add_argument('modules', nargs='*')
    parser.add_argument('-v', '--verbose', action='store_true',
                        default=False, help='show which tests are run')
    args = parser.parse_args(sys.argv[1:])
    modnames = ['tightblog.' + modname for modname in args.modules]
    result = TextTestRunner(verbosity=args.verbose + 1).run(suite(modnames))
    sys.exit(not result.wasSuccessful())
