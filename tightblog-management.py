#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
    TightBlog Management
    ~~~~~~~~~~~~~~~~~~~~

    This script initializes an instance folder, starts a development
    server or a shell for a TightBlog instance.

    :copyright: (c) 2009 by the TightBlog Team, see AUTHORS for more details.
    :license: BSD, see LICENSE for more details.
"""
import os
import sys
from argparse import ArgumentParser
from getpass import getpass

INSTANCE_FOLDER = os.environ.get('TIGHTBLOG_INSTANCE')
if not INSTANCE_FOLDER:
    INSTANCE_FOLDER = os.path.join(os.path.dirname(os.path.abspath(__file__)),
                                   'instance')


def action_initdb(args):
    """Write the configuration and create the tables.  If an admin name
    is given the admin user is created too, otherwise the first user that
    registers becomes the admin.
    """
    from tightblog.config import create_instance_config
    from tightblog.database import db, init_database

    if os.path.isfile(os.path.join(args.instance, 'tightblog.ini')):
        print('Instance %s is already initialized' % args.instance)
        return 1
    create_instance_config(args.instance, database_uri=args.database,
                           site_url=args.site_url)
    engine = db.create_engine(args.database, args.instance)
    init_database(engine)

    if args.admin:
        from tightblog.models import User, USER_ENABLED
        password = args.password or getpass('Password for %s: ' % args.admin)
        session = db.Session(bind=engine)
        try:
            session.add(User(args.admin, args.admin, args.email or '',
                             password, 'ADMIN', USER_ENABLED))
            session.commit()
        finally:
            session.close()
    engine.dispose()
    print('Initialized instance %s' % args.instance)
    return 0


def action_runserver(args):
    """Start a development server."""
    from werkzeug.serving import run_simple
    from tightblog import get_wsgi_app
    run_simple(args.hostname, args.port, get_wsgi_app(args.instance),
               use_reloader=args.reloader, use_debugger=args.debugger,
               threaded=args.threaded)
    return 0


def action_shell(args):
    """Start an interactive shell with the application loaded."""
    from code import interact
    from tightblog import setup
    from tightblog import models
    from tightblog.database import db
    app = setup(args.instance)
    interact('TightBlog shell for %s' % args.instance,
             local={'app': app, 'models': models, 'db': db})
    return 0


def main():
    parser = ArgumentParser(description='Manage a TightBlog instance.')
    parser.add_argument('-i', '--instance', default=INSTANCE_FOLDER,
                        help='the instance folder (defaults to the '
                        'TIGHTBLOG_INSTANCE environment variable)')
    subparsers = parser.add_subparsers(dest='action')
    subparsers.required = True

    initdb = subparsers.add_parser('initdb', help=action_initdb.__doc__)
    initdb.add_argument('--database', default='sqlite:///database.db')
    initdb.add_argument('--site-url', default='http://localhost:4000/')
    initdb.add_argument('--admin', help='name of the admin user')
    initdb.add_argument('--email')
    initdb.add_argument('--password')
    initdb.set_defaults(func=action_initdb)

    runserver = subparsers.add_parser('runserver',
                                      help=action_runserver.__doc__)
    runserver.add_argument('--hostname', default='localhost')
    runserver.add_argument('--port', type=int, default=4000)
    runserver.add_argument('--no-reloader', dest='reloader',
                           action='store_false', default=True)
    runserver.add_argument('--debugger', action='store_true', default=False)
    runserver.add_argument('--threaded', action='store_true', default=False)
    runserver.set_defaults(func=action_runserver)

    shell = subparsers.add_parser('shell', help=action_shell.__doc__)
    shell.set_defaults(func=action_shell)

    args = parser.parse_args()
    args.instance = os.path.abspath(args.instance)
    return args.func(args)


if __name__ == '__main__':
    sys.exit(main())
