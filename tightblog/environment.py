# -*- coding: utf-8 -*-
"""
    tightblog.environment
    ~~~~~~~~~~~~~~~~~~~~~

    This module knows where TightBlog is installed and where it has to look
    for shared information.  All the files are relative to the package::

        tightblog/                      application code
            shared/                     core shared data (css, images)
            templates/                  core templates (error pages)
            themes/                     builtin shared weblog themes
            i18n/                       translations

    :copyright: (c) 2009 by the TightBlog Team, see AUTHORS for more details.
    :license: BSD, see LICENSE for more details.
"""
from os.path import realpath, dirname, join, pardir


# the path to the contents of the tightblog package
PACKAGE_CONTENTS = realpath(dirname(__file__))

# the path to the folder where the "tightblog" package is stored in.
PACKAGE_LOCATION = realpath(join(PACKAGE_CONTENTS, pardir))

# name of the domain for the builtin translations
LOCALE_DOMAIN = 'messages'

SHARED_DATA = join(PACKAGE_CONTENTS, 'shared')
BUILTIN_TEMPLATE_PATH = join(PACKAGE_CONTENTS, 'templates')
BUILTIN_THEME_PATH = join(PACKAGE_CONTENTS, 'themes')
LOCALE_PATH = join(PACKAGE_CONTENTS, 'i18n')


# get rid of the helpers
del realpath, dirname, join, pardir
