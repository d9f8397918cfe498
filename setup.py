# -*- coding: utf-8 -*-
"""
TightBlog
=========

TightBlog is a multi-user weblog server written in Python, built on top
of Werkzeug, Jinja and SQLAlchemy.  One instance hosts any number of
weblogs, each with its own members, categories, comments and templates.

Install it with ``pip install .`` and initialize an instance folder with
``tightblog-management.py initdb``.
"""
from setuptools import setup

setup(
    name='TightBlog',
    version='0.3.0.dev0',
    url='https://tightblog.example.org/',
    license='BSD',
    author='The TightBlog Team',
    description='A WSGI-based multi-user weblog server in Python',
    long_description=__doc__,
    zip_safe=False,
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Environment :: Web Environment',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: BSD License',
        'Operating System :: OS Independent',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Topic :: Internet :: WWW/HTTP :: Dynamic Content :: News/Diary',
    ],
    packages=['tightblog', 'tightblog.i18n', 'tightblog.rendering',
              'tightblog.utils', 'tightblog.views'],
    package_data={
        'tightblog': ['shared/*', 'templates/*', 'themes/basic/*',
                      'themes/basic/mobile/*']
    },
    scripts=['tightblog-management.py'],
    platforms='any',
    include_package_data=True,
    python_requires='>=3.8',
    install_requires=[
        'Werkzeug>=3.0',
        'Jinja2>=3.0',
        'MarkupSafe>=2.0',
        'SQLAlchemy>=2.0',
        'Babel>=2.9',
        'pytz',
        'cachelib>=0.9',
        'itsdangerous>=2.0',
        'requests>=2.20',
    ],
    extras_require={
        'tests': ['pytest'],
    },
    test_suite='tests.suite',
)
