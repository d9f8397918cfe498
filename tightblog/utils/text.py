# -*- coding: utf-8 -*-
"""
    tightblog.utils.text
    ~~~~~~~~~~~~~~~~~~~~

    This module provides various text utility functions.

    :copyright: (c) 2009 by the TightBlog Team, see AUTHORS for more details.
    :license: BSD, see LICENSE for more details.
"""
import re
import unicodedata


_punctuation_re = re.compile(r'[\t !"#$%&\'()*\-/<=>?@\[\\\]^_`{|},.:;+]+')
_string_inc_re = re.compile(r'(\d+)$')
_tag_split_re = re.compile(r'[\s+]+')


def gen_ascii_slug(text, delim='-'):
    """Generates an ASCII-only slug.

    >>> gen_ascii_slug('Hello World!')
    'hello-world'
    >>> gen_ascii_slug('Caf\\xe9 & Cr\\xe8me')
    'cafe-creme'
    """
    text = unicodedata.normalize('NFKD', str(text))
    text = text.encode('ascii', 'ignore').decode('ascii')
    result = []
    for word in _punctuation_re.split(text.lower()):
        if word:
            result.append(word)
    return delim.join(result)


def increment_string(string):
    """Increment a string by one:

    >>> increment_string('test')
    'test2'
    >>> increment_string('test2')
    'test3'
    """
    match = _string_inc_re.search(string)
    if match is None:
        return string + '2'
    return string[:match.start()] + str(int(match.group(1)) + 1)


def normalize_tag(name):
    """Tags are stored lower case and without surrounding whitespace.

    >>> normalize_tag('  Python ')
    'python'
    """
    return name.strip().lower()


def split_tags(string):
    """Split a string with tags (separated by whitespace or plus signs)
    into a list of normalized tags without duplicates.

    >>> split_tags('Python  web+python  Jinja')
    ['python', 'web', 'jinja']
    >>> split_tags(None)
    []
    """
    result = []
    for item in _tag_split_re.split(string or ''):
        item = normalize_tag(item)
        if item and item not in result:
            result.append(item)
    return result
