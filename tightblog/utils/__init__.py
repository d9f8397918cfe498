# -*- coding: utf-8 -*-
"""
    tightblog.utils
    ~~~~~~~~~~~~~~~

    This package implements various functions used all over the code.

    :copyright: (c) 2009 by the TightBlog Team, see AUTHORS for more details.
    :license: BSD, see LICENSE for more details.
"""
from datetime import datetime
from json import dumps as _dumps, loads as load_json

from pytz import UTC
from werkzeug.local import Local, LocalManager
from werkzeug.wsgi import ClosingIterator


# our local stuff
local = Local()
local_manager = LocalManager([local])


def utcnow():
    """The current time as naive datetime in UTC.  This is the format all
    times are stored in.
    """
    return datetime.now(UTC).replace(tzinfo=None)


def _json_default(obj):
    if isinstance(obj, datetime):
        return obj.isoformat()
    if hasattr(obj, 'to_dict'):
        return obj.to_dict()
    # lazy translations and similar proxies
    return str(obj)


def dump_json(obj, **kwargs):
    """Dump an object as JSON.  Datetimes are formatted as ISO 8601 strings,
    models are serialized by their `to_dict` method.
    """
    kwargs.setdefault('default', _json_default)
    return _dumps(obj, **kwargs)
