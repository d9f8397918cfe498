# -*- coding: utf-8 -*-
"""
    tightblog.views.admin
    ~~~~~~~~~~~~~~~~~~~~~

    Server administration: the statistics of the page and media caches.

    :copyright: (c) 2009 by the TightBlog Team, see AUTHORS for more details.
    :license: BSD, see LICENSE for more details.
"""
from werkzeug.exceptions import NotFound

from tightblog.i18n import _
from tightblog.privileges import require_global_role, ADMIN
from tightblog.utils import log
from tightblog.utils.http import json_response, text_response


@require_global_role(ADMIN)
def caches(request):
    """The statistics of all caches."""
    return json_response(dict((name, cache.to_dict()) for name, cache
                              in request.app.caches.items()))


@require_global_role(ADMIN)
def clear_cache(request, name):
    cache = request.app.caches.get(name)
    if cache is None:
        raise NotFound()
    cache.invalidate_all()
    log.info('Cache %s cleared by %s' % (name, request.user.username),
             'admin')
    return text_response(_('Cache %s cleared.') % name)
