# -*- coding: utf-8 -*-
"""
    tightblog.views.site
    ~~~~~~~~~~~~~~~~~~~~

    The front page of the site.

    :copyright: (c) 2009 by the TightBlog Team, see AUTHORS for more details.
    :license: BSD, see LICENSE for more details.
"""
from tightblog.application import render_response
from tightblog.models import Weblog
from tightblog.urls import weblog_url
from tightblog.utils.http import redirect


def index(request):
    """Redirect to the site weblog if there is one, otherwise list the
    visible weblogs.
    """
    handle = request.app.cfg['site_weblog']
    weblog = Weblog.query.by_handle(handle, visible_only=True)
    if weblog is not None:
        return redirect(weblog_url(weblog, absolute=True))
    return render_response('index.html',
                           weblogs=Weblog.query.visible()
                                                .order_by(Weblog.name).all())
