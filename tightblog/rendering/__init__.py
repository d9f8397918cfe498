# -*- coding: utf-8 -*-
"""
    tightblog.rendering
    ~~~~~~~~~~~~~~~~~~~

    The rendering pipeline for weblog pages.  A request for a weblog page
    goes through the following steps:

    1.  the request parser (:mod:`tightblog.rendering.requests`) turns the
        path and the query arguments into a page request.
    2.  the processor (:mod:`tightblog.rendering.processors`) checks the
        conditional GET headers and the page cache.
    3.  on a cache miss the page models (:mod:`tightblog.rendering.models`)
        are populated, the template is resolved by the weblog's theme
        (:mod:`tightblog.rendering.templates`) and rendered.

    :copyright: (c) 2009 by the TightBlog Team, see AUTHORS for more details.
    :license: BSD, see LICENSE for more details.
"""
