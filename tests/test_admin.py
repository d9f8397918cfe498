# -*- coding: utf-8 -*-
"""
    Tests for the server administration views.

    :copyright: (c) 2009 by the TightBlog Team, see AUTHORS for more details.
    :license: BSD, see LICENSE for more details.
"""
from tests import TightBlogTestCase
from tightblog.cache import CachedContent


BASE = '/tb-ui/admin/rest/server'


class CacheAdminTestCase(TightBlogTestCase):

    def setUp(self):
        TightBlogTestCase.setUp(self)
        self.create_user('admin', 'ADMIN')
        self.create_user('jane')

    def test_requires_admin(self):
        self.assertEqual(self.client.get(BASE + '/caches').status_code, 403)
        self.login('jane')
        self.assertEqual(self.client.get(BASE + '/caches').status_code, 403)
        self.assertEqual(self.client.post(BASE + '/cache/weblogpage/clear')
                         .status_code, 403)

    def test_cache_stats(self):
        self.app.caches['weblogpage'].put('key', CachedContent('page'))
        self.login('admin')
        response, data = self.get_json(BASE + '/caches')
        self.assertEqual(sorted(data), ['weblogmedia', 'weblogpage'])
        self.assertEqual(data['weblogpage']['estimated_size'], 1)
        self.assertEqual(data['weblogpage']['name'], 'weblogpage')

    def test_clear_cache(self):
        cache = self.app.caches['weblogpage']
        cache.put('key', CachedContent('page'))
        self.login('admin')
        response = self.client.post(BASE + '/cache/weblogpage/clear')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(cache.get('key'), None)
        response = self.client.post(BASE + '/cache/unknown/clear')
        self.assertEqual(response.status_code, 404)
