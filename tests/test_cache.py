# -*- coding: utf-8 -*-
"""
    Tests for the lazy expiring caches.

    :copyright: (c) 2009 by the TightBlog Team, see AUTHORS for more details.
    :license: BSD, see LICENSE for more details.
"""
import unittest
from datetime import timedelta

from tests import get_test_app
from tightblog.cache import LazyExpiringCache, CachedContent
from tightblog.utils import utcnow


class LazyExpiringCacheTestCase(unittest.TestCase):

    def setUp(self):
        get_test_app()
        self.cache = LazyExpiringCache('test', 10, 3600)

    def test_miss_and_hit(self):
        self.assertEqual(self.cache.get('foo'), None)
        content = CachedContent('<p>foo</p>')
        self.cache.put('foo', content)
        self.assertTrue(self.cache.get('foo') is content)
        self.assertEqual(self.cache.hits, 1)
        self.assertEqual(self.cache.misses, 1)
        self.assertEqual(self.cache.puts, 1)
        self.assertEqual(self.cache.request_count, 2)
        self.assertEqual(self.cache.hit_rate, 0.5)

    def test_content_is_stored_as_bytes(self):
        content = CachedContent(u'caf\xe9', 'text/plain')
        self.assertEqual(content.content, b'caf\xc3\xa9')
        self.assertEqual(content.length, 5)

    def test_modified_after_caching_expires(self):
        self.cache.put('foo', CachedContent('old'))
        self.assertEqual(self.cache.get('foo', utcnow() + timedelta(seconds=5)),
                         None)
        before = utcnow() - timedelta(minutes=5)
        self.assertEqual(self.cache.get('foo', before).content, b'old')

    def test_remove(self):
        self.cache.put('foo', CachedContent('foo'))
        self.cache.remove('foo')
        self.assertEqual(self.cache.get('foo'), None)
        self.assertEqual(self.cache.removes, 1)
        self.assertEqual(self.cache.estimated_size, 0)

    def test_invalidate_all_resets_statistics(self):
        for key in 'a', 'b', 'c':
            self.cache.put(key, CachedContent(key))
        self.cache.get('a')
        self.assertEqual(self.cache.estimated_size, 3)
        self.cache.invalidate_all()
        self.assertEqual(self.cache.estimated_size, 0)
        self.assertEqual(self.cache.hits, 0)
        self.assertEqual(self.cache.puts, 0)
        self.assertEqual(self.cache.get('a'), None)

    def test_disabled_cache(self):
        cache = LazyExpiringCache('disabled', 0, 3600)
        self.assertFalse(cache.enabled)
        cache.put('foo', CachedContent('foo'))
        self.assertEqual(cache.get('foo'), None)
        self.assertEqual(cache.estimated_size, 0)
        self.assertEqual(cache.hit_rate, 0.0)

    def test_request_counters(self):
        self.cache.increment_incoming_requests()
        self.cache.increment_incoming_requests()
        self.cache.increment_requests_handled_by_304()
        data = self.cache.to_dict()
        self.assertEqual(data['incoming_requests'], 2)
        self.assertEqual(data['requests_handled_by_304'], 1)
        self.assertEqual(data['name'], 'test')
        self.assertEqual(data['stats'].efficiency, 0.0)
