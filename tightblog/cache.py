# -*- coding: utf-8 -*-
"""
    tightblog.cache
    ~~~~~~~~~~~~~~~

    This module implements the caches for rendered content.  A cache is a
    size and time bounded mapping of request keys to rendered content.
    The cache is lazy expiring: an entry is only handed out if it was
    stored after the last modification of the object it was rendered
    from, so changes to a weblog never have to walk the cache.

    The storage below is a `cachelib.SimpleCache`, the size limit and the
    timeout are taken from the configuration::

        >>> cache = LazyExpiringCache('example', 10, 60)
        >>> cache.put('key', CachedContent(b'<p>Hi</p>'))
        >>> cache.get('key').content
        b'<p>Hi</p>'

    :copyright: (c) 2009 by the TightBlog Team, see AUTHORS for more details.
    :license: BSD, see LICENSE for more details.
"""
from threading import Lock

from cachelib import SimpleCache

from tightblog.utils import utcnow, log


class CachedContent(object):
    """Rendered content plus the content type it was rendered as."""

    def __init__(self, content, content_type='text/html'):
        if isinstance(content, str):
            content = content.encode('utf-8')
        self.content = content
        self.content_type = content_type

    @property
    def length(self):
        return len(self.content)

    def __repr__(self):
        return '<%s %s (%d bytes)>' % (
            self.__class__.__name__,
            self.content_type,
            self.length
        )


class CacheStats(object):
    """A snapshot of the counters of a cache."""

    def __init__(self, start_time, hits=0, misses=0, puts=0, removes=0):
        self.start_time = start_time
        self.hits = hits
        self.misses = misses
        self.puts = puts
        self.removes = removes

    @property
    def efficiency(self):
        total = self.hits + self.misses
        if not total:
            return 0.0
        return float(self.hits) / total

    def to_dict(self):
        return {
            'start_time':   self.start_time,
            'hits':         self.hits,
            'misses':       self.misses,
            'puts':         self.puts,
            'removes':      self.removes,
            'efficiency':   self.efficiency
        }


class _CacheEntry(object):
    __slots__ = ('value', 'time_cached')

    def __init__(self, value):
        self.value = value
        self.time_cached = utcnow()

    def get_value(self, last_modified):
        """Return the value unless the object changed after caching."""
        if last_modified is not None and last_modified > self.time_cached:
            return None
        return self.value


class LazyExpiringCache(object):
    """The cache for rendered pages and media files.  A cache with a
    `max_entries` of zero or less is disabled.
    """

    def __init__(self, name, max_entries, timeout):
        self.name = name
        self.max_entries = max_entries
        self.timeout = timeout
        self._lock = Lock()
        self._keys = set()
        self._reset_stats()
        if self.enabled:
            self._store = SimpleCache(threshold=max_entries,
                                      default_timeout=timeout)
        else:
            self._store = None
            log.warning('Cache %s has been DISABLED' % name, 'cache')

    def _reset_stats(self):
        self.start_time = utcnow()
        self.hits = self.misses = self.puts = self.removes = 0
        self.incoming_requests = self.requests_handled_by_304 = 0

    @property
    def enabled(self):
        return self.max_entries > 0

    def get(self, key, last_modified=None):
        """Return the cached content for the key or `None`.  If the object
        the content was rendered from was modified after the content was
        cached the entry counts as expired and `None` is returned.
        """
        if not self.enabled:
            return None
        entry = self._store.get(key)
        if entry is None:
            self.misses += 1
            log.debug('MISS %s' % key, 'cache')
            return None
        self.hits += 1
        rv = entry.get_value(last_modified)
        if rv is None:
            log.debug('HIT-EXPIRED %s' % key, 'cache')
        else:
            log.debug('HIT %s' % key, 'cache')
        return rv

    def put(self, key, value):
        """Store a value.  Puts into a disabled cache are dropped."""
        if not self.enabled:
            return
        with self._lock:
            self._store.set(key, _CacheEntry(value))
            self._keys.add(key)
        self.puts += 1
        log.debug('PUT %s' % key, 'cache')

    def remove(self, key):
        if not self.enabled:
            return
        with self._lock:
            if self._store.delete(key):
                self.removes += 1
            self._keys.discard(key)

    def invalidate_all(self):
        """Drop all entries and start a new statistics period."""
        if self.enabled:
            with self._lock:
                self._store.clear()
                self._keys.clear()
        self._reset_stats()
        log.info('Cache %s cleared' % self.name, 'cache')

    def increment_incoming_requests(self):
        self.incoming_requests += 1

    def increment_requests_handled_by_304(self):
        self.requests_handled_by_304 += 1

    @property
    def estimated_size(self):
        """The number of entries in the cache.  Entries that timed out or
        that were pruned by the store are not counted.
        """
        if not self.enabled:
            return 0
        with self._lock:
            self._keys = set(x for x in self._keys if self._store.has(x))
            return len(self._keys)

    @property
    def request_count(self):
        return self.hits + self.misses

    @property
    def hit_rate(self):
        if not self.enabled:
            return 0.0
        requests = self.request_count
        if not requests:
            return 1.0
        return float(self.hits) / requests

    @property
    def stats(self):
        return CacheStats(self.start_time, self.hits, self.misses,
                          self.puts, self.removes)

    def to_dict(self):
        return {
            'name':                     self.name,
            'enabled':                  self.enabled,
            'max_entries':              self.max_entries,
            'timeout':                  self.timeout,
            'estimated_size':           self.estimated_size,
            'incoming_requests':        self.incoming_requests,
            'requests_handled_by_304':  self.requests_handled_by_304,
            'request_count':            self.request_count,
            'hit_count':                self.hits,
            'miss_count':               self.misses,
            'hit_rate':                 self.hit_rate,
            'stats':                    self.stats
        }

    def __repr__(self):
        return '<%s %r (%s)>' % (
            self.__class__.__name__,
            self.name,
            self.enabled and '%d entries max' % self.max_entries
                          or 'disabled'
        )

