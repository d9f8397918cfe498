# -*- coding: utf-8 -*-
"""
    tightblog.rendering.pagers
    ~~~~~~~~~~~~~~~~~~~~~~~~~~

    The pagers compute the window of entries a page shows and the links to
    the neighbouring pages.  A page shows at most the weblog's entry
    display count, but never more than the site wide maximum.

    :copyright: (c) 2009 by the TightBlog Team, see AUTHORS for more details.
    :license: BSD, see LICENSE for more details.
"""
from datetime import date, timedelta

from tightblog.application import get_application
from tightblog.i18n import _, today, start_of_day, to_local_timezone, \
     format_date, format_month
from tightblog.models import WeblogEntry, WeblogEntrySearchCriteria
from tightblog.urls import weblog_url, weblog_entry_url, \
     weblog_collection_url, weblog_page_url


#: the paging intervals of the time pager
LATEST = 'LATEST'
DAY = 'DAY'
MONTH = 'MONTH'


def group_by_day(entries, tz):
    """Group entries by their publication day in the given timezone.  The
    order of the entries is kept.
    """
    result = {}
    for entry in entries:
        day = to_local_timezone(entry.pub_time, tz).date()
        result.setdefault(day, []).append(entry)
    return result


class WeblogEntriesPager(object):
    """Base class for the pagers."""

    def __init__(self, weblog, page_link=None, entry_anchor=None,
                 date_string=None, category_name=None, tags=None, page=0):
        self.weblog = weblog
        self.page_link = page_link
        self.entry_anchor = entry_anchor
        self.date_string = date_string
        self.category_name = category_name
        self.tags = tags or []

        max_length = get_application().cfg['max_entries_per_page']
        self.length = min(weblog.entry_display_count, max_length)
        self.page = 0
        if page > 0:
            self.page = page
        self.offset = self.length * self.page

    @property
    def has_more_entries(self):
        return False

    @property
    def entries(self):
        """The entries of the page grouped by day, newest day first."""
        return {}

    @property
    def items(self):
        """The entries of the page as flat list."""
        rv = []
        for day_entries in self.entries.values():
            rv.extend(day_entries)
        return rv

    @property
    def home_link(self):
        return self.create_url(0, 0)

    @property
    def home_name(self):
        return _('Home')

    @property
    def next_link(self):
        """The link to the older entries."""
        if self.has_more_entries:
            return self.create_url(self.page, 1)

    @property
    def next_name(self):
        if self.has_more_entries:
            return _('Next')

    @property
    def prev_link(self):
        """The link to the newer entries."""
        if self.page > 0:
            return self.create_url(self.page, -1)

    @property
    def prev_name(self):
        if self.page > 0:
            return _('Previous')

    next_collection_link = next_collection_name = None
    prev_collection_link = prev_collection_name = None

    def create_url(self, page, page_add):
        """Create the URL for a page of this pager."""
        page_num = page + page_add
        if self.page_link is not None:
            return weblog_page_url(self.weblog, self.page_link,
                                   self.category_name, self.date_string,
                                   self.tags, page_num)
        elif self.entry_anchor is not None:
            return weblog_entry_url(self.weblog, self.entry_anchor)
        return weblog_collection_url(self.weblog, self.category_name,
                                     self.date_string, self.tags, page_num)

    def get_today(self):
        """Today in the weblog's timezone."""
        return today(self.weblog.tzinfo)

    def parse_date(self, date_string):
        """Parse a ``yyyyMMdd`` or ``yyyyMM`` string.  Dates in the future
        are replaced by today, anything unparseable gives `None`.
        """
        if not date_string or not date_string.isdigit() or \
           len(date_string) not in (6, 8):
            return None
        try:
            rv = date(int(date_string[:4]), int(date_string[4:6]),
                      int(date_string[6:8] or 1))
        except ValueError:
            return None
        return min(rv, self.get_today())


class WeblogEntriesTimePager(WeblogEntriesPager):
    """Pages through the published entries of a weblog, either the latest
    entries or the entries of a day or a month.
    """

    def __init__(self, interval, weblog, date_string=None,
                 category_name=None, tags=None, page=0):
        WeblogEntriesPager.__init__(self, weblog, None, None, date_string,
                                    category_name, tags, page)
        self.interval = interval
        self.start_date = self.end_date = None
        self._next_interval = self._prev_interval = None
        self._entries = None
        self._more = False

        day = self.parse_date(date_string)
        if interval == DAY and day is not None:
            self.day = day
            self._init_day(day)
        elif interval == MONTH and day is not None:
            self.day = day.replace(day=1)
            self._init_month(self.day)
        else:
            self.interval = LATEST
            self.day = None

    def _created(self):
        return to_local_timezone(self.weblog.date_created,
                                 self.weblog.tzinfo).date()

    def _init_day(self, day):
        tz = self.weblog.tzinfo
        self.start_date = start_of_day(day, tz)
        self.end_date = start_of_day(day + timedelta(days=1), tz)
        next_day = day + timedelta(days=1)
        if next_day <= self.get_today():
            self._next_interval = next_day
        prev_day = day - timedelta(days=1)
        if prev_day >= self._created():
            self._prev_interval = prev_day

    def _init_month(self, first):
        tz = self.weblog.tzinfo
        if first.month == 12:
            next_month = date(first.year + 1, 1, 1)
        else:
            next_month = date(first.year, first.month + 1, 1)
        self.start_date = start_of_day(first, tz)
        self.end_date = start_of_day(next_month, tz)
        if next_month <= self.get_today():
            self._next_interval = next_month
        prev_month_end = first - timedelta(days=1)
        if prev_month_end >= self._created():
            self._prev_interval = prev_month_end.replace(day=1)

    def _format_interval(self, day):
        if self.interval == DAY:
            return day.strftime('%Y%m%d')
        return day.strftime('%Y%m')

    def _label_interval(self, day):
        if self.interval == DAY:
            return format_date(day, 'long')
        return format_month(day)

    def _load(self):
        if self._entries is not None:
            return
        category = None
        if self.category_name:
            category = self.weblog.get_category_by_path(self.category_name)
            if category is None:
                self._entries = {}
                return
        criteria = WeblogEntrySearchCriteria(
            weblog=self.weblog,
            category=category,
            tags=self.tags,
            start_date=self.start_date,
            end_date=self.end_date,
            published_only=True,
            offset=self.offset,
            max_results=self.length + 1
        )
        entries = WeblogEntry.query.search(criteria).all()
        if len(entries) > self.length:
            self._more = True
            entries = entries[:self.length]
        self._entries = group_by_day(entries, self.weblog.tzinfo)

    @property
    def entries(self):
        self._load()
        return self._entries

    @property
    def has_more_entries(self):
        self._load()
        return self._more

    @property
    def next_collection_link(self):
        if self._next_interval is not None:
            return weblog_collection_url(
                self.weblog, self.category_name,
                self._format_interval(self._next_interval), self.tags)

    @property
    def next_collection_name(self):
        if self._next_interval is not None:
            return self._label_interval(self._next_interval)

    @property
    def prev_collection_link(self):
        if self._prev_interval is not None:
            return weblog_collection_url(
                self.weblog, self.category_name,
                self._format_interval(self._prev_interval), self.tags)

    @property
    def prev_collection_name(self):
        if self._prev_interval is not None:
            return self._label_interval(self._prev_interval)


class WeblogEntriesPermalinkPager(WeblogEntriesPager):
    """The pager of a permalink page.  It holds the single entry and links
    to the neighbouring published entries.
    """

    def __init__(self, weblog, page_link, entry_anchor, category_name=None,
                 tags=None, include_drafts=False):
        WeblogEntriesPager.__init__(self, weblog, page_link, entry_anchor,
                                    None, category_name, tags, 0)
        self.include_drafts = include_drafts
        self._entry = WeblogEntry.query.by_anchor(weblog, entry_anchor)
        if self._entry is not None and not include_drafts and \
           not self._entry.is_published:
            self._entry = None

    @property
    def entry(self):
        return self._entry

    @property
    def entries(self):
        if self._entry is None:
            return {}
        pub_time = self._entry.pub_time or self._entry.update_time
        day = to_local_timezone(pub_time, self.weblog.tzinfo).date()
        return {day: [self._entry]}

    @property
    def home_link(self):
        return weblog_url(self.weblog)

    def _neighbour(self, newer):
        if self._entry is None or self._entry.pub_time is None:
            return None
        q = WeblogEntry.query.for_weblog(self.weblog).published()
        if self.category_name:
            category = self.weblog.get_category_by_path(self.category_name)
            if category is not None:
                q = q.in_category(category)
        if newer:
            q = q.filter(WeblogEntry.pub_time > self._entry.pub_time) \
                 .order_by(WeblogEntry.pub_time.asc())
        else:
            q = q.filter(WeblogEntry.pub_time < self._entry.pub_time) \
                 .order_by(WeblogEntry.pub_time.desc())
        return q.first()

    @property
    def next_entry(self):
        return self._neighbour(True)

    @property
    def prev_entry(self):
        return self._neighbour(False)

    @property
    def next_collection_link(self):
        entry = self.next_entry
        if entry is not None:
            return weblog_entry_url(self.weblog, entry.anchor)

    @property
    def next_collection_name(self):
        entry = self.next_entry
        if entry is not None:
            return _('Next: %s') % entry.title

    @property
    def prev_collection_link(self):
        entry = self.prev_entry
        if entry is not None:
            return weblog_entry_url(self.weblog, entry.anchor)

    @property
    def prev_collection_name(self):
        entry = self.prev_entry
        if entry is not None:
            return _('Previous: %s') % entry.title
