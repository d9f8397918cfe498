# -*- coding: utf-8 -*-
"""
    tightblog.i18n
    ~~~~~~~~~~~~~~

    i18n tools for TightBlog.  This module provides various helpers for
    internationalization.  That is a translation system (with an API,
    compatible to standard gettext), timezone helpers as well as date
    formatting functions.

    General Architecture
    --------------------

    Internally all times are stored in UTC as naive datetime objects (that
    means no tzinfo is present).  The internal language is American English.

    Every weblog has its own timezone, so unlike a single blog engine most
    of the helpers here accept the timezone (or the weblog) explicitly.  If
    none is given the site timezone from the configuration is used.

    Translations are handled in a gettext inspired way via babel.  The
    compiled catalogs live in this folder as ``<locale>/messages.mo``.

    :copyright: (c) 2009 by the TightBlog Team, see AUTHORS for more details.
    :license: BSD, see LICENSE for more details.
"""
from datetime import datetime

from babel import Locale, dates
from babel.support import Translations, LazyProxy
from pytz import timezone, common_timezones, UTC, UnknownTimeZoneError

from tightblog import _core
from tightblog.environment import LOCALE_PATH, LOCALE_DOMAIN


__all__ = ['_', 'gettext', 'ngettext', 'lazy_gettext', 'lazy_ngettext']


def load_core_translations(locale):
    """Load the translation for a locale.  If a locale does not exist
    the return value is a null translations object.
    """
    return Translations.load(LOCALE_PATH, [locale], LOCALE_DOMAIN)


def get_translations():
    """Get the active translations or `None` if there are none."""
    app = _core._application
    return getattr(app, 'translations', None)


def gettext(string):
    """Translate a given string to the language of the application."""
    translations = get_translations()
    if translations is None:
        return str(string)
    return translations.gettext(string)


def ngettext(singular, plural, n):
    """Translate the possible pluralized string to the language of the
    application.
    """
    translations = get_translations()
    if translations is None:
        if n == 1:
            return str(singular)
        return str(plural)
    return translations.ngettext(singular, plural, n)


def lazy_gettext(string):
    """A lazy version of `gettext`."""
    if isinstance(string, LazyProxy):
        return string
    return LazyProxy(gettext, string, enable_cache=False)


def lazy_ngettext(singular, plural, n):
    """A lazy version of `ngettext`"""
    return LazyProxy(ngettext, singular, plural, n, enable_cache=False)


_ = gettext


def get_timezone(name=None):
    """Return the timezone for the given identifier or the timezone
    of the site based on the configuration.  Weblogs are accepted as well,
    the weblog's timezone is returned then.
    """
    if name is None:
        app = _core._application
        name = app is not None and app.cfg['timezone'] or 'UTC'
    elif not isinstance(name, str):
        name = name.timezone or 'UTC'
    return timezone(name)


def get_locale():
    """Return the current locale."""
    app = _core._application
    if app is None:
        return Locale('en')
    return app.locale


def to_local_timezone(datetime, tz=None):
    """Convert a naive UTC datetime object to the given timezone.  `tz` can
    be a timezone name, a timezone or a weblog.
    """
    if datetime.tzinfo is None:
        datetime = datetime.replace(tzinfo=UTC)
    if not hasattr(tz, 'normalize'):
        tz = get_timezone(tz)
    return tz.normalize(datetime.astimezone(tz))


def to_utc(datetime, tz=None):
    """Convert a datetime object to UTC and drop tzinfo.  Naive datetimes
    are considered to be in the given timezone.
    """
    if datetime.tzinfo is None:
        if not hasattr(tz, 'localize'):
            tz = get_timezone(tz)
        datetime = tz.localize(datetime)
    return datetime.astimezone(UTC).replace(tzinfo=None)


def today(tz=None):
    """The current date in the given timezone."""
    return to_local_timezone(datetime.now(UTC), tz).date()


def start_of_day(day, tz=None):
    """Return the naive UTC datetime the given local day starts at."""
    return to_utc(datetime(day.year, day.month, day.day), tz)


def format_datetime(datetime=None, format='medium', tz=None):
    """Return a date formatted according to the given pattern."""
    if not hasattr(tz, 'normalize'):
        tz = get_timezone(tz)
    if datetime is not None and datetime.tzinfo is None:
        datetime = datetime.replace(tzinfo=UTC)
    return dates.format_datetime(datetime, format, tzinfo=tz,
                                 locale=get_locale())


def format_date(date=None, format='medium', tz=None):
    """Return the date formatted according to the pattern.  Datetimes are
    converted to the timezone first.
    """
    if isinstance(date, datetime):
        date = to_local_timezone(date, tz).date()
    return dates.format_date(date, format, locale=get_locale())


def format_month(date=None, tz=None):
    """Format month and year of a date."""
    return format_date(date, 'MMMM yyyy', tz)


def format_time(time=None, format='medium', tz=None):
    """Return the time formatted according to the pattern."""
    if not hasattr(tz, 'normalize'):
        tz = get_timezone(tz)
    return dates.format_time(time, format, tzinfo=tz, locale=get_locale())


def list_timezones():
    """Return a list of all timezones."""
    result = [(x, x.replace('_', ' ')) for x in common_timezones]
    result.sort(key=lambda x: x[1].lower())
    return result


def has_timezone(tz):
    """When passed a timezone as string this function checks if
    the timezone is known.
    """
    try:
        timezone(tz)
    except UnknownTimeZoneError:
        return False
    return True
