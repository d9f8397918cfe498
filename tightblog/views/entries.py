# -*- coding: utf-8 -*-
"""
    tightblog.views.entries
    ~~~~~~~~~~~~~~~~~~~~~~~

    The REST views of the entry editor.  All of them talk JSON and need a
    logged in user, the weblog role required depends on the operation.

    :copyright: (c) 2009 by the TightBlog Team, see AUTHORS for more details.
    :license: BSD, see LICENSE for more details.
"""
from datetime import datetime, timedelta

from werkzeug.exceptions import NotFound, Forbidden

from tightblog.database import db
from tightblog.i18n import _, to_local_timezone, to_utc, start_of_day, \
     format_datetime
from tightblog.models import Weblog, WeblogEntry, WeblogEntryTag, \
     WeblogCategory, WeblogEntrySearchCriteria, ENTRY_STATUSES, \
     EDIT_FORMATS, COMMENT_DAY_OPTIONS, STATUS_DRAFT, STATUS_PENDING, \
     STATUS_PUBLISHED, STATUS_SCHEDULED
from tightblog.privileges import require_global_role, check_weblog_role, \
     BLOGGER, POST, EDIT_DRAFT
from tightblog.urls import preview_url
from tightblog.utils import utcnow, log
from tightblog.utils.http import json_response, json_error, \
     text_response, get_json_data, make_external_url
from tightblog.utils.text import split_tags


#: number of entries per page of the entry search
ITEMS_PER_PAGE = 30

#: number of entries the recent entry lists show
RECENT_ENTRIES = 20

#: the format of the ``date_string`` of the entry editor
PUB_DATE_FORMAT = '%m/%d/%Y'


def _parse_day(value):
    """Parse the ``yyyy-mm-dd`` dates of the search form."""
    if not value:
        return None
    try:
        return datetime.strptime(value, '%Y-%m-%d').date()
    except ValueError:
        return None


def _entry_edit_url(entry):
    return make_external_url('tb-ui/app/authoring/entryEdit?weblogId=%s'
                             '&entryId=%s' % (entry.weblog_id, entry.id))


def calculate_pub_time(weblog, data):
    """Return the publication time the editor data asks for as naive UTC
    datetime, `None` if there is no (valid) date.
    """
    date_string = data.get('date_string')
    if not date_string:
        return None
    try:
        day = datetime.strptime(date_string, PUB_DATE_FORMAT)
        rv = day.replace(hour=int(data.get('hours') or 0),
                         minute=int(data.get('minutes') or 0))
    except (TypeError, ValueError):
        log.warning('Invalid publication date %r' % date_string, 'entries')
        return None
    return to_utc(rv, weblog.tzinfo)


@require_global_role(BLOGGER)
def search(request, weblog_id, page):
    """Search the entries of a weblog.  One page holds `ITEMS_PER_PAGE`
    entries, `has_more` tells if there is another page.
    """
    weblog = db.session.get(Weblog, weblog_id)
    if weblog is None or not check_weblog_role(request.user, weblog, POST):
        raise NotFound()
    data = get_json_data(request)

    category = None
    if data.get('category_name'):
        category = weblog.get_category_by_path(data['category_name'])
        if category is None:
            return json_response({'entries': [], 'has_more': False})

    start_day = _parse_day(data.get('start_date'))
    end_day = _parse_day(data.get('end_date'))
    criteria = WeblogEntrySearchCriteria(
        weblog=weblog,
        category=category,
        status=data.get('status') or None,
        text=data.get('text') or None,
        sort_by=data.get('sort_by') or 'PUBLICATION_TIME',
        start_date=start_day and start_of_day(start_day, weblog.tzinfo),
        end_date=end_day and start_of_day(end_day + timedelta(days=1),
                                          weblog.tzinfo),
        offset=page * ITEMS_PER_PAGE,
        max_results=ITEMS_PER_PAGE + 1
    )
    entries = WeblogEntry.query.search(criteria).all()
    has_more = len(entries) > ITEMS_PER_PAGE
    return json_response({
        'entries':  [x.to_dict() for x in entries[:ITEMS_PER_PAGE]],
        'has_more': has_more
    })


@require_global_role(BLOGGER)
def search_fields(request, weblog_id):
    """The options of the entry search form."""
    weblog = db.session.get(Weblog, weblog_id)
    if weblog is None or not check_weblog_role(request.user, weblog, POST):
        raise NotFound()
    categories = [('', _('(Any)'))]
    for category in weblog.get_categories():
        path = category.path.lstrip('/')
        categories.append((path, path))
    return json_response({
        'categories':       dict(categories),
        'sort_by_options':  {
            'PUBLICATION_TIME': _('Publication time'),
            'UPDATE_TIME':      _('Update time')
        },
        'status_options':   {
            '':                 _('All'),
            STATUS_DRAFT:       _('Draft only'),
            STATUS_PUBLISHED:   _('Published only'),
            STATUS_PENDING:     _('Pending only'),
            STATUS_SCHEDULED:   _('Scheduled only')
        }
    })


@require_global_role(BLOGGER)
def delete(request, entry_id):
    """Delete an entry."""
    entry = db.session.get(WeblogEntry, entry_id)
    if entry is None:
        raise NotFound()
    weblog = entry.weblog
    if not check_weblog_role(request.user, weblog, POST):
        raise Forbidden()
    db.delete(entry)
    weblog.mark_modified()
    db.commit()
    request.app.mark_sitewide_change()
    log.info('Entry %r deleted by %s' % (entry.anchor,
                                         request.user.username), 'entries')
    return text_response('')


@require_global_role(BLOGGER)
def tag_data(request, weblog_id):
    """Tags of the weblog starting with the prefix and their use counts."""
    weblog = db.session.get(Weblog, weblog_id)
    if weblog is None:
        raise NotFound()
    prefix = request.args.get('prefix', '')
    counts = WeblogEntryTag.query.tag_counts(
        weblog, prefix, request.app.cfg['max_autocomplete_tags'])
    return json_response({
        'prefix':       prefix,
        'tagcounts':    [{'name': name, 'count': count}
                         for name, count in counts]
    })


@require_global_role(BLOGGER)
def recent(request, weblog_id, status):
    """The latest entries of the weblog with the given status.  Drafts and
    pending entries need the draft editor role, everything else the
    publisher role.
    """
    weblog = db.session.get(Weblog, weblog_id)
    if weblog is None:
        raise NotFound()
    status = status.upper()
    if status not in ENTRY_STATUSES:
        return json_error(_('Unknown status %s') % status)
    if status in (STATUS_DRAFT, STATUS_PENDING):
        required = EDIT_DRAFT
    else:
        required = POST

    if not check_weblog_role(request.user, weblog, required):
        # contributors just do not see entries they cannot publish
        if required is POST and \
           check_weblog_role(request.user, weblog, EDIT_DRAFT):
            return json_response([])
        raise Forbidden()

    criteria = WeblogEntrySearchCriteria(weblog=weblog, status=status,
                                         max_results=RECENT_ENTRIES)
    return json_response([{
        'id':       entry.id,
        'title':    entry.title,
        'edit_url': _entry_edit_url(entry)
    } for entry in WeblogEntry.query.search(criteria)])


@require_global_role(BLOGGER)
def show(request, entry_id):
    """The entry for the editor.  The publication time is split into date,
    hours and minutes in the weblog's timezone.
    """
    entry = db.session.get(WeblogEntry, entry_id)
    if entry is None:
        raise NotFound()
    weblog = entry.weblog
    if not check_weblog_role(request.user, weblog, EDIT_DRAFT):
        raise Forbidden()
    data = entry.to_dict()
    data['preview_url'] = preview_url(weblog, 'entry/' + entry.anchor)
    if entry.pub_time is not None:
        local = to_local_timezone(entry.pub_time, weblog.tzinfo)
        data['hours'] = local.hour
        data['minutes'] = local.minute
        data['date_string'] = '%d/%d/%d' % (local.month, local.day,
                                            local.year)
    return json_response(data)


@require_global_role(BLOGGER)
def edit_metadata(request, weblog_id):
    """The data the entry editor needs for a weblog."""
    weblog = db.session.get(Weblog, weblog_id)
    if weblog is None or \
       not check_weblog_role(request.user, weblog, EDIT_DRAFT):
        raise NotFound()
    return json_response({
        'categories':           dict((str(x.id), x.name) for x in
                                     weblog.get_categories(True)),
        'author':               check_weblog_role(request.user, weblog,
                                                  POST),
        'commenting_enabled':   weblog.commenting_enabled,
        'default_comment_days': weblog.default_comment_days,
        'default_edit_format':  weblog.edit_format,
        'edit_formats':         EDIT_FORMATS,
        'timezone':             weblog.timezone,
        'comment_day_options':  dict((str(x), x and
                                      _('%d days') % x or _('Unlimited'))
                                     for x in COMMENT_DAY_OPTIONS)
    })


@require_global_role(BLOGGER)
def save(request, weblog_id):
    """Create or update an entry.  The status decides about the role the
    user needs: drafts and entries submitted for review only need the
    draft editor role.
    """
    data = get_json_data(request)
    status = data.get('status') or STATUS_DRAFT
    if status not in ENTRY_STATUSES:
        return json_error(_('Unknown status %s') % status)
    title = (data.get('title') or '').strip()
    if not title:
        return json_error(_('The entry needs a title.'))

    entry = None
    if data.get('id'):
        entry = db.session.get(WeblogEntry, data['id'])
    if entry is None:
        weblog = db.session.get(Weblog, weblog_id)
    else:
        weblog = entry.weblog
    if weblog is None:
        raise NotFound()

    if status in (STATUS_PENDING, STATUS_DRAFT):
        required = EDIT_DRAFT
    else:
        required = POST
    if not check_weblog_role(request.user, weblog, required):
        return text_response(_('You are not allowed to do this.'), 403)

    category_id = data.get('category_id')
    if category_id is None and isinstance(data.get('category'), dict):
        category_id = data['category'].get('id')
    category = None
    if category_id is not None:
        try:
            category = db.session.get(WeblogCategory, int(category_id))
        except (TypeError, ValueError):
            category = None
    if category is None or category.weblog_id != weblog.id:
        return json_error(_('Category is invalid.'))

    comment_days = data.get('comment_days')
    if comment_days is not None:
        try:
            comment_days = int(comment_days)
        except (TypeError, ValueError):
            return json_error(_('Invalid number of comment days.'))

    creating = entry is None
    if creating:
        entry = WeblogEntry(weblog, title, request.user, category,
                            edit_format=data.get('edit_format'))
        db.session.add(entry)

    entry.update_time = utcnow()
    entry.pub_time = calculate_pub_time(weblog, data) or entry.update_time
    if status == STATUS_PUBLISHED and \
       entry.pub_time > utcnow() + timedelta(minutes=1):
        status = STATUS_SCHEDULED

    entry.status = status
    entry.title = title
    entry.text = data.get('text') or ''
    entry.summary = data.get('summary') or ''
    entry.notes = data.get('notes') or ''
    entry.category = category
    entry.set_tags(split_tags(data.get('tags_as_string')))
    entry.search_description = data.get('search_description') or None
    if comment_days is not None:
        entry.comment_days = comment_days
    entry.enclosure_url = data.get('enclosure_url') or None
    if entry.enclosure_url:
        entry.enclosure_type = data.get('enclosure_type') or None
        entry.enclosure_length = data.get('enclosure_length') or None
    else:
        entry.enclosure_type = entry.enclosure_length = None

    weblog.mark_modified()
    db.commit()
    request.app.mark_sitewide_change()
    log.info('Entry %r %s by %s' % (entry.anchor,
                                    creating and 'created' or 'saved',
                                    request.user.username), 'entries')

    if status == STATUS_DRAFT:
        message = _('Entry saved as draft.')
    elif status == STATUS_PUBLISHED:
        message = _('Entry published.')
    elif status == STATUS_SCHEDULED:
        message = _('Entry scheduled for publication at %s.') % \
            format_datetime(entry.pub_time, tz=weblog.tzinfo)
    else:
        message = _('Entry submitted for review.')
    return json_response({'entry_id': entry.id, 'message': message})
