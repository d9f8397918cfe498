# -*- coding: utf-8 -*-
"""
    tightblog.urls
    ~~~~~~~~~~~~~~

    This module implements a function that creates a list of urls for all
    the core components and the helpers that generate the URLs of weblog
    pages, entries and media files.

    :copyright: (c) 2009 by the TightBlog Team, see AUTHORS for more details.
    :license: BSD, see LICENSE for more details.
"""
from werkzeug.routing import Rule, Submount

from tightblog.application import url_for


def make_urls(app):
    """Make the URLs for a new TightBlog application."""
    account_urls = [
        Rule('/login', endpoint='account/login', methods=['POST']),
        Rule('/logout', endpoint='account/logout'),
        Rule('/register/rest/registeruser', endpoint='users/register',
             methods=['POST']),
        Rule('/register/rest/useradminmetadata', endpoint='users/metadata')
    ]
    entry_urls = [
        Rule('/<int:weblog_id>/page/<int:page>', endpoint='entries/search',
             methods=['POST']),
        Rule('/<int:weblog_id>/searchfields', endpoint='entries/search_fields'),
        Rule('/<int:entry_id>', endpoint='entries/show',
             methods=['GET', 'HEAD']),
        Rule('/<int:entry_id>', endpoint='entries/delete',
             methods=['DELETE']),
        Rule('/<int:weblog_id>/tagdata', endpoint='entries/tag_data'),
        Rule('/<int:weblog_id>/recententries/<status>',
             endpoint='entries/recent'),
        Rule('/<int:weblog_id>/entryeditmetadata',
             endpoint='entries/edit_metadata'),
        Rule('/<int:weblog_id>/entries', endpoint='entries/save',
             methods=['POST'])
    ]
    authoring_urls = [
        Submount('/rest/weblogentries', entry_urls),
        Rule('/rest/weblog/<int:weblog_id>/potentialmembers',
             endpoint='users/potential_members'),
        Rule('/rest/weblog/<int:weblog_id>/members', endpoint='users/members'),
        Rule('/rest/weblog/<int:weblog_id>/memberupdate',
             endpoint='users/update_members', methods=['POST']),
        Rule('/rest/weblog/<int:weblog_id>/user/<int:user_id>/role/'
             '<role>/invite', endpoint='users/invite', methods=['POST']),
        Rule('/rest/weblogrole/<int:role_id>/attach',
             endpoint='users/accept_invitation', methods=['POST']),
        Rule('/rest/weblogrole/<int:role_id>/detach',
             endpoint='users/resign', methods=['POST']),
        Rule('/rest/userprofile/<int:user_id>', endpoint='users/profile',
             methods=['GET', 'HEAD']),
        Rule('/rest/userprofile/<int:user_id>',
             endpoint='users/update_profile', methods=['POST']),
        Rule('/rest/loggedinuser/weblogs', endpoint='users/my_weblogs'),
        Rule('/rest/mainmenu', endpoint='users/main_menu'),
        Rule('/rest/weblog/<int:weblog_id>/templates',
             endpoint='templates/list', methods=['GET', 'HEAD']),
        Rule('/rest/weblog/<int:weblog_id>/templates',
             endpoint='templates/add', methods=['POST']),
        Rule('/rest/template/<int:template_id>', endpoint='templates/delete',
             methods=['DELETE']),
        Rule('/preview/<handle>/', endpoint='weblog/preview'),
        Rule('/preview/<handle>/<path:path_info>', endpoint='weblog/preview')
    ]
    admin_urls = [
        Rule('/userlist', endpoint='users/list'),
        Rule('/registrationapproval', endpoint='users/pending_registrations'),
        Rule('/registrationapproval/<int:user_id>/approve',
             endpoint='users/approve_registration', methods=['POST']),
        Rule('/registrationapproval/<int:user_id>/reject',
             endpoint='users/reject_registration', methods=['POST']),
        Rule('/user/<int:user_id>', endpoint='users/show',
             methods=['GET', 'HEAD']),
        Rule('/user/<int:user_id>', endpoint='users/update',
             methods=['PUT']),
        Rule('/user/<int:user_id>/weblogs', endpoint='users/weblogs'),
        Rule('/users', endpoint='users/add', methods=['POST'])
    ]
    server_urls = [
        Rule('/caches', endpoint='admin/caches'),
        Rule('/cache/<name>/clear', endpoint='admin/clear_cache',
             methods=['POST'])
    ]
    weblog_urls = [
        Rule('/', endpoint='weblog/page', methods=['GET', 'HEAD']),
        Rule('/<path:path_info>', endpoint='weblog/page',
             methods=['GET', 'HEAD']),
        Rule('/<path:path_info>', endpoint='weblog/comment',
             methods=['POST']),
        Rule('/mediafile/', endpoint='weblog/mediafile'),
        Rule('/mediafile/<path:path_info>', endpoint='weblog/mediafile')
    ]
    return [
        Rule('/', endpoint='site/index'),
        Rule('/_shared/<path:filename>', endpoint='core/shared',
             build_only=True),
        Submount('/tb-ui', account_urls + [
            Submount('/authoring', authoring_urls),
            Submount('/admin/rest/useradmin', admin_urls),
            Submount('/admin/rest/server', server_urls)
        ]),
        Submount('/<handle>', weblog_urls)
    ]


def _collection_path(category=None, date=None, tags=None):
    """Return the path below the weblog and the query arguments of an
    entry collection.
    """
    args = {}
    if category and not date:
        path = 'category/' + category
    elif date and not category:
        path = 'date/' + date
    elif tags:
        path = 'tags/' + '+'.join(tags)
    else:
        path = None
        if date:
            args['date'] = date
        if category:
            args['cat'] = category
    return path, args


def weblog_url(weblog, absolute=False):
    """The URL of the weblog's home page."""
    return url_for('weblog/page', handle=weblog.handle, _external=absolute)


def weblog_entry_url(weblog, anchor, absolute=False):
    """The permalink of an entry."""
    return url_for('weblog/page', handle=weblog.handle,
                   path_info='entry/' + anchor, _external=absolute)


def weblog_collection_url(weblog, category=None, date=None, tags=None,
                          page=0, absolute=False):
    """The URL of a collection of entries.  A single criterion becomes part
    of the path, combinations are passed as query arguments.
    """
    path, args = _collection_path(category, date, tags)
    if page > 0:
        args['page'] = page
    if path is not None:
        args['path_info'] = path
    return url_for('weblog/page', handle=weblog.handle, _external=absolute,
                   **args)


def weblog_page_url(weblog, page_name, category=None, date=None, tags=None,
                    page=0, absolute=False):
    """The URL of a custom page of the weblog."""
    args = {}
    if category:
        args['cat'] = category
    if date:
        args['date'] = date
    if tags:
        args['tags'] = '+'.join(tags)
    if page > 0:
        args['page'] = page
    return url_for('weblog/page', handle=weblog.handle,
                   path_info='page/' + page_name, _external=absolute, **args)


def weblog_tags_index_url(weblog, absolute=False):
    return url_for('weblog/page', handle=weblog.handle, path_info='tags/',
                   _external=absolute)


def weblog_template_url(weblog, template, absolute=False):
    """The URL of an accessible template (stylesheets, scripts and
    external custom pages).
    """
    return weblog_page_url(weblog, template.relative_path or template.name,
                           absolute=absolute)


def media_file_url(weblog, media_file_id, thumbnail=False, absolute=False):
    args = {}
    if thumbnail:
        args['tn'] = 'true'
    return url_for('weblog/mediafile', handle=weblog.handle,
                   path_info=str(media_file_id), _external=absolute, **args)


def preview_url(weblog, path_info=None, theme=None, device_type=None):
    """The URL of a page of the weblog in preview mode."""
    args = {}
    if path_info:
        args['path_info'] = path_info
    if theme:
        args['theme'] = theme
    if device_type:
        args['type'] = device_type.lower()
    return url_for('weblog/preview', handle=weblog.handle, **args)


def shared_url(filename):
    """Returns a URL to a file in the shared folder."""
    return url_for('core/shared', filename=filename)
