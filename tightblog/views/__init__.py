# -*- coding: utf-8 -*-
"""
    tightblog.views
    ~~~~~~~~~~~~~~~

    This module binds all the endpoints specified in `tightblog.urls` to
    python functions in the view modules.

    :copyright: (c) 2009 by the TightBlog Team, see AUTHORS for more details.
    :license: BSD, see LICENSE for more details.
"""
from tightblog.views import site, account, entries, users, templates, admin
from tightblog.rendering import processors


#: bind the views to url endpoints
all_views = {
    # weblog pages
    'site/index':                       site.index,
    'weblog/page':                      processors.do_page,
    'weblog/comment':                   processors.do_comment,
    'weblog/preview':                   processors.do_preview,
    'weblog/mediafile':                 processors.do_media_file,

    # account views
    'account/login':                    account.login,
    'account/logout':                   account.logout,

    # entry editor
    'entries/search':                   entries.search,
    'entries/search_fields':            entries.search_fields,
    'entries/show':                     entries.show,
    'entries/delete':                   entries.delete,
    'entries/tag_data':                 entries.tag_data,
    'entries/recent':                   entries.recent,
    'entries/edit_metadata':            entries.edit_metadata,
    'entries/save':                     entries.save,

    # users and memberships
    'users/register':                   users.register,
    'users/metadata':                   users.metadata,
    'users/list':                       users.list_users,
    'users/pending_registrations':      users.pending_registrations,
    'users/approve_registration':       users.approve_registration,
    'users/reject_registration':        users.reject_registration,
    'users/show':                       users.show,
    'users/update':                     users.update,
    'users/add':                        users.add,
    'users/weblogs':                    users.weblogs,
    'users/profile':                    users.profile,
    'users/update_profile':             users.update_profile,
    'users/potential_members':          users.potential_members,
    'users/members':                    users.members,
    'users/update_members':             users.update_members,
    'users/invite':                     users.invite,
    'users/accept_invitation':          users.accept_invitation,
    'users/resign':                     users.resign,
    'users/my_weblogs':                 users.my_weblogs,
    'users/main_menu':                  users.main_menu,

    # templates
    'templates/list':                   templates.list_templates,
    'templates/add':                    templates.add,
    'templates/delete':                 templates.delete,

    # server administration
    'admin/caches':                     admin.caches,
    'admin/clear_cache':                admin.clear_cache
}
