# -*- coding: utf-8 -*-
"""
    tightblog.views.account
    ~~~~~~~~~~~~~~~~~~~~~~~

    Login and logout.  The id of the logged in user is stored in the
    signed session cookie.

    :copyright: (c) 2009 by the TightBlog Team, see AUTHORS for more details.
    :license: BSD, see LICENSE for more details.
"""
from tightblog.database import db
from tightblog.i18n import _
from tightblog.models import User
from tightblog.utils import utcnow, log
from tightblog.utils.http import json_response, json_error, redirect_to


def login(request):
    """Log a user in.  Only enabled users with the right password get
    through.
    """
    username = request.form.get('username', '').strip()
    password = request.form.get('password', '')
    user = User.query.by_username(username)
    if user is None or not user.is_enabled or \
       not user.check_password(password):
        log.info('Failed login for %r from %s' % (username,
                                                  request.remote_addr),
                 'auth')
        return json_error(_('Incorrect user name or password.'), 401)

    user.last_login = utcnow()
    db.commit()
    request.login(user)
    return json_response(user.to_dict())


def logout(request):
    """Just logout and redirect to the index page."""
    request.logout()
    return redirect_to('site/index')
