# -*- coding: utf-8 -*-
"""
    tightblog.views.users
    ~~~~~~~~~~~~~~~~~~~~~

    User administration, registration, profiles and weblog memberships.

    :copyright: (c) 2009 by the TightBlog Team, see AUTHORS for more details.
    :license: BSD, see LICENSE for more details.
"""
from werkzeug.exceptions import NotFound, Forbidden

from tightblog.database import db
from tightblog.i18n import _
from tightblog.models import User, Weblog, UserWeblogRole, USER_STATUSES, \
     USER_REGISTERED, USER_EMAILVERIFIED, USER_ENABLED, USER_DISABLED
from tightblog.privileges import require_global_role, check_weblog_role, \
     get_global_role, get_weblog_role, GLOBAL_ROLES, ADMIN, BLOGGER, \
     OWNER, NOAUTHNEEDED, NOBLOGNEEDED
from tightblog.utils import log
from tightblog.utils.http import json_response, json_error, \
     text_response, get_json_data
from tightblog.utils.validators import check, is_valid_email, \
     is_valid_password


#: the status changes an administrator may apply
ALLOWED_STATUS_CHANGES = {
    USER_ENABLED:           [USER_DISABLED],
    USER_DISABLED:          [USER_ENABLED],
    USER_REGISTERED:        [USER_ENABLED],
    USER_EMAILVERIFIED:     [USER_ENABLED]
}


def _get_user(user_id):
    user = db.session.get(User, user_id)
    if user is None:
        raise NotFound()
    return user


def _get_weblog(weblog_id):
    weblog = db.session.get(Weblog, weblog_id)
    if weblog is None:
        raise NotFound()
    return weblog


def _user_summary(user):
    return '%s (%s)' % (user.screen_name, user.email)


def validate_user(data, user=None, adding=False):
    """Validate the user data of the forms.  Returns the message of the
    first problem or `None`.  `user` is the user that is updated.
    """
    username = data.get('username')
    if username is not None or adding:
        username = (username or '').strip()
        if not username:
            return _('A user name is required.')
        other = User.query.by_username(username)
        if other is not None and other is not user:
            return _('User name is already in use.')

    screen_name = data.get('screen_name')
    if screen_name is not None or adding:
        screen_name = (screen_name or '').strip()
        if not screen_name:
            return _('A screen name is required.')
        other = User.query.by_screen_name(screen_name)
        if other is not None and other is not user:
            return _('Screen name is already in use.')

    email = data.get('email')
    if (email is not None or adding) and \
       not check(is_valid_email, email or ''):
        return _('The e-mail address is invalid.')

    status = data.get('status')
    if user is not None and status and status != user.status:
        if status not in ALLOWED_STATUS_CHANGES.get(user.status, ()):
            return _('A user cannot change from status %s to %s.') % \
                (user.status, status)
    elif status and status not in USER_STATUSES:
        return _('Unknown status %s') % status

    role = data.get('global_role')
    if role and get_global_role(role) is None:
        return _('Unknown role %s') % role

    password = data.get('password')
    if password:
        if password != data.get('password_confirm'):
            return _('Passwords do not match.')
        if not check(is_valid_password, password):
            return _('Password must be between 8 and 20 characters and '
                     'contain a digit, a lower and an upper case letter '
                     'and one of @#$%^&+=')
    elif adding:
        return _('A password is required.')


@require_global_role(ADMIN)
def list_users(request):
    """All users as mapping of id to ``screen name (email)``, sorted by
    the value.
    """
    users = sorted(User.query.all(), key=_user_summary)
    return json_response(dict((str(x.id), _user_summary(x)) for x in users))


@require_global_role(ADMIN)
def pending_registrations(request):
    return json_response([x.to_dict() for x in
                          User.query.registration_pending()
                              .order_by(User.date_created)])


@require_global_role(ADMIN)
def approve_registration(request, user_id):
    user = _get_user(user_id)
    if user.status not in (USER_REGISTERED, USER_EMAILVERIFIED):
        return json_error(_('The user is not waiting for approval.'))
    user.status = USER_ENABLED
    user.activation_code = None
    db.commit()
    log.info('Registration of %s approved' % user.username, 'users')
    return text_response('')


@require_global_role(ADMIN)
def reject_registration(request, user_id):
    user = _get_user(user_id)
    if user.status not in (USER_REGISTERED, USER_EMAILVERIFIED):
        return json_error(_('The user is not waiting for approval.'))
    db.delete(user)
    db.commit()
    log.info('Registration of %s rejected' % user.username, 'users')
    return text_response('')


@require_global_role(BLOGGER)
def potential_members(request, weblog_id):
    """Enabled users that are not (and were not invited as) members of the
    weblog.  Requires the owner role.
    """
    weblog = _get_weblog(weblog_id)
    if not check_weblog_role(request.user, weblog, OWNER):
        raise Forbidden()
    users = User.query.potential_members(weblog).order_by(User.screen_name)
    return json_response(dict((str(x.id), _user_summary(x)) for x in users))


@require_global_role(ADMIN)
def show(request, user_id):
    return json_response(_get_user(user_id).to_dict())


@require_global_role(BLOGGER)
def profile(request, user_id):
    """The profile of the logged in user."""
    if user_id != request.user.id:
        raise NotFound()
    return json_response(request.user.to_dict())


def register(request):
    """Register a new user.  The very first user becomes an enabled
    administrator.
    """
    data = get_json_data(request)
    cfg = request.app.cfg
    first_user = User.query.first() is None
    if not first_user and cfg['registration_policy'] == 'DISABLED':
        raise Forbidden()

    error = validate_user(dict(data, status=None, global_role=None),
                          adding=True)
    if error is not None:
        return json_error(error)

    user = User(data['username'].strip(), data['screen_name'].strip(),
                data['email'], data['password'])
    if first_user:
        user.status = USER_ENABLED
        user.global_role = ADMIN.name
    else:
        user.status = USER_REGISTERED
        user.make_activation_code()
        if cfg['users_create_blogs']:
            user.global_role = 'BLOGCREATOR'
        else:
            user.global_role = BLOGGER.name
    db.session.add(user)
    db.commit()
    log.info('New user %s registered' % user.username, 'users')
    return json_response(user.to_dict())


def _apply_user_data(user, data):
    if data.get('screen_name'):
        user.screen_name = data['screen_name'].strip()
    if data.get('email'):
        user.email = data['email']
    if data.get('password'):
        user.set_password(data['password'])


@require_global_role(BLOGGER)
def update_profile(request, user_id):
    """Users can change their own screen name, e-mail and password."""
    user = request.user
    if user_id != user.id:
        raise NotFound()
    data = get_json_data(request)
    data.pop('username', None)
    data.pop('status', None)
    data.pop('global_role', None)
    error = validate_user(data, user)
    if error is not None:
        return json_error(error)
    _apply_user_data(user, data)
    db.commit()
    return json_response(user.to_dict())


@require_global_role(ADMIN)
def update(request, user_id):
    """Update a user.  Administrators cannot change their own role or
    status.
    """
    user = _get_user(user_id)
    data = get_json_data(request)
    data.pop('username', None)
    if user is request.user:
        data.pop('status', None)
        data.pop('global_role', None)
    error = validate_user(data, user)
    if error is not None:
        return json_error(error)

    _apply_user_data(user, data)
    if data.get('status'):
        user.status = data['status']
        if user.status == USER_ENABLED:
            user.activation_code = None
    if data.get('global_role'):
        user.global_role = data['global_role']
    db.commit()
    log.info('User %s updated by %s' % (user.username,
                                        request.user.username), 'users')
    return json_response(user.to_dict())


@require_global_role(ADMIN)
def add(request):
    """Create a user that is enabled right away."""
    data = get_json_data(request)
    error = validate_user(data, adding=True)
    if error is not None:
        return json_error(error)
    user = User(data['username'].strip(), data['screen_name'].strip(),
                data['email'], data['password'],
                global_role=data.get('global_role') or BLOGGER.name,
                status=data.get('status') or USER_ENABLED)
    db.session.add(user)
    db.commit()
    log.info('User %s created by %s' % (user.username,
                                        request.user.username), 'users')
    return json_response(user.to_dict())


@require_global_role(ADMIN)
def weblogs(request, user_id):
    """The memberships of a user."""
    user = _get_user(user_id)
    return json_response([x.to_dict() for x in
                          UserWeblogRole.query.for_user(user)])


@require_global_role(BLOGGER)
def members(request, weblog_id):
    weblog = _get_weblog(weblog_id)
    if not check_weblog_role(request.user, weblog, OWNER):
        raise Forbidden()
    return json_response([x.to_dict() for x in
                          UserWeblogRole.query.for_weblog(weblog)])


@require_global_role(BLOGGER)
def update_members(request, weblog_id):
    """Change the roles of the members of a weblog.  The body is a list of
    ``{"id": ..., "weblog_role": ...}`` objects.  `NOBLOGNEEDED` removes
    the membership.  At least one owner has to remain.
    """
    weblog = _get_weblog(weblog_id)
    if not check_weblog_role(request.user, weblog, OWNER):
        raise Forbidden()
    changes = get_json_data(request, list)

    roles = dict((x.id, x) for x in UserWeblogRole.query.for_weblog(weblog))
    wanted = dict((x.id, x.weblog_role) for x in roles.values())
    for change in changes:
        role_id = change.get('id')
        new_role = change.get('weblog_role')
        if role_id not in roles or get_weblog_role(new_role) is None:
            return json_error(_('Invalid membership change.'))
        wanted[role_id] = new_role

    if not [x for x in roles.values()
            if not x.pending and wanted[x.id] == OWNER.name]:
        return json_error(_('There must be at least one owner of the '
                            'weblog.'))

    for role_id, new_role in wanted.items():
        membership = roles[role_id]
        if new_role == NOBLOGNEEDED.name:
            db.delete(membership)
        else:
            membership.weblog_role = new_role
    db.commit()
    log.info('Members of %s updated by %s' % (weblog.handle,
                                              request.user.username),
             'users')
    return text_response(_('Changes saved.'))


@require_global_role(BLOGGER)
def invite(request, weblog_id, user_id, role):
    """Invite a user to the weblog.  The membership stays pending until
    the user accepts.
    """
    weblog = _get_weblog(weblog_id)
    if not check_weblog_role(request.user, weblog, OWNER):
        raise Forbidden()
    user = _get_user(user_id)
    weblog_role = get_weblog_role(role)
    if weblog_role is None or weblog_role is NOBLOGNEEDED:
        return json_error(_('Unknown role %s') % role)

    existing = UserWeblogRole.query.get_role(user, weblog)
    if existing is not None:
        if existing.pending:
            return json_error(_('User %s is already invited.') %
                              user.screen_name)
        return json_error(_('User %s is already a member.') %
                          user.screen_name)

    membership = UserWeblogRole(user, weblog, weblog_role.name, pending=True)
    db.session.add(membership)
    db.commit()
    log.info('%s invited to %s as %s' % (user.username, weblog.handle,
                                         weblog_role), 'users')
    return text_response(_('User %s invited.') % user.screen_name)


def _get_own_membership(request, role_id):
    membership = db.session.get(UserWeblogRole, role_id)
    if membership is None or membership.user_id != request.user.id:
        raise NotFound()
    return membership


@require_global_role(BLOGGER)
def accept_invitation(request, role_id):
    membership = _get_own_membership(request, role_id)
    membership.pending = False
    db.commit()
    return text_response('')


@require_global_role(BLOGGER)
def resign(request, role_id):
    """Decline an invitation or leave a weblog."""
    membership = _get_own_membership(request, role_id)
    db.delete(membership)
    db.commit()
    return text_response('')


def metadata(request):
    """The user statuses and the global roles for the user forms."""
    return json_response({
        'user_statuses':    USER_STATUSES,
        'global_roles':     dict((x.name, str(x.explanation)) for x in
                                 sorted(GLOBAL_ROLES.values())
                                 if x is not NOAUTHNEEDED),
        'registration_policy':  request.app.cfg['registration_policy']
    })


@require_global_role(BLOGGER)
def my_weblogs(request):
    """The weblogs the logged in user is a member of."""
    return json_response([x.to_dict() for x in
                          UserWeblogRole.query.for_user(request.user, False)])


@require_global_role(BLOGGER)
def main_menu(request):
    """The data of the main menu: the weblogs of the user and the open
    invitations.
    """
    user = request.user
    memberships = []
    invitations = []
    for membership in UserWeblogRole.query.for_user(user):
        if membership.pending:
            invitations.append(membership.to_dict())
        else:
            memberships.append(membership.to_dict())
    return json_response({
        'user':                 user.to_dict(),
        'weblogs':              memberships,
        'invitations':          invitations,
        'can_create_weblogs':   user.has_global_role(
                                    get_global_role('BLOGCREATOR')),
        'is_admin':             user.is_admin
    })
