# -*- coding: utf-8 -*-
"""
    tightblog.privileges
    ~~~~~~~~~~~~~~~~~~~~

    This module contains the builtin roles.  There are two independent
    ladders: global roles a user has on the site and weblog roles a user
    has as member of one weblog.  Roles are ordered, a higher role includes
    all the lower ones:

    >>> ADMIN > BLOGCREATOR > BLOGGER > NOAUTHNEEDED
    True
    >>> POST(OWNER), POST(EDIT_DRAFT)
    (True, False)

    Global administrators have every weblog role on every weblog.

    :copyright: (c) 2009 by the TightBlog Team, see AUTHORS for more details.
    :license: BSD, see LICENSE for more details.
"""
from werkzeug.exceptions import Forbidden

from tightblog.application import get_request
from tightblog.i18n import lazy_gettext


__all__ = ['GLOBAL_ROLES', 'WEBLOG_ROLES', 'Role']

GLOBAL_ROLES = {}
WEBLOG_ROLES = {}


class Role(object):
    """A role.  Calling a role with another role checks if the other role
    is sufficient for this one.
    """

    def __init__(self, name, weight, explanation):
        self.name = name
        self.weight = weight
        self.explanation = explanation

    def __call__(self, role):
        return role is not None and role.weight >= self.weight

    def __lt__(self, other):
        return self.weight < other.weight

    def __le__(self, other):
        return self.weight <= other.weight

    def __gt__(self, other):
        return self.weight > other.weight

    def __ge__(self, other):
        return self.weight >= other.weight

    def __str__(self):
        return self.name

    def __repr__(self):
        return self.name


def get_global_role(name):
    """Look up a global role by name.  Unknown names give `None`."""
    return GLOBAL_ROLES.get(name)


def get_weblog_role(name):
    """Look up a weblog role by name.  Unknown names give `None`."""
    return WEBLOG_ROLES.get(name)


def check_weblog_role(user, weblog, role):
    """Check if the user has at least the given role on the weblog.
    Pending memberships (open invitations) do not count.
    """
    if user is None or not user.is_somebody or weblog is None:
        return False
    if user.is_admin:
        return True
    from tightblog.models import UserWeblogRole
    membership = UserWeblogRole.query.get_role(user, weblog)
    return membership is not None and not membership.pending and \
        role(get_weblog_role(membership.weblog_role))


def require_global_role(role):
    """Requires the given global role (or a higher one) for a view."""
    def wrapped(f):
        def decorated(request, *args, **kwargs):
            if request.user.has_global_role(role):
                return f(request, *args, **kwargs)
            raise Forbidden()
        decorated.__name__ = f.__name__
        decorated.__module__ = f.__module__
        decorated.__doc__ = f.__doc__
        return decorated
    return wrapped


def assert_weblog_role(weblog, role, user=None):
    """Like `require_global_role` but for asserting a weblog role of the
    current user.
    """
    if user is None:
        user = get_request().user
    if not check_weblog_role(user, weblog, role):
        raise Forbidden()


def _register(container, name, weight, description):
    """Register a new builtin role."""
    role = Role(name, weight, description)
    container[name] = role
    globals()[name] = role
    __all__.append(name)


_register(GLOBAL_ROLES, 'ADMIN', 3, lazy_gettext('can administer the site'))
_register(GLOBAL_ROLES, 'BLOGCREATOR', 2, lazy_gettext('can create weblogs'))
_register(GLOBAL_ROLES, 'BLOGGER', 1,
          lazy_gettext('can be a member of weblogs'))
_register(GLOBAL_ROLES, 'NOAUTHNEEDED', 0, lazy_gettext('anonymous'))

_register(WEBLOG_ROLES, 'OWNER', 3,
          lazy_gettext('can administer the weblog'))
_register(WEBLOG_ROLES, 'POST', 2, lazy_gettext('can publish entries'))
_register(WEBLOG_ROLES, 'EDIT_DRAFT', 1,
          lazy_gettext('can write drafts for review'))
_register(WEBLOG_ROLES, 'NOBLOGNEEDED', 0, lazy_gettext('no membership'))
