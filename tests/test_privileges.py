# -*- coding: utf-8 -*-
"""
    Tests for the global and weblog roles.

    :copyright: (c) 2009 by the TightBlog Team, see AUTHORS for more details.
    :license: BSD, see LICENSE for more details.
"""
from werkzeug.exceptions import Forbidden

from tests import TightBlogTestCase
from tightblog.models import AnonymousUser
from tightblog.privileges import check_weblog_role, assert_weblog_role, \
     require_global_role, get_global_role, get_weblog_role, OWNER, POST, \
     EDIT_DRAFT, BLOGCREATOR


class RolesTestCase(TightBlogTestCase):

    def setUp(self):
        TightBlogTestCase.setUp(self)
        self.owner = self.create_user('owner')
        self.weblog = self.create_weblog('myblog', self.owner)

    def test_lookup(self):
        self.assertTrue(get_global_role('ADMIN') is not None)
        self.assertTrue(get_weblog_role('POST') is POST)
        self.assertEqual(get_weblog_role('SUPERUSER'), None)

    def test_owner_has_all_roles(self):
        for role in OWNER, POST, EDIT_DRAFT:
            self.assertTrue(check_weblog_role(self.owner, self.weblog, role))

    def test_member_roles(self):
        drafter = self.create_user('drafter')
        self.add_member(drafter, self.weblog, 'EDIT_DRAFT')
        self.assertTrue(check_weblog_role(drafter, self.weblog, EDIT_DRAFT))
        self.assertFalse(check_weblog_role(drafter, self.weblog, POST))

    def test_pending_membership(self):
        invited = self.create_user('invited')
        self.add_member(invited, self.weblog, 'POST', pending=True)
        self.assertFalse(check_weblog_role(invited, self.weblog, EDIT_DRAFT))

    def test_admin_and_anonymous(self):
        admin = self.create_user('admin', 'ADMIN')
        self.assertTrue(check_weblog_role(admin, self.weblog, OWNER))
        self.assertFalse(check_weblog_role(AnonymousUser(), self.weblog,
                                           EDIT_DRAFT))
        self.assertFalse(check_weblog_role(None, self.weblog, EDIT_DRAFT))

    def test_assert_weblog_role(self):
        stranger = self.create_user('stranger')
        self.assertRaises(Forbidden, assert_weblog_role, self.weblog,
                          EDIT_DRAFT, stranger)
        assert_weblog_role(self.weblog, OWNER, self.owner)

    def test_require_global_role(self):
        class FakeRequest(object):
            def __init__(self, user):
                self.user = user

        @require_global_role(BLOGCREATOR)
        def view(request):
            """Some view."""
            return 'ok'

        self.assertEqual(view.__name__, 'view')
        self.assertEqual(view.__doc__, 'Some view.')
        creator = self.create_user('creator', 'BLOGCREATOR')
        self.assertEqual(view(FakeRequest(creator)), 'ok')
        self.assertRaises(Forbidden, view, FakeRequest(self.owner))
        self.assertRaises(Forbidden, view, FakeRequest(AnonymousUser()))
