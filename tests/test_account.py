# -*- coding: utf-8 -*-
"""
    Tests for login, logout and the site index.

    :copyright: (c) 2009 by the TightBlog Team, see AUTHORS for more details.
    :license: BSD, see LICENSE for more details.
"""
from tests import TightBlogTestCase
from tightblog.models import User, USER_DISABLED


class LoginTestCase(TightBlogTestCase):

    def setUp(self):
        TightBlogTestCase.setUp(self)
        self.jane = self.create_user('jane')

    def test_login(self):
        response = self.login('jane')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()['username'], 'jane')
        self.assertTrue(self.refetch(User, self.jane.id).last_login
                        is not None)
        response, data = self.get_json('/tb-ui/authoring/rest/userprofile/%d'
                                       % self.jane.id)
        self.assertEqual(response.status_code, 200)

    def test_wrong_password(self):
        response = self.login('jane', 'wrong')
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.get_json(),
                         {'error': 'Incorrect user name or password.'})
        self.assertEqual(self.login('nobody').status_code, 401)

    def test_disabled_user(self):
        self.create_user('john', status=USER_DISABLED)
        self.assertEqual(self.login('john').status_code, 401)

    def test_tampered_session(self):
        self.client.set_cookie('tightblog_session', 'garbage',
                               domain='localhost')
        response = self.client.get('/tb-ui/authoring/rest/mainmenu')
        self.assertEqual(response.status_code, 403)

    def test_logout(self):
        self.login('jane')
        response = self.client.get('/tb-ui/logout')
        self.assertEqual(response.status_code, 302)
        self.assertEqual(response.location, '/')
        response = self.client.get('/tb-ui/authoring/rest/mainmenu')
        self.assertEqual(response.status_code, 403)


class SiteIndexTestCase(TightBlogTestCase):

    def test_weblog_list(self):
        self.create_weblog('first', tagline='The first one')
        self.create_weblog('hidden', visible=False)
        response = self.client.get('/')
        self.assertEqual(response.status_code, 200)
        body = response.get_data(as_text=True)
        self.assertTrue('The first one' in body)
        self.assertTrue('/first/' in body)
        self.assertFalse('/hidden/' in body)

    def test_site_weblog(self):
        self.create_weblog('main')
        self.set_config('site_weblog', 'main')
        response = self.client.get('/')
        self.assertEqual(response.status_code, 302)
        self.assertEqual(response.location, 'http://localhost/main/')

    def test_not_found(self):
        response = self.client.get('/tb-ui/nothing/here')
        self.assertEqual(response.status_code, 404)
        self.assertTrue('text/html' in response.content_type)
