# -*- coding: utf-8 -*-
"""
    Tests for registration, user administration and weblog memberships.

    :copyright: (c) 2009 by the TightBlog Team, see AUTHORS for more details.
    :license: BSD, see LICENSE for more details.
"""
from tests import TightBlogTestCase, PASSWORD
from tightblog.models import User, UserWeblogRole, USER_DISABLED, \
     USER_REGISTERED
from tightblog.views.users import validate_user


ADMIN_BASE = '/tb-ui/admin/rest/useradmin'
AUTHORING = '/tb-ui/authoring/rest'


def user_data(username, **kwargs):
    rv = {
        'username':         username,
        'screen_name':      username.title(),
        'email':            username + '@example.com',
        'password':         PASSWORD,
        'password_confirm': PASSWORD
    }
    rv.update(kwargs)
    return rv


class ValidateUserTestCase(TightBlogTestCase):

    def test_new_user(self):
        self.assertEqual(validate_user(user_data('jane'), adding=True), None)
        self.assertEqual(validate_user(user_data('jane', password='weak',
                                                 password_confirm='weak'),
                                       adding=True)[:8], 'Password')
        self.assertEqual(validate_user(user_data('jane', email='jane'),
                                       adding=True),
                         'The e-mail address is invalid.')
        self.assertEqual(validate_user(user_data('jane',
                                                 password_confirm='other'),
                                       adding=True),
                         'Passwords do not match.')
        self.assertEqual(validate_user({'username': 'jane'}, adding=True),
                         'A screen name is required.')

    def test_duplicates(self):
        jane = self.create_user('jane')
        self.assertEqual(validate_user(user_data('jane'), adding=True),
                         'User name is already in use.')
        self.assertEqual(validate_user(user_data('john', screen_name='Jane'),
                                       adding=True),
                         'Screen name is already in use.')
        self.assertEqual(validate_user({'screen_name': 'Jane'}, jane), None)

    def test_status_changes(self):
        jane = self.create_user('jane')
        self.assertEqual(validate_user({'status': USER_DISABLED}, jane), None)
        self.assertTrue(validate_user({'status': USER_REGISTERED},
                                      jane).startswith('A user cannot'))
        self.assertEqual(validate_user({'global_role': 'KING'}, jane),
                         'Unknown role KING')


class RegistrationTestCase(TightBlogTestCase):

    def register(self, username, **kwargs):
        return self.client.post('/tb-ui/register/rest/registeruser',
                                json=user_data(username, **kwargs))

    def test_first_user_is_admin(self):
        response = self.register('admin')
        self.assertEqual(response.status_code, 200)
        admin = User.query.by_username('admin')
        self.assertEqual(admin.global_role, 'ADMIN')
        self.assertTrue(admin.is_enabled)
        self.assertEqual(admin.activation_code, None)

    def test_later_users_need_approval(self):
        self.create_user('admin', 'ADMIN')
        self.set_config('users_create_blogs', False)
        data = self.register('jane').get_json()
        self.assertEqual(data['status'], 'REGISTERED')
        self.assertEqual(data['global_role'], 'BLOGGER')
        jane = self.refetch(User, data['id'])
        self.assertEqual(len(jane.activation_code), 36)
        # not enabled yet, so the login fails
        self.assertEqual(self.login('jane').status_code, 401)

    def test_blog_creators(self):
        self.create_user('admin', 'ADMIN')
        self.set_config('users_create_blogs', True)
        self.assertEqual(self.register('jane').get_json()['global_role'],
                         'BLOGCREATOR')

    def test_registration_disabled(self):
        self.create_user('admin', 'ADMIN')
        self.set_config('registration_policy', 'DISABLED')
        self.assertEqual(self.register('jane').status_code, 403)

    def test_invalid_registration(self):
        response = self.register('jane', email='nope')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json(),
                         {'error': 'The e-mail address is invalid.'})
        self.assertEqual(User.query.count(), 0)

    def test_metadata(self):
        response, data = self.get_json('/tb-ui/register/rest/'
                                       'useradminmetadata')
        self.assertEqual(sorted(data['global_roles']),
                         ['ADMIN', 'BLOGCREATOR', 'BLOGGER'])
        self.assertTrue('DISABLED' in data['user_statuses'])


class AdminTestCase(TightBlogTestCase):

    def setUp(self):
        TightBlogTestCase.setUp(self)
        self.admin = self.create_user('admin', 'ADMIN')
        self.jane = self.create_user('jane')
        self.login('admin')

    def test_requires_admin(self):
        self.login('jane')
        for url in ('/userlist', '/registrationapproval',
                    '/user/%d' % self.jane.id):
            response = self.client.get(ADMIN_BASE + url)
            self.assertEqual(response.status_code, 403, url)

    def test_list(self):
        response, data = self.get_json(ADMIN_BASE + '/userlist')
        self.assertEqual(data, {
            str(self.admin.id): 'Admin (admin@example.com)',
            str(self.jane.id):  'Jane (jane@example.com)'
        })

    def test_registrations(self):
        john = self.create_user('john', status=USER_REGISTERED)
        mary = self.create_user('mary', status=USER_REGISTERED)
        response, data = self.get_json(ADMIN_BASE + '/registrationapproval')
        self.assertEqual([x['username'] for x in data], ['john', 'mary'])

        url = ADMIN_BASE + '/registrationapproval/%d/%s'
        self.assertEqual(self.client.post(url % (john.id, 'approve'))
                         .status_code, 200)
        self.assertTrue(self.refetch(User, john.id).is_enabled)
        self.assertEqual(self.client.post(url % (john.id, 'reject'))
                         .status_code, 400)
        self.assertEqual(self.client.post(url % (mary.id, 'reject'))
                         .status_code, 200)
        self.assertEqual(self.refetch(User, mary.id), None)

    def test_show_and_update(self):
        url = ADMIN_BASE + '/user/%d' % self.jane.id
        response, data = self.get_json(url)
        self.assertEqual(data['email'], 'jane@example.com')
        response = self.client.put(url, json={
            'screen_name':  'Janet',
            'status':       'DISABLED',
            'global_role':  'BLOGCREATOR'
        })
        self.assertEqual(response.status_code, 200)
        jane = self.refetch(User, self.jane.id)
        self.assertEqual(jane.screen_name, 'Janet')
        self.assertEqual(jane.status, 'DISABLED')
        self.assertEqual(jane.global_role, 'BLOGCREATOR')
        self.assertEqual(self.client.get(ADMIN_BASE + '/user/4242')
                         .status_code, 404)

    def test_admin_cannot_demote_self(self):
        response = self.client.put(ADMIN_BASE + '/user/%d' % self.admin.id,
                                   json={'global_role': 'BLOGGER',
                                         'status': 'DISABLED'})
        self.assertEqual(response.status_code, 200)
        admin = self.refetch(User, self.admin.id)
        self.assertEqual(admin.global_role, 'ADMIN')
        self.assertTrue(admin.is_enabled)

    def test_add(self):
        response = self.client.post(ADMIN_BASE + '/users',
                                    json=user_data('john'))
        self.assertEqual(response.status_code, 200)
        john = User.query.by_username('john')
        self.assertTrue(john.is_enabled)
        self.assertTrue(john.check_password(PASSWORD))
        response = self.client.post(ADMIN_BASE + '/users',
                                    json=user_data('john'))
        self.assertEqual(response.status_code, 400)

    def test_user_weblogs(self):
        self.create_weblog('myblog', self.jane)
        response, data = self.get_json(ADMIN_BASE + '/user/%d/weblogs' %
                                       self.jane.id)
        self.assertEqual([(x['weblog']['handle'], x['weblog_role'])
                          for x in data], [('myblog', 'OWNER')])


class ProfileTestCase(TightBlogTestCase):

    def setUp(self):
        TightBlogTestCase.setUp(self)
        self.jane = self.create_user('jane')
        self.john = self.create_user('john')
        self.login('jane')

    def test_own_profile_only(self):
        response, data = self.get_json(AUTHORING + '/userprofile/%d' %
                                       self.jane.id)
        self.assertEqual(data['username'], 'jane')
        response = self.client.get(AUTHORING + '/userprofile/%d' %
                                   self.john.id)
        self.assertEqual(response.status_code, 404)

    def test_update_profile(self):
        new_password = 'Other#123'
        response = self.client.post(AUTHORING + '/userprofile/%d' %
                                    self.jane.id, json={
            'screen_name':      'Janie',
            'password':         new_password,
            'password_confirm': new_password,
            'global_role':      'ADMIN'
        })
        self.assertEqual(response.status_code, 200)
        jane = self.refetch(User, self.jane.id)
        self.assertEqual(jane.screen_name, 'Janie')
        self.assertEqual(jane.global_role, 'BLOGGER')
        self.assertTrue(jane.check_password(new_password))

    def test_duplicate_screen_name(self):
        response = self.client.post(AUTHORING + '/userprofile/%d' %
                                    self.jane.id, json={
            'screen_name':  'John'
        })
        self.assertEqual(response.status_code, 400)


class MembershipTestCase(TightBlogTestCase):

    def setUp(self):
        TightBlogTestCase.setUp(self)
        self.owner = self.create_user('owner')
        self.jane = self.create_user('jane')
        self.weblog = self.create_weblog('myblog', self.owner)

    def url(self, path):
        return '%s/weblog/%d/%s' % (AUTHORING, self.weblog.id, path)

    def invite(self, user, role='POST'):
        return self.client.post(self.url('user/%d/role/%s/invite' %
                                         (user.id, role)))

    def test_invite_and_accept(self):
        self.login('owner')
        response, data = self.get_json(self.url('potentialmembers'))
        self.assertEqual(data, {str(self.jane.id): 'Jane (jane@example.com)'})
        self.assertEqual(self.invite(self.jane).status_code, 200)
        self.assertEqual(self.invite(self.jane).get_json(),
                         {'error': 'User Jane is already invited.'})
        response, data = self.get_json(self.url('potentialmembers'))
        self.assertEqual(data, {})

        self.login('jane')
        response, menu = self.get_json(AUTHORING + '/mainmenu')
        self.assertEqual(menu['weblogs'], [])
        invitation, = menu['invitations']
        self.assertFalse(menu['is_admin'])
        response = self.client.post(AUTHORING + '/weblogrole/%d/attach' %
                                    invitation['id'])
        self.assertEqual(response.status_code, 200)
        response, data = self.get_json(AUTHORING + '/loggedinuser/weblogs')
        self.assertEqual([(x['weblog']['handle'], x['weblog_role'])
                          for x in data], [('myblog', 'POST')])

    def test_invite_errors(self):
        self.login('owner')
        self.assertEqual(self.invite(self.owner).get_json(),
                         {'error': 'User Owner is already a member.'})
        self.assertEqual(self.invite(self.jane, 'KING').status_code, 400)
        self.login('jane')
        self.assertEqual(self.invite(self.jane).status_code, 403)

    def test_resign(self):
        membership = self.add_member(self.jane, self.weblog, 'POST')
        url = AUTHORING + '/weblogrole/%d/detach' % membership.id
        self.login('owner')
        self.assertEqual(self.client.post(url).status_code, 404)
        self.login('jane')
        self.assertEqual(self.client.post(url).status_code, 200)
        self.assertEqual(self.refetch(UserWeblogRole, membership.id), None)

    def test_members(self):
        self.add_member(self.jane, self.weblog, 'EDIT_DRAFT')
        self.login('jane')
        self.assertEqual(self.client.get(self.url('members')).status_code,
                         403)
        self.login('owner')
        response, data = self.get_json(self.url('members'))
        self.assertEqual(sorted((x['user']['screen_name'], x['weblog_role'])
                                for x in data),
                         [('Jane', 'EDIT_DRAFT'), ('Owner', 'OWNER')])

    def test_update_members(self):
        owner_role = UserWeblogRole.query.get_role(self.owner, self.weblog)
        jane_role = self.add_member(self.jane, self.weblog, 'EDIT_DRAFT')
        self.login('owner')

        response = self.client.post(self.url('memberupdate'), json=[
            {'id': owner_role.id, 'weblog_role': 'POST'}
        ])
        self.assertEqual(response.status_code, 400)

        response = self.client.post(self.url('memberupdate'), json=[
            {'id': jane_role.id, 'weblog_role': 'OWNER'},
            {'id': owner_role.id, 'weblog_role': 'NOBLOGNEEDED'}
        ])
        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.refetch(UserWeblogRole, owner_role.id), None)
        self.assertEqual(self.refetch(UserWeblogRole,
                                      jane_role.id).weblog_role, 'OWNER')

    def test_pending_owner_does_not_count(self):
        owner_role = UserWeblogRole.query.get_role(self.owner, self.weblog)
        jane_role = self.add_member(self.jane, self.weblog, 'OWNER',
                                    pending=True)
        self.login('owner')
        response = self.client.post(self.url('memberupdate'), json=[
            {'id': owner_role.id, 'weblog_role': 'NOBLOGNEEDED'}
        ])
        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.refetch(UserWeblogRole,
                                      jane_role.id).pending, True)
