# -*- coding: utf-8 -*-
"""
    Tests for the shared themes, the weblog templates and the template
    REST views.

    :copyright: (c) 2009 by the TightBlog Team, see AUTHORS for more details.
    :license: BSD, see LICENSE for more details.
"""
import os
import unittest
from os.path import join
from shutil import rmtree
from tempfile import mkdtemp

from tests import TightBlogTestCase
from tightblog.database import db
from tightblog.models import WeblogTemplate, DEVICE_MOBILE
from tightblog.rendering.templates import find_themes, get_weblog_theme, \
     RendererManager, WeblogPreviewCopy, NEW_TEMPLATE_CONTENT
from tightblog.utils.exceptions import TightBlogException


class SharedThemeTestCase(unittest.TestCase):

    def setUp(self):
        self.folder = mkdtemp(prefix='tightblog-themes-')
        theme = join(self.folder, 'fancy')
        os.makedirs(join(theme, 'mobile'))
        with open(join(theme, 'metadata.txt'), 'w') as f:
            f.write('Name: Fancy Theme\n'
                    'Enabled: no\n'
                    'Roles: index.html=WEBLOG, \\\n'
                    '       fancy.css=stylesheet, odd.html=BOGUS\n')
        with open(join(theme, 'index.html'), 'w') as f:
            f.write('standard')
        with open(join(theme, 'mobile', 'index.html'), 'w') as f:
            f.write('mobile')
        os.makedirs(join(self.folder, 'not-a-theme'))

    def tearDown(self):
        rmtree(self.folder, True)

    def test_find_themes(self):
        theme, = find_themes(self.folder)
        self.assertEqual(theme.name, 'fancy')
        self.assertEqual(theme.display_name, 'Fancy Theme')
        self.assertFalse(theme.enabled)
        self.assertEqual([(x.name, x.role) for x in theme.templates],
                         [('index.html', 'WEBLOG'),
                          ('fancy.css', 'STYLESHEET')])
        self.assertEqual(list(find_themes(join(self.folder, 'missing'))), [])

    def test_renditions(self):
        theme, = find_themes(self.folder)
        template = theme.get_template_by_role('WEBLOG')
        self.assertEqual(template.id, 'fancy:index.html')
        self.assertEqual(template.get_template(), 'standard')
        self.assertEqual(template.get_template(DEVICE_MOBILE), 'mobile')
        self.assertEqual(template.resource_id(DEVICE_MOBILE),
                         'fancy:index.html;mobile')
        # the stylesheet file does not exist
        self.assertEqual(theme.get_template_by_name('fancy.css')
                         .get_template(), None)


class WeblogThemeTestCase(TightBlogTestCase):

    def setUp(self):
        TightBlogTestCase.setUp(self)
        self.weblog = self.create_weblog('myblog')
        self.template = WeblogTemplate(self.weblog, 'custom', 'WEBLOG')
        self.template.set_template('<p>{{ model.weblog.handle }}</p>')
        db.session.add(self.template)
        db.commit()

    def test_builtin_theme(self):
        self.assertTrue('basic' in self.app.themes)
        theme = self.app.themes['basic']
        self.assertEqual(theme.get_template_by_role('TAGSINDEX').name,
                         'tagsindex.html')

    def test_database_templates_win(self):
        theme = get_weblog_theme(self.weblog)
        self.assertTrue(theme.get_template_by_role('WEBLOG') is
                        self.template)
        self.assertEqual(theme.get_template_by_role('PERMALINK').id,
                         'basic:permalink.html')
        self.assertEqual([x.name for x in theme.get_templates()],
                         ['basic.css', 'custom', 'permalink.html',
                          'tagsindex.html', 'weblog.html'])

    def test_mobile_fallback(self):
        self.assertEqual(self.template.get_rendition(DEVICE_MOBILE)
                         .device_type, 'STANDARD')
        self.template.set_template('mobile', DEVICE_MOBILE)
        self.assertEqual(self.template.get_template(DEVICE_MOBILE), 'mobile')
        self.assertEqual(self.template.resource_id(DEVICE_MOBILE),
                         '%d;mobile' % self.template.id)

    def test_preview_copy(self):
        copy = WeblogPreviewCopy(self.weblog, 'other')
        self.assertEqual(copy.handle, 'myblog')
        self.assertEqual(copy.theme, 'other')
        self.assertRaises(AttributeError, setattr, copy, 'name', 'Changed')
        copy = WeblogPreviewCopy(self.weblog, 'basic')
        self.assertEqual(get_weblog_theme(copy).get_template_by_role(
            'WEBLOG').id, 'basic:weblog.html')

    def test_unknown_theme(self):
        self.weblog.theme = 'missing'
        theme = get_weblog_theme(self.weblog)
        self.assertEqual(theme.get_template_by_role('PERMALINK'), None)
        self.assertTrue(theme.get_template_by_role('WEBLOG') is
                        self.template)

    def test_renderer(self):
        renderer = RendererManager(self.app).get_renderer(self.template)
        self.assertEqual(renderer.render({'model': {'weblog': self.weblog}}),
                         '<p>myblog</p>')
        template = WeblogTemplate(self.weblog, 'empty', 'CUSTOM_INTERNAL')
        db.session.add(template)
        db.commit()
        self.assertRaises(TightBlogException,
                          RendererManager(self.app).get_renderer, template)


class TemplateViewTestCase(TightBlogTestCase):

    def setUp(self):
        TightBlogTestCase.setUp(self)
        self.owner = self.create_user('owner')
        self.jane = self.create_user('jane')
        self.weblog = self.create_weblog('myblog', self.owner)
        self.add_member(self.jane, self.weblog, 'POST')
        self.url = '/tb-ui/authoring/rest/weblog/%d/templates' % \
            self.weblog.id

    def test_list(self):
        self.login('owner')
        response, data = self.get_json(self.url)
        # the shared theme's files are not database templates
        self.assertEqual(data['templates'], [])
        self.assertEqual(sorted(data['available_roles']),
                         ['CUSTOM_EXTERNAL', 'CUSTOM_INTERNAL', 'JAVASCRIPT',
                          'PERMALINK', 'SEARCH', 'STYLESHEET', 'TAGSINDEX',
                          'WEBLOG'])

        template = WeblogTemplate(self.weblog, 'WEBLOG', 'WEBLOG')
        db.session.add(template)
        db.session.add(WeblogTemplate(self.weblog, 'about',
                                      'CUSTOM_EXTERNAL'))
        db.commit()
        response, data = self.get_json(self.url)
        self.assertEqual([x['name'] for x in data['templates']],
                         ['WEBLOG', 'about'])
        self.assertFalse('WEBLOG' in data['available_roles'])
        self.assertTrue('CUSTOM_EXTERNAL' in data['available_roles'])

    def test_owner_only(self):
        self.login('jane')
        self.assertEqual(self.client.get(self.url).status_code, 403)
        self.assertEqual(self.client.post(self.url, data={
            'name': 'about', 'role': 'CUSTOM_EXTERNAL'
        }).status_code, 403)

    def test_add_custom_page(self):
        self.login('owner')
        response = self.client.post(self.url, data={
            'name':         'about',
            'role':         'CUSTOM_EXTERNAL',
            'description':  'About me'
        })
        self.assertEqual(response.status_code, 200)
        data = response.get_json()
        self.assertEqual(data['relative_path'], 'about')
        self.assertEqual(data['device_types'], ['MOBILE', 'STANDARD'])

        response = self.client.get('/myblog/page/about')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_data(as_text=True).strip(),
                         NEW_TEMPLATE_CONTENT.strip())

        response = self.client.post(self.url, data={
            'name': 'about', 'role': 'CUSTOM_INTERNAL'
        })
        self.assertEqual(response.status_code, 400)

    def test_add_weblog_template(self):
        self.login('owner')
        data = self.client.post(self.url, data={'role': 'WEBLOG'}).get_json()
        self.assertEqual(data['name'], 'WEBLOG')
        self.assertEqual(data['relative_path'], None)
        response, data = self.get_json(self.url)
        self.assertFalse('WEBLOG' in data['available_roles'])

    def test_invalid_add(self):
        self.login('owner')
        self.assertEqual(self.client.post(self.url, data={
            'role': 'CUSTOM_EXTERNAL'
        }).status_code, 400)
        self.assertEqual(self.client.post(self.url, data={
            'name': 'foo', 'role': 'BOGUS'
        }).status_code, 400)

    def test_delete(self):
        template = WeblogTemplate(self.weblog, 'about', 'CUSTOM_EXTERNAL')
        db.session.add(template)
        db.commit()
        url = '/tb-ui/authoring/rest/template/%d' % template.id
        self.login('jane')
        self.assertEqual(self.client.delete(url).status_code, 403)
        self.login('owner')
        self.assertEqual(self.client.delete(url).status_code, 200)
        self.assertEqual(self.refetch(WeblogTemplate, template.id), None)
        self.assertEqual(self.client.delete(url).status_code, 404)
