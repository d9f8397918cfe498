# -*- coding: utf-8 -*-
"""
    Tests for the REST views of the entry editor.

    :copyright: (c) 2009 by the TightBlog Team, see AUTHORS for more details.
    :license: BSD, see LICENSE for more details.
"""
from datetime import datetime
from unittest import mock

from tests import TightBlogTestCase
from tightblog.database import db
from tightblog.models import WeblogEntry


BASE = '/tb-ui/authoring/rest/weblogentries'


class EntryViewTestCase(TightBlogTestCase):

    def setUp(self):
        TightBlogTestCase.setUp(self)
        self.owner = self.create_user('owner')
        self.contributor = self.create_user('contributor')
        self.stranger = self.create_user('stranger')
        self.weblog = self.create_weblog('myblog', self.owner)
        self.add_member(self.contributor, self.weblog, 'EDIT_DRAFT')
        self.news = self.create_category(self.weblog, 'news')
        self.root_id = self.weblog.root_category.id
        self.entry = self.create_entry(self.weblog, 'Python news',
                                       creator=self.owner,
                                       category=self.news,
                                       tags=['python', 'web'],
                                       pub_time=datetime(2016, 3, 5, 14, 30))
        self.draft = self.create_entry(self.weblog, 'A draft',
                                       status='DRAFT',
                                       creator=self.contributor)

    def url(self, path):
        return '%s/%d/%s' % (BASE, self.weblog.id, path)


class SearchTestCase(EntryViewTestCase):

    def test_search(self):
        self.login('owner')
        response = self.client.post(self.url('page/0'), json={})
        self.assertEqual(response.status_code, 200)
        data = response.get_json()
        self.assertEqual([x['title'] for x in data['entries']],
                         ['Python news', 'A draft'])
        self.assertFalse(data['has_more'])

        data = self.client.post(self.url('page/0'), json={
            'status':           'DRAFT'
        }).get_json()
        self.assertEqual([x['id'] for x in data['entries']], [self.draft.id])

        data = self.client.post(self.url('page/0'), json={
            'category_name':    'news',
            'text':             'python'
        }).get_json()
        self.assertEqual([x['id'] for x in data['entries']], [self.entry.id])

    def test_date_range(self):
        self.login('owner')
        data = self.client.post(self.url('page/0'), json={
            'start_date':   '2016-03-05',
            'end_date':     '2016-03-05'
        }).get_json()
        self.assertEqual([x['id'] for x in data['entries']], [self.entry.id])

    def test_paging(self):
        for x in range(3):
            self.create_entry(self.weblog, 'Entry %d' % x)
        self.login('owner')
        with mock.patch('tightblog.views.entries.ITEMS_PER_PAGE', 2):
            first = self.client.post(self.url('page/0'), json={
                'status': 'PUBLISHED'
            }).get_json()
            second = self.client.post(self.url('page/1'), json={
                'status': 'PUBLISHED'
            }).get_json()
        self.assertEqual(len(first['entries']), 2)
        self.assertTrue(first['has_more'])
        self.assertEqual(len(second['entries']), 2)
        self.assertFalse(second['has_more'])

    def test_permissions(self):
        self.assertEqual(self.client.post(self.url('page/0'),
                                          json={}).status_code, 403)
        self.login('contributor')
        self.assertEqual(self.client.post(self.url('page/0'),
                                          json={}).status_code, 404)

    def test_search_fields(self):
        self.login('owner')
        response, data = self.get_json(self.url('searchfields'))
        self.assertEqual(data['categories'], {'': '(Any)', 'news': 'news'})
        self.assertTrue('SCHEDULED' in data['status_options'])
        self.assertTrue('UPDATE_TIME' in data['sort_by_options'])


class EntryEditTestCase(EntryViewTestCase):

    def save(self, **data):
        data.setdefault('category_id', self.root_id)
        return self.client.post(self.url('entries'), json=data)

    def test_show(self):
        self.login('owner')
        response, data = self.get_json('%s/%d' % (BASE, self.entry.id))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(data['title'], 'Python news')
        self.assertEqual(data['date_string'], '3/5/2016')
        self.assertEqual((data['hours'], data['minutes']), (14, 30))
        self.assertEqual(data['tags_as_string'], 'python web')
        self.assertEqual(data['preview_url'],
                         '/tb-ui/authoring/preview/myblog/entry/python-news')

    def test_show_permissions(self):
        self.login('stranger')
        response = self.client.get('%s/%d' % (BASE, self.entry.id))
        self.assertEqual(response.status_code, 403)
        self.assertEqual(self.client.get(BASE + '/4242').status_code, 404)

    def test_edit_metadata(self):
        self.login('contributor')
        response, data = self.get_json(self.url('entryeditmetadata'))
        self.assertEqual(data['categories'], {
            str(self.root_id):      'root',
            str(self.news.id):      'news'
        })
        self.assertFalse(data['author'])
        self.assertEqual(data['default_edit_format'], 'HTML')
        self.assertEqual(data['comment_day_options']['0'], 'Unlimited')

    def test_create_draft(self):
        self.login('contributor')
        response = self.save(title='My Draft', status='DRAFT',
                             text='Some text', tags_as_string='Foo bar')
        self.assertEqual(response.status_code, 200)
        data = response.get_json()
        self.assertEqual(data['message'], 'Entry saved as draft.')
        entry = self.refetch(WeblogEntry, data['entry_id'])
        self.assertEqual(entry.anchor, 'my-draft')
        self.assertEqual(entry.status, 'DRAFT')
        self.assertEqual(entry.creator.username, 'contributor')
        self.assertEqual(entry.tag_names, ['bar', 'foo'])
        self.assertTrue(entry.category.is_root)

    def test_contributor_cannot_publish(self):
        self.login('contributor')
        response = self.save(title='Published', status='PUBLISHED')
        self.assertEqual(response.status_code, 403)
        self.assertEqual(self.save(title='Pending',
                                   status='PENDING').status_code, 200)

    def test_publish_and_schedule(self):
        self.login('owner')
        data = self.save(title='Now', status='PUBLISHED').get_json()
        self.assertEqual(data['message'], 'Entry published.')
        self.assertTrue(self.refetch(WeblogEntry,
                                     data['entry_id']).is_published)

        data = self.save(title='Later', status='PUBLISHED',
                         date_string='1/1/2099', hours=12,
                         minutes=0).get_json()
        entry = self.refetch(WeblogEntry, data['entry_id'])
        self.assertEqual(entry.status, 'SCHEDULED')
        self.assertEqual(entry.pub_time, datetime(2099, 1, 1, 12, 0))

    def test_update(self):
        self.login('owner')
        response = self.save(id=self.entry.id, title='Renamed',
                             status='PUBLISHED', category_id=self.news.id,
                             tags_as_string='python',
                             enclosure_url='http://example.com/a.mp3',
                             enclosure_type='audio/mpeg',
                             enclosure_length=42)
        self.assertEqual(response.status_code, 200)
        entry = self.refetch(WeblogEntry, self.entry.id)
        self.assertEqual(entry.title, 'Renamed')
        self.assertEqual(entry.anchor, 'python-news')
        self.assertEqual(entry.tag_names, ['python'])
        self.assertEqual(entry.enclosure_type, 'audio/mpeg')
        self.assertEqual(entry.enclosure_length, 42)

    def test_invalid_data(self):
        self.login('owner')
        self.assertEqual(self.save(title='', status='DRAFT').status_code, 400)
        self.assertEqual(self.save(title='X', status='NONSENSE').status_code,
                         400)
        self.assertEqual(self.save(title='X', status='DRAFT',
                                   category_id=4242).status_code, 400)
        other = self.create_weblog('other')
        self.assertEqual(self.save(title='X', status='DRAFT',
                                   category_id=other.root_category.id)
                         .status_code, 400)

    def test_invalid_comment_days(self):
        self.login('owner')
        count = WeblogEntry.query.count()
        response = self.save(title='X', status='DRAFT', comment_days='many')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()['error'],
                         'Invalid number of comment days.')
        db.session.remove()
        self.assertEqual(WeblogEntry.query.count(), count)

        response = self.save(title='X', status='DRAFT', comment_days='7')
        self.assertEqual(response.status_code, 200)
        entry = self.refetch(WeblogEntry, response.get_json()['entry_id'])
        self.assertEqual(entry.comment_days, 7)

    def test_delete(self):
        self.login('contributor')
        url = '%s/%d' % (BASE, self.draft.id)
        self.assertEqual(self.client.delete(url).status_code, 403)
        self.login('owner')
        self.assertEqual(self.client.delete(url).status_code, 200)
        self.assertEqual(self.refetch(WeblogEntry, self.draft.id), None)
        self.assertEqual(self.client.delete(url).status_code, 404)


class EntryListTestCase(EntryViewTestCase):

    def test_tag_data(self):
        self.login('owner')
        response, data = self.get_json(self.url('tagdata?prefix=py'))
        self.assertEqual(data, {
            'prefix':       'py',
            'tagcounts':    [{'name': 'python', 'count': 1}]
        })

    def test_tag_data_limit(self):
        self.set_config('max_autocomplete_tags', 1)
        self.login('owner')
        response, data = self.get_json(self.url('tagdata'))
        self.assertEqual(data['tagcounts'], [{'name': 'python', 'count': 1}])

    def test_recent(self):
        self.login('owner')
        response, data = self.get_json(self.url('recententries/draft'))
        self.assertEqual([x['title'] for x in data], ['A draft'])
        self.assertTrue(data[0]['edit_url'].endswith(
            'entryEdit?weblogId=%d&entryId=%d' % (self.weblog.id,
                                                  self.draft.id)))
        response = self.client.get(self.url('recententries/bogus'))
        self.assertEqual(response.status_code, 400)

    def test_recent_permissions(self):
        self.login('contributor')
        response, data = self.get_json(self.url('recententries/published'))
        self.assertEqual(data, [])
        self.login('stranger')
        response = self.client.get(self.url('recententries/draft'))
        self.assertEqual(response.status_code, 403)
