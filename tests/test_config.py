# -*- coding: utf-8 -*-
"""
    Tests for the ini file configuration.

    :copyright: (c) 2009 by the TightBlog Team, see AUTHORS for more details.
    :license: BSD, see LICENSE for more details.
"""
import os
import unittest
from os.path import join
from shutil import rmtree
from tempfile import mkdtemp

from tightblog.config import Configuration, create_instance_config, \
     quote_value, unquote_value


class QuotingTestCase(unittest.TestCase):

    def test_plain_values(self):
        self.assertEqual(quote_value('foo'), 'foo')
        self.assertEqual(quote_value(''), '')
        self.assertEqual(unquote_value('foo'), 'foo')

    def test_quoted_values(self):
        self.assertEqual(quote_value(' padded'), '" padded"')
        self.assertEqual(quote_value('two\nlines'), '"two\\nlines"')
        self.assertEqual(unquote_value('"two\\nlines"'), 'two\nlines')
        self.assertEqual(unquote_value(quote_value('"quoted"')), '"quoted"')


class ConfigurationTestCase(unittest.TestCase):

    def setUp(self):
        self.folder = mkdtemp(prefix='tightblog-config-')
        self.filename = join(self.folder, 'tightblog.ini')

    def tearDown(self):
        rmtree(self.folder, True)

    def write(self, text):
        with open(self.filename, 'w') as f:
            f.write(text)

    def test_missing_file(self):
        cfg = Configuration(self.filename)
        self.assertFalse(cfg.exists)
        self.assertFalse(cfg.changed_external)
        self.assertEqual(cfg['comment_policy'], 'MUSTMODERATE')

    def test_conversion(self):
        self.write('[tightblog]\n'
                   'max_autocomplete_tags = 5\n'
                   'users_create_blogs = no\n'
                   'page_cache_timeout = forever\n')
        cfg = Configuration(self.filename)
        self.assertEqual(cfg['max_autocomplete_tags'], 5)
        self.assertEqual(cfg['users_create_blogs'], False)
        # invalid values fall back to the default
        self.assertEqual(cfg['page_cache_timeout'], 3600)
        self.assertEqual(cfg['tightblog/max_autocomplete_tags'], 5)

    def test_commit_keeps_comments_and_sections(self):
        self.write('# the main section\n'
                   '[tightblog]\n'
                   '# how many tags\n'
                   'max_autocomplete_tags = 5\n'
                   '\n'
                   '[plugin]\n'
                   'option = value\n')
        cfg = Configuration(self.filename)
        cfg.change_single('comment_policy', 'NONE')
        self.assertEqual(cfg['comment_policy'], 'NONE')
        self.assertFalse(cfg.changed_external)
        with open(self.filename) as f:
            contents = f.read()
        self.assertTrue('# how many tags\nmax_autocomplete_tags = 5\n'
                        in contents)
        self.assertTrue('comment_policy = NONE\n' in contents)
        self.assertTrue('[plugin]\noption = value\n' in contents)
        self.assertEqual(Configuration(self.filename)['comment_policy'],
                         'NONE')

    def test_transaction(self):
        cfg = Configuration(self.filename)
        t = cfg.edit()
        t.update(comment_max_links=1, delete_blatant_spam=True)
        self.assertEqual(t['comment_max_links'], 1)
        self.assertEqual(cfg['comment_max_links'], 3)
        t.commit()
        self.assertEqual(cfg['comment_max_links'], 1)
        self.assertTrue(cfg['delete_blatant_spam'])
        self.assertRaises(ValueError, t.commit)
        self.assertRaises(KeyError, cfg.change_single, 'no_such_key', 1)

    def test_revert_to_default(self):
        cfg = Configuration(self.filename)
        cfg.change_single('registration_policy', 'DISABLED')
        t = cfg.edit()
        t.revert_to_default('registration_policy')
        t.commit()
        self.assertEqual(cfg['registration_policy'], 'APPROVAL_REQUIRED')
        with open(self.filename) as f:
            self.assertFalse('registration_policy' in f.read())

    def test_set_from_string(self):
        cfg = Configuration(self.filename)
        t = cfg.edit()
        t.set_from_string('comment_max_size', '250')
        t.set_from_string('comment_max_links', 'lots')
        t.commit()
        self.assertEqual(cfg['comment_max_size'], 250)
        self.assertEqual(cfg['comment_max_links'], 3)

    def test_changed_external(self):
        cfg = Configuration(self.filename)
        cfg.change_single('site_weblog', 'main')
        self.assertFalse(cfg.changed_external)
        mtime = os.path.getmtime(self.filename) + 10
        os.utime(self.filename, (mtime, mtime))
        self.assertTrue(cfg.changed_external)

    def test_public_list(self):
        cfg = create_instance_config(self.folder, akismet_api_key='secret')
        self.assertTrue(cfg.exists)
        values = dict((x['key'], x['value'])
                      for x in cfg.get_public_list(hide_insecure=True))
        self.assertEqual(values['akismet_api_key'], '****')
        self.assertEqual(values['secret_key'], '****')
        self.assertEqual(len(cfg['secret_key']), 40)
        values = dict((x['key'], x['value']) for x in cfg.get_public_list())
        self.assertEqual(values['akismet_api_key'], 'secret')
