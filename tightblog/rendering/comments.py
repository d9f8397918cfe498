# -*- coding: utf-8 -*-
"""
    tightblog.rendering.comments
    ~~~~~~~~~~~~~~~~~~~~~~~~~~~~

    The comment form and the spam checks for new comments.

    Every validator returns one of the results `NOT_SPAM`, `SPAM` or
    `BLATANT_SPAM` and may add message keys to the message dict it is
    passed.  The validation manager runs all validators and keeps the
    worst result:

    >>> worst_result([NOT_SPAM, SPAM, NOT_SPAM])
    1
    >>> worst_result([]) == NOT_SPAM
    True

    :copyright: (c) 2009 by the TightBlog Team, see AUTHORS for more details.
    :license: BSD, see LICENSE for more details.
"""
import re

import requests

from tightblog.i18n import lazy_gettext
from tightblog.urls import weblog_url, weblog_entry_url
from tightblog.utils import log
from tightblog.utils.validators import check, is_valid_email, is_valid_url


#: validation results, ordered by severity
NOT_SPAM = 0
SPAM = 1
BLATANT_SPAM = 2

RESULT_NAMES = {
    NOT_SPAM:       'NOT_SPAM',
    SPAM:           'SPAM',
    BLATANT_SPAM:   'BLATANT_SPAM'
}

AKISMET_URL = 'https://%s.rest.akismet.com/1.1/comment-check'

#: the texts of the message keys validators add
MESSAGES = {
    'comment.validator.akismetMessage.spam':
        lazy_gettext('Akismet reported your comment as spam.'),
    'comment.validator.akismetMessage.blatantNoDelete':
        lazy_gettext('Akismet reported your comment as blatant spam.'),
    'comment.validator.akismetMessage.error':
        lazy_gettext('The spam check failed, your comment is held for '
                     'moderation.'),
    'comment.validator.excessLinksMessage':
        lazy_gettext('Your comment contains too many links.'),
    'comment.validator.excessSizeMessage':
        lazy_gettext('Your comment is too long.')
}

_link_re = re.compile(r'<a\s|https?://', re.I)


def worst_result(results):
    """Return the most severe of the results."""
    return max(results or [NOT_SPAM])


class CommentForm(object):
    """The data of the comment form of a permalink page.  After posting,
    the form carries the message for the commenter.
    """

    def __init__(self, name='', email='', url='', content=''):
        self.name = name
        self.email = email
        self.url = url
        self.content = content
        self.error = False
        self.message = None

    @classmethod
    def from_request(cls, request):
        form = request.form
        return cls(form.get('name', '').strip(),
                   form.get('email', '').strip(),
                   form.get('url', '').strip(),
                   form.get('content', '').strip())

    def validate(self):
        """Check the form data and return a list of error messages."""
        errors = []
        if not self.name:
            errors.append(lazy_gettext('You have to enter your name.'))
        if not self.content:
            errors.append(lazy_gettext('You have to enter a comment.'))
        if self.email and not check(is_valid_email, self.email):
            errors.append(lazy_gettext('The e-mail address is invalid.'))
        if self.url and not check(is_valid_url, self.url):
            errors.append(lazy_gettext('The URL is invalid.'))
        return errors

    def set_error(self, message):
        self.error = True
        self.message = message

    def set_message(self, message):
        self.error = False
        self.message = message

    def __repr__(self):
        return '<%s %r>' % (self.__class__.__name__, self.name)


class CommentValidator(object):
    """Base class of the comment validators."""

    def validate(self, comment, messages):
        """Return the result for the comment.  Message keys are added to
        the `messages` dict.
        """
        raise NotImplementedError()


class ExcessLinksCommentValidator(CommentValidator):
    """Comments with more links than allowed are spam."""

    def __init__(self, max_links=3):
        self.max_links = max_links

    def validate(self, comment, messages):
        if len(_link_re.findall(comment.content or '')) > self.max_links:
            messages['comment.validator.excessLinksMessage'] = \
                [str(self.max_links)]
            return SPAM
        return NOT_SPAM


class ExcessSizeCommentValidator(CommentValidator):
    """Comments longer than allowed are spam."""

    def __init__(self, max_size=1000):
        self.max_size = max_size

    def validate(self, comment, messages):
        if len(comment.content or '') > self.max_size:
            messages['comment.validator.excessSizeMessage'] = \
                [str(self.max_size)]
            return SPAM
        return NOT_SPAM


class AkismetCaller(object):
    """Does the HTTP call to the Akismet service."""

    timeout = 10

    def make_akismet_call(self, api_key, body):
        response = requests.post(AKISMET_URL % api_key, data=body,
                                 timeout=self.timeout)
        response.raise_for_status()
        if response.text.strip() != 'true':
            return NOT_SPAM
        if response.headers.get('X-akismet-pro-tip') == 'discard':
            return BLATANT_SPAM
        return SPAM


class AkismetCommentValidator(CommentValidator):
    """Asks Akismet whether a comment is spam."""

    def __init__(self, api_key, delete_blatant_spam=False, caller=None):
        self.api_key = api_key
        self.delete_blatant_spam = delete_blatant_spam
        self.caller = caller or AkismetCaller()

    def create_api_request_body(self, comment):
        """The form data of the comment check call as list of tuples."""
        entry = comment.entry
        return [
            ('blog', weblog_url(entry.weblog, absolute=True)),
            ('user_ip', comment.remote_host or ''),
            ('user_agent', comment.user_agent or ''),
            ('referrer', comment.referrer or ''),
            ('permalink', weblog_entry_url(entry.weblog, entry.anchor,
                                           absolute=True)),
            ('comment_type', 'comment'),
            ('comment_author', comment.name or ''),
            ('comment_author_email', comment.email or ''),
            ('comment_author_url', comment.url or ''),
            ('comment_content', comment.content or '')
        ]

    def validate(self, comment, messages):
        body = self.create_api_request_body(comment)
        try:
            result = self.caller.make_akismet_call(self.api_key, body)
        except (requests.RequestException, IOError):
            log.exception('Akismet call failed', 'comments')
            messages['comment.validator.akismetMessage.error'] = None
            return SPAM

        if result == BLATANT_SPAM:
            if self.delete_blatant_spam:
                return BLATANT_SPAM
            messages['comment.validator.akismetMessage.blatantNoDelete'] = \
                None
            return SPAM
        elif result == SPAM:
            messages['comment.validator.akismetMessage.spam'] = None
            return SPAM
        return NOT_SPAM


class CommentValidationManager(object):
    """Runs a list of validators over a comment."""

    def __init__(self, validators=None):
        self.validators = list(validators or ())

    @classmethod
    def from_config(cls, cfg):
        """Create the validators the configuration enables."""
        validators = [
            ExcessLinksCommentValidator(cfg['comment_max_links']),
            ExcessSizeCommentValidator(cfg['comment_max_size'])
        ]
        if cfg['akismet_api_key']:
            validators.append(AkismetCommentValidator(
                cfg['akismet_api_key'], cfg['delete_blatant_spam']))
        return cls(validators)

    def validate(self, comment, messages=None):
        """Return the worst result of all validators."""
        if messages is None:
            messages = {}
        results = [validator.validate(comment, messages)
                   for validator in self.validators]
        rv = worst_result(results)
        if rv != NOT_SPAM:
            log.info('Comment by %r on %r is %s' % (
                comment.name,
                comment.entry.anchor,
                RESULT_NAMES[rv]
            ), 'comments')
        return rv
