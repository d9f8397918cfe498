# -*- coding: utf-8 -*-
"""
    tightblog.utils.validators
    ~~~~~~~~~~~~~~~~~~~~~~~~~~

    This module implements various functions for validation of miscellaneous
    things, e.g. urls.  A validator is created by calling one of the
    ``is_*`` factories, the returned function is called with the form (or
    `None`) and the value and raises a `ValidationError`.

    :copyright: (c) 2009 by the TightBlog Team, see AUTHORS for more details.
    :license: BSD, see LICENSE for more details.
"""
import re
from urllib.parse import urlparse

from tightblog.i18n import lazy_gettext


_mail_re = re.compile(r'''(?xi)
    (?:[a-z0-9!#$%&'*+/=?^_`{|}~-]+
        (?:\.[a-z0-9!#$%&'*+/=?^_`{|}~-]+)*|
        "(?:[\x01-\x08\x0b\x0c\x0e-\x1f\x21\x23-\x5b\x5d-\x7f]|
          \\[\x01-\x09\x0b\x0c\x0e-\x7f])*")@.
''')

#: passwords need a digit, a lower and an upper case letter, one of the
#: special characters and no whitespace.
_password_re = re.compile(r'^(?=.*[0-9])(?=.*[a-z])(?=.*[A-Z])'
                          r'(?=.*[@#$%^&+=])(?=\S+$).{8,20}$')


class ValidationError(ValueError):
    """Exception raised when invalid data is encountered."""

    def __init__(self, message):
        if not isinstance(message, (list, tuple)):
            message = [message]
        # this also evaluates lazy translations in there
        messages = [str(x) for x in message]
        ValueError.__init__(self, messages[0])
        self.messages = messages

    @property
    def message(self):
        return self.messages[0]

    def unpack(self, key=None):
        return {key: self.messages}


def check(validator, value, *args, **kwargs):
    """Call a validator and return True if it's valid, False otherwise.
    The first argument is the validator, the second a value.  All other
    arguments are forwarded to the validator function.

    >>> check(is_valid_email, 'foo@bar.com')
    True
    """
    try:
        validator(*args, **kwargs)(None, value)
    except ValidationError:
        return False
    return True


def is_valid_email(message=None):
    """Check if the string passed is a valid mail address.

    >>> check(is_valid_email, 'somebody@example.com')
    True
    >>> check(is_valid_email, 'somebody AT example DOT com')
    False
    >>> check(is_valid_email, 'some random string')
    False

    Because e-mail validation is painfully complex we just check the first
    part of the email if it looks okay (comments are not handled!) and ignore
    the second.
    """
    if message is None:
        message = lazy_gettext('You have to enter a valid e-mail address.')
    def validator(form, value):
        if len(value) > 250 or _mail_re.match(value) is None:
            raise ValidationError(message)
    return validator


def is_valid_url(message=None):
    """Check if the string passed is a valid URL.  We also blacklist some
    url schemes like javascript for security reasons.

    >>> check(is_valid_url, 'http://example.org/')
    True
    >>> check(is_valid_url, 'example.org/archive')
    False
    >>> check(is_valid_url, 'javascript:alert("boom");')
    False
    """
    if message is None:
        message = lazy_gettext('You have to enter a valid URL.')
    def validator(form, value):
        protocol = urlparse(value)[0]
        if not protocol or protocol == 'javascript':
            raise ValidationError(message)
    return validator


def is_valid_password(message=None):
    """Check the password complexity rules.

    >>> check(is_valid_password, 'Secret#42')
    True
    >>> check(is_valid_password, 'secret42')
    False
    >>> check(is_valid_password, 'Sec ret#42')
    False
    """
    if message is None:
        message = lazy_gettext('Password must be between 8 and 20 characters '
                               'and contain a digit, a lower and an upper '
                               'case letter and one of @#$%^&+=')
    def validator(form, value):
        if _password_re.match(value or '') is None:
            raise ValidationError(message)
    return validator
