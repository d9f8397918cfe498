# -*- coding: utf-8 -*-
"""
    tightblog.utils.forms
    ~~~~~~~~~~~~~~~~~~~~~

    Typed fields.  A field converts a primitive (usually a string coming
    from a configuration file or a request) into a python value and back.
    Fields are callable, the call converts and validates the value:

    >>> field = IntegerField(min_value=0)
    >>> field('42')
    42
    >>> field.to_primitive(42)
    '42'

    :copyright: (c) 2009 by the TightBlog Team, see AUTHORS for more details.
    :license: BSD, see LICENSE for more details.
"""
from copy import copy

from tightblog.i18n import gettext, ngettext
from tightblog.utils.validators import ValidationError


class Field(object):
    """Abstract field base class."""

    def __init__(self, default=None, validators=None, help_text=None):
        self.default = default
        self.validators = list(validators or ())
        self.help_text = help_text

    def __call__(self, value, form=None):
        value = self.convert(value)
        for validator in self.validators:
            validator(form, value)
        return value

    def convert(self, value):
        """This can be overridden by subclasses and performs the value
        conversion.
        """
        return str(value)

    def to_primitive(self, value):
        """Convert a value into a string."""
        if value is None:
            return ''
        return str(value)

    def get_default(self):
        """Return the default value.  Callable defaults are called."""
        if callable(self.default):
            return self.default()
        return self.default

    def __copy__(self):
        rv = object.__new__(self.__class__)
        for key, value in self.__dict__.items():
            rv.__dict__[key] = copy(value)
        return rv

    def __repr__(self):
        return '<%s default=%r>' % (self.__class__.__name__, self.default)


class TextField(Field):
    """Field for strings.

    >>> field = TextField(required=True, max_length=5)
    >>> field('foo')
    'foo'
    >>> field('')
    Traceback (most recent call last):
      ...
    tightblog.utils.validators.ValidationError: This field is required.
    """

    def __init__(self, required=False, min_length=None, max_length=None,
                 **kwargs):
        kwargs.setdefault('default', '')
        Field.__init__(self, **kwargs)
        self.required = required
        self.min_length = min_length
        self.max_length = max_length

    def convert(self, value):
        value = '' if value is None else str(value)
        if self.required and not value:
            raise ValidationError(gettext('This field is required.'))
        if self.min_length is not None and len(value) < self.min_length:
            raise ValidationError(
                ngettext('Please enter at least %d character.',
                         'Please enter at least %d characters.',
                         self.min_length) % self.min_length
            )
        if self.max_length is not None and len(value) > self.max_length:
            raise ValidationError(
                ngettext('Please enter no more than %d character.',
                         'Please enter no more than %d characters.',
                         self.max_length) % self.max_length
            )
        return value


class IntegerField(Field):
    """Field for integers.

    >>> field = IntegerField(min_value=0, max_value=99)
    >>> field('13')
    13
    >>> field('thirteen')
    Traceback (most recent call last):
      ...
    tightblog.utils.validators.ValidationError: Please enter a whole number.
    """

    def __init__(self, required=False, min_value=None, max_value=None,
                 **kwargs):
        Field.__init__(self, **kwargs)
        self.required = required
        self.min_value = min_value
        self.max_value = max_value

    def convert(self, value):
        if value is None or value == '':
            if self.required:
                raise ValidationError(gettext('This field is required.'))
            return None
        try:
            value = int(value)
        except (TypeError, ValueError):
            raise ValidationError(gettext('Please enter a whole number.'))

        if self.min_value is not None and value < self.min_value:
            raise ValidationError(
                gettext('Ensure this value is greater than or equal to '
                        '%s.') % self.min_value
            )
        if self.max_value is not None and value > self.max_value:
            raise ValidationError(
                gettext('Ensure this value is less than or equal to '
                        '%s.') % self.max_value
            )
        return value


class BooleanField(Field):
    """Field for boolean values.  Unset booleans are false.

    >>> field = BooleanField()
    >>> field('yes'), field('0'), field('')
    (True, False, False)
    >>> field.get_default()
    False
    """

    true_values = frozenset(['1', 'true', 'yes', 'on'])

    def __init__(self, **kwargs):
        kwargs.setdefault('default', False)
        Field.__init__(self, **kwargs)

    def convert(self, value):
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() in self.true_values

    def to_primitive(self, value):
        return value and 'True' or 'False'


class ChoiceField(Field):
    """A field that only accepts one of the given choices.  The choices
    are either plain values or ``(value, label)`` tuples.

    >>> field = ChoiceField(choices=['NONE', 'YES'])
    >>> field('YES')
    'YES'
    >>> field('MAYBE')
    Traceback (most recent call last):
      ...
    tightblog.utils.validators.ValidationError: Please enter a valid choice.
    """

    def __init__(self, choices=None, **kwargs):
        Field.__init__(self, **kwargs)
        self.choices = choices or []

    def get_choices(self):
        return [isinstance(x, tuple) and x[0] or x for x in self.choices]

    def convert(self, value):
        choices = self.get_choices()
        for choice in choices:
            if str(choice) == str(value):
                return choice
        raise ValidationError(gettext('Please enter a valid choice.'))


class CommaSeparated(Field):
    """Holds a list of values separated by commas.

    >>> field = CommaSeparated(TextField())
    >>> field('foo, bar,,baz')
    ['foo', 'bar', 'baz']
    >>> field.to_primitive(['foo', 'bar'])
    'foo, bar'
    """

    def __init__(self, field, **kwargs):
        kwargs.setdefault('default', list)
        Field.__init__(self, **kwargs)
        self.field = field

    def convert(self, value):
        if isinstance(value, (list, tuple)):
            items = value
        else:
            items = str(value).split(',')
        return [self.field(item.strip()) for item in items if item.strip()]

    def to_primitive(self, value):
        return ', '.join(self.field.to_primitive(x) for x in value)
