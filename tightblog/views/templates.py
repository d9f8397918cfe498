# -*- coding: utf-8 -*-
"""
    tightblog.views.templates
    ~~~~~~~~~~~~~~~~~~~~~~~~~

    Managing the database templates of a weblog.  Only weblog owners
    may touch templates.

    :copyright: (c) 2009 by the TightBlog Team, see AUTHORS for more details.
    :license: BSD, see LICENSE for more details.
"""
from werkzeug.exceptions import NotFound, Forbidden

from tightblog.database import db
from tightblog.i18n import _
from tightblog.models import Weblog, WeblogTemplate, DEVICE_STANDARD, \
     DEVICE_MOBILE
from tightblog.privileges import require_global_role, check_weblog_role, \
     BLOGGER, OWNER
from tightblog.rendering.templates import ComponentType, COMPONENT_TYPES, \
     NEW_TEMPLATE_CONTENT, WEBLOG
from tightblog.utils import log
from tightblog.utils.http import json_response, json_error, text_response


def _get_owned_weblog(request, weblog_id):
    weblog = db.session.get(Weblog, weblog_id)
    if weblog is None:
        raise NotFound()
    if not check_weblog_role(request.user, weblog, OWNER):
        raise Forbidden()
    return weblog


@require_global_role(BLOGGER)
def list_templates(request, weblog_id):
    """The database templates of the weblog and the roles a new template
    can still have.  Templates of the shared theme are not listed, a
    database template overrides them.
    """
    weblog = _get_owned_weblog(request, weblog_id)
    templates = WeblogTemplate.query.for_weblog(weblog).all()
    taken = set(x.role for x in templates)
    available = [x for x in COMPONENT_TYPES
                 if not (x.singleton and x.name in taken)]
    return json_response({
        'templates':        [x.to_dict() for x in templates],
        'available_roles':  dict((x.name, x.readable_name)
                                 for x in available)
    })


@require_global_role(BLOGGER)
def add(request, weblog_id):
    """Add a template with a standard and a mobile rendition."""
    weblog = _get_owned_weblog(request, weblog_id)
    name = (request.values.get('name') or '').strip()
    role = ComponentType.get(request.values.get('role') or '')
    if role is WEBLOG:
        name = WEBLOG.name
    if not name:
        return json_error(_('A template name is required.'))
    if len(name) > 255:
        return json_error(_('The template name is too long.'))
    if role is None:
        return json_error(_('A template role is required.'))
    if WeblogTemplate.query.by_name(weblog, name) is not None:
        return json_error(_('A template with the name %s already exists.')
                          % name)

    template = WeblogTemplate(weblog, name, role.name,
                              request.values.get('description') or '')
    if not role.singleton:
        template.relative_path = name
    template.set_template(NEW_TEMPLATE_CONTENT, DEVICE_STANDARD)
    template.set_template(NEW_TEMPLATE_CONTENT, DEVICE_MOBILE)
    db.session.add(template)
    weblog.mark_modified()
    db.commit()
    log.info('Template %s added to %s' % (name, weblog.handle), 'templates')
    return json_response(template.to_dict())


@require_global_role(BLOGGER)
def delete(request, template_id):
    template = db.session.get(WeblogTemplate, template_id)
    if template is None:
        raise NotFound()
    weblog = template.weblog
    if not check_weblog_role(request.user, weblog, OWNER):
        raise Forbidden()
    db.delete(template)
    weblog.mark_modified()
    db.commit()
    log.info('Template %s removed from %s' % (template.name, weblog.handle),
             'templates')
    return text_response('')
