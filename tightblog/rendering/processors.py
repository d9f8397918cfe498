# -*- coding: utf-8 -*-
"""
    tightblog.rendering.processors
    ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

    The views that serve weblog pages, previews, media files and take
    comments.  They are registered like every other view but do not use
    the core templates, the pages come from the weblog's theme.

    :copyright: (c) 2009 by the TightBlog Team, see AUTHORS for more details.
    :license: BSD, see LICENSE for more details.
"""
from datetime import timezone

from werkzeug.exceptions import HTTPException, NotFound

from tightblog.application import Response
from tightblog.cache import CachedContent
from tightblog.database import db
from tightblog.i18n import _
from tightblog.models import MediaFile, WeblogEntryComment, \
     COMMENT_APPROVED, COMMENT_PENDING, COMMENT_SPAM
from tightblog.privileges import assert_weblog_role, EDIT_DRAFT
from tightblog.utils import log
from tightblog.utils.exceptions import TightBlogException
from tightblog.rendering.requests import WeblogPageRequest, \
     WeblogPreviewRequest, WeblogMediaRequest, InvalidRequest
from tightblog.rendering.models import get_model_map
from tightblog.rendering.comments import CommentForm, \
     CommentValidationManager, MESSAGES, SPAM, BLATANT_SPAM
from tightblog.rendering.templates import RendererManager, \
     WeblogPreviewCopy, get_weblog_theme, WEBLOG, PERMALINK, TAGSINDEX


def _as_http_date(value):
    """Naive UTC datetimes with the precision of the HTTP date headers."""
    return value.replace(microsecond=0, tzinfo=timezone.utc)


def not_modified(request, last_modified):
    """True if the client's copy is still fresh."""
    since = request.if_modified_since
    return since is not None and since >= _as_http_date(last_modified)


def _not_modified_response(last_modified):
    response = Response(status=304)
    response.last_modified = _as_http_date(last_modified)
    return response


def _content_response(content, last_modified):
    response = Response(content.content, mimetype=content.content_type)
    response.last_modified = _as_http_date(last_modified)
    response.headers['Cache-Control'] = 'no-cache'
    return response


def _parse(request_class, request, handle, path_info):
    try:
        return request_class(request, handle, path_info)
    except InvalidRequest as e:
        log.debug('Invalid request for %s: %s' % (request.path, e),
                  'rendering')
        raise NotFound()


def get_last_modified(app, weblog):
    """The last change of the weblog.  Pages of the site weblog change
    with every site wide change as well.
    """
    if weblog.is_site_weblog:
        return max(weblog.last_modified, app.last_sitewide_change)
    return weblog.last_modified


def find_page_template(page_request):
    """Look up the template for a page request.  Returns `None` if there is
    no template for the request.
    """
    weblog = page_request.weblog
    theme = get_weblog_theme(weblog)
    if page_request.custom_page_name is not None:
        template = page_request.weblog_page
        if template is None or not template.component_type.accessible:
            return None
        return template
    if page_request.context == 'tags' and not page_request.tags:
        return theme.get_template_by_role(TAGSINDEX.name)
    if page_request.weblog_anchor is not None:
        entry = page_request.weblog_entry
        if entry is None or not entry.is_published:
            return None
        template = theme.get_template_by_role(PERMALINK.name)
        if template is not None:
            return template
    return theme.get_template_by_role(WEBLOG.name)


def render_weblog_page(request, page_request, template, model_set,
                       comment_form=None):
    """Render the template of a weblog page into a `CachedContent`."""
    init_data = {
        'parsed_request':       page_request,
        'request_parameters':   request.args,
        'comment_form':         comment_form
    }
    model_map = get_model_map(model_set, init_data)
    if page_request.weblog.is_site_weblog:
        get_model_map('siteModelSet', init_data, model_map)
    renderer = RendererManager(request.app).get_renderer(
        template, page_request.device_type)
    return CachedContent(renderer.render(model_map),
                         template.component_type.content_type)


def process_page(request, page_request, comment_form=None):
    """Serve a weblog page.  Used for the page requests and after a
    comment was posted.
    """
    app = request.app
    cache = app.caches['weblogpage']
    weblog = page_request.weblog
    if weblog is None or not weblog.visible:
        raise NotFound()

    cache.increment_incoming_requests()
    last_modified = get_last_modified(app, weblog)

    cache_key = None
    if not page_request.is_logged_in and comment_form is None:
        if not_modified(request, last_modified):
            cache.increment_requests_handled_by_304()
            return _not_modified_response(last_modified)
        cache_key = page_request.cache_key
        content = cache.get(cache_key, last_modified)
        if content is not None:
            return _content_response(content, last_modified)

    template = find_page_template(page_request)
    if template is None:
        raise NotFound()

    try:
        content = render_weblog_page(request, page_request, template,
                                     'pageModelSet', comment_form)
    except HTTPException:
        raise
    except TightBlogException as e:
        log.error('Rendering %r failed: %s' % (page_request, e), 'rendering')
        raise NotFound()
    except Exception:
        log.exception('Rendering %r failed' % page_request, 'rendering')
        raise NotFound()

    if cache_key is not None:
        cache.put(cache_key, content)
    return _content_response(content, last_modified)


def do_page(request, handle, path_info=None):
    """The view for weblog pages."""
    page_request = _parse(WeblogPageRequest, request, handle, path_info)
    return process_page(request, page_request)


def do_comment(request, handle, path_info=None):
    """Take a comment for an entry and show the permalink page again with
    the outcome of the posting.
    """
    page_request = _parse(WeblogPageRequest, request, handle, path_info)
    weblog = page_request.weblog
    if weblog is None or not weblog.visible or \
       page_request.weblog_anchor is None:
        raise NotFound()
    entry = page_request.weblog_entry
    if entry is None or not entry.is_published:
        raise NotFound()

    form = CommentForm.from_request(request)
    if not entry.comments_still_allowed:
        form.set_error(_('Comments are closed for this entry.'))
        return process_page(request, page_request, form)

    errors = form.validate()
    if errors:
        form.set_error(errors[0])
        return process_page(request, page_request, form)

    # the comment must not reach the database before the verdict is known
    with db.session.no_autoflush:
        comment = WeblogEntryComment(entry, form.name, form.content,
                                     form.email, form.url,
                                     request.remote_addr,
                                     request.user_agent.string,
                                     request.referrer)
        messages = {}
        result = CommentValidationManager.from_config(request.app.cfg) \
                                         .validate(comment, messages)

        if result == BLATANT_SPAM:
            # discard, the commenter gets the usual moderation notice
            comment.entry = None
            if comment in db.session:
                db.session.expunge(comment)
            log.info('Discarded blatant spam on %s' % entry.anchor,
                     'comments')
            form.set_message(_('Your comment was submitted for moderation.'))
            return process_page(request, page_request, form)

    policy = request.app.cfg['comment_policy']
    if weblog.allow_comments == 'MUSTMODERATE':
        policy = 'MUSTMODERATE'
    if result == SPAM:
        comment.status = COMMENT_SPAM
    elif policy == 'MUSTMODERATE':
        comment.status = COMMENT_PENDING
    else:
        comment.status = COMMENT_APPROVED

    if comment.status == COMMENT_APPROVED:
        weblog.mark_modified()
        form = CommentForm()
        form.set_message(_('Your comment was accepted.'))
    else:
        form.set_message(_('Your comment was submitted for moderation.'))
        for key in messages:
            if key in MESSAGES:
                form.set_message(MESSAGES[key])
                break
    db.session.add(comment)
    db.commit()
    return process_page(request, page_request, form)


def do_preview(request, handle, path_info=None):
    """Render a page of a weblog including drafts, optionally with another
    shared theme.  Requires at least the draft editor role.
    """
    preview_request = _parse(WeblogPreviewRequest, request, handle, path_info)
    weblog = preview_request.weblog
    if weblog is None:
        raise NotFound()
    assert_weblog_role(weblog, EDIT_DRAFT, request.user)

    shared_theme = preview_request.shared_theme
    if shared_theme is not None and shared_theme.enabled:
        weblog = WeblogPreviewCopy(weblog, shared_theme.name)
        preview_request.replace_weblog(weblog)

    theme = get_weblog_theme(weblog)
    template = None
    if preview_request.context == 'page':
        template = preview_request.weblog_page
    elif preview_request.context == 'tags' and not preview_request.tags:
        template = theme.get_template_by_role(TAGSINDEX.name)
        if template is None:
            raise NotFound()
    elif preview_request.weblog_anchor is not None:
        template = theme.get_template_by_role(PERMALINK.name)
    if template is None:
        template = theme.get_template_by_role(WEBLOG.name)
    if template is None:
        raise NotFound()

    init_data = {
        'parsed_request':       preview_request,
        'request_parameters':   request.args
    }
    try:
        model_map = get_model_map('previewModelSet', init_data)
        if weblog.is_site_weblog:
            get_model_map('siteModelSet', init_data, model_map)
    except TightBlogException:
        return request.app.handle_server_error(request)

    try:
        renderer = RendererManager(request.app).get_renderer(
            template, preview_request.device_type)
    except TightBlogException as e:
        log.error('No renderer for %r: %s' % (template, e), 'rendering')
        raise NotFound()
    try:
        content = renderer.render(model_map)
    except Exception:
        log.exception('Rendering the preview of %r failed' % template,
                      'rendering')
        raise NotFound()
    return Response(content, mimetype=template.component_type.content_type)


def do_media_file(request, handle, path_info=None):
    """Serve a media file or its thumbnail."""
    media_request = WeblogMediaRequest(request, handle, path_info)
    weblog = media_request.weblog
    if weblog is None or not weblog.visible:
        raise NotFound()
    media_file_id = media_request.media_file_id
    if media_file_id is None:
        raise NotFound()
    media_file = db.session.get(MediaFile, media_file_id)
    if media_file is None or media_file.weblog_id != weblog.id:
        raise NotFound()

    cache = request.app.caches['weblogmedia']
    cache.increment_incoming_requests()
    if not_modified(request, media_file.last_updated):
        cache.increment_requests_handled_by_304()
        return _not_modified_response(media_file.last_updated)

    if media_request.thumbnail:
        filename = media_file.thumbnail_path
        content_type = 'image/png'
    else:
        filename = media_file.content_path
        content_type = media_file.content_type
    try:
        with open(filename, 'rb') as f:
            data = f.read()
    except IOError:
        log.debug('Media file %s not readable' % filename, 'rendering')
        raise NotFound()

    response = Response(data, mimetype=content_type)
    response.headers['Cache-Control'] = 'no-cache'
    response.last_modified = _as_http_date(media_file.last_updated)
    return response
