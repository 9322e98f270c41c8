"""
Operations exposed to request handlers.

    from weblog_engine import services

    services.resolve_permalink(web_log_id, "2024/hello.html")
    services.list_categories_sorted(web_log_id)
    services.get_posts_page(web_log_id, PostFilter.published(), 1, 10)
    services.apply_content_edit(post, PostEdit(...), now)
    services.save_tag_map(TagMap(web_log_id=web_log_id, tag="c#", url_value="c-sharp"))

Each function uses the configured backend unless ``data`` is passed.
"""
import logging
from dataclasses import replace

from django.core.exceptions import ValidationError
from django.utils import timezone

from .categories import CategoryStore
from .conf import get_data_backend
from .entities import Page, Post, new_id
from .pager import PostPager
from .permalinks import NotFound, PermalinkResolver
from .revisions import (
    PageEdit,
    PostEdit,
    apply_page_edit,
    apply_post_edit,
    is_default_page,
)

logger = logging.getLogger(__name__)


def resolve_permalink(web_log_id, path, data=None):
    data = data or get_data_backend()
    web_log = data.web_log_by_id(web_log_id)
    if web_log is None:
        return NotFound(path)
    return PermalinkResolver(data).resolve(web_log, path)


def list_categories_sorted(web_log_id, data=None):
    return CategoryStore(data or get_data_backend()).list_sorted(web_log_id)


def get_posts_page(web_log_id, post_filter, page_nbr, page_size, data=None):
    return PostPager(data or get_data_backend()).get_posts_page(
        web_log_id, post_filter, page_nbr, page_size
    )


def save_tag_map(tag_map, data=None):
    """
    Store a tag map, lower-cased; returns what was stored.

    A URL value can map to only one tag per web log.
    """
    data = data or get_data_backend()
    tag_map = replace(tag_map, tag=tag_map.tag.strip().lower(), url_value=tag_map.url_value.strip().lower())
    other = data.tag_map_by_url_value(tag_map.web_log_id, tag_map.url_value)
    if other is not None and other.id != tag_map.id:
        raise ValidationError(
            "The URL value %(url_value)s is already mapped to %(tag)s.",
            code="duplicate_url_value",
            params={"url_value": tag_map.url_value, "tag": other.tag},
        )
    if tag_map.is_new:
        tag_map = replace(tag_map, id=new_id())
        data.add_tag_map(tag_map)
    else:
        data.update_tag_map(tag_map)
    logger.info("Mapped tag %r to %r in web log %s", tag_map.tag, tag_map.url_value, tag_map.web_log_id)
    return tag_map


def apply_content_edit(existing, fields, now=None):
    """Apply submitted form fields to a post or page; nothing is stored."""
    now = now or timezone.now()
    if isinstance(existing, Post) and isinstance(fields, PostEdit):
        return apply_post_edit(existing, fields, now)
    if isinstance(existing, Page) and isinstance(fields, PageEdit):
        return apply_page_edit(existing, fields, now)
    raise TypeError(
        f"Cannot apply {type(fields).__name__} to {type(existing).__name__}"
    )


class ContentService:
    """Apply and store post and page edits."""

    def __init__(self, data=None):
        self.data = data or get_data_backend()

    def check_permalink(self, content):
        """
        Raise ValidationError if another post or page already uses the permalink.

        Prior permalinks do not count; only current ones are reserved.
        """
        web_log_id = content.web_log_id
        post = self.data.post_by_permalink(web_log_id, content.permalink, include_drafts=True)
        page = self.data.page_by_permalink(web_log_id, content.permalink)
        for other in (post, page):
            if other is not None and not (type(other) is type(content) and other.id == content.id):
                raise ValidationError(
                    "The permalink %(permalink)s is already in use.",
                    code="duplicate_permalink",
                    params={"permalink": content.permalink},
                )

    def save_post(self, post, edit, now=None):
        updated = apply_content_edit(post, edit, now)
        self.check_permalink(updated)
        if updated.is_new:
            updated = replace(updated, id=new_id())
            self.data.add_post(updated)
            logger.info("Added post %s at %r in web log %s", updated.id, updated.permalink, updated.web_log_id)
        else:
            self.data.update_post(updated)
            logger.info("Updated post %s at %r in web log %s", updated.id, updated.permalink, updated.web_log_id)
        return updated

    def save_page(self, page, edit, now=None):
        """Store a page edit; returns ``(page, is_default)``."""
        updated = apply_content_edit(page, edit, now)
        self.check_permalink(updated)
        if updated.is_new:
            updated = replace(updated, id=new_id())
            self.data.add_page(updated)
            logger.info("Added page %s at %r in web log %s", updated.id, updated.permalink, updated.web_log_id)
        else:
            self.data.update_page(updated)
            logger.info("Updated page %s at %r in web log %s", updated.id, updated.permalink, updated.web_log_id)
        return updated, is_default_page(updated, self.data.web_log_by_id(updated.web_log_id))
