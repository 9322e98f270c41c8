"""
Revision and permalink history for django-weblog-engine.

Applying an edit never mutates the stored entity: each function returns a
new post or page carrying the submitted fields, a new revision when the
text changed, and the old permalink in its history when the permalink
changed.
"""
from dataclasses import dataclass, field, replace
from typing import Iterable, Optional

import markdown

from .conf import engine_settings
from .entities import PostStatus, Revision, SourceFormat


@dataclass
class PostEdit:
    """Fields submitted from the post edit form."""

    title: str
    permalink: str
    text: str
    # None means WEBLOG_ENGINE["DEFAULT_SOURCE_FORMAT"]
    source_format: Optional[SourceFormat] = None
    # Comma-separated, as typed
    tags: str = ""
    category_ids: Iterable[str] = field(default_factory=list)
    do_publish: bool = False


@dataclass
class PageEdit:
    """Fields submitted from the page edit form."""

    title: str
    permalink: str
    text: str
    source_format: Optional[SourceFormat] = None
    is_in_page_list: bool = False


def source_format_of(edit):
    return SourceFormat(edit.source_format or engine_settings.DEFAULT_SOURCE_FORMAT)


def render_text(text, source_format):
    """HTML for the stored ``text`` field."""
    if SourceFormat(source_format) == SourceFormat.MARKDOWN:
        return markdown.markdown(text, extensions=engine_settings.MARKDOWN_EXTENSIONS)
    return text


def normalize_tags(tags):
    """Split, trim, lower-case and sort a comma-separated tag string."""
    return sorted(
        {tag.strip().lower() for tag in tags.split(",") if tag.strip()}
    )


def track_revision(revisions, revision):
    """Prepend ``revision`` unless its text matches the latest one."""
    if revisions and revisions[0].text == revision.text:
        return list(revisions)
    return [revision] + list(revisions)


def track_permalink(current, submitted, prior_permalinks):
    """Prepend the current permalink to the history if it is being replaced."""
    if current and current != submitted:
        return [current] + list(prior_permalinks)
    return list(prior_permalinks)


def apply_post_edit(post, edit, now):
    """Return ``post`` updated from ``edit`` as of ``now``."""
    source_format = source_format_of(edit)
    revision = Revision(as_of=now, source_format=source_format, text=edit.text)
    publishing = edit.do_publish and not post.is_published
    return replace(
        post,
        title=edit.title,
        permalink=edit.permalink,
        prior_permalinks=track_permalink(post.permalink, edit.permalink, post.prior_permalinks),
        status=PostStatus.PUBLISHED if publishing else post.status,
        published_on=now if publishing else post.published_on,
        updated_on=now,
        text=render_text(edit.text, source_format),
        tags=normalize_tags(edit.tags),
        category_ids=set(edit.category_ids),
        revisions=track_revision(post.revisions, revision),
    )


def apply_page_edit(page, edit, now):
    """Return ``page`` updated from ``edit`` as of ``now``."""
    source_format = source_format_of(edit)
    revision = Revision(as_of=now, source_format=source_format, text=edit.text)
    return replace(
        page,
        title=edit.title,
        permalink=edit.permalink,
        prior_permalinks=track_permalink(page.permalink, edit.permalink, page.prior_permalinks),
        published_on=page.published_on or now,
        updated_on=now,
        is_in_page_list=edit.is_in_page_list,
        text=render_text(edit.text, source_format),
        revisions=track_revision(page.revisions, revision),
    )


def is_default_page(page, web_log):
    """Whether ``page`` is the web log's home page."""
    return web_log is not None and not page.is_new and page.id == web_log.default_page
