"""
Tests for revision and permalink history on content edits.
"""
from datetime import datetime, timedelta, timezone

import pytest

from weblog_engine.entities import Page, Post, PostStatus, Revision, SourceFormat, WebLog
from weblog_engine.revisions import (
    PageEdit,
    PostEdit,
    apply_page_edit,
    apply_post_edit,
    is_default_page,
    normalize_tags,
    render_text,
    track_permalink,
    track_revision,
)

NOW = datetime(2024, 3, 1, 12, tzinfo=timezone.utc)
LATER = NOW + timedelta(hours=1)


@pytest.fixture
def draft():
    return Post(web_log_id="wl1", author_id="author")


def edit(**overrides):
    fields = {"title": "Hello", "permalink": "2024/hello.html", "text": "<p>Hi</p>"}
    fields.update(overrides)
    return PostEdit(**fields)


class TestTrackRevision:
    """Tests for track_revision."""

    def test_first_revision(self):
        revision = Revision(NOW, SourceFormat.HTML, "a")
        assert track_revision([], revision) == [revision]

    def test_changed_text_prepended(self):
        old = Revision(NOW, SourceFormat.HTML, "a")
        new = Revision(LATER, SourceFormat.HTML, "b")
        assert track_revision([old], new) == [new, old]

    def test_same_text_discarded(self):
        old = Revision(NOW, SourceFormat.HTML, "a")
        assert track_revision([old], Revision(LATER, SourceFormat.MARKDOWN, "a")) == [old]

    def test_only_latest_compared(self):
        """Going back to an older text is a new revision."""
        history = [Revision(LATER, SourceFormat.HTML, "b"), Revision(NOW, SourceFormat.HTML, "a")]
        result = track_revision(history, Revision(LATER, SourceFormat.HTML, "a"))
        assert [r.text for r in result] == ["a", "b", "a"]


class TestTrackPermalink:
    """Tests for track_permalink."""

    def test_unchanged(self):
        assert track_permalink("a", "a", ["old"]) == ["old"]

    def test_changed(self):
        assert track_permalink("b", "c", ["a"]) == ["b", "a"]

    def test_first_permalink_not_recorded(self):
        assert track_permalink("", "a", []) == []

    def test_history_never_deduplicated(self):
        assert track_permalink("a", "b", ["b", "a"]) == ["a", "b", "a"]


class TestApplyPostEdit:
    """Tests for apply_post_edit."""

    def test_first_save(self, draft):
        post = apply_post_edit(draft, edit(), NOW)
        assert post.title == "Hello"
        assert post.permalink == "2024/hello.html"
        assert post.prior_permalinks == []
        assert post.updated_on == NOW
        assert post.revisions == [Revision(NOW, SourceFormat.HTML, "<p>Hi</p>")]
        assert post.status == PostStatus.DRAFT
        assert post.published_on is None

    def test_original_untouched(self, draft):
        apply_post_edit(draft, edit(), NOW)
        assert draft.revisions == []
        assert draft.title == ""

    def test_idempotent_save(self, draft):
        once = apply_post_edit(draft, edit(), NOW)
        twice = apply_post_edit(once, edit(), LATER)
        assert len(twice.revisions) == 1
        assert twice.prior_permalinks == []
        assert twice.updated_on == LATER

    def test_permalink_change(self, draft):
        post = apply_post_edit(draft, edit(permalink="a"), NOW)
        post = apply_post_edit(post, edit(permalink="b"), LATER)
        post = apply_post_edit(post, edit(permalink="c"), LATER)
        assert post.permalink == "c"
        assert post.prior_permalinks == ["b", "a"]

    def test_publish(self, draft):
        post = apply_post_edit(draft, edit(do_publish=True), NOW)
        assert post.status == PostStatus.PUBLISHED
        assert post.published_on == NOW

    def test_republish_keeps_publish_time(self, draft):
        post = apply_post_edit(draft, edit(do_publish=True), NOW)
        post = apply_post_edit(post, edit(text="<p>Fixed</p>", do_publish=True), LATER)
        assert post.published_on == NOW
        assert post.updated_on == LATER
        assert len(post.revisions) == 2

    def test_tags_and_categories(self, draft):
        post = apply_post_edit(draft, edit(tags=" Python, django ,, python,Web ", category_ids=["c1", "c2"]), NOW)
        assert post.tags == ["django", "python", "web"]
        assert post.category_ids == {"c1", "c2"}

    def test_markdown_rendered(self, draft):
        post = apply_post_edit(draft, edit(text="*hi*", source_format=SourceFormat.MARKDOWN), NOW)
        assert post.text == "<p><em>hi</em></p>"
        assert post.revisions[0].text == "*hi*"
        assert post.revisions[0].source_format == SourceFormat.MARKDOWN

    def test_default_source_format(self, draft, settings):
        settings.WEBLOG_ENGINE = {"DEFAULT_SOURCE_FORMAT": "Markdown"}
        post = apply_post_edit(draft, edit(text="*hi*"), NOW)
        assert post.revisions[0].source_format == SourceFormat.MARKDOWN
        assert post.text == "<p><em>hi</em></p>"


class TestApplyPageEdit:
    """Tests for apply_page_edit."""

    def test_first_save(self):
        page = apply_page_edit(Page(web_log_id="wl1"), PageEdit("About", "about", "<p>Me</p>", is_in_page_list=True), NOW)
        assert page.published_on == NOW
        assert page.updated_on == NOW
        assert page.is_in_page_list is True
        assert len(page.revisions) == 1

    def test_edit_keeps_publish_time(self):
        page = apply_page_edit(Page(web_log_id="wl1"), PageEdit("About", "about", "<p>Me</p>"), NOW)
        page = apply_page_edit(page, PageEdit("About", "about-me", "<p>Me</p>"), LATER)
        assert page.published_on == NOW
        assert page.updated_on == LATER
        assert page.prior_permalinks == ["about"]
        assert len(page.revisions) == 1

    def test_is_default_page(self):
        web_log = WebLog(id="wl1", name="Log", default_page="pg1")
        assert is_default_page(Page(id="pg1", web_log_id="wl1"), web_log)
        assert not is_default_page(Page(id="pg2", web_log_id="wl1"), web_log)
        assert not is_default_page(Page(web_log_id="wl1"), WebLog(id="wl1", name="Log", default_page="new"))


class TestHelpers:
    def test_normalize_tags(self):
        assert normalize_tags("") == []
        assert normalize_tags("B, a, b") == ["a", "b"]

    def test_render_html_untouched(self):
        assert render_text("<b>x</b>", SourceFormat.HTML) == "<b>x</b>"
