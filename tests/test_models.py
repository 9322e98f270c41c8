"""
Tests for django-weblog-engine models.
"""
import pytest
from django.core.exceptions import ValidationError
from django.db import IntegrityError

from weblog_engine import entities
from weblog_engine.data.orm import OrmWebLogData
from weblog_engine.exceptions import StorageError
from weblog_engine.models import Category, Page, Post, PostTag, TagMap, WebLog


@pytest.fixture
def web_log(db):
    """Create a test web log."""
    return WebLog.objects.create(id="wl1", name="Test Web Log", slug="test-log")


@pytest.fixture
def category(web_log):
    """Create a test category."""
    return Category.objects.create(id="c1", web_log=web_log, name="Test Category", slug="test-category")


class TestWebLog:
    """Tests for WebLog model."""

    def test_defaults(self, db):
        web_log = WebLog.objects.create(name="Fresh", slug="fresh")
        assert len(web_log.id) == 32
        assert web_log.default_page == "posts"
        assert web_log.posts_per_page == 10

    def test_to_entity(self, web_log):
        assert web_log.to_entity() == entities.WebLog(
            id="wl1", name="Test Web Log", slug="test-log", default_page="posts", posts_per_page=10
        )


class TestCategory:
    """Tests for Category model."""

    def test_category_hierarchy(self, web_log, category):
        """Test nested categories."""
        child = Category.objects.create(id="c2", web_log=web_log, name="Child Category", slug="child", parent=category)
        assert child.parent == category
        assert list(category.children.all()) == [child]
        assert str(child) == "Test Category > Child Category"

    def test_to_entity(self, category):
        assert category.to_entity() == entities.Category(
            id="c1",
            web_log_id="wl1",
            name="Test Category",
            slug="test-category",
            description=None,
            parent_id=None,
        )

    def test_clean_rejects_loop(self, web_log, category):
        child = Category.objects.create(id="c2", web_log=web_log, name="Child", slug="child", parent=category)
        category.parent = child
        with pytest.raises(ValidationError):
            category.clean()

    def test_clean_rejects_other_web_log(self, web_log, category):
        other = WebLog.objects.create(id="wl2", name="Other", slug="other")
        stranger = Category(id="c9", web_log=other, name="Stranger", slug="stranger", parent=category)
        with pytest.raises(ValidationError):
            stranger.clean()

    def test_slug_unique_per_web_log(self, web_log, category):
        other = WebLog.objects.create(id="wl2", name="Other", slug="other")
        Category.objects.create(id="c3", web_log=other, name="Test Category", slug="test-category")
        assert Category.objects.filter(slug="test-category").count() == 2


class TestPostStorage:
    """Posts are stored as a row plus tag, permalink and revision rows."""

    @pytest.fixture
    def post(self, web_log, category):
        return entities.Post(
            id="p1",
            web_log_id="wl1",
            author_id="author",
            status=entities.PostStatus.DRAFT,
            title="Hello",
            permalink="hello",
            text="<p>Hi</p>",
            category_ids={"c1"},
            tags=["django", "python"],
            prior_permalinks=["b", "a"],
        )

    def test_round_trip(self, post):
        data = OrmWebLogData()
        data.add_post(post)
        assert data.post_by_id("wl1", "p1") == post
        assert PostTag.objects.filter(post_id="p1").count() == 2

    def test_update_replaces_children(self, post):
        data = OrmWebLogData()
        data.add_post(post)
        post.tags = ["python"]
        post.prior_permalinks = ["c", "b", "a"]
        post.category_ids = set()
        data.update_post(post)

        row = Post.objects.get(id="p1")
        assert [t.tag for t in row.tags.all()] == ["python"]
        assert [p.permalink for p in row.prior_permalinks.all()] == ["c", "b", "a"]
        assert row.categories.count() == 0

    def test_update_missing_post(self, post):
        with pytest.raises(StorageError):
            OrmWebLogData().update_post(post)

    def test_update_in_other_web_log_refused(self, post):
        """An update cannot move a post to another web log."""
        WebLog.objects.create(id="wl2", name="Other", slug="other")
        data = OrmWebLogData()
        data.add_post(post)
        post.web_log_id = "wl2"
        with pytest.raises(StorageError):
            data.update_post(post)
        assert Post.objects.get(id="p1").web_log_id == "wl1"

    def test_category_update_in_other_web_log_refused(self, category):
        WebLog.objects.create(id="wl2", name="Other", slug="other")
        moved = category.to_entity()
        moved.web_log_id = "wl2"
        with pytest.raises(StorageError):
            OrmWebLogData().update_category(moved)
        assert Category.objects.get(id="c1").web_log_id == "wl1"

    def test_page_round_trip(self, web_log):
        page = entities.Page(
            id="pg1",
            web_log_id="wl1",
            author_id="author",
            title="About",
            permalink="about",
            is_in_page_list=True,
            prior_permalinks=["about-me"],
        )
        data = OrmWebLogData()
        data.add_page(page)
        assert data.page_by_id("wl1", "pg1") == page
        assert str(Page.objects.get(id="pg1")) == "About"

    def test_page_update_in_other_web_log_refused(self, web_log):
        WebLog.objects.create(id="wl2", name="Other", slug="other")
        data = OrmWebLogData()
        page = entities.Page(id="pg1", web_log_id="wl1", title="About", permalink="about")
        data.add_page(page)
        page.web_log_id = "wl2"
        with pytest.raises(StorageError):
            data.update_page(page)
        assert Page.objects.get(id="pg1").web_log_id == "wl1"


class TestTagMap:
    """Tests for TagMap model."""

    def test_save_lower_cases(self, web_log):
        tag_map = TagMap.objects.create(id="tm1", web_log=web_log, tag="C#", url_value="C-Sharp")
        tag_map.refresh_from_db()
        assert (tag_map.tag, tag_map.url_value) == ("c#", "c-sharp")
        assert str(tag_map) == "c# -> c-sharp"

    def test_url_value_unique_per_web_log(self, web_log):
        TagMap.objects.create(id="tm1", web_log=web_log, tag="c#", url_value="c-sharp")
        other = WebLog.objects.create(id="wl2", name="Other", slug="other")
        TagMap.objects.create(id="tm2", web_log=other, tag="c#", url_value="c-sharp")
        with pytest.raises(IntegrityError):
            TagMap.objects.create(id="tm3", web_log=web_log, tag="csharp", url_value="c-sharp")
