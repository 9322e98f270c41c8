"""
Shared fixtures for django-weblog-engine tests.

Most engine tests run once per persistence backend through the ``data``
fixture.
"""
from datetime import datetime, timedelta, timezone

import pytest
from django.utils.text import slugify

from weblog_engine.data.documents import DocumentWebLogData
from weblog_engine.data.orm import OrmWebLogData
from weblog_engine.entities import Category, Page, Post, PostStatus, WebLog

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.fixture(params=["orm", "documents"])
def data(request):
    """Each persistence backend in turn."""
    if request.param == "orm":
        request.getfixturevalue("db")
        return OrmWebLogData()
    return DocumentWebLogData()


@pytest.fixture
def at():
    """Turn an hour offset into an aware timestamp."""

    def moment(hours):
        return BASE_TIME + timedelta(hours=hours)

    return moment


@pytest.fixture
def web_log(data):
    web_log = WebLog(id="wl1", name="Test Web Log", slug="test-log")
    data.add_web_log(web_log)
    return web_log


@pytest.fixture
def other_web_log(data):
    web_log = WebLog(id="wl2", name="Other Web Log", slug="other-log")
    data.add_web_log(web_log)
    return web_log


@pytest.fixture
def add_category(data, web_log):
    """Store a category in the test web log (or another one)."""

    def add(category_id, name, parent_id=None, web_log_id=None, description=None):
        category = Category(
            id=category_id,
            web_log_id=web_log_id or web_log.id,
            name=name,
            slug=slugify(name),
            description=description,
            parent_id=parent_id,
        )
        data.add_category(category)
        return category

    return add


@pytest.fixture
def add_post(data, web_log, at):
    """Store a post; ``hours`` is its publish time, None for a draft."""

    def add(
        post_id,
        hours=None,
        permalink=None,
        updated_hours=None,
        category_ids=(),
        tags=(),
        prior_permalinks=(),
    ):
        published_on = at(hours) if hours is not None else None
        updated_on = at(updated_hours) if updated_hours is not None else published_on or at(0)
        post = Post(
            id=post_id,
            web_log_id=web_log.id,
            author_id="author",
            status=PostStatus.PUBLISHED if hours is not None else PostStatus.DRAFT,
            title=f"Post {post_id}",
            permalink=permalink or f"posts/{post_id}",
            published_on=published_on,
            updated_on=updated_on,
            text="<p>Body</p>",
            category_ids=set(category_ids),
            tags=list(tags),
            prior_permalinks=list(prior_permalinks),
        )
        data.add_post(post)
        return post

    return add


@pytest.fixture
def add_page(data, web_log, at):
    def add(page_id, permalink, prior_permalinks=(), is_in_page_list=False, title=None):
        page = Page(
            id=page_id,
            web_log_id=web_log.id,
            author_id="author",
            title=title or f"Page {page_id}",
            permalink=permalink,
            published_on=at(0),
            updated_on=at(0),
            is_in_page_list=is_in_page_list,
            text="<p>Page</p>",
            prior_permalinks=list(prior_permalinks),
        )
        data.add_page(page)
        return page

    return add
