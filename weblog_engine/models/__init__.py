"""
Models for django-weblog-engine.

All models are importable from weblog_engine.models:

    from weblog_engine.models import WebLog, Category, Post, Page

These are the relational storage shape used by
``weblog_engine.data.orm.OrmWebLogData``; the engine itself works on the
entities in ``weblog_engine.entities``.
"""
from .weblogs import WebLog
from .posts import Category, Post, PostTag, PostPermalink, PostRevision
from .pages import Page, PagePermalink, PageRevision
from .tag_maps import TagMap

__all__ = [
    "WebLog",
    # Posts
    "Category",
    "Post",
    "PostTag",
    "PostPermalink",
    "PostRevision",
    # Pages
    "Page",
    "PagePermalink",
    "PageRevision",
    # Tags
    "TagMap",
]
