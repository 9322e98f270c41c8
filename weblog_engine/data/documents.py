"""
DocumentWebLogData - WebLogData kept as whole documents in memory.

Mirrors the document-database layout: one collection per entity type, each
document stored and returned as an independent copy, no multi-document
transactions. Useful for tests, previews and single-process deployments.
"""
from __future__ import annotations

import copy
import threading

from ..exceptions import StorageError
from .base import WebLogData

WEB_LOGS = "web_logs"
CATEGORIES = "categories"
POSTS = "posts"
PAGES = "pages"
TAG_MAPS = "tag_maps"


class DocumentWebLogData(WebLogData):
    """WebLogData implementation (in-memory document collections)."""

    def __init__(self):
        self._collections = {WEB_LOGS: {}, CATEGORIES: {}, POSTS: {}, PAGES: {}, TAG_MAPS: {}}
        self._lock = threading.RLock()

    # ---- Document primitives ----

    def _get(self, collection, doc_id):
        doc = self._collections[collection].get(doc_id)
        return copy.deepcopy(doc) if doc is not None else None

    def _find(self, collection, predicate):
        with self._lock:
            docs = list(self._collections[collection].values())
        return [copy.deepcopy(doc) for doc in docs if predicate(doc)]

    def _find_one(self, collection, predicate):
        found = self._find(collection, predicate)
        return found[0] if found else None

    def _insert(self, collection, doc):
        with self._lock:
            if doc.id in self._collections[collection]:
                raise StorageError(f"Duplicate id {doc.id} in {collection}", operation="insert")
            self._collections[collection][doc.id] = copy.deepcopy(doc)

    def _replace(self, collection, doc):
        with self._lock:
            stored = self._collections[collection].get(doc.id)
            if stored is None or stored.web_log_id != doc.web_log_id:
                raise StorageError(f"No document {doc.id} in {collection}", operation="replace")
            self._collections[collection][doc.id] = copy.deepcopy(doc)

    def _in_web_log(self, collection, web_log_id, doc_id):
        doc = self._get(collection, doc_id)
        if doc is None or doc.web_log_id != web_log_id:
            return None
        return doc

    # ---- Web logs ----

    def web_log_by_id(self, web_log_id):
        return self._get(WEB_LOGS, web_log_id)

    def web_log_by_slug(self, slug):
        return self._find_one(WEB_LOGS, lambda w: w.slug == slug)

    def add_web_log(self, web_log):
        self._insert(WEB_LOGS, web_log)

    # ---- Categories ----

    def categories_by_web_log(self, web_log_id):
        return self._find(CATEGORIES, lambda c: c.web_log_id == web_log_id)

    def category_by_id(self, web_log_id, category_id):
        return self._in_web_log(CATEGORIES, web_log_id, category_id)

    def category_by_slug(self, web_log_id, slug):
        return self._find_one(CATEGORIES, lambda c: c.web_log_id == web_log_id and c.slug == slug)

    def add_category(self, category):
        self._insert(CATEGORIES, category)

    def update_category(self, category):
        self._replace(CATEGORIES, category)

    def delete_category(self, web_log_id, category_id):
        with self._lock:
            stored = self._collections[CATEGORIES].get(category_id)
            if stored is None or stored.web_log_id != web_log_id:
                return False
            del self._collections[CATEGORIES][category_id]
            return True

    # ---- Posts ----

    def _listing(self, web_log_id, post_filter):
        return self._find(POSTS, lambda p: p.web_log_id == web_log_id and post_filter.matches(p))

    def post_by_id(self, web_log_id, post_id):
        return self._in_web_log(POSTS, web_log_id, post_id)

    def post_by_permalink(self, web_log_id, permalink, include_drafts=False):
        return self._find_one(
            POSTS,
            lambda p: p.web_log_id == web_log_id
            and p.permalink == permalink
            and (include_drafts or p.is_published),
        )

    def post_by_prior_permalink(self, web_log_id, permalink):
        return self._find_one(
            POSTS,
            lambda p: p.web_log_id == web_log_id
            and p.is_published
            and permalink in p.prior_permalinks,
        )

    def posts_with_category(self, web_log_id, category_id):
        return self._find(
            POSTS, lambda p: p.web_log_id == web_log_id and category_id in p.category_ids
        )

    def posts_in_range(self, web_log_id, post_filter, offset, limit):
        posts = self._listing(web_log_id, post_filter)
        posts.sort(key=post_filter.sort_key, reverse=True)
        return posts[offset:offset + limit]

    def adjacent_post(self, web_log_id, post_filter, post, newer):
        if post.published_on is None:
            return None
        origin = (post.published_on, post.id)
        candidates = [
            p for p in self._listing(web_log_id, post_filter.scope())
            if p.published_on is not None
        ]
        if newer:
            later = [p for p in candidates if (p.published_on, p.id) > origin]
            return min(later, key=lambda p: (p.published_on, p.id), default=None)
        earlier = [p for p in candidates if (p.published_on, p.id) < origin]
        return max(earlier, key=lambda p: (p.published_on, p.id), default=None)

    def count_posts(self, web_log_id, post_filter):
        return len(self._listing(web_log_id, post_filter))

    def add_post(self, post):
        self._insert(POSTS, post)

    def update_post(self, post):
        self._replace(POSTS, post)

    # ---- Pages ----

    def page_by_id(self, web_log_id, page_id):
        return self._in_web_log(PAGES, web_log_id, page_id)

    def page_by_permalink(self, web_log_id, permalink):
        return self._find_one(
            PAGES, lambda p: p.web_log_id == web_log_id and p.permalink == permalink
        )

    def page_by_prior_permalink(self, web_log_id, permalink):
        return self._find_one(
            PAGES, lambda p: p.web_log_id == web_log_id and permalink in p.prior_permalinks
        )

    def pages_in_page_list(self, web_log_id):
        pages = self._find(PAGES, lambda p: p.web_log_id == web_log_id and p.is_in_page_list)
        return sorted(pages, key=lambda p: (p.title, p.id))

    def add_page(self, page):
        self._insert(PAGES, page)

    def update_page(self, page):
        self._replace(PAGES, page)

    # ---- Tag maps ----

    def tag_maps_by_web_log(self, web_log_id):
        tag_maps = self._find(TAG_MAPS, lambda m: m.web_log_id == web_log_id)
        return sorted(tag_maps, key=lambda m: (m.tag, m.id))

    def tag_map_by_url_value(self, web_log_id, url_value):
        return self._find_one(
            TAG_MAPS, lambda m: m.web_log_id == web_log_id and m.url_value == url_value
        )

    def add_tag_map(self, tag_map):
        self._insert(TAG_MAPS, tag_map)

    def update_tag_map(self, tag_map):
        self._replace(TAG_MAPS, tag_map)
