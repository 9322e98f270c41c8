"""
Persistence port for django-weblog-engine.

Every backend implements ``WebLogData``. The engine only talks to this
interface, so the relational store and the document store behave the same
from the caller's point of view.

Writes replace whole documents: ``update_post`` stores the post exactly as
given, including its tags, prior permalinks and revisions.
"""
from __future__ import annotations

import contextlib
from abc import ABC, abstractmethod
from typing import List, Optional

from ..entities import Category, Page, Post, PostFilter, TagMap, WebLog


class WebLogData(ABC):
    """Abstract persistence interface for web logs and their content."""

    # ---- Transactions ----

    def atomic(self):
        """
        Context manager grouping several writes.

        Backends without transactions run the writes one at a time; callers
        order their writes so an interruption leaves valid data behind.
        """
        return contextlib.nullcontext()

    # ---- Web logs ----

    @abstractmethod
    def web_log_by_id(self, web_log_id: str) -> Optional[WebLog]:
        pass

    @abstractmethod
    def web_log_by_slug(self, slug: str) -> Optional[WebLog]:
        pass

    @abstractmethod
    def add_web_log(self, web_log: WebLog) -> None:
        pass

    # ---- Categories ----

    @abstractmethod
    def categories_by_web_log(self, web_log_id: str) -> List[Category]:
        """All categories of a web log, in no particular order."""
        pass

    @abstractmethod
    def category_by_id(self, web_log_id: str, category_id: str) -> Optional[Category]:
        pass

    @abstractmethod
    def category_by_slug(self, web_log_id: str, slug: str) -> Optional[Category]:
        pass

    @abstractmethod
    def add_category(self, category: Category) -> None:
        pass

    @abstractmethod
    def update_category(self, category: Category) -> None:
        """Replace name, slug, description and parent of a stored category."""
        pass

    @abstractmethod
    def delete_category(self, web_log_id: str, category_id: str) -> bool:
        """Delete the category record only; returns False if it did not exist."""
        pass

    def children_of(self, web_log_id: str, category_id: str) -> List[Category]:
        """Direct children, derived from the children's parent ids."""
        return [c for c in self.categories_by_web_log(web_log_id) if c.parent_id == category_id]

    # ---- Posts ----

    @abstractmethod
    def post_by_id(self, web_log_id: str, post_id: str) -> Optional[Post]:
        pass

    @abstractmethod
    def post_by_permalink(
        self, web_log_id: str, permalink: str, include_drafts: bool = False
    ) -> Optional[Post]:
        """Post whose current permalink matches; published posts only by default."""
        pass

    @abstractmethod
    def post_by_prior_permalink(self, web_log_id: str, permalink: str) -> Optional[Post]:
        """Published post that used to live at ``permalink``."""
        pass

    @abstractmethod
    def posts_with_category(self, web_log_id: str, category_id: str) -> List[Post]:
        """Every post (any status) that lists the category."""
        pass

    @abstractmethod
    def posts_in_range(
        self, web_log_id: str, post_filter: PostFilter, offset: int, limit: int
    ) -> List[Post]:
        """
        Slice ``offset .. offset + limit`` of the filtered listing.

        Listings are ordered by ``PostFilter.sort_key`` descending.
        """
        pass

    @abstractmethod
    def adjacent_post(
        self, web_log_id: str, post_filter: PostFilter, post: Post, newer: bool
    ) -> Optional[Post]:
        """
        The published post next to ``post`` within the filter.

        Newer is the smallest (published_on, id) above the post's; older is
        the largest below it.
        """
        pass

    @abstractmethod
    def count_posts(self, web_log_id: str, post_filter: PostFilter) -> int:
        pass

    @abstractmethod
    def add_post(self, post: Post) -> None:
        pass

    @abstractmethod
    def update_post(self, post: Post) -> None:
        pass

    # ---- Pages ----

    @abstractmethod
    def page_by_id(self, web_log_id: str, page_id: str) -> Optional[Page]:
        pass

    @abstractmethod
    def page_by_permalink(self, web_log_id: str, permalink: str) -> Optional[Page]:
        pass

    @abstractmethod
    def page_by_prior_permalink(self, web_log_id: str, permalink: str) -> Optional[Page]:
        pass

    @abstractmethod
    def pages_in_page_list(self, web_log_id: str) -> List[Page]:
        """Pages shown in navigation, by title."""
        pass

    @abstractmethod
    def add_page(self, page: Page) -> None:
        pass

    @abstractmethod
    def update_page(self, page: Page) -> None:
        pass

    # ---- Tag maps ----

    @abstractmethod
    def tag_maps_by_web_log(self, web_log_id: str) -> List[TagMap]:
        """All tag maps of a web log, by tag."""
        pass

    @abstractmethod
    def tag_map_by_url_value(self, web_log_id: str, url_value: str) -> Optional[TagMap]:
        pass

    @abstractmethod
    def add_tag_map(self, tag_map: TagMap) -> None:
        pass

    @abstractmethod
    def update_tag_map(self, tag_map: TagMap) -> None:
        pass
