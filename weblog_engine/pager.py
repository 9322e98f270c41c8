"""
Paged post listings for django-weblog-engine.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .entities import FilterKind, Post, PostFilter

logger = logging.getLogger(__name__)


@dataclass
class PostsPage:
    """One page of a post listing."""

    items: List[Post] = field(default_factory=list)
    has_newer: bool = False
    has_older: bool = False
    page_nbr: int = 1


class PostPager:
    """
    Listings and newer/older navigation over a persistence backend.

    Published listings run newest first by publish time; the admin listing
    also shows drafts, placed by their last update time.
    """

    def __init__(self, data):
        self.data = data

    def page_of_posts(self, web_log_id, post_filter, page_nbr, page_size, extra=0) -> List[Post]:
        """Posts ``(page_nbr - 1) * page_size`` up to ``page_nbr * page_size`` (plus ``extra``)."""
        if page_nbr < 1:
            raise ValueError(f"Page numbers start at 1, got {page_nbr}")
        if page_size < 1:
            raise ValueError(f"Page size must be positive, got {page_size}")
        return self.data.posts_in_range(
            web_log_id, post_filter, (page_nbr - 1) * page_size, page_size + extra
        )

    def newer(self, web_log_id, post_filter, post) -> Optional[Post]:
        return self.data.adjacent_post(web_log_id, post_filter, post, newer=True)

    def older(self, web_log_id, post_filter, post) -> Optional[Post]:
        return self.data.adjacent_post(web_log_id, post_filter, post, newer=False)

    def surrounding(self, web_log_id, post, post_filter=None) -> Tuple[Optional[Post], Optional[Post]]:
        """``(newer, older)`` neighbours of a single post."""
        post_filter = post_filter or PostFilter.published()
        return (
            self.newer(web_log_id, post_filter, post),
            self.older(web_log_id, post_filter, post),
        )

    def get_posts_page(self, web_log_id, post_filter, page_nbr, page_size) -> PostsPage:
        """
        A page of posts with flags for newer and older pages.

        Published listings check for neighbours of the first and last post
        shown rather than counting. The admin listing pages by position:
        anything past page 1 has a newer page, and one extra row is read to
        see whether an older page exists.
        """
        if post_filter.kind == FilterKind.ADMIN:
            posts = self.page_of_posts(web_log_id, post_filter, page_nbr, page_size, extra=1)
            return PostsPage(
                items=posts[:page_size],
                has_newer=page_nbr > 1,
                has_older=len(posts) > page_size,
                page_nbr=page_nbr,
            )

        posts = self.page_of_posts(web_log_id, post_filter, page_nbr, page_size)
        if not posts:
            logger.debug("Page %d of %s listing for web log %s is empty", page_nbr, post_filter.kind.value, web_log_id)
            return PostsPage(page_nbr=page_nbr)
        return PostsPage(
            items=posts,
            has_newer=self.newer(web_log_id, post_filter, posts[0]) is not None,
            has_older=self.older(web_log_id, post_filter, posts[-1]) is not None,
            page_nbr=page_nbr,
        )
