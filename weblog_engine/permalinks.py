"""
Permalink resolution for django-weblog-engine.

Turns a request path within a web log into exactly one outcome: a post, a
page, a post listing, a permanent redirect, or not found. Not found is a
result like the others, never an exception.
"""
import logging
from dataclasses import dataclass
from urllib.parse import quote

from .categories import CategoryStore
from .conf import engine_settings
from .entities import Category, Page, Post, PostFilter
from .pager import PostPager, PostsPage

logger = logging.getLogger(__name__)


class Resolution:
    """Base class of every resolver outcome."""

    found = True


@dataclass(frozen=True)
class PostResult(Resolution):
    post: Post


@dataclass(frozen=True)
class PageResult(Resolution):
    page: Page
    is_default: bool = False


@dataclass(frozen=True)
class PostListResult(Resolution):
    posts_page: PostsPage


@dataclass(frozen=True)
class CategoryListResult(Resolution):
    category: Category
    posts_page: PostsPage


@dataclass(frozen=True)
class TagListResult(Resolution):
    tag: str
    posts_page: PostsPage


@dataclass(frozen=True)
class RedirectTo(Resolution):
    """Permanent (cacheable) redirect to the content's current permalink."""

    path: str
    permanent: bool = True


@dataclass(frozen=True)
class NotFound(Resolution):
    path: str = ""
    found = False


def toggle_trailing_slash(path):
    return path[:-1] if path.endswith("/") else f"{path}/"


def _page_query(page_nbr):
    return f"?page={page_nbr}" if page_nbr > 1 else ""


class PermalinkResolver:
    """
    Resolve paths for one persistence backend.

    Lookups run cheapest first and stop at the first hit:

    1. current permalink of a published post
    2. current permalink of a page
    3. prior permalink of a published post (redirect)
    4. prior permalink of a page (redirect)
    5. a post or page permalink differing only by its trailing slash
       (redirect, when TRAILING_SLASH_REDIRECTS is on)
    """

    def __init__(self, data, pager=None, categories=None):
        self.data = data
        self.pager = pager or PostPager(data)
        self.categories = categories or CategoryStore(data)

    def resolve(self, web_log, path):
        if path in ("", "/"):
            return self.resolve_home(web_log)

        steps = [
            self._current_post,
            self._current_page,
            self._prior_post,
            self._prior_page,
        ]
        if engine_settings.TRAILING_SLASH_REDIRECTS:
            steps.append(self._trailing_slash)

        for step in steps:
            result = step(web_log, path)
            if result is not None:
                logger.debug("Resolved %r in web log %s via %s", path, web_log.id, step.__name__)
                return result
        logger.debug("No content at %r in web log %s", path, web_log.id)
        return NotFound(path)

    def resolve_home(self, web_log):
        """
        The web log's root path.

        Either the first page of published posts, or the default page looked
        up by id so a changed permalink does not break the home page.
        """
        if web_log.default_page == engine_settings.DEFAULT_PAGE_POSTS:
            return PostListResult(
                self.pager.get_posts_page(web_log.id, PostFilter.published(), 1, web_log.posts_per_page)
            )
        page = self.data.page_by_id(web_log.id, web_log.default_page)
        if page is None:
            logger.warning("Default page %s of web log %s does not exist", web_log.default_page, web_log.id)
            return NotFound("")
        return PageResult(page, is_default=True)

    def resolve_posts(self, web_log, page_nbr):
        """A numbered page of the published post list."""
        posts_page = self.pager.get_posts_page(
            web_log.id, PostFilter.published(), page_nbr, web_log.posts_per_page
        )
        if not posts_page.items:
            return NotFound(f"page/{page_nbr}")
        return PostListResult(posts_page)

    def resolve_category(self, web_log, slug, page_nbr=1):
        """
        Posts in a category and its subcategories.

        ``slug`` is the full path (``parent/child``); the last segment names
        the category. Any other path to it redirects to the full one.
        """
        leaf = slug.strip("/").rsplit("/", 1)[-1]
        category = self.categories.find_by_slug(web_log.id, leaf)
        if category is None:
            return NotFound(f"category/{slug}")
        canonical = self.categories.slug_path(web_log.id, category)
        if slug.strip("/") != canonical:
            return RedirectTo(f"category/{canonical}{_page_query(page_nbr)}")
        ids = self.categories.descendant_ids(web_log.id, category.id)
        posts_page = self.pager.get_posts_page(
            web_log.id, PostFilter.in_categories(ids), page_nbr, web_log.posts_per_page
        )
        if not posts_page.items:
            return NotFound(f"category/{slug}")
        return CategoryListResult(category, posts_page)

    def resolve_tag(self, web_log, tag, page_nbr=1):
        """
        Posts with a tag.

        ``tag`` is the URL value; a tag map translates it (``c-sharp`` lists
        posts tagged ``c#``). A hyphenated tag with no posts redirects to the
        same tag spelled with spaces.
        """
        url_value = tag.lower()
        tag_map = self.data.tag_map_by_url_value(web_log.id, url_value)
        name = tag_map.tag if tag_map is not None else url_value
        posts_page = self.pager.get_posts_page(
            web_log.id, PostFilter.tagged(name), page_nbr, web_log.posts_per_page
        )
        if posts_page.items:
            return TagListResult(name, posts_page)
        spaced = name.replace("-", " ")
        if spaced != name and self.data.count_posts(web_log.id, PostFilter.tagged(spaced)):
            return RedirectTo(f"tag/{quote(spaced)}{_page_query(page_nbr)}")
        return NotFound(f"tag/{tag}")

    # ---- Resolution steps ----

    def _current_post(self, web_log, path):
        post = self.data.post_by_permalink(web_log.id, path)
        return PostResult(post) if post is not None else None

    def _current_page(self, web_log, path):
        page = self.data.page_by_permalink(web_log.id, path)
        if page is None:
            return None
        return PageResult(page, is_default=page.id == web_log.default_page)

    def _prior_post(self, web_log, path):
        post = self.data.post_by_prior_permalink(web_log.id, path)
        return RedirectTo(post.permalink) if post is not None else None

    def _prior_page(self, web_log, path):
        page = self.data.page_by_prior_permalink(web_log.id, path)
        return RedirectTo(page.permalink) if page is not None else None

    def _trailing_slash(self, web_log, path):
        alternate = toggle_trailing_slash(path)
        post = self.data.post_by_permalink(web_log.id, alternate)
        if post is not None:
            return RedirectTo(post.permalink)
        page = self.data.page_by_permalink(web_log.id, alternate)
        if page is not None:
            return RedirectTo(page.permalink)
        return None
