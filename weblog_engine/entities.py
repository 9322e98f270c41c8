"""
Plain content entities shared by the engine and every data backend.

Backends hand these out and take them back as whole documents; the Django
models in ``weblog_engine.models`` are one storage shape for them.
"""
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import FrozenSet, List, Optional, Set

# Id carried by content that has never been persisted
NEW_ID = "new"


def new_id() -> str:
    """Generate an id for a first persist."""
    return uuid.uuid4().hex


class PostStatus(str, Enum):
    DRAFT = "Draft"
    PUBLISHED = "Published"


class SourceFormat(str, Enum):
    MARKDOWN = "Markdown"
    HTML = "HTML"


@dataclass
class Revision:
    """A timestamped snapshot of content source text."""

    as_of: datetime
    source_format: SourceFormat
    text: str


@dataclass
class WebLog:
    """One tenant site."""

    id: str
    name: str
    slug: str = ""
    # Either a page id or the "posts" sentinel (see conf.DEFAULT_PAGE_POSTS)
    default_page: str = "posts"
    posts_per_page: int = 10


@dataclass
class Category:
    id: str = NEW_ID
    web_log_id: str = ""
    name: str = ""
    slug: str = ""
    description: Optional[str] = None
    parent_id: Optional[str] = None

    @property
    def is_new(self) -> bool:
        return self.id == NEW_ID


@dataclass
class Post:
    id: str = NEW_ID
    web_log_id: str = ""
    author_id: str = ""
    status: PostStatus = PostStatus.DRAFT
    title: str = ""
    permalink: str = ""
    published_on: Optional[datetime] = None
    updated_on: Optional[datetime] = None
    text: str = ""
    category_ids: Set[str] = field(default_factory=set)
    tags: List[str] = field(default_factory=list)
    # Most recent first; never trimmed
    prior_permalinks: List[str] = field(default_factory=list)
    revisions: List[Revision] = field(default_factory=list)

    @property
    def is_new(self) -> bool:
        return self.id == NEW_ID

    @property
    def is_published(self) -> bool:
        return self.status == PostStatus.PUBLISHED


@dataclass
class Page:
    id: str = NEW_ID
    web_log_id: str = ""
    author_id: str = ""
    title: str = ""
    permalink: str = ""
    published_on: Optional[datetime] = None
    updated_on: Optional[datetime] = None
    is_in_page_list: bool = False
    text: str = ""
    prior_permalinks: List[str] = field(default_factory=list)
    revisions: List[Revision] = field(default_factory=list)

    @property
    def is_new(self) -> bool:
        return self.id == NEW_ID


@dataclass
class TagMap:
    """
    The URL spelling of a tag.

    Tags such as ``c#`` cannot appear in a URL as they are, so a web log maps
    them to a URL value (``c-sharp``). Both are stored lower-case.
    """

    id: str = NEW_ID
    web_log_id: str = ""
    tag: str = ""
    url_value: str = ""

    @property
    def is_new(self) -> bool:
        return self.id == NEW_ID


class FilterKind(str, Enum):
    PUBLISHED = "published"
    CATEGORY = "category"
    TAG = "tag"
    ADMIN = "admin"


@dataclass(frozen=True)
class PostFilter:
    """
    Which posts a listing or adjacent-post lookup covers.

    Build with the class methods:

        PostFilter.published()
        PostFilter.in_categories({"a1", "b2"})
        PostFilter.tagged("django")
        PostFilter.admin()
    """

    kind: FilterKind = FilterKind.PUBLISHED
    category_ids: FrozenSet[str] = frozenset()
    tag: Optional[str] = None

    @classmethod
    def published(cls):
        return cls(FilterKind.PUBLISHED)

    @classmethod
    def in_categories(cls, category_ids):
        return cls(FilterKind.CATEGORY, category_ids=frozenset(category_ids))

    @classmethod
    def tagged(cls, tag):
        return cls(FilterKind.TAG, tag=tag)

    @classmethod
    def admin(cls):
        return cls(FilterKind.ADMIN)

    @property
    def published_only(self) -> bool:
        return self.kind != FilterKind.ADMIN

    def scope(self):
        """The same filter restricted to published posts, for adjacent lookups."""
        if self.kind == FilterKind.ADMIN:
            return PostFilter.published()
        return self

    def matches(self, post: Post) -> bool:
        """Check a post against this filter (document-store evaluation)."""
        if self.published_only and not post.is_published:
            return False
        if self.kind == FilterKind.CATEGORY:
            return bool(self.category_ids & set(post.category_ids))
        if self.kind == FilterKind.TAG:
            return self.tag in post.tags
        return True

    def sort_key(self, post: Post):
        """
        Listing key; listings sort by it descending.

        Published posts list by publish time. The admin listing puts drafts
        by their last update time instead. The id breaks ties.
        """
        if self.kind == FilterKind.ADMIN and not post.is_published:
            return (post.updated_on, post.id)
        return (post.published_on, post.id)
