"""
OrmWebLogData - WebLogData implemented with the Django ORM.

Each entity is stored as a main row plus child rows (tags, prior
permalinks, revisions); every write replaces all of them inside one
transaction so a document is never half-updated.
"""
from __future__ import annotations

import contextlib
import functools
import logging
from typing import List, Optional

from django.db import DatabaseError, transaction
from django.db.models import Case, F, Q, When

from .. import entities
from ..exceptions import StorageError
from ..models import (
    Category as CategoryModel,
    Page as PageModel,
    PagePermalink,
    PageRevision,
    Post as PostModel,
    PostPermalink,
    PostRevision,
    PostTag,
    TagMap as TagMapModel,
    WebLog as WebLogModel,
)
from .base import WebLogData

logger = logging.getLogger(__name__)

PUBLISHED = entities.PostStatus.PUBLISHED.value


def storage_errors(method):
    """Re-raise database failures as StorageError."""

    @functools.wraps(method)
    def wrapper(*args, **kwargs):
        try:
            return method(*args, **kwargs)
        except DatabaseError as exc:
            logger.warning("Data operation %s failed: %s", method.__name__, exc)
            raise StorageError(str(exc), operation=method.__name__) from exc

    return wrapper


def _first(queryset):
    row = queryset.first()
    return row.to_entity() if row is not None else None


def _require_stored(model, document):
    """Raise StorageError unless the document is already stored in its web log."""
    if not model.objects.filter(id=document.id, web_log_id=document.web_log_id).exists():
        raise StorageError(
            f"No {model._meta.model_name} {document.id} in web log {document.web_log_id}",
            operation="update",
        )


class OrmWebLogData(WebLogData):
    """WebLogData implementation (Django ORM)."""

    @contextlib.contextmanager
    def atomic(self):
        try:
            with transaction.atomic():
                yield
        except DatabaseError as exc:
            raise StorageError(str(exc), operation="atomic") from exc

    # ---- Web logs ----

    @storage_errors
    def web_log_by_id(self, web_log_id):
        return _first(WebLogModel.objects.filter(id=web_log_id))

    @storage_errors
    def web_log_by_slug(self, slug):
        return _first(WebLogModel.objects.filter(slug=slug))

    @storage_errors
    def add_web_log(self, web_log):
        WebLogModel.from_entity(web_log).save(force_insert=True)

    # ---- Categories ----

    @storage_errors
    def categories_by_web_log(self, web_log_id) -> List[entities.Category]:
        return [c.to_entity() for c in CategoryModel.objects.filter(web_log_id=web_log_id)]

    @storage_errors
    def category_by_id(self, web_log_id, category_id):
        return _first(CategoryModel.objects.filter(web_log_id=web_log_id, id=category_id))

    @storage_errors
    def category_by_slug(self, web_log_id, slug):
        return _first(CategoryModel.objects.filter(web_log_id=web_log_id, slug=slug))

    @storage_errors
    def children_of(self, web_log_id, category_id):
        children = CategoryModel.objects.filter(web_log_id=web_log_id, parent_id=category_id)
        return [c.to_entity() for c in children]

    @storage_errors
    def add_category(self, category):
        with transaction.atomic():
            CategoryModel.from_entity(category).save(force_insert=True)

    @storage_errors
    def update_category(self, category):
        with transaction.atomic():
            _require_stored(CategoryModel, category)
            CategoryModel.from_entity(category).save(force_update=True)

    @storage_errors
    def delete_category(self, web_log_id, category_id):
        deleted, _ = CategoryModel.objects.filter(web_log_id=web_log_id, id=category_id).delete()
        return deleted > 0

    # ---- Posts ----

    def _posts(self, web_log_id):
        return PostModel.objects.filter(web_log_id=web_log_id).prefetch_related(
            "categories", "tags", "prior_permalinks", "revisions"
        )

    def _filtered(self, web_log_id, post_filter):
        queryset = self._posts(web_log_id)
        if post_filter.published_only:
            queryset = queryset.filter(status=PUBLISHED)
        if post_filter.kind == entities.FilterKind.CATEGORY:
            queryset = queryset.filter(categories__id__in=list(post_filter.category_ids)).distinct()
        elif post_filter.kind == entities.FilterKind.TAG:
            queryset = queryset.filter(tags__tag=post_filter.tag).distinct()
        return queryset

    @storage_errors
    def post_by_id(self, web_log_id, post_id):
        return _first(self._posts(web_log_id).filter(id=post_id))

    @storage_errors
    def post_by_permalink(self, web_log_id, permalink, include_drafts=False):
        queryset = self._posts(web_log_id).filter(permalink=permalink)
        if not include_drafts:
            queryset = queryset.filter(status=PUBLISHED)
        return _first(queryset)

    @storage_errors
    def post_by_prior_permalink(self, web_log_id, permalink):
        queryset = self._posts(web_log_id).filter(
            status=PUBLISHED, prior_permalinks__permalink=permalink
        )
        return _first(queryset.distinct())

    @storage_errors
    def posts_with_category(self, web_log_id, category_id):
        return [p.to_entity() for p in self._posts(web_log_id).filter(categories__id=category_id)]

    @storage_errors
    def posts_in_range(self, web_log_id, post_filter, offset, limit):
        queryset = self._filtered(web_log_id, post_filter)
        if post_filter.kind == entities.FilterKind.ADMIN:
            queryset = queryset.annotate(
                listed_on=Case(
                    When(status=PUBLISHED, then=F("published_on")),
                    default=F("updated_on"),
                )
            ).order_by("-listed_on", "-id")
        else:
            queryset = queryset.order_by("-published_on", "-id")
        return [p.to_entity() for p in queryset[offset:offset + limit]]

    @storage_errors
    def adjacent_post(self, web_log_id, post_filter, post, newer):
        if post.published_on is None:
            return None
        queryset = self._filtered(web_log_id, post_filter.scope())
        when = post.published_on
        if newer:
            queryset = queryset.filter(
                Q(published_on__gt=when) | Q(published_on=when, id__gt=post.id)
            ).order_by("published_on", "id")
        else:
            queryset = queryset.filter(
                Q(published_on__lt=when) | Q(published_on=when, id__lt=post.id)
            ).order_by("-published_on", "-id")
        return _first(queryset)

    @storage_errors
    def count_posts(self, web_log_id, post_filter):
        return self._filtered(web_log_id, post_filter).count()

    @storage_errors
    def add_post(self, post):
        with transaction.atomic():
            row = PostModel.from_entity(post)
            row.save(force_insert=True)
            self._write_post_children(row, post)

    @storage_errors
    def update_post(self, post):
        with transaction.atomic():
            _require_stored(PostModel, post)
            row = PostModel.from_entity(post)
            row.save(force_update=True)
            self._write_post_children(row, post)

    def _write_post_children(self, row, post):
        row.categories.set(sorted(post.category_ids))
        row.tags.all().delete()
        PostTag.objects.bulk_create([PostTag(post=row, tag=tag) for tag in post.tags])
        row.prior_permalinks.all().delete()
        PostPermalink.objects.bulk_create(
            [
                PostPermalink(post=row, permalink=link, position=idx)
                for idx, link in enumerate(post.prior_permalinks)
            ]
        )
        row.revisions.all().delete()
        PostRevision.objects.bulk_create(
            [
                PostRevision(
                    post=row,
                    as_of=rev.as_of,
                    source_format=entities.SourceFormat(rev.source_format).value,
                    text=rev.text,
                    position=idx,
                )
                for idx, rev in enumerate(post.revisions)
            ]
        )

    # ---- Pages ----

    def _pages(self, web_log_id):
        return PageModel.objects.filter(web_log_id=web_log_id).prefetch_related(
            "prior_permalinks", "revisions"
        )

    @storage_errors
    def page_by_id(self, web_log_id, page_id) -> Optional[entities.Page]:
        return _first(self._pages(web_log_id).filter(id=page_id))

    @storage_errors
    def page_by_permalink(self, web_log_id, permalink):
        return _first(self._pages(web_log_id).filter(permalink=permalink))

    @storage_errors
    def page_by_prior_permalink(self, web_log_id, permalink):
        queryset = self._pages(web_log_id).filter(prior_permalinks__permalink=permalink)
        return _first(queryset.distinct())

    @storage_errors
    def pages_in_page_list(self, web_log_id):
        queryset = self._pages(web_log_id).filter(is_in_page_list=True).order_by("title", "id")
        return [p.to_entity() for p in queryset]

    @storage_errors
    def add_page(self, page):
        with transaction.atomic():
            row = PageModel.from_entity(page)
            row.save(force_insert=True)
            self._write_page_children(row, page)

    @storage_errors
    def update_page(self, page):
        with transaction.atomic():
            _require_stored(PageModel, page)
            row = PageModel.from_entity(page)
            row.save(force_update=True)
            self._write_page_children(row, page)

    def _write_page_children(self, row, page):
        row.prior_permalinks.all().delete()
        PagePermalink.objects.bulk_create(
            [
                PagePermalink(page=row, permalink=link, position=idx)
                for idx, link in enumerate(page.prior_permalinks)
            ]
        )
        row.revisions.all().delete()
        PageRevision.objects.bulk_create(
            [
                PageRevision(
                    page=row,
                    as_of=rev.as_of,
                    source_format=entities.SourceFormat(rev.source_format).value,
                    text=rev.text,
                    position=idx,
                )
                for idx, rev in enumerate(page.revisions)
            ]
        )

    # ---- Tag maps ----

    @storage_errors
    def tag_maps_by_web_log(self, web_log_id):
        queryset = TagMapModel.objects.filter(web_log_id=web_log_id).order_by("tag", "id")
        return [m.to_entity() for m in queryset]

    @storage_errors
    def tag_map_by_url_value(self, web_log_id, url_value):
        return _first(TagMapModel.objects.filter(web_log_id=web_log_id, url_value=url_value))

    @storage_errors
    def add_tag_map(self, tag_map):
        with transaction.atomic():
            TagMapModel.from_entity(tag_map).save(force_insert=True)

    @storage_errors
    def update_tag_map(self, tag_map):
        with transaction.atomic():
            _require_stored(TagMapModel, tag_map)
            TagMapModel.from_entity(tag_map).save(force_update=True)
