"""
Category hierarchy for django-weblog-engine.

A web log's categories form a forest linked only by ``parent_id``. This
module lists that forest in display order, validates parent assignments,
and deletes categories without leaving children or posts pointing at a
record that is gone.
"""
import logging
from collections import defaultdict
from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Optional, Tuple

from django.core.exceptions import ValidationError
from django.utils.text import slugify

from .entities import Category, PostFilter, new_id
from .exceptions import StorageError

logger = logging.getLogger(__name__)


class CategoryDeleteResult(str, Enum):
    NOT_FOUND = "not_found"
    DELETED = "deleted"
    # Deleted, and its children now belong to its former parent
    REASSIGNED_CHILDREN = "reassigned_children"
    # Storage failed part way; logged, data still valid
    PARTIAL = "partial"


@dataclass
class DisplayCategory:
    """A category row for navigation and admin lists."""

    id: str
    slug: str
    name: str
    description: Optional[str]
    parent_names: List[str]
    depth: int
    post_count: int = 0


def _name_order(category):
    return (category.name.lower(), category.id)


def _by_parent(categories):
    """Group categories by parent id; dangling parents count as roots."""
    known = {c.id for c in categories}
    grouped = defaultdict(list)
    for cat in categories:
        parent_id = cat.parent_id if cat.parent_id in known else None
        grouped[parent_id].append(cat)
    for siblings in grouped.values():
        siblings.sort(key=_name_order)
    return grouped


class CategoryStore:
    """Category operations for one persistence backend."""

    def __init__(self, data):
        self.data = data

    # ---- Queries ----

    def find(self, web_log_id, category_id):
        return self.data.category_by_id(web_log_id, category_id)

    def find_by_slug(self, web_log_id, slug):
        return self.data.category_by_slug(web_log_id, slug)

    def count_all(self, web_log_id):
        return len(self.data.categories_by_web_log(web_log_id))

    def count_top_level(self, web_log_id):
        return sum(1 for c in self.data.categories_by_web_log(web_log_id) if c.parent_id is None)

    def list_sorted(self, web_log_id) -> List[Tuple[Category, int]]:
        """
        Return ``(category, depth)`` pairs in display order.

        Roots first, each followed depth-first by its children; siblings are
        ordered by name. Categories caught in a parent loop are unreachable
        from any root and are left out.
        """
        grouped = _by_parent(self.data.categories_by_web_log(web_log_id))
        ordered = []
        stack = [(cat, 0) for cat in reversed(grouped[None])]
        while stack:
            cat, depth = stack.pop()
            ordered.append((cat, depth))
            stack.extend((child, depth + 1) for child in reversed(grouped.get(cat.id, [])))
        return ordered

    def descendant_ids(self, web_log_id, category_id):
        """The category's id plus the ids of everything nested below it."""
        grouped = _by_parent(self.data.categories_by_web_log(web_log_id))
        found = []
        pending = [category_id]
        while pending:
            current = pending.pop()
            if current in found:
                continue
            found.append(current)
            pending.extend(child.id for child in grouped.get(current, []))
        return found

    def slug_path(self, web_log_id, category):
        """Slugs from the root down to ``category``, joined with ``/``."""
        by_id = {c.id: c for c in self.data.categories_by_web_log(web_log_id)}
        slugs = []
        seen = set()
        current = category
        while current is not None and current.id not in seen:
            seen.add(current.id)
            slugs.append(current.slug)
            current = by_id.get(current.parent_id)
        return "/".join(reversed(slugs))

    def list_for_display(self, web_log_id) -> List[DisplayCategory]:
        """
        Sorted categories with full slug paths and published post counts.

        A parent's count includes posts filed under its subcategories.
        """
        rows = []
        trail = []
        for cat, depth in self.list_sorted(web_log_id):
            del trail[depth:]
            parents = list(trail)
            trail.append(cat)
            ids = self.descendant_ids(web_log_id, cat.id)
            rows.append(
                DisplayCategory(
                    id=cat.id,
                    slug="/".join([p.slug for p in parents] + [cat.slug]),
                    name=cat.name,
                    description=cat.description,
                    parent_names=[p.name for p in parents],
                    depth=depth,
                    post_count=self.data.count_posts(web_log_id, PostFilter.in_categories(ids)),
                )
            )
        return rows

    # ---- Changes ----

    def validate_parent(self, category):
        """
        Check a category's parent before it is stored.

        Raises ValidationError when the parent is the category itself, is
        not a category of the same web log, or sits below the category.
        """
        parent_id = category.parent_id
        if parent_id is None:
            return
        if parent_id == category.id:
            logger.warning("Rejected category %s as its own parent", category.id)
            raise ValidationError("A category cannot be its own parent.", code="self_parent")

        by_id = {c.id: c for c in self.data.categories_by_web_log(category.web_log_id)}
        if parent_id not in by_id:
            logger.warning(
                "Rejected parent %s for category %s: not in web log %s",
                parent_id,
                category.id,
                category.web_log_id,
            )
            raise ValidationError(
                "The parent category must belong to the same web log.",
                code="invalid_parent",
            )

        seen = set()
        current = by_id.get(parent_id)
        while current is not None and current.id not in seen:
            if current.id == category.id:
                logger.warning("Rejected parent %s for category %s: loop", parent_id, category.id)
                raise ValidationError(
                    "A category cannot be placed below one of its own subcategories.",
                    code="cycle",
                )
            seen.add(current.id)
            current = by_id.get(current.parent_id)

    def validate_slug(self, category):
        """Raise ValidationError if another category of the web log has the slug."""
        other = self.data.category_by_slug(category.web_log_id, category.slug)
        if other is not None and other.id != category.id:
            logger.warning(
                "Rejected slug %r for category %s: used by %s", category.slug, category.id, other.id
            )
            raise ValidationError(
                "Another category already uses the slug %(slug)s.",
                code="duplicate_slug",
                params={"slug": category.slug},
            )

    def save(self, category) -> Category:
        """Add a new category or update an existing one; returns what was stored."""
        if not category.slug:
            category = replace(category, slug=slugify(category.name))
        if not category.is_new and self.data.category_by_id(category.web_log_id, category.id) is None:
            logger.warning("Rejected update of category %s: not in web log %s", category.id, category.web_log_id)
            raise ValidationError(
                "The category does not belong to this web log.",
                code="invalid_web_log",
            )
        self.validate_parent(category)
        self.validate_slug(category)
        if category.is_new:
            category = replace(category, id=new_id())
            self.data.add_category(category)
            logger.info("Added category %s (%s) to web log %s", category.id, category.slug, category.web_log_id)
        else:
            self.data.update_category(category)
            logger.info("Updated category %s in web log %s", category.id, category.web_log_id)
        return category

    def delete(self, category) -> CategoryDeleteResult:
        """
        Delete a category, handing its children to its parent.

        Children are moved first, then the category is taken off every post,
        then the record goes. A storage failure part way is logged and
        reported as PARTIAL instead of raised.
        """
        web_log_id = category.web_log_id
        existing = self.data.category_by_id(web_log_id, category.id)
        if existing is None:
            return CategoryDeleteResult.NOT_FOUND

        # Children are derived from parent_id, so no parent record needs updating.
        children = []
        try:
            with self.data.atomic():
                children = self.data.children_of(web_log_id, existing.id)
                for child in children:
                    self.data.update_category(replace(child, parent_id=existing.parent_id))

                for post in self.data.posts_with_category(web_log_id, existing.id):
                    post.category_ids.discard(existing.id)
                    self.data.update_post(post)

                self.data.delete_category(web_log_id, existing.id)
        except StorageError:
            logger.exception("Delete of category %s in web log %s did not finish", existing.id, web_log_id)
            return CategoryDeleteResult.PARTIAL

        logger.info(
            "Deleted category %s from web log %s (%d children reassigned)",
            existing.id,
            web_log_id,
            len(children),
        )
        if children:
            return CategoryDeleteResult.REASSIGNED_CHILDREN
        return CategoryDeleteResult.DELETED
