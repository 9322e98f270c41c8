"""
Category and Post models for django-weblog-engine.
"""
from django.db import models

from .. import entities

SOURCE_FORMAT_CHOICES = [(f.value, f.value) for f in entities.SourceFormat]


class Category(models.Model):
    """
    Hierarchical category for organizing posts.

    The parent field is the only record of the hierarchy; children are
    always looked up through it.
    """

    id = models.CharField(max_length=32, primary_key=True, default=entities.new_id, editable=False)
    web_log = models.ForeignKey(
        "weblog_engine.WebLog",
        on_delete=models.CASCADE,
        related_name="categories",
    )
    name = models.CharField(max_length=100)
    slug = models.SlugField(max_length=100)
    description = models.TextField(blank=True)
    parent = models.ForeignKey(
        "self",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="children",
    )

    class Meta:
        ordering = ["name"]
        verbose_name_plural = "Categories"
        constraints = [
            models.UniqueConstraint(fields=["web_log", "slug"], name="weblog_engine_category_slug"),
        ]

    def __str__(self):
        if self.parent:
            return f"{self.parent} > {self.name}"
        return self.name

    def clean(self):
        """Reject parents from another web log and parent loops."""
        from ..categories import CategoryStore
        from ..data.orm import OrmWebLogData

        CategoryStore(OrmWebLogData()).validate_parent(self.to_entity())

    def to_entity(self):
        return entities.Category(
            id=self.id,
            web_log_id=self.web_log_id,
            name=self.name,
            slug=self.slug,
            description=self.description or None,
            parent_id=self.parent_id,
        )

    @classmethod
    def from_entity(cls, category):
        return cls(
            id=category.id,
            web_log_id=category.web_log_id,
            name=category.name,
            slug=category.slug,
            description=category.description or "",
            parent_id=category.parent_id,
        )


class Post(models.Model):
    """
    Blog post.

    Tags, prior permalinks and revisions live in their own tables so they can
    be searched; ``to_entity`` folds them back into one document.
    """

    STATUS_CHOICES = [(s.value, s.value) for s in entities.PostStatus]

    id = models.CharField(max_length=32, primary_key=True, default=entities.new_id, editable=False)
    web_log = models.ForeignKey(
        "weblog_engine.WebLog",
        on_delete=models.CASCADE,
        related_name="posts",
    )
    author_id = models.CharField(max_length=64)
    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=entities.PostStatus.DRAFT.value,
    )
    title = models.CharField(max_length=255)
    permalink = models.CharField(max_length=255, db_index=True)
    published_on = models.DateTimeField(null=True, blank=True, db_index=True)
    updated_on = models.DateTimeField(null=True, blank=True)
    text = models.TextField(blank=True)

    categories = models.ManyToManyField(Category, related_name="posts", blank=True)

    class Meta:
        ordering = ["-published_on", "-id"]
        indexes = [
            models.Index(fields=["web_log", "status", "-published_on"]),
            models.Index(fields=["web_log", "permalink"]),
        ]

    def __str__(self):
        return self.title or self.permalink

    @property
    def is_published(self):
        return self.status == entities.PostStatus.PUBLISHED.value

    def to_entity(self):
        """Build the post document; expects the related rows to be prefetched."""
        return entities.Post(
            id=self.id,
            web_log_id=self.web_log_id,
            author_id=self.author_id,
            status=entities.PostStatus(self.status),
            title=self.title,
            permalink=self.permalink,
            published_on=self.published_on,
            updated_on=self.updated_on,
            text=self.text,
            category_ids={c.id for c in self.categories.all()},
            tags=[t.tag for t in self.tags.all()],
            prior_permalinks=[p.permalink for p in self.prior_permalinks.all()],
            revisions=[r.to_entity() for r in self.revisions.all()],
        )

    @classmethod
    def from_entity(cls, post):
        """Unsaved row for the scalar fields; related rows are written separately."""
        return cls(
            id=post.id,
            web_log_id=post.web_log_id,
            author_id=post.author_id,
            status=entities.PostStatus(post.status).value,
            title=post.title,
            permalink=post.permalink,
            published_on=post.published_on,
            updated_on=post.updated_on,
            text=post.text,
        )


class PostTag(models.Model):
    post = models.ForeignKey(Post, on_delete=models.CASCADE, related_name="tags")
    tag = models.CharField(max_length=100, db_index=True)

    class Meta:
        ordering = ["tag"]

    def __str__(self):
        return self.tag


class PostPermalink(models.Model):
    """A permalink a post used to have; position 0 is the most recent."""

    post = models.ForeignKey(Post, on_delete=models.CASCADE, related_name="prior_permalinks")
    permalink = models.CharField(max_length=255, db_index=True)
    position = models.PositiveIntegerField()

    class Meta:
        ordering = ["position"]

    def __str__(self):
        return self.permalink


class PostRevision(models.Model):
    post = models.ForeignKey(Post, on_delete=models.CASCADE, related_name="revisions")
    as_of = models.DateTimeField()
    source_format = models.CharField(max_length=10, choices=SOURCE_FORMAT_CHOICES)
    text = models.TextField()
    position = models.PositiveIntegerField()

    class Meta:
        ordering = ["position"]

    def __str__(self):
        return f"Revision of post {self.post_id} as of {self.as_of}"

    def to_entity(self):
        return entities.Revision(
            as_of=self.as_of,
            source_format=entities.SourceFormat(self.source_format),
            text=self.text,
        )
