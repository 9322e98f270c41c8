"""
Page model for django-weblog-engine.
"""
from django.db import models

from .. import entities
from .posts import SOURCE_FORMAT_CHOICES


class Page(models.Model):
    """
    Static page (about, contact, etc.).

    Pages never appear in post listings and are always publicly resolvable.
    """

    id = models.CharField(max_length=32, primary_key=True, default=entities.new_id, editable=False)
    web_log = models.ForeignKey(
        "weblog_engine.WebLog",
        on_delete=models.CASCADE,
        related_name="pages",
    )
    author_id = models.CharField(max_length=64)
    title = models.CharField(max_length=255)
    permalink = models.CharField(max_length=255, db_index=True)
    published_on = models.DateTimeField(null=True, blank=True)
    updated_on = models.DateTimeField(null=True, blank=True)
    is_in_page_list = models.BooleanField(
        default=False,
        help_text="Show in the page list (navigation)",
    )
    text = models.TextField(blank=True)

    class Meta:
        ordering = ["title"]
        indexes = [
            models.Index(fields=["web_log", "permalink"]),
        ]

    def __str__(self):
        return self.title

    def to_entity(self):
        return entities.Page(
            id=self.id,
            web_log_id=self.web_log_id,
            author_id=self.author_id,
            title=self.title,
            permalink=self.permalink,
            published_on=self.published_on,
            updated_on=self.updated_on,
            is_in_page_list=self.is_in_page_list,
            text=self.text,
            prior_permalinks=[p.permalink for p in self.prior_permalinks.all()],
            revisions=[r.to_entity() for r in self.revisions.all()],
        )

    @classmethod
    def from_entity(cls, page):
        return cls(
            id=page.id,
            web_log_id=page.web_log_id,
            author_id=page.author_id,
            title=page.title,
            permalink=page.permalink,
            published_on=page.published_on,
            updated_on=page.updated_on,
            is_in_page_list=page.is_in_page_list,
            text=page.text,
        )


class PagePermalink(models.Model):
    """A permalink a page used to have; position 0 is the most recent."""

    page = models.ForeignKey(Page, on_delete=models.CASCADE, related_name="prior_permalinks")
    permalink = models.CharField(max_length=255, db_index=True)
    position = models.PositiveIntegerField()

    class Meta:
        ordering = ["position"]

    def __str__(self):
        return self.permalink


class PageRevision(models.Model):
    page = models.ForeignKey(Page, on_delete=models.CASCADE, related_name="revisions")
    as_of = models.DateTimeField()
    source_format = models.CharField(max_length=10, choices=SOURCE_FORMAT_CHOICES)
    text = models.TextField()
    position = models.PositiveIntegerField()

    class Meta:
        ordering = ["position"]

    def __str__(self):
        return f"Revision of page {self.page_id} as of {self.as_of}"

    def to_entity(self):
        return entities.Revision(
            as_of=self.as_of,
            source_format=entities.SourceFormat(self.source_format),
            text=self.text,
        )
