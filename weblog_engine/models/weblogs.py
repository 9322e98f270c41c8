"""
Web log (tenant) model for django-weblog-engine.
"""
from django.db import models

from .. import entities
from ..conf import engine_settings


class WebLog(models.Model):
    """
    One site hosted by the platform.

    Every category, post and page belongs to exactly one web log.
    """

    id = models.CharField(max_length=32, primary_key=True, default=entities.new_id, editable=False)
    name = models.CharField(max_length=255)
    slug = models.SlugField(max_length=100, unique=True)
    default_page = models.CharField(
        max_length=32,
        default=engine_settings.DEFAULT_PAGE_POSTS,
        help_text='Id of the home page, or "posts" to show the post list',
    )
    posts_per_page = models.PositiveIntegerField(default=engine_settings.POSTS_PER_PAGE)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name

    def to_entity(self):
        return entities.WebLog(
            id=self.id,
            name=self.name,
            slug=self.slug,
            default_page=self.default_page,
            posts_per_page=self.posts_per_page,
        )

    @classmethod
    def from_entity(cls, web_log):
        return cls(
            id=web_log.id,
            name=web_log.name,
            slug=web_log.slug,
            default_page=web_log.default_page,
            posts_per_page=web_log.posts_per_page,
        )
