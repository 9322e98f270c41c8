"""
Tag map model for django-weblog-engine.
"""
from django.db import models

from .. import entities


class TagMap(models.Model):
    """URL value for a tag that cannot be used in a URL as written."""

    id = models.CharField(max_length=32, primary_key=True, default=entities.new_id, editable=False)
    web_log = models.ForeignKey(
        "weblog_engine.WebLog",
        on_delete=models.CASCADE,
        related_name="tag_maps",
    )
    tag = models.CharField(max_length=100)
    url_value = models.CharField(max_length=100, help_text="How the tag appears in URLs, e.g. c-sharp for c#")

    class Meta:
        ordering = ["tag"]
        constraints = [
            models.UniqueConstraint(fields=["web_log", "url_value"], name="weblog_engine_tag_map_url_value"),
        ]

    def __str__(self):
        return f"{self.tag} -> {self.url_value}"

    def save(self, *args, **kwargs):
        self.tag = self.tag.lower()
        self.url_value = self.url_value.lower()
        super().save(*args, **kwargs)

    def to_entity(self):
        return entities.TagMap(
            id=self.id,
            web_log_id=self.web_log_id,
            tag=self.tag,
            url_value=self.url_value,
        )

    @classmethod
    def from_entity(cls, tag_map):
        return cls(
            id=tag_map.id,
            web_log_id=tag_map.web_log_id,
            tag=tag_map.tag,
            url_value=tag_map.url_value,
        )
