"""
Django admin configuration for weblog_engine.
"""
from django.contrib import admin, messages

from .categories import CategoryDeleteResult, CategoryStore
from .data.orm import OrmWebLogData
from .models import (
    Category,
    Page,
    PagePermalink,
    PageRevision,
    Post,
    PostPermalink,
    PostRevision,
    PostTag,
    TagMap,
    WebLog,
)


class HistoryInline(admin.TabularInline):
    """Tags and history rows are shown, never edited here."""

    extra = 0
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False


class PostTagInline(HistoryInline):
    model = PostTag


class PostPermalinkInline(HistoryInline):
    model = PostPermalink


class PostRevisionInline(HistoryInline):
    model = PostRevision


class PagePermalinkInline(HistoryInline):
    model = PagePermalink


class PageRevisionInline(HistoryInline):
    model = PageRevision


@admin.register(WebLog)
class WebLogAdmin(admin.ModelAdmin):
    list_display = ["name", "slug", "default_page", "posts_per_page"]
    search_fields = ["name", "slug"]
    prepopulated_fields = {"slug": ("name",)}


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ["name", "parent", "slug", "web_log"]
    list_filter = ["web_log"]
    search_fields = ["name", "slug", "description"]
    prepopulated_fields = {"slug": ("name",)}
    ordering = ["web_log", "parent__name", "name"]

    def delete_model(self, request, obj):
        """Delete through the store so children and posts are updated first."""
        self._delete(request, CategoryStore(OrmWebLogData()), obj)

    def delete_queryset(self, request, queryset):
        store = CategoryStore(OrmWebLogData())
        for category in queryset:
            self._delete(request, store, category)

    def _delete(self, request, store, obj):
        if store.delete(obj.to_entity()) == CategoryDeleteResult.PARTIAL:
            self.message_user(
                request,
                f"Category {obj} could not be fully deleted; see the logs.",
                level=messages.ERROR,
            )


class ContentAdmin(admin.ModelAdmin):
    """
    Browse posts and pages.

    Edits go through ContentService so revisions and prior permalinks are
    recorded; the admin only views them.
    """

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(Post)
class PostAdmin(ContentAdmin):
    list_display = ["title", "web_log", "status", "permalink", "published_on", "updated_on"]
    list_filter = ["web_log", "status", "published_on"]
    search_fields = ["title", "permalink", "text"]
    date_hierarchy = "published_on"
    inlines = [PostTagInline, PostPermalinkInline, PostRevisionInline]


@admin.register(Page)
class PageAdmin(ContentAdmin):
    list_display = ["title", "web_log", "permalink", "is_in_page_list", "updated_on"]
    list_filter = ["web_log", "is_in_page_list"]
    search_fields = ["title", "text"]
    inlines = [PagePermalinkInline, PageRevisionInline]


@admin.register(TagMap)
class TagMapAdmin(admin.ModelAdmin):
    list_display = ["tag", "url_value", "web_log"]
    list_filter = ["web_log"]
    search_fields = ["tag", "url_value"]
