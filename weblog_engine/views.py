"""
Views for django-weblog-engine.

Thin JSON views over the content core; theming and templates belong to the
host project.
"""
from django.contrib.auth.mixins import LoginRequiredMixin
from django.http import Http404, HttpResponsePermanentRedirect, JsonResponse
from django.urls import reverse
from django.views import View

from .categories import CategoryStore
from .conf import engine_settings, get_data_backend
from .entities import PostFilter
from .pager import PostPager
from .permalinks import (
    CategoryListResult,
    NotFound,
    PageResult,
    PermalinkResolver,
    PostListResult,
    PostResult,
    RedirectTo,
    TagListResult,
)


def revision_json(revision):
    return {
        "as_of": revision.as_of,
        "source_format": revision.source_format.value,
        "text": revision.text,
    }


def post_json(post, include_history=False):
    data = {
        "id": post.id,
        "title": post.title,
        "permalink": post.permalink,
        "status": post.status.value,
        "author_id": post.author_id,
        "published_on": post.published_on,
        "updated_on": post.updated_on,
        "text": post.text,
        "category_ids": sorted(post.category_ids),
        "tags": list(post.tags),
    }
    if include_history:
        data["prior_permalinks"] = list(post.prior_permalinks)
        data["revisions"] = [revision_json(r) for r in post.revisions]
    return data


def page_json(page):
    return {
        "id": page.id,
        "title": page.title,
        "permalink": page.permalink,
        "author_id": page.author_id,
        "published_on": page.published_on,
        "updated_on": page.updated_on,
        "is_in_page_list": page.is_in_page_list,
        "text": page.text,
    }


def posts_page_json(posts_page):
    return {
        "page": posts_page.page_nbr,
        "posts": [post_json(p) for p in posts_page.items],
        "has_newer": posts_page.has_newer,
        "has_older": posts_page.has_older,
    }


def _page_nbr(request):
    try:
        page_nbr = int(request.GET.get("page", 1))
    except ValueError:
        raise Http404("Invalid page number")
    if page_nbr < 1:
        raise Http404("Invalid page number")
    return page_nbr


class WebLogView(View):
    """Base view; looks up the web log named in the URL."""

    def dispatch(self, request, *args, **kwargs):
        self.data = get_data_backend()
        self.web_log = self.data.web_log_by_slug(kwargs["web_log"])
        if self.web_log is None:
            raise Http404("Web log not found")
        return super().dispatch(request, *args, **kwargs)

    def link(self, permalink):
        base = reverse("weblog_engine:home", kwargs={"web_log": self.web_log.slug})
        return base + permalink.lstrip("/")

    def render_result(self, result):
        if isinstance(result, NotFound):
            raise Http404("No content found")
        if isinstance(result, RedirectTo):
            return HttpResponsePermanentRedirect(self.link(result.path))
        if isinstance(result, PostResult):
            newer, older = PostPager(self.data).surrounding(self.web_log.id, result.post)
            return JsonResponse({
                "post": post_json(result.post),
                "newer": newer.permalink if newer else None,
                "older": older.permalink if older else None,
            })
        if isinstance(result, PageResult):
            return JsonResponse({"page": page_json(result.page), "is_default": result.is_default})
        if isinstance(result, CategoryListResult):
            payload = posts_page_json(result.posts_page)
            payload["category"] = {
                "id": result.category.id,
                "name": result.category.name,
                "slug": result.category.slug,
                "description": result.category.description,
            }
            return JsonResponse(payload)
        if isinstance(result, TagListResult):
            payload = posts_page_json(result.posts_page)
            payload["tag"] = result.tag
            return JsonResponse(payload)
        if isinstance(result, PostListResult):
            return JsonResponse(posts_page_json(result.posts_page))
        raise TypeError(f"Unexpected resolution {result!r}")


class HomeView(WebLogView):
    """Web log root: the post list or the default page."""

    def get(self, request, web_log):
        return self.render_result(PermalinkResolver(self.data).resolve_home(self.web_log))


class PostListView(WebLogView):
    """Numbered pages of published posts."""

    def get(self, request, web_log, page_nbr):
        return self.render_result(PermalinkResolver(self.data).resolve_posts(self.web_log, page_nbr))


class CategoryPostListView(WebLogView):
    """Posts in a category, including its subcategories."""

    def get(self, request, web_log, slug):
        resolver = PermalinkResolver(self.data)
        return self.render_result(resolver.resolve_category(self.web_log, slug, _page_nbr(request)))


class TagPostListView(WebLogView):
    """Posts with a specific tag."""

    def get(self, request, web_log, tag):
        resolver = PermalinkResolver(self.data)
        return self.render_result(resolver.resolve_tag(self.web_log, tag, _page_nbr(request)))


class CategoryListView(WebLogView):
    """Categories in display order, with post counts."""

    def get(self, request, web_log):
        rows = CategoryStore(self.data).list_for_display(self.web_log.id)
        return JsonResponse({
            "categories": [
                {
                    "id": row.id,
                    "slug": row.slug,
                    "name": row.name,
                    "description": row.description,
                    "parent_names": row.parent_names,
                    "depth": row.depth,
                    "post_count": row.post_count,
                }
                for row in rows
            ]
        })


class AdminPostListView(LoginRequiredMixin, WebLogView):
    """All posts, drafts included, for the admin area."""

    def get(self, request, web_log):
        posts_page = PostPager(self.data).get_posts_page(
            self.web_log.id,
            PostFilter.admin(),
            _page_nbr(request),
            engine_settings.ADMIN_POSTS_PER_PAGE,
        )
        return JsonResponse(posts_page_json(posts_page))


class PermalinkView(WebLogView):
    """Catch-all: a post, a page, or a redirect from an old address."""

    def get(self, request, web_log, permalink):
        return self.render_result(PermalinkResolver(self.data).resolve(self.web_log, permalink))
