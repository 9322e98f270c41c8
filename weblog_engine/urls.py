"""
URL configuration for django-weblog-engine.

Include in your project urls.py:

    path('sites/', include('weblog_engine.urls')),
"""
from django.urls import path

from . import views

app_name = "weblog_engine"

urlpatterns = [
    # Post lists
    path("<slug:web_log>/", views.HomeView.as_view(), name="home"),
    path("<slug:web_log>/page/<int:page_nbr>", views.PostListView.as_view(), name="post_list"),

    # Categories and tags
    path("<slug:web_log>/categories", views.CategoryListView.as_view(), name="category_list"),
    path("<slug:web_log>/category/<path:slug>", views.CategoryPostListView.as_view(), name="category_detail"),
    path("<slug:web_log>/tag/<str:tag>", views.TagPostListView.as_view(), name="tag_detail"),

    # Admin
    path("<slug:web_log>/admin/posts", views.AdminPostListView.as_view(), name="admin_posts"),

    # Everything else is a permalink
    path("<slug:web_log>/<path:permalink>", views.PermalinkView.as_view(), name="permalink"),
]
