"""
URL configuration for testing django-weblog-engine.
"""
from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("sites/", include("weblog_engine.urls")),
]
