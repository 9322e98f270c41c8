"""
Configuration settings for django-weblog-engine.

Override these in your Django settings.py:

    WEBLOG_ENGINE = {
        'DATA_BACKEND': 'weblog_engine.data.orm.OrmWebLogData',
        'POSTS_PER_PAGE': 10,
        'TRAILING_SLASH_REDIRECTS': True,
        ...
    }

To run without a database (tests, previews), point the engine at the
in-memory document store:

    WEBLOG_ENGINE = {
        'DATA_BACKEND': 'weblog_engine.data.documents.DocumentWebLogData',
    }
"""
import functools

from django.conf import settings
from django.utils.module_loading import import_string

DEFAULTS = {
    # Persistence
    "DATA_BACKEND": "weblog_engine.data.orm.OrmWebLogData",

    # Listings
    "POSTS_PER_PAGE": 10,
    "ADMIN_POSTS_PER_PAGE": 25,

    # Value of WebLog.default_page that puts the post list on the home page
    "DEFAULT_PAGE_POSTS": "posts",

    # Redirect "a/b/" to "a/b" (and back) when only the trailing slash differs
    "TRAILING_SLASH_REDIRECTS": True,

    # Content
    "DEFAULT_SOURCE_FORMAT": "HTML",
    "MARKDOWN_EXTENSIONS": ["extra"],
}


class EngineSettings:
    """
    Lazy settings object that reads from Django settings.

    Access via: from weblog_engine.conf import engine_settings
    """

    def __getattr__(self, name):
        if name not in DEFAULTS:
            raise AttributeError(f"Invalid weblog_engine setting: {name}")

        user_settings = getattr(settings, "WEBLOG_ENGINE", {})
        return user_settings.get(name, DEFAULTS[name])


engine_settings = EngineSettings()


@functools.lru_cache(maxsize=None)
def get_data_backend():
    """
    Return the configured persistence backend.

    The instance is shared for the life of the process so the in-memory
    document store keeps its contents between requests.
    """
    backend_class = import_string(engine_settings.DATA_BACKEND)
    return backend_class()


def reset_data_backend(*, setting, **kwargs):
    """`setting_changed` receiver; forget the backend when WEBLOG_ENGINE changes."""
    if setting == "WEBLOG_ENGINE":
        get_data_backend.cache_clear()
