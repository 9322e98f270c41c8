"""
Persistence backends for django-weblog-engine.

    from weblog_engine.data import WebLogData, get_data_backend

``get_data_backend()`` returns the backend named by
``WEBLOG_ENGINE["DATA_BACKEND"]``.
"""
from ..conf import get_data_backend
from .base import WebLogData

__all__ = ["WebLogData", "get_data_backend"]
