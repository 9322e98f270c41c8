"""
django-weblog-engine - the content core of a multi-tenant blog platform.

Features:
- Permalink resolution to posts, pages, or permanent redirects from prior permalinks
- Hierarchical categories with grandparent adoption on delete
- Deterministically ordered, paginated post listings with newer/older navigation
- Append-only revision and permalink history on every content edit
- Pluggable persistence (Django ORM or in-memory document store)
"""

__version__ = "0.1.0"
