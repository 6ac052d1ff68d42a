from __future__ import annotations


class SitemapError(Exception):
    """Base class for failures that abort a sitemap run."""


class ConfigError(SitemapError, ValueError):
    pass


class StoreError(SitemapError):
    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class EmptyResultError(SitemapError):
    pass
