"""Nextcloud OCS API exposed as queryable tables."""

__version__ = "0.1.0"
