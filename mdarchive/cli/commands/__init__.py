"""Command modules for the mdarchive CLI."""

from mdarchive.cli.commands import cache, docs, feed

__all__ = ["cache", "docs", "feed"]
