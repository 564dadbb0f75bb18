"""Document and listing sources for the archive."""

from .base import (
    DocumentAccessDenied,
    DocumentNotFound,
    DocumentRateLimited,
    DocumentSource,
    DocumentSourceError,
    ListingSource,
)
from .google import GoogleDocsSource
from .local import LocalDocumentSource

__all__ = [
    "DocumentSource",
    "ListingSource",
    "DocumentSourceError",
    "DocumentNotFound",
    "DocumentAccessDenied",
    "DocumentRateLimited",
    "GoogleDocsSource",
    "LocalDocumentSource",
]
