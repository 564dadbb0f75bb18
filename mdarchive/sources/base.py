"""
Datasource seams for the archive.

The renderer and service only ever talk to these Protocols:
  - DocumentSource: blocks and title of a single document
  - ListingSource: documents in a folder, plus per-file metadata

Implementations raise the errors below; callers treat every one of them as
"document not found" or "skip this item".
"""

from __future__ import annotations

import unicodedata
from typing import Any, Iterable, List, Optional, Protocol

from ..decoding import DecodedDocument, decode_document
from ..domain import Block, DocumentRef, FileInfo


class DocumentSourceError(Exception):
    """Base error for document/listing collaborators."""


class DocumentNotFound(DocumentSourceError):
    pass


class DocumentAccessDenied(DocumentSourceError):
    pass


class DocumentRateLimited(DocumentSourceError):
    def __init__(self, message: str, retry_after: Optional[float] = None):
        super().__init__(message)
        self.retry_after = retry_after


class DocumentSource(Protocol):
    def get_blocks(self, doc_id: str) -> List[Block]: ...

    def get_title(self, doc_id: str) -> str: ...


class ListingSource(Protocol):
    def list_documents(self, folder_id: str) -> List[DocumentRef]: ...

    def list_document_ids(self, folder_id: str) -> List[str]: ...

    def get_file_info(self, doc_id: str) -> FileInfo: ...


def name_sort_key(name: str) -> str:
    # Width- and case-insensitive ordering; close to a locale collation for
    # mixed kana/latin titles without requiring ICU.
    return unicodedata.normalize("NFKC", name or "").casefold()


def sort_by_name_desc(refs: Iterable[DocumentRef]) -> List[DocumentRef]:
    return sorted(refs, key=lambda r: name_sort_key(r.name), reverse=True)


def decode_payload(payload: Any, doc_id: str) -> DecodedDocument:
    """Decode a ``documents.get`` payload, reporting malformed shapes as source errors."""
    if not isinstance(payload, dict):
        raise DocumentSourceError(f"Unreadable document {doc_id}: not a JSON object")
    try:
        return decode_document(payload)
    except (AttributeError, TypeError, KeyError, ValueError) as exc:
        raise DocumentSourceError(f"Malformed document {doc_id}: {exc!r}") from exc
