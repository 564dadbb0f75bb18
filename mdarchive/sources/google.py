"""
Google Drive/Docs REST source.

Thin transport over ``requests``: bearer-token auth, JSON responses, and HTTP
status codes mapped onto the datasource error taxonomy (404 -> not found,
401/403 -> access denied, 429 -> rate limited, anything else ->
DocumentSourceError). Decoded documents are kept in memory for the lifetime of
the source.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

import requests

from ..decoding import DecodedDocument
from ..domain import DOCUMENT_MIME_TYPE, Block, DocumentRef, FileInfo
from .base import (
    DocumentAccessDenied,
    DocumentNotFound,
    DocumentRateLimited,
    DocumentSourceError,
    decode_payload,
    sort_by_name_desc,
)

LOGGER = logging.getLogger(__name__)

DRIVE_URL = "https://www.googleapis.com/drive/v3"
DOCS_URL = "https://docs.googleapis.com/v1"


class GoogleDocsSource:
    def __init__(
        self,
        token: str,
        session: Optional[requests.Session] = None,
        drive_url: str = DRIVE_URL,
        docs_url: str = DOCS_URL,
        timeout: float = 30.0,
    ):
        self._session = session or requests.Session()
        self._session.headers.update({"Authorization": f"Bearer {token}"})
        self._drive_url = drive_url.rstrip("/")
        self._docs_url = docs_url.rstrip("/")
        self._timeout = timeout
        self._decoded: Dict[str, DecodedDocument] = {}
        LOGGER.debug("Initialized GoogleDocsSource drive=%s docs=%s", self._drive_url, self._docs_url)

    def _get(self, url: str, params: Optional[Dict[str, str]] = None) -> Dict:
        LOGGER.info("GET %s", url)
        try:
            resp = self._session.get(url, params=params, timeout=self._timeout)
        except requests.RequestException as exc:
            LOGGER.error("GET %s failed: %s", url, exc)
            raise DocumentSourceError(f"Request failed: {exc}") from exc
        code = getattr(resp, "status_code", 0)
        LOGGER.debug("GET %s returned status %d", url, code)
        if code == 404:
            raise DocumentNotFound(f"HTTP 404: {url}")
        if code in (401, 403):
            LOGGER.error("GET %s failed with auth error: %d", url, code)
            raise DocumentAccessDenied(f"HTTP {code}: access denied")
        if code == 429:
            retry_after = None
            try:
                hdr = resp.headers.get("Retry-After")
                if hdr:
                    retry_after = float(hdr)
            except (TypeError, ValueError):
                retry_after = None
            LOGGER.warning("GET %s was rate-limited. Retry after: %s", url, retry_after)
            raise DocumentRateLimited("HTTP 429: rate limited", retry_after=retry_after)
        if code >= 400:
            LOGGER.error("GET %s failed with code %d", url, code)
            raise DocumentSourceError(f"HTTP {code}")
        try:
            return resp.json()
        except ValueError as exc:
            LOGGER.error("Failed to parse JSON response from %s", url)
            raise DocumentSourceError("Invalid JSON response") from exc

    def _load(self, doc_id: str) -> DecodedDocument:
        cached = self._decoded.get(doc_id)
        if cached is not None:
            return cached
        payload = self._get(f"{self._docs_url}/documents/{doc_id}")
        doc = decode_payload(payload, doc_id)
        self._decoded[doc_id] = doc
        return doc

    # DocumentSource
    def get_blocks(self, doc_id: str) -> List[Block]:
        return list(self._load(doc_id).blocks)

    def get_title(self, doc_id: str) -> str:
        return self._load(doc_id).title

    # ListingSource
    def list_documents(self, folder_id: str) -> List[DocumentRef]:
        query = (
            f"'{folder_id}' in parents and mimeType='{DOCUMENT_MIME_TYPE}' "
            "and trashed=false"
        )
        refs: List[DocumentRef] = []
        page_token: Optional[str] = None
        while True:
            params = {
                "q": query,
                "fields": "nextPageToken,files(id,name)",
                "pageSize": "1000",
            }
            if page_token:
                params["pageToken"] = page_token
            data = self._get(f"{self._drive_url}/files", params=params)
            for f in data.get("files") or []:
                refs.append(DocumentRef(id=f["id"], name=f.get("name") or ""))
            page_token = data.get("nextPageToken")
            if not page_token:
                break
        LOGGER.debug("Listed %d documents in folder %s", len(refs), folder_id)
        return sort_by_name_desc(refs)

    def list_document_ids(self, folder_id: str) -> List[str]:
        return [r.id for r in self.list_documents(folder_id)]

    def get_file_info(self, doc_id: str) -> FileInfo:
        data = self._get(
            f"{self._drive_url}/files/{doc_id}",
            params={"fields": "id,name,mimeType,parents"},
        )
        return FileInfo(
            id=data.get("id") or doc_id,
            name=data.get("name") or "",
            mime_type=data.get("mimeType") or "",
            parents=list(data.get("parents") or []),
        )
