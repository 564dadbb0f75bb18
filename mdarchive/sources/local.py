"""
Directory-backed document and listing source.

Layout::

    <root>/<doc_id>.json   Docs API ``documents.get`` payloads
    <root>/folder.json     optional manifest: [{"id", "name", "parents", "mimeType"}]

Without a manifest every payload is a document named after its title and
parented to ``default_folder``.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Dict, List, Optional

from ..decoding import DecodedDocument
from ..domain import DOCUMENT_MIME_TYPE, Block, DocumentRef, FileInfo
from .base import (
    DocumentNotFound,
    DocumentSourceError,
    decode_payload,
    sort_by_name_desc,
)

LOGGER = logging.getLogger(__name__)

MANIFEST_NAME = "folder.json"


class LocalDocumentSource:
    def __init__(self, root: str, default_folder: str = "root"):
        self.root = Path(root)
        self.default_folder = default_folder
        self._decoded: Dict[str, DecodedDocument] = {}
        self._files: Optional[Dict[str, FileInfo]] = None

    def _path_for(self, doc_id: str) -> Path:
        if not doc_id or os.sep in doc_id or "/" in doc_id or doc_id.startswith("."):
            raise DocumentNotFound(f"Document not found: {doc_id}")
        return self.root / f"{doc_id}.json"

    def _load(self, doc_id: str) -> DecodedDocument:
        cached = self._decoded.get(doc_id)
        if cached is not None:
            return cached
        path = self._path_for(doc_id)
        if not path.exists():
            raise DocumentNotFound(f"Document not found: {doc_id}")
        try:
            with path.open("r", encoding="utf-8") as fh:
                payload = json.load(fh)
        except (OSError, ValueError) as exc:
            raise DocumentSourceError(f"Unreadable document {doc_id}: {exc}") from exc
        if not isinstance(payload, dict):
            raise DocumentSourceError(f"Unreadable document {doc_id}: not a JSON object")
        payload.setdefault("documentId", doc_id)
        doc = decode_payload(payload, doc_id)
        self._decoded[doc_id] = doc
        return doc

    # DocumentSource
    def get_blocks(self, doc_id: str) -> List[Block]:
        return list(self._load(doc_id).blocks)

    def get_title(self, doc_id: str) -> str:
        return self._load(doc_id).title

    # ListingSource
    def _scan(self) -> Dict[str, FileInfo]:
        if self._files is not None:
            return self._files
        files: Dict[str, FileInfo] = {}
        manifest = self.root / MANIFEST_NAME
        if manifest.exists():
            try:
                with manifest.open("r", encoding="utf-8") as fh:
                    entries = json.load(fh)
            except (OSError, ValueError) as exc:
                raise DocumentSourceError(f"Unreadable manifest: {exc}") from exc
            for entry in entries or []:
                doc_id = str(entry.get("id") or "")
                if not doc_id:
                    continue
                files[doc_id] = FileInfo(
                    id=doc_id,
                    name=str(entry.get("name") or doc_id),
                    mime_type=str(entry.get("mimeType") or DOCUMENT_MIME_TYPE),
                    parents=list(entry.get("parents") or [self.default_folder]),
                )
        else:
            for path in sorted(self.root.glob("*.json")):
                doc_id = path.stem
                try:
                    name = self.get_title(doc_id) or doc_id
                except DocumentSourceError as exc:
                    LOGGER.warning("Skipping %s: %s", path, exc)
                    continue
                files[doc_id] = FileInfo(
                    id=doc_id,
                    name=name,
                    mime_type=DOCUMENT_MIME_TYPE,
                    parents=[self.default_folder],
                )
        LOGGER.debug("Scanned %d local files under %s", len(files), self.root)
        self._files = files
        return files

    def list_documents(self, folder_id: str) -> List[DocumentRef]:
        refs = [
            DocumentRef(id=f.id, name=f.name)
            for f in self._scan().values()
            if f.mime_type == DOCUMENT_MIME_TYPE and folder_id in f.parents
        ]
        return sort_by_name_desc(refs)

    def list_document_ids(self, folder_id: str) -> List[str]:
        return [r.id for r in self.list_documents(folder_id)]

    def get_file_info(self, doc_id: str) -> FileInfo:
        info = self._scan().get(doc_id)
        if info is None:
            raise DocumentNotFound(f"File not found: {doc_id}")
        return info
