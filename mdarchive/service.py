"""
High-level archive service.

Public API:
  - ArchiveService.get_article(doc_id) -> Article
  - ArchiveService.get_document_payload(doc_id) -> str (JSON)
  - ArchiveService.list_payload() -> str (JSON)
  - ArchiveService.precache_all() -> int
  - ArchiveService.clear_cache_all() -> None
  - ArchiveService.repack_feed() -> Optional[PackResult]
  - ArchiveService.feed_xml() -> str
  - ArchiveService.handle_request(params) -> Response

Every collaborator call is wrapped: reads degrade to misses, writes are
fire-and-forget, and user-visible failures are JSON error payloads.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional

from .config import ArchiveConfig
from .domain import DOCUMENT_MIME_TYPE, FileInfo
from .feed import RSS_MIME_TYPE, BucketIndexStore, PackResult, assemble_feed, pack_items
from .logbuffer import PropertyLogHandler, captured
from .models import (
    Article,
    ErrorResponse,
    FeedItem,
    ListResponse,
    dump_ids,
    load_article,
    load_ids,
)
from .rendering import DocumentRenderer
from .sizing import byte_length
from .sources.base import DocumentSource, DocumentSourceError, ListingSource
from .storage import CacheTier, PropertyStore

LOGGER = logging.getLogger(__name__)

JSON_MIME_TYPE = "application/json"
NOT_FOUND_MESSAGE = "Document not found"


# ----------------------------- Service Errors --------------------------------


class ArchiveError(Exception):
    """Base archive service error."""


class DocumentNotFoundError(ArchiveError):
    pass


@dataclass(frozen=True)
class Response:
    body: str
    mime_type: str = JSON_MIME_TYPE


# ----------------------------- ArchiveService --------------------------------


class ArchiveService:
    def __init__(
        self,
        documents: DocumentSource,
        listing: ListingSource,
        cache: CacheTier,
        properties: PropertyStore,
        config: Optional[ArchiveConfig] = None,
        log_handler: Optional[PropertyLogHandler] = None,
    ):
        self.documents = documents
        self.listing = listing
        self.cache = cache
        self.properties = properties
        self.config = config or ArchiveConfig()
        self.renderer = DocumentRenderer()
        self.index = BucketIndexStore(properties, self.config)
        self.log_handler = log_handler or PropertyLogHandler(
            properties, key=self.config.log_key, capacity=self.config.log_capacity
        )

    # ----------------------------- cache helpers -----------------------------

    def _cache_get(self, key: str) -> Optional[str]:
        try:
            return self.cache.get(key)
        except Exception as exc:
            LOGGER.warning("Cache get failed for %s: %s", key, exc)
            return None

    def _cache_get_all(self, keys: List[str]) -> Dict[str, str]:
        if not keys:
            return {}
        try:
            return self.cache.get_all(keys) or {}
        except Exception as exc:
            LOGGER.warning("Cache getAll failed for %d keys: %s", len(keys), exc)
            return {}

    # ---------------------------- document access ----------------------------

    def get_doc_info(self, doc_id: str) -> Optional[FileInfo]:
        """Return file metadata when ``doc_id`` is a document in the managed folder."""
        try:
            info = self.listing.get_file_info(doc_id)
        except Exception as exc:
            LOGGER.info("File lookup failed for %s: %s", doc_id, exc)
            return None
        if info.mime_type != DOCUMENT_MIME_TYPE:
            LOGGER.info("Not a document: %s (%s)", doc_id, info.mime_type)
            return None
        if self.config.folder_id not in info.parents:
            LOGGER.info("Document %s is outside folder %s", doc_id, self.config.folder_id)
            return None
        return info

    def render(self, doc_id: str) -> Article:
        """Render without a membership check. Source errors propagate."""
        return self.renderer.render_article(self.documents, doc_id)

    def get_article(self, doc_id: str) -> Article:
        """
        Render a managed document.
        Raises DocumentNotFoundError for unknown ids, non-documents, documents
        outside the folder, and any source failure.
        """
        if not doc_id or self.get_doc_info(doc_id) is None:
            raise DocumentNotFoundError(f"{NOT_FOUND_MESSAGE}: {doc_id}")
        try:
            return self.render(doc_id)
        except DocumentSourceError as exc:
            LOGGER.warning("Source failure for %s: %s", doc_id, exc)
            raise DocumentNotFoundError(f"{NOT_FOUND_MESSAGE}: {doc_id}") from exc
        except Exception as exc:
            LOGGER.error("Failed to render %s: %r", doc_id, exc)
            raise DocumentNotFoundError(f"{NOT_FOUND_MESSAGE}: {doc_id}") from exc

    def get_document_payload(self, doc_id: str) -> str:
        """Cached JSON if present, else a fresh render (not written back)."""
        cached = self._cache_get(doc_id)
        if cached:
            LOGGER.debug("Cache hit for %s", doc_id)
            return cached
        try:
            article = self.get_article(doc_id)
        except DocumentNotFoundError:
            return ErrorResponse(error=NOT_FOUND_MESSAGE).model_dump_json()
        return article.model_dump_json()

    def list_ids(self) -> List[str]:
        """Document ids from the list cache, falling back to the listing source."""
        ids = load_ids(self._cache_get(self.config.list_cache_key))
        if ids is not None:
            return ids
        try:
            return self.listing.list_document_ids(self.config.folder_id)
        except Exception as exc:
            LOGGER.error("Failed to list folder %s: %s", self.config.folder_id, exc)
            return []

    def list_payload(self) -> str:
        ids = self.list_ids()
        window = ids[: self.config.precache_limit]
        hits = self._cache_get_all(window)
        articles: List[Article] = []
        for doc_id in window:
            article = load_article(hits.get(doc_id))
            if article is None:
                try:
                    article = self.render(doc_id)
                except Exception as exc:
                    LOGGER.warning("Error fetching article %s: %s", doc_id, exc)
                    continue
            articles.append(article)
        return ListResponse(ids=ids, article_cache=articles).model_dump_json()

    # ------------------------------ cache jobs -------------------------------

    def precache_all(self) -> int:
        """Cache the id list and the first ``precache_limit`` articles."""
        saved = 0
        with captured(self.log_handler):
            self.log_handler.clear()
            LOGGER.info("Logs cleared")
            try:
                ids = self.listing.list_document_ids(self.config.folder_id)
            except Exception as exc:
                LOGGER.error("Failed to list folder %s: %s", self.config.folder_id, exc)
                return saved

            try:
                self.cache.put(self.config.list_cache_key, dump_ids(ids), self.config.cache_ttl)
            except Exception as exc:
                LOGGER.error("Failed to save list: %s", exc)

            for doc_id in ids[: self.config.precache_limit]:
                try:
                    payload = self.render(doc_id).model_dump_json()
                    size = byte_length(payload)
                    if size > self.config.cache_size_limit:
                        LOGGER.warning(
                            "Skipping ID:%s: %d bytes exceeds cache limit %d",
                            doc_id,
                            size,
                            self.config.cache_size_limit,
                        )
                        continue
                    self.cache.put(doc_id, payload, self.config.cache_ttl)
                    saved += 1
                except Exception as exc:
                    LOGGER.error("Failed to save ID:%s: %s", doc_id, exc)
            LOGGER.info("Precached %d of %d documents", saved, len(ids))
        return saved

    def clear_cache_all(self) -> None:
        try:
            ids = self.listing.list_document_ids(self.config.folder_id)
        except Exception as exc:
            LOGGER.error("Failed to list folder %s: %s", self.config.folder_id, exc)
            ids = []
        try:
            self.cache.remove_all([self.config.list_cache_key, *ids])
        except Exception as exc:
            LOGGER.error("Failed to clear cache: %s", exc)
            return
        LOGGER.info("Cache cleared")

    # --------------------------------- feed ----------------------------------

    def feed_item(self, article: Article) -> FeedItem:
        return FeedItem(
            id=article.id,
            title=article.title,
            url=self.config.document_url(article.id),
            content=article.markdown,
        )

    def _resolve_article(self, doc_id: str) -> Article:
        article = load_article(self.cache.get(doc_id))
        if article is None:
            article = self.render(doc_id)
        return article

    def repack_feed(self) -> Optional[PackResult]:
        """Rebuild the feed buckets from cached (or freshly rendered) articles.

        Returns None when there is nothing to pack or the job failed.
        """
        with captured(self.log_handler):
            try:
                ids = load_ids(self.cache.get(self.config.list_cache_key))
                if ids is None:
                    LOGGER.warning("RSS Cache: article list is not cached")
                    return None

                items: List[FeedItem] = []
                for doc_id in ids:
                    try:
                        items.append(self.feed_item(self._resolve_article(doc_id)))
                    except Exception as exc:
                        LOGGER.warning(
                            "RSS Cache: Failed to fetch article %s: %s", doc_id, exc
                        )

                result = pack_items(
                    items, self.config.per_bucket_bytes, self.config.total_bytes
                )
                result.keys = self.index.commit(result.buckets)
                LOGGER.info(
                    "RSS Cache: %d items in %d buckets (%d bytes)",
                    result.packed,
                    len(result.keys),
                    result.total_bytes,
                )
                return result
            except Exception as exc:
                LOGGER.error("RSS Cache Error: %s", exc)
                return None

    def feed_xml(self) -> str:
        return assemble_feed(self.properties, self.config)

    def read_logs(self) -> str:
        return self.log_handler.read()

    # ------------------------------- dispatch --------------------------------

    def handle_request(self, params: Optional[Mapping[str, str]] = None) -> Response:
        params = params or {}
        if params.get("o") == "rss":
            return Response(self.feed_xml(), RSS_MIME_TYPE)
        doc_id = params.get("id")
        if doc_id:
            return Response(self.get_document_payload(doc_id))
        return Response(self.list_payload())
