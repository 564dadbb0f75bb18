"""Tests for the local and Google document sources."""

import json
import os
import shutil
import tempfile
import unittest
from unittest.mock import MagicMock, Mock

import requests

from mdarchive.domain import DOCUMENT_MIME_TYPE, DocumentRef
from mdarchive.rendering import render_document
from mdarchive.sources import (
    DocumentAccessDenied,
    DocumentNotFound,
    DocumentRateLimited,
    DocumentSourceError,
    GoogleDocsSource,
    LocalDocumentSource,
)
from mdarchive.sources.base import sort_by_name_desc

FIXTURES = os.path.join(os.path.dirname(__file__), "fixtures", "docs")


class TestLocalDocumentSource(unittest.TestCase):
    def setUp(self):
        self.source = LocalDocumentSource(FIXTURES, default_folder="archive")

    def test_manifest_listing(self):
        self.assertEqual(
            self.source.list_documents("archive"),
            [DocumentRef("doc-table", "2024-02 Table"), DocumentRef("doc-hello", "2024-01 Hello")],
        )
        self.assertEqual(self.source.list_document_ids("elsewhere"), [])

    def test_file_info(self):
        info = self.source.get_file_info("sheet-1")
        self.assertEqual(info.mime_type, "application/vnd.google-apps.spreadsheet")
        self.assertEqual(self.source.get_file_info("doc-hello").mime_type, DOCUMENT_MIME_TYPE)
        with self.assertRaises(DocumentNotFound):
            self.source.get_file_info("missing")

    def test_document_content(self):
        self.assertEqual(self.source.get_title("doc-table"), "Quarterly <Report>")
        self.assertEqual(
            render_document(self.source.get_blocks("doc-table")),
            "**Totals** below\n\n| Item | Cost |\n| --- | --- |\n| Paper\\|Ink | 12 |\n",
        )

    def test_rejects_unknown_and_path_like_ids(self):
        for doc_id in ("missing", "../doc-hello", "sub/doc", ".hidden", ""):
            with self.subTest(doc_id=doc_id):
                with self.assertRaises(DocumentNotFound):
                    self.source.get_blocks(doc_id)

    def test_directory_without_manifest(self):
        tmp = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, tmp)
        shutil.copy(os.path.join(FIXTURES, "doc-hello.json"), tmp)
        shutil.copy(os.path.join(FIXTURES, "doc-table.json"), tmp)
        with open(os.path.join(tmp, "broken.json"), "w") as f:
            f.write("{")

        source = LocalDocumentSource(tmp)

        self.assertEqual(source.list_document_ids("root"), ["doc-table", "doc-hello"])
        self.assertEqual(source.get_file_info("doc-hello").name, "Hello")
        with self.assertRaises(DocumentSourceError):
            source.get_title("broken")

    def test_malformed_payloads_are_source_errors(self):
        tmp = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, tmp)
        with open(os.path.join(tmp, "list.json"), "w") as f:
            f.write("[]")
        with open(os.path.join(tmp, "badrun.json"), "w") as f:
            json.dump({"body": {"content": [{"paragraph": {"elements": [{"textRun": {"content": 5}}]}}]}}, f)

        source = LocalDocumentSource(tmp)

        for doc_id in ("list", "badrun"):
            with self.subTest(doc_id=doc_id):
                with self.assertRaises(DocumentSourceError):
                    source.get_blocks(doc_id)


class TestSortByName(unittest.TestCase):
    def test_descending_case_and_width_insensitive(self):
        refs = [DocumentRef("a", "apple"), DocumentRef("b", "Banana"), DocumentRef("c", "ｃｈｅｒｒｙ")]
        self.assertEqual([r.id for r in sort_by_name_desc(refs)], ["c", "b", "a"])


def _response(status_code=200, payload=None):
    resp = Mock()
    resp.status_code = status_code
    if isinstance(payload, Exception):
        resp.json.side_effect = payload
    else:
        resp.json.return_value = payload if payload is not None else {}
    return resp


class TestGoogleDocsSource(unittest.TestCase):
    def setUp(self):
        self.session = MagicMock()
        self.source = GoogleDocsSource("token-123", session=self.session)
        with open(os.path.join(FIXTURES, "doc-hello.json"), "r", encoding="utf-8") as f:
            self.payload = json.load(f)

    def test_sets_bearer_token(self):
        self.session.headers.update.assert_called_once_with({"Authorization": "Bearer token-123"})

    def test_fetches_and_caches_document(self):
        self.session.get.return_value = _response(payload=self.payload)

        self.assertEqual(self.source.get_title("doc-hello"), "Hello")
        self.assertEqual(render_document(self.source.get_blocks("doc-hello")), "# Hello\n\n- World\n")

        self.session.get.assert_called_once()
        url = self.session.get.call_args.args[0]
        self.assertEqual(url, "https://docs.googleapis.com/v1/documents/doc-hello")

    def test_status_codes_map_to_errors(self):
        cases = [
            (404, DocumentNotFound),
            (401, DocumentAccessDenied),
            (403, DocumentAccessDenied),
            (500, DocumentSourceError),
        ]
        for status, error in cases:
            with self.subTest(status=status):
                self.session.get.return_value = _response(status)
                with self.assertRaises(error):
                    self.source.get_file_info(f"doc-{status}")

    def test_rate_limit_carries_retry_after(self):
        resp = _response(429)
        resp.headers = {"Retry-After": "12"}
        self.session.get.return_value = resp

        with self.assertRaises(DocumentRateLimited) as ctx:
            self.source.get_blocks("doc-1")
        self.assertEqual(ctx.exception.retry_after, 12.0)

    def test_transport_and_json_errors(self):
        self.session.get.side_effect = requests.ConnectionError("offline")
        with self.assertRaises(DocumentSourceError):
            self.source.get_title("doc-1")

        self.session.get.side_effect = None
        self.session.get.return_value = _response(payload=ValueError("bad json"))
        with self.assertRaises(DocumentSourceError):
            self.source.get_title("doc-2")

    def test_non_object_document_is_source_error(self):
        self.session.get.return_value = _response(payload=["not", "a", "document"])
        with self.assertRaises(DocumentSourceError):
            self.source.get_title("doc-1")

    def test_file_info(self):
        self.session.get.return_value = _response(
            payload={"id": "doc-1", "name": "Notes", "mimeType": DOCUMENT_MIME_TYPE, "parents": ["folder"]}
        )
        info = self.source.get_file_info("doc-1")
        self.assertEqual((info.name, info.mime_type, info.parents), ("Notes", DOCUMENT_MIME_TYPE, ["folder"]))
        self.assertEqual(
            self.session.get.call_args.kwargs["params"], {"fields": "id,name,mimeType,parents"}
        )

    def test_listing_follows_pages(self):
        self.session.get.side_effect = [
            _response(payload={"files": [{"id": "a", "name": "2024-01"}], "nextPageToken": "p2"}),
            _response(payload={"files": [{"id": "b", "name": "2024-02"}]}),
        ]

        self.assertEqual(self.source.list_document_ids("folder-1"), ["b", "a"])

        first, second = self.session.get.call_args_list
        self.assertIn("'folder-1' in parents", first.kwargs["params"]["q"])
        self.assertNotIn("pageToken", first.kwargs["params"])
        self.assertEqual(second.kwargs["params"]["pageToken"], "p2")


if __name__ == "__main__":
    unittest.main()
