"""Tests for byte accounting and feed bucket packing."""

import unittest

from mdarchive.feed.packer import (
    PER_BUCKET_BYTES,
    TOTAL_BYTES,
    bucket_size,
    pack_items,
    truncate_item,
)
from mdarchive.models import FeedItem, dump_feed_items
from mdarchive.sizing import byte_length, slice_utf16


def _item(i, content, title=None):
    return FeedItem(
        id=f"id{i}",
        title=title if title is not None else f"Title {i}",
        url=f"https://docs.google.com/document/d/id{i}/edit",
        content=content,
    )


class TestSizing(unittest.TestCase):
    def test_byte_length(self):
        self.assertEqual(byte_length(""), 0)
        self.assertEqual(byte_length("abc"), 3)
        self.assertEqual(byte_length("\x7f"), 1)
        self.assertEqual(byte_length("é"), 3)
        self.assertEqual(byte_length("あ"), 3)
        self.assertEqual(byte_length("😀"), 6)

    def test_slice_utf16(self):
        self.assertEqual(slice_utf16("abc", 0), "")
        self.assertEqual(slice_utf16("abc", 2), "ab")
        self.assertEqual(slice_utf16("abc", 10), "abc")
        self.assertEqual(slice_utf16("a😀b", 2), "a")
        self.assertEqual(slice_utf16("a😀b", 3), "a😀")

    def test_serialization_is_compact(self):
        item = FeedItem(id="a", title="t", url="u", content="あ")
        payload = dump_feed_items([item])
        self.assertEqual(payload, '[{"id":"a","title":"t","url":"u","content":"あ"}]')
        self.assertEqual(bucket_size([item]), byte_length(payload))


class TestTruncation(unittest.TestCase):
    def test_fitting_item_is_unchanged(self):
        item = _item(1, "short")
        self.assertIs(truncate_item(item), item)

    def test_oversized_item_is_cut_with_ellipsis(self):
        item = _item(1, "あ" * 4000)
        fitted = truncate_item(item)

        base = bucket_size([item.model_copy(update={"content": ""})])
        safe = (PER_BUCKET_BYTES - base - 10) // 3
        self.assertLessEqual(bucket_size([fitted]), PER_BUCKET_BYTES)
        self.assertTrue(fitted.content.endswith("..."))
        self.assertEqual(fitted.content[:-3], "あ" * safe)
        self.assertEqual((fitted.id, fitted.title, fitted.url), (item.id, item.title, item.url))

    def test_escaped_content_still_fits(self):
        fitted = truncate_item(_item(1, "\x01" * 5000))
        self.assertLessEqual(bucket_size([fitted]), PER_BUCKET_BYTES)
        self.assertTrue(fitted.content.endswith("..."))

    def test_astral_characters_are_not_split(self):
        fitted = truncate_item(_item(1, "😀" * 3000))
        self.assertLessEqual(bucket_size([fitted]), PER_BUCKET_BYTES)
        self.assertEqual(set(fitted.content[:-3]), {"😀"})


class TestPackItems(unittest.TestCase):
    def test_empty_input(self):
        result = pack_items([])
        self.assertEqual(result.buckets, [])
        self.assertEqual(result.total_bytes, 0)
        self.assertFalse(result.exhausted)

    def test_small_items_share_one_bucket(self):
        items = [_item(i, f"Content {i}") for i in range(15)]
        result = pack_items(items)
        self.assertEqual(len(result.buckets), 1)
        self.assertEqual(result.buckets[0], items)
        self.assertEqual(result.sizes, [bucket_size(items)])
        self.assertEqual(result.dropped, 0)

    def test_order_is_preserved_across_buckets(self):
        items = [_item(i, "x" * 4000) for i in range(5)]
        result = pack_items(items)
        self.assertEqual([len(b) for b in result.buckets], [2, 2, 1])
        flattened = [item.id for bucket in result.buckets for item in bucket]
        self.assertEqual(flattened, [item.id for item in items])
        for size in result.sizes:
            self.assertLessEqual(size, PER_BUCKET_BYTES)

    def test_truncated_item_in_its_own_bucket(self):
        result = pack_items([_item(1, "あ" * 4000)])
        self.assertEqual(len(result.buckets), 1)
        content = result.buckets[0][0].content
        self.assertTrue(content.endswith("..."))
        self.assertLessEqual(result.sizes[0], PER_BUCKET_BYTES)

    def test_total_ceiling_is_enforced(self):
        items = [_item(i, "あ" * 2900) for i in range(60)]
        result = pack_items(items)

        self.assertTrue(result.exhausted)
        self.assertGreater(result.dropped, 0)
        self.assertEqual(result.packed + result.dropped, 60)
        self.assertLessEqual(result.total_bytes, TOTAL_BYTES)
        self.assertEqual(sum(result.sizes), result.total_bytes)
        self.assertLessEqual(len(result.buckets), 51)
        self.assertTrue(all(len(b) == 1 for b in result.buckets))
        kept = [b[0].id for b in result.buckets]
        self.assertEqual(kept, [f"id{i}" for i in range(len(kept))])

    def test_item_with_oversized_metadata_is_dropped(self):
        items = [_item(1, "a"), _item(2, "b", title="t" * 9500), _item(3, "c")]
        result = pack_items(items)
        self.assertEqual([i.id for i in result.buckets[0]], ["id1", "id3"])
        self.assertEqual(result.dropped, 1)
        self.assertFalse(result.exhausted)

    def test_custom_limits(self):
        items = [_item(i, "x" * 50) for i in range(10)]
        per = bucket_size(items[:3])
        result = pack_items(items, per_bucket_bytes=per, total_bytes=per * 2)
        self.assertEqual([len(b) for b in result.buckets], [3, 3])
        self.assertTrue(result.exhausted)
        self.assertEqual(result.dropped, 4)


if __name__ == "__main__":
    unittest.main()
