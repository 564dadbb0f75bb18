"""Tests for the persisted job log."""

import io
import logging
import unittest
from datetime import datetime
from unittest.mock import Mock, patch

from mdarchive.logbuffer import PropertyLogHandler, captured, keep_tail
from mdarchive.storage import MemoryPropertyStore


def _fixed_clock():
    return datetime(2024, 1, 1, 12, 0, 0)


class TestPropertyLogHandler(unittest.TestCase):
    def setUp(self):
        self.store = MemoryPropertyStore()
        self.handler = PropertyLogHandler(self.store, clock=_fixed_clock)
        self.logger = logging.getLogger("tests.logbuffer")
        self.logger.setLevel(logging.INFO)
        self.logger.propagate = False
        self.logger.addHandler(self.handler)

    def tearDown(self):
        self.logger.removeHandler(self.handler)

    def test_line_format(self):
        self.logger.info("test message")
        self.assertEqual(self.store.get_property("DEBUG_LOGS"), "[01/01 12:00:00] test message\n")

    def test_appends_to_existing_log(self):
        self.store.set_property("DEBUG_LOGS", "[01/01 11:00:00] old message\n")
        self.logger.info("new %s", "message")
        self.assertEqual(
            self.store.get_property("DEBUG_LOGS"),
            "[01/01 11:00:00] old message\n[01/01 12:00:00] new message\n",
        )

    def test_keeps_most_recent_tail(self):
        existing = "a" * 8990
        self.store.set_property("DEBUG_LOGS", existing)
        self.logger.info("test message")
        stored = self.store.get_property("DEBUG_LOGS")
        self.assertEqual(len(stored), 9000)
        self.assertEqual(stored, (existing + "[01/01 12:00:00] test message\n")[-9000:])

    def test_non_string_messages_are_json_encoded(self):
        self.logger.info({"key": "value"})
        self.logger.info(None)
        self.assertEqual(
            self.store.get_property("DEBUG_LOGS"),
            '[01/01 12:00:00] {"key": "value"}\n[01/01 12:00:00] null\n',
        )

    def test_store_failures_do_not_propagate(self):
        store = Mock()
        store.get_property.side_effect = Exception("Storage Full")
        store.set_property.side_effect = Exception("Storage Full")
        handler = PropertyLogHandler(store, clock=_fixed_clock)

        with patch("sys.stderr", new_callable=io.StringIO) as err:
            handler.append("line\n")

        self.assertIn("log buffer read error: Storage Full", err.getvalue())
        self.assertIn("log buffer write error: Storage Full", err.getvalue())
        self.assertEqual(handler.read(), "line\n")

    def test_clear(self):
        self.logger.info("test message")
        self.handler.clear()
        self.assertIsNone(self.store.get_property("DEBUG_LOGS"))
        self.assertEqual(self.handler.read(), "")

    def test_debug_records_are_ignored(self):
        self.logger.setLevel(logging.DEBUG)
        self.logger.debug("noise")
        self.assertIsNone(self.store.get_property("DEBUG_LOGS"))


class TestKeepTail(unittest.TestCase):
    def test_measured_in_store_bytes(self):
        text = "x" + "あ" * 10
        tail = keep_tail(text, 9)
        self.assertEqual(tail, "あ" * 3)
        self.assertEqual(keep_tail("abc", 0), "")
        self.assertEqual(keep_tail("abc", 10), "abc")


class TestCaptured(unittest.TestCase):
    def test_handler_attached_for_block_only(self):
        logger = logging.getLogger("mdarchive.tests_captured")
        parent = logging.getLogger("mdarchive")
        previous = parent.level
        store = MemoryPropertyStore()
        handler = PropertyLogHandler(store, clock=_fixed_clock)

        with captured(handler):
            logger.info("inside")
        logger.info("outside")

        self.assertEqual(store.get_property("DEBUG_LOGS"), "[01/01 12:00:00] inside\n")
        self.assertNotIn(handler, parent.handlers)
        self.assertEqual(parent.level, previous)
        self.assertTrue(parent.propagate)

    def test_ancestors_keep_their_threshold(self):
        parent = logging.getLogger("tests_captured_app")
        parent.setLevel(logging.WARNING)
        parent.propagate = False
        console = PropertyLogHandler(MemoryPropertyStore(), key="CONSOLE", clock=_fixed_clock)
        parent.addHandler(console)
        self.addCleanup(parent.removeHandler, console)
        logger = logging.getLogger("tests_captured_app.jobs")
        store = MemoryPropertyStore()
        handler = PropertyLogHandler(store, clock=_fixed_clock)

        with captured(handler, logger_name="tests_captured_app.jobs"):
            logger.info("quiet")
            logger.warning("loud")

        self.assertEqual(
            store.get_property("DEBUG_LOGS"),
            "[01/01 12:00:00] quiet\n[01/01 12:00:00] loud\n",
        )
        self.assertEqual(console.read(), "[01/01 12:00:00] loud\n")
        self.assertTrue(logger.propagate)
        self.assertEqual(logger.handlers, [])
        self.assertEqual(logger.level, logging.NOTSET)


if __name__ == "__main__":
    unittest.main()
