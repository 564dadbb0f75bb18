"""
Persisted debug log for scheduled jobs.

``PropertyLogHandler`` keeps the most recent ``capacity`` bytes (as measured by
the durable store) of ``[MM/DD HH:MM:SS] message`` lines and mirrors them into
a PropertyStore key. It is a side channel: store failures are reported on
stderr and never propagate into the code that logged.
"""

from __future__ import annotations

import json
import logging
import sys
from contextlib import contextmanager
from datetime import datetime
from typing import Callable, Iterator, Optional

from .sizing import byte_length
from .storage import PropertyStore

TIMESTAMP_FORMAT = "%m/%d %H:%M:%S"


def _message_text(record: logging.LogRecord) -> str:
    if isinstance(record.msg, str) or record.args:
        return record.getMessage()
    try:
        return json.dumps(record.msg, ensure_ascii=False)
    except (TypeError, ValueError):
        return str(record.msg)


def keep_tail(text: str, capacity: int) -> str:
    """Longest suffix of ``text`` whose measured size is within ``capacity``."""
    if capacity <= 0:
        return ""
    text = text[-capacity:]
    while text and byte_length(text) > capacity:
        excess = byte_length(text) - capacity
        text = text[max(1, excess // 6) :]
    return text


class PropertyLogHandler(logging.Handler):
    def __init__(
        self,
        store: PropertyStore,
        key: str = "DEBUG_LOGS",
        capacity: int = 9000,
        clock: Callable[[], datetime] = datetime.now,
        level: int = logging.INFO,
    ):
        super().__init__(level=level)
        self.store = store
        self.key = key
        self.capacity = capacity
        self.clock = clock
        self._buffer: Optional[str] = None

    def _report(self, action: str, exc: BaseException) -> None:
        try:
            sys.stderr.write(f"log buffer {action} error: {exc}\n")
        except Exception:
            pass

    def _seed(self) -> str:
        if self._buffer is None:
            try:
                self._buffer = self.store.get_property(self.key) or ""
            except Exception as exc:
                self._report("read", exc)
                self._buffer = ""
        return self._buffer

    def format_line(self, record: logging.LogRecord) -> str:
        stamp = self.clock().strftime(TIMESTAMP_FORMAT)
        return f"[{stamp}] {_message_text(record)}\n"

    def emit(self, record: logging.LogRecord) -> None:
        try:
            line = self.format_line(record)
        except Exception as exc:
            self._report("format", exc)
            return
        self.append(line)

    def append(self, line: str) -> None:
        self._buffer = keep_tail(self._seed() + line, self.capacity)
        try:
            self.store.set_property(self.key, self._buffer)
        except Exception as exc:
            self._report("write", exc)

    def read(self) -> str:
        return self._seed()

    def clear(self) -> None:
        self._buffer = ""
        try:
            self.store.delete_property(self.key)
        except Exception as exc:
            self._report("clear", exc)


class _Propagate(logging.Handler):
    """Hands records on to the ancestors of a logger that stopped propagating."""

    def __init__(self, parent: logging.Logger, level: int):
        super().__init__(level=level)
        self.parent = parent

    def emit(self, record: logging.LogRecord) -> None:
        self.parent.callHandlers(record)


@contextmanager
def captured(
    handler: logging.Handler, logger_name: str = "mdarchive"
) -> Iterator[logging.Handler]:
    """
    Attach ``handler`` to ``logger_name`` for the duration of the block.

    When the logger has to be lowered to reach ``handler.level``, records below
    the previous effective level go to ``handler`` only; ancestor handlers see
    the same records they would have seen without the block.
    """
    logger = logging.getLogger(logger_name)
    previous_level = logger.level
    previous_propagate = logger.propagate
    threshold = logger.getEffectiveLevel()
    forward: Optional[logging.Handler] = None
    if threshold > handler.level:
        logger.setLevel(handler.level)
        if logger.propagate and logger.parent is not None:
            forward = _Propagate(logger.parent, threshold)
            logger.propagate = False
            logger.addHandler(forward)
    logger.addHandler(handler)
    try:
        yield handler
    finally:
        logger.removeHandler(handler)
        if forward is not None:
            logger.removeHandler(forward)
        logger.propagate = previous_propagate
        logger.setLevel(previous_level)
