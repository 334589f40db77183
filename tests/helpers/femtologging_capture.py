"""Capture femtologging output for assertions.

femtologging hands records to handlers on its own worker thread, so tests
wait for the expected number of records instead of asserting immediately.

Examples
--------
>>> with capture_femto_logs("ghwatch.notifications.classifier") as capture:
...     classify(record_with_unknown_type)
...     capture.wait_for_count(1)
>>> capture.messages
['event type not found: SponsorshipEvent']

"""

from __future__ import annotations

import contextlib
import dataclasses
import threading
import time
import typing as typ

from femtologging import get_logger


@dataclasses.dataclass(slots=True)
class CapturedRecord:
    """One record seen by :class:`FemtoLogCapture`."""

    logger: str
    level: str
    message: str
    exc_info: object | None = None


class FemtoLogCapture:
    """Handler object accepted by ``FemtoLogger.add_handler``."""

    def __init__(self) -> None:
        """Start with no records."""
        self.records: list[CapturedRecord] = []
        self._condition = threading.Condition()

    @property
    def messages(self) -> list[str]:
        """Return captured messages in arrival order."""
        with self._condition:
            return [record.message for record in self.records]

    def handle(self, logger: str, level: str, message: str) -> None:
        """Receive a plain record from the femtologging worker thread."""
        self._append(CapturedRecord(str(logger), str(level), message))

    def handle_record(self, record: dict[str, object]) -> None:
        """Receive a structured record from the femtologging worker thread."""
        self._append(
            CapturedRecord(
                logger=str(record.get("logger", "")),
                level=str(record.get("level", "")),
                message=str(record.get("message", "")),
                exc_info=record.get("exc_info"),
            )
        )

    def _append(self, record: CapturedRecord) -> None:
        with self._condition:
            self.records.append(record)
            self._condition.notify_all()

    def wait_for_count(self, count: int, timeout: float = 1.0) -> None:
        """Block until ``count`` records arrived, failing after ``timeout``."""
        deadline = time.monotonic() + timeout
        with self._condition:
            while len(self.records) < count:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    break
                self._condition.wait(timeout=remaining)

        assert len(self.records) >= count, (
            f"Expected {count} log records, got {len(self.records)}"
        )

    def settle(self, timeout: float = 0.1) -> None:
        """Give the worker thread ``timeout`` seconds to deliver stragglers."""
        time.sleep(timeout)


@contextlib.contextmanager
def capture_femto_logs(
    logger_name: str,
    *,
    level: str = "DEBUG",
) -> typ.Iterator[FemtoLogCapture]:
    """Attach a :class:`FemtoLogCapture` to ``logger_name`` for the block."""
    logger = get_logger(logger_name)
    previous_level = logger.level
    previous_propagate = logger.propagate

    logger.set_level(level)
    logger.set_propagate(False)
    capture = FemtoLogCapture()
    logger.add_handler(capture)
    try:
        yield capture
    finally:
        logger.remove_handler(capture)
        logger.set_level(previous_level)
        logger.set_propagate(previous_propagate)
