"""
Progress Reporting for Index Builds

Logs line counts and byte-based ETA while the bulk listing is streamed from disk.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass
class ProgressTracker:
    """Reports progress through a line-oriented stream.

    Lines drive the report cadence; bytes drive the percentage and ETA, since
    the line count of the listing is unknown until it has been read. Without
    ``total_bytes`` (in-memory input) only counts and rate are reported.
    """

    total_bytes: int | None = None
    report_interval: int = 100000
    description: str = "Processing"

    lines: int = 0
    bytes_read: int = 0
    started_at: float = field(default_factory=time.time)
    last_report_at: float = field(default_factory=time.time)
    last_report_lines: int = 0

    def update(self, line_bytes: int = 0) -> None:
        """Record one line of ``line_bytes`` bytes."""
        self.lines += 1
        self.bytes_read += line_bytes

        if self.lines - self.last_report_lines >= self.report_interval:
            self._report()

    def _report(self) -> None:
        now = time.time()
        interval_elapsed = now - self.last_report_at
        line_rate = (self.lines - self.last_report_lines) / interval_elapsed if interval_elapsed > 0 else 0

        if self.total_bytes:
            logger.info(
                "%s: %d lines (%.1f%% of %s) | Rate: %.0f lines/sec | ETA: %s",
                self.description,
                self.lines,
                self.percent_complete,
                _format_bytes(self.total_bytes),
                line_rate,
                _format_duration(self.eta_seconds),
            )
        else:
            logger.info("%s: %d lines | Rate: %.0f lines/sec", self.description, self.lines, line_rate)

        self.last_report_at = now
        self.last_report_lines = self.lines

    def finish(self) -> dict:
        """Log the final line and return summary statistics."""
        elapsed = self.elapsed_seconds
        rate = self.lines / elapsed if elapsed > 0 else 0

        logger.info(
            "%s complete: %d lines, %s in %s (%.0f lines/sec)",
            self.description,
            self.lines,
            _format_bytes(self.bytes_read),
            _format_duration(elapsed),
            rate,
        )
        return {
            "lines": self.lines,
            "bytes_read": self.bytes_read,
            "elapsed_seconds": elapsed,
            "lines_per_second": rate,
        }

    @property
    def percent_complete(self) -> float:
        """Share of ``total_bytes`` consumed (0 when unknown), capped at 100."""
        if not self.total_bytes:
            return 0.0
        return min(self.bytes_read / self.total_bytes * 100, 100.0)

    @property
    def elapsed_seconds(self) -> float:
        return time.time() - self.started_at

    @property
    def eta_seconds(self) -> float:
        """Estimated seconds left, from the average byte rate so far."""
        elapsed = self.elapsed_seconds
        if not self.total_bytes or elapsed <= 0 or self.bytes_read <= 0:
            return float("inf")
        byte_rate = self.bytes_read / elapsed
        return max(self.total_bytes - self.bytes_read, 0) / byte_rate


def _format_duration(seconds: float) -> str:
    if seconds == float("inf"):
        return "unknown"
    if seconds < 60:
        return f"{seconds:.0f}s"
    if seconds < 3600:
        return f"{seconds / 60:.1f}m"
    return f"{seconds / 3600:.1f}h"


def _format_bytes(size: int) -> str:
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"
