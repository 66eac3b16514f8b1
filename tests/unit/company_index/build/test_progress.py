"""
Unit tests for progress tracking.
"""

import logging

from company_index.build.progress import ProgressTracker, _format_bytes, _format_duration


class TestProgressTracker:
    """Tests for ProgressTracker."""

    def test_create_tracker(self):
        """Test creating a progress tracker."""
        tracker = ProgressTracker(total_bytes=1000, description="Testing")

        assert tracker.total_bytes == 1000
        assert tracker.lines == 0
        assert tracker.bytes_read == 0
        assert tracker.description == "Testing"

    def test_update_counts_lines_and_bytes(self):
        tracker = ProgressTracker(total_bytes=1000, report_interval=100000)

        tracker.update(100)
        tracker.update(50)

        assert tracker.lines == 2
        assert tracker.bytes_read == 150

    def test_percent_complete_from_bytes(self):
        """Test percentage is measured against the byte total."""
        tracker = ProgressTracker(total_bytes=1000, report_interval=100000)

        tracker.update(250)

        assert tracker.percent_complete == 25.0

    def test_percent_capped(self):
        """Test re-encoded lines overshooting the file size stop at 100%."""
        tracker = ProgressTracker(total_bytes=10, report_interval=100000)

        tracker.update(15)

        assert tracker.percent_complete == 100.0
        assert tracker.eta_seconds == 0

    def test_unknown_total(self):
        """Test in-memory input reports counts only."""
        tracker = ProgressTracker(report_interval=2)

        tracker.update(5)
        tracker.update(5)

        assert tracker.percent_complete == 0.0
        assert tracker.eta_seconds == float("inf")
        assert tracker.last_report_lines == 2

    def test_eta_calculation(self):
        """Test ETA from the average byte rate."""
        tracker = ProgressTracker(total_bytes=1000, report_interval=100000)
        tracker.started_at -= 10
        tracker.update(500)

        eta = tracker.eta_seconds
        assert 0 < eta < float("inf")

    def test_report_logs_eta(self, caplog):
        """Test interval reports include percentage and ETA when the size is known."""
        tracker = ProgressTracker(total_bytes=100, report_interval=2, description="Listing")
        tracker.started_at -= 5

        with caplog.at_level(logging.INFO, logger="company_index.build.progress"):
            tracker.update(20)
            tracker.update(20)

        assert "Listing: 2 lines (40.0% of 0.1 KB)" in caplog.text
        assert "ETA:" in caplog.text

    def test_finish(self):
        """Test finish returns summary."""
        tracker = ProgressTracker(total_bytes=100, report_interval=100000)
        tracker.update(60)
        tracker.update(40)

        summary = tracker.finish()

        assert summary["lines"] == 2
        assert summary["bytes_read"] == 100
        assert summary["lines_per_second"] >= 0


class TestFormatting:
    """Tests for duration and size formatting."""

    def test_format_duration(self):
        assert _format_duration(30) == "30s"
        assert _format_duration(90) == "1.5m"
        assert _format_duration(7200) == "2.0h"
        assert _format_duration(float("inf")) == "unknown"

    def test_format_bytes(self):
        assert _format_bytes(2048) == "2.0 KB"
        assert _format_bytes(3 * 1024 * 1024) == "3.0 MB"
