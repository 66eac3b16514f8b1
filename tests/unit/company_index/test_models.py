"""
Unit tests for company index models.
"""

from datetime import UTC, datetime

import pytest

from company_index.models import (
    ChunkInfo,
    ChunkManifest,
    IdentityRecord,
    IndexStats,
    IndexTier,
    SearchAlias,
    SearchResult,
)


class TestIdentityRecord:
    """Tests for IdentityRecord."""

    def test_has_ticker(self):
        """Test ticker presence check."""
        assert IdentityRecord("0000320193", "Apple Inc.", "AAPL", True).has_ticker
        assert not IdentityRecord("0001234567", "Acme Widgets LLC").has_ticker

    def test_to_complete(self):
        """Test long-field serialization."""
        record = IdentityRecord("0001234567", "Acme Widgets LLC")

        assert record.to_complete() == {"name": "Acme Widgets LLC", "ticker": None, "priority": False}

    def test_to_compact(self):
        """Test short-field serialization."""
        record = IdentityRecord("0000320193", "Apple Inc.", "AAPL", True)

        assert record.to_compact() == {"n": "Apple Inc.", "t": "AAPL", "p": 1}

    def test_from_compact_entry(self):
        """Test parsing the compact form; empty ticker becomes None."""
        record = IdentityRecord.from_entry("0001234567", {"n": "Acme", "t": "", "p": 0})

        assert record.ticker is None
        assert record.priority is False

    def test_from_long_entry(self):
        """Test parsing the long form."""
        record = IdentityRecord.from_entry(
            "0000320193", {"name": "Apple Inc.", "ticker": "AAPL", "priority": True}
        )

        assert record.name == "Apple Inc."
        assert record.ticker == "AAPL"
        assert record.priority is True

    def test_from_entry_without_name(self):
        """Test that a nameless entry is rejected."""
        with pytest.raises(ValueError):
            IdentityRecord.from_entry("0000000001", {"t": "X"})

    def test_from_entry_numeric_ticker(self):
        """Test a numeric ticker is read as text."""
        record = IdentityRecord.from_entry("0000000002", {"n": "Numeric Ticker Co", "t": 1234, "p": 0})

        assert record.ticker == "1234"

    def test_from_entry_non_text_ticker(self):
        with pytest.raises(ValueError):
            IdentityRecord.from_entry("0000000003", {"n": "Odd Co", "t": ["X"], "p": 0})


class TestSearchAlias:
    """Tests for SearchAlias."""

    def test_from_entry_pads_cik(self):
        """Test that numeric CIKs are zero-padded."""
        alias = SearchAlias.from_entry("AAPL", {"n": "Apple Inc.", "c": 320193})

        assert alias.cik == "0000320193"

    def test_round_trip_forms(self):
        """Test both serialized forms carry the same data."""
        alias = SearchAlias("APPLE", "0000320193", "Apple Inc.")

        assert alias.to_complete() == {"cik": "0000320193", "name": "Apple Inc."}
        assert alias.to_compact() == {"n": "Apple Inc.", "c": "0000320193"}

    def test_from_entry_missing_cik(self):
        """Test that an alias without a target is rejected."""
        with pytest.raises(ValueError):
            SearchAlias.from_entry("X", {"n": "Nameless target"})


class TestChunkManifest:
    """Tests for ChunkManifest."""

    def test_totals(self):
        """Test derived totals."""
        manifest = ChunkManifest(
            source_file="complete-search-database.json",
            total_entries=30,
            chunks=[ChunkInfo("a-part00.json", 20, 1000), ChunkInfo("a-part01.json", 10, 500)],
        )

        assert manifest.total_chunks == 2
        assert manifest.total_bytes == 1500

    def test_chunk_file_must_be_text(self):
        """Test a chunk entry without a usable file name is rejected."""
        with pytest.raises(ValueError):
            ChunkInfo.from_dict({"file": None, "entries": 1, "size": 10})

    def test_to_dict_uses_on_disk_keys(self):
        """Test the serialized manifest layout."""
        created = datetime(2024, 1, 15, 10, 30, tzinfo=UTC)
        manifest = ChunkManifest(
            source_file="x.json",
            total_entries=1,
            chunks=[ChunkInfo("x-part00.json", 1, 12)],
            created=created,
        )

        data = manifest.to_dict()

        assert data == {
            "version": "1.0",
            "created": created.isoformat(),
            "originalFile": "x.json",
            "totalEntries": 1,
            "totalChunks": 1,
            "chunks": [{"file": "x-part00.json", "entries": 1, "size": 12}],
        }

    def test_from_dict(self):
        """Test parsing a manifest written by the splitter."""
        manifest = ChunkManifest.from_dict(
            {
                "version": "1.0",
                "created": "2024-01-15T10:30:00+00:00",
                "originalFile": "x.json",
                "totalEntries": 3,
                "totalChunks": 1,
                "chunks": [{"file": "x-part00.json", "entries": 3, "size": 40}],
            }
        )

        assert manifest.source_file == "x.json"
        assert manifest.chunks[0].entry_count == 3
        assert manifest.created.year == 2024


class TestResultTypes:
    """Tests for SearchResult and IndexStats."""

    def test_search_result_to_dict(self):
        """Test search result serialization."""
        result = SearchResult("AAPL", "Apple Inc.", "0000320193", "exact", 100, True)

        assert result.to_dict()["has_ticker_symbol"] is True
        assert result.to_dict()["match_type"] == "exact"

    def test_index_stats_to_dict(self):
        """Test stats serialization."""
        stats = IndexStats(10, 8, 5, IndexTier.BUILTIN.value)

        assert stats.to_dict() == {
            "total_search_entries": 10,
            "unique_companies": 8,
            "companies_with_tickers": 5,
            "database_type": "builtin",
            "version": None,
        }
