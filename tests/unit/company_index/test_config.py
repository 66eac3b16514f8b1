"""
Unit tests for company index configuration.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from company_index.config import MIB, IndexConfig, load_config


class TestIndexConfig:
    """Tests for IndexConfig."""

    def test_default_values(self):
        """Test default configuration values."""
        config = IndexConfig()

        assert config.core_max_bytes == 45 * MIB
        assert config.core_reduce_factor == 0.8
        assert config.core_alias_cap == 150000
        assert config.chunk_max_bytes == 50 * MIB
        assert config.extended_chunk_records == 200000
        assert config.min_cik_length == 6
        assert config.search_default_limit == 20
        assert config.search_min_relevance == 50
        assert config.builtin_fallback_enabled is True

    def test_env_override(self, monkeypatch):
        """Test environment variables with the COMPANY_INDEX_ prefix."""
        monkeypatch.setenv("COMPANY_INDEX_CORE_MAX_BYTES", "2048")
        monkeypatch.setenv("COMPANY_INDEX_BUILTIN_FALLBACK_ENABLED", "false")

        config = load_config()

        assert config.core_max_bytes == 2048
        assert config.builtin_fallback_enabled is False

    def test_bounds(self):
        """Test field bounds are enforced."""
        with pytest.raises(ValidationError):
            IndexConfig(core_reduce_factor=1.5)
        with pytest.raises(ValidationError):
            IndexConfig(search_min_relevance=101)

    def test_source_paths(self, tmp_path: Path):
        """Test source path properties."""
        config = IndexConfig(source_dir=tmp_path)

        assert config.tickers_path == tmp_path / "company_tickers.json"
        assert config.cik_lookup_path == tmp_path / "cik-lookup-data.txt"

    def test_ensure_dirs(self, tmp_path: Path):
        """Test directory creation."""
        config = IndexConfig(data_dir=tmp_path / "data", source_dir=tmp_path / "data" / "sources")

        assert config.ensure_data_dir().is_dir()
        assert config.ensure_source_dir().is_dir()
