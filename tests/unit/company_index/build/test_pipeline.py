"""
Unit tests for the build pipeline.
"""

import json
from pathlib import Path

from company_index.build.pipeline import run_build
from company_index.build.splitter import merge_chunks
from company_index.config import IndexConfig


class TestRunBuild:
    """Tests for run_build."""

    def test_full_build(self, config: IndexConfig, data_dir: Path):
        """Test merge, complete files and core are all written."""
        report = run_build(config)

        assert report.merge_stats.total_identities == 6
        assert (data_dir / "complete-search-database.json").exists()
        assert (data_dir / "complete-cik-database.json").exists()
        assert (data_dir / "core-database.json").exists()
        assert (data_dir / "database-config.json").exists()
        assert report.splits == []

        summary = report.to_dict()
        assert summary["core_aliases"] == 9
        assert summary["merge"]["alias_collisions"] == 1

    def test_chunk_core(self, config: IndexConfig, data_dir: Path):
        """Test the core sections are split into core-search / core-cik chunk sets."""
        report = run_build(config, chunk_core=True)

        manifests = {s.manifest_path.name for s in report.splits}
        assert manifests == {"core-search-index.json", "core-cik-index.json"}

        core = json.loads((data_dir / "core-database.json").read_text())
        assert merge_chunks(data_dir / "core-search-index.json") == core["search"]
        assert merge_chunks(data_dir / "core-cik-index.json") == core["cik"]

    def test_oversized_files_split(self, source_dir: Path, tmp_path: Path):
        """Test files above the chunk ceiling are split."""
        config = IndexConfig(source_dir=source_dir, data_dir=tmp_path / "out", chunk_max_bytes=256)

        report = run_build(config)

        names = {s.manifest_path.name for s in report.splits}
        assert "complete-search-database-index.json" in names
        assert "core-search-index.json" in names
        for split in report.splits:
            assert all(c.byte_size <= 256 for c in split.manifest.chunks)

    def test_stale_chunks_removed(self, config: IndexConfig, data_dir: Path):
        """Test a rebuild without chunking removes the previous chunked core."""
        run_build(config, chunk_core=True)
        assert (data_dir / "core-search-index.json").exists()

        run_build(config)

        assert not (data_dir / "core-search-index.json").exists()
        assert not list(data_dir.glob("core-search-part*.json"))
