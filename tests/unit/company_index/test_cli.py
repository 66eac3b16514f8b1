"""
Unit tests for the company index CLI.
"""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from company_index import __version__
from company_index.cli import app

runner = CliRunner()


@pytest.fixture
def cli_env(monkeypatch, source_dir: Path, data_dir: Path) -> Path:
    """Point the CLI's configuration at the temporary directories."""
    monkeypatch.setenv("COMPANY_INDEX_SOURCE_DIR", str(source_dir))
    monkeypatch.setenv("COMPANY_INDEX_DATA_DIR", str(data_dir))
    return data_dir


class TestInfoCommands:
    """Tests for version and stats."""

    def test_version(self):
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert f"company-index version {__version__}" in result.stdout

    def test_stats_builtin(self, tmp_path: Path):
        """Test stats over an empty directory report the built-in tier."""
        result = runner.invoke(app, ["stats", "--data-dir", str(tmp_path)])

        assert result.exit_code == 0
        assert "builtin" in result.stdout


class TestSearchCommands:
    """Tests for search and lookup."""

    def test_search_json(self, tmp_path: Path):
        """Test JSON output of a search."""
        result = runner.invoke(app, ["search", "TSLA", "--json", "--data-dir", str(tmp_path)])

        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload[0]["ticker"] == "TSLA"
        assert payload[0]["relevance"] == 100

    def test_search_no_results(self, tmp_path: Path):
        result = runner.invoke(app, ["search", "ZZZZQQQQ", "--data-dir", str(tmp_path)])

        assert result.exit_code == 0
        assert "No companies match" in result.stdout

    def test_search_blank_query(self, tmp_path: Path):
        """Test a blank query reports no matches with the served tier."""
        result = runner.invoke(app, ["search", "   ", "--data-dir", str(tmp_path)])

        assert result.exit_code == 0
        assert "No companies match" in result.stdout
        assert "builtin" in result.stdout

    def test_search_zero_limit(self, tmp_path: Path):
        result = runner.invoke(app, ["search", "TSLA", "--limit", "0", "--data-dir", str(tmp_path)])

        assert result.exit_code == 0
        assert "No companies match" in result.stdout

    def test_lookup(self, tmp_path: Path):
        """Test lookup by unpadded CIK."""
        result = runner.invoke(app, ["lookup", "320193", "--data-dir", str(tmp_path)])

        assert result.exit_code == 0
        assert "Apple Inc." in result.stdout

    def test_lookup_miss(self, tmp_path: Path):
        result = runner.invoke(app, ["lookup", "1", "--data-dir", str(tmp_path)])

        assert result.exit_code == 1


class TestBuildCommands:
    """Tests for merge, compress, build, split and merge-chunks."""

    def test_build(self, cli_env: Path):
        """Test the full build writes the core artifact."""
        result = runner.invoke(app, ["build"])

        assert result.exit_code == 0
        assert (cli_env / "core-database.json").exists()

    def test_merge_then_compress(self, cli_env: Path):
        """Test the stages can be run one at a time."""
        merged = runner.invoke(app, ["merge"])
        compressed = runner.invoke(app, ["compress"])

        assert merged.exit_code == 0
        assert compressed.exit_code == 0
        assert (cli_env / "complete-search-database.json").exists()
        assert (cli_env / "database-config.json").exists()

    def test_merge_missing_sources(self, monkeypatch, tmp_path: Path):
        """Test a missing registry exits with an error."""
        monkeypatch.setenv("COMPANY_INDEX_SOURCE_DIR", str(tmp_path / "nowhere"))

        result = runner.invoke(app, ["merge", "--output", str(tmp_path)])

        assert result.exit_code == 1
        assert "Error" in result.stdout

    def test_split_and_merge_chunks(self, tmp_path: Path):
        """Test splitting a file and reassembling it."""
        source = tmp_path / "big.json"
        mapping = {f"K{i}": i for i in range(200)}
        source.write_text(json.dumps(mapping))
        output = tmp_path / "merged.json"

        split = runner.invoke(app, ["split", str(source), "--max-mb", "0.001"])
        merged = runner.invoke(app, ["merge-chunks", str(tmp_path / "big-index.json"), "-o", str(output)])

        assert split.exit_code == 0
        assert merged.exit_code == 0
        assert json.loads(output.read_text()) == mapping
        assert len(list(tmp_path.glob("big-part*.json"))) > 1
