"""
Shared fixtures for company index tests.

The sample registries are small but cover the interesting merge cases: a CIK
with two tickers, a bulk row for an id the registry already covers, a bulk row
whose derived alias collides with a registry alias, and malformed lines.
"""

import json
from pathlib import Path

import pytest

from company_index.config import IndexConfig

SAMPLE_REGISTRY = {
    "0": {"cik_str": 320193, "ticker": "AAPL", "title": "Apple Inc."},
    "1": {"cik_str": 789019, "ticker": "MSFT", "title": "MICROSOFT CORP"},
    "2": {"cik_str": 1652044, "ticker": "GOOGL", "title": "Alphabet Inc."},
    "3": {"cik_str": 1652044, "ticker": "GOOG", "title": "Alphabet Inc."},
}

SAMPLE_LOOKUP_LINES = [
    "APPLE INC:0000320193:",
    "ACME WIDGETS LLC:0001234567:",
    "SMALL CO:123:",
    "garbage line",
    "",
    "FOO: BAR HOLDINGS:0000999999:",
    "MICROSOFT CORP:0000444444:",
]


@pytest.fixture
def source_dir(tmp_path: Path) -> Path:
    """Directory holding the sample raw registries."""
    directory = tmp_path / "sources"
    directory.mkdir()
    (directory / "company_tickers.json").write_text(json.dumps(SAMPLE_REGISTRY), encoding="utf-8")
    (directory / "cik-lookup-data.txt").write_text(
        "\n".join(SAMPLE_LOOKUP_LINES) + "\n", encoding="utf-8"
    )
    return directory


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "data"
    directory.mkdir()
    return directory


@pytest.fixture
def config(source_dir: Path, data_dir: Path) -> IndexConfig:
    """Config pointed at the temporary directories."""
    return IndexConfig(source_dir=source_dir, data_dir=data_dir, progress_interval=1000)


def write_core(directory: Path, search: dict, cik: dict, index_type: str = "core") -> Path:
    """Write a minimal core-database.json."""
    path = directory / "core-database.json"
    document = {
        "meta": {"version": "2.0", "type": index_type, "compressed": True, "created": "2024-01-01"},
        "search": search,
        "cik": cik,
    }
    path.write_text(json.dumps(document), encoding="utf-8")
    return path


@pytest.fixture
def core_writer():
    """Helper that writes a core-database.json into a directory."""
    return write_core


@pytest.fixture
def apple_core() -> tuple[dict, dict]:
    """Single-company core index in compact form."""
    search = {"AAPL": {"n": "Apple Inc.", "c": "0000320193"}}
    cik = {"0000320193": {"n": "Apple Inc.", "t": "AAPL", "p": 1}}
    return search, cik
