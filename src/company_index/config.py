"""
Company Index Configuration

Defines settings for building and serving the company lookup index.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

MIB = 1024 * 1024


class IndexConfig(BaseSettings):
    """Configuration for the index build pipeline and the runtime search engine."""

    model_config = SettingsConfigDict(
        env_prefix="COMPANY_INDEX_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # SEC source URLs
    sec_tickers_url: str = Field(
        default="https://www.sec.gov/files/company_tickers.json",
        description="SEC ticker-CIK mapping file",
    )
    sec_cik_lookup_url: str = Field(
        default="https://www.sec.gov/Archives/edgar/cik-lookup-data.txt",
        description="SEC bulk entity lookup listing (NAME:CIK: per line)",
    )
    sec_user_agent: str = Field(
        default="company-index research tool admin@example.com",
        description="User-Agent header required by SEC for automated access",
    )
    download_timeout_seconds: int = Field(
        default=600,
        description="Timeout for downloading the bulk listing (10 minutes)",
        ge=10,
    )

    # Source file names (relative to source_dir)
    tickers_file: str = Field(default="company_tickers.json")
    cik_lookup_file: str = Field(default="cik-lookup-data.txt")

    # Directory paths
    source_dir: Path = Field(
        default=Path("data/sources"),
        description="Directory holding the raw registry files",
    )
    data_dir: Path = Field(
        default=Path("data"),
        description="Directory for built index artifacts",
    )
    extra_search_dirs: list[Path] = Field(
        default_factory=list,
        description="Additional directories searched for index artifacts at runtime",
    )

    # Merger settings
    min_cik_length: int = Field(
        default=6,
        description="Bulk listing ids shorter than this are treated as malformed",
        ge=1,
        le=10,
    )
    progress_interval: int = Field(
        default=100000,
        description="Log merge progress every N lines",
        ge=1,
    )

    # Compressor settings
    core_max_bytes: int = Field(
        default=45 * MIB,
        description="Hard byte ceiling for the core index artifact",
        ge=1024,
    )
    core_reduce_factor: float = Field(
        default=0.8,
        description="Fraction of the ceiling targeted by the greedy reduction pass",
        gt=0.0,
        le=1.0,
    )
    core_alias_cap: int = Field(
        default=150000,
        description="Maximum number of aliases classified into the core tier",
        ge=1,
    )
    max_name_length: int = Field(
        default=100,
        description="Names longer than this are dropped as malformed",
        ge=1,
    )
    max_key_length: int = Field(
        default=50,
        description="Alias keys longer than this are dropped as malformed",
        ge=1,
    )
    short_name_length: int = Field(
        default=50,
        description="Names shorter than this are classified as core",
        ge=1,
    )
    extended_chunk_records: int = Field(
        default=200000,
        description="Alias records per extended-tier chunk file",
        ge=1,
    )

    # Splitter settings
    chunk_max_bytes: int = Field(
        default=50 * MIB,
        description="Byte ceiling for a single chunk file",
        ge=256,
    )
    chunk_buffer_factor: float = Field(
        default=0.8,
        description="Safety factor applied to the entries-per-chunk estimate",
        gt=0.0,
        le=1.0,
    )
    chunk_sample_size: int = Field(
        default=100,
        description="Entries sampled to estimate the average entry size",
        ge=1,
    )

    # Runtime search settings
    search_default_limit: int = Field(default=20, ge=1)
    search_min_relevance: int = Field(default=50, ge=0, le=100)
    suggestion_min_relevance: int = Field(default=70, ge=0, le=100)
    builtin_fallback_enabled: bool = Field(
        default=True,
        description="Serve the built-in curated list when no artifact can be loaded",
    )

    # Observability
    telemetry_enabled: bool = Field(default=True, description="Emit OTEL spans and metrics")
    log_level: str = Field(default="INFO", description="Logging level")

    def ensure_data_dir(self) -> Path:
        """Create data directory if it doesn't exist."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        return self.data_dir

    def ensure_source_dir(self) -> Path:
        """Create source directory if it doesn't exist."""
        self.source_dir.mkdir(parents=True, exist_ok=True)
        return self.source_dir

    @property
    def tickers_path(self) -> Path:
        """Path of the ticker-bearing registry."""
        return self.source_dir / self.tickers_file

    @property
    def cik_lookup_path(self) -> Path:
        """Path of the bulk entity lookup listing."""
        return self.source_dir / self.cik_lookup_file


# Artifact file names shared by the build pipeline and the runtime loader
COMPLETE_SEARCH_FILE = "complete-search-database.json"
COMPLETE_CIK_FILE = "complete-cik-database.json"
CORE_FILE = "core-database.json"
EXTENDED_FILE_TEMPLATE = "extended-database-{index}.json"
LOADER_CONFIG_FILE = "database-config.json"
CORE_SEARCH_PREFIX = "core-search"
CORE_CIK_PREFIX = "core-cik"
MANIFEST_SUFFIX = "-index.json"

INDEX_FORMAT_VERSION = "2.0"
MANIFEST_FORMAT_VERSION = "1.0"


def load_config() -> IndexConfig:
    """Load configuration from environment."""
    return IndexConfig()
