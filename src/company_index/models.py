"""
Company Index Models

Data classes shared by the build pipeline and the runtime search engine.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from company_index.errors import LoadFailureKind


class IndexTier(str, Enum):
    """Which rung of the fallback ladder satisfied the load."""

    CHUNKED = "chunked"
    OPTIMIZED = "optimized"
    COMPLETE = "complete"
    BUILTIN = "builtin"
    FAILED = "failed"


class LoadState(str, Enum):
    """Lifecycle of a runtime index."""

    NOT_LOADED = "not_loaded"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


@dataclass(frozen=True)
class IdentityRecord:
    """One registrant, keyed by its zero-padded CIK."""

    cik: str
    name: str
    ticker: str | None = None
    priority: bool = False

    @property
    def has_ticker(self) -> bool:
        return bool(self.ticker)

    def to_complete(self) -> dict[str, Any]:
        """Long-field form used by the complete (pre-tiering) artifact."""
        return {"name": self.name, "ticker": self.ticker, "priority": self.priority}

    def to_compact(self) -> dict[str, Any]:
        """Single-character form used by core and extended artifacts."""
        return {"n": self.name, "t": self.ticker or "", "p": 1 if self.priority else 0}

    @classmethod
    def from_entry(cls, cik: str, data: dict[str, Any]) -> IdentityRecord:
        """Create from either the compact or the long on-disk form."""
        name = data.get("n", data.get("name"))
        if not isinstance(name, str) or not name:
            raise ValueError(f"Identity {cik} has no name")
        ticker = data.get("t", data.get("ticker")) or None
        if isinstance(ticker, int) and not isinstance(ticker, bool):
            ticker = str(ticker)
        elif ticker is not None and not isinstance(ticker, str):
            raise ValueError(f"Identity {cik} has a non-text ticker")
        priority = data.get("p", data.get("priority", False))
        return cls(cik=cik, name=name, ticker=ticker, priority=bool(priority))


@dataclass(frozen=True)
class SearchAlias:
    """A lexical search key resolving to an identity record."""

    key: str
    cik: str
    name: str

    def to_complete(self) -> dict[str, str]:
        return {"cik": self.cik, "name": self.name}

    def to_compact(self) -> dict[str, str]:
        return {"n": self.name, "c": self.cik}

    @classmethod
    def from_entry(cls, key: str, data: dict[str, Any]) -> SearchAlias:
        """Create from either the compact or the long on-disk form."""
        name = data.get("n", data.get("name"))
        cik = data.get("c", data.get("cik"))
        if not isinstance(name, str) or not name or not cik:
            raise ValueError(f"Alias {key} is missing name or cik")
        return cls(key=key, cik=str(cik).zfill(10), name=name)


@dataclass(frozen=True)
class ChunkInfo:
    """One physical chunk file listed in a manifest."""

    file: str
    entry_count: int
    byte_size: int

    def to_dict(self) -> dict[str, Any]:
        return {"file": self.file, "entries": self.entry_count, "size": self.byte_size}

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> ChunkInfo:
        file = d["file"]
        if not isinstance(file, str) or not file:
            raise ValueError(f"Chunk file must be a non-empty string, got {file!r}")
        return cls(file=file, entry_count=int(d["entries"]), byte_size=int(d["size"]))


@dataclass
class ChunkManifest:
    """Describes how one logical index file is partitioned into chunk files."""

    source_file: str
    total_entries: int
    chunks: list[ChunkInfo] = field(default_factory=list)
    version: str = "1.0"
    created: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def total_chunks(self) -> int:
        return len(self.chunks)

    @property
    def total_bytes(self) -> int:
        return sum(chunk.byte_size for chunk in self.chunks)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "version": self.version,
            "created": self.created.isoformat(),
            "originalFile": self.source_file,
            "totalEntries": self.total_entries,
            "totalChunks": self.total_chunks,
            "chunks": [chunk.to_dict() for chunk in self.chunks],
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> ChunkManifest:
        """Create from dictionary."""
        created = d.get("created")
        return cls(
            source_file=d["originalFile"],
            total_entries=int(d["totalEntries"]),
            chunks=[ChunkInfo.from_dict(c) for c in d["chunks"]],
            version=d.get("version", "1.0"),
            created=datetime.fromisoformat(created) if created else datetime.now(UTC),
        )


@dataclass(frozen=True)
class LoadAttempt:
    """A ladder rung that was tried and skipped at load time."""

    tier: IndexTier
    path: str | None
    failure: LoadFailureKind
    detail: str = ""


@dataclass(frozen=True)
class SearchResult:
    """One ranked search hit."""

    ticker: str
    name: str
    cik: str
    match_type: str
    relevance: int
    has_ticker_symbol: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "ticker": self.ticker,
            "name": self.name,
            "cik": self.cik,
            "match_type": self.match_type,
            "relevance": self.relevance,
            "has_ticker_symbol": self.has_ticker_symbol,
        }


@dataclass(frozen=True)
class IndexStats:
    """Counts computed from the currently loaded tier."""

    total_search_entries: int
    unique_companies: int
    companies_with_tickers: int
    database_type: str
    version: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_search_entries": self.total_search_entries,
            "unique_companies": self.unique_companies,
            "companies_with_tickers": self.companies_with_tickers,
            "database_type": self.database_type,
            "version": self.version,
        }
