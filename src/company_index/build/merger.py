"""
Identity Merger

Combines the SEC ticker registry (company_tickers.json) with the bulk entity
lookup listing (cik-lookup-data.txt) into one identity map keyed by CIK and a
derived search alias map.

Alias ownership policy: the first writer wins. Ticker registry aliases are
written before any bulk listing alias, so a ticker or name alias generated
from the registry is never taken over by a bulk listing row. Collisions are
counted in ``MergeStats.alias_collisions``.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from company_index.build.progress import ProgressTracker
from company_index.build.validation import RecordValidator
from company_index.config import COMPLETE_CIK_FILE, COMPLETE_SEARCH_FILE, IndexConfig
from company_index.errors import SourceFormatError, SourceNotFoundError
from company_index.models import IdentityRecord, SearchAlias
from company_index.normalize import derive_alias, pad_cik
from company_index.telemetry import SpanAttributes, record_index_metric, trace_index_operation

logger = logging.getLogger(__name__)

MIN_ALIAS_LENGTH = 3


@dataclass
class MergeStats:
    """Counters reported at the end of a merge."""

    total_identities: int = 0
    total_aliases: int = 0
    with_ticker: int = 0
    without_ticker: int = 0
    registry_records: int = 0
    lines_read: int = 0
    malformed_lines: int = 0
    alias_collisions: int = 0

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


@dataclass
class MergeResult:
    """Merged identity map, alias map and counters."""

    identities: dict[str, IdentityRecord] = field(default_factory=dict)
    aliases: dict[str, SearchAlias] = field(default_factory=dict)
    stats: MergeStats = field(default_factory=MergeStats)

    def search_map(self) -> dict[str, dict[str, str]]:
        """Long-field alias map as written to the complete search artifact."""
        return {key: alias.to_complete() for key, alias in self.aliases.items()}

    def cik_map(self) -> dict[str, dict[str, Any]]:
        """Long-field identity map as written to the complete CIK artifact."""
        return {cik: record.to_complete() for cik, record in self.identities.items()}


class IdentityMerger:
    """Builds the canonical identity map from the two SEC registries."""

    def __init__(self, config: IndexConfig | None = None):
        self.config = config or IndexConfig()
        self._validator = RecordValidator(
            min_cik_length=self.config.min_cik_length,
            max_name_length=self.config.max_name_length,
        )
        self._result = MergeResult()

    def merge(
        self,
        tickers_path: Path | None = None,
        lookup_path: Path | None = None,
    ) -> MergeResult:
        """
        Merge both registries.

        Args:
            tickers_path: Ticker registry JSON (defaults to config.tickers_path)
            lookup_path: Bulk listing text file (defaults to config.cik_lookup_path)

        Returns:
            MergeResult with identities, aliases and counts

        Raises:
            SourceNotFoundError: If either input file is missing
            SourceFormatError: If the ticker registry is not valid JSON
        """
        tickers_path = tickers_path or self.config.tickers_path
        lookup_path = lookup_path or self.config.cik_lookup_path

        for path in (tickers_path, lookup_path):
            if not path.exists():
                raise SourceNotFoundError(f"Required source file not found: {path}", str(path))

        self._result = MergeResult()
        with trace_index_operation("merge", {SpanAttributes.FILE_PATH: str(lookup_path)}) as span:
            self._seed_from_registry(self._read_registry(tickers_path))
            with open(lookup_path, encoding="utf-8", errors="replace") as f:
                self._merge_lookup_lines(f, total_bytes=lookup_path.stat().st_size)
            stats = self._finalize_stats()

            if span:
                span.set_attribute(SpanAttributes.IDENTITY_COUNT, stats.total_identities)
                span.set_attribute(SpanAttributes.ALIAS_COUNT, stats.total_aliases)
                span.set_attribute(SpanAttributes.RECORDS_SKIPPED, stats.malformed_lines)

        record_index_metric("identities_total", stats.total_identities)
        record_index_metric("malformed_lines_total", stats.malformed_lines)
        logger.info(
            "Merge complete: %d identities (%d with ticker, %d without), %d aliases, "
            "%d malformed lines skipped, %d alias collisions",
            stats.total_identities,
            stats.with_ticker,
            stats.without_ticker,
            stats.total_aliases,
            stats.malformed_lines,
            stats.alias_collisions,
        )
        return self._result

    def merge_records(
        self,
        registry: Iterable[dict[str, Any]],
        lookup_lines: Iterable[str],
    ) -> MergeResult:
        """Merge already-loaded registry rows and listing lines (no file I/O)."""
        self._result = MergeResult()
        self._seed_from_registry(registry)
        self._merge_lookup_lines(lookup_lines)
        self._finalize_stats()
        return self._result

    def _read_registry(self, path: Path) -> list[dict[str, Any]]:
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise SourceFormatError(f"Ticker registry is not valid JSON: {e}", str(path)) from e

        # company_tickers.json is {"0": {...}, "1": {...}}; plain lists are accepted too
        rows = data.values() if isinstance(data, dict) else data
        if not isinstance(rows, Iterable):
            raise SourceFormatError("Ticker registry has an unexpected shape", str(path))
        return [row for row in rows if isinstance(row, dict)]

    def _seed_from_registry(self, registry: Iterable[dict[str, Any]]) -> None:
        result = self._result

        for row in registry:
            raw_cik = str(row.get("cik_str", row.get("cik", ""))).strip()
            ticker = str(row.get("ticker") or "").upper().strip() or None
            name = str(row.get("title", row.get("name")) or "").strip()

            validation = self._validator.validate(raw_cik, name, ticker, min_cik_length=1)
            if not validation.is_valid:
                logger.debug("Skipping registry row %r: %s", row, "; ".join(validation.errors))
                result.stats.malformed_lines += 1
                continue

            cik = pad_cik(raw_cik)
            result.stats.registry_records += 1

            existing = result.identities.get(cik)
            if existing is None or not existing.has_ticker:
                # First ticker listed for a CIK is its canonical ticker
                result.identities[cik] = IdentityRecord(
                    cik=cik, name=name, ticker=ticker, priority=True
                )

            if ticker:
                self._add_alias(ticker, cik, name)

            alias = derive_alias(name)
            if alias and alias != ticker and len(alias) >= MIN_ALIAS_LENGTH:
                self._add_alias(alias, cik, name)

    def _merge_lookup_lines(self, lines: Iterable[str], total_bytes: int | None = None) -> None:
        result = self._result
        progress = ProgressTracker(
            total_bytes=total_bytes,
            report_interval=self.config.progress_interval,
            description="Bulk listing",
        )

        for line in lines:
            result.stats.lines_read += 1
            progress.update(len(line.encode("utf-8", errors="replace")))

            parsed = self._parse_lookup_line(line)
            if parsed is None:
                if line.strip():
                    result.stats.malformed_lines += 1
                continue

            name, raw_cik = parsed
            cik = pad_cik(raw_cik)
            existing = result.identities.get(cik)
            if existing is not None and existing.has_ticker:
                continue

            result.identities[cik] = IdentityRecord(
                cik=cik,
                name=name,
                ticker=None,
                priority=existing.priority if existing else False,
            )

            alias = derive_alias(name)
            if len(alias) >= MIN_ALIAS_LENGTH:
                self._add_alias(alias, cik, name)

        progress.finish()

    def _parse_lookup_line(self, line: str) -> tuple[str, str] | None:
        """Parse one ``NAME:CIK:`` line; returns None for malformed lines."""
        stripped = line.strip().rstrip(":")
        if ":" not in stripped:
            return None

        # Names may themselves contain colons; the CIK is always the last field
        name, _, raw_cik = stripped.rpartition(":")
        name = name.strip()
        raw_cik = raw_cik.strip()

        validation = self._validator.validate(raw_cik, name)
        if not validation.is_valid:
            return None
        return name, raw_cik

    def _add_alias(self, key: str, cik: str, name: str) -> bool:
        aliases = self._result.aliases
        existing = aliases.get(key)
        if existing is not None:
            if existing.cik != cik:
                self._result.stats.alias_collisions += 1
            return False
        aliases[key] = SearchAlias(key=key, cik=cik, name=name)
        return True

    def _finalize_stats(self) -> MergeStats:
        result = self._result
        stats = result.stats
        stats.total_identities = len(result.identities)
        stats.total_aliases = len(result.aliases)
        stats.with_ticker = sum(1 for r in result.identities.values() if r.has_ticker)
        stats.without_ticker = stats.total_identities - stats.with_ticker
        return stats


def write_complete(result: MergeResult, output_dir: Path) -> tuple[Path, Path]:
    """
    Write the complete (pre-tiering) artifacts.

    Returns:
        (search file path, cik file path)
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    search_path = output_dir / COMPLETE_SEARCH_FILE
    cik_path = output_dir / COMPLETE_CIK_FILE

    with open(search_path, "w", encoding="utf-8") as f:
        json.dump(result.search_map(), f, separators=(",", ":"))
    with open(cik_path, "w", encoding="utf-8") as f:
        json.dump(result.cik_map(), f, separators=(",", ":"))

    logger.info("Wrote %s and %s", search_path, cik_path)
    return search_path, cik_path


def load_complete(data_dir: Path) -> tuple[dict[str, Any], dict[str, Any]]:
    """Read the complete artifacts back as raw dictionaries."""
    search_path = data_dir / COMPLETE_SEARCH_FILE
    cik_path = data_dir / COMPLETE_CIK_FILE
    for path in (search_path, cik_path):
        if not path.exists():
            raise SourceNotFoundError(f"Complete index file not found: {path}", str(path))

    try:
        with open(search_path, encoding="utf-8") as f:
            search = json.load(f)
        with open(cik_path, encoding="utf-8") as f:
            ciks = json.load(f)
    except json.JSONDecodeError as e:
        raise SourceFormatError(f"Complete index is not valid JSON: {e}") from e
    return search, ciks
