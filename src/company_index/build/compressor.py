"""
Index Compressor / Prioritizer

Cleans the merged alias and identity maps, splits them into a size-bounded core
tier and an unbounded extended tier, and writes both with single-character
field names:

    name -> n, cik -> c, ticker -> t, priority -> p

The core artifact is guaranteed never to exceed ``IndexConfig.core_max_bytes``.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from company_index.build.merger import MergeResult, load_complete
from company_index.config import (
    CORE_FILE,
    EXTENDED_FILE_TEMPLATE,
    INDEX_FORMAT_VERSION,
    LOADER_CONFIG_FILE,
    IndexConfig,
)
from company_index.errors import CoreTierEmptyError
from company_index.normalize import has_corporate_designator, pad_cik
from company_index.telemetry import SpanAttributes, record_index_metric, trace_index_operation

logger = logging.getLogger(__name__)

Compact = dict[str, Any]


def serialize(document: Any) -> bytes:
    """Serialize without whitespace, as written to disk."""
    return json.dumps(document, separators=(",", ":")).encode("utf-8")


def _member_size(key: str, value: Any) -> int:
    """Bytes one ``"key":value`` member adds to a JSON object, including its comma."""
    return len(serialize({key: value})) - 2 + 1


def _text(value: Any) -> str:
    """Stripped string form of a name or ticker field; numbers are stringified, other types are blank."""
    if isinstance(value, bool) or not isinstance(value, str | int):
        return ""
    return str(value).strip()


@dataclass
class TieredIndex:
    """Core and extended tiers in compact form."""

    core_search: dict[str, Compact] = field(default_factory=dict)
    core_cik: dict[str, Compact] = field(default_factory=dict)
    extended_search: dict[str, Compact] = field(default_factory=dict)
    identities: dict[str, Compact] = field(default_factory=dict)
    reduced: bool = False

    @property
    def index_type(self) -> str:
        return "core-reduced" if self.reduced else "core"


@dataclass
class CompressionReport:
    """What the compressor wrote."""

    core_path: Path
    core_bytes: int
    core_aliases: int
    core_identities: int
    extended_paths: list[Path]
    extended_aliases: int
    config_path: Path
    reduced: bool
    dropped_aliases: int = 0
    dropped_identities: int = 0


class IndexCompressor:
    """Builds the tiered, compact index from the complete merged maps."""

    def __init__(self, config: IndexConfig | None = None):
        self.config = config or IndexConfig()
        self._dropped_aliases = 0
        self._dropped_identities = 0

    # ------------------------------------------------------------------
    # Cleaning
    # ------------------------------------------------------------------

    def clean_cik(self, ciks: dict[str, dict[str, Any]]) -> dict[str, Compact]:
        """Drop nameless or over-length identities and shrink field names."""
        cleaned: dict[str, Compact] = {}

        for raw_cik, info in ciks.items():
            if not isinstance(info, dict):
                continue
            name = _text(info.get("n", info.get("name")))
            if not name or len(name) > self.config.max_name_length:
                continue
            ticker = _text(info.get("t", info.get("ticker"))).upper()
            priority = info.get("p", info.get("priority", False))
            cleaned[pad_cik(raw_cik)] = {"n": name, "t": ticker, "p": 1 if priority else 0}

        self._dropped_identities = len(ciks) - len(cleaned)
        logger.info("Identity cleaning complete: %d -> %d", len(ciks), len(cleaned))
        return cleaned

    def clean_search(
        self,
        search: dict[str, dict[str, Any]],
        identities: dict[str, Compact],
    ) -> dict[str, Compact]:
        """Drop malformed or orphaned aliases and shrink field names.

        Keys are upper-cased; if two raw keys normalize to the same key the
        first one wins.
        """
        cleaned: dict[str, Compact] = {}

        for raw_key, entry in search.items():
            if not isinstance(entry, dict) or not isinstance(raw_key, str):
                continue
            key = raw_key.strip().upper()
            name = _text(entry.get("n", entry.get("name")))
            raw_cik = entry.get("c", entry.get("cik"))

            if not key or len(key) > self.config.max_key_length:
                continue
            if not name or len(name) > self.config.max_name_length:
                continue
            if not raw_cik:
                continue
            cik = pad_cik(raw_cik)
            if cik not in identities or key in cleaned:
                continue

            cleaned[key] = {"n": name, "c": cik}

        self._dropped_aliases = len(search) - len(cleaned)
        logger.info("Search cleaning complete: %d -> %d", len(search), len(cleaned))
        return cleaned

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def is_core_candidate(self, key: str, entry: Compact, known_tickers: set[str]) -> bool:
        """Core if the key is a ticker, the name carries a designator, or the name is short."""
        name = entry["n"]
        return (
            key in known_tickers
            or has_corporate_designator(name)
            or len(name) < self.config.short_name_length
        )

    def prioritize(self, search: dict[str, Compact], identities: dict[str, Compact]) -> TieredIndex:
        """Classify aliases into core and extended tiers."""
        tiered = TieredIndex(identities=identities)

        known_tickers = {
            info["t"] for info in identities.values() if info["t"] and len(info["t"]) <= 10
        }
        for cik, info in identities.items():
            if info["t"] and len(info["t"]) <= 10:
                tiered.core_cik[cik] = info

        cap = self.config.core_alias_cap
        for key, entry in search.items():
            if len(tiered.core_search) < cap and self.is_core_candidate(key, entry, known_tickers):
                tiered.core_search[key] = entry
                tiered.core_cik.setdefault(entry["c"], identities[entry["c"]])
            else:
                tiered.extended_search[key] = entry

        logger.info(
            "Prioritized %d ticker-bearing companies: core %d aliases / %d identities, "
            "extended %d aliases",
            len(known_tickers),
            len(tiered.core_search),
            len(tiered.core_cik),
            len(tiered.extended_search),
        )

        if not tiered.core_search:
            raise CoreTierEmptyError(
                "No aliases qualified for the core tier; check cleaning limits",
                input_aliases=len(search),
            )
        return tiered

    # ------------------------------------------------------------------
    # Size bounding
    # ------------------------------------------------------------------

    def core_document(self, tiered: TieredIndex, created: str) -> dict[str, Any]:
        return {
            "meta": {
                "version": INDEX_FORMAT_VERSION,
                "type": tiered.index_type,
                "compressed": True,
                "created": created,
            },
            "search": tiered.core_search,
            "cik": tiered.core_cik,
        }

    def fit_core(self, tiered: TieredIndex, created: str) -> bytes:
        """Serialize the core tier, reducing it first if it exceeds the ceiling."""
        ceiling = self.config.core_max_bytes
        payload = serialize(self.core_document(tiered, created))
        if len(payload) <= ceiling:
            return payload

        logger.warning(
            "Core index is %d bytes (ceiling %d); running reduction pass",
            len(payload),
            ceiling,
        )
        self.reduce_core(tiered, created, int(ceiling * self.config.core_reduce_factor))
        payload = serialize(self.core_document(tiered, created))

        # The greedy pass works on estimates; trim the tail until the hard bound holds
        while len(payload) > ceiling and tiered.core_search:
            overflow = max(1, len(tiered.core_search) // 10)
            self._demote_tail(tiered, overflow)
            payload = serialize(self.core_document(tiered, created))

        if not tiered.core_search:
            raise CoreTierEmptyError(
                f"Core ceiling of {ceiling} bytes cannot hold a single entry",
                ceiling_bytes=ceiling,
            )
        return payload

    def reduce_core(self, tiered: TieredIndex, created: str, target_bytes: int) -> None:
        """
        Greedy reduction: keep ticker-bearing aliases first, in source order,
        until ``target_bytes`` is reached; everything else returns to extended.
        """
        identities = tiered.identities
        entries = sorted(
            tiered.core_search.items(),
            key=lambda kv: 0 if identities.get(kv[1]["c"], {}).get("t") else 1,
        )

        tiered.reduced = True
        kept_search: dict[str, Compact] = {}
        kept_cik: dict[str, Compact] = {}
        current = len(serialize(self.core_document(TieredIndex(reduced=True), created)))

        index = 0
        for index, (key, entry) in enumerate(entries):
            cik = entry["c"]
            size = _member_size(key, entry)
            if cik not in kept_cik:
                size += _member_size(cik, identities[cik])
            if current + size > target_bytes:
                break
            kept_search[key] = entry
            kept_cik[cik] = identities[cik]
            current += size
        else:
            index = len(entries)

        demoted = dict(entries[index:])
        tiered.extended_search = {**demoted, **tiered.extended_search}
        tiered.core_search = kept_search
        tiered.core_cik = kept_cik
        logger.info("Core reduction: %d -> %d aliases", len(entries), len(kept_search))

    def _demote_tail(self, tiered: TieredIndex, count: int) -> None:
        keys = list(tiered.core_search)[-count:]
        for key in keys:
            tiered.extended_search[key] = tiered.core_search.pop(key)
        referenced = {entry["c"] for entry in tiered.core_search.values()}
        tiered.core_cik = {cik: info for cik, info in tiered.core_cik.items() if cik in referenced}

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def extended_chunks(self, tiered: TieredIndex) -> list[dict[str, Any]]:
        """Extended aliases in chunks of bounded record count, each self-contained."""
        chunks: list[dict[str, Any]] = []
        entries = list(tiered.extended_search.items())
        size = self.config.extended_chunk_records

        for start in range(0, len(entries), size):
            chunk_entries = entries[start : start + size]
            chunk_cik = {
                entry["c"]: tiered.identities[entry["c"]]
                for _, entry in chunk_entries
                if entry["c"] in tiered.identities
            }
            chunks.append(
                {
                    "meta": {"chunk": len(chunks), "entries": len(chunk_entries)},
                    "search": dict(chunk_entries),
                    "cik": chunk_cik,
                }
            )
        return chunks

    def compress(
        self,
        search: dict[str, dict[str, Any]],
        ciks: dict[str, dict[str, Any]],
        output_dir: Path,
    ) -> CompressionReport:
        """
        Clean, tier and write the index.

        Args:
            search: Complete alias map (long or compact field names)
            ciks: Complete identity map (long or compact field names)
            output_dir: Destination directory for all artifacts

        Returns:
            CompressionReport describing the written files
        """
        with trace_index_operation("compress", {SpanAttributes.ALIAS_COUNT: len(search)}) as span:
            identities = self.clean_cik(ciks)
            cleaned = self.clean_search(search, identities)
            tiered = self.prioritize(cleaned, identities)

            created = datetime.now(UTC).isoformat()
            payload = self.fit_core(tiered, created)
            report = self._write(tiered, payload, created, output_dir)

            if span:
                span.set_attribute(SpanAttributes.CORE_ALIAS_COUNT, report.core_aliases)
                span.set_attribute(SpanAttributes.EXTENDED_ALIAS_COUNT, report.extended_aliases)
                span.set_attribute(SpanAttributes.FILE_SIZE_BYTES, report.core_bytes)

        record_index_metric("core_bytes", report.core_bytes)
        return report

    def compress_merge_result(self, result: MergeResult, output_dir: Path) -> CompressionReport:
        return self.compress(result.search_map(), result.cik_map(), output_dir)

    def compress_directory(self, data_dir: Path, output_dir: Path | None = None) -> CompressionReport:
        """Compress the complete artifacts found in ``data_dir``."""
        search, ciks = load_complete(data_dir)
        logger.info("Loaded complete index: %d aliases, %d identities", len(search), len(ciks))
        return self.compress(search, ciks, output_dir or data_dir)

    def _write(
        self,
        tiered: TieredIndex,
        core_payload: bytes,
        created: str,
        output_dir: Path,
    ) -> CompressionReport:
        output_dir.mkdir(parents=True, exist_ok=True)

        core_path = output_dir / CORE_FILE
        core_path.write_bytes(core_payload)
        logger.info("Core index: %s (%.2f MB)", core_path, len(core_payload) / 1024 / 1024)

        extended_paths: list[Path] = []
        for i, chunk in enumerate(self.extended_chunks(tiered)):
            path = output_dir / EXTENDED_FILE_TEMPLATE.format(index=i)
            payload = serialize(chunk)
            path.write_bytes(payload)
            extended_paths.append(path)
            logger.info("Extended index %d: %s (%.2f MB)", i, path, len(payload) / 1024 / 1024)

        config_path = output_dir / LOADER_CONFIG_FILE
        loader_config = {
            "version": INDEX_FORMAT_VERSION,
            "coreFile": CORE_FILE,
            "extendedFiles": [p.name for p in extended_paths],
            "totalEntries": len(tiered.core_search) + len(tiered.extended_search),
            "created": created,
        }
        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(loader_config, f, indent=2)

        return CompressionReport(
            core_path=core_path,
            core_bytes=len(core_payload),
            core_aliases=len(tiered.core_search),
            core_identities=len(tiered.core_cik),
            extended_paths=extended_paths,
            extended_aliases=len(tiered.extended_search),
            config_path=config_path,
            reduced=tiered.reduced,
            dropped_aliases=self._dropped_aliases,
            dropped_identities=self._dropped_identities,
        )
