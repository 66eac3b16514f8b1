"""
Chunk Splitter

Partitions an oversized JSON map into size-bounded chunk files plus a manifest,
and reassembles them. Chunk files keep the source key order so rebuilds are
deterministic.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from company_index.config import MANIFEST_FORMAT_VERSION, MANIFEST_SUFFIX, IndexConfig
from company_index.errors import ManifestError, SourceFormatError, SourceNotFoundError
from company_index.models import ChunkInfo, ChunkManifest
from company_index.telemetry import SpanAttributes, trace_index_operation

logger = logging.getLogger(__name__)


def _serialize(mapping: dict[str, Any]) -> bytes:
    return json.dumps(mapping, separators=(",", ":")).encode("utf-8")


def manifest_path_for(output_prefix: Path) -> Path:
    """``data/core-search`` -> ``data/core-search-index.json``."""
    return output_prefix.with_name(output_prefix.name + MANIFEST_SUFFIX)


@dataclass
class SplitResult:
    """Result of one split: the manifest and the files written."""

    manifest: ChunkManifest
    manifest_path: Path
    chunk_paths: list[Path] = field(default_factory=list)

    @property
    def total_bytes(self) -> int:
        return self.manifest.total_bytes


class ChunkSplitter:
    """Splits JSON maps into chunk files no larger than ``chunk_max_bytes``."""

    def __init__(self, config: IndexConfig | None = None, max_chunk_bytes: int | None = None):
        self.config = config or IndexConfig()
        self.max_chunk_bytes = max_chunk_bytes or self.config.chunk_max_bytes

    def entries_per_chunk(self, entries: list[tuple[str, Any]]) -> int:
        """Estimate how many entries fit in one chunk from a leading sample."""
        sample = dict(entries[: self.config.chunk_sample_size])
        if not sample:
            return 1
        average = len(_serialize(sample)) / len(sample)
        return max(1, math.floor(self.max_chunk_bytes / average * self.config.chunk_buffer_factor))

    def needs_split(self, path: Path) -> bool:
        """Check whether a file exceeds the chunk ceiling."""
        return path.exists() and path.stat().st_size > self.max_chunk_bytes

    def split_mapping(
        self,
        mapping: dict[str, Any],
        output_prefix: Path,
        source_file: str,
    ) -> SplitResult:
        """
        Split a mapping into ``{prefix}-partNN.json`` files.

        Args:
            mapping: Map to partition (key order is preserved)
            output_prefix: Path prefix for chunk files and the manifest
            source_file: Name recorded as ``originalFile`` in the manifest

        Returns:
            SplitResult with the manifest and written paths
        """
        entries = list(mapping.items())
        per_chunk = self.entries_per_chunk(entries)
        output_prefix.parent.mkdir(parents=True, exist_ok=True)

        logger.info(
            "Splitting %s: %d entries, ~%d per chunk (ceiling %d bytes)",
            source_file,
            len(entries),
            per_chunk,
            self.max_chunk_bytes,
        )

        with trace_index_operation("split", {SpanAttributes.FILE_PATH: source_file}) as span:
            manifest = ChunkManifest(
                source_file=source_file,
                total_entries=len(entries),
                version=MANIFEST_FORMAT_VERSION,
            )
            chunk_paths: list[Path] = []

            position = 0
            while position < len(entries):
                batch, payload = self._next_batch(entries, position, per_chunk)
                chunk_index = len(manifest.chunks)
                chunk_path = output_prefix.with_name(
                    f"{output_prefix.name}-part{chunk_index:02d}.json"
                )
                chunk_path.write_bytes(payload)

                manifest.chunks.append(
                    ChunkInfo(file=chunk_path.name, entry_count=len(batch), byte_size=len(payload))
                )
                chunk_paths.append(chunk_path)
                position += len(batch)

                logger.info(
                    "Wrote chunk %d: %s (%.2f MB, %d entries)",
                    chunk_index,
                    chunk_path.name,
                    len(payload) / 1024 / 1024,
                    len(batch),
                )

            manifest_path = manifest_path_for(output_prefix)
            with open(manifest_path, "w", encoding="utf-8") as f:
                json.dump(manifest.to_dict(), f, indent=2)

            if span:
                span.set_attribute(SpanAttributes.CHUNK_COUNT, manifest.total_chunks)
                span.set_attribute(SpanAttributes.RECORDS_PROCESSED, len(entries))

        logger.info("Wrote manifest %s (%d chunks)", manifest_path, manifest.total_chunks)
        return SplitResult(manifest=manifest, manifest_path=manifest_path, chunk_paths=chunk_paths)

    def _next_batch(
        self,
        entries: list[tuple[str, Any]],
        position: int,
        size: int,
    ) -> tuple[list[tuple[str, Any]], bytes]:
        """Take up to ``size`` entries, halving until the batch fits the ceiling."""
        while True:
            batch = entries[position : position + size]
            payload = _serialize(dict(batch))
            if len(payload) <= self.max_chunk_bytes or len(batch) == 1:
                if len(payload) > self.max_chunk_bytes:
                    logger.warning(
                        "Entry %r alone is %d bytes, above the chunk ceiling",
                        batch[0][0],
                        len(payload),
                    )
                return batch, payload
            size = max(1, len(batch) // 2)

    def split_file(
        self,
        path: Path,
        output_prefix: Path | None = None,
        section: str | None = None,
    ) -> SplitResult:
        """
        Split a JSON map file, or one section of an index document.

        Args:
            path: JSON file to split
            output_prefix: Defaults to the file path without its suffix
            section: Top-level key to split (e.g. "search" or "cik")

        Raises:
            SourceNotFoundError: If the file does not exist
            SourceFormatError: If the file (or section) is not a JSON object
        """
        if not path.exists():
            raise SourceNotFoundError(f"File to split not found: {path}", str(path))

        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise SourceFormatError(f"Cannot split invalid JSON: {e}", str(path)) from e

        if section is not None:
            data = data.get(section) if isinstance(data, dict) else None
        if not isinstance(data, dict):
            raise SourceFormatError(
                f"Expected a JSON object{f' at section {section!r}' if section else ''}",
                str(path),
            )

        prefix = output_prefix or path.with_suffix("")
        return self.split_mapping(data, prefix, path.name)

    @staticmethod
    def merge_chunks(manifest_path: Path) -> dict[str, Any]:
        return merge_chunks(manifest_path)


def load_manifest(manifest_path: Path) -> ChunkManifest:
    """Read a chunk manifest.

    Raises:
        ManifestError: If the manifest is missing or malformed
    """
    try:
        with open(manifest_path, encoding="utf-8") as f:
            return ChunkManifest.from_dict(json.load(f))
    except FileNotFoundError as e:
        raise ManifestError(f"Manifest not found: {manifest_path}", str(manifest_path)) from e
    except (OSError, json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
        raise ManifestError(f"Malformed manifest: {e}", str(manifest_path)) from e


def merge_chunks(manifest_path: Path) -> dict[str, Any]:
    """
    Reassemble the chunks listed in a manifest.

    Later chunks overwrite earlier ones on duplicate keys. Missing chunk files
    are skipped with a warning; an unreadable chunk is a ``ManifestError``.
    """
    manifest = load_manifest(manifest_path)
    merged: dict[str, Any] = {}
    base_dir = manifest_path.parent

    for chunk in manifest.chunks:
        chunk_path = base_dir / chunk.file
        if not chunk_path.exists():
            logger.warning("Chunk file missing, skipping: %s", chunk_path)
            continue
        try:
            with open(chunk_path, encoding="utf-8") as f:
                merged.update(json.load(f))
        except (OSError, json.JSONDecodeError, TypeError, ValueError) as e:
            raise ManifestError(f"Unreadable chunk {chunk.file}: {e}", str(chunk_path)) from e

    if len(merged) != manifest.total_entries:
        logger.warning(
            "Merged %d entries from %s, manifest lists %d",
            len(merged),
            manifest_path.name,
            manifest.total_entries,
        )
    else:
        logger.info("Merged %d entries from %d chunks", len(merged), manifest.total_chunks)
    return merged
