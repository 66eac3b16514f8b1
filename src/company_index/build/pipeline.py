"""
Index Build Pipeline

Merge -> write complete files -> compress -> split oversized files.

The pipeline is one-way: runtime components only ever read what it writes.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from company_index.build.compressor import CompressionReport, IndexCompressor
from company_index.build.merger import IdentityMerger, MergeStats, write_complete
from company_index.build.splitter import ChunkSplitter, SplitResult, manifest_path_for
from company_index.config import CORE_CIK_PREFIX, CORE_SEARCH_PREFIX, IndexConfig
from company_index.telemetry import trace_index_operation

logger = logging.getLogger(__name__)


@dataclass
class BuildReport:
    """Summary of one build run."""

    merge_stats: MergeStats
    complete_files: list[Path]
    compression: CompressionReport
    splits: list[SplitResult] = field(default_factory=list)
    elapsed_seconds: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "merge": self.merge_stats.to_dict(),
            "complete_files": [str(p) for p in self.complete_files],
            "core_file": str(self.compression.core_path),
            "core_bytes": self.compression.core_bytes,
            "core_aliases": self.compression.core_aliases,
            "core_reduced": self.compression.reduced,
            "extended_files": [str(p) for p in self.compression.extended_paths],
            "extended_aliases": self.compression.extended_aliases,
            "manifests": [str(s.manifest_path) for s in self.splits],
            "elapsed_seconds": round(self.elapsed_seconds, 2),
        }


def remove_chunk_set(output_prefix: Path) -> None:
    """Delete a manifest and its part files left by an earlier build."""
    manifest = manifest_path_for(output_prefix)
    if manifest.exists():
        manifest.unlink()
    for part in output_prefix.parent.glob(f"{output_prefix.name}-part*.json"):
        part.unlink()


def split_core(
    splitter: ChunkSplitter,
    core_path: Path,
    output_dir: Path,
) -> list[SplitResult]:
    """Split the core document's search and cik sections into chunk sets."""
    return [
        splitter.split_file(core_path, output_dir / CORE_SEARCH_PREFIX, section="search"),
        splitter.split_file(core_path, output_dir / CORE_CIK_PREFIX, section="cik"),
    ]


def run_build(
    config: IndexConfig | None = None,
    tickers_path: Path | None = None,
    lookup_path: Path | None = None,
    output_dir: Path | None = None,
    chunk_core: bool = False,
) -> BuildReport:
    """
    Run the full build.

    Args:
        config: Configuration (uses defaults if not provided)
        tickers_path: Ticker registry (defaults to config.tickers_path)
        lookup_path: Bulk listing (defaults to config.cik_lookup_path)
        output_dir: Artifact directory (defaults to config.data_dir)
        chunk_core: Always write the chunked core, even when it fits one file

    Returns:
        BuildReport
    """
    config = config or IndexConfig()
    output_dir = output_dir or config.ensure_data_dir()
    output_dir.mkdir(parents=True, exist_ok=True)
    started = time.time()

    with trace_index_operation("build"):
        logger.info("Stage 1/4: merging identity registries")
        merge_result = IdentityMerger(config).merge(tickers_path, lookup_path)

        logger.info("Stage 2/4: writing complete index")
        complete_files = list(write_complete(merge_result, output_dir))

        logger.info("Stage 3/4: compressing and tiering")
        compression = IndexCompressor(config).compress_merge_result(merge_result, output_dir)

        logger.info("Stage 4/4: splitting oversized files")
        splitter = ChunkSplitter(config)
        splits: list[SplitResult] = []

        remove_chunk_set(output_dir / CORE_SEARCH_PREFIX)
        remove_chunk_set(output_dir / CORE_CIK_PREFIX)
        if chunk_core or splitter.needs_split(compression.core_path):
            splits.extend(split_core(splitter, compression.core_path, output_dir))

        # Extended chunks are already bounded by record count
        for path in complete_files:
            if splitter.needs_split(path):
                splits.append(splitter.split_file(path))

    report = BuildReport(
        merge_stats=merge_result.stats,
        complete_files=complete_files,
        compression=compression,
        splits=splits,
        elapsed_seconds=time.time() - started,
    )
    logger.info("Build complete: %s", json.dumps(report.to_dict()))
    return report
