"""
Index Build Pipeline

Turns the two raw SEC registries into on-disk index artifacts:
- Identity merge (ticker registry + bulk entity listing)
- Compression and core/extended tiering
- Chunk splitting for oversized files
"""

from company_index.build.compressor import CompressionReport, IndexCompressor
from company_index.build.merger import (
    IdentityMerger,
    MergeResult,
    MergeStats,
    load_complete,
    write_complete,
)
from company_index.build.pipeline import BuildReport, run_build
from company_index.build.progress import ProgressTracker
from company_index.build.sources import SourceDownloader, download_sources
from company_index.build.splitter import ChunkSplitter, SplitResult, merge_chunks
from company_index.build.validation import RecordValidator, ValidationResult

__all__ = [
    # Compressor
    "CompressionReport",
    "IndexCompressor",
    # Merger
    "IdentityMerger",
    "MergeResult",
    "MergeStats",
    "load_complete",
    "write_complete",
    # Pipeline
    "BuildReport",
    "run_build",
    # Progress
    "ProgressTracker",
    # Sources
    "SourceDownloader",
    "download_sources",
    # Splitter
    "ChunkSplitter",
    "SplitResult",
    "merge_chunks",
    # Validation
    "RecordValidator",
    "ValidationResult",
]
