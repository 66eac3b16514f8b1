"""
Runtime Index Loader

Walks the fallback ladder, first success wins:

1. chunked core (core-search-index.json + core-cik-index.json manifests)
2. single-file optimized core (core-database.json)
3. single-file complete (complete-search-database.json + complete-cik-database.json)
4. built-in curated list

Each rung is tried in every candidate directory before moving down. Failed
rungs are recorded as LoadAttempt entries.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from company_index.build.splitter import merge_chunks
from company_index.builtin import builtin_index
from company_index.config import (
    COMPLETE_CIK_FILE,
    COMPLETE_SEARCH_FILE,
    CORE_CIK_PREFIX,
    CORE_FILE,
    CORE_SEARCH_PREFIX,
    MANIFEST_SUFFIX,
    IndexConfig,
)
from company_index.errors import ArtifactLoadError, LoadFailureKind, ManifestError
from company_index.models import IdentityRecord, IndexTier, LoadAttempt, SearchAlias
from company_index.normalize import pad_cik
from company_index.telemetry import SpanAttributes, trace_index_operation

logger = logging.getLogger(__name__)

_PACKAGE_DIR = Path(__file__).resolve().parents[1]
_PROJECT_ROOT = Path(__file__).resolve().parents[3]


@dataclass
class LoadOutcome:
    """What the ladder produced."""

    tier: IndexTier
    search: dict[str, SearchAlias] = field(default_factory=dict)
    identities: dict[str, IdentityRecord] = field(default_factory=dict)
    source: Path | None = None
    version: str | None = None
    attempts: list[LoadAttempt] = field(default_factory=list)


@dataclass
class _Artifact:
    search: dict[str, SearchAlias]
    identities: dict[str, IdentityRecord]
    version: str | None = None


class IndexLoader:
    """Resolves index artifacts from disk, falling back tier by tier."""

    def __init__(self, config: IndexConfig | None = None, search_dirs: list[Path] | None = None):
        """
        Initialize loader.

        Args:
            config: Configuration (uses defaults if not provided)
            search_dirs: Explicit candidate directories (overrides the defaults)
        """
        self.config = config or IndexConfig()
        self._search_dirs = search_dirs

    def candidate_dirs(self) -> list[Path]:
        """Directories searched for artifacts, in priority order, without duplicates."""
        if self._search_dirs is not None:
            candidates = list(self._search_dirs)
        else:
            candidates = [
                Path.cwd() / self.config.data_dir,
                _PACKAGE_DIR / "data",
                _PROJECT_ROOT / "data",
                *self.config.extra_search_dirs,
            ]

        unique: list[Path] = []
        seen: set[Path] = set()
        for directory in candidates:
            resolved = directory.resolve()
            if resolved not in seen:
                seen.add(resolved)
                unique.append(resolved)
        return unique

    def load(self) -> LoadOutcome:
        """Run the ladder. Never raises; the worst outcome is tier FAILED."""
        attempts: list[LoadAttempt] = []
        directories = self.candidate_dirs()

        with trace_index_operation("load") as span:
            rungs = (
                (IndexTier.CHUNKED, f"{CORE_SEARCH_PREFIX}{MANIFEST_SUFFIX}", self._load_chunked),
                (IndexTier.OPTIMIZED, CORE_FILE, self._load_optimized),
                (IndexTier.COMPLETE, COMPLETE_SEARCH_FILE, self._load_complete),
            )
            for tier, marker, loader in rungs:
                outcome = self._try_rung(tier, marker, loader, directories, attempts)
                if outcome is not None:
                    break
            else:
                outcome = self._load_builtin(attempts)

            if span:
                span.set_attribute(SpanAttributes.TIER, outcome.tier.value)
                span.set_attribute(SpanAttributes.ALIAS_COUNT, len(outcome.search))

        for attempt in attempts:
            logger.debug("Skipped %s rung: %s (%s)", attempt.tier.value, attempt.failure.value, attempt.detail)
        logger.info(
            "Company index loaded: tier=%s, %d aliases, %d identities",
            outcome.tier.value,
            len(outcome.search),
            len(outcome.identities),
        )
        return outcome

    def _try_rung(
        self,
        tier: IndexTier,
        marker: str,
        loader,
        directories: list[Path],
        attempts: list[LoadAttempt],
    ) -> LoadOutcome | None:
        found_any = False
        for directory in directories:
            if not (directory / marker).exists():
                continue
            found_any = True
            try:
                artifact = loader(directory)
            except ArtifactLoadError as e:
                logger.warning("Cannot load %s index from %s: %s", tier.value, directory, e)
                attempts.append(LoadAttempt(tier, e.path or str(directory), e.kind, str(e)))
                continue

            return LoadOutcome(
                tier=tier,
                search=artifact.search,
                identities=artifact.identities,
                source=directory,
                version=artifact.version,
                attempts=attempts,
            )

        if not found_any:
            attempts.append(
                LoadAttempt(
                    tier,
                    None,
                    LoadFailureKind.NOT_FOUND,
                    f"{marker} not found in {len(directories)} candidate directories",
                )
            )
        return None

    def _load_chunked(self, directory: Path) -> _Artifact:
        search_manifest = directory / f"{CORE_SEARCH_PREFIX}{MANIFEST_SUFFIX}"
        cik_manifest = directory / f"{CORE_CIK_PREFIX}{MANIFEST_SUFFIX}"
        if not cik_manifest.exists():
            raise ArtifactLoadError(
                "Chunked core has no cik manifest", LoadFailureKind.NOT_FOUND, str(cik_manifest)
            )
        try:
            raw_search = merge_chunks(search_manifest)
            raw_cik = merge_chunks(cik_manifest)
        except ManifestError as e:
            raise ArtifactLoadError(str(e), LoadFailureKind.UNREADABLE, e.path) from e
        return self._build(raw_search, raw_cik, str(search_manifest))

    def _load_optimized(self, directory: Path) -> _Artifact:
        path = directory / CORE_FILE
        document = _read_json(path)
        if not isinstance(document, dict):
            raise ArtifactLoadError("Core index is not a JSON object", LoadFailureKind.UNREADABLE, str(path))
        meta = document.get("meta") or {}
        artifact = self._build(document.get("search"), document.get("cik"), str(path))
        artifact.version = meta.get("version") if isinstance(meta, dict) else None
        return artifact

    def _load_complete(self, directory: Path) -> _Artifact:
        search_path = directory / COMPLETE_SEARCH_FILE
        cik_path = directory / COMPLETE_CIK_FILE
        if not cik_path.exists():
            raise ArtifactLoadError(
                "Complete index has no cik file", LoadFailureKind.NOT_FOUND, str(cik_path)
            )
        return self._build(_read_json(search_path), _read_json(cik_path), str(search_path))

    def _load_builtin(self, attempts: list[LoadAttempt]) -> LoadOutcome:
        if not self.config.builtin_fallback_enabled:
            logger.error("No index artifact could be loaded and the built-in list is disabled")
            return LoadOutcome(tier=IndexTier.FAILED, attempts=attempts)

        logger.warning("No index artifact could be loaded; serving the built-in company list")
        search, identities = builtin_index()
        return LoadOutcome(
            tier=IndexTier.BUILTIN,
            search=search,
            identities=identities,
            attempts=attempts,
        )

    def _build(self, raw_search: Any, raw_cik: Any, path: str) -> _Artifact:
        """Convert raw maps (short or long field names) into typed records."""
        if not isinstance(raw_search, dict) or not isinstance(raw_cik, dict):
            raise ArtifactLoadError(
                "Index artifact is missing its search or cik map", LoadFailureKind.UNREADABLE, path
            )

        skipped = 0
        identities: dict[str, IdentityRecord] = {}
        for raw_id, data in raw_cik.items():
            cik = pad_cik(raw_id)
            try:
                identities[cik] = IdentityRecord.from_entry(cik, data)
            except (ValueError, AttributeError):
                skipped += 1

        search: dict[str, SearchAlias] = {}
        for key, data in raw_search.items():
            try:
                search[key.upper()] = SearchAlias.from_entry(key.upper(), data)
            except (ValueError, AttributeError):
                skipped += 1

        if skipped:
            logger.warning("Skipped %d malformed entries in %s", skipped, path)
        if not search:
            raise ArtifactLoadError("Index artifact contains no aliases", LoadFailureKind.UNREADABLE, path)
        return _Artifact(search=search, identities=identities)


def _read_json(path: Path) -> Any:
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError as e:
        raise ArtifactLoadError(f"Not found: {path}", LoadFailureKind.NOT_FOUND, str(path)) from e
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ArtifactLoadError(f"Cannot parse {path}: {e}", LoadFailureKind.UNREADABLE, str(path)) from e
