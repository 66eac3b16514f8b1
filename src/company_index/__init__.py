"""Company Index - SEC company lookup index: build pipeline and runtime search."""

__version__ = "0.1.0"

from company_index.config import IndexConfig, load_config
from company_index.errors import (
    ArtifactLoadError,
    BuildError,
    CompanyIndexError,
    CoreTierEmptyError,
    DownloadError,
    LoadFailureKind,
    ManifestError,
    SourceFormatError,
    SourceNotFoundError,
)
from company_index.models import (
    ChunkInfo,
    ChunkManifest,
    IdentityRecord,
    IndexStats,
    IndexTier,
    LoadAttempt,
    LoadState,
    SearchAlias,
    SearchResult,
)
from company_index.runtime.engine import CompanyIndex, create_company_index

__all__ = [
    "__version__",
    # Config
    "IndexConfig",
    "load_config",
    # Errors
    "ArtifactLoadError",
    "BuildError",
    "CompanyIndexError",
    "CoreTierEmptyError",
    "DownloadError",
    "LoadFailureKind",
    "ManifestError",
    "SourceFormatError",
    "SourceNotFoundError",
    # Models
    "ChunkInfo",
    "ChunkManifest",
    "IdentityRecord",
    "IndexStats",
    "IndexTier",
    "LoadAttempt",
    "LoadState",
    "SearchAlias",
    "SearchResult",
    # Runtime
    "CompanyIndex",
    "create_company_index",
]
