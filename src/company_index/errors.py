"""
Company Index Errors

Custom exception hierarchy for the index build pipeline and runtime loader.
"""

from __future__ import annotations

from enum import Enum


class LoadFailureKind(str, Enum):
    """Why a runtime artifact could not be used."""

    NOT_FOUND = "not_found"
    UNREADABLE = "unreadable"


class CompanyIndexError(Exception):
    """Base exception for all company index errors."""

    def __init__(self, message: str, path: str | None = None):
        """
        Initialize company index error.

        Args:
            message: Error description
            path: File the error relates to, if any
        """
        self.path = path
        super().__init__(message)


class BuildError(CompanyIndexError):
    """Base exception for build-time failures."""


class SourceNotFoundError(BuildError):
    """A required raw registry file is missing."""


class SourceFormatError(BuildError):
    """A raw registry file exists but cannot be parsed at all."""


class DownloadError(BuildError):
    """Failed to download a raw registry file."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        url: str | None = None,
        status_code: int | None = None,
    ):
        """
        Initialize download error.

        Args:
            message: Error description
            path: Destination file
            url: URL that failed
            status_code: HTTP status code if applicable
        """
        self.url = url
        self.status_code = status_code
        super().__init__(message, path)


class CoreTierEmptyError(BuildError):
    """Cleaning and classification left no aliases for the core tier."""

    def __init__(self, message: str, input_aliases: int = 0, ceiling_bytes: int | None = None):
        self.input_aliases = input_aliases
        self.ceiling_bytes = ceiling_bytes
        super().__init__(message)


class ManifestError(CompanyIndexError):
    """A chunk manifest is missing or malformed."""


class ArtifactLoadError(CompanyIndexError):
    """A runtime artifact could not be loaded."""

    def __init__(self, message: str, kind: LoadFailureKind, path: str | None = None):
        """
        Initialize artifact load error.

        Args:
            message: Error description
            kind: Whether the artifact was missing or unreadable
            path: Artifact path
        """
        self.kind = kind
        super().__init__(message, path)
