"""
SEC Source Download

Fetches the two raw registries the merger consumes:

- company_tickers.json (ticker-bearing registry, small)
- cik-lookup-data.txt (bulk entity listing, large; streamed to disk)

SEC requires a descriptive User-Agent header on automated requests.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path

import httpx

from company_index.config import IndexConfig
from company_index.errors import DownloadError
from company_index.telemetry import SpanAttributes, trace_index_operation

logger = logging.getLogger(__name__)

RETRYABLE_STATUS = (429, 500, 502, 503, 504)


class SourceDownloader:
    """
    Downloads raw registry files from SEC.

    Handles:
    - Streaming download to a temporary ``.part`` file, renamed on success
    - Retry with exponential backoff on rate limiting, server errors and timeouts
    """

    def __init__(
        self,
        config: IndexConfig | None = None,
        transport: httpx.BaseTransport | None = None,
        max_retries: int = 3,
        backoff_seconds: float = 1.0,
    ):
        """
        Initialize downloader.

        Args:
            config: Configuration (uses defaults if not provided)
            transport: Optional httpx transport (used to stub the network)
            max_retries: Maximum attempts per file
            backoff_seconds: Base delay for exponential backoff
        """
        self._config = config or IndexConfig()
        self._max_retries = max_retries
        self._backoff_seconds = backoff_seconds
        self._client = httpx.Client(
            headers={"User-Agent": self._config.sec_user_agent},
            timeout=httpx.Timeout(self._config.download_timeout_seconds),
            follow_redirects=True,
            transport=transport,
        )

    def __enter__(self) -> SourceDownloader:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def download(self, url: str, destination: Path, chunk_size: int = 65536) -> Path:
        """
        Stream ``url`` to ``destination``.

        Raises:
            DownloadError: On a non-retryable HTTP error or when retries run out
        """
        destination.parent.mkdir(parents=True, exist_ok=True)
        partial = destination.with_name(destination.name + ".part")
        last_error: Exception | None = None

        for attempt in range(self._max_retries):
            try:
                with self._client.stream("GET", url) as response:
                    if response.status_code in RETRYABLE_STATUS:
                        logger.warning(
                            "SEC returned %d for %s (attempt %d/%d)",
                            response.status_code,
                            url,
                            attempt + 1,
                            self._max_retries,
                        )
                        last_error = DownloadError(
                            f"HTTP error {response.status_code} for {url}",
                            str(destination),
                            url=url,
                            status_code=response.status_code,
                        )
                        self._sleep(attempt)
                        continue

                    if response.status_code >= 400:
                        raise DownloadError(
                            f"HTTP error {response.status_code} for {url}",
                            str(destination),
                            url=url,
                            status_code=response.status_code,
                        )

                    with open(partial, "wb") as f:
                        for chunk in response.iter_bytes(chunk_size=chunk_size):
                            f.write(chunk)

                partial.replace(destination)
                logger.info(
                    "Downloaded %s (%.2f MB)", destination, destination.stat().st_size / 1024 / 1024
                )
                return destination

            except httpx.TimeoutException as e:
                last_error = e
                logger.warning(
                    "Timeout downloading %s (attempt %d/%d)", url, attempt + 1, self._max_retries
                )
                self._sleep(attempt)
            except httpx.TransportError as e:
                last_error = e
                logger.warning("Transport error downloading %s: %s", url, e)
                self._sleep(attempt)

        partial.unlink(missing_ok=True)
        raise DownloadError(
            f"Failed to fetch {url} after {self._max_retries} attempts",
            str(destination),
            url=url,
        ) from last_error

    def _sleep(self, attempt: int) -> None:
        if self._backoff_seconds > 0:
            time.sleep(self._backoff_seconds * 2**attempt)


def download_sources(
    config: IndexConfig | None = None,
    force: bool = False,
    transport: httpx.BaseTransport | None = None,
    backoff_seconds: float = 1.0,
) -> dict[str, Path]:
    """
    Download both raw registries into ``config.source_dir``.

    Existing files are kept unless ``force`` is set.

    Returns:
        Mapping of "tickers" / "cik_lookup" to the local paths
    """
    config = config or IndexConfig()
    config.ensure_source_dir()

    targets = {
        "tickers": (config.sec_tickers_url, config.tickers_path),
        "cik_lookup": (config.sec_cik_lookup_url, config.cik_lookup_path),
    }
    paths: dict[str, Path] = {}

    with SourceDownloader(config, transport=transport, backoff_seconds=backoff_seconds) as downloader:
        for label, (url, path) in targets.items():
            if path.exists() and not force:
                logger.info("Using existing %s file: %s", label, path)
                paths[label] = path
                continue

            with trace_index_operation("download", {SpanAttributes.FILE_PATH: str(path)}) as span:
                logger.info("Downloading %s from %s", label, url)
                paths[label] = downloader.download(url, path)
                if span:
                    span.set_attribute(SpanAttributes.FILE_SIZE_BYTES, path.stat().st_size)

    return paths
