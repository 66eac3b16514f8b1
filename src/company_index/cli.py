"""
Company Index CLI

Usage:
    python -m company_index fetch
    python -m company_index build
    python -m company_index search apple --limit 5
    python -m company_index lookup 320193
    python -m company_index --help
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from company_index import __version__
from company_index.build.compressor import IndexCompressor
from company_index.build.merger import IdentityMerger, write_complete
from company_index.build.pipeline import run_build
from company_index.build.sources import download_sources
from company_index.build.splitter import ChunkSplitter, merge_chunks
from company_index.config import MIB, load_config
from company_index.errors import CompanyIndexError
from company_index.runtime.engine import CompanyIndex
from company_index.runtime.loader import IndexLoader

logger = logging.getLogger(__name__)

console = Console()

app = typer.Typer(
    name="company-index",
    help="SEC company lookup index: build artifacts and search them",
    no_args_is_help=True,
)


def setup_logging(level: str) -> None:
    """Configure logging."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


@app.callback()
def main(
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Logging level (default: from COMPANY_INDEX_LOG_LEVEL or INFO)",
    ),
) -> None:
    setup_logging(log_level or load_config().log_level)


def _fail(error: Exception) -> NoReturn:
    console.print(f"[red]Error:[/red] {error}")
    raise typer.Exit(1)


def _open_index(data_dir: Path | None) -> CompanyIndex:
    config = load_config()
    loader = IndexLoader(config, search_dirs=[data_dir] if data_dir else None)
    return CompanyIndex(config, loader=loader)


# ----------------------------------------------------------------------
# Build commands
# ----------------------------------------------------------------------


@app.command()
def fetch(
    force: bool = typer.Option(False, "--force", "-f", help="Re-download existing files"),
) -> None:
    """Download the SEC ticker registry and bulk entity listing."""
    try:
        paths = download_sources(load_config(), force=force)
    except CompanyIndexError as e:
        _fail(e)

    for label, path in paths.items():
        console.print(f"[green]✓[/green] {label}: {path}")


@app.command()
def merge(
    tickers: Path | None = typer.Option(None, "--tickers", help="Ticker registry JSON"),
    lookup: Path | None = typer.Option(None, "--lookup", help="Bulk listing text file"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output directory"),
) -> None:
    """Merge the registries into the complete index files."""
    config = load_config()
    try:
        result = IdentityMerger(config).merge(tickers, lookup)
        search_path, cik_path = write_complete(result, output or config.ensure_data_dir())
    except CompanyIndexError as e:
        _fail(e)

    table = Table(title="Merge", show_header=True, header_style="bold")
    table.add_column("Counter")
    table.add_column("Value", justify="right")
    for name, value in result.stats.to_dict().items():
        table.add_row(name, f"{value:,}")
    console.print(table)
    console.print(f"[dim]Wrote {search_path} and {cik_path}[/dim]")


@app.command()
def compress(
    data_dir: Path | None = typer.Option(None, "--data-dir", "-d", help="Directory with complete files"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output directory"),
) -> None:
    """Build the core and extended tiers from the complete files."""
    config = load_config()
    source = data_dir or config.data_dir
    try:
        report = IndexCompressor(config).compress_directory(source, output)
    except CompanyIndexError as e:
        _fail(e)

    console.print(
        Panel(
            f"Core: {report.core_path} ({report.core_bytes / MIB:.2f} MB, "
            f"{report.core_aliases:,} aliases, {report.core_identities:,} companies)"
            f"{' [yellow]reduced[/yellow]' if report.reduced else ''}\n"
            f"Extended: {report.extended_aliases:,} aliases in {len(report.extended_paths)} files\n"
            f"Dropped: {report.dropped_aliases:,} aliases, {report.dropped_identities:,} companies",
            title="Compression",
        )
    )


@app.command()
def split(
    file: Path = typer.Argument(..., help="JSON file to split"),
    prefix: Path | None = typer.Option(None, "--prefix", "-p", help="Output prefix for chunk files"),
    section: str | None = typer.Option(None, "--section", "-s", help="Split one section, e.g. search or cik"),
    max_mb: float | None = typer.Option(None, "--max-mb", help="Chunk ceiling in MB"),
) -> None:
    """Split a large JSON map into size-bounded chunks with a manifest."""
    max_bytes = int(max_mb * MIB) if max_mb else None
    try:
        result = ChunkSplitter(load_config(), max_chunk_bytes=max_bytes).split_file(file, prefix, section)
    except CompanyIndexError as e:
        _fail(e)

    table = Table(title=f"Chunks of {file.name}", show_header=True, header_style="bold")
    table.add_column("File")
    table.add_column("Entries", justify="right")
    table.add_column("Size (MB)", justify="right")
    for chunk in result.manifest.chunks:
        table.add_row(chunk.file, f"{chunk.entry_count:,}", f"{chunk.byte_size / MIB:.2f}")
    console.print(table)
    console.print(f"[dim]Manifest: {result.manifest_path}[/dim]")


@app.command("merge-chunks")
def merge_chunks_command(
    manifest: Path = typer.Argument(..., help="Chunk manifest ({prefix}-index.json)"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write the merged map here"),
) -> None:
    """Reassemble chunk files into one map."""
    try:
        merged = merge_chunks(manifest)
    except CompanyIndexError as e:
        _fail(e)

    if output:
        with open(output, "w", encoding="utf-8") as f:
            json.dump(merged, f, separators=(",", ":"))
        console.print(f"[green]✓[/green] {len(merged):,} entries written to {output}")
    else:
        console.print(f"{len(merged):,} entries")


@app.command()
def build(
    fetch_sources: bool = typer.Option(False, "--fetch", help="Download sources first"),
    chunk_core: bool = typer.Option(False, "--chunk-core", help="Always write the chunked core"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output directory"),
) -> None:
    """Run the full pipeline: merge, compress, split."""
    config = load_config()
    try:
        if fetch_sources:
            download_sources(config)
        with console.status("Building company index..."):
            report = run_build(config, output_dir=output, chunk_core=chunk_core)
    except CompanyIndexError as e:
        _fail(e)

    table = Table(title="Build", show_header=True, header_style="bold")
    table.add_column("Item")
    table.add_column("Value", justify="right")
    for name, value in report.to_dict().items():
        if isinstance(value, dict):
            for sub_name, sub_value in value.items():
                table.add_row(f"{name}.{sub_name}", f"{sub_value:,}")
        elif isinstance(value, list):
            table.add_row(name, str(len(value)))
        else:
            table.add_row(name, str(value))
    console.print(table)


# ----------------------------------------------------------------------
# Runtime commands
# ----------------------------------------------------------------------


@app.command()
def search(
    query: str = typer.Argument(..., help="Ticker, alias or company name"),
    limit: int = typer.Option(20, "--limit", "-n", help="Maximum results"),
    min_relevance: int | None = typer.Option(None, "--min-relevance", "-m", help="Minimum relevance"),
    no_prioritize: bool = typer.Option(False, "--no-prioritize", help="Do not rank ticker-bearing first"),
    data_dir: Path | None = typer.Option(None, "--data-dir", "-d", help="Artifact directory"),
    as_json: bool = typer.Option(False, "--json", help="Print results as JSON"),
) -> None:
    """Search the index."""
    index = _open_index(data_dir)
    results = index.search(
        query,
        limit=limit,
        min_relevance=min_relevance,
        prioritize_with_tickers=not no_prioritize,
    )

    if as_json:
        typer.echo(json.dumps([r.to_dict() for r in results], indent=2))
        return

    tier = index.warm().value
    if not results:
        console.print(f"[yellow]No companies match {query!r}[/yellow] (tier: {tier})")
        return

    table = Table(title=f"{query!r} ({tier})", show_header=True, header_style="bold")
    table.add_column("Ticker", style="cyan")
    table.add_column("Name")
    table.add_column("CIK")
    table.add_column("Match")
    table.add_column("Relevance", justify="right")
    for r in results:
        ticker = r.ticker if r.has_ticker_symbol else f"[dim]{r.ticker}[/dim]"
        table.add_row(ticker, r.name, r.cik, r.match_type, str(r.relevance))
    console.print(table)


@app.command()
def lookup(
    cik: str = typer.Argument(..., help="CIK, padded or not"),
    data_dir: Path | None = typer.Option(None, "--data-dir", "-d", help="Artifact directory"),
) -> None:
    """Look up a company by CIK."""
    record = _open_index(data_dir).get_by_canonical_id(cik)
    if record is None:
        console.print(f"[yellow]No company with CIK {cik}[/yellow]")
        raise typer.Exit(1)

    console.print(
        Panel(
            f"Name: {record.name}\nTicker: {record.ticker or '-'}\nPriority: {record.priority}",
            title=record.cik,
        )
    )


@app.command()
def stats(
    data_dir: Path | None = typer.Option(None, "--data-dir", "-d", help="Artifact directory"),
) -> None:
    """Show counts for the tier currently served."""
    index = _open_index(data_dir)
    index_stats = index.get_stats()

    table = Table(title="Company index", show_header=True, header_style="bold")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    for name, value in index_stats.to_dict().items():
        table.add_row(name, f"{value:,}" if isinstance(value, int) else str(value))
    console.print(table)

    for attempt in index.attempts:
        console.print(f"[dim]skipped {attempt.tier.value}: {attempt.failure.value} ({attempt.detail})[/dim]")


@app.command()
def version() -> None:
    """Show version information."""
    typer.echo(f"company-index version {__version__}")


if __name__ == "__main__":
    app()
