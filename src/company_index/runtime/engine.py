"""
Runtime Search Engine

Relevance-ranked company lookup over whichever tier the loader resolved.

Relevance (first applicable rule wins):

    exact alias lookup        100  exact
    key == query              100  exact_key
    key startswith query       85  key_prefix
    key contains query         70  key_contains
    name startswith query      80  name_prefix
    name contains query        60  name_contains

Lookups never raise: misses return empty results.
"""

from __future__ import annotations

import logging
import threading

from company_index.builtin import builtin_index
from company_index.config import IndexConfig
from company_index.models import (
    IdentityRecord,
    IndexStats,
    IndexTier,
    LoadAttempt,
    LoadState,
    SearchAlias,
    SearchResult,
)
from company_index.normalize import normalize_query, pad_cik
from company_index.runtime.loader import IndexLoader, LoadOutcome
from company_index.telemetry import SpanAttributes, record_index_metric, trace_index_operation

logger = logging.getLogger(__name__)


def score_alias(key: str, name: str, term: str) -> tuple[str, int] | None:
    """Score one alias against a normalized query; None when nothing matches."""
    if key == term:
        return "exact_key", 100
    if key.startswith(term):
        return "key_prefix", 85
    if term in key:
        return "key_contains", 70

    upper_name = name.upper()
    if upper_name.startswith(term):
        return "name_prefix", 80
    if term in upper_name:
        return "name_contains", 60
    return None


class CompanyIndex:
    """
    Company lookup index.

    Loads lazily on the first query (or eagerly via ``warm()``). Concurrent
    first callers wait on one in-flight load; the result is cached for the
    lifetime of the instance and never mutated afterwards.
    """

    def __init__(self, config: IndexConfig | None = None, loader: IndexLoader | None = None):
        """
        Initialize the index.

        Args:
            config: Configuration (uses defaults if not provided)
            loader: Artifact loader (defaults to an IndexLoader over ``config``)
        """
        self.config = config or IndexConfig()
        self._loader = loader or IndexLoader(self.config)
        self._lock = threading.Lock()
        self._state = LoadState.NOT_LOADED
        self._outcome: LoadOutcome | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def state(self) -> LoadState:
        return self._state

    @property
    def tier(self) -> IndexTier | None:
        """Tier serving queries, or None before the first load."""
        return self._outcome.tier if self._outcome else None

    @property
    def attempts(self) -> list[LoadAttempt]:
        """Ladder rungs that were tried and skipped."""
        return list(self._outcome.attempts) if self._outcome else []

    def warm(self) -> IndexTier:
        """Load eagerly and return the resolved tier."""
        return self._ensure_loaded().tier

    def _ensure_loaded(self) -> LoadOutcome:
        outcome = self._outcome
        if outcome is not None:
            return outcome

        with self._lock:
            if self._outcome is None:
                self._state = LoadState.LOADING
                try:
                    outcome = self._loader.load()
                except Exception:
                    logger.exception("Company index load failed unexpectedly")
                    outcome = self._fallback_outcome()

                self._outcome = outcome
                self._state = (
                    LoadState.FAILED if outcome.tier == IndexTier.FAILED else LoadState.LOADED
                )
            return self._outcome

    def _fallback_outcome(self) -> LoadOutcome:
        if not self.config.builtin_fallback_enabled:
            return LoadOutcome(tier=IndexTier.FAILED)
        search, identities = builtin_index()
        return LoadOutcome(tier=IndexTier.BUILTIN, search=search, identities=identities)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def search(
        self,
        query: str,
        limit: int | None = None,
        min_relevance: int | None = None,
        prioritize_with_tickers: bool = True,
    ) -> list[SearchResult]:
        """
        Search companies by ticker, alias or name.

        Args:
            query: Free text (case-insensitive)
            limit: Maximum results (default from config)
            min_relevance: Drop matches below this score (default from config)
            prioritize_with_tickers: Rank ticker-bearing companies first

        Returns:
            Ranked results, one per company
        """
        limit = self.config.search_default_limit if limit is None else limit
        min_relevance = self.config.search_min_relevance if min_relevance is None else min_relevance
        term = normalize_query(query)
        if not term or limit < 1:
            return []

        outcome = self._ensure_loaded()
        with trace_index_operation("search", {SpanAttributes.QUERY_LENGTH: len(term)}) as span:
            results: list[SearchResult] = []
            seen: set[str] = set()

            exact = outcome.search.get(term)
            if exact is not None:
                results.append(self._to_result(exact, "exact", 100, outcome))
                seen.add(exact.cik)

            best: dict[str, SearchResult] = {}
            for key, alias in outcome.search.items():
                if alias.cik in seen:
                    continue
                scored = score_alias(key, alias.name, term)
                if scored is None or scored[1] < min_relevance:
                    continue

                match_type, relevance = scored
                current = best.get(alias.cik)
                if current is None or relevance > current.relevance:
                    best[alias.cik] = self._to_result(alias, match_type, relevance, outcome)

            ranked = sorted(
                best.values(),
                key=lambda r: (
                    not r.has_ticker_symbol if prioritize_with_tickers else False,
                    -r.relevance,
                    r.name,
                ),
            )
            results.extend(ranked)
            results = results[:limit]

            if span:
                span.set_attribute(SpanAttributes.RESULT_COUNT, len(results))

        record_index_metric("searches_total", 1, {SpanAttributes.TIER: outcome.tier.value})
        return results

    def _to_result(
        self,
        alias: SearchAlias,
        match_type: str,
        relevance: int,
        outcome: LoadOutcome,
    ) -> SearchResult:
        identity = outcome.identities.get(alias.cik)
        has_ticker = identity is not None and identity.has_ticker
        return SearchResult(
            ticker=identity.ticker if has_ticker else alias.key,
            name=alias.name,
            cik=alias.cik,
            match_type=match_type,
            relevance=relevance,
            has_ticker_symbol=has_ticker,
        )

    def get_by_canonical_id(self, cik: str | int) -> IdentityRecord | None:
        """Look up a company by CIK (zero-padded on input); None on a miss."""
        raw = str(cik).strip()
        if not raw.isdigit():
            return None
        return self._ensure_loaded().identities.get(pad_cik(raw))

    def get_stats(self) -> IndexStats:
        outcome = self._ensure_loaded()
        return IndexStats(
            total_search_entries=len(outcome.search),
            unique_companies=len({alias.cik for alias in outcome.search.values()}),
            companies_with_tickers=sum(1 for r in outcome.identities.values() if r.has_ticker),
            database_type=outcome.tier.value,
            version=outcome.version,
        )

    def get_suggestions(self, query: str, limit: int = 10) -> list[dict]:
        """Autocomplete entries for a search box."""
        results = self.search(
            query,
            limit=limit,
            min_relevance=self.config.suggestion_min_relevance,
        )
        return [
            {
                "value": result.ticker,
                "label": f"{result.ticker} - {result.name}",
                "cik": result.cik,
                "has_ticker_symbol": result.has_ticker_symbol,
            }
            for result in results
        ]

    def popular_companies(self, limit: int = 100) -> list[IdentityRecord]:
        """Priority companies with a ticker, in index order."""
        popular: list[IdentityRecord] = []
        for record in self._ensure_loaded().identities.values():
            if len(popular) >= limit:
                break
            if record.has_ticker and record.priority:
                popular.append(record)
        return popular


def create_company_index(config: IndexConfig | None = None, warm: bool = False) -> CompanyIndex:
    """
    Factory function to create a company index.

    Args:
        config: Configuration (uses defaults if not provided)
        warm: Load artifacts immediately instead of on the first query

    Returns:
        CompanyIndex instance
    """
    index = CompanyIndex(config)
    if warm:
        index.warm()
    return index
