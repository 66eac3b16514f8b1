"""Runtime loader and search engine."""

from company_index.runtime.engine import CompanyIndex, create_company_index, score_alias
from company_index.runtime.loader import IndexLoader, LoadOutcome

__all__ = [
    "CompanyIndex",
    "IndexLoader",
    "LoadOutcome",
    "create_company_index",
    "score_alias",
]
