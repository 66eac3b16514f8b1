"""
Name normalization and alias derivation.

Shared by the merger (alias generation), the compressor (designator checks)
and the runtime engine (query normalization).
"""

from __future__ import annotations

import re

# Trailing corporate suffix and anything after it ("APPLE INC /CA/" -> "APPLE")
_SUFFIX_PATTERN = re.compile(
    r"\s+(INC\.?|CORP\.?|CO\.?|LTD\.?|LLC\.?|LP\.?|PLC\.?)(\s.*)?$",
    re.IGNORECASE,
)
_PUNCTUATION_PATTERN = re.compile(r"[,.\-]")
_NON_WORD_PATTERN = re.compile(r"[^\w\s]")
_WHITESPACE_PATTERN = re.compile(r"\s+")

CORPORATE_DESIGNATORS = frozenset(
    {
        "INC",
        "INCORPORATED",
        "CORP",
        "CORPORATION",
        "LLC",
        "LTD",
        "LIMITED",
        "CO",
        "COMPANY",
        "LP",
        "PLC",
    }
)
_DESIGNATOR_PATTERN = re.compile(
    r"\b(" + "|".join(sorted(CORPORATE_DESIGNATORS)) + r")\b"
)


def pad_cik(cik: int | str) -> str:
    """Normalize CIK to 10-digit zero-padded string."""
    return str(cik).strip().zfill(10)


def normalize_query(query: str) -> str:
    """Uppercase and trim a free-text query."""
    return (query or "").strip().upper()


def derive_alias(name: str) -> str:
    """
    Derive a compact search alias from a legal name.

    Strips the trailing corporate suffix, removes punctuation and whitespace,
    and uppercases the result.

    Examples:
        "Apple Inc." -> "APPLE"
        "Alphabet Inc. Class A" -> "ALPHABET"
        "JPMorgan Chase & Co." -> "JPMORGANCHASE"
    """
    cleaned = _SUFFIX_PATTERN.sub("", name.strip())
    cleaned = _PUNCTUATION_PATTERN.sub(" ", cleaned)
    cleaned = _NON_WORD_PATTERN.sub(" ", cleaned)
    cleaned = _WHITESPACE_PATTERN.sub(" ", cleaned).strip().upper()
    return cleaned.replace(" ", "")


def has_corporate_designator(name: str) -> bool:
    """Check whether a name carries a corporate designator word (INC, CORP, ...)."""
    return bool(_DESIGNATOR_PATTERN.search(_NON_WORD_PATTERN.sub(" ", name.upper())))
