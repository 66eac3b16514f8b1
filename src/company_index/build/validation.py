"""
Record Validation

Validates raw registry rows before they enter the identity map.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

# CIK format: up to 10 digits
CIK_PATTERN = re.compile(r"^\d{1,10}$")

# Ticker format: 1-10 alphanumeric, may include dots and hyphens
TICKER_PATTERN = re.compile(r"^[A-Z0-9][A-Z0-9.\-]{0,9}$")


@dataclass
class ValidationResult:
    """Result of record validation."""

    is_valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def add_error(self, message: str) -> None:
        """Add an error message."""
        self.errors.append(message)
        self.is_valid = False

    def add_warning(self, message: str) -> None:
        """Add a warning message."""
        self.warnings.append(message)


class RecordValidator:
    """Validates identity rows from the ticker registry and the bulk listing."""

    def __init__(
        self,
        min_cik_length: int = 6,
        max_name_length: int = 100,
        max_ticker_length: int = 10,
    ):
        """
        Initialize validator.

        Args:
            min_cik_length: Shortest acceptable raw CIK (before zero padding)
            max_name_length: Longest acceptable legal name
            max_ticker_length: Longest acceptable ticker symbol
        """
        self.min_cik_length = min_cik_length
        self.max_name_length = max_name_length
        self.max_ticker_length = max_ticker_length

    def validate(
        self,
        cik: str | None,
        name: str | None,
        ticker: str | None = None,
        min_cik_length: int | None = None,
    ) -> ValidationResult:
        """
        Validate one identity row.

        Args:
            cik: Raw CIK (unpadded)
            name: Legal name
            ticker: Optional ticker symbol
            min_cik_length: Override for the minimum CIK length

        Returns:
            ValidationResult with is_valid, errors, and warnings
        """
        result = ValidationResult(is_valid=True)
        self._validate_cik(cik, result, min_cik_length or self.min_cik_length)
        self._validate_name(name, result)
        self._validate_ticker(ticker, result)
        return result

    def _validate_cik(self, cik: str | None, result: ValidationResult, min_length: int) -> None:
        if not cik:
            result.add_error("Missing required field: cik")
            return

        if not CIK_PATTERN.match(cik):
            result.add_error(f"Invalid CIK format: {cik} (expected up to 10 digits)")
        elif len(cik) < min_length:
            result.add_error(f"CIK too short: {cik} (min {min_length} digits)")

    def _validate_name(self, name: str | None, result: ValidationResult) -> None:
        if not name:
            result.add_error("Missing required field: name")
        elif len(name) > self.max_name_length:
            result.add_warning(f"Name too long: {len(name)} chars (max {self.max_name_length})")

    def _validate_ticker(self, ticker: str | None, result: ValidationResult) -> None:
        if not ticker:
            return

        if len(ticker) > self.max_ticker_length:
            result.add_error(f"Ticker too long: {ticker}")
        elif not TICKER_PATTERN.match(ticker):
            result.add_warning(f"Unusual ticker format: {ticker}")
