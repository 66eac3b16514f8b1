"""
Unit tests for record validation.
"""

from company_index.build.validation import RecordValidator, ValidationResult


class TestValidationResult:
    """Tests for ValidationResult dataclass."""

    def test_valid_result(self):
        """Test creating a valid result."""
        result = ValidationResult(is_valid=True)
        assert result.is_valid
        assert result.errors == []
        assert result.warnings == []

    def test_add_error_invalidates(self):
        """Test that adding error invalidates result."""
        result = ValidationResult(is_valid=True)
        result.add_error("Missing field")

        assert not result.is_valid
        assert "Missing field" in result.errors

    def test_warnings_dont_invalidate(self):
        """Test that warnings don't invalidate result."""
        result = ValidationResult(is_valid=True)
        result.add_warning("Unusual format")

        assert result.is_valid
        assert "Unusual format" in result.warnings


class TestRecordValidator:
    """Tests for RecordValidator."""

    def test_valid_row(self):
        """Test a complete valid row."""
        result = RecordValidator().validate("0000320193", "Apple Inc.", "AAPL")

        assert result.is_valid
        assert result.warnings == []

    def test_missing_fields(self):
        """Test missing cik and name are errors."""
        result = RecordValidator().validate(None, "")

        assert not result.is_valid
        assert len(result.errors) == 2

    def test_non_numeric_cik(self):
        result = RecordValidator().validate("12AB56", "Acme")

        assert not result.is_valid
        assert "Invalid CIK format" in result.errors[0]

    def test_short_cik(self):
        """Test the minimum CIK length and its override."""
        validator = RecordValidator(min_cik_length=6)

        assert not validator.validate("123", "Small Co").is_valid
        assert validator.validate("123", "Small Co", min_cik_length=1).is_valid

    def test_long_name_warns(self):
        """Test over-length names warn but stay valid."""
        result = RecordValidator(max_name_length=10).validate("0000320193", "A" * 11)

        assert result.is_valid
        assert result.warnings

    def test_ticker_checks(self):
        """Test over-long tickers are errors and odd formats are warnings."""
        validator = RecordValidator()

        assert not validator.validate("0000320193", "Apple", "ABCDEFGHIJK").is_valid

        odd = validator.validate("0000320193", "Apple", "AB$")
        assert odd.is_valid
        assert "Unusual ticker format" in odd.warnings[0]

    def test_dotted_ticker(self):
        assert RecordValidator().validate("0001067983", "Berkshire Hathaway", "BRK.B").warnings == []
