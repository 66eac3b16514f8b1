"""
Unit tests for the built-in curated list.
"""

from company_index.builtin import BUILTIN_COMPANIES, builtin_index


class TestBuiltinIndex:
    """Tests for builtin_index."""

    def test_every_company_has_ticker_alias(self):
        """Test that each ticker is a search key."""
        search, identities = builtin_index()

        for company in BUILTIN_COMPANIES:
            assert company.ticker in search
        assert len(identities) == len({c.cik for c in BUILTIN_COMPANIES})

    def test_records_are_priority_with_ticker(self):
        """Test built-in identities are priority and ticker-bearing."""
        _, identities = builtin_index()

        assert all(r.priority and r.has_ticker for r in identities.values())

    def test_tesla(self):
        """Test a well-known entry is present and padded."""
        search, identities = builtin_index()

        assert search["TSLA"].cik == "0001318605"
        assert identities["0001318605"].name == "Tesla, Inc."

    def test_aliases_point_to_their_company(self):
        search, _ = builtin_index()

        assert search["APPLE"].cik == search["AAPL"].cik
