"""
Pytest configuration for unit tests.

Disables telemetry so spans and metrics are no-ops.
"""

import os


def pytest_configure(config):
    """Configure telemetry for unit tests."""
    # Keeps get_tracer()/get_meter() out of the way of tests that stub the OTEL API
    os.environ["COMPANY_INDEX_TELEMETRY_ENABLED"] = "false"
