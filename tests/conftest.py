"""Root pytest configuration."""

from typing import Any


def pytest_configure(config: Any) -> None:
    """Register the test markers."""
    config.addinivalue_line("markers", "unit: Fast unit tests")
    config.addinivalue_line("markers", "integration: Tests that bind real sockets")
