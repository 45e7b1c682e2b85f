"""
Pytest configuration and fixtures for the label placement tests.
"""

import os
import sys
import tempfile

import pytest

# Add parent directory to path for imports
sys.path.append(os.path.dirname(os.path.dirname(__file__)))

from config import OUTPUT_CONFIG


@pytest.fixture
def temp_output_file():
    """Fixture that provides a temporary output file path and cleans it up after test."""
    with tempfile.NamedTemporaryFile(suffix=".png", delete=False) as tmp_file:
        output_path = tmp_file.name

    yield output_path

    # Cleanup
    if os.path.exists(output_path):
        os.unlink(output_path)


@pytest.fixture(autouse=True)
def restore_output_config(monkeypatch):
    """The CLI flips OUTPUT_CONFIG flags; undo that after every test."""
    monkeypatch.setitem(OUTPUT_CONFIG, "verbose", OUTPUT_CONFIG["verbose"])
    monkeypatch.setitem(OUTPUT_CONFIG, "debug", OUTPUT_CONFIG["debug"])


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
    config.addinivalue_line(
        "markers", "quality: marks tests as quality assurance tests"
    )
    config.addinivalue_line("markers", "cli: marks tests as CLI functionality tests")
