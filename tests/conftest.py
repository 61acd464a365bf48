"""
Shared fixtures for the Rune test suite.
Everything runs in memory, so tests are fast and offline.
"""

from datetime import date

import pytest

from rune.intake.record import PatientRecord
from rune.intake.rules import ExtractionRules


@pytest.fixture
def rules():
    """Day-first rules with the built-in tables (independent of .env)."""
    return ExtractionRules()


@pytest.fixture
def today():
    """Fixed evaluation date so derived ages are deterministic."""
    return date(2024, 1, 1)


@pytest.fixture
def record():
    return PatientRecord()


@pytest.fixture(scope="session")
def test_client():
    """Create a FastAPI TestClient for the entire test session."""
    from fastapi.testclient import TestClient
    from rune.app import app
    return TestClient(app)
