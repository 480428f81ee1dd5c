"""
Pytest configuration and fixtures for Batch Insert tests.
"""
import pytest
from sqlalchemy import create_engine

from sample_models import Base


# Define test markers
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "core: tests that don't require database connections"
    )
    config.addinivalue_line(
        "markers", "db: tests that run against a SQLite database"
    )


@pytest.fixture
def sqlite_engine():
    """In-memory SQLite engine with the sample tables created."""
    engine = create_engine("sqlite://")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


