"""
Pytest configuration and fixtures for tests.

This file is automatically loaded by pytest and provides shared fixtures
and configuration for all tests.
"""

import os
import sys
from contextlib import asynccontextmanager

import pytest
import pytest_asyncio
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

# Set required environment variables before importing app modules
# These are required for config.py to load properly
os.environ.setdefault('RUNTIME_ENVIRONMENT', 'TEST')
os.environ.setdefault('DB_URL', 'sqlite+aiosqlite:///:memory:')
os.environ.setdefault('CURRENCY', 'INR')
os.environ.setdefault('LOG_LEVEL', 'DEBUG')

# Add parent directory to Python path so tests can import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from models.base import Base
from models.user import User, UserIdentityDTO
from repositories.local_cart import LocalCartRepository
from tools.seed_menu import seed_menu


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest.fixture
def engine():
    """Create in-memory SQLite database (sync engine, drives the async repositories)."""
    import db  # registers all models and the foreign key pragma
    engine = create_engine("sqlite:///:memory:", echo=False)
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    """Create database session."""
    session = Session(engine, expire_on_commit=False)
    yield session
    session.rollback()
    session.close()


@pytest_asyncio.fixture
async def seeded_session(session):
    """Session on a database holding the default menu (items 1-6, spice level, extra toppings)."""
    await seed_menu(session)
    return session


@pytest.fixture
def session_factory(seeded_session):
    """Stand-in for db.get_db_session that always yields the test session."""

    @asynccontextmanager
    async def factory():
        yield seeded_session

    return factory


# ============================================================================
# Identity / Storage Fixtures
# ============================================================================

@pytest.fixture
def identity(session):
    """Signed-in customer with a complete profile."""
    user = User(
        id="user-asha",
        email="asha@example.com",
        first_name="Asha",
        last_name="Rao",
        phone="+91 98450 12345",
        address="12 MG Road",
        city="Bengaluru",
        postal_code="560001",
        is_active=True
    )
    session.add(user)
    session.commit()
    return UserIdentityDTO(id=user.id, email=user.email)


@pytest.fixture
def local_storage(tmp_path):
    """Local cart file in a per-test temp directory."""
    return LocalCartRepository(tmp_path / "foodhub_cart.json")
