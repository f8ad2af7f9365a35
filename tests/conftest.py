"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Generator

import pytest
from sqlalchemy.orm import Session

from src.chess3d.boards import Board, create_initial_boards
from src.db.database import build_engine, create_session_factory
from src.db.schema import Base

# Setup an in-memory SQLite database for testing
engine = build_engine("sqlite:///:memory:")
TestingSessionLocal = create_session_factory(engine)


@pytest.fixture
def db_session_repo() -> Generator[Session, None, None]:
    """Connection to a test database. Tables are removed at teardown to make unit tests of repository independent of each other."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def boards() -> list[Board]:
    """The seven boards in their starting configuration (no pieces)."""
    return create_initial_boards()
