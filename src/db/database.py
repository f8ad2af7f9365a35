"""Generate database session"""

import os
from typing import Generator

from sqlalchemy import Engine, StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.db.schema import Base

DATABASE_URL = os.environ.get(
    "TRI_DIM_CHESS_DATABASE_URL", "sqlite:///tri_dim_chess.db"
)


def build_engine(url: str = DATABASE_URL, echo: bool = False) -> Engine:
    """Create the engine and make sure all tables exist."""
    if url.startswith("sqlite"):
        # an in-memory database only lives as long as its single connection
        pool_options = (
            {"poolclass": StaticPool} if ":memory:" in url else {}
        )
        engine = create_engine(
            url,
            echo=echo,
            connect_args={"check_same_thread": False},
            **pool_options,
        )
    else:
        engine = create_engine(url, echo=echo)

    # Ensure all tables are created
    Base.metadata.create_all(bind=engine)
    return engine


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(autoflush=False, bind=engine)


def get_db(session_factory: sessionmaker[Session]) -> Generator[Session, None, None]:
    db = session_factory()
    try:
        yield db
    finally:
        db.close()
