"""Unit tests for src/db/sql_repository.py"""

import pytest
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.chess3d.game import create_initial_game_state, serialize_game_state
from src.core.exceptions import RepositoryError
from src.core.models import GameModel
from src.db.schema import DBSavedGame
from src.db.sql_repository import SQLGameRepository

KEY = "tri_dim_chess_save"


def test_save_and_get_document(db_session_repo: Session) -> None:
    """A saved game document comes back unchanged."""
    document = serialize_game_state(create_initial_game_state()).to_json()

    repo = SQLGameRepository(db_session_repo)
    repo.save_document(KEY, document)

    found = repo.get_document(KEY)
    assert found == document
    assert GameModel.model_validate_json(found).current_turn == "white"


def test_get_unknown_document(db_session_repo: Session) -> None:
    """Should return None if the key does not match anything in database."""
    repo = SQLGameRepository(db_session_repo)
    assert repo.get_document(KEY) is None

    repo.save_document("some other key", "{}")
    assert repo.get_document(KEY) is None


def test_save_replaces_existing_document(db_session_repo: Session) -> None:
    """Only one record per key: saving again overwrites."""
    repo = SQLGameRepository(db_session_repo)
    repo.save_document(KEY, '{"first": true}')
    repo.save_document(KEY, '{"second": true}')

    assert repo.get_document(KEY) == '{"second": true}'
    assert db_session_repo.query(DBSavedGame).count() == 1


def test_timestamps_are_set(db_session_repo: Session) -> None:
    repo = SQLGameRepository(db_session_repo)
    repo.save_document(KEY, "{}")

    record = db_session_repo.get(DBSavedGame, KEY)
    assert record is not None
    assert record.created_at is not None
    assert record.updated_at is not None


def test_delete_document(db_session_repo: Session) -> None:
    repo = SQLGameRepository(db_session_repo)
    repo.save_document(KEY, "{}")

    assert repo.delete_document(KEY)
    assert repo.get_document(KEY) is None
    assert not repo.delete_document(KEY)


def test_failed_commit_raises_repository_error(
    db_session_repo: Session, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Database errors surface as a RepositoryError and the session is rolled back."""

    def broken_commit() -> None:
        raise SQLAlchemyError("disk full")

    repo = SQLGameRepository(db_session_repo)
    monkeypatch.setattr(db_session_repo, "commit", broken_commit)

    with pytest.raises(RepositoryError):
        repo.save_document(KEY, "{}")

    monkeypatch.undo()
    assert repo.get_document(KEY) is None
