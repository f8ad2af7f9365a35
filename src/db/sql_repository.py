"""Implementation of (Game)Repository using SQLAlchemy"""

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.core.exceptions import RepositoryError
from src.db.schema import DBSavedGame


class SQLGameRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_document(self, key: str) -> str | None:
        """Get the saved document stored under key, if record exists."""
        saved = self._fetch_saved_game(key)
        if saved:
            return saved.document
        return None

    def save_document(self, key: str, document: str) -> None:
        """Store the document under key, replacing whatever was there."""
        saved = self._fetch_saved_game(key)
        if saved is None:
            self.db.add(DBSavedGame(key=key, document=document))
        else:
            saved.document = document
        self._commit(f"save {key!r}")

    def delete_document(self, key: str) -> bool:
        """Remove a saved document. Returns False if there was nothing to remove."""
        saved = self._fetch_saved_game(key)
        if not saved:
            return False
        self.db.delete(saved)
        self._commit(f"delete {key!r}")
        return True

    def _commit(self, action: str) -> None:
        """Commit, or roll back and raise a RepositoryError the service layer understands."""
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(f"Could not {action}") from e

    def _fetch_saved_game(self, key: str) -> DBSavedGame | None:
        query = select(DBSavedGame).where(DBSavedGame.key == key)
        return self.db.scalar(query)
