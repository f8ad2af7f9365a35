"""Protocol repository (key-value store for saved game documents)"""

from typing import Protocol


class GameRepository(Protocol):
    """Persistence layer orchestration"""

    def get_document(self, key: str) -> str | None:
        """Get the saved document stored under key, if record exists."""
        ...

    def save_document(self, key: str, document: str) -> None:
        """Store the document under key, replacing whatever was there."""
        ...

    def delete_document(self, key: str) -> bool:
        """Remove a saved document. Returns False if there was nothing to remove."""
        ...
