"""
Where saved games live. ChessService and GameManager.save/load only know this Protocol:
sql_repository.py stores the games with SQLAlchemy, the tests keep them in a dictionary.
"""

from typing import Protocol
from uuid import UUID

from chess_rules.core.models import GameModel


class GameRepository(Protocol):
    """A saved game is a GameModel snapshot (position text, en passant square, check marker, players) under a UUID."""

    def get_game(self, game_id: UUID) -> GameModel | None:
        """The last stored snapshot, None for an unknown id."""
        ...

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store a snapshot under a fresh id."""
        ...

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Overwrite the snapshot after an accepted move, promotion or import. None for an unknown id."""
        ...

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Returns the removed snapshot, None for an unknown id."""
        ...
