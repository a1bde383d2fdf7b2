"""GameRepository on top of the `games` table (one row per saved game, see schema.py)"""

from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from chess_rules.core.models import GameModel
from chess_rules.db.schema import DBGame


class SQLGameRepository:
    """Every call that changes a row commits: a stored snapshot survives the session."""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_game(self, game_id: UUID) -> GameModel | None:
        game_db = self._fetch_game(game_id)
        return self._to_model(game_db) if game_db else None

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Players are copied into the JSON column (the GameModel dict is shared with the caller)"""
        new_id = uuid4()
        game_db = DBGame(
            id=new_id,
            position_text=game.position_text,
            en_passant_square=game.en_passant_square,
            last_side_in_check=game.last_side_in_check,
            players=dict(game.players),
        )
        self.db.add(game_db)
        self.db.commit()
        self.db.refresh(game_db)
        return self._to_model(game_db), new_id

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        game_db.position_text = game.position_text
        game_db.en_passant_square = game.en_passant_square
        game_db.last_side_in_check = game.last_side_in_check
        game_db.players = dict(game.players)
        self.db.commit()
        self.db.refresh(game_db)
        return self._to_model(game_db)

    def delete_game(self, game_id: UUID) -> GameModel | None:
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        game_model = self._to_model(game_db)
        self.db.delete(game_db)
        self.db.commit()
        return game_model

    def _fetch_game(self, game_id: UUID) -> DBGame | None:
        query = select(DBGame).where(DBGame.id == game_id)
        return self.db.scalar(query)

    def _to_model(self, game_db: DBGame) -> GameModel:
        """Row --> snapshot, the engine never sees DBGame"""
        return GameModel(
            position_text=game_db.position_text,
            en_passant_square=game_db.en_passant_square,
            last_side_in_check=game_db.last_side_in_check,
            players=dict(game_db.players),
        )
