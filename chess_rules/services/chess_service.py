"""Orchestration of communication from a request to business logic and persistence layers (and the reverse direction)."""

import logging
from typing import Optional
from uuid import UUID

from chess_rules.api.models import (
    CreateGameRequest,
    DeleteGameRequest,
    GameResponse,
    GetGameRequest,
    ImportGameRequest,
    ImportGameResponse,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRequest,
    MoveResponse,
    PromoteRequest,
)
from chess_rules.chess.board import Board
from chess_rules.chess.game import Game
from chess_rules.chess.pieces import Color as DomainColor
from chess_rules.chess.pieces import PieceType as DomainPieceType
from chess_rules.chess.square import Square
from chess_rules.core.config import Settings
from chess_rules.core.exceptions import InvalidRequestError, RepositoryError
from chess_rules.core.models import GameModel
from chess_rules.core.shared_types import Color, MoveResult
from chess_rules.db.repository import GameRepository

logger = logging.getLogger(__name__)


class ChessService:
    """Orchestration of layers for chess game. Every request loads the game, acts on it, and stores it again."""

    def __init__(self, repository: GameRepository, settings: Optional[Settings] = None) -> None:
        self.repo = repository
        self.settings = settings if settings is not None else Settings()

    # -- Request handling logic ---
    def create_game(self, request: CreateGameRequest) -> GameResponse:
        """New game: standard starting position, unless a partial game is supplied."""
        game = Game(board=Board(size=self.settings.board_size))
        if request.position_text is None:
            game.start_new_game()
        elif not game.import_text(request.position_text):
            raise InvalidRequestError(f"Cannot start a game from {request.position_text!r}")

        if request.white_player is not None:
            game.set_player_name(DomainColor.WHITE, request.white_player)
        if request.black_player is not None:
            game.set_player_name(DomainColor.BLACK, request.black_player)

        stored_game, game_id = self.repo.create_game(game.to_model())
        logger.debug("Created game %s", game_id)
        return self._create_game_response(game_id, self._to_game(stored_game))

    def get_game(self, request: GetGameRequest) -> GameResponse:
        """Retrieve current game state."""
        game = self._fetch_game(request.game_id)
        return self._create_game_response(request.game_id, game)

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """retrieve set of legal destinations of the piece on the requested square."""
        game = self._fetch_game(request.game_id)
        destinations = game.legal_moves(Square.from_text(request.square))
        return LegalMovesResponse(
            game_id=request.game_id,
            square=request.square,
            legal_moves=sorted(square.to_text() for square in destinations),
        )

    def make_move(self, request: MoveRequest) -> MoveResponse:
        """Make a move attempt. Only an accepted move gets stored."""
        game = self._fetch_game(request.game_id)
        status = game.execute_move(
            Square.from_text(request.from_square), Square.from_text(request.to_square)
        )
        if status != MoveResult.INVALID:
            self.repo.update_game(request.game_id, game.to_model())
        return self._create_move_response(request.game_id, game, status)

    def promote(self, request: PromoteRequest) -> MoveResponse:
        game = self._fetch_game(request.game_id)
        status = game.promote(
            Square.from_text(request.square), DomainPieceType[request.promote_to.name]
        )
        if status != MoveResult.INVALID:
            self.repo.update_game(request.game_id, game.to_model())
        return self._create_move_response(request.game_id, game, status)

    def import_game(self, request: ImportGameRequest) -> ImportGameResponse:
        """Replace the position of an existing game (players are kept)."""
        game = self._fetch_game(request.game_id)
        imported = game.import_text(request.position_text)
        if imported:
            self.repo.update_game(request.game_id, game.to_model())
        return ImportGameResponse(
            game_id=request.game_id,
            imported=imported,
            position_text=game.to_model().position_text,
        )

    def delete_game(self, request: DeleteGameRequest) -> None:
        """Handle a request to delete a Game record."""
        self.repo.delete_game(request.game_id)

    # -- Internal helpers --
    def _create_game_response(self, game_id: UUID, game: Game) -> GameResponse:
        model = game.to_model()
        return GameResponse(
            game_id=game_id,
            players=model.players,
            position_text=model.position_text,
            color_to_move=Color[game.color_to_move.name],
            in_check=game.is_in_check(game.color_to_move),
            winner=game.winner(),
        )

    def _create_move_response(self, game_id: UUID, game: Game, status: MoveResult) -> MoveResponse:
        return MoveResponse(
            game_id=game_id,
            status=status,
            position_text=game.to_model().position_text,
            color_to_move=Color[game.color_to_move.name],
            winner=game.winner(),
        )

    def _to_game(self, model: GameModel) -> Game:
        return Game.from_model(model, size=self.settings.board_size)

    def _fetch_game(self, game_id: UUID) -> Game:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return self._to_game(game_model)
