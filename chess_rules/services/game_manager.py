"""
History controller: wraps the Game with undo/redo.

Before a move is attempted, the state of the game is stored (as a GameModel snapshot).
A rejected move discards that snapshot again, so only accepted moves end up in the history.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from uuid import UUID

from chess_rules.chess.board import Board
from chess_rules.chess.game import Game
from chess_rules.chess.pieces import Color, PieceType
from chess_rules.chess.square import Square
from chess_rules.core.config import Settings
from chess_rules.core.exceptions import GameStateError, SnapshotError
from chess_rules.core.log import GameLog
from chess_rules.core.models import GameModel
from chess_rules.core.shared_types import MoveResult, Winner
from chess_rules.core.snapshot import decode_snapshot, encode_snapshot
from chess_rules.db.repository import GameRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """What changed by executing a command. The caller decides what to redraw."""

    status: Optional[MoveResult] = None
    board_changed: bool = False
    turn_changed: bool = False
    check_changed: bool = False

    @property
    def accepted(self) -> bool:
        return self.status != MoveResult.INVALID


NOTHING_CHANGED = CommandResult()


class GameManager:
    """Facade for the presentation layer: all commands and queries go through here."""

    def __init__(self, settings: Optional[Settings] = None, log: Optional[GameLog] = None) -> None:
        self.settings = settings if settings is not None else Settings()
        self.log = log if log is not None else GameLog()
        self.game = Game(board=Board(size=self.settings.board_size), log=self.log)
        self._undo_stack: list[GameModel] = []
        self._redo_stack: list[GameModel] = []

    # -- COMMANDS ---
    def start(self) -> CommandResult:
        """New game in the standard starting position"""
        self.game.start_new_game()
        self._clear_history()
        return self._everything_changed()

    def reset(self) -> CommandResult:
        """Empty board"""
        self.game.reset()
        self._clear_history()
        return self._everything_changed()

    def execute_move(self, from_square: Square, to_square: Square) -> CommandResult:
        check_before = self._check_state()
        color_before = self.game.color_to_move
        self._undo_stack.append(self.game.to_model())

        status = self.game.execute_move(from_square, to_square)
        if status == MoveResult.INVALID:
            # rejected attempts never end up in the history
            self._undo_stack.pop()
            return CommandResult(status=status)

        # a new move starts a new branch of history
        self._redo_stack.clear()
        return CommandResult(
            status=status,
            board_changed=True,
            turn_changed=self.game.color_to_move != color_before,
            check_changed=self._check_state() != check_before,
        )

    def promote(self, square: Square, piece_type: PieceType) -> CommandResult:
        """
        Completes the move that brought the pawn to the final rank.
        NOTE: no separate snapshot: undo goes back to before the pawn move.
        """
        check_before = self._check_state()
        status = self.game.promote(square, piece_type)
        if status == MoveResult.INVALID:
            return CommandResult(status=status)
        return CommandResult(
            status=status,
            board_changed=True,
            check_changed=self._check_state() != check_before,
        )

    def undo(self) -> CommandResult:
        if not self.has_undo():
            return NOTHING_CHANGED
        self._redo_stack.append(self.game.to_model())
        self._restore(self._undo_stack.pop())
        logger.debug("Undo: %d left to undo, %d to redo", len(self._undo_stack), len(self._redo_stack))
        return self._everything_changed()

    def redo(self) -> CommandResult:
        if not self.has_redo():
            return NOTHING_CHANGED
        self._undo_stack.append(self.game.to_model())
        self._restore(self._redo_stack.pop())
        logger.debug("Redo: %d left to undo, %d to redo", len(self._undo_stack), len(self._redo_stack))
        return self._everything_changed()

    def has_undo(self) -> bool:
        return len(self._undo_stack) > 0

    def has_redo(self) -> bool:
        return len(self._redo_stack) > 0

    def import_text(self, text: str) -> bool:
        """Import a partial game. On failure, the current game (and its history) is kept."""
        if not self.game.import_text(text):
            return False
        self._clear_history()
        return True

    def export_text(self) -> str:
        return self.game.export_text()

    def export_binary(self, path: Path) -> bool:
        """Save a full snapshot of the game to a file"""
        try:
            path.write_bytes(encode_snapshot(self.game.to_model()))
        except OSError as error:
            logger.warning("Could not save game to %s: %s", path, error)
            return False
        self.log.append(f"Game saved to {path.name}.")
        return True

    def import_binary(self, path: Path) -> bool:
        """Load a snapshot saved with `export_binary`. On failure, the current game is kept."""
        try:
            model = decode_snapshot(path.read_bytes())
            self._replace_game(model)
        except (OSError, SnapshotError, GameStateError) as error:
            logger.warning("Could not load game from %s: %s", path, error)
            self.log.append(f"Could not load game from {path.name}.")
            return False
        self.log.append(f"Game loaded from {path.name}.")
        return True

    def save(self, repository: GameRepository) -> UUID:
        """Store the game in the repository, returns its id"""
        _, game_id = repository.create_game(self.game.to_model())
        self.log.append("Game saved.")
        return game_id

    def load(self, repository: GameRepository, game_id: UUID) -> bool:
        model = repository.get_game(game_id)
        if model is None:
            logger.warning("No saved game with id %s", game_id)
            return False
        try:
            self._replace_game(model)
        except GameStateError as error:
            logger.warning("Saved game %s cannot be restored: %s", game_id, error)
            return False
        self.log.append("Game loaded.")
        return True

    def set_player_name(self, color: Color, name: str) -> None:
        self.game.set_player_name(color, name)

    # -- QUERIES ---
    @property
    def board_size(self) -> int:
        return self.game.board_size

    @property
    def color_to_move(self) -> Color:
        return self.game.color_to_move

    def board_text(self) -> str:
        return self.game.board_text()

    def player_name(self, color: Color) -> Optional[str]:
        return self.game.player_name(color)

    def has_piece_at(self, square: Square) -> bool:
        return self.game.has_piece_at(square)

    def piece_type_name(self, square: Square) -> Optional[str]:
        return self.game.piece_type_name(square)

    def piece_letter_at(self, square: Square) -> Optional[str]:
        return self.game.piece_letter_at(square)

    def legal_moves(self, square: Square) -> set[Square]:
        return self.game.legal_moves(square)

    def is_in_check(self, color: Color) -> bool:
        return self.game.is_in_check(color)

    def is_any_side_in_check(self) -> bool:
        return any(self._check_state())

    def winner(self) -> Optional[Winner]:
        return self.game.winner()

    def is_promotable(self, square: Square) -> bool:
        return self.game.is_promotable(square)

    # -- PRIVATE HELPERS ---
    def _restore(self, model: GameModel) -> None:
        self.game = Game.from_model(model, log=self.log, size=self.board_size)

    def _replace_game(self, model: GameModel) -> None:
        """Raises GameStateError before anything changes if the model cannot be turned into a game"""
        self._restore(model)
        self._clear_history()

    def _clear_history(self) -> None:
        self._undo_stack.clear()
        self._redo_stack.clear()

    def _check_state(self) -> tuple[bool, bool]:
        return self.game.is_in_check(Color.WHITE), self.game.is_in_check(Color.BLACK)

    def _everything_changed(self) -> CommandResult:
        return CommandResult(board_changed=True, turn_changed=True, check_changed=True)
