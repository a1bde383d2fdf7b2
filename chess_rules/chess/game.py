"""
The Game class is the entrypoint into the domain layer for the service/history layer.
It is responsible for orchestrating all the business logic required to play a turn:
turn order, legal move filtering, special moves (castling, en passant, promotion) and the end-of-game checks.
"""

from dataclasses import dataclass, field
from typing import Optional, Self

from chess_rules.chess.board import Board
from chess_rules.chess.castling import CastlingSquares, castling_side_of_king_move
from chess_rules.chess.moves import (
    PROMOTION_OPTIONS,
    en_passant_rank,
    is_on_promotion_rank,
    pawn_direction,
)
from chess_rules.chess.pieces import Color, Piece, PieceType
from chess_rules.chess.position_text import PositionText, is_valid_square
from chess_rules.chess.square import DEFAULT_BOARD_SIZE, Square
from chess_rules.core.exceptions import GameStateError, InvalidPositionTextError
from chess_rules.core.log import GameLog
from chess_rules.core.models import GameModel
from chess_rules.core.shared_types import MoveResult, Winner

# Standard setup, per column: the piece standing on the back ranks next to the pawns.
# Kings and queens are placed after the other pieces (that fixes the order of the exported text)
BACK_RANK_BY_COLUMN: dict[str, PieceType] = {
    "A": PieceType.ROOK,
    "B": PieceType.KNIGHT,
    "C": PieceType.BISHOP,
    "F": PieceType.BISHOP,
    "G": PieceType.KNIGHT,
    "H": PieceType.ROOK,
}
KING_COLUMN = "E"
QUEEN_COLUMN = "D"
STANDARD_COLUMNS = "ABCDEFGH"


@dataclass
class Game:
    # --- DOMAIN LAYER API CALLED BY SERVICE / HISTORY CONTROLLER ---

    board: Board = field(default_factory=Board)
    log: GameLog = field(default_factory=GameLog)
    color_to_move: Color = Color.WHITE
    # The pawn that advanced two squares in the previous half-move (can be taken en passant)
    en_passant_pawn: Optional[Piece] = None
    # Only used to log "in check" once when a side gets into check
    last_side_in_check: Optional[Color] = None
    players: dict[Color, str] = field(default_factory=dict)

    @classmethod
    def from_model(
        cls,
        model: GameModel,
        log: Optional[GameLog] = None,
        size: int = DEFAULT_BOARD_SIZE,
    ) -> Self:
        """Define how to construct a Game from the information the Service / history layer actually has"""

        try:
            position = PositionText.from_text(model.position_text, size)
        except InvalidPositionTextError as error:
            raise GameStateError(f"Invalid position in game model: {error}") from error

        en_passant_pawn = None
        if model.en_passant_square is not None:
            if not is_valid_square(model.en_passant_square, size):
                raise GameStateError(f"Invalid en passant square: {model.en_passant_square!r}")
            en_passant_pawn = position.board.piece_at(Square.from_text(model.en_passant_square))
            if en_passant_pawn is None or en_passant_pawn.type != PieceType.PAWN:
                raise GameStateError(f"No pawn to take en passant on {model.en_passant_square}")

        last_side_in_check = (
            color_from_name(model.last_side_in_check)
            if model.last_side_in_check is not None
            else None
        )
        players = {color_from_name(color): name for color, name in model.players.items()}

        return cls(
            board=position.board,
            log=log if log is not None else GameLog(),
            color_to_move=position.color_to_move,
            en_passant_pawn=en_passant_pawn,
            last_side_in_check=last_side_in_check,
            players=players,
        )

    def to_model(self) -> GameModel:
        """Encode back into a format the Service / history layer uses"""
        return GameModel(
            position_text=PositionText(self.color_to_move, self.board).to_text(),
            en_passant_square=(
                self.en_passant_pawn.square.to_text()
                if self.en_passant_pawn is not None
                else None
            ),
            last_side_in_check=(
                self.last_side_in_check.name.lower()
                if self.last_side_in_check is not None
                else None
            ),
            players={color.name.lower(): name for color, name in self.players.items()},
        )

    # --- COMMANDS ---
    def reset(self) -> None:
        """Empty board, white to move."""
        self.board = Board(size=self.board.size)
        self.color_to_move = Color.WHITE
        self.en_passant_pawn = None
        self.last_side_in_check = None
        self.log.append("Board reset.")

    def start_new_game(self) -> None:
        """Reset and place all pieces on their standard starting squares."""
        self.reset()
        size = self.board.size
        for column in STANDARD_COLUMNS:
            self._place(PieceType.PAWN, Color.WHITE, f"{column}2")
            self._place(PieceType.PAWN, Color.BLACK, f"{column}{size - 1}")
            if column in BACK_RANK_BY_COLUMN:
                piece_type = BACK_RANK_BY_COLUMN[column]
                self._place(piece_type, Color.WHITE, f"{column}1")
                self._place(piece_type, Color.BLACK, f"{column}{size}")
        self._place(PieceType.KING, Color.WHITE, f"{KING_COLUMN}1")
        self._place(PieceType.KING, Color.BLACK, f"{KING_COLUMN}{size}")
        self._place(PieceType.QUEEN, Color.WHITE, f"{QUEEN_COLUMN}1")
        self._place(PieceType.QUEEN, Color.BLACK, f"{QUEEN_COLUMN}{size}")
        self.log.append("New game started.")

    def execute_move(self, from_square: Square, to_square: Square) -> MoveResult:
        """
        Attempt to make a move
        -----

        1. is there a piece of the side to move on the starting square?
        2. is the target square one of its legal destinations?
        3. update the board (NOTE: captures, en passant captures, moving the rook when castling)
        4. update the en passant pawn
        5. switch turns, keep track of a side getting into check
        6. pawn reached the final rank? --> promotion is pending, the position is not final yet
        7. otherwise: check for draw / checkmate
        """
        move_name = f"{from_square}-{to_square}"
        piece = self.board.piece_at(from_square)
        if piece is None or piece.color != self.color_to_move:
            self.log.append(f"Invalid move {move_name}: no {self.color_to_move.name.lower()} piece on {from_square}.")
            return MoveResult.INVALID

        if to_square not in self._candidate_destinations(piece):
            self.log.append(f"Invalid move {move_name}: not a valid destination for the {piece_name(piece)}.")
            return MoveResult.INVALID

        if self._is_putting_yourself_in_check(piece, to_square):
            self.log.append(f"Invalid move {move_name}: leaves the king in check.")
            return MoveResult.INVALID

        self._update_board(piece, to_square)
        self.log.append(f"Move executed: {piece_name(piece)} from {from_square} to {to_square}.")

        self._switch_turn()
        self._update_check_state()

        if is_on_promotion_rank(piece, self.board.size):
            self.log.append(f"Pawn on {to_square} can be promoted.")
            return MoveResult.VALID_PROMOTION

        return self._evaluate_position()

    def promote(self, square: Square, piece_type: PieceType) -> MoveResult:
        """
        Replace the pawn on the final rank by a new piece of the chosen type.
        Returns the status of the position once the promotion is done (or INVALID if it is not allowed).

        NOTE: A promoted rook counts as moved: it can never be used for castling.
        """
        pawn = self.board.piece_at(square)
        if pawn is None or not is_on_promotion_rank(pawn, self.board.size):
            self.log.append(f"Invalid promotion: no pawn to promote on {square}.")
            return MoveResult.INVALID

        if piece_type not in PROMOTION_OPTIONS:
            self.log.append(f"Invalid promotion: a pawn cannot become a {piece_type.name.lower()}.")
            return MoveResult.INVALID

        self.board.remove_piece(square)
        self.board.add_piece(Piece(piece_type, pawn.color, square, has_moved=True))
        self.log.append(f"Pawn on {square} promoted to {piece_type.name.lower()}.")

        self._update_check_state()
        return self._evaluate_position()

    def import_text(self, text: str) -> bool:
        """Replace the game by the partial game in the text. Nothing changes when the text cannot be parsed."""
        try:
            position = PositionText.from_text(text, self.board.size)
        except InvalidPositionTextError as error:
            self.log.append(f"Import failed: {error}")
            return False

        self.board = position.board
        self.color_to_move = position.color_to_move
        self.en_passant_pawn = None
        self.last_side_in_check = None
        self.log.append("Game imported.")
        return True

    def export_text(self) -> str:
        self.log.append("Game exported.")
        return PositionText(self.color_to_move, self.board).to_text()

    def set_player_name(self, color: Color, name: str) -> None:
        self.players[color] = name

    # --- QUERIES ---
    @property
    def board_size(self) -> int:
        return self.board.size

    def board_text(self) -> str:
        return self.board.to_text()

    def player_name(self, color: Color) -> Optional[str]:
        return self.players.get(color)

    def has_piece_at(self, square: Square) -> bool:
        return self.board.is_occupied(square)

    def piece_type_name(self, square: Square) -> Optional[str]:
        piece = self.board.piece_at(square)
        return piece_name(piece) if piece is not None else None

    def piece_letter_at(self, square: Square) -> Optional[str]:
        """Letter used in the text format (upper case: white)"""
        piece = self.board.piece_at(square)
        return piece.letter if piece is not None else None

    def legal_moves(self, square: Square) -> set[Square]:
        """
        Legal destinations for the piece on the square (whichever side it belongs to)
        ----

        ----
        **Combines the following**

        1. candidate moves, using the basic movement rules (castling included for the king)
        2. en passant captures (depend on the previous move, so not known by the piece itself)
        3. remove illegal options --> a move that would put you in check or you are in check and the move does not get you out of it.
        """
        piece = self.board.piece_at(square)
        if piece is None:
            return set()
        return self._legal_destinations(piece)

    def is_in_check(self, color: Color) -> bool:
        return self.board.is_check(color)

    def is_draw(self, color: Color) -> bool:
        """Stalemate: not in check, but no legal move either. Needs both kings on the board."""
        if self.board.king(Color.WHITE) is None or self.board.king(Color.BLACK) is None:
            return False
        return not self.is_in_check(color) and not self._has_legal_move(color)

    def is_checkmate(self, color: Color) -> bool:
        """NOTE: no king means no check, so no checkmate either"""
        return self.is_in_check(color) and not self._has_legal_move(color)

    def winner(self) -> Optional[Winner]:
        if self.is_draw(Color.WHITE) or self.is_draw(Color.BLACK):
            return Winner.DRAW
        if self.is_checkmate(Color.WHITE):
            return Winner.BLACK
        if self.is_checkmate(Color.BLACK):
            return Winner.WHITE
        return None

    def is_promotable(self, square: Square) -> bool:
        piece = self.board.piece_at(square)
        return piece is not None and is_on_promotion_rank(piece, self.board.size)

    # -- PRIVATE HELPERS ---
    def _place(self, piece_type: PieceType, color: Color, square_name: str) -> None:
        self.board.add_piece(Piece(piece_type, color, Square.from_text(square_name)))

    def _switch_turn(self) -> None:
        self.color_to_move = self.color_to_move.opponent

    def _update_check_state(self) -> None:
        """Log a side getting into check once (not on every move it stays in check)."""
        if self.last_side_in_check is not None and not self.is_in_check(self.last_side_in_check):
            self.last_side_in_check = None

        color = self.color_to_move
        if self.is_in_check(color) and self.last_side_in_check != color:
            self.log.append(f"{color.name.capitalize()} is in check.")
            self.last_side_in_check = color

    def _evaluate_position(self) -> MoveResult:
        """The position is final: look for the end of the game."""
        if self.is_draw(Color.WHITE) or self.is_draw(Color.BLACK):
            self.log.append("Draw (stalemate).")
            return MoveResult.DRAW

        if self.is_checkmate(Color.WHITE):
            self.log.append("Checkmate! White loses.")
            return MoveResult.CHECKMATE_BLACK

        if self.is_checkmate(Color.BLACK):
            self.log.append("Checkmate! Black loses.")
            return MoveResult.CHECKMATE_WHITE

        return MoveResult.VALID

    # -- LEGAL MOVES HELPERS ---
    def _candidate_destinations(self, piece: Piece) -> set[Square]:
        return self.board.pseudo_legal_moves(piece) | self._en_passant_moves(piece)

    def _legal_destinations(self, piece: Piece) -> set[Square]:
        return {
            square
            for square in self._candidate_destinations(piece)
            if not self._is_putting_yourself_in_check(piece, square)
        }

    def _has_legal_move(self, color: Color) -> bool:
        return any(self._legal_destinations(piece) for piece in self.board.pieces_of(color))

    def _is_putting_yourself_in_check(self, piece: Piece, to_square: Square) -> bool:
        """Return True if the move puts (or leaves) you in check

        plan:
        1. Copy the board
        2. make the candidate move on the copy
        3. determine if king is in check on the new board
        """
        board = self.board.copy()
        captured_square = self._captured_square(piece, to_square)
        if captured_square is not None:
            board.remove_piece(captured_square)

        moving_piece = board.piece_at(piece.square)
        # for the typechecker: the copy holds the same pieces
        assert moving_piece is not None
        board.move_piece(moving_piece, to_square)
        return board.is_check(piece.color)

    def _captured_square(self, piece: Piece, to_square: Square) -> Optional[Square]:
        """Where the piece that gets captured stands (None: no capture)"""
        if self.board.is_occupied(to_square):
            return to_square
        if self._is_en_passant_capture(piece, to_square):
            # for the typechecker: only an en passant capture when that pawn exists
            assert self.en_passant_pawn is not None
            return self.en_passant_pawn.square
        return None

    # --- EN PASSANT RULE HELPERS ----
    def _en_passant_moves(self, piece: Piece) -> set[Square]:
        """
        A pawn on its own fifth rank can take the pawn that just advanced two squares,
        if that pawn now stands right next to it. It lands on the square that pawn skipped.
        """
        target = self.en_passant_pawn
        if piece.type != PieceType.PAWN or target is None or target.color == piece.color:
            return set()

        if piece.square.rank != en_passant_rank(piece.color, self.board.size):
            return set()

        is_adjacent = target.square.rank == piece.square.rank and abs(target.square.file - piece.square.file) == 1
        if not is_adjacent:
            return set()

        landing_square = target.square.offset(0, pawn_direction(piece.color))
        if not self.board.is_empty(landing_square):
            return set()
        return {landing_square}

    def _is_en_passant_capture(self, piece: Piece, to_square: Square) -> bool:
        """Pawns only move diagonally onto an empty square when taking en passant"""
        return (
            piece.type == PieceType.PAWN
            and self.en_passant_pawn is not None
            and to_square.file != piece.square.file
            and not self.board.is_occupied(to_square)
        )

    def _update_board(self, piece: Piece, to_square: Square) -> None:
        """
        Call for the proper updates of the Board's position
        """
        from_square = piece.square
        captured_square = self._captured_square(piece, to_square)
        if captured_square is not None:
            self.board.remove_piece(captured_square)

        self.board.move_piece(piece, to_square)

        # castling move must displace two pieces on the board
        castling_side = (
            castling_side_of_king_move(from_square, to_square)
            if piece.type == PieceType.KING
            else None
        )
        if castling_side is not None:
            squares = CastlingSquares.for_king(from_square, castling_side, self.board.size)
            # for the typechecker: only a legal destination when castling was possible
            assert squares is not None
            rook = self.board.piece_at(squares.rook_from)
            assert rook is not None
            self.board.move_piece(rook, squares.rook_to)
            rook.has_moved = True

        if piece.tracks_movement:
            piece.has_moved = True

        # check if the move creates an en passant opportunity for the opponent
        ranks_moved = abs(to_square.rank - from_square.rank)
        self.en_passant_pawn = piece if piece.type == PieceType.PAWN and ranks_moved == 2 else None


# -- NAMING HELPERS ---
def piece_name(piece: Piece) -> str:
    return piece.type.name.lower()


def color_from_name(name: str) -> Color:
    if name.upper() not in Color.__members__:
        raise GameStateError(
            f"Invalid color name: {name!r}. \nPick one from {','.join([color.name.lower() for color in Color])}"
        )
    return Color[name.upper()]
