"""The Game board holds the placed pieces and answers all spatial questions about them"""

from dataclasses import dataclass, field, replace
from typing import Optional, Self

from chess_rules.chess.moves import MOVEMENT_RULES, THREAT_RULES, CandidateMovesFn
from chess_rules.chess.pieces import Color, Piece, PieceType
from chess_rules.chess.square import DEFAULT_BOARD_SIZE, Square
from chess_rules.core.exceptions import BoardInvariantError

PIECE_SEPARATOR = ","


@dataclass
class Board:
    """
    Unordered collection of pieces (no two on the same square).

    NOTE: The list keeps insertion order. A piece keeps its place in the list when it moves,
    which is the order used for the text representation.
    """

    pieces: list[Piece] = field(default_factory=list)
    size: int = DEFAULT_BOARD_SIZE

    @classmethod
    def from_text(cls, board_text: str, size: int = DEFAULT_BOARD_SIZE) -> Self:
        """
        Construct a board from the comma separated list of piece tokens, ex:
        PA2,pA7,RA1*,rA8*
        """
        board = cls(size=size)
        for token in board_text.split(PIECE_SEPARATOR):
            if token:
                board.add_piece(Piece.from_text(token))
        return board

    def to_text(self) -> str:
        """Pieces in board-internal order, separated by commas"""
        return PIECE_SEPARATOR.join(piece.to_text() for piece in self.pieces)

    def copy(self) -> Self:
        """Independent board to simulate moves on (pieces are copied, so moving them leaves this board untouched)"""
        return type(self)([replace(piece) for piece in self.pieces], self.size)

    # -- LOOKUPS ---
    def is_within_bounds(self, square: Square) -> bool:
        return square.is_within_bounds(self.size)

    def piece_at(self, square: Square) -> Optional[Piece]:
        return next((piece for piece in self.pieces if piece.square == square), None)

    def is_occupied(self, square: Square) -> bool:
        return self.piece_at(square) is not None

    def is_empty(self, square: Square) -> bool:
        """Off-board squares are never empty (nothing can move there)"""
        return self.is_within_bounds(square) and not self.is_occupied(square)

    def king(self, color: Color) -> Optional[Piece]:
        return next(
            (
                piece
                for piece in self.pieces
                if piece.type == PieceType.KING and piece.color == color
            ),
            None,
        )

    def pieces_of(self, color: Color) -> list[Piece]:
        """find all pieces of a given color (a copy of the list: safe to mutate the board while iterating)"""
        return [piece for piece in self.pieces if piece.color == color]

    # -- MUTATIONS ---
    def add_piece(self, piece: Piece) -> None:
        if self.is_occupied(piece.square):
            raise BoardInvariantError(
                f"Cannot place {piece.to_text()}: square {piece.square} is already occupied by {self.piece_at(piece.square)}"
            )
        self.pieces.append(piece)

    def remove_piece(self, square: Square) -> Optional[Piece]:
        piece = self.piece_at(square)
        if piece is not None:
            self.pieces.remove(piece)
        return piece

    def move_piece(self, piece: Piece, to_square: Square) -> None:
        """Relocate the piece. Anything standing on the target square must be removed first."""
        occupant = self.piece_at(to_square)
        if occupant is not None and occupant is not piece:
            raise BoardInvariantError(
                f"Cannot move {piece.to_text()} to {to_square}: occupied by {occupant.to_text()}"
            )
        piece.square = to_square

    # -- MOVES AND ATTACKS ---
    def pseudo_legal_moves(self, piece: Piece) -> set[Square]:
        """
        Before knowing the set of legal moves, we use the movement rules to find candidate moves,
        which will later be tested for legality (making sure it does not put yourself in check.)

        ---
        NOTE: En passant rule is taken care of in the Game class.
        """
        movement_rule: CandidateMovesFn = MOVEMENT_RULES[piece.type]
        return movement_rule(piece, self)

    def threatened_squares(self, by_color: Color) -> set[Square]:
        """Union of all squares the pieces of `by_color` attack (castling never attacks anything)"""
        threatened: set[Square] = set()
        for piece in self.pieces_of(by_color):
            threat_rule: CandidateMovesFn = THREAT_RULES[piece.type]
            threatened |= threat_rule(piece, self)
        return threatened

    def is_square_attacked(self, square: Square, by_color: Color) -> bool:
        for piece in self.pieces_of(by_color):
            threat_rule: CandidateMovesFn = THREAT_RULES[piece.type]
            if square in threat_rule(piece, self):
                return True
        return False

    def is_check(self, color: Color) -> bool:
        """A missing king can never be in check"""
        king = self.king(color)
        if king is None:
            return False
        return self.is_square_attacked(king.square, color.opponent)
