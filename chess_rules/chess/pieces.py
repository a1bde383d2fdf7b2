"""Defines the types of chess pieces"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Self

from chess_rules.chess.square import Square


class PieceType(Enum):
    PAWN = auto()
    KNIGHT = auto()
    BISHOP = auto()
    ROOK = auto()
    QUEEN = auto()
    KING = auto()


class Color(Enum):
    WHITE = auto()
    BLACK = auto()

    @property
    def opponent(self) -> Color:
        return Color.BLACK if self == Color.WHITE else Color.WHITE


TEXT_TO_PIECE: dict[str, PieceType] = {
    "p": PieceType.PAWN,
    "n": PieceType.KNIGHT,
    "b": PieceType.BISHOP,
    "r": PieceType.ROOK,
    "q": PieceType.QUEEN,
    "k": PieceType.KING,
}

PIECE_TO_TEXT: dict[PieceType, str] = {
    value: key for key, value in TEXT_TO_PIECE.items()
}

# Only these pieces carry castling rights, so only these keep track of having moved
TRACKS_MOVEMENT: frozenset[PieceType] = frozenset({PieceType.ROOK, PieceType.KING})

UNMOVED_MARKER = "*"


@dataclass
class Piece:
    type: PieceType
    color: Color
    square: Square
    has_moved: bool = False

    @classmethod
    def from_text(cls, token: str) -> Self:
        """
        Token of the partial-game text format: <letter><column><row>[*]

        * upper case letter: White piece, lower case: Black piece
        * a trailing '*' means the piece has NOT moved yet (only meaningful for rooks and kings)
        """
        character = token[0]
        color = Color.WHITE if character.isupper() else Color.BLACK
        piece_type = TEXT_TO_PIECE[character.lower()]
        square = Square.from_text(token[1:3])
        has_moved = not token.endswith(UNMOVED_MARKER)
        return cls(piece_type, color, square, has_moved)

    def to_text(self) -> str:
        letter = PIECE_TO_TEXT[self.type]
        letter = letter.upper() if self.color == Color.WHITE else letter.lower()
        marker = UNMOVED_MARKER if self.tracks_movement and not self.has_moved else ""
        return f"{letter}{self.square.to_text()}{marker}"

    @property
    def tracks_movement(self) -> bool:
        return self.type in TRACKS_MOVEMENT

    @property
    def letter(self) -> str:
        return self.to_text()[0]
