"""Helpers for implementing Castling rules. Need to be imported by multiple sources"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Self

from chess_rules.chess.square import Square


class CastlingSide(Enum):
    """Values are the column direction in which the king travels."""

    KING_SIDE = 1
    QUEEN_SIDE = -1


@dataclass(frozen=True)
class CastlingSquares:
    """
    Store the squares where king/rook start from/end up in by castling.
    NOTE: The rook always sits in a corner of the king's rank, the king travels two columns towards it
    and the rook lands on the square the king skipped over.
    """

    king_from: Square
    king_to: Square
    rook_from: Square
    rook_to: Square

    @classmethod
    def from_text(cls, k_from: str, k_to: str, r_from: str, r_to: str) -> Self:
        """Convenience method: makes tests and constants more readable"""
        return cls(
            Square.from_text(k_from),
            Square.from_text(k_to),
            Square.from_text(r_from),
            Square.from_text(r_to),
        )

    @classmethod
    def for_king(cls, king_square: Square, side: CastlingSide, size: int) -> Optional[Self]:
        """
        Castling squares for a king standing on `king_square`.
        Returns None if the king stands too close to the corner to castle towards it.
        """
        direction = side.value
        rook_file = size if side == CastlingSide.KING_SIDE else 1
        if abs(rook_file - king_square.file) < 3:
            return None
        return cls(
            king_from=king_square,
            king_to=king_square.offset(2 * direction, 0),
            rook_from=Square(rook_file, king_square.rank),
            rook_to=king_square.offset(direction, 0),
        )

    @property
    def squares_between(self) -> list[Square]:
        """All squares strictly in between the king and the rook: must be empty to castle"""
        low, high = sorted((self.king_from.file, self.rook_from.file))
        return [Square(file, self.king_from.rank) for file in range(low + 1, high)]

    @property
    def king_path(self) -> list[Square]:
        """Where the king stands, passes through and lands: none may be attacked"""
        return [self.king_from, self.rook_to, self.king_to]


def castling_side_of_king_move(from_square: Square, to_square: Square) -> Optional[CastlingSide]:
    """A king moving two columns along its rank is castling"""
    if from_square.rank != to_square.rank:
        return None
    difference_in_files = to_square.file - from_square.file
    if difference_in_files == 2:
        return CastlingSide.KING_SIDE
    if difference_in_files == -2:
        return CastlingSide.QUEEN_SIDE
    return None
