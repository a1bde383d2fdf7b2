"""
Type definitions used across layers (string valued, so they travel through requests/responses and the database unchanged)
"""

from enum import StrEnum


class MoveResult(StrEnum):
    INVALID = "invalid"
    VALID = "valid"
    VALID_PROMOTION = "valid, promotion pending"
    DRAW = "draw"
    CHECKMATE_WHITE = "checkmate, white wins"
    CHECKMATE_BLACK = "checkmate, black wins"


class Winner(StrEnum):
    WHITE = "white"
    BLACK = "black"
    DRAW = "draw"


# --- Color and PieceType as seen from outside the domain layer. The domain versions live in chess_rules/chess/pieces.py
# --- NOTE Same names (Color and PieceType) as that reads clearly: the imports show which versions are used in what part of the code


class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"


class PieceType(StrEnum):
    PAWN = "pawn"
    KNIGHT = "knight"
    BISHOP = "bishop"
    ROOK = "rook"
    QUEEN = "queen"
    KING = "king"
