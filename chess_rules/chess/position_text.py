"""
Partial-game text format: the side to move + every piece on the board.
"""

from dataclasses import dataclass
from string import digits
from typing import Self

from chess_rules.chess.board import PIECE_SEPARATOR, Board
from chess_rules.chess.pieces import TEXT_TO_PIECE, UNMOVED_MARKER, Color
from chess_rules.chess.square import COLUMN_NAMES, DEFAULT_BOARD_SIZE
from chess_rules.core.exceptions import InvalidPositionTextError

COLOR_NAMES: dict[str, Color] = {color.name: color for color in Color}


def is_valid_position_text(text: str, size: int = DEFAULT_BOARD_SIZE) -> bool:
    """
    Check if given string follows the partial-game text format.
    """
    fields = split_fields(text)
    if not fields:
        return False

    if not is_valid_color_name(fields[0]):
        return False

    squares_seen: set[str] = set()
    for token in fields[1:]:
        if not is_valid_piece_token(token, size):
            return False
        # two pieces on the same square can never be imported
        square_name = token[1:3].upper()
        if square_name in squares_seen:
            return False
        squares_seen.add(square_name)
    return True


def split_fields(text: str) -> list[str]:
    """Comma separated, surrounding whitespace ignored. An empty board is exported with a trailing comma."""
    fields = [field.strip() for field in text.strip().split(PIECE_SEPARATOR)]
    if len(fields) > 1 and fields[-1] == "":
        fields.pop()
    return fields


def is_valid_color_name(color: str) -> bool:
    """Side to move: WHITE or BLACK (case-insensitive)"""
    return color.upper() in COLOR_NAMES


def is_valid_piece_token(token: str, size: int = DEFAULT_BOARD_SIZE) -> bool:
    """<TypeLetter><Column><Row>[*]"""
    if len(token) not in (3, 4):
        return False

    if token[0].lower() not in TEXT_TO_PIECE:
        return False

    if not is_valid_square(token[1:3], size):
        return False

    if len(token) == 4 and token[3] != UNMOVED_MARKER:
        return False
    return True


def is_valid_square(square: str, size: int = DEFAULT_BOARD_SIZE) -> bool:
    """Valid square should be a letter for the column + a single (ASCII) digit for the row"""
    if len(square) != 2:
        return False

    column_char, row_char = square
    if column_char.upper() not in tuple(COLUMN_NAMES[:size]):
        return False

    if row_char not in digits:
        return False

    return 1 <= int(row_char) <= size


@dataclass
class PositionText:
    """
    Data that can be constructed from a partial-game text.
    ----

    <side to move>,<piece>,<piece>,...

    * The side to move is either "WHITE" or "BLACK" (any case when reading, upper case when writing)
    * Every piece is written as <TypeLetter><Column><Row>[*]
        - letters P, N, B, R, Q, K. Capital letters for the white pieces, small letters for the black pieces.
        - a trailing '*' when a rook or king has not moved yet (so castling is still possible)
    * Pieces are listed in the order the board holds them, not in rank/file order.

    ex) The standard starting position starts as
    WHITE,PA2,pA7,RA1*,rA8*,PB2,pB7,NB1,nB8,...
    """

    color_to_move: Color
    board: Board

    @classmethod
    def from_text(cls, text: str, size: int = DEFAULT_BOARD_SIZE) -> Self:
        """Parse the text into data"""

        # raise an exception if invalid text:
        if not is_valid_position_text(text, size):
            raise InvalidPositionTextError(f"Cannot interpret supplied string as a partial game: {text!r}")

        color_name, *tokens = split_fields(text)
        color_to_move = COLOR_NAMES[color_name.upper()]
        board = Board.from_text(PIECE_SEPARATOR.join(tokens), size)
        return cls(color_to_move, board)

    def to_text(self) -> str:
        """reverse operation: write the text from the given data"""
        return f"{self.color_to_move.name}{PIECE_SEPARATOR}{self.board.to_text()}"

