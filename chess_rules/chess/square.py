"""
A square on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass
from string import ascii_uppercase

# Standard chess is 8x8, but the board size is a property of the Board (see Settings.board_size)
DEFAULT_BOARD_SIZE = 8
# Rows are written as a single digit
MAX_BOARD_SIZE = 9
COLUMN_NAMES = ascii_uppercase


@dataclass(frozen=True)
class Square:
    file: int
    rank: int

    @classmethod
    def from_text(cls, sq: str) -> Square:
        """Text notation: 'A1' - 'H8' (any case) get converted to (1,1) - (8,8)"""
        file = COLUMN_NAMES.index(sq[0].upper()) + 1
        rank = int(sq[1:])
        return cls(file, rank)

    def to_text(self) -> str:
        return f"{self.column}{self.rank}"

    @property
    def column(self) -> str:
        return COLUMN_NAMES[self.file - 1]

    def offset(self, df: int, dr: int) -> Square:
        return Square(self.file + df, self.rank + dr)

    def is_within_bounds(self, size: int = DEFAULT_BOARD_SIZE) -> bool:
        return (1 <= self.file <= size) and (1 <= self.rank <= size)

    def __str__(self) -> str:
        return self.to_text()
