"""
Boundary layer data model(s).

These objects can be used to communicate with the Service and the persistence layer.
It is also the unit of an undo/redo snapshot: everything needed to restore a Game exactly.
(Decouples the data model specific to the DB layer, API layer, or domain layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass, field
from typing import Optional

# Type aliases to make GameModel easier to read
PieceColor = str
PlayerName = str


@dataclass(frozen=True)
class GameModel:
    """Transport-safe representation of a chess game used between Service, DB, history and Game layers."""

    position_text: str
    en_passant_square: Optional[str] = None
    last_side_in_check: Optional[PieceColor] = None
    players: dict[PieceColor, PlayerName] = field(default_factory=dict)
