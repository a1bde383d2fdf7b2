"""Requests and Response models"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from chess_rules.chess.position_text import is_valid_square
from chess_rules.chess.square import MAX_BOARD_SIZE
from chess_rules.core.exceptions import InvalidRequestError
from chess_rules.core.shared_types import Color, MoveResult, PieceType, Winner

PieceColor = str
PlayerName = str

PROMOTION_CHOICES = (PieceType.KNIGHT, PieceType.BISHOP, PieceType.ROOK, PieceType.QUEEN)


def _is_square_name(value: str) -> bool:
    """A column letter A..I + a single digit 1..9 for the row (any case). Whether it fits the board is up to the game."""
    return is_valid_square(value, MAX_BOARD_SIZE)


def validate_square_name(value: str) -> str:
    if not _is_square_name(value):
        raise InvalidRequestError(f"Cannot interpret {value!r} as a valid square name.")
    return value.upper()


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    white_player: Optional[PlayerName] = None
    black_player: Optional[PlayerName] = None
    position_text: Optional[str] = None

    @field_validator("position_text")
    @classmethod
    def validate_position_text(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value

        side_to_move = value.strip().split(",")[0].strip()
        if side_to_move.upper() not in Color.__members__:
            raise InvalidRequestError(
                f"Partial game must start with the side to move (white or black), got {side_to_move!r}."
            )
        return value


class GetGameRequest(BaseModel):
    game_id: UUID


class DeleteGameRequest(BaseModel):
    game_id: UUID


class LegalMovesRequest(BaseModel):
    game_id: UUID
    square: str

    @field_validator("square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        return validate_square_name(value)


class MoveRequest(BaseModel):
    game_id: UUID
    from_square: str
    to_square: str

    @field_validator(*["from_square", "to_square"])
    @classmethod
    def validate_square(cls, value: str) -> str:
        return validate_square_name(value)


class PromoteRequest(BaseModel):
    game_id: UUID
    square: str
    promote_to: PieceType

    @field_validator("square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        return validate_square_name(value)

    @field_validator("promote_to")
    @classmethod
    def validate_promotion_choice(cls, value: PieceType) -> PieceType:
        if value not in PROMOTION_CHOICES:
            raise InvalidRequestError(
                f"Cannot promote to {value}. Pick one from {','.join(PROMOTION_CHOICES)}"
            )
        return value


class ImportGameRequest(BaseModel):
    game_id: UUID
    position_text: str


# --- RESPONSE MODELS ---
class GameResponse(BaseModel):
    game_id: UUID
    players: dict[PieceColor, PlayerName]
    position_text: str
    color_to_move: Color
    in_check: bool
    winner: Optional[Winner]


class MoveResponse(BaseModel):
    game_id: UUID
    status: MoveResult
    position_text: str
    color_to_move: Color
    winner: Optional[Winner]


class LegalMovesResponse(BaseModel):
    game_id: UUID
    square: str
    legal_moves: list[str]


class ImportGameResponse(BaseModel):
    game_id: UUID
    imported: bool
    position_text: str
