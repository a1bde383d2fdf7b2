"""Opaque binary snapshot of a game (used to save to/load from a file)"""

from pydantic import TypeAdapter, ValidationError

from chess_rules.core.exceptions import SnapshotError
from chess_rules.core.models import GameModel

SNAPSHOT_ADAPTER = TypeAdapter(GameModel)


def encode_snapshot(model: GameModel) -> bytes:
    return SNAPSHOT_ADAPTER.dump_json(model)


def decode_snapshot(data: bytes) -> GameModel:
    try:
        return SNAPSHOT_ADAPTER.validate_json(data)
    except ValidationError as error:
        raise SnapshotError(f"Cannot decode game snapshot: {error}") from error
