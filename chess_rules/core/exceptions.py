"""
Custom exceptions, shared by all layers.

NOTE: Normal game flow (an illegal move attempt, a malformed import) is never signalled by raising these to the caller of the engine:
the engine converts them into result values. They exist to separate the layers' responsibilities.
"""


class GameError(Exception):
    """Top-level exception for anything the chess application raises on purpose."""


class InvalidPositionTextError(GameError):
    """Partial-game text cannot be parsed."""


class BoardInvariantError(GameError):
    """Two pieces on one square. A programming error: must never happen if every mutation goes through the Board."""


class GameStateError(GameError):
    """The (transport) representation of a game is inconsistent."""


class SnapshotError(GameError):
    """A saved snapshot of the game cannot be decoded."""


class RepositoryError(GameError):
    """Persistence layer could not find/store the requested game."""


class InvalidRequestError(GameError):
    """Request data does not pass validation."""


class ConfigurationError(GameError):
    """Settings could not be interpreted."""
