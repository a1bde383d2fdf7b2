"""
Log sink for the engine.

The engine appends human-readable messages at well-defined points (moves accepted/rejected, check, mate, ...).
A presentation layer can show `entries` as the game log. Every message is also forwarded to the standard logging module.
"""

import logging

from chess_rules.core.config import Settings

logger = logging.getLogger("chess_rules.game")


class GameLog:
    """Append-only list of messages, in insertion order."""

    def __init__(self) -> None:
        self._entries: list[str] = []

    def append(self, message: str) -> None:
        self._entries.append(message)
        logger.info(message)

    @property
    def entries(self) -> tuple[str, ...]:
        return tuple(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


def configure_logging(settings: Settings) -> None:
    """Composition root calls this once at startup."""
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
