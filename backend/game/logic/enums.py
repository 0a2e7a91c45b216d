"""
String enum definitions for daily game concepts.
"""

from enum import Enum


class GameStatus(str, Enum):
    """Lifecycle of one daily game. WON and LOST are terminal."""

    IN_PROGRESS = "IN_PROGRESS"
    WON = "WON"
    LOST = "LOST"

    @property
    def is_terminal(self) -> bool:
        return self is not GameStatus.IN_PROGRESS
