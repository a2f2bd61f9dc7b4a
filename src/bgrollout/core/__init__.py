"""Core game logic and data structures."""

from bgrollout.core.types import (
    Dice,
    GameResult,
    Probabilities,
)
from bgrollout.core.dice import DiceSource, RandomDice, FixedDice
from bgrollout.core.position import Position, STARTING

__all__ = [
    "Dice",
    "GameResult",
    "Probabilities",
    "DiceSource",
    "RandomDice",
    "FixedDice",
    "Position",
    "STARTING",
]
