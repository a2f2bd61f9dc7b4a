"""Dice utilities for backgammon.

This module handles dice rolling, dice combinations and the dice sources
that feed simulated games.
"""

from typing import List, Optional, Protocol, Sequence
import numpy as np
from bgrollout.core.types import Dice


def is_doubles(dice: Dice) -> bool:
    """Check if dice roll is doubles.

    Args:
        dice: Dice roll tuple

    Returns:
        True if both dice show the same value
    """
    return dice[0] == dice[1]


def dice_values(dice: Dice) -> List[int]:
    """Get the dice values to use for moves.

    For doubles, you get 4 moves. For non-doubles, you get 2 moves.

    Examples:
        >>> dice_values((3, 5))
        [3, 5]
        >>> dice_values((4, 4))
        [4, 4, 4, 4]
    """
    if is_doubles(dice):
        return [dice[0]] * 4
    else:
        return [dice[0], dice[1]]


def validate_dice(dice: Dice) -> None:
    """Raise ValueError unless `dice` is a pair of faces in 1..6."""
    if len(dice) != 2 or not all(1 <= die <= 6 for die in dice):
        raise ValueError(f"Invalid dice roll: {dice}")


def roll_dice(rng_key: np.random.Generator) -> Dice:
    """Roll two dice.

    Args:
        rng_key: NumPy random generator

    Returns:
        Tuple of (die1, die2) where each is 1-6
    """
    die1 = int(rng_key.integers(1, 7))
    die2 = int(rng_key.integers(1, 7))
    return (die1, die2)


# All 36 ordered rolls, each with probability 1/36
ALL_ORDERED_ROLLS = [(die1, die2) for die1 in range(1, 7) for die2 in range(1, 7)]


# ==============================================================================
# DICE SOURCES
# ==============================================================================


class DiceSource(Protocol):
    """Anything that produces dice rolls for a simulated game."""

    def roll(self) -> Dice:
        ...


class RandomDice:
    """Dice source backed by a NumPy random generator.

    Args:
        seed: Random seed (optional, for reproducibility)
    """

    def __init__(self, seed: Optional[int] = None):
        self.rng = np.random.default_rng(seed)

    def roll(self) -> Dice:
        return roll_dice(self.rng)


class FixedDice:
    """Dice source replaying a fixed sequence of rolls, for tests.

    Rolling past the end of the sequence fails, and
    `assert_all_dice_were_used` fails if any roll was left over.
    """

    def __init__(self, rolls: Sequence[Dice]):
        for dice in rolls:
            validate_dice(dice)
        self._rolls = list(rolls)
        self._next = 0

    def roll(self) -> Dice:
        assert self._next < len(self._rolls), (
            f"Requested roll {self._next + 1}, but only {len(self._rolls)} were given"
        )
        dice = self._rolls[self._next]
        self._next += 1
        return dice

    def remaining(self) -> int:
        return len(self._rolls) - self._next

    def assert_all_dice_were_used(self) -> None:
        assert self.remaining() == 0, f"{self.remaining()} dice rolls were not used"
