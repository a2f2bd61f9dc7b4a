"""Core type definitions for backgammon position evaluation.

This module defines the value types shared by the position, dice and
evaluation modules: dice rolls, game results and outcome distributions.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Sequence, Tuple
import numpy as np
from numpy.typing import NDArray


# ==============================================================================
# DICE
# ==============================================================================

# Dice type
Dice = Tuple[int, int]  # (die1, die2) where 1 <= die1, die2 <= 6


# ==============================================================================
# GAME RESULTS
# ==============================================================================

class GameResult(Enum):
    """Final result of a game from the perspective of one player.

    The integer values are used as indices into outcome histograms and
    match the field order of `Probabilities`.
    """
    WIN_NORMAL = 0
    WIN_GAMMON = 1
    WIN_BG = 2
    LOSE_NORMAL = 3
    LOSE_GAMMON = 4
    LOSE_BG = 5

    def reverse(self) -> "GameResult":
        """Return the same result seen from the other player."""
        return _REVERSED[self]


_REVERSED = {
    GameResult.WIN_NORMAL: GameResult.LOSE_NORMAL,
    GameResult.WIN_GAMMON: GameResult.LOSE_GAMMON,
    GameResult.WIN_BG: GameResult.LOSE_BG,
    GameResult.LOSE_NORMAL: GameResult.WIN_NORMAL,
    GameResult.LOSE_GAMMON: GameResult.WIN_GAMMON,
    GameResult.LOSE_BG: GameResult.WIN_BG,
}


# ==============================================================================
# OUTCOME DISTRIBUTION
# ==============================================================================

@dataclass(frozen=True)
class Probabilities:
    """Cubeless outcome distribution from the perspective of the mover.

    All six categories are stored explicitly and must sum to 1.

    Attributes:
        win_normal: P(win without gammon)
        win_gammon: P(win with gammon, no backgammon)
        win_bg: P(win with backgammon)
        lose_normal: P(lose without gammon)
        lose_gammon: P(lose with gammon, no backgammon)
        lose_bg: P(lose with backgammon)
    """
    win_normal: float
    win_gammon: float
    win_bg: float
    lose_normal: float
    lose_gammon: float
    lose_bg: float

    def __post_init__(self):
        """Validate probabilities."""
        values = self.to_array()
        if np.isnan(values).any() or (values < 0.0).any():
            raise ValueError(f"Invalid probabilities: {values.tolist()}")
        total = float(values.sum())
        if abs(total - 1.0) > 1e-4:
            raise ValueError(f"Probabilities sum to {total}, should be 1.0")

    @staticmethod
    def from_counts(counts: Sequence[int]) -> "Probabilities":
        """Normalize six outcome counts (in `GameResult` order) into probabilities.

        Args:
            counts: Number of games per result, indexed by `GameResult.value`

        Returns:
            Probabilities proportional to the counts
        """
        if len(counts) != 6:
            raise ValueError(f"Expected 6 counts, got {len(counts)}")
        if any(c < 0 for c in counts):
            raise ValueError(f"Counts must be nonnegative: {list(counts)}")
        total = sum(counts)
        if total == 0:
            raise ValueError("Cannot normalize counts that sum to zero")
        return Probabilities(*(c / total for c in counts))

    def equity(self) -> float:
        """Cubeless equity in points.

        Normal, gammon and backgammon results count 1, 2 and 3 points.
        Positive = good for the mover, negative = bad.
        """
        win_value = self.win_normal + 2.0 * self.win_gammon + 3.0 * self.win_bg
        lose_value = self.lose_normal + 2.0 * self.lose_gammon + 3.0 * self.lose_bg
        return win_value - lose_value

    def win(self) -> float:
        """Total probability of winning, regardless of magnitude."""
        return self.win_normal + self.win_gammon + self.win_bg

    def switch_sides(self) -> "Probabilities":
        """Return the same distribution from the opponent's perspective."""
        return Probabilities(
            win_normal=self.lose_normal,
            win_gammon=self.lose_gammon,
            win_bg=self.lose_bg,
            lose_normal=self.win_normal,
            lose_gammon=self.win_gammon,
            lose_bg=self.win_bg,
        )

    def to_array(self) -> NDArray[np.float64]:
        """Convert to numpy array in `GameResult` order."""
        return np.array(
            [
                self.win_normal,
                self.win_gammon,
                self.win_bg,
                self.lose_normal,
                self.lose_gammon,
                self.lose_bg,
            ],
            dtype=np.float64,
        )
