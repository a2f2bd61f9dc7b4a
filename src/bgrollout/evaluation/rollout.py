"""Monte Carlo rollouts.

A rollout estimates the outcome distribution of a position by playing it
out many times. The first two half moves are not sampled: every one of the
36 * 36 = 1296 combinations of the first two rolls is played exactly once.
All later rolls come from a dice source. In each simulated game both sides
greedily play the move their inner evaluator considers best.

Usage:
    rollout = RolloutEvaluator(RandomEvaluator(), RolloutConfig(seed=42))
    probabilities = rollout.eval(position)
"""

import itertools
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from bgrollout.core.dice import ALL_ORDERED_ROLLS, DiceSource, RandomDice
from bgrollout.core.position import Position
from bgrollout.core.types import Dice, GameResult, Probabilities
from bgrollout.evaluation.evaluator import Evaluator

logger = logging.getLogger(__name__)


# Forced (first roll, second roll) for each of the 1296 games of a rollout
FIRST_TWO_ROLLS: List[Tuple[Dice, Dice]] = list(itertools.product(ALL_ORDERED_ROLLS, repeat=2))

GAMES_PER_ROLLOUT = len(FIRST_TWO_ROLLS)


@dataclass
class RolloutConfig:
    """Configuration for rollouts.

    Attributes:
        seed: Seed for the dice after the two forced rolls. None gives
            different dice on every call.
    """
    seed: Optional[int] = None


def result_for_starting_player(result: GameResult, plies_played: int) -> GameResult:
    """Convert a final result to the perspective of the player who started.

    `result` is read from the position after the last half move. That
    position has already switched sides, so it belongs to the player who
    did not make the last move. After an odd number of half moves this is
    the opponent of the starting player, and the result must be reversed.

    Args:
        result: Game result from the perspective of the final position
        plies_played: Number of half moves played, including the last one

    Returns:
        Game result from the perspective of the starting player
    """
    if plies_played % 2 == 1:
        return result.reverse()
    return result


class RolloutEvaluator(Evaluator):
    """Evaluator that plays out 1296 games for each position.

    Args:
        evaluator: Inner evaluator choosing the moves in the simulated games
        config: Rollout configuration (uses defaults if None)
    """

    def __init__(self, evaluator: Evaluator, config: Optional[RolloutConfig] = None):
        self.evaluator = evaluator
        self.config = config or RolloutConfig()

    def eval(self, pos: Position) -> Probabilities:
        """Roll out `pos`; the first two half moves are given, the rest is random."""
        histogram = self.rollout_histogram(pos, RandomDice(self.config.seed))
        return Probabilities.from_counts(histogram.tolist())

    def rollout_histogram(self, pos: Position, dice_source: DiceSource) -> NDArray[np.int64]:
        """Play all 1296 games and count the results.

        Args:
            pos: Starting position
            dice_source: Dice for every roll after the two forced ones

        Returns:
            Number of games per `GameResult`, indexed by `GameResult.value`
        """
        histogram = np.zeros(len(GameResult), dtype=np.int64)
        for first_dice in FIRST_TWO_ROLLS:
            result = self.single_rollout(pos, first_dice, dice_source)
            histogram[result.value] += 1

        assert histogram.sum() == GAMES_PER_ROLLOUT, (
            f"Rollout should look at {GAMES_PER_ROLLOUT} games, got {histogram.sum()}"
        )
        logger.debug(
            "Rollout finished: %s",
            {result.name: int(histogram[result.value]) for result in GameResult},
        )
        return histogram

    def single_rollout(
        self,
        pos: Position,
        first_dice: Sequence[Dice],
        dice_source: DiceSource,
    ) -> GameResult:
        """Play a single game to the end.

        Args:
            pos: Starting position
            first_dice: Dice for the first half moves, may be empty
            dice_source: Dice once all of `first_dice` have been used

        Returns:
            Game result from the perspective of the mover of `pos`
        """
        ply = 0
        while True:
            dice = first_dice[ply] if ply < len(first_dice) else dice_source.roll()
            pos = self.evaluator.best_position_by_equity(pos, dice)
            ply += 1
            result = pos.game_state()
            if result is not None:
                return result_for_starting_player(result, ply)
