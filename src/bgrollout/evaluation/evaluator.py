"""Position evaluators and move selection.

An evaluator estimates the cubeless outcome distribution of a position from
the mover's perspective. Different evaluators use different strategies
(random values, rollouts, inference of a neural net), but they all share the
move selection built on top of `eval`:

    evaluator = RandomEvaluator(seed=1)
    after_move = evaluator.best_position_by_equity(position, (3, 1))

Positions returned by the move selection have already switched sides, so
the opponent is on move in them.
"""

from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np

from bgrollout.core.position import Position
from bgrollout.core.types import Dice, Probabilities

# Scalar used to order candidate positions, e.g. `Probabilities.equity`
Metric = Callable[[Probabilities], float]


def equity(probabilities: Probabilities) -> float:
    return probabilities.equity()


def win(probabilities: Probabilities) -> float:
    return probabilities.win()


def _raise_on_nan(values: np.ndarray) -> None:
    if np.isnan(values).any():
        raise ValueError(f"Cannot order positions, metric values contain NaN: {values.tolist()}")


# ==============================================================================
# EVALUATOR INTERFACES
# ==============================================================================


class PartialEvaluator(ABC):
    """Evaluator that can only evaluate certain positions.

    Examples are bearoff databases or evaluators that only know backgames.
    """

    @abstractmethod
    def try_eval(self, pos: Position) -> Optional[Probabilities]:
        """Evaluate `pos` if possible.

        Returns:
            Probabilities if the position can be evaluated, otherwise None
        """


class Evaluator(PartialEvaluator):
    """Base class for evaluators that can evaluate every position.

    Subclasses only implement `eval`; the move selection methods are shared.
    """

    @abstractmethod
    def eval(self, pos: Position) -> Probabilities:
        """Cubeless evaluation of `pos` from the mover's perspective."""

    def try_eval(self, pos: Position) -> Optional[Probabilities]:
        """Always succeeds, as all positions can be evaluated."""
        return self.eval(pos)

    def best_position_by_equity(self, pos: Position, dice: Dice) -> Position:
        """Position after applying the *best* move to `pos`.

        The returned position has already switched sides, so the best move
        leads to the position with the *lowest* equity.
        """
        return self.best_position(pos, dice, equity)

    def best_position(self, pos: Position, dice: Dice, metric: Metric) -> Position:
        """Position after applying the *best* move to `pos` according to `metric`.

        The returned position has already switched sides, so the best move
        leads to the position with the *lowest* metric value.

        Args:
            pos: Position with the mover to play
            dice: Dice roll to play
            metric: Scalar computed from the probabilities of each candidate

        Returns:
            Resulting position, from the opponent's perspective
        """
        return self.worst_position(pos.all_positions_after_moving(dice), metric)

    def worst_position(self, positions: Sequence[Position], metric: Metric) -> Position:
        """Candidate with the lowest metric value.

        After switching sides the worst position for the opponent is the
        best one for the player who just moved.

        A single candidate, or a candidate in which the mover has already
        lost, is returned without calling `eval`. Ties keep the first
        candidate.

        Raises:
            ValueError: if there are no candidates or a metric value is NaN
        """
        if not positions:
            raise ValueError("No candidate positions to choose from")
        if len(positions) == 1:
            return positions[0]
        for candidate in positions:
            if candidate.has_lost():
                return candidate

        values = np.array([metric(self.eval(candidate)) for candidate in positions], dtype=np.float64)
        _raise_on_nan(values)
        return positions[int(np.argmin(values))]

    def positions_and_probabilities_by_equity(
        self,
        pos: Position,
        dice: Dice,
    ) -> List[Tuple[Position, Probabilities]]:
        """All legal positions after moving, with their probabilities.

        Positions and probabilities are switched back to the perspective of
        the mover of `pos`. The list is sorted by descending equity, so the
        best move comes first; equal equities keep generation order.

        NaN values never reach the sort: `Probabilities` rejects them when
        `eval` builds its result.
        """
        pos_and_probs = []
        for after_move in pos.all_positions_after_moving(dice):
            probabilities = self.eval(after_move).switch_sides()
            pos_and_probs.append((after_move.switch_sides(), probabilities))

        return sorted(pos_and_probs, key=lambda item: item[1].equity(), reverse=True)


# ==============================================================================
# RANDOM EVALUATOR
# ==============================================================================


class RandomEvaluator(Evaluator):
    """Evaluator returning random probabilities.

    Each call returns different values. Useful as a baseline and to test
    code that needs some evaluator without depending on its quality.

    Each instance owns one NumPy `Generator`, which is not thread safe.
    Use a separate instance per thread.

    Args:
        seed: Random seed (optional, for reproducibility)
    """

    def __init__(self, seed: Optional[int] = None):
        self.rng = np.random.default_rng(seed)

    def eval(self, pos: Position) -> Probabilities:
        values = self.rng.random(6)
        # Normalize so that the six categories add up to 1
        return Probabilities(*(float(v) for v in values / values.sum()))
