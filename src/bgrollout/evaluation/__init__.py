"""Position evaluation and move selection."""

from bgrollout.evaluation.evaluator import (
    Evaluator,
    PartialEvaluator,
    RandomEvaluator,
    Metric,
    equity,
    win,
)

from bgrollout.evaluation.rollout import (
    RolloutConfig,
    RolloutEvaluator,
    FIRST_TWO_ROLLS,
    GAMES_PER_ROLLOUT,
    result_for_starting_player,
)

__all__ = [
    # Evaluators
    "Evaluator",
    "PartialEvaluator",
    "RandomEvaluator",
    "Metric",
    "equity",
    "win",
    # Rollouts
    "RolloutConfig",
    "RolloutEvaluator",
    "FIRST_TWO_ROLLS",
    "GAMES_PER_ROLLOUT",
    "result_for_starting_player",
]
