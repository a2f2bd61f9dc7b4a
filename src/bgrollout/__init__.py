"""
bgrollout - backgammon position evaluation and Monte Carlo rollouts.
"""

__version__ = "0.1.0"

# Core exports
from bgrollout.core.types import (
    Dice,
    GameResult,
    Probabilities,
)
from bgrollout.core.position import Position, STARTING
from bgrollout.evaluation.evaluator import (
    Evaluator,
    PartialEvaluator,
    RandomEvaluator,
)
from bgrollout.evaluation.rollout import RolloutConfig, RolloutEvaluator

__all__ = [
    "Dice",
    "GameResult",
    "Probabilities",
    "Position",
    "STARTING",
    "Evaluator",
    "PartialEvaluator",
    "RandomEvaluator",
    "RolloutConfig",
    "RolloutEvaluator",
]
