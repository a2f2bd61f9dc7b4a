"""Tests for the evaluator interfaces and move selection."""

from typing import List, Optional

import pytest

from bgrollout.core.position import Position, STARTING
from bgrollout.core.types import Probabilities
from bgrollout.evaluation.evaluator import (
    Evaluator,
    PartialEvaluator,
    RandomEvaluator,
    equity,
    win,
)


def position_with_lowest_equity() -> Position:
    return Position.from_points(x={5: 1, 3: 1}, o={20: 2}).switch_sides()


class EvaluatorFake(Evaluator):
    """Test double. Returns not so good probabilities for one position, better for everything else."""

    def eval(self, pos: Position) -> Probabilities:
        if pos == position_with_lowest_equity():
            return Probabilities(
                win_normal=0.5,
                win_gammon=0.1,
                win_bg=0.1,
                lose_normal=0.1,
                lose_gammon=0.1,
                lose_bg=0.1,
            )
        return Probabilities(
            win_normal=0.38,
            win_gammon=0.2,
            win_bg=0.1,
            lose_normal=0.12,
            lose_gammon=0.1,
            lose_bg=0.1,
        )


class RecordingEvaluator(Evaluator):
    """Test double returning the same probabilities and remembering every call."""

    def __init__(self, probabilities: Optional[Probabilities] = None):
        self.probabilities = probabilities or Probabilities.from_counts([1, 1, 1, 1, 1, 1])
        self.calls: List[Position] = []

    def eval(self, pos: Position) -> Probabilities:
        self.calls.append(pos)
        return self.probabilities


class PreferStartingEvaluator(Evaluator):
    """Test double that considers the starting position a certain loss for the mover."""

    def eval(self, pos: Position) -> Probabilities:
        if pos == STARTING:
            return Probabilities.from_counts([0, 0, 0, 0, 0, 1])
        return Probabilities.from_counts([0, 0, 1, 0, 0, 0])


class NanEvaluator(Evaluator):
    """Test double whose raw output is NaN in every category."""

    def eval(self, pos: Position) -> Probabilities:
        return Probabilities(*([float("nan")] * 6))


class BearoffOnly(PartialEvaluator):
    """Partial evaluator that only knows positions without contact in the home boards."""

    def try_eval(self, pos: Position) -> Optional[Probabilities]:
        if any(count > 0 for count in pos.pips[7:]):
            return None
        return Probabilities.from_counts([1, 0, 0, 0, 0, 0])


class TestBestPosition:
    """Tests for best_position and best_position_by_equity."""

    def test_best_position_by_equity(self):
        given_pos = Position.from_points(x={7: 2}, o={20: 2})
        evaluator = EvaluatorFake()
        best_pos = evaluator.best_position_by_equity(given_pos, (4, 2))
        assert best_pos == position_with_lowest_equity()

    def test_best_position_for_1ptr(self):
        """Same setup as above, but choosing by winning chances picks the other move."""
        given_pos = Position.from_points(x={7: 2}, o={20: 2})
        evaluator = EvaluatorFake()
        best_pos = evaluator.best_position(given_pos, (4, 2), win)
        expected = Position.from_points(x={7: 1, 1: 1}, o={20: 2})
        assert best_pos == expected.switch_sides()

    def test_best_position_with_equity_metric(self):
        given_pos = Position.from_points(x={7: 2}, o={20: 2})
        evaluator = EvaluatorFake()
        assert evaluator.best_position(given_pos, (4, 2), equity) == \
            evaluator.best_position_by_equity(given_pos, (4, 2))

    def test_only_move_is_not_evaluated(self):
        pos = Position.from_points(x={6: 1}, o={19: 1})
        evaluator = RecordingEvaluator()
        best_pos = evaluator.best_position_by_equity(pos, (1, 2))
        assert best_pos == Position.from_points(x={3: 1}, o={19: 1}).switch_sides()
        assert evaluator.calls == []

    def test_winning_move_is_not_evaluated(self):
        pos = Position.from_points(x={6: 1, 1: 1}, o={19: 1})
        evaluator = RecordingEvaluator()
        best_pos = evaluator.best_position_by_equity(pos, (6, 1))
        assert best_pos.has_lost()
        assert evaluator.calls == []


class TestWorstPosition:
    """Tests for worst_position."""

    def test_single_candidate(self):
        evaluator = RecordingEvaluator()
        assert evaluator.worst_position([STARTING], equity) == STARTING
        assert evaluator.calls == []

    def test_empty_candidates(self):
        with pytest.raises(ValueError):
            RecordingEvaluator().worst_position([], equity)

    def test_lost_position_skips_evaluation(self):
        """A position lost for the mover wins, even if the evaluator prefers another one."""
        lost = Position.from_points(x={6: 2}, o={})
        also_lost = Position.from_points(x={5: 2}, o={})
        candidates = [STARTING, lost, also_lost]

        assert PreferStartingEvaluator().worst_position(candidates, equity) == lost

        recording = RecordingEvaluator()
        assert recording.worst_position(candidates, equity) == lost
        assert recording.calls == []

    def test_evaluator_preference_without_lost_positions(self):
        other = Position.from_points(x={6: 2}, o={19: 2})
        assert PreferStartingEvaluator().worst_position([other, STARTING], equity) == STARTING

    def test_ties_keep_first_candidate(self):
        first = Position.from_points(x={6: 2}, o={19: 2})
        second = Position.from_points(x={5: 2}, o={19: 2})
        evaluator = RecordingEvaluator()
        assert evaluator.worst_position([first, second], equity) == first
        assert evaluator.calls == [first, second]

    def test_nan_metric_fails(self):
        first = Position.from_points(x={6: 2}, o={19: 2})
        second = Position.from_points(x={5: 2}, o={19: 2})
        with pytest.raises(ValueError):
            RecordingEvaluator().worst_position([first, second], lambda p: float("nan"))


class TestPositionsAndProbabilities:
    """Tests for positions_and_probabilities_by_equity."""

    def test_agrees_with_best_position(self):
        given_pos = Position.from_points(x={7: 2}, o={20: 2})
        evaluator = EvaluatorFake()
        values = evaluator.positions_and_probabilities_by_equity(given_pos, (4, 2))

        best_pos, best_probability = values[0]
        best_pos = best_pos.switch_sides()
        assert best_pos == evaluator.best_position_by_equity(given_pos, (4, 2))
        assert best_probability.switch_sides() == evaluator.eval(best_pos)

    def test_sorted_by_descending_equity(self, starting_position, random_evaluator):
        values = random_evaluator.positions_and_probabilities_by_equity(starting_position, (3, 1))
        equities = [p.equity() for _, p in values]
        assert equities == sorted(equities, reverse=True)

    def test_contains_every_legal_position(self, starting_position, random_evaluator):
        values = random_evaluator.positions_and_probabilities_by_equity(starting_position, (6, 5))
        after_moving = starting_position.all_positions_after_moving((6, 5))
        assert len(values) == len(after_moving)
        assert {pos.switch_sides() for pos, _ in values} == set(after_moving)

    def test_positions_are_from_mover_perspective(self):
        given_pos = Position.from_points(x={7: 2}, o={20: 2})
        values = EvaluatorFake().positions_and_probabilities_by_equity(given_pos, (4, 2))
        for pos, _ in values:
            assert pos.pips[20] == -2
            assert pos.x_off == 13

    def test_equal_equities_keep_generation_order(self, starting_position):
        values = RecordingEvaluator().positions_and_probabilities_by_equity(starting_position, (3, 1))
        expected = [p.switch_sides() for p in starting_position.all_positions_after_moving((3, 1))]
        assert [pos for pos, _ in values] == expected

    def test_nan_from_evaluator_fails(self, starting_position):
        with pytest.raises(ValueError):
            NanEvaluator().positions_and_probabilities_by_equity(starting_position, (3, 1))


class TestPartialEvaluator:
    """Tests for the partial evaluator interface."""

    def test_full_evaluator_always_answers(self, starting_position):
        evaluator = EvaluatorFake()
        assert isinstance(evaluator, PartialEvaluator)
        assert evaluator.try_eval(starting_position) == evaluator.eval(starting_position)

    def test_partial_evaluator_may_decline(self, starting_position):
        evaluator = BearoffOnly()
        assert evaluator.try_eval(starting_position) is None
        bearoff = Position.from_points(x={1: 3, 2: 3}, o={24: 2})
        assert evaluator.try_eval(bearoff).win_normal == 1.0

    def test_evaluator_requires_eval(self):
        with pytest.raises(TypeError):
            Evaluator()


class TestRandomEvaluator:
    """Tests for RandomEvaluator."""

    def test_sum_is_1(self, starting_position):
        evaluator = RandomEvaluator()
        p = evaluator.eval(starting_position)
        assert abs(p.to_array().sum() - 1.0) < 0.0001

    def test_values_in_range(self, starting_position, random_evaluator):
        for _ in range(20):
            values = random_evaluator.eval(starting_position).to_array()
            assert (values >= 0.0).all()
            assert (values <= 1.0).all()

    def test_calls_are_independent(self, starting_position, random_evaluator):
        first = random_evaluator.eval(starting_position)
        second = random_evaluator.eval(starting_position)
        assert first != second

    def test_seed_is_reproducible(self, starting_position):
        assert RandomEvaluator(seed=5).eval(starting_position) == \
            RandomEvaluator(seed=5).eval(starting_position)

    def test_instances_do_not_share_a_generator(self, starting_position):
        busy = RandomEvaluator(seed=5)
        idle = RandomEvaluator(seed=5)
        for _ in range(10):
            busy.eval(starting_position)
        assert busy.rng is not idle.rng
        assert idle.eval(starting_position) == RandomEvaluator(seed=5).eval(starting_position)
