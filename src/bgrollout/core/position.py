"""Immutable board positions and legal move generation.

A `Position` is always seen from the perspective of the player on move
(the "mover", called `x`). The opponent is called `o`.

Point numbering (mover's perspective):
    The mover moves from 24 towards 1 and then off the board.
    The mover's home board is 1-6, the opponent's home board is 19-24.

    pips[1..24]  checkers on the points; positive = mover, negative = opponent
    pips[25]     mover's checkers on the bar (>= 0)
    pips[0]      opponent's checkers on the bar (<= 0)

    13 14 15 16 17 18    19 20 21 22 23 24
    +------------------+------------------+
    |                  |                  |  Opponent home
    |                  |                  |
    |                  |                  |  Mover home
    +------------------+------------------+
    12 11 10  9  8  7     6  5  4  3  2  1
"""

from dataclasses import dataclass
from typing import Iterable, List, Mapping, Optional, Tuple

from bgrollout.core.types import Dice, GameResult
from bgrollout.core.dice import dice_values, is_doubles, validate_dice

NUM_CHECKERS = 15
O_BAR = 0
X_BAR = 25

# Intermediate state while the mover plays: (pips, x_off)
_State = Tuple[Tuple[int, ...], int]


@dataclass(frozen=True)
class Position:
    """Board snapshot from the mover's perspective.

    Attributes:
        pips: 26 checker counts, see module docstring for the layout
        x_off: Checkers the mover has borne off
        o_off: Checkers the opponent has borne off
    """
    pips: Tuple[int, ...]
    x_off: int
    o_off: int

    def __post_init__(self):
        """Validate position."""
        if len(self.pips) != 26:
            raise ValueError(f"pips must have length 26, got {len(self.pips)}")
        if self.pips[X_BAR] < 0 or self.pips[O_BAR] > 0:
            raise ValueError("Bar points may only hold checkers of their own player")
        if not (0 <= self.x_off <= NUM_CHECKERS and 0 <= self.o_off <= NUM_CHECKERS):
            raise ValueError(f"Invalid borne off counts: x_off={self.x_off}, o_off={self.o_off}")
        x_on_board = sum(p for p in self.pips if p > 0)
        o_on_board = -sum(p for p in self.pips if p < 0)
        if x_on_board + self.x_off != NUM_CHECKERS:
            raise ValueError(f"Mover has {x_on_board + self.x_off} checkers, should have 15")
        if o_on_board + self.o_off != NUM_CHECKERS:
            raise ValueError(f"Opponent has {o_on_board + self.o_off} checkers, should have 15")

    @staticmethod
    def from_points(x: Mapping[int, int], o: Mapping[int, int]) -> "Position":
        """Create a position from checker counts per point.

        Both mappings use the mover's numbering: the mover's bar is 25 and
        the opponent's bar is 0. Checkers not placed are borne off.

        Example:
            >>> Position.from_points(x={6: 1}, o={19: 1})  # each side one checker away
        """
        pips = [0] * 26
        for point, count in x.items():
            if not 1 <= point <= X_BAR or count < 0:
                raise ValueError(f"Invalid mover checkers {count} on point {point}")
            pips[point] += count
        for point, count in o.items():
            if not O_BAR <= point <= 24 or count < 0:
                raise ValueError(f"Invalid opponent checkers {count} on point {point}")
            if pips[point] > 0 and count > 0:
                raise ValueError(f"Point {point} is occupied by both players")
            pips[point] -= count
        return Position(
            pips=tuple(pips),
            x_off=NUM_CHECKERS - sum(x.values()),
            o_off=NUM_CHECKERS - sum(o.values()),
        )

    # ==========================================================================
    # QUERIES
    # ==========================================================================

    def switch_sides(self) -> "Position":
        """Mirror the board so that the opponent becomes the mover."""
        return Position(
            pips=tuple(-self.pips[25 - i] for i in range(26)),
            x_off=self.o_off,
            o_off=self.x_off,
        )

    def has_lost(self) -> bool:
        """True if the opponent has already borne off all checkers."""
        return self.o_off == NUM_CHECKERS

    def game_state(self) -> Optional[GameResult]:
        """Result of the game from the mover's perspective, None if ongoing.

        A loser who has not borne off any checker loses a gammon; if they
        also still have a checker on the bar or in the winner's home board,
        they lose a backgammon.
        """
        if self.x_off == NUM_CHECKERS:
            if self.o_off > 0:
                return GameResult.WIN_NORMAL
            if self.pips[O_BAR] < 0 or any(self.pips[p] < 0 for p in range(1, 7)):
                return GameResult.WIN_BG
            return GameResult.WIN_GAMMON
        if self.o_off == NUM_CHECKERS:
            if self.x_off > 0:
                return GameResult.LOSE_NORMAL
            if self.pips[X_BAR] > 0 or any(self.pips[p] > 0 for p in range(19, 25)):
                return GameResult.LOSE_BG
            return GameResult.LOSE_GAMMON
        return None

    # ==========================================================================
    # MOVES
    # ==========================================================================

    def all_positions_after_moving(self, dice: Dice) -> List["Position"]:
        """All distinct legal positions after the mover plays `dice`.

        The returned positions have already switched sides: the opponent is
        the mover in each of them. If no checker can be moved, the only
        entry is this position (switched).

        Args:
            dice: Dice roll

        Returns:
            Non-empty list of positions in a deterministic order
        """
        validate_dice(dice)
        start: _State = (self.pips, self.x_off)
        if is_doubles(dice):
            states = _play_doubles(start, dice[0])
        else:
            states = _play_regular(start, dice)
        return [
            Position(pips=pips, x_off=x_off, o_off=self.o_off).switch_sides()
            for pips, x_off in states
        ]


STARTING = Position.from_points(
    x={24: 2, 13: 5, 8: 3, 6: 5},
    o={1: 2, 12: 5, 17: 3, 19: 5},
)


# ==============================================================================
# HELPER FUNCTIONS FOR MOVE GENERATION
# ==============================================================================

def _all_checkers_home(pips: Tuple[int, ...]) -> bool:
    """True if the mover has no checker outside the home board (bar included)."""
    return all(pips[point] <= 0 for point in range(7, 26))


def _moves_with_die(state: _State, die: int) -> List[_State]:
    """All states reachable by moving a single checker by `die` pips.

    Checkers on the bar must enter before anything else moves. A single
    opponent checker on the landing point is hit and put on the bar.
    """
    pips, x_off = state
    if pips[X_BAR] > 0:
        sources: Iterable[int] = (X_BAR,)
    else:
        sources = (point for point in range(24, 0, -1) if pips[point] > 0)

    results = []
    for src in sources:
        dst = src - die
        if dst >= 1:
            if pips[dst] < -1:
                continue
            new = list(pips)
            new[src] -= 1
            if new[dst] == -1:
                new[dst] = 0
                new[O_BAR] -= 1
            new[dst] += 1
            results.append((tuple(new), x_off))
        else:
            if not _all_checkers_home(pips):
                continue
            # Bearing off with a larger die is only allowed from the highest point
            if dst < 0 and any(pips[point] > 0 for point in range(src + 1, 7)):
                continue
            new = list(pips)
            new[src] -= 1
            results.append((tuple(new), x_off + 1))
    return results


def _dedup(states: Iterable[_State]) -> List[_State]:
    """Remove duplicate states, keeping first occurrences in order."""
    return list(dict.fromkeys(states))


def _play_sequence(start: _State, dice: List[int]) -> List[_State]:
    """States after playing every die of `dice` in the given order."""
    states = [start]
    for die in dice:
        states = _dedup(s for state in states for s in _moves_with_die(state, die))
        if not states:
            break
    return states


def _play_regular(start: _State, dice: Dice) -> List[_State]:
    """Play a non-double roll.

    Both dice must be used if possible, in either order. If only one die
    can be used, the larger one must be used when possible.
    """
    die1, die2 = dice_values(dice)
    both = _play_sequence(start, [die1, die2]) + _play_sequence(start, [die2, die1])
    if both:
        return _dedup(both)

    for die in (max(die1, die2), min(die1, die2)):
        single = _moves_with_die(start, die)
        if single:
            return _dedup(single)
    return [start]


def _play_doubles(start: _State, die: int) -> List[_State]:
    """Play a double: as many of the four moves as possible."""
    states = [start]
    for _ in range(4):
        after = _dedup(s for state in states for s in _moves_with_die(state, die))
        if not after:
            break
        states = after
    return states
