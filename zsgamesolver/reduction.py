"""Pure-strategy shortcuts: saddle-point detection and iterated elimination of dominated strategies."""
from typing import Optional, Tuple

import numpy as np

from zsgamesolver.zsgame import ZSGame

ROWS = 0
COLS = 1


def find_saddle_point(payoffs: np.ndarray, eps: float) -> Optional[Tuple[int, int]]:
    """Return (row, col) of a saddle point, or None if maximin and minimax differ by more than eps.

    If several rows attain the maximin (or several columns the minimax), the lowest index is chosen.
    """
    row_minima = payoffs.min(axis=1)
    col_maxima = payoffs.max(axis=0)
    maximin = row_minima.max()
    minimax = col_maxima.min()
    if minimax - maximin > eps:
        return None
    # argmax / argmin return the first occurrence
    row = int(np.argmax(row_minima >= maximin - eps))
    col = int(np.argmax(col_maxima <= minimax + eps))
    return row, col


class ReductionRecord:
    """Index mapping between the original game and the game left after removing dominated strategies.

    For each axis, two parallel arrays are kept:
    - original_to_reduced[axis][i]: position of original strategy i in the reduced game, -1 if removed
    - reduced_to_original[axis][k]: original index of the k-th surviving strategy
    Removals are only ever added, never undone.
    """

    def __init__(self, num_rows: int, num_cols: int):
        self.original_to_reduced = [np.arange(num_rows), np.arange(num_cols)]
        self.reduced_to_original = [np.arange(num_rows), np.arange(num_cols)]
        # (axis, removed, dominated_by, pass_no), all indices original
        self.removals = []

    @property
    def surviving_rows(self) -> np.ndarray:
        return self.reduced_to_original[ROWS]

    @property
    def surviving_cols(self) -> np.ndarray:
        return self.reduced_to_original[COLS]

    @property
    def reduced_shape(self) -> Tuple[int, int]:
        return len(self.reduced_to_original[ROWS]), len(self.reduced_to_original[COLS])

    def is_active(self, axis: int, original_index: int) -> bool:
        return self.original_to_reduced[axis][original_index] >= 0

    def remove(self, axis: int, original_index: int, dominated_by: int, pass_no: int) -> None:
        """Remove an original row (axis 0) or column (axis 1) and renumber the survivors."""
        if not self.is_active(axis, original_index):
            raise ValueError(f'Strategy {original_index} on axis {axis} has already been removed.')
        survivors = self.reduced_to_original[axis]
        survivors = survivors[survivors != original_index]
        self.reduced_to_original[axis] = survivors
        mapping = np.full_like(self.original_to_reduced[axis], -1)
        mapping[survivors] = np.arange(len(survivors))
        self.original_to_reduced[axis] = mapping
        self.removals.append((axis, original_index, dominated_by, pass_no))

    def submatrix(self, game: ZSGame) -> np.ndarray:
        """Payoffs restricted to the surviving rows and columns."""
        return game.payoffs[np.ix_(self.reduced_to_original[ROWS], self.reduced_to_original[COLS])]

    def lift(self, strategy, axis: int) -> np.ndarray:
        """Place a strategy over the reduced game at the original indices; removed strategies get probability 0."""
        strategy = np.asarray(strategy, dtype=np.float64)
        survivors = self.reduced_to_original[axis]
        if strategy.shape != survivors.shape:
            raise ValueError(f'Strategy has {strategy.shape[0]} entries, '
                             f'but {len(survivors)} strategies survived on axis {axis}.')
        lifted = np.zeros(len(self.original_to_reduced[axis]))
        lifted[survivors] = strategy
        return lifted


def _find_dominator(payoffs: np.ndarray, record: ReductionRecord, axis: int, candidate: int,
                    eps: float) -> Optional[int]:
    """Return the lowest original index of an active strategy that dominates `candidate`, or None.

    Rows: i dominates j if a_i >= a_j everywhere and a_i > a_j somewhere.
    Columns: reversed inequalities, as the column player minimizes.
    Only surviving opponent strategies are compared.
    """
    other = record.reduced_to_original[1 - axis]
    if axis == ROWS:
        lines = payoffs[:, other]
        sign = 1.0
    else:
        lines = payoffs[other, :].T
        sign = -1.0
    target = sign * lines[candidate]
    for index in record.reduced_to_original[axis]:
        if index == candidate:
            continue
        diff = sign * lines[index] - target
        if (diff >= -eps).all() and (diff > eps).any():
            return int(index)
    return None


def reduce_dominance(game: ZSGame, eps: float, verbose: int = 0) -> ReductionRecord:
    """Iteratively remove dominated rows and columns until a full pass removes nothing.

    Each pass scans the surviving rows first, then the surviving columns, in ascending original order.
    A strategy is removed as soon as a dominator is found, so later checks in the same pass see the update.
    Strategies that merely tie with another one are kept.
    """
    payoffs = game.payoffs
    record = ReductionRecord(game.num_rows, game.num_cols)
    pass_no = 0
    removed_in_pass = True
    while removed_in_pass:
        pass_no += 1
        removed_in_pass = False
        for axis in (ROWS, COLS):
            for candidate in record.reduced_to_original[axis].copy():
                if len(record.reduced_to_original[axis]) == 1:
                    break
                dominator = _find_dominator(payoffs, record, axis, candidate, eps)
                if dominator is not None:
                    record.remove(axis, int(candidate), dominator, pass_no)
                    removed_in_pass = True
                    if verbose >= 2:
                        print(f'Pass {pass_no:3d}: {"row" if axis == ROWS else "column"} {candidate} '
                              f'dominated by {dominator}, removed.')
    if verbose >= 1:
        print(f'Dominance reduction: {game.shape} -> {record.reduced_shape} '
              f'after {pass_no} pass{"es" if pass_no != 1 else ""}.')
    return record
