"""Linear programming solver for zero-sum games without a shortcut solution."""

from typing import Optional, Tuple
from warnings import warn

import numpy as np
from scipy.optimize import linprog

from zsgamesolver.zsgame import SolverError


def ZeroSumLP(payoffs: np.ndarray, tol: float = 1e-9, implementation: str = 'simplex', **kwargs):
    """Linear program of a zero-sum game, solved either by the built-in simplex or by scipy."""
    if implementation == 'simplex':
        return ZeroSumLP_simplex(payoffs, tol, **kwargs)
    elif implementation == 'scipy':
        return ZeroSumLP_scipy(payoffs, tol, **kwargs)
    raise ValueError(f'"{implementation}" is not a valid implementation. Allowed are "simplex" or "scipy".')


# %% parent class for LP solvers


class ZeroSumLP_base:
    """Zero-sum LP: base class.

    With B = (A + shift) / scale, where the shift moves the smallest entry up to the span max(A) - min(A) and
    the scale is twice the span, all entries of B lie in [0.5, 1] whatever the magnitude of the payoffs.
    The column player's program is
        max sum(y)  s.t.  B y <= 1, y >= 0
    and its dual is the row player's program
        min sum(x)  s.t.  B^T x >= 1, x >= 0.
    At the optimum sum(x) = sum(y) = 1 / v_B, the strategies are x / sum(x) and y / sum(y),
    and the value of the original game is scale * v_B - shift.
    """

    def __init__(self, payoffs: np.ndarray, tol: float = 1e-9, max_pivots: int = 10000, verbose: int = 0) -> None:
        self.payoffs = np.asarray(payoffs, dtype=np.float64)
        self.tol = tol
        self.max_pivots = max_pivots
        self.verbose = verbose

        span = self.payoffs.max() - self.payoffs.min()
        if span == 0:
            span = max(1.0, abs(self.payoffs.min()))
        self.shift = span - self.payoffs.min()
        self.scale = 2.0 * span
        self.normalized = (self.payoffs + self.shift) / self.scale

        self.iterations = 0

    def solve(self) -> Tuple[np.ndarray, np.ndarray, float]:
        """Returns (row_strategy, col_strategy, value) of the game given by payoffs."""
        x, y = self._solve_normalized()
        primal, dual = y.sum(), x.sum()
        if abs(primal - dual) > self.tol * max(primal, dual):
            warn(f'Primal and dual objectives differ: {primal:.12g} vs. {dual:.12g}.')
        row_strategy = self._to_strategy(x)
        col_strategy = self._to_strategy(y)
        value = self.scale / primal - self.shift
        return row_strategy, col_strategy, value

    def _solve_normalized(self) -> Tuple[np.ndarray, np.ndarray]:
        """Solve the normalized program; returns the unnormalized (x, y)."""
        pass

    def _to_strategy(self, weights: np.ndarray) -> np.ndarray:
        if (weights < -self.tol).any():
            raise SolverError('inconsistent', f'negative LP solution {weights.min():.3g}')
        weights = np.maximum(weights, 0.0)
        total = weights.sum()
        if total <= self.tol:
            raise SolverError('inconsistent', 'LP solution sums to zero')
        return weights / total


# %% simplex tableau with Bland's rule


class ZeroSumLP_simplex(ZeroSumLP_base):
    """Zero-sum LP: dense simplex tableau.

    Layout for an m x n game:
        rows 0..m-1:  [ B | I_m | 1 ]     (slack basis, feasible since the right-hand side is positive)
        row m:        [ -1 | 0  | 0 ]     (objective)
    Entering column: smallest index with negative reduced cost.
    Leaving row: minimum ratio, ties resolved by the smallest basic variable index.
    The row player's strategy is read from the objective row under the slack columns.
    """

    def __init__(self, payoffs: np.ndarray, tol: float = 1e-9, max_pivots: int = 10000, verbose: int = 0) -> None:
        super().__init__(payoffs, tol, max_pivots, verbose)
        m, n = self.normalized.shape
        self.tableau = np.zeros((m + 1, n + m + 1))
        self.tableau[:m, :n] = self.normalized
        self.tableau[:m, n:n + m] = np.eye(m)
        self.tableau[:m, -1] = 1.0
        self.tableau[m, :n] = -1.0
        self.basis = np.arange(n, n + m)

    def find_pivot(self) -> Optional[Tuple[int, int]]:
        """Return (row, col) of the next pivot, or None if the tableau is optimal."""
        improving = np.nonzero(self.tableau[-1, :-1] < -self.tol)[0]
        if len(improving) == 0:
            return None
        col = int(improving[0])

        column = self.tableau[:-1, col]
        eligible = np.nonzero(column > self.tol)[0]
        if len(eligible) == 0:
            raise SolverError('unbounded', f'entering column {col}')
        ratios = self.tableau[eligible, -1] / column[eligible]
        ties = eligible[ratios <= ratios.min() + self.tol]
        row = int(ties[np.argmin(self.basis[ties])])
        return row, col

    def pivot(self, row: int, col: int) -> None:
        """Gauss-Jordan step on (row, col); col enters the basis in place of basis[row]."""
        tableau = self.tableau
        tableau[row] /= tableau[row, col]
        factors = tableau[:, col].copy()
        factors[row] = 0.0
        tableau -= np.outer(factors, tableau[row])
        # rounding can leave a degenerate right-hand side slightly negative
        rhs = tableau[:-1, -1]
        rhs[(rhs < 0) & (rhs > -self.tol)] = 0.0
        self.basis[row] = col

    def _solve_normalized(self) -> Tuple[np.ndarray, np.ndarray]:
        m, n = self.normalized.shape
        while True:
            pivot = self.find_pivot()
            if pivot is None:
                break
            if self.iterations >= self.max_pivots:
                raise SolverError('max_pivots', f'{self.iterations} pivots')
            self.pivot(*pivot)
            self.iterations += 1
            if self.verbose >= 2:
                print(f'Pivot {self.iterations:4d}: row {pivot[0]}, column {pivot[1]}, '
                      f'objective = {self.tableau[-1, -1]:#.6g}')

        y = np.zeros(n)
        for row, var in enumerate(self.basis):
            if var < n:
                y[var] = self.tableau[row, -1]
        x = self.tableau[-1, n:n + m].copy()
        return x, y


# %% scipy implementation


class ZeroSumLP_scipy(ZeroSumLP_base):
    """Zero-sum LP: both programs solved separately with scipy.optimize.linprog (HiGHS)."""

    def _solve_normalized(self) -> Tuple[np.ndarray, np.ndarray]:
        m, n = self.normalized.shape
        options = {'maxiter': self.max_pivots}
        col_lp = linprog(c=-np.ones(n), A_ub=self.normalized, b_ub=np.ones(m),
                         bounds=(0, None), method='highs', options=options)
        row_lp = linprog(c=np.ones(m), A_ub=-self.normalized.T, b_ub=-np.ones(n),
                         bounds=(0, None), method='highs', options=options)
        for result in (col_lp, row_lp):
            if result.status == 1:
                raise SolverError('max_pivots', result.message)
            if result.status != 0:
                raise SolverError('scipy', result.message)
        self.iterations = int(col_lp.nit) + int(row_lp.nit)
        if self.verbose >= 2:
            print(f'linprog: {self.iterations} iterations, objective = {-col_lp.fun:#.6g}')
        return row_lp.x, col_lp.x
