"""Solving pipeline: saddle point, dominance reduction, graphical or LP solve, and assembly of the result."""
import time
from datetime import timedelta
from typing import Tuple

import numpy as np

from zsgamesolver.zsgame import ZSGame, Solution, SolverError
from zsgamesolver.reduction import ROWS, COLS, ReductionRecord, find_saddle_point, reduce_dominance
from zsgamesolver.methods import solve_graphical, ZeroSumLP


class ZSGameSolver:
    """Class to find an optimal strategy pair and the value of a zero-sum game.

    Steps:  1) If maximin equals minimax, return the saddle point in pure strategies.
            2) Remove dominated rows and columns (recorded in a ReductionRecord).
            3) Solve the reduced game: saddle point, graphical method (2 x n or n x 2),
               or linear program.
            4) Lift the strategies back to the original indices and check that neither player
               can gain more than eps by deviating.

    Parameters
    ----------
    tol : float
        Tolerance relative to the largest absolute payoff. Payoff comparisons use
        eps = tol * max|a_ij|, probabilities are compared with tol itself. Defaults to 1e-9.
    reduce_dominance : bool
        Whether to remove dominated strategies before solving. Defaults to True.
    implementation : str
        LP solver used for games that are neither solved by a saddle point nor by the graphical method:
        'simplex' (built-in tableau with Bland's rule, the default) or 'scipy' (scipy.optimize.linprog).
    max_pivots : int
        Maximum number of LP iterations, defaults to 10000.
    verbose : int
        0 : Silent, no reports at all. This is the default.
        1 : Reports the stages of the solve and the result.
        2 : Also reports each removed strategy and each simplex pivot.
    """

    default_parameters = {
        'tol': 1e-9,
        'reduce_dominance': True,
        'implementation': 'simplex',
        'max_pivots': 10000,
        'verbose': 0,
    }

    def __init__(self, game, parameters: dict = None, **kwargs):
        self.game = game if isinstance(game, ZSGame) else ZSGame(game)

        for key, value in self.default_parameters.items():
            setattr(self, key, value)

        self.solution = None  # type: Solution
        self.reduction = None  # type: ReductionRecord
        self.iterations = 0
        self.start_time = None

        self.set_parameters(parameters, **kwargs)

    def set_parameters(self, params: dict = None, **kwargs):
        """Set multiple parameters at once, given as dictionary and/or as kwargs."""
        params = params or {}
        inputs = {**params, **kwargs}
        for key, value in inputs.items():
            if key not in self.default_parameters:
                raise ValueError(f'"{key}" is not a valid parameter.')
            setattr(self, key, value)

    @property
    def eps(self) -> float:
        return self.game.eps(self.tol)

    def solve(self) -> Solution:
        """Run the pipeline; returns the validated Solution (also stored as .solution)."""
        self.start_time = time.perf_counter()
        self.iterations = 0
        eps = self.eps
        if self.verbose >= 1:
            print('=' * 50)
            print(f'Solving {self.game.num_rows} x {self.game.num_cols} zero-sum game (eps = {eps:.3g})')

        record = ReductionRecord(self.game.num_rows, self.game.num_cols)

        saddle = find_saddle_point(self.game.payoffs, eps)
        if saddle is not None:
            row_strategy, col_strategy, value = self._pure(self.game.payoffs, saddle)
            return self.assemble(record, row_strategy, col_strategy, value, 'saddle point')

        if self.reduce_dominance:
            record = reduce_dominance(self.game, eps, verbose=self.verbose)
        reduced = record.submatrix(self.game)

        saddle = find_saddle_point(reduced, eps)
        if saddle is not None:
            row_strategy, col_strategy, value = self._pure(reduced, saddle)
            method = 'saddle point'
        elif 2 in reduced.shape:
            row_strategy, col_strategy, value = solve_graphical(reduced, eps)
            method = 'graphical'
        else:
            lp = ZeroSumLP(reduced, self.tol, implementation=self.implementation,
                           max_pivots=self.max_pivots, verbose=self.verbose)
            row_strategy, col_strategy, value = lp.solve()
            self.iterations = lp.iterations
            method = self.implementation

        return self.assemble(record, row_strategy, col_strategy, value, method)

    @staticmethod
    def _pure(payoffs: np.ndarray, saddle: Tuple[int, int]) -> Tuple[np.ndarray, np.ndarray, float]:
        row, col = saddle
        row_strategy = np.zeros(payoffs.shape[0])
        row_strategy[row] = 1.0
        col_strategy = np.zeros(payoffs.shape[1])
        col_strategy[col] = 1.0
        return row_strategy, col_strategy, float(payoffs[row, col])

    def assemble(self, record: ReductionRecord, row_strategy, col_strategy, value: float, method: str) -> Solution:
        """Lift strategies of the reduced game to the original game, check them, and store the Solution."""
        solution = Solution(self.game, record.lift(row_strategy, ROWS), record.lift(col_strategy, COLS),
                            value, method, reduction=record)
        self.check_solution(solution)
        self.reduction = record
        self.solution = solution
        self._report_result()
        return solution

    def check_solution(self, solution: Solution) -> None:
        """Raise SolverError unless the solution is an eps-equilibrium of the original game:
        - both strategies are probability vectors (within tol)
        - the row player's worst case against row_strategy and best case against col_strategy
          both equal the value
        - the value lies between maximin and minimax
        """
        eps = self.eps
        payoffs = self.game.payoffs
        for name, strategy in (('row', solution.row_strategy), ('column', solution.col_strategy)):
            if strategy.min() < -self.tol or abs(strategy.sum() - 1) > self.tol:
                raise SolverError('inconsistent', f'{name} strategy is not a probability vector: {strategy}')

        guaranteed = float((solution.row_strategy @ payoffs).min())
        conceded = float((payoffs @ solution.col_strategy).max())
        if abs(guaranteed - solution.value) > eps:
            raise SolverError('inconsistent', f'row strategy guarantees {guaranteed:.12g}, '
                                              f'value is {solution.value:.12g}')
        if abs(conceded - solution.value) > eps:
            raise SolverError('inconsistent', f'column strategy concedes {conceded:.12g}, '
                                              f'value is {solution.value:.12g}')
        if not self.game.maximin() - eps <= solution.value <= self.game.minimax() + eps:
            raise SolverError('inconsistent', f'value {solution.value:.12g} outside '
                                              f'[{self.game.maximin():.12g}, {self.game.minimax():.12g}]')

    def _report_result(self):
        if self.verbose >= 1:
            time_sec = time.perf_counter() - self.start_time
            solution = self.solution
            num_rows, num_cols = self.reduction.reduced_shape
            print(f'Method: {solution.method} on reduced {num_rows} x {num_cols} game', end='')
            if self.iterations:
                print(f' ({self.iterations} iterations)', end='')
            print(f'\nValue: {solution.value:#.6g}')
            print(f'Total time elapsed: {timedelta(seconds=time_sec)}')
            print('=' * 50)


def solve(matrix, tol: float = 1e-9, **kwargs) -> Solution:
    """Solve the zero-sum game with payoff matrix `matrix` (ZSGame or array-like).

    Further keyword arguments are passed on as solver parameters. Raises ShapeError or ValueError for
    invalid matrices and SolverError if no consistent solution was found.
    """
    return ZSGameSolver(matrix, tol=tol, **kwargs).solve()
