"""Classes for two-player zero-sum games and their solutions."""
from typing import Optional, Tuple

import numpy as np


class ShapeError(ValueError):
    """Raised when a payoff matrix is empty or not rectangular."""


class SolverError(Exception):
    """Raised when a solver cannot produce a solution that passes the equilibrium check."""

    def __init__(self, reason, detail=None):
        self.reason = reason
        if reason == 'unbounded':
            self.message = 'Simplex found no leaving row: the linear program appears unbounded.'
        elif reason == 'max_pivots':
            self.message = 'Maximum number of simplex pivots reached without optimality. ' \
                           '(Increase max_pivots, then solve again.)'
        elif reason == 'graphical':
            self.message = 'Graphical method could not balance the active lines of the envelope.'
        elif reason == 'scipy':
            self.message = 'scipy.optimize.linprog did not report success.'
        elif reason == 'inconsistent':
            self.message = 'Assembled solution failed the equilibrium check.'
        else:
            self.message = 'Something unexpected happened.'
        if detail:
            self.message += f' ({detail})'

        super().__init__(self.message)

    def __str__(self):
        return self.message


class ZSGame:
    """A finite two-player zero-sum game.

    The payoff matrix holds the row player's gain: the row player maximizes, the column player minimizes.
    The matrix is validated once on construction and is read-only afterwards.
    """

    def __init__(self, payoff_matrix) -> None:
        """Input:

        payoff_matrix:  array-like of shape (num_rows, num_cols), e.g. a list of equally long lists of numbers.

        Raises ShapeError if the input is empty or ragged, ValueError if an entry is not a finite number.
        """
        if isinstance(payoff_matrix, ZSGame):
            payoff_matrix = payoff_matrix.payoffs

        # object arrays may hold ragged rows, so they are checked like nested lists
        if isinstance(payoff_matrix, np.ndarray) and payoff_matrix.dtype == object:
            payoff_matrix = payoff_matrix.tolist()

        if not isinstance(payoff_matrix, np.ndarray):
            rows = list(payoff_matrix)
            if len(rows) == 0:
                raise ShapeError('Payoff matrix has no rows.')
            lengths = set()
            for row in rows:
                try:
                    lengths.add(len(row))
                except TypeError:
                    raise ShapeError('Payoff matrix must be 2-dimensional; found a row that is not a sequence.')
                if any(np.ndim(entry) != 0 for entry in row):
                    raise ShapeError('Payoff matrix must be 2-dimensional; found an entry that is a sequence.')
            if len(lengths) != 1:
                raise ShapeError(f'Payoff matrix is ragged: rows have lengths {sorted(lengths)}.')
            payoff_matrix = rows

        try:
            payoffs = np.array(payoff_matrix, dtype=np.float64)
        except (TypeError, ValueError):
            raise ValueError('Payoff matrix contains entries that are not numbers.')

        if payoffs.ndim != 2:
            raise ShapeError(f'Payoff matrix must be 2-dimensional, but has shape {payoffs.shape}.')
        if payoffs.shape[0] == 0 or payoffs.shape[1] == 0:
            raise ShapeError(f'Payoff matrix must have at least one row and one column, '
                             f'but has shape {payoffs.shape}.')
        if not np.isfinite(payoffs).all():
            bad = tuple(int(i) for i in np.argwhere(~np.isfinite(payoffs))[0])
            raise ValueError(f'Payoff matrix contains a non-finite entry at {bad}: {payoffs[bad]}.')

        payoffs.setflags(write=False)
        self._payoffs = payoffs

    @property
    def payoffs(self) -> np.ndarray:
        return self._payoffs

    @property
    def shape(self) -> Tuple[int, int]:
        return self._payoffs.shape

    @property
    def num_rows(self) -> int:
        return self._payoffs.shape[0]

    @property
    def num_cols(self) -> int:
        return self._payoffs.shape[1]

    def __repr__(self):
        return f'ZSGame({self._payoffs.tolist()})'

    @classmethod
    def random_game(cls, num_rows: int, num_cols: int, low: float = -1, high: float = 1,
                    seed: Optional[int] = None) -> 'ZSGame':
        """Creates a game of given size with payoffs drawn uniformly from [low, high).
        Passing a seed allows to recreate the game later on.
        """
        rng = np.random.default_rng(seed=seed)
        return cls(rng.uniform(low, high, size=(num_rows, num_cols)))

    def swap_roles(self) -> 'ZSGame':
        """The same game from the column player's perspective: rows and columns exchanged, payoffs negated."""
        return ZSGame(-self._payoffs.T)

    def eps(self, tol: float) -> float:
        """Absolute tolerance used for payoff comparisons: tol times the largest absolute payoff."""
        return tol * float(np.abs(self._payoffs).max())

    def maximin(self) -> float:
        """Row player's pure-strategy security level: max over rows of the row minimum."""
        return float(self._payoffs.min(axis=1).max())

    def minimax(self) -> float:
        """Column player's pure-strategy security level: min over columns of the column maximum."""
        return float(self._payoffs.max(axis=0).min())

    def security_rows(self, eps: float = 0.0) -> np.ndarray:
        """Indices of rows whose minimum attains the maximin (within eps), ascending."""
        row_minima = self._payoffs.min(axis=1)
        return np.nonzero(row_minima >= row_minima.max() - eps)[0]

    def security_cols(self, eps: float = 0.0) -> np.ndarray:
        """Indices of columns whose maximum attains the minimax (within eps), ascending."""
        col_maxima = self._payoffs.max(axis=0)
        return np.nonzero(col_maxima <= col_maxima.min() + eps)[0]


class Solution:
    """Container for an equilibrium: optimal mixed strategies of both players and the game value.

    Strategies are indexed by the rows / columns of the original game, including strategies
    that were removed by dominance (which receive probability 0).
    """

    def __init__(self, game: ZSGame, row_strategy, col_strategy, value: float, method: str,
                 reduction=None):
        self.game = game
        self.row_strategy = np.array(row_strategy, dtype=np.float64)
        self.col_strategy = np.array(col_strategy, dtype=np.float64)
        self.value = float(value)
        self.method = method
        self.reduction = reduction
        self.row_strategy.setflags(write=False)
        self.col_strategy.setflags(write=False)

    def __repr__(self):
        return (f'Solution(value={self.value!r}, row_strategy={self.row_strategy.tolist()!r}, '
                f'col_strategy={self.col_strategy.tolist()!r}, method={self.method!r})')

    @property
    def is_pure(self) -> bool:
        return bool((self.row_strategy == 1).any() and (self.col_strategy == 1).any())

    def check_equilibrium(self) -> Tuple[float, float]:
        """Calculate how much each player could gain by deviating to a best response:
        (row player's gain against col_strategy, column player's gain against row_strategy).
        """
        payoffs = self.game.payoffs
        row_gain = float((payoffs @ self.col_strategy).max() - self.value)
        col_gain = float(self.value - (self.row_strategy @ payoffs).min())
        return row_gain, col_gain

    def to_list(self, decimals: int = None) -> list:
        if decimals is None:
            return [self.row_strategy.tolist(), self.col_strategy.tolist(), self.value]
        return [np.round(self.row_strategy, decimals).tolist(), np.round(self.col_strategy, decimals).tolist(),
                round(self.value, decimals)]
