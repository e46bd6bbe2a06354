"""Graphical method for games in which one player has exactly two strategies."""

from typing import Optional, Tuple

import numpy as np

from zsgamesolver.zsgame import SolverError


def solve_graphical(payoffs: np.ndarray, eps: float) -> Tuple[np.ndarray, np.ndarray, float]:
    """Solve a 2 x n or n x 2 game. Returns (row_strategy, col_strategy, value).

    The n x 2 case is solved as the 2 x n game of the column player (payoffs negated and transposed),
    i.e. the upper envelope of the row lines is minimized.
    """
    payoffs = np.asarray(payoffs, dtype=np.float64)
    if payoffs.shape[0] == 2:
        return _solve_two_rows(payoffs, eps)
    elif payoffs.shape[1] == 2:
        col_strategy, row_strategy, value = _solve_two_rows(-payoffs.T, eps)
        return row_strategy, col_strategy, -value
    raise ValueError(f'Graphical method needs 2 rows or 2 columns, but payoffs have shape {payoffs.shape}.')


def _lines(payoffs: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Expected payoff against column j as an affine function of p = probability of row 0:
    f_j(p) = intercepts[j] + p * slopes[j]
    """
    intercepts = payoffs[1]
    slopes = payoffs[0] - payoffs[1]
    return intercepts, slopes


def _candidates(intercepts: np.ndarray, slopes: np.ndarray) -> np.ndarray:
    """Breakpoints of the lower envelope lie among p = 0, p = 1 and pairwise intersections in (0, 1)."""
    slope_diff = np.subtract.outer(slopes, slopes)
    intercept_diff = np.subtract.outer(intercepts, intercepts)
    with np.errstate(divide='ignore', invalid='ignore'):
        crossings = -intercept_diff / slope_diff
    inside = (slope_diff != 0) & (crossings > 0) & (crossings < 1)
    # np.unique sorts ascending
    return np.unique(np.concatenate([[0.0, 1.0], crossings[inside]]))


def _balance(intercepts: np.ndarray, slopes: np.ndarray, p: float, value: float,
             eps: float) -> Optional[np.ndarray]:
    """Column strategy supported on lines active at p that leaves the row player indifferent.

    Preference: a rising and a falling line mixed to a flat combination (lowest indices),
    then a single flat line, then a single line that keeps the boundary point p = 0 or p = 1 optimal.
    Returns None if the active lines admit none of these.
    """
    lines_at_p = intercepts + p * slopes
    active = np.nonzero(lines_at_p <= value + eps)[0]
    rising = [j for j in active if slopes[j] > eps]
    falling = [j for j in active if slopes[j] < -eps]
    flat = [j for j in active if abs(slopes[j]) <= eps]

    col_strategy = np.zeros(len(slopes))
    if rising and falling:
        up, down = rising[0], falling[0]
        span = slopes[up] - slopes[down]
        col_strategy[up] = -slopes[down] / span
        col_strategy[down] = slopes[up] / span
    elif flat:
        col_strategy[flat[0]] = 1.0
    elif p == 0.0 and falling:
        col_strategy[falling[0]] = 1.0
    elif p == 1.0 and rising:
        col_strategy[rising[0]] = 1.0
    else:
        return None
    return col_strategy


def _solve_two_rows(payoffs: np.ndarray, eps: float) -> Tuple[np.ndarray, np.ndarray, float]:
    intercepts, slopes = _lines(payoffs)
    candidates = _candidates(intercepts, slopes)
    envelope = (intercepts[np.newaxis, :] + candidates[:, np.newaxis] * slopes[np.newaxis, :]).min(axis=1)

    # on a flat top the leftmost optimal p is taken
    for index in np.nonzero(envelope >= envelope.max() - eps)[0]:
        p = float(candidates[index])
        value = float(envelope[index])
        col_strategy = _balance(intercepts, slopes, p, value, eps)
        if col_strategy is not None:
            return np.array([p, 1.0 - p]), col_strategy, value

    raise SolverError('graphical', f'envelope maximum {envelope.max():.6g}')


def plot_envelope(payoffs: np.ndarray, show: bool = True):
    """Plot the payoff lines of a 2 x n game against the row player's mixing probability,
    highlighting the lower envelope. For an n x 2 game, plots the row lines against the
    column player's mixing probability with the upper envelope.
    Returns the matplotlib figure.
    """
    import matplotlib.pyplot as plt

    payoffs = np.asarray(payoffs, dtype=np.float64)
    if payoffs.shape[0] == 2:
        intercepts, slopes = _lines(payoffs)
        envelope_func = np.min
        x_label = 'probability of row 0'
        line_label = 'column'
        envelope_label = 'lower envelope'
    elif payoffs.shape[1] == 2:
        intercepts = payoffs[:, 1]
        slopes = payoffs[:, 0] - payoffs[:, 1]
        envelope_func = np.max
        x_label = 'probability of column 0'
        line_label = 'row'
        envelope_label = 'upper envelope'
    else:
        raise ValueError(f'Envelope can only be plotted for 2 rows or 2 columns, '
                         f'but payoffs have shape {payoffs.shape}.')

    x_plot = np.linspace(0, 1, 201)
    lines = intercepts[np.newaxis, :] + x_plot[:, np.newaxis] * slopes[np.newaxis, :]

    figure, ax = plt.subplots(figsize=(6, 4))
    for j in range(lines.shape[1]):
        ax.plot(x_plot, lines[:, j], linewidth=1, label=f'{line_label} {j}')
    ax.plot(x_plot, envelope_func(lines, axis=1), color='black', linewidth=2.5, label=envelope_label)
    ax.set_xlim((0, 1))
    ax.set_xlabel(x_label)
    ax.set_ylabel('expected payoff')
    ax.grid()
    ax.legend()
    figure.tight_layout()

    if show:
        figure.show()
    return figure
