"""Test the solving pipeline and the assembled solutions."""


import numpy as np
import pytest

import zsgamesolver
from zsgamesolver import ZSGame, ZSGameSolver, SolverError, solve
from zsgamesolver.reduction import ROWS


# %% concrete games


class TestScenarios:

    def test_single_cell(self):
        solution = solve([[1]])
        assert solution.value == 1
        assert solution.row_strategy.tolist() == [1.0]
        assert solution.col_strategy.tolist() == [1.0]
        assert solution.method == 'saddle point'

    def test_matching_pennies(self):
        solution = solve([[1, -1], [-1, 1]])
        assert solution.value == pytest.approx(0.0)
        assert np.allclose(solution.row_strategy, [0.5, 0.5])
        assert np.allclose(solution.col_strategy, [0.5, 0.5])
        assert solution.method == 'graphical'

    @pytest.mark.parametrize('factor', [1e-12, 1e-10, 1e10])
    def test_matching_pennies_any_magnitude(self, factor):
        solution = solve([[factor, -factor], [-factor, factor]])
        assert solution.method == 'graphical'
        assert solution.value == pytest.approx(0.0, abs=factor * 1e-9)
        assert np.allclose(solution.row_strategy, [0.5, 0.5])
        assert np.allclose(solution.col_strategy, [0.5, 0.5])

    def test_small_worked_example(self):
        solution = solve(1e-10 * np.array([[6, 0, 3], [8, -2, 3], [4, 6, 5]]))
        assert solution.method == 'simplex'
        assert solution.value == pytest.approx(14e-10 / 3, rel=1e-8)
        assert np.allclose(solution.row_strategy, [0.0, 1 / 6, 5 / 6])

    def test_zero_game(self):
        solution = solve([[0, 0], [0, 0]])
        assert solution.method == 'saddle point'
        assert solution.value == 0.0
        assert solution.row_strategy.tolist() == [1.0, 0.0]

    def test_diagonal(self):
        solution = solve([[4, 0], [0, 4]])
        assert solution.value == pytest.approx(2.0)
        assert np.allclose(solution.row_strategy, [0.5, 0.5])
        assert np.allclose(solution.col_strategy, [0.5, 0.5])

    def test_two_by_three(self):
        solution = solve([[2, 1, 0], [0, 1, 2]])
        assert solution.value == pytest.approx(1.0)
        assert np.allclose(solution.row_strategy, [0.5, 0.5])
        assert np.allclose(solution.col_strategy, [0.5, 0.0, 0.5])

    def test_dominated_row_gets_zero(self):
        solution = solve([[3, 2], [1, 0], [2, 1]])
        assert solution.row_strategy[2] == 0.0
        assert solution.row_strategy.tolist() == [1.0, 0.0, 0.0]
        assert solution.col_strategy.tolist() == [0.0, 1.0]
        assert solution.value == 2.0

    def test_reduced_then_graphical(self):
        solution = solve([[2, 1, 0], [0, 1, 2], [-1, 0, -1]])
        assert solution.method == 'graphical'
        assert solution.value == pytest.approx(1.0)
        assert np.allclose(solution.row_strategy, [0.5, 0.5, 0.0])
        assert np.allclose(solution.col_strategy, [0.5, 0.0, 0.5])
        assert solution.reduction.removals[0][:2] == (ROWS, 2)

    def test_reduced_to_two_by_two(self):
        solution = solve([[3, 0, 5], [0, 3, 5], [2, 0, 9]])
        assert solution.method == 'graphical'
        assert solution.value == pytest.approx(1.5)
        assert np.allclose(solution.row_strategy, [0.5, 0.5, 0.0])
        assert np.allclose(solution.col_strategy, [0.5, 0.5, 0.0])

    def test_worked_example(self):
        solution = solve([[6, 0, 3], [8, -2, 3], [4, 6, 5]])
        assert solution.method == 'simplex'
        assert solution.value == pytest.approx(14 / 3)
        assert np.allclose(solution.row_strategy, [0.0, 1 / 6, 5 / 6])
        row_gain, col_gain = solution.check_equilibrium()
        assert row_gain <= 1e-9 and col_gain <= 1e-9

    def test_combat(self):
        solution = solve([[0, 2, -1], [-1, 0, 1], [1, -1, 0]])
        assert solution.value == pytest.approx(1 / 12)
        assert np.allclose(solution.row_strategy, [1 / 4, 1 / 3, 5 / 12])
        assert np.allclose(solution.col_strategy, [1 / 3, 1 / 4, 5 / 12])

    def test_scipy_implementation(self):
        solution = solve([[0, 2, -1], [-1, 0, 1], [1, -1, 0]], implementation='scipy')
        assert solution.method == 'scipy'
        assert solution.value == pytest.approx(1 / 12)

    def test_saddle_point_skips_reduction(self):
        solution = solve([[3, 2], [1, 0], [2, 1]])
        assert solution.reduction.removals == []
        assert solution.is_pure

    def test_single_row(self):
        solution = solve([[3, -1, 2]])
        assert solution.value == -1
        assert solution.col_strategy.tolist() == [0.0, 1.0, 0.0]

    def test_without_dominance(self):
        payoffs = [[2, 1, 0], [0, 1, 2], [-1, 0, -1]]
        solution = solve(payoffs, reduce_dominance=False)
        assert solution.reduction.reduced_shape == (3, 3)
        assert solution.value == pytest.approx(1.0)
        assert solution.row_strategy[2] == pytest.approx(0.0)

    def test_accepts_game(self):
        game = ZSGame([[1, -1], [-1, 1]])
        assert solve(game).game is game


# %% solver class


class TestZSGameSolver:

    def test_default_parameters(self):
        solver = ZSGameSolver([[1]])
        assert solver.tol == 1e-9
        assert solver.reduce_dominance is True
        assert solver.implementation == 'simplex'
        assert solver.verbose == 0

    def test_set_parameters(self):
        solver = ZSGameSolver([[1, 2], [3, 4]], parameters={'tol': 1e-6}, verbose=1)
        assert solver.tol == 1e-6
        assert solver.verbose == 1
        assert solver.eps == pytest.approx(4e-6)
        solver.set_parameters(implementation='scipy')
        assert solver.implementation == 'scipy'

    def test_invalid_parameter(self):
        with pytest.raises(ValueError):
            ZSGameSolver([[1]], tolerance=1e-3)
        with pytest.raises(ValueError):
            solve([[1]], ds_max=1)

    def test_solution_stored(self):
        solver = ZSGameSolver([[0, 2, -1], [-1, 0, 1], [1, -1, 0]])
        solution = solver.solve()
        assert solver.solution is solution
        assert solver.reduction is solution.reduction
        assert solver.iterations > 0

    def test_verbose(self, capsys):
        ZSGameSolver([[2, 1, 0], [0, 1, 2], [-1, 0, -1]], verbose=2).solve()
        output = capsys.readouterr().out
        assert 'Solving 3 x 3 zero-sum game' in output
        assert 'row 2 dominated by 0, removed' in output
        assert 'Method: graphical on reduced 2 x 3 game' in output

    def test_silent_by_default(self, capsys):
        solve([[0, 2, -1], [-1, 0, 1], [1, -1, 0]])
        assert capsys.readouterr().out == ''

    def test_inconsistent_solution(self, monkeypatch):
        def broken_graphical(payoffs, eps):
            return np.array([1.0, 0.0]), np.array([1.0, 0.0]), 0.0

        monkeypatch.setattr(zsgamesolver.solver, 'solve_graphical', broken_graphical)
        with pytest.raises(SolverError) as info:
            solve([[1, -1], [-1, 1]])
        assert info.value.reason == 'inconsistent'

    def test_value_outside_security_levels(self, monkeypatch):
        def shifted_graphical(payoffs, eps):
            return np.array([0.5, 0.5]), np.array([0.5, 0.5]), 5.0

        monkeypatch.setattr(zsgamesolver.solver, 'solve_graphical', shifted_graphical)
        with pytest.raises(SolverError):
            solve([[1, -1], [-1, 1]])

    def test_max_pivots_propagates(self):
        with pytest.raises(SolverError) as info:
            solve([[6, 0, 3], [8, -2, 3], [4, 6, 5]], max_pivots=1)
        assert info.value.reason == 'max_pivots'
        assert 'max_pivots' in str(info.value)


# %% run


if __name__ == '__main__':

    test_class = TestScenarios()

    method_names = [method for method in dir(test_class)
                    if callable(getattr(test_class, method))
                    if not method.startswith('__')]
    for method in method_names:
        getattr(test_class, method)()
