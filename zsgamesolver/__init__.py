"""Optimal mixed strategies for finite two-player zero-sum games."""

from zsgamesolver.zsgame import ZSGame, Solution, ShapeError, SolverError
from zsgamesolver.solver import ZSGameSolver, solve
from zsgamesolver import methods
