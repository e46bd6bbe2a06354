from zsgamesolver.methods._graphical import solve_graphical, plot_envelope
from zsgamesolver.methods._simplex import ZeroSumLP
