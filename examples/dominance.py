"""3 x 3 game + dominance: one row is never worth playing, leaving a 2 x 3 game."""


import zsgamesolver
from zsgamesolver.reduction import ROWS

payoff_matrix = [[2, 1, 0],
                 [0, 1, 2],
                 [-1, 0, -1]]

solution = zsgamesolver.solve(payoff_matrix)

for axis, removed, dominated_by, pass_no in solution.reduction.removals:
    kind = 'row' if axis == ROWS else 'column'
    print(f'pass {pass_no}: {kind} {removed} removed (dominated by {kind} {dominated_by})')
print(solution.to_list(decimals=3))
# pass 1: row 2 removed (dominated by row 0)
# [[0.5, 0.5, 0.0], [0.5, 0.0, 0.5], 1.0]
